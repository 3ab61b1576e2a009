import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.api.routes.auth import router as auth_router
from app.api.routes.vehicles import analytics_router
from app.api.routes.vehicles import router as vehicles_router
from app.core.config import settings
from app.core.logging import configure_logging
from app.db.database import init_db
from app.services.storage import StorageError

configure_logging(settings.log_level)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(_: FastAPI):
    if settings.storage_backend == "database" and settings.database_auto_create:
        init_db()
    logger.info("Starting %s with %s storage", settings.app_name, settings.storage_backend)
    yield

app = FastAPI(title=settings.app_name, lifespan=lifespan)
app.add_middleware(
    CORSMiddleware,
    allow_origins=list(settings.cors_origins),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.include_router(auth_router)
app.include_router(vehicles_router)
app.include_router(analytics_router)


@app.exception_handler(StorageError)
async def storage_error_handler(request: Request, exc: StorageError):
    logger.error("Storage failure on %s %s", request.method, request.url.path, exc_info=exc)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "Storage failure"},
    )


@app.get("/health", tags=["System"])
def health_check():
    return {"status": "ok"}
