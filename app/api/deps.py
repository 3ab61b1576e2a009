from fastapi import Depends, HTTPException, Request, status
from fastapi.security import OAuth2PasswordBearer
from jose import JWTError
from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.security import decode_token
from app.db.database import get_db
from app.models.user import User
from app.services.memory_storage import MemoryStorage
from app.services.storage import DatabaseStorage, Storage

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/auth/token", auto_error=False)

_memory_storage: MemoryStorage | None = None


def get_memory_storage() -> MemoryStorage:
    global _memory_storage  # noqa: PLW0603
    if _memory_storage is None:
        _memory_storage = MemoryStorage()
    return _memory_storage


def get_storage(db: Session = Depends(get_db)) -> Storage:
    if settings.storage_backend == "memory":
        return get_memory_storage()
    return DatabaseStorage(db)


def _clean_candidate(value: str | None) -> str | None:
    if not value:
        return None
    cleaned = value.strip().strip("\"'").strip()
    if cleaned.lower().startswith("bearer "):
        cleaned = cleaned[7:].strip()
    return cleaned or None


def get_current_user(
    request: Request,
    token: str | None = Depends(oauth2_scheme),
    storage: Storage = Depends(get_storage),
) -> User:
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Invalid authentication credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )

    raw_token = _clean_candidate(token) or _clean_candidate(request.cookies.get("access_token"))
    if not raw_token:
        raise credentials_exception

    try:
        payload = decode_token(raw_token)
    except JWTError:
        raise credentials_exception from None

    subject = payload.get("sub")
    if subject is None or payload.get("type") != "access":
        raise credentials_exception
    try:
        user_id = int(subject)
    except (TypeError, ValueError):
        raise credentials_exception from None

    user = storage.get_user(user_id)
    if not user:
        raise credentials_exception
    return user
