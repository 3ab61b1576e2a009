import os

os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("DATABASE_AUTO_CREATE", "false")
os.environ.setdefault("STORAGE_BACKEND", "database")
os.environ.setdefault("SECRET_KEY", "test-secret-key-with-at-least-32-characters")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

import app.models  # noqa: F401
from app.api.deps import get_storage
from app.db.database import Base, get_db
from app.main import app
from app.services.memory_storage import MemoryStorage
from app.services.storage import DatabaseStorage

DEFAULT_PASSWORD = "correct-horse-battery"


@pytest.fixture()
def db_session():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    TestingSession = sessionmaker(bind=engine, autoflush=False, autocommit=False)
    session = TestingSession()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture(params=["database", "memory"])
def storage(request, db_session):
    """Each storage test runs against both record store backends."""
    if request.param == "memory":
        return MemoryStorage()
    return DatabaseStorage(db_session)


@pytest.fixture()
def client(db_session):
    def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


@pytest.fixture()
def memory_client():
    memory = MemoryStorage()
    app.dependency_overrides[get_storage] = lambda: memory
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


def register(client: TestClient, email: str, password: str = DEFAULT_PASSWORD) -> dict:
    response = client.post(
        "/auth/register",
        json={"email": email, "password": password, "firstName": "Test", "lastName": "Owner"},
    )
    assert response.status_code == 201, response.text
    return response.json()


def auth_headers(client: TestClient, email: str) -> dict[str, str]:
    token = register(client, email)["access_token"]
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture()
def headers_for():
    return auth_headers
