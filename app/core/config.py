import os
from dataclasses import dataclass

from dotenv import load_dotenv

load_dotenv()


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


def _env_int(name: str, default: int, min_value: int | None = None) -> int:
    raw = os.getenv(name)
    if raw is None:
        value = default
    else:
        try:
            value = int(raw)
        except ValueError:
            value = default
    if min_value is not None:
        return max(min_value, value)
    return value


def _env_choice(name: str, default: str, choices: set[str]) -> str:
    value = os.getenv(name, default).strip().lower()
    if value not in choices:
        return default
    return value


@dataclass(frozen=True)
class Settings:
    app_name: str
    secret_key: str
    algorithm: str
    access_token_expire_minutes: int
    issuer: str
    cors_origins: tuple[str, ...]
    database_url: str
    database_auto_create: bool
    storage_backend: str
    log_level: str


settings = Settings(
    app_name=os.getenv("APP_NAME", "Dealership Inventory API"),
    secret_key=os.getenv("SECRET_KEY", "CHANGE_ME_IN_PRODUCTION_32_CHAR_MIN_SECRET_KEY"),
    algorithm=os.getenv("ALGORITHM", "HS256"),
    access_token_expire_minutes=_env_int("ACCESS_TOKEN_EXPIRE_MINUTES", 60 * 24, min_value=1),
    issuer=os.getenv("TOKEN_ISSUER", "dealership-api"),
    cors_origins=tuple(
        origin.strip().rstrip("/")
        for origin in os.getenv("CORS_ORIGINS", os.getenv("FRONTEND_BASE_URL", "http://localhost:5173")).split(",")
        if origin.strip()
    ),
    database_url=os.getenv("DATABASE_URL", "sqlite:///./dealership.db"),
    database_auto_create=_env_bool("DATABASE_AUTO_CREATE", True),
    storage_backend=_env_choice("STORAGE_BACKEND", "database", {"database", "memory"}),
    log_level=os.getenv("LOG_LEVEL", "INFO").strip().upper(),
)
