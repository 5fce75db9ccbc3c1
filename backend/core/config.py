import os

from dotenv import load_dotenv

from backend.core.errors import ConfigurationError


load_dotenv()


def _get_bool(value: str | None, default: bool = False) -> bool:
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _get_list(value: str | None, default: list[str]) -> list[str]:
    if value is None:
        return default
    return [item.strip() for item in value.split(",") if item.strip()]

APP_ENV = os.getenv("APP_ENV", "development")


DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./clinic.db")
DB_POOL_SIZE = int(os.getenv("DB_POOL_SIZE", "10"))
DB_ECHO = _get_bool(os.getenv("DB_ECHO"), default=False)

JWT_SECRET_KEY = os.getenv("JWT_SECRET_KEY", "change-me")
JWT_ALGORITHM = os.getenv("JWT_ALGORITHM", "HS256")
JWT_EXPIRES_MINUTES = int(os.getenv("JWT_EXPIRES_MINUTES", "60"))

CORS_ALLOWED_ORIGINS = _get_list(os.getenv("CORS_ALLOWED_ORIGINS"), ["http://localhost:3000"])

ADMIN_ROLE = os.getenv("ADMIN_ROLE", "admin")
DEFAULT_ROLE = os.getenv("DEFAULT_ROLE", "patient")

HOST = os.getenv("HOST", "0.0.0.0")
PORT = int(os.getenv("PORT", "8000"))
RELOAD = _get_bool(os.getenv("RELOAD"), default=False)


def get_jwt_secret() -> str:
    if not JWT_SECRET_KEY or not JWT_SECRET_KEY.strip():
        raise ConfigurationError("JWT_SECRET_KEY is not configured.")
    return JWT_SECRET_KEY


def validate_runtime_config() -> None:
    get_jwt_secret()
    if APP_ENV.lower() == "production" and JWT_SECRET_KEY == "change-me":
        raise ConfigurationError("JWT_SECRET_KEY must be set in production.")
