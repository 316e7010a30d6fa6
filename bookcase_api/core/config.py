import os

from dotenv import load_dotenv


load_dotenv()


def _get_list(value: str | None, default: list[str]) -> list[str]:
    if value is None:
        return default
    return [item.strip() for item in value.split(",") if item.strip()]

APP_ENV = os.getenv("APP_ENV", "development")
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./bookcase.db")

CORS_ORIGINS = _get_list(os.getenv("CORS_ORIGINS"), ["http://localhost:4200"])

# No default: tokens cannot be signed until a key is provided.
JWT_SECRET_KEY = os.getenv("JWT_SECRET_KEY")
JWT_ISSUER = os.getenv("JWT_ISSUER", "bookcase-api")
JWT_AUDIENCE = os.getenv("JWT_AUDIENCE", "bookcase-clients")
JWT_ALGORITHM = os.getenv("JWT_ALGORITHM", "HS256")
JWT_EXPIRES_MINUTES = int(os.getenv("JWT_EXPIRES_MINUTES", "60"))

ADMIN_ROLE = "Admin"
USER_ROLE = "User"


def validate_runtime_config() -> None:
    if APP_ENV.lower() == "production" and not JWT_SECRET_KEY:
        raise RuntimeError("JWT_SECRET_KEY must be set in production.")
