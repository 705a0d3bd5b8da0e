"""
Environment-aware configuration.
Security keys, token lifetimes, hashing cost, row caps, CORS and env flags.
"""
import os
from dotenv import load_dotenv
from datetime import timedelta

load_dotenv()  # Read .env if present


def _env_flag(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).lower() in ("1", "true", "yes")


def _env_int(name: str):
    value = os.getenv(name)
    return int(value) if value else None


class BaseConfig:
    SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")  # Set a strong key in production
    DEBUG = False
    TESTING = False
    # CORS: in dev we usually allow '*', in prod supply a comma-separated list in env
    CORS_ORIGINS = os.getenv("CORS_ORIGINS", "*")
    APP_ENV = os.getenv("APP_ENV", "dev")
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

    API_PREFIX = os.getenv("API_PREFIX", "/api/v1")
    API_VERSION = "1.0.0"

    DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///boredom-busters.db")
    SQL_ECHO = _env_flag("SQL_ECHO")

    # Access and refresh tokens are signed with different secrets
    JWT_ACCESS_SECRET = os.getenv("JWT_ACCESS_SECRET", os.getenv("JWT_SECRET"))
    JWT_REFRESH_SECRET = os.getenv("JWT_REFRESH_SECRET")
    JWT_ALGORITHM = os.getenv("JWT_ALGORITHM", "HS256")
    JWT_ISSUER = os.getenv("JWT_ISSUER", "boredom-busters-api")
    JWT_ACCESS_TOKEN_EXPIRES = timedelta(seconds=int(os.getenv("JWT_ACCESS_TOKEN_EXPIRES_SECONDS", "900")))
    JWT_REFRESH_TOKEN_EXPIRES = timedelta(seconds=int(os.getenv("JWT_REFRESH_TOKEN_EXPIRES_SECONDS", "604800")))

    # argon2 cost; None keeps the argon2-cffi defaults
    ARGON2_TIME_COST = _env_int("ARGON2_TIME_COST")
    ARGON2_MEMORY_COST = _env_int("ARGON2_MEMORY_COST")
    ARGON2_PARALLELISM = _env_int("ARGON2_PARALLELISM")

    # Positive integer or "unlimited"; unset means no cap
    MAX_ROWS_USERS = os.getenv("MAX_ROWS_USERS")
    MAX_ROWS_ACTIVITIES = os.getenv("MAX_ROWS_ACTIVITIES")


class DevelopmentConfig(BaseConfig):
    DEBUG = True
    LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")
    # In dev, propagate exceptions so our error handler has full context
    PROPAGATE_EXCEPTIONS = True
    JWT_ACCESS_SECRET = BaseConfig.JWT_ACCESS_SECRET or "dev-access-secret-change-me-0123456789"
    JWT_REFRESH_SECRET = BaseConfig.JWT_REFRESH_SECRET or "dev-refresh-secret-change-me-0123456789"


class TestingConfig(BaseConfig):
    TESTING = True
    API_PREFIX = "/api/v1"
    DATABASE_URL = "sqlite://"
    SQL_ECHO = False
    LOG_LEVEL = "WARNING"
    JWT_ACCESS_SECRET = "test-access-secret-0123456789abcdef0123"
    JWT_REFRESH_SECRET = "test-refresh-secret-0123456789abcdef012"
    # Cheapest argon2 parameters so the suite stays fast
    ARGON2_TIME_COST = 1
    ARGON2_MEMORY_COST = 8
    ARGON2_PARALLELISM = 1
    MAX_ROWS_USERS = None
    MAX_ROWS_ACTIVITIES = None


class ProductionConfig(BaseConfig):
    DEBUG = False


def get_config(name: str | None):
    """
    Select config class.
    - If name is provided, choose by name.
    - Else choose based on APP_ENV (dev/test/prod).
    """
    env = (name or os.getenv("APP_ENV", "dev")).lower()
    if env in ["prod", "production"]:
        return ProductionConfig
    if env in ["test", "testing"]:
        return TestingConfig
    return DevelopmentConfig
