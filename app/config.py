"""
Configuration module for the transient paste service.
Loads environment variables and provides config objects.
"""
import os
from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()


def _flag(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() in ("true", "1", "yes")


class Settings:
    """Application settings loaded from environment variables."""

    REDIS_URL: str = os.getenv("REDIS_URL", "redis://localhost:6379")
    REDIS_NAMESPACE: str = os.getenv("REDIS_NAMESPACE", "pastes")
    DEBUG: bool = _flag("DEBUG", "True")
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()
    TEST_MODE: bool = _flag("TEST_MODE", "0")

    LIST_LIMIT: int = int(os.getenv("LIST_LIMIT", "20"))
    ID_MAX_ATTEMPTS: int = int(os.getenv("ID_MAX_ATTEMPTS", "5"))
    SWEEP_ON_REQUEST: bool = _flag("SWEEP_ON_REQUEST", "1")


settings = Settings()
