import logging
import os

logger = logging.getLogger("files-manager")


def _int_env(key: str, default: int, min_value: int = 1) -> int:
    try:
        return max(min_value, int(os.getenv(key, str(default))))
    except (TypeError, ValueError):
        logger.warning("Invalid value for %s: %s. Using default: %d", key, os.getenv(key), default)
        return default


def _bool_env(key: str, default: bool = False) -> bool:
    return os.getenv(key, str(default)).lower() in ("1", "true", "yes")


def _widths_env(key: str, default: str) -> tuple:
    raw = os.getenv(key, default)
    try:
        return tuple(int(part) for part in raw.split(",") if part.strip())
    except ValueError:
        logger.warning("Invalid value for %s: %s. Using default: %s", key, raw, default)
        return tuple(int(part) for part in default.split(","))


class Settings:
    DATABASE_URL: str = os.getenv("DATABASE_URL", "sqlite+aiosqlite:///./files_manager.db")
    DB_ECHO: bool = _bool_env("DB_ECHO")
    REDIS_URL: str = os.getenv("REDIS_URL", "redis://localhost:6379/0")
    SESSION_TTL_SECONDS: int = _int_env("SESSION_TTL_SECONDS", 60 * 60 * 24)
    FOLDER_PATH: str = os.getenv("FOLDER_PATH", "/tmp/files_manager")
    STORAGE_BACKEND: str = os.getenv("STORAGE_BACKEND", "local").lower()
    MINIO_ENDPOINT: str = os.getenv("MINIO_ENDPOINT", "localhost:9000")
    MINIO_ACCESS_KEY: str = os.getenv("MINIO_ACCESS_KEY", "minioadmin")
    MINIO_SECRET_KEY: str = os.getenv("MINIO_SECRET_KEY", "minioadmin")
    MINIO_BUCKET: str = os.getenv("MINIO_BUCKET", "files-manager")
    MINIO_SECURE: bool = _bool_env("MINIO_SECURE")
    PAGE_SIZE: int = _int_env("PAGE_SIZE", 20)
    THUMBNAIL_WIDTHS: tuple = _widths_env("THUMBNAIL_WIDTHS", "500,250,100")
    PORT: int = _int_env("PORT", 5000)
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()

settings = Settings()
