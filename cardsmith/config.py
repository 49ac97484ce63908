from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment."""

    model_config = SettingsConfigDict(env_file=".env")

    app_name: str = "CardSmith"
    debug: bool = False
    log_level: str = "INFO"

    database_url: str = "sqlite+aiosqlite:///./cardsmith.db"

    # "local" keeps images on disk, "database" stores them in the blobs table
    blob_backend: Literal["local", "database"] = "local"
    blob_dir: str = "./uploads"
    max_upload_bytes: int = 5 * 1024 * 1024

    # Unreferenced blobs younger than this are kept by the prune job
    prune_min_age_seconds: int = 3600

    cors_origins: list[str] = ["http://localhost:3000"]

    # Used by the HTTP client when no base URL is given
    api_base_url: str = "http://localhost:8000"


settings = Settings()


# =============================================================================
# CARD LIMITS
# =============================================================================

MAX_NAME_LENGTH = 100
MAX_STAT_VALUE = 999

# Largest value an INTEGER primary key can hold
MAX_RECORD_ID = 2**63 - 1
