# passwordless_store/settings.py
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field, field_validator
from typing import Optional
import logging
from pathlib import Path

# Configure logging for settings module
logger = logging.getLogger(__name__)
if not logging.getLogger().hasHandlers():
    logging.basicConfig(
        level=logging.INFO,
        format='%(asctime)s %(name)s - [%(levelname)s] - %(message)s'
    )

# This settings.py file is at <project>/passwordless_store/settings.py
# Two .parent calls get to the project root directory
PROJECT_ROOT = Path(__file__).parent.parent.resolve()
DOTENV_PATH = PROJECT_ROOT / ".env"

LOG_LEVELS = ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG")

if DOTENV_PATH.exists():
    logger.debug(f".env file found at: {DOTENV_PATH}")
else:
    logger.debug(f".env file not found at: {DOTENV_PATH}. Relying on OS env vars or defaults.")


class Settings(BaseSettings):
    """Application settings with environment variable support."""

    app_name: str = "Passwordless Store"
    debug_mode: bool = False
    log_level: str = "INFO"

    # Which object storage backend holds the token records: s3, sqlite or memory
    storage_backend: str = "s3"

    # S3 configuration
    s3_bucket: Optional[str] = Field(
        default=None,
        description="Bucket holding token records. Mandatory for the s3 backend."
    )
    s3_region: Optional[str] = None
    s3_endpoint_url: Optional[str] = Field(
        default=None,
        description="Endpoint override for S3-compatible services (MinIO, localstack)."
    )
    s3_profile: Optional[str] = None
    s3_list_page_size: Optional[int] = Field(default=None, gt=0)

    # SQLite configuration
    sqlite_db_path: str = "./passwordless_store.sqlite3"

    # Maximum number of objects removed by a single batch delete request
    delete_batch_cap: int = Field(default=1000, gt=0)

    # Token lifetime used by the CLI when none is given (15 minutes)
    default_token_ttl_ms: int = Field(default=15 * 60 * 1000, gt=0)

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, value: str) -> str:
        level = value.upper()
        if level not in LOG_LEVELS:
            raise ValueError(f"log_level must be one of {', '.join(LOG_LEVELS)}, got '{value}'")
        return level

    model_config = SettingsConfigDict(
        env_file=DOTENV_PATH if DOTENV_PATH.exists() else None,
        extra="ignore",
        env_file_encoding='utf-8'
    )


def configure_package_logging(app_settings: "Settings") -> None:
    """Apply the configured log level to the package logger."""
    effective_level = logging.DEBUG if app_settings.debug_mode else app_settings.log_level
    logging.getLogger("passwordless_store").setLevel(effective_level)


# Initialize settings instance
settings = Settings()
configure_package_logging(settings)

logger.debug(
    f"Settings loaded: storage_backend='{settings.storage_backend}', "
    f"s3_bucket={'set' if settings.s3_bucket else 'None'}, "
    f"delete_batch_cap={settings.delete_batch_cap}, debug_mode={settings.debug_mode}"
)
