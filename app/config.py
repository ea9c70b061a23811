import logging
from typing import Optional
import pytz
from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from functools import lru_cache


class Settings(BaseSettings):
    """
    NOC Registry configuration
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    # ==============================================
    # APPLICATION
    # ==============================================
    app_name: str = "NOC Registration API"
    environment: str = "development"
    debug: bool = False
    port: int = 5000

    # ==============================================
    # DATABASE
    # ==============================================
    database_url: str = "sqlite:///./noc.db"

    # ==============================================
    # REGISTRATION
    # ==============================================
    registration_mode: str = "sync"  # "sync" or "fast_ack"
    public_base_url: Optional[str] = None  # overrides scheme://host in QR links
    certificate_timezone: str = "UTC"

    # ==============================================
    # FILES AND IMAGES
    # ==============================================
    upload_dir: str = "./uploads"
    max_image_size_mb: int = 5

    # ==============================================
    # STORAGE
    # ==============================================
    storage_type: str = "local"  # "local" or "s3"
    aws_access_key_id: Optional[str] = None
    aws_secret_access_key: Optional[str] = None
    s3_bucket_name: Optional[str] = None
    s3_region: str = "us-east-1"
    s3_public_base_url: Optional[str] = None

    # ==============================================
    # CORS
    # ==============================================
    allowed_origins: list = ["*"]

    # ==============================================
    # LOGS
    # ==============================================
    log_level: str = "INFO"

    @field_validator("database_url")
    @classmethod
    def normalize_postgres_scheme(cls, v):
        # Hosted Postgres providers still hand out postgres:// URLs
        if v.startswith("postgres://"):
            v = v.replace("postgres://", "postgresql://", 1)
        return v

    @field_validator("storage_type", "registration_mode")
    @classmethod
    def lowercase(cls, v):
        return v.strip().lower()

    @property
    def max_image_size_bytes(self) -> int:
        return self.max_image_size_mb * 1024 * 1024

    @property
    def use_s3(self) -> bool:
        return self.storage_type == "s3"


@lru_cache()
def get_settings() -> Settings:
    """
    Singleton accessor for settings
    """
    return Settings()


def validate_settings(current: Settings = None) -> None:
    """
    Checks the settings that would otherwise fail on the first request.
    """
    current = current or get_settings()
    logger = logging.getLogger(__name__)

    if current.storage_type not in ("local", "s3"):
        raise ValueError(f"Unknown STORAGE_TYPE: {current.storage_type}")

    if current.registration_mode not in ("sync", "fast_ack"):
        raise ValueError(f"Unknown REGISTRATION_MODE: {current.registration_mode}")

    if current.use_s3 and not current.s3_bucket_name:
        raise ValueError("S3_BUCKET_NAME is required when STORAGE_TYPE=s3")

    try:
        pytz.timezone(current.certificate_timezone)
    except pytz.UnknownTimeZoneError:
        raise ValueError(f"Unknown CERTIFICATE_TIMEZONE: {current.certificate_timezone}")

    if current.registration_mode == "fast_ack":
        logger.warning("⚠️ REGISTRATION_MODE=fast_ack: asset generation failures are only logged")

    logger.info(f"✅ Storage: {current.storage_type} | Registration mode: {current.registration_mode}")


# Global instance
settings = get_settings()
