"""Application settings using Pydantic Settings."""

import sys
from typing import List
from pydantic import Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


def parse_comma_separated_list(v):
    """Parse comma-separated string into list."""
    if isinstance(v, str):
        return [item.strip() for item in v.split(",") if item.strip()]
    if isinstance(v, list):
        return v
    return []


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_name: str = Field(default="Multipart Upload Broker", alias="APP_NAME")
    app_version: str = Field(default="1.0.0", alias="APP_VERSION")
    debug: bool = Field(default=False, alias="DEBUG")
    host: str = Field(default="0.0.0.0", alias="HOST")
    port: int = Field(default=8080, alias="PORT")

    # Storage
    storage_provider: str = Field(default="s3", alias="STORAGE_PROVIDER")
    aws_region: str = Field(..., alias="AWS_REGION")
    s3_bucket: str = Field(..., alias="S3_BUCKET")
    s3_endpoint_url: str = Field(default="", alias="S3_ENDPOINT_URL")
    # Empty credentials fall through to the boto3 credential chain
    aws_access_key_id: str = Field(default="", alias="AWS_ACCESS_KEY_ID")
    aws_secret_access_key: str = Field(default="", alias="AWS_SECRET_ACCESS_KEY")

    # Multipart uploads
    presign_expiration_seconds: int = Field(
        default=120, gt=0, alias="PRESIGN_EXPIRATION_SECONDS"
    )
    randomize_object_keys: bool = Field(default=True, alias="RANDOMIZE_OBJECT_KEYS")
    object_key_prefix_length: int = Field(
        default=5, ge=1, le=32, alias="OBJECT_KEY_PREFIX_LENGTH"
    )

    # CORS (stored as string, parsed via property)
    allowed_origins_str: str = Field(
        default="*",
        alias="ALLOWED_ORIGINS",
        exclude=True,
    )

    @property
    def allowed_origins(self) -> List[str]:
        """Parse allowed origins from comma-separated string."""
        return parse_comma_separated_list(self.allowed_origins_str)

    # Rate Limiting
    rate_limit_enabled: bool = Field(default=True, alias="RATE_LIMIT_ENABLED")
    rate_limit_per_minute: int = Field(default=60, gt=0, alias="RATE_LIMIT_PER_MINUTE")

    # Logging
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")

    @field_validator("aws_region", "s3_bucket")
    @classmethod
    def require_non_empty(cls, v: str) -> str:
        """Reject blank region or bucket values."""
        if not v.strip():
            raise ValueError("must not be empty")
        return v.strip()

    @field_validator("storage_provider")
    @classmethod
    def normalize_provider(cls, v: str) -> str:
        """Lower-case the provider name."""
        return v.strip().lower()


def load_settings() -> Settings:
    """
    Load settings from the environment.
    Invalid configuration is fatal: the process exits before serving.
    """
    try:
        return Settings()
    except ValidationError as exc:
        sys.stderr.write(f"Invalid configuration:\n{exc}\n")
        raise SystemExit(1) from exc


# Global settings instance
settings = load_settings()
