"""Application settings loaded from the environment.

Settings are built once at startup (see ``get_settings``) and handed to the export
context. Nothing reads them from module state.
"""

from datetime import timedelta
from typing import Literal, Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import AliasChoices, Field, ValidationError, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from auditvault.core.exceptions import ConfigurationError


class Settings(BaseSettings):
    """Exporter settings.

    Required: GITHUB_TOKEN, GITHUB_ORG, and BUCKET_NAME / BOOKMARK_TABLE whenever the
    S3 / DynamoDB backends are selected (the default).
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        env_ignore_empty=True,
        extra="ignore",
    )

    # Source
    GITHUB_TOKEN: str = Field(..., min_length=1)
    GITHUB_ORG: str = Field(..., min_length=1)
    GITHUB_API_URL: str = Field(default="https://api.github.com")
    HTTP_TIMEOUT_SECONDS: float = Field(default=30.0, gt=0)

    # Audit query tuning
    AUDIT_LOG_OPTION_INCLUDE: Literal["web", "git", "all"] = Field(default="web")
    AUDIT_LOG_OPTION_ORDER: Literal["asc", "desc"] = Field(default="desc")
    AUDIT_LOG_OPTION_PER_PAGE: int = Field(default=30, ge=1, le=100)
    # The misspelled name is what existing deployments set
    AUDIT_LOG_OPTION_PHRASE: str = Field(
        default="",
        validation_alias=AliasChoices("AUDIT_LOG_OPTION_PHRASE", "AUDIT_LOG_OPTION_PRHASE"),
    )

    # Destination
    ARCHIVE_BACKEND: Literal["s3", "filesystem"] = Field(default="s3")
    BUCKET_NAME: Optional[str] = Field(default=None)
    FOLDER_PREFIX: str = Field(default="Github/Audit")

    # Checkpoints
    CHECKPOINT_BACKEND: Literal["dynamodb", "filesystem"] = Field(default="dynamodb")
    BOOKMARK_TABLE: Optional[str] = Field(default=None)
    CHECKPOINT_LOOKBACK_DAYS: int = Field(default=0, ge=0)

    # Windowing
    EXPORT_WINDOW_MINUTES: int = Field(default=60, ge=1)
    TIME_ZONE: str = Field(default="UTC")

    # AWS
    AWS_REGION: str = Field(default="us-east-1")
    AWS_ENDPOINT_URL: Optional[str] = Field(default=None)

    # Local development
    LOCAL_STORAGE_PATH: str = Field(default="./local_storage")

    LOG_LEVEL: str = Field(default="INFO")

    @field_validator("TIME_ZONE")
    @classmethod
    def _validate_time_zone(cls, v: str) -> str:
        if not v:
            return "UTC"
        try:
            ZoneInfo(v)
        except (ZoneInfoNotFoundError, ValueError) as e:
            raise ValueError(f"could not set timezone: {v}") from e
        return v

    @field_validator("FOLDER_PREFIX")
    @classmethod
    def _normalize_prefix(cls, v: str) -> str:
        return v.strip("/") or "Github/Audit"

    @model_validator(mode="after")
    def _require_backend_settings(self) -> "Settings":
        if self.ARCHIVE_BACKEND == "s3" and not self.BUCKET_NAME:
            raise ValueError("BUCKET_NAME is required when ARCHIVE_BACKEND is 's3'")
        if self.CHECKPOINT_BACKEND == "dynamodb" and not self.BOOKMARK_TABLE:
            raise ValueError("BOOKMARK_TABLE is required when CHECKPOINT_BACKEND is 'dynamodb'")
        return self

    @property
    def tz(self) -> ZoneInfo:
        """Time zone used for partition dates and archive keys."""
        return ZoneInfo(self.TIME_ZONE)

    @property
    def window_duration(self) -> timedelta:
        """Length of one export window."""
        return timedelta(minutes=self.EXPORT_WINDOW_MINUTES)


def get_settings(**overrides) -> Settings:
    """Load settings from the environment.

    Raises:
        ConfigurationError: If a required value is missing or a value is invalid.
    """
    try:
        return Settings(**overrides)
    except ValidationError as e:
        raise ConfigurationError(f"Invalid configuration: {e}") from e
