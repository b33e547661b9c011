# config.py
# Process configuration, read from the environment (and a local .env file).
#
# The HMAC secret is never embedded in code: SYNTHETICS_SCRIPT_SECRET must be
# provided by whatever manages secrets for the deployment.

from typing import Optional

from pydantic import Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class ConfigError(Exception):
    """Raised when a required setting is missing or invalid."""


class Settings(BaseSettings):
    """Settings bound to their environment variable names."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_ignore_empty=True,
        extra="ignore",
        case_sensitive=False,
    )

    api_key: str = Field(..., min_length=1, validation_alias="NEW_RELIC_API_KEY")
    script_secret: str = Field(..., min_length=1, validation_alias="SYNTHETICS_SCRIPT_SECRET")
    region: str = Field(default="US", validation_alias="NEW_RELIC_REGION")
    base_url: Optional[str] = Field(default=None, validation_alias="NEW_RELIC_SYNTHETICS_URL")
    verify_on_read: bool = Field(default=False, validation_alias="SYNTHETICS_VERIFY_ON_READ")
    bind_location_name: bool = Field(default=False, validation_alias="SYNTHETICS_BIND_LOCATION_NAME")
    log_level: str = Field(default="INFO", validation_alias="LOG_LEVEL")

    @field_validator("region")
    @classmethod
    def _known_region(cls, value: str) -> str:
        value = value.upper()
        if value not in ("US", "EU"):
            raise ValueError(f"region must be US or EU, got '{value}'")
        return value

    @property
    def secret(self) -> bytes:
        return self.script_secret.encode("utf-8")

    @classmethod
    def from_env(cls) -> "Settings":
        try:
            return cls()
        except ValidationError as exc:
            problems = "; ".join(
                f"{'.'.join(str(part) for part in error['loc'])}: {error['msg']}"
                for error in exc.errors()
            )
            raise ConfigError(f"Invalid configuration: {problems}") from exc
