"""
Application configuration using Pydantic settings.

Configuration is loaded from environment variables (and an optional .env
file). Loading happens once at startup; any invalid value aborts the
process before the HTTP listener opens.
"""

from functools import lru_cache
from typing import Annotated, Any

from pydantic import Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict

from ..core.cache_control import CacheControlRules

UPLOAD_DRIVERS = ("s3", "mediastore")


class ConfigError(Exception):
    """Raised when configuration is missing or malformed."""
    pass


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Variable names match the field names upper-cased, e.g. BUCKET_NAME.
    """

    # Storage target
    bucket_name: str = Field(
        description="Bucket (S3) or container (MediaStore) receiving the objects"
    )
    s3_region: str = Field(
        description="Region of the object store"
    )

    # S3 client
    s3_is_implicit_auth: bool = Field(
        default=True,
        description="Resolve credentials from the environment/instance profile. "
                    "When false, S3_ENDPOINT and the static keys below are used."
    )
    s3_endpoint: str = Field(
        default="",
        description="Custom endpoint URL, e.g. a local S3 emulator"
    )
    s3_access_key_id: str = Field(
        default="",
        description="Static access key id (explicit auth only)"
    )
    s3_secret_access_key: str = Field(
        default="",
        description="Static secret access key (explicit auth only)"
    )

    upload_driver: str = Field(
        default="s3",
        description='Object store backend: "s3" or "mediastore"'
    )

    # HTTP
    healthcheck_path: str = Field(
        default="/healthcheck",
        description="Path answering GET health checks"
    )
    http_port: int = Field(
        default=80,
        description="Port the HTTP server listens on"
    )

    # Logging
    log_level: str = Field(
        default="debug",
        description="Logging level. Unknown names fall back to debug."
    )

    # NoDecode: the raw string goes to the validator below, so a JSON
    # error is reported as a rule decode error rather than a settings one.
    cache_control_rules: Annotated[CacheControlRules, NoDecode] = Field(
        default_factory=CacheControlRules,
        description='JSON array of rules: [{"ext": ".mp4", "maxAge": 3600}]'
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        arbitrary_types_allowed=True,
    )

    @field_validator("upload_driver")
    @classmethod
    def _check_upload_driver(cls, value: str) -> str:
        if value not in UPLOAD_DRIVERS:
            raise ValueError('invalid UPLOAD_DRIVER, valid options are "s3" and "mediastore"')
        return value

    @field_validator("cache_control_rules", mode="before")
    @classmethod
    def _decode_cache_control_rules(cls, value: Any) -> Any:
        if isinstance(value, str):
            return CacheControlRules.from_json(value)
        if isinstance(value, list):
            return CacheControlRules.from_json_value(value)
        return value

    @property
    def uses_custom_endpoint(self) -> bool:
        """
        Whether the S3 client targets a custom endpoint with static keys.

        Explicit auth means a local/emulated store: TLS is disabled and
        path-style addressing is forced, even when S3_ENDPOINT is empty.
        """
        return not self.s3_is_implicit_auth


def load_settings(**overrides: Any) -> Settings:
    """
    Load settings from the environment.

    Raises:
        ConfigError: a required variable is missing or a value is invalid
    """
    try:
        return Settings(**overrides)
    except ValidationError as e:
        raise ConfigError(_describe_validation_error(e)) from e


def _describe_validation_error(error: ValidationError) -> str:
    problems = []
    for item in error.errors():
        field = ".".join(str(part) for part in item["loc"]).upper() or "settings"
        problems.append(f"{field}: {item['msg']}")
    return "invalid configuration: " + "; ".join(problems)


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Settings don't change during runtime, so they are loaded once per
    process. Tests call get_settings.cache_clear() to reset.
    """
    return load_settings()
