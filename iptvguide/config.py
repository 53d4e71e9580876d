import logging

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from iptvguide.utils.timezone import get_zone


logger = logging.getLogger(__name__)


class CustomSettings(BaseSettings):
    """Application settings loaded from environment variables.

    Validates configuration at startup to catch misconfiguration early.
    """

    log_level: str = "INFO"
    default_timezone: str = "UTC"
    guide_parse_timeout_sec: int = 120  # XML parsing timeout, 0 disables timeout
    max_schedule_day_offset: int = 7  # Days before/after today the schedule may show

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, value: str) -> str:
        """Validate log level name."""
        normalized = value.upper()
        allowed = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        if normalized not in allowed:
            raise ValueError(f"log_level must be one of {sorted(allowed)}")
        return normalized

    @field_validator("default_timezone")
    @classmethod
    def validate_default_timezone(cls, value: str) -> str:
        """Validate timezone is 'UTC' or a known IANA name."""
        get_zone(value)
        return value

    @field_validator("guide_parse_timeout_sec")
    @classmethod
    def validate_parse_timeout(cls, value: int) -> int:
        """Validate XML parsing timeout (seconds)."""
        if value < 0:
            raise ValueError("guide_parse_timeout_sec must be >= 0")
        return value

    @field_validator("max_schedule_day_offset")
    @classmethod
    def validate_day_offset(cls, value: int, info) -> int:
        """Validate day range value is non-negative and reasonable."""
        if value < 0:
            raise ValueError(f"{info.field_name} must be >= 0")
        if value > 31:
            raise ValueError(f"{info.field_name} must be <= 31 days")
        return value

    def __init__(self, **data):
        """Initialize settings and log configuration."""
        super().__init__(**data)

        logger.info("Configuration loaded:")
        logger.info("  Log Level: %s", self.log_level)
        logger.info("  Default Timezone: %s", self.default_timezone)
        logger.info(
            "  Parse Timeout: %s seconds",
            self.guide_parse_timeout_sec or "disabled",
        )
        logger.info("  Schedule Day Offset Limit: %s days", self.max_schedule_day_offset)


settings = CustomSettings()


def setup_logging() -> None:
    """Configure application logging."""
    logging.basicConfig(
        level=getattr(logging, settings.log_level),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
