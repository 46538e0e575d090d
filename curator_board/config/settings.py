from loguru import logger
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Asia/Almaty has no DST, so a fixed offset is exact for the default deployment
DEFAULT_UTC_OFFSET_MINUTES = 5 * 60


class Settings(BaseSettings):
    board_utc_offset_minutes: int = Field(
        default=DEFAULT_UTC_OFFSET_MINUTES,
        validation_alias="BOARD_UTC_OFFSET_MINUTES",
        description="Fixed UTC offset (minutes) used to place due dates on board columns",
    )
    calendar_nav_bound_weeks: int = Field(
        default=52,
        validation_alias="CALENDAR_NAV_BOUND_WEEKS",
        description="How many weeks calendar navigation may move away from the current week",
    )
    app_env: str = Field(default="production", validation_alias="APP_ENV")
    log_level: str = Field(default="INFO", validation_alias="LOG_LEVEL")

    model_config = SettingsConfigDict(
        env_file=".env",
        extra="ignore",
    )

    @property
    def strict_context(self) -> bool:
        """Whether precondition violations raise instead of degrading."""
        return self.app_env.lower() in {"development", "local"}

    @field_validator("board_utc_offset_minutes")
    @classmethod
    def validate_utc_offset(cls, value: int) -> int:
        """Validate that the offset is a real-world UTC offset (UTC-12:00 to UTC+14:00)."""
        if not -720 <= value <= 840:
            raise ValueError(f"BOARD_UTC_OFFSET_MINUTES must be within -720..840, got {value}")
        return value

    @field_validator("calendar_nav_bound_weeks")
    @classmethod
    def validate_nav_bound(cls, value: int) -> int:
        if value < 0:
            raise ValueError(f"CALENDAR_NAV_BOUND_WEEKS must be >= 0, got {value}")
        return value

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, value: str) -> str:
        """Validate that log level is one of the standard logging levels."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        upper_value = value.upper()
        if upper_value not in valid_levels:
            logger.warning(f"Invalid LOG_LEVEL '{value}'. Valid levels are: {', '.join(sorted(valid_levels))}. Defaulting to INFO.")
            return "INFO"
        return upper_value


settings = Settings()
