"""Calendar generator configuration loaded from environment variables."""

from datetime import timedelta

from pydantic import Field
from pydantic_settings import BaseSettings

from rotation_calendar.ical import CalendarOptions


class CalendarConfig(BaseSettings):
    """Calendar generator configuration loaded from environment variables.

    Settings are loaded from ROTATION_* environment variables with sensible
    defaults. For local development, create a .env file in the project root.
    """

    # Input resources (a directory, or an http(s) base URL)
    data_source: str = Field(
        default="data",
        description="Directory or base URL holding the schedule data files",
    )
    calendar_file: str = Field(
        default="calendar.csv",
        description="School calendar CSV (one row per school day)",
    )
    rotation_file: str = Field(
        default="rotation.json",
        description="Lessons per grade per rotation day",
    )
    times_file: str = Field(
        default="times.json",
        description="Lesson times per grade per weekday",
    )
    lessons_file: str = Field(
        default="lessons.json",
        description="Prompt text per lesson id",
    )
    grade: str = Field(
        default="dp",
        description="Grade to generate the calendar for (pyp, myp, dp)",
    )

    # Fetching
    fetch_timeout: float = Field(
        default=10.0,
        description="Seconds to wait for each HTTP resource",
    )
    fetch_attempts: int = Field(
        default=1,
        ge=1,
        description="Attempts per HTTP resource on transient failures",
    )

    # Output
    output_dir: str = Field(
        default=".",
        description="Directory the calendar.ics file is written to",
    )
    calendar_name: str = Field(default="Lesson Rotation")
    product_id: str = Field(default="-//Rotation Calendar//Lesson Rotation Generator//EN")
    uid_domain: str = Field(default="rotation-calendar.local")
    timezone_id: str = Field(default="Asia/Hong_Kong")
    timezone_name: str = Field(default="HKT")
    utc_offset_minutes: int = Field(
        default=480,
        ge=-720,
        le=840,
        description="Fixed UTC offset of the declared timezone, in minutes",
    )

    # Logging
    log_json: bool = Field(
        default=False,
        description="Output logs in JSON format (for production)",
    )
    log_level: str = Field(
        default="INFO",
        description="Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)",
    )

    model_config = {
        "env_prefix": "ROTATION_",
        "case_sensitive": False,
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",
    }

    def calendar_options(self) -> CalendarOptions:
        """Serializer options derived from this configuration."""
        return CalendarOptions(
            name=self.calendar_name,
            product_id=self.product_id,
            uid_domain=self.uid_domain,
            timezone_id=self.timezone_id,
            timezone_name=self.timezone_name,
            utc_offset=timedelta(minutes=self.utc_offset_minutes),
        )


# Singleton pattern
_config: CalendarConfig | None = None


def get_config() -> CalendarConfig:
    """Get the calendar configuration singleton.

    Returns:
        CalendarConfig: Calendar configuration instance
    """
    global _config
    if _config is None:
        _config = CalendarConfig()
    return _config
