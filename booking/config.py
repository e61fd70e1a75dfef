import datetime as dt

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from booking.domain.models import WorkingHours

_DEFAULT_HOURS = WorkingHours()


class ScheduleConfig(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="SCHEDULE_", env_file=".env", extra="ignore")

    intervals: list[tuple[dt.time, dt.time]] = Field(
        default_factory=lambda: list(_DEFAULT_HOURS.intervals)
    )
    working_days: list[int] = Field(default_factory=lambda: sorted(_DEFAULT_HOURS.working_days))

    def working_hours(self) -> WorkingHours:
        """Validate the configured schedule into a WorkingHours value."""
        return WorkingHours(intervals=tuple(self.intervals), working_days=frozenset(self.working_days))


class AppConfig(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="BOOKING_", env_file=".env", extra="ignore")

    log_level: str = "WARNING"
    random_seed: int | None = None
    schedule: ScheduleConfig = Field(default_factory=lambda: ScheduleConfig())
