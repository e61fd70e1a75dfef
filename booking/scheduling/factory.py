import random

from loguru import logger

from booking.config import AppConfig
from booking.scheduling.ports import Clock
from booking.scheduling.service import CalendarService
from booking.scheduling.store import DoctorsCalendar


def build_calendar_service(config: AppConfig, clock: Clock | None = None) -> CalendarService:
    """Build an empty calendar service from config."""
    hours = config.schedule.working_hours()
    logger.info(
        "Building calendar service: intervals={}, working_days={}, seed={}",
        [f"{start:%H:%M}-{end:%H:%M}" for start, end in hours.intervals],
        sorted(hours.working_days),
        config.random_seed,
    )
    calendar = DoctorsCalendar(hours=hours, clock=clock)
    return CalendarService(calendar, rng=random.Random(config.random_seed))
