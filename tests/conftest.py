import datetime as dt
import random

import pytest

from booking.scheduling.service import CalendarService
from booking.scheduling.store import DoctorsCalendar
from booking.scheduling.timegrid import TimeGrid

# Thursday, 1 February 2024.
NOW = dt.datetime(2024, 2, 1, 7, 10)


@pytest.fixture
def grid() -> TimeGrid:
    return TimeGrid()


@pytest.fixture
def calendar() -> DoctorsCalendar:
    return DoctorsCalendar(clock=lambda: NOW)


@pytest.fixture
def service(calendar: DoctorsCalendar) -> CalendarService:
    return CalendarService(calendar, rng=random.Random(1234))
