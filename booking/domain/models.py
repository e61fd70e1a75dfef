import datetime as dt
from enum import Enum

from pydantic import BaseModel, ConfigDict, field_validator, model_validator

GRID_MINUTES = 15
GRID_STEP = dt.timedelta(minutes=GRID_MINUTES)


def is_on_grid(value: dt.datetime | dt.time) -> bool:
    """True when ``value`` sits exactly on a 15-minute boundary."""
    return value.minute % GRID_MINUTES == 0 and value.second == 0 and value.microsecond == 0


class AppointmentType(str, Enum):
    """Bookable appointment categories."""

    CHECK_UP = "check_up"
    IMPLANT_CONSULTATION = "implant_consultation"
    URGENT = "urgent"

    @property
    def duration(self) -> dt.timedelta:
        return _DURATIONS[self]

    @property
    def label(self) -> str:
        return _LABELS[self]

    @property
    def slot_count(self) -> int:
        """How many 15-minute grid slots one appointment of this type occupies."""
        return self.duration // GRID_STEP

    @property
    def rank(self) -> int:
        return _DECLARATION_ORDER.index(self)


_DURATIONS: dict[AppointmentType, dt.timedelta] = {
    AppointmentType.CHECK_UP: dt.timedelta(minutes=30),
    AppointmentType.IMPLANT_CONSULTATION: dt.timedelta(minutes=90),
    AppointmentType.URGENT: dt.timedelta(minutes=15),
}

_LABELS: dict[AppointmentType, str] = {
    AppointmentType.CHECK_UP: "Check-up",
    AppointmentType.IMPLANT_CONSULTATION: "Implant Consultation",
    AppointmentType.URGENT: "Urgent Appointment",
}

_DECLARATION_ORDER: tuple[AppointmentType, ...] = tuple(AppointmentType)

# Packing priority used by the optimizer. Kept explicit so that adding a type
# never reorders it silently.
LONGEST_FIRST: tuple[AppointmentType, ...] = (
    AppointmentType.IMPLANT_CONSULTATION,
    AppointmentType.CHECK_UP,
    AppointmentType.URGENT,
)

MENU_ORDER: tuple[AppointmentType, ...] = (
    AppointmentType.URGENT,
    AppointmentType.CHECK_UP,
    AppointmentType.IMPLANT_CONSULTATION,
)


class Appointment(BaseModel):
    """A booked appointment: a grid-aligned start and its type."""

    model_config = ConfigDict(frozen=True)

    start: dt.datetime
    appointment_type: AppointmentType

    @field_validator("start")
    @classmethod
    def _naive_and_on_grid(cls, value: dt.datetime) -> dt.datetime:
        if value.tzinfo is not None:
            raise ValueError("appointment start must be a naive local datetime")
        if not is_on_grid(value):
            raise ValueError(f"appointment start {value} is not on the {GRID_MINUTES}-minute grid")
        return value

    @property
    def end(self) -> dt.datetime:
        return self.start + self.appointment_type.duration

    def to_slots(self) -> list[dt.datetime]:
        """Expand into the grid slots this appointment occupies, ``[start, end)``."""
        slots = []
        current = self.start
        while current < self.end:
            slots.append(current)
            current += GRID_STEP
        return slots

    def overlaps(self, other: "Appointment") -> bool:
        return self.start < other.end and self.end > other.start

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, Appointment):
            return NotImplemented
        return (self.start, self.appointment_type.rank) < (
            other.start,
            other.appointment_type.rank,
        )

    def __str__(self) -> str:
        return f"{self.start:%Y-%m-%d %H:%M} {self.appointment_type.label}"


class WorkingHours(BaseModel):
    """Daily working intervals and working weekdays (0 = Monday)."""

    model_config = ConfigDict(frozen=True)

    intervals: tuple[tuple[dt.time, dt.time], ...] = (
        (dt.time(8, 0), dt.time(12, 0)),
        (dt.time(13, 0), dt.time(17, 0)),
    )
    working_days: frozenset[int] = frozenset(range(5))

    @field_validator("working_days")
    @classmethod
    def _valid_weekdays(cls, value: frozenset[int]) -> frozenset[int]:
        if not value:
            raise ValueError("at least one working day is required")
        invalid = sorted(day for day in value if not 0 <= day <= 6)
        if invalid:
            raise ValueError(f"weekdays must be between 0 (Monday) and 6 (Sunday), got {invalid}")
        return value

    @model_validator(mode="after")
    def _valid_intervals(self) -> "WorkingHours":
        if not self.intervals:
            raise ValueError("at least one working interval is required")

        previous_end: dt.time | None = None
        for start, end in self.intervals:
            if start >= end:
                raise ValueError(f"interval {start}-{end} must start before it ends")
            if not (is_on_grid(start) and is_on_grid(end)):
                raise ValueError(f"interval {start}-{end} is not on the {GRID_MINUTES}-minute grid")
            if previous_end is not None and start < previous_end:
                raise ValueError(f"interval {start}-{end} overlaps or precedes the previous one")
            previous_end = end
        return self

    @property
    def day_start(self) -> dt.time:
        return self.intervals[0][0]
