import datetime as dt
from abc import ABC, abstractmethod
from collections.abc import Sequence
from typing import Protocol, TypeVar

from booking.domain.models import Appointment, AppointmentType

T = TypeVar("T")


class Clock(Protocol):
    """Source of the current local time, used for default query windows."""

    def __call__(self) -> dt.datetime: ...


class RandomSource(Protocol):
    """Random selection used by the random filler. ``random.Random`` fits."""

    def choice(self, seq: Sequence[T]) -> T: ...


class AbstractCalendarService(ABC):
    """Abstract base class for the operations offered on a doctor's calendar."""

    @abstractmethod
    def book(self, start: dt.datetime, appointment_type: AppointmentType) -> Appointment:
        """Book an appointment.

        Args:
            start: Grid-aligned naive start of the appointment.
            appointment_type: The kind of appointment to book.

        Returns:
            The stored appointment.

        Raises:
            InvalidAppointmentError: If ``start`` is off the grid or timezone-aware.
            OutsideWorkingHoursError: If the appointment touches non-working time.
            OverlapError: If the appointment intersects an existing one.
        """

    @abstractmethod
    def booked_appointments(
        self, start: dt.datetime | None = None, end: dt.datetime | None = None
    ) -> list[Appointment]:
        """List appointments starting within ``[start, end]``, ascending.

        Either bound may be None to leave that side open.
        """

    @abstractmethod
    def free_slots(
        self,
        start: dt.datetime | None,
        end: dt.datetime | None,
        appointment_type: AppointmentType,
    ) -> list[dt.datetime]:
        """Every start time at which ``appointment_type`` could be booked.

        Args:
            start: Beginning of the window, or None for the next quarter mark.
            end: Last candidate start, or None for the end of the working week.
            appointment_type: The kind of appointment to fit.

        Returns:
            Candidate start times, ascending. Empty when nothing fits.
        """

    @abstractmethod
    def free_slots_optimized(
        self,
        start: dt.datetime | None,
        end: dt.datetime | None,
        appointment_type: AppointmentType,
    ) -> list[dt.datetime]:
        """At most one candidate per clock hour, chosen to keep room for long appointments."""

    @abstractmethod
    def fill_random(
        self,
        start: dt.datetime,
        end: dt.datetime,
        appointment_type: AppointmentType,
        target_percent: int,
    ) -> list[Appointment]:
        """Book random free slots until ``target_percent`` of the window is occupied.

        Returns:
            The appointments booked by this call, in booking order.

        Raises:
            ValueError: If ``target_percent`` is outside 1..100.
            CalendarConsistencyError: If a searched slot cannot be booked.
        """
