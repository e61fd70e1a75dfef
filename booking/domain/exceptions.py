from booking.domain.models import Appointment


class BookingError(Exception):
    """Base exception for all calendar-related errors."""


class AppointmentRejectedError(BookingError):
    """Raised when the calendar refuses to store an appointment."""

    def __init__(self, appointment: Appointment, reason: str) -> None:
        self.appointment = appointment
        self.reason = reason
        super().__init__(f"Cannot book {appointment}: {reason}")


class OutsideWorkingHoursError(AppointmentRejectedError):
    """Raised when an appointment touches a non-working day or hour."""

    def __init__(self, appointment: Appointment) -> None:
        super().__init__(appointment, "appointment is not within working hours")


class OverlapError(AppointmentRejectedError):
    """Raised when an appointment intersects an existing one."""

    def __init__(self, appointment: Appointment, conflicting: Appointment) -> None:
        self.conflicting = conflicting
        super().__init__(
            appointment, f"appointment overlaps with an existing appointment ({conflicting})"
        )


class InvalidAppointmentError(BookingError):
    """Raised when a booking request cannot be turned into an appointment."""


class CalendarConsistencyError(BookingError):
    """Raised when the calendar breaks one of its own contracts."""
