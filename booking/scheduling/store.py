import datetime as dt
import random

from booking.domain.exceptions import OutsideWorkingHoursError, OverlapError
from booking.domain.models import Appointment, AppointmentType, WorkingHours
from booking.scheduling import filler, optimizer, search
from booking.scheduling.ports import Clock, RandomSource
from booking.scheduling.timegrid import TimeGrid


class DoctorsCalendar:
    """In-memory calendar of a single doctor.

    Appointments are only ever added through :meth:`add_appointment`, which
    keeps every stored appointment inside working hours and free of overlaps.
    """

    def __init__(self, hours: WorkingHours | None = None, clock: Clock | None = None) -> None:
        self.grid = TimeGrid(hours)
        self.clock: Clock = clock or dt.datetime.now
        self._appointments: set[Appointment] = set()

    def __len__(self) -> int:
        return len(self._appointments)

    @property
    def appointments(self) -> list[Appointment]:
        return sorted(self._appointments)

    def add_appointment(self, appointment: Appointment) -> Appointment:
        """Store ``appointment`` after checking working hours and overlaps.

        Raises:
            OutsideWorkingHoursError: If any occupied slot is outside working time.
            OverlapError: If the appointment intersects a stored one.
        """
        if not all(self.grid.is_working_day_and_hour(slot) for slot in appointment.to_slots()):
            raise OutsideWorkingHoursError(appointment)

        conflicts = [existing for existing in self._appointments if existing.overlaps(appointment)]
        if conflicts:
            raise OverlapError(appointment, conflicting=min(conflicts))

        self._appointments.add(appointment)
        return appointment

    def booked_appointments(
        self, start: dt.datetime | None = None, end: dt.datetime | None = None
    ) -> list[Appointment]:
        """Appointments whose start lies in ``[start, end]``, ascending."""
        return [
            appointment
            for appointment in self.appointments
            if (start is None or appointment.start >= start)
            and (end is None or appointment.start <= end)
        ]

    def occupied_slots(self, start: dt.datetime, end: dt.datetime) -> set[dt.datetime]:
        """Grid slots in ``[start, end)`` covered by a stored appointment.

        Appointments that began before ``start`` still count for the part
        that reaches into the window.
        """
        return {
            slot
            for appointment in self._appointments
            if appointment.start < end and appointment.end > start
            for slot in appointment.to_slots()
            if start <= slot < end
        }

    def available_single_time_slots(self, start: dt.datetime, end: dt.datetime) -> list[dt.datetime]:
        return search.available_single_time_slots(self, start, end)

    def free_slots(
        self,
        start: dt.datetime | None,
        end: dt.datetime | None,
        appointment_type: AppointmentType,
    ) -> list[dt.datetime]:
        return search.free_slots(self, start, end, appointment_type)

    def free_slots_optimized(
        self,
        start: dt.datetime | None,
        end: dt.datetime | None,
        appointment_type: AppointmentType,
    ) -> list[dt.datetime]:
        return optimizer.free_slots_optimized(self, start, end, appointment_type)

    def fill_random(
        self,
        start: dt.datetime,
        end: dt.datetime,
        appointment_type: AppointmentType,
        target_percent: int,
        rng: RandomSource | None = None,
    ) -> list[Appointment]:
        return filler.fill_random(
            self, start, end, appointment_type, target_percent, rng or random.Random()
        )
