import datetime as dt
import random

from loguru import logger
from pydantic import ValidationError

from booking.domain.exceptions import AppointmentRejectedError, InvalidAppointmentError
from booking.domain.models import Appointment, AppointmentType
from booking.scheduling.ports import AbstractCalendarService, RandomSource
from booking.scheduling.store import DoctorsCalendar


class CalendarService(AbstractCalendarService):
    """Calendar service that delegates to a DoctorsCalendar and logs each operation."""

    def __init__(self, calendar: DoctorsCalendar, rng: RandomSource | None = None) -> None:
        self._calendar = calendar
        self._rng = rng or random.Random()

    @property
    def calendar(self) -> DoctorsCalendar:
        return self._calendar

    def book(self, start: dt.datetime, appointment_type: AppointmentType) -> Appointment:
        logger.info("Booking {} at {}", appointment_type.label, start)

        try:
            appointment = Appointment(start=start, appointment_type=appointment_type)
        except ValidationError as exc:
            raise InvalidAppointmentError(
                f"Invalid appointment start {start}: {exc.errors()[0]['msg']}"
            ) from exc

        try:
            self._calendar.add_appointment(appointment)
        except AppointmentRejectedError as exc:
            logger.warning("Booking rejected: {}", exc.reason)
            raise

        logger.info("Appointment booked: {}", appointment)
        return appointment

    def booked_appointments(
        self, start: dt.datetime | None = None, end: dt.datetime | None = None
    ) -> list[Appointment]:
        appointments = self._calendar.booked_appointments(start, end)
        logger.debug("Found {} booked appointment(s) between {} and {}", len(appointments), start, end)
        return appointments

    def free_slots(
        self,
        start: dt.datetime | None,
        end: dt.datetime | None,
        appointment_type: AppointmentType,
    ) -> list[dt.datetime]:
        slots = self._calendar.free_slots(start, end, appointment_type)
        logger.debug("Found {} free slot(s) for {}", len(slots), appointment_type.label)
        return slots

    def free_slots_optimized(
        self,
        start: dt.datetime | None,
        end: dt.datetime | None,
        appointment_type: AppointmentType,
    ) -> list[dt.datetime]:
        slots = self._calendar.free_slots_optimized(start, end, appointment_type)
        logger.debug("Found {} optimized free slot(s) for {}", len(slots), appointment_type.label)
        return slots

    def fill_random(
        self,
        start: dt.datetime,
        end: dt.datetime,
        appointment_type: AppointmentType,
        target_percent: int,
    ) -> list[Appointment]:
        logger.info(
            "Filling {}% of {} - {} with {} appointments",
            target_percent,
            start,
            end,
            appointment_type.label,
        )

        booked = self._calendar.fill_random(
            start, end, appointment_type, target_percent, rng=self._rng
        )

        logger.info("Random fill booked {} appointment(s)", len(booked))
        return booked
