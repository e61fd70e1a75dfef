import datetime as dt
from typing import TYPE_CHECKING

from booking.domain.exceptions import AppointmentRejectedError, CalendarConsistencyError
from booking.domain.models import GRID_STEP, Appointment, AppointmentType
from booking.scheduling.ports import RandomSource
from booking.scheduling.search import free_slots

if TYPE_CHECKING:
    from booking.scheduling.store import DoctorsCalendar


def fill_random(
    calendar: "DoctorsCalendar",
    start: dt.datetime,
    end: dt.datetime,
    appointment_type: AppointmentType,
    target_percent: int,
    rng: RandomSource,
) -> list[Appointment]:
    """Book random free slots until ``target_percent`` of ``[start, end]`` is occupied.

    Occupancy is measured in working grid slots and existing appointments
    count toward it. Filling stops as soon as one more appointment would push
    occupancy over the target, or when no free slot is left, so the target is
    a ceiling rather than an exact fill.

    Returns:
        The appointments booked by this call, in booking order.

    Raises:
        ValueError: If ``target_percent`` is outside 1..100.
        CalendarConsistencyError: If a slot returned by the search is rejected.
    """
    if isinstance(target_percent, bool) or not isinstance(target_percent, int):
        raise ValueError(f"target_percent must be an integer, got {target_percent!r}")
    if not 1 <= target_percent <= 100:
        raise ValueError(f"target_percent must be between 1 and 100, got {target_percent}")

    window = list(calendar.grid.iter_working_slots(start, end, inclusive=True))
    if not window:
        return []

    budget = target_percent * len(window)
    booked: list[Appointment] = []

    while True:
        occupied = calendar.occupied_slots(window[0], window[-1] + GRID_STEP)
        occupied_count = sum(1 for slot in window if slot in occupied)
        if (occupied_count + appointment_type.slot_count) * 100 > budget:
            break

        candidates = free_slots(calendar, start, end, appointment_type)
        if not candidates:
            break

        appointment = Appointment(start=rng.choice(candidates), appointment_type=appointment_type)
        try:
            calendar.add_appointment(appointment)
        except AppointmentRejectedError as exc:
            raise CalendarConsistencyError(
                f"free slot search offered {appointment.start} but booking it failed"
            ) from exc
        booked.append(appointment)

    return booked
