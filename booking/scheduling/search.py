import datetime as dt
from typing import TYPE_CHECKING

from booking.domain.models import GRID_STEP, AppointmentType

if TYPE_CHECKING:
    from booking.scheduling.store import DoctorsCalendar


def resolve_window(
    calendar: "DoctorsCalendar",
    start: dt.datetime | None,
    end: dt.datetime | None,
    appointment_type: AppointmentType,
) -> tuple[dt.datetime, dt.datetime]:
    """Fill in default bounds and extend ``end`` so a candidate starting at it can fit.

    ``start`` defaults to the next quarter mark and ``end`` to the end of the
    current working week, both relative to the calendar's clock. ``end`` is
    floored to the grid first, so no candidate starts after it.
    """
    grid = calendar.grid
    if start is None or end is None:
        now = calendar.clock()
        start = start if start is not None else grid.next_quarter_mark(now)
        end = end if end is not None else grid.end_of_week(now)
    return start, grid.end_time(grid.floor_to_grid(end), appointment_type)


def available_single_time_slots(
    calendar: "DoctorsCalendar", start: dt.datetime, end: dt.datetime
) -> list[dt.datetime]:
    """Working grid slots in ``[start, end)`` that no appointment occupies."""
    occupied = calendar.occupied_slots(start, end)
    return [slot for slot in calendar.grid.iter_working_slots(start, end) if slot not in occupied]


def fits_at(slot: dt.datetime, available: set[dt.datetime], appointment_type: AppointmentType) -> bool:
    """True when every grid cell ``appointment_type`` needs from ``slot`` is available."""
    return all(slot + GRID_STEP * offset in available for offset in range(appointment_type.slot_count))


def search_window(
    calendar: "DoctorsCalendar",
    start: dt.datetime | None,
    end: dt.datetime | None,
    appointment_type: AppointmentType,
) -> tuple[list[dt.datetime], list[dt.datetime]]:
    """Resolve the window once and return ``(available, candidates)`` for it."""
    start, end = resolve_window(calendar, start, end, appointment_type)
    available = available_single_time_slots(calendar, start, end)

    if appointment_type.slot_count == 1:
        return available, list(available)

    # Cells across a break or a night are never enumerated, so runs that
    # would span them fail the membership test.
    lookup = set(available)
    return available, [slot for slot in available if fits_at(slot, lookup, appointment_type)]


def free_slots(
    calendar: "DoctorsCalendar",
    start: dt.datetime | None,
    end: dt.datetime | None,
    appointment_type: AppointmentType,
) -> list[dt.datetime]:
    """Every start time at which ``appointment_type`` could be booked, ascending."""
    _, candidates = search_window(calendar, start, end, appointment_type)
    return candidates
