"""One free slot per clock hour, chosen to keep room for long appointments.

Within each hour window every candidate is scored by how many appointments
of each type, longest first, would still fit into the contiguous free run
around it. The candidate with the best score wins the window. This is a
local greedy heuristic, not an optimal packing.
"""

import datetime as dt
from typing import TYPE_CHECKING

from booking.domain.models import GRID_STEP, LONGEST_FIRST, AppointmentType
from booking.scheduling.search import search_window

if TYPE_CHECKING:
    from booking.scheduling.store import DoctorsCalendar


def hour_window(slot: dt.datetime) -> dt.datetime:
    return slot.replace(minute=0, second=0, microsecond=0)


def connected_run(
    available: list[dt.datetime], index: int, appointment_type: AppointmentType
) -> tuple[int, int]:
    """Count contiguous free slots after the appointment at ``index`` and before it.

    Returns ``(forward, backward)``. The appointment's own cells are not counted.
    """
    forward = 0
    position = index + appointment_type.slot_count
    while position < len(available) and available[position] - available[position - 1] == GRID_STEP:
        forward += 1
        position += 1

    backward = 0
    position = index
    while position > 0 and available[position] - available[position - 1] == GRID_STEP:
        backward += 1
        position -= 1

    return forward, backward


def remaining_capacity(forward: int, backward: int) -> tuple[int, ...]:
    """How many appointments of each type, longest first, fit in both runs.

    Each type takes what it can from both runs before the remainder is
    offered to the next shorter type.
    """
    capacity = []
    for appointment_type in LONGEST_FIRST:
        size = appointment_type.slot_count
        capacity.append(forward // size + backward // size)
        forward %= size
        backward %= size
    return tuple(capacity)


def free_slots_optimized(
    calendar: "DoctorsCalendar",
    start: dt.datetime | None,
    end: dt.datetime | None,
    appointment_type: AppointmentType,
) -> list[dt.datetime]:
    available, candidates = search_window(calendar, start, end, appointment_type)
    positions = {slot: index for index, slot in enumerate(available)}

    windows: dict[dt.datetime, list[dt.datetime]] = {}
    for slot in candidates:
        windows.setdefault(hour_window(slot), []).append(slot)

    optimized = []
    for slots in windows.values():
        ideal: dt.datetime | None = None
        ideal_capacity: tuple[int, ...] = ()

        for slot in slots:
            capacity = remaining_capacity(*connected_run(available, positions[slot], appointment_type))
            # Strictly greater only: ties keep the earlier slot.
            if ideal is None or capacity > ideal_capacity:
                ideal = slot
                ideal_capacity = capacity

        if ideal is not None:
            optimized.append(ideal)

    return optimized
