import datetime as dt

import pytest
from pydantic import ValidationError

from booking.domain.models import (
    LONGEST_FIRST,
    MENU_ORDER,
    Appointment,
    AppointmentType,
    WorkingHours,
)


def _at(hour: int, minute: int = 0, day: int = 1) -> dt.datetime:
    return dt.datetime(2024, 2, day, hour, minute)


class TestAppointmentType:
    @pytest.mark.parametrize(
        ("appointment_type", "minutes", "slots", "label"),
        [
            (AppointmentType.URGENT, 15, 1, "Urgent Appointment"),
            (AppointmentType.CHECK_UP, 30, 2, "Check-up"),
            (AppointmentType.IMPLANT_CONSULTATION, 90, 6, "Implant Consultation"),
        ],
        ids=["urgent", "check-up", "implant"],
    )
    def test_duration_label_and_slots(
        self, appointment_type: AppointmentType, minutes: int, slots: int, label: str
    ) -> None:
        assert appointment_type.duration == dt.timedelta(minutes=minutes)
        assert appointment_type.slot_count == slots
        assert appointment_type.label == label

    def test_longest_first_is_sorted_by_duration(self) -> None:
        durations = [t.duration for t in LONGEST_FIRST]
        assert durations == sorted(durations, reverse=True)
        assert set(LONGEST_FIRST) == set(AppointmentType)

    def test_menu_lists_every_type(self) -> None:
        assert set(MENU_ORDER) == set(AppointmentType)


class TestAppointment:
    def test_check_up_expands_to_two_slots(self) -> None:
        appointment = Appointment(start=_at(8), appointment_type=AppointmentType.CHECK_UP)

        assert appointment.to_slots() == [_at(8), _at(8, 15)]

    def test_implant_expands_to_six_slots(self) -> None:
        appointment = Appointment(start=_at(8), appointment_type=AppointmentType.IMPLANT_CONSULTATION)

        slots = appointment.to_slots()

        assert len(slots) == 6
        assert slots[:3] == [_at(8), _at(8, 15), _at(8, 30)]
        assert slots[-1] == _at(9, 15)
        assert appointment.end == _at(9, 30)

    def test_rejects_off_grid_start(self) -> None:
        with pytest.raises(ValidationError, match="15-minute grid"):
            Appointment(start=_at(8, 10), appointment_type=AppointmentType.URGENT)

    def test_rejects_timezone_aware_start(self) -> None:
        with pytest.raises(ValidationError, match="naive"):
            Appointment(
                start=_at(8).replace(tzinfo=dt.timezone.utc),
                appointment_type=AppointmentType.URGENT,
            )

    def test_is_immutable(self) -> None:
        appointment = Appointment(start=_at(8), appointment_type=AppointmentType.URGENT)

        with pytest.raises(ValidationError):
            appointment.start = _at(9)  # type: ignore[misc]

    def test_orders_by_start_then_type(self) -> None:
        late = Appointment(start=_at(9), appointment_type=AppointmentType.URGENT)
        early_urgent = Appointment(start=_at(8), appointment_type=AppointmentType.URGENT)
        early_check_up = Appointment(start=_at(8), appointment_type=AppointmentType.CHECK_UP)

        assert sorted([late, early_urgent, early_check_up]) == [early_check_up, early_urgent, late]

    def test_equal_appointments_deduplicate_in_a_set(self) -> None:
        first = Appointment(start=_at(8), appointment_type=AppointmentType.URGENT)
        second = Appointment(start=_at(8), appointment_type=AppointmentType.URGENT)

        assert {first, second} == {first}

    @pytest.mark.parametrize(
        ("start", "appointment_type", "expected"),
        [
            (_at(8, 15), AppointmentType.URGENT, True),
            (_at(9, 30), AppointmentType.URGENT, False),
            (_at(7, 45), AppointmentType.URGENT, False),
            (_at(7, 30), AppointmentType.IMPLANT_CONSULTATION, True),
        ],
        ids=["inside", "touching-end", "touching-start", "covering"],
    )
    def test_overlaps(
        self, start: dt.datetime, appointment_type: AppointmentType, expected: bool
    ) -> None:
        existing = Appointment(start=_at(8), appointment_type=AppointmentType.IMPLANT_CONSULTATION)
        other = Appointment(start=start, appointment_type=appointment_type)

        assert existing.overlaps(other) is expected
        assert other.overlaps(existing) is expected


class TestWorkingHours:
    def test_defaults(self) -> None:
        hours = WorkingHours()

        assert hours.intervals == (
            (dt.time(8, 0), dt.time(12, 0)),
            (dt.time(13, 0), dt.time(17, 0)),
        )
        assert hours.working_days == frozenset({0, 1, 2, 3, 4})
        assert hours.day_start == dt.time(8, 0)

    @pytest.mark.parametrize(
        "intervals",
        [
            (),
            ((dt.time(12, 0), dt.time(8, 0)),),
            ((dt.time(8, 10), dt.time(12, 0)),),
            ((dt.time(13, 0), dt.time(17, 0)), (dt.time(8, 0), dt.time(12, 0))),
            ((dt.time(8, 0), dt.time(12, 0)), (dt.time(11, 0), dt.time(14, 0))),
        ],
        ids=["empty", "reversed", "off-grid", "unsorted", "overlapping"],
    )
    def test_rejects_invalid_intervals(self, intervals: tuple[tuple[dt.time, dt.time], ...]) -> None:
        with pytest.raises(ValidationError):
            WorkingHours(intervals=intervals)

    @pytest.mark.parametrize(
        "days", [frozenset(), frozenset({7}), frozenset({-1, 2})], ids=["empty", "seven", "negative"]
    )
    def test_rejects_invalid_weekdays(self, days: frozenset[int]) -> None:
        with pytest.raises(ValidationError):
            WorkingHours(working_days=days)
