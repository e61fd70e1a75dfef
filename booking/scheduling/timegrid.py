import datetime as dt
from collections.abc import Iterator

from booking.domain.models import GRID_MINUTES, GRID_STEP, AppointmentType, WorkingHours


class TimeGrid:
    """Working-hours arithmetic on the 15-minute grid.

    Every slot enumeration in the calendar steps with :meth:`next_working_slot`,
    so lunch breaks, nights and non-working days are skipped in one place.
    """

    def __init__(self, hours: WorkingHours | None = None) -> None:
        self.hours = hours or WorkingHours()

    def is_working_day(self, moment: dt.datetime) -> bool:
        return moment.weekday() in self.hours.working_days

    def is_working_hour(self, moment: dt.datetime) -> bool:
        # Half-open: an interval's end instant is already outside working hours.
        time = moment.time()
        return any(start <= time < end for start, end in self.hours.intervals)

    def is_working_day_and_hour(self, moment: dt.datetime) -> bool:
        return self.is_working_day(moment) and self.is_working_hour(moment)

    def floor_to_grid(self, moment: dt.datetime) -> dt.datetime:
        return moment.replace(
            minute=moment.minute - moment.minute % GRID_MINUTES, second=0, microsecond=0
        )

    def ceil_to_grid(self, moment: dt.datetime) -> dt.datetime:
        floored = self.floor_to_grid(moment)
        return floored if floored == moment else floored + GRID_STEP

    def next_working_slot(
        self, moment: dt.datetime, duration_hint: AppointmentType | None = None
    ) -> dt.datetime:
        """Return the next grid slot inside working hours.

        ``moment`` is floored to the grid and advanced by the duration of
        ``duration_hint`` (one grid step when omitted). A result that falls
        in a break snaps to the next interval start; one past the last
        interval, or on a non-working day, rolls to the first interval of the
        next working day.
        """
        step = duration_hint.duration if duration_hint is not None else GRID_STEP
        current = self.floor_to_grid(moment) + step

        if self.is_working_day_and_hour(current):
            return current

        if self.is_working_day(current):
            time = current.time()
            for start, _ in self.hours.intervals:
                if time < start:
                    return dt.datetime.combine(current.date(), start)

        return self._start_of_next_working_day(current.date())

    def end_time(self, moment: dt.datetime, appointment_type: AppointmentType) -> dt.datetime:
        """``moment`` plus the duration of ``appointment_type``, unadjusted."""
        return moment + appointment_type.duration

    def iter_working_slots(
        self, start: dt.datetime, end: dt.datetime, *, inclusive: bool = False
    ) -> Iterator[dt.datetime]:
        """Yield every working grid slot from ``start`` up to ``end``."""
        current = self.ceil_to_grid(start)
        if not self.is_working_day_and_hour(current):
            current = self.next_working_slot(current)

        while current < end or (inclusive and current == end):
            yield current
            current = self.next_working_slot(current)

    def next_quarter_mark(self, now: dt.datetime) -> dt.datetime:
        """First grid point strictly after ``now`` (18:12 -> 18:15, 18:15 -> 18:30)."""
        return self.floor_to_grid(now) + GRID_STEP

    def end_of_day(self, now: dt.datetime) -> dt.datetime:
        return dt.datetime.combine(now.date(), dt.time(23, 59, 59))

    def end_of_week(self, now: dt.datetime) -> dt.datetime:
        """End of the last working day of ``now``'s working week.

        After that day (e.g. on a weekend) the following week is used.
        """
        last_working_day = max(self.hours.working_days)
        days_ahead = (last_working_day - now.weekday()) % 7
        return self.end_of_day(now + dt.timedelta(days=days_ahead))

    def _start_of_next_working_day(self, day: dt.date) -> dt.datetime:
        day += dt.timedelta(days=1)
        while day.weekday() not in self.hours.working_days:
            day += dt.timedelta(days=1)
        return dt.datetime.combine(day, self.hours.day_start)
