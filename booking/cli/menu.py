import datetime as dt
import sys
from collections.abc import Callable
from enum import Enum

from loguru import logger

from booking.cli.parsing import DATETIME_FORMAT, parse_datetime, parse_menu_choice, parse_percentage
from booking.config import AppConfig
from booking.domain.exceptions import BookingError
from booking.domain.models import MENU_ORDER, AppointmentType
from booking.scheduling.factory import build_calendar_service
from booking.scheduling.ports import AbstractCalendarService


class Action(Enum):
    ADD_NEW_APPOINTMENT = "Add new appointment"
    BOOKED_APPOINTMENTS = "Booked appointments"
    LIST_FREE_TIME_SLOTS = "List free time slots"
    LIST_OPTIMIZED_FREE_TIME_SLOTS = "List optimized free time slots"
    FILL_RANDOM = "Fill random"
    SET_FROM_DATE = "Set `From` date"
    SET_TO_DATE = "Set `To` date"
    QUIT = "Quit"


class CalendarMenu:
    """Interactive menu over a calendar service.

    Keeps the ``from``/``to`` window that every listing and fill uses. Input
    and output are injectable so the menu can be driven from tests.
    """

    def __init__(
        self,
        service: AbstractCalendarService,
        from_: dt.datetime,
        to: dt.datetime,
        input_fn: Callable[[str], str] = input,
        output: Callable[..., None] = print,
    ) -> None:
        self._service = service
        self.from_ = from_
        self.to = to
        self._input = input_fn
        self._output = output
        self._handlers: dict[Action, Callable[[], None]] = {
            Action.ADD_NEW_APPOINTMENT: self.handle_add_appointment,
            Action.BOOKED_APPOINTMENTS: self.handle_booked_appointments,
            Action.LIST_FREE_TIME_SLOTS: self.handle_free_slots,
            Action.LIST_OPTIMIZED_FREE_TIME_SLOTS: self.handle_optimized_free_slots,
            Action.FILL_RANDOM: self.handle_fill_random,
            Action.SET_FROM_DATE: self.handle_set_from,
            Action.SET_TO_DATE: self.handle_set_to,
        }

    def run(self) -> None:
        while True:
            self._output(f"Current `from` date: {self.from_:{DATETIME_FORMAT}}")
            self._output(f"Current `to` date: {self.to:{DATETIME_FORMAT}}")
            self._output()

            try:
                action = self.choose_action()
                if action is Action.QUIT:
                    self._output("Exiting...")
                    return
                self._dispatch(action)
            except EOFError:
                self._output("Exiting...")
                return

            self._output()
            self._output("=" * 36)

    def _dispatch(self, action: Action) -> None:
        try:
            self._handlers[action]()
        except BookingError as exc:
            self._output(f"Error: {exc}")
        except Exception:
            logger.exception("Unexpected error in {}", action.name)
            self._output("An unexpected error occurred.")

    def _choose(self, prompt: str, options: list[str]) -> int:
        while True:
            for number, option in enumerate(options, start=1):
                self._output(f"  {number}. {option}")
            index, err = parse_menu_choice(self._input(f"{prompt}: "), len(options))
            if index is not None:
                return index
            self._output(err)

    def choose_action(self) -> Action:
        actions = list(Action)
        return actions[self._choose("Choose an action", [action.value for action in actions])]

    def choose_appointment_type(self) -> AppointmentType:
        index = self._choose(
            "Choose an appointment type", [appointment_type.label for appointment_type in MENU_ORDER]
        )
        return MENU_ORDER[index]

    def _ask_datetime(self, prompt: str) -> dt.datetime | None:
        value, err = parse_datetime(self._input(f"{prompt} (YYYY-MM-DD HH:MM): "))
        if err:
            self._output(f"Failed to parse date: {err}")
        return value

    def _ask_percentage(self) -> int:
        while True:
            percentage, err = parse_percentage(self._input("Enter percentage to fill [1-100]: "))
            if percentage is not None:
                return percentage
            self._output(err)

    def handle_set_from(self) -> None:
        value = self._ask_datetime("Enter `from` date")
        if value is not None:
            self.from_ = value

    def handle_set_to(self) -> None:
        value = self._ask_datetime("Enter `to` date")
        if value is not None:
            self.to = value

    def handle_add_appointment(self) -> None:
        appointment_type = self.choose_appointment_type()
        start = self._ask_datetime("Enter appointment date")
        if start is None:
            return

        self._service.book(start, appointment_type)
        self._output("Appointment added successfully")

    def handle_booked_appointments(self) -> None:
        appointments = self._service.booked_appointments(self.from_, self.to)
        if not appointments:
            self._output("No booked appointments.")
            return

        for appointment in appointments:
            self._output(
                f"Date: {appointment.start:{DATETIME_FORMAT}}, "
                f"Type: {appointment.appointment_type.label}"
            )

    def handle_free_slots(self) -> None:
        appointment_type = self.choose_appointment_type()
        slots = self._service.free_slots(self.from_, self.to, appointment_type)
        self._show_slots("Free time slots:", slots)

    def handle_optimized_free_slots(self) -> None:
        appointment_type = self.choose_appointment_type()
        slots = self._service.free_slots_optimized(self.from_, self.to, appointment_type)
        self._show_slots("Optimized free time slots:", slots)

    def handle_fill_random(self) -> None:
        appointment_type = self.choose_appointment_type()
        percentage = self._ask_percentage()
        booked = self._service.fill_random(self.from_, self.to, appointment_type, percentage)
        self._output(f"Booked {len(booked)} {appointment_type.label} appointment(s)")

    def _show_slots(self, title: str, slots: list[dt.datetime]) -> None:
        self._output(title)
        if not slots:
            self._output("  (none)")
        for slot in slots:
            self._output(f"{slot:{DATETIME_FORMAT}}")


def configure_logging(level: str) -> None:
    logger.remove()
    logger.add(sys.stderr, level=level.upper())


def main() -> int:
    config = AppConfig()
    configure_logging(config.log_level)

    service = build_calendar_service(config)
    grid = service.calendar.grid
    now = dt.datetime.now()

    menu = CalendarMenu(service, from_=grid.next_quarter_mark(now), to=grid.end_of_day(now))
    menu.run()
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
