import datetime as dt

from booking.domain.models import GRID_MINUTES

DATETIME_FORMAT = "%Y-%m-%d %H:%M"


def parse_datetime(value: str) -> tuple[dt.datetime | None, str | None]:
    """Parse ``YYYY-MM-DD HH:MM`` and floor it to the grid.

    Returns ``(datetime, None)`` or ``(None, error_msg)``.
    """
    try:
        parsed = dt.datetime.strptime(value.strip(), DATETIME_FORMAT)
    except ValueError:
        return None, f"Invalid date '{value}'. Expected YYYY-MM-DD HH:MM."
    return parsed.replace(minute=parsed.minute - parsed.minute % GRID_MINUTES), None


def parse_percentage(value: str) -> tuple[int | None, str | None]:
    """Parse a whole percentage between 1 and 100."""
    try:
        percentage = int(value.strip())
    except ValueError:
        return None, "Please enter a valid number between 1 and 100."
    if not 1 <= percentage <= 100:
        return None, "Please enter a valid number between 1 and 100."
    return percentage, None


def parse_menu_choice(value: str, count: int) -> tuple[int | None, str | None]:
    """Parse a 1-based menu choice into a 0-based index."""
    try:
        choice = int(value.strip())
    except ValueError:
        return None, f"Please choose a number between 1 and {count}."
    if not 1 <= choice <= count:
        return None, f"Please choose a number between 1 and {count}."
    return choice - 1, None
