"""Week/date arithmetic for the six-day teaching week.

Dates travel through the engine as ISO ``YYYY-MM-DD`` strings. Every helper
here degrades to an empty string on malformed input instead of raising, so a
broken week start never stops row generation; affected rows carry ``date=""``.

Arithmetic uses ``datetime.date`` (calendar days, no time of day), which is
immune to daylight-saving shifts.
"""

from datetime import date, timedelta

from src.lessonlog.logging import get_logger

log = get_logger(__name__)

TEACHING_DAYS = 6  # Monday..Saturday


def parse_iso_date(value: str) -> date | None:
    """Parse ``YYYY-MM-DD`` into a date, or None when malformed."""
    parts = (value or "").strip().split("-")
    if len(parts) != 3:
        return None
    try:
        year, month, day = (int(part) for part in parts)
        return date(year, month, day)
    except ValueError:
        return None


def add_days(iso_date: str, days: int) -> str:
    """Return ``iso_date`` shifted by ``days`` calendar days, or "" if malformed."""
    start = parse_iso_date(iso_date)
    if start is None:
        if iso_date:
            log.debug("date_unparseable", value=iso_date)
        return ""
    try:
        return (start + timedelta(days=days)).isoformat()
    except OverflowError:
        return ""


def day_date(week_start: str, day_index: int) -> str:
    """ISO date of the teaching day ``day_index`` (0=Monday .. 5=Saturday)."""
    return add_days(week_start, day_index)


def day_index_to_date(week_start: str, day_index: int) -> str:
    """``DD/MM`` label of the teaching day, as printed in sheet day headers.

    >>> day_index_to_date("2024-01-01", 0)
    '01/01'
    >>> day_index_to_date("2024-01-01", 5)
    '06/01'
    """
    target = parse_iso_date(day_date(week_start, day_index))
    if target is None:
        return ""
    return target.strftime("%d/%m")


def week_end_date(week_start: str) -> str:
    """ISO date of the Saturday closing the week."""
    return add_days(week_start, TEACHING_DAYS - 1)


def format_date_vn(iso_date: str) -> str:
    """``YYYY-MM-DD`` -> ``DD/MM/YYYY``; other input is returned unchanged."""
    if not iso_date:
        return ""
    parts = iso_date.split("-")
    if len(parts) != 3:
        return iso_date
    year, month, day = parts
    return f"{day}/{month}/{year}"


def shift_week(week: int, week_start: str, new_week: int) -> tuple[int, str]:
    """Move to ``new_week``, shifting the start date by 7 days per week moved.

    The start date is not re-derived from the week number; a malformed start
    date stays as it was.
    """
    delta = new_week - week
    if delta == 0 or not week_start:
        return new_week, week_start
    shifted = add_days(week_start, 7 * delta)
    return new_week, shifted or week_start


def monday_of(reference: date) -> date:
    """Monday of the week containing ``reference``."""
    return reference - timedelta(days=reference.weekday())
