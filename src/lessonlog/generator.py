"""Schedule generator: timetable template -> dated lesson rows for one week.

PPCT numbers (the position of a lesson in a subject's yearly curriculum)
advance by one per slot occurrence, tracked per (subject, class) for the
teacher. The counters start from the highest number already used in earlier
weeks, so generating weeks in order yields a gapless, strictly increasing
sequence.
"""

import re
from typing import Iterable

from src.lessonlog.catalog import CatalogKey, lookup_lesson_name
from src.lessonlog.dates import day_date
from src.lessonlog.logging import get_logger
from src.lessonlog.models import DayOfWeek, ScheduleRow, TimetableSlot, normalize_text
from src.lessonlog.timetable import select_teacher_slots, sort_slots

log = get_logger(__name__)

_DIGITS = re.compile(r"\d+")

CounterKey = tuple[str, str]


def parse_ppct_number(value: str | int | None) -> int | None:
    """First run of digits in ``value`` ("12a" -> 12, "Tiết 7" -> 7), else None."""
    if value is None:
        return None
    match = _DIGITS.search(str(value))
    return int(match.group(0)) if match else None


def counter_key(subject: str, class_name: str) -> CounterKey:
    return (normalize_text(subject), normalize_text(class_name))


def build_sequence_counters(
    history: Iterable[ScheduleRow], teacher_name: str, week: int
) -> dict[CounterKey, int]:
    """Highest PPCT number per (subject, class) in the teacher's weeks before ``week``.

    Rows without a subject or with no digits in ppct_number contribute nothing.
    """
    counters: dict[CounterKey, int] = {}
    for row in history:
        if row.teacher_name != teacher_name or row.week >= week or not row.subject:
            continue
        number = parse_ppct_number(row.ppct_number)
        if number is None:
            continue
        key = counter_key(row.subject, row.class_name)
        counters[key] = max(counters.get(key, 0), number)
    return counters


def generate_week(
    teacher_name: str,
    week: int,
    week_start_date: str,
    timetable_slots: Iterable[TimetableSlot],
    history_schedule: Iterable[ScheduleRow],
    lesson_index: dict[CatalogKey, str],
) -> list[ScheduleRow]:
    """Expand the teacher's template slots into rows for ``week``.

    Args:
        teacher_name: Active teacher; also stamped on every generated row.
        week: Target week number (>= 1).
        week_start_date: ISO date of the week's Monday.
        timetable_slots: Full template; the teacher's slots are selected here.
        history_schedule: Existing schedule rows (any teacher, any week).
        lesson_index: Output of build_lesson_index().

    Returns:
        New rows in (day, period) order, at most one per (day, period).
        Nothing is merged; an empty list means the teacher has no usable
        slots.
    """
    slots = select_teacher_slots(timetable_slots, teacher_name)
    if not slots:
        log.info("generate_week_no_slots", teacher=teacher_name, week=week)
        return []

    counters = build_sequence_counters(history_schedule, teacher_name, week)

    rows: list[ScheduleRow] = []
    emitted: set[tuple[DayOfWeek, int]] = set()
    for day, slot in sort_slots(slots):
        # At most one row per (day, period); the first slot in template order wins
        if (day, slot.period) in emitted:
            log.warning(
                "slot_duplicate_dropped",
                teacher=teacher_name,
                week=week,
                day=day.value,
                period=slot.period,
                slot_teacher=slot.teacher_name,
            )
            continue
        emitted.add((day, slot.period))

        key = counter_key(slot.subject, slot.class_name)
        next_number = counters.get(key, 0) + 1
        counters[key] = next_number

        rows.append(
            ScheduleRow(
                week=week,
                day_of_week=day,
                date=day_date(week_start_date, day.position),
                period=slot.period,
                subject=slot.subject,
                class_name=slot.class_name,
                ppct_number=str(next_number),
                lesson_name=lookup_lesson_name(lesson_index, slot.subject, next_number) or "",
                notes="",
                teacher_name=teacher_name,
            )
        )

    log.info(
        "week_generated",
        teacher=teacher_name,
        week=week,
        slots=len(slots),
        rows=len(rows),
    )
    return rows
