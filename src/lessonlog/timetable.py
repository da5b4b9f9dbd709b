"""Read-only queries over the timetable template.

Timetable slots name their teacher in free text (the parser copies whatever
the school's sheet says), so teacher matching is deliberately loose: a
case-insensitive exact match is tried first and substring containment is the
fallback ("A" finds "Nguyễn Văn A").
"""

from typing import Iterable

from src.lessonlog.logging import get_logger
from src.lessonlog.models import DayOfWeek, TimetableSlot

log = get_logger(__name__)


def _fold(name: str | None) -> str:
    return (name or "").strip().lower()


def select_teacher_slots(
    slots: Iterable[TimetableSlot], teacher_name: str
) -> list[TimetableSlot]:
    """Slots belonging to ``teacher_name``.

    Exact (trimmed, case-insensitive) matches win; if there are none, any slot
    whose teacher name contains ``teacher_name`` is returned.
    """
    wanted = _fold(teacher_name)
    if not wanted:
        return []
    slots = list(slots)
    exact = [slot for slot in slots if _fold(slot.teacher_name) == wanted]
    if exact:
        return exact
    loose = [slot for slot in slots if wanted in _fold(slot.teacher_name)]
    if loose:
        log.debug("teacher_matched_by_substring", teacher=teacher_name, slots=len(loose))
    return loose


def sort_slots(slots: Iterable[TimetableSlot]) -> list[tuple[DayOfWeek, TimetableSlot]]:
    """Resolve each slot's day and order by (day, period).

    Slots whose day label is not one of the six teaching days are dropped.
    """
    resolved: list[tuple[DayOfWeek, TimetableSlot]] = []
    for slot in slots:
        day = DayOfWeek.parse(slot.day_of_week)
        if day is None:
            log.debug("slot_day_unrecognized", day_of_week=slot.day_of_week, period=slot.period)
            continue
        resolved.append((day, slot))
    resolved.sort(key=lambda pair: (pair[0].position, pair[1].period))
    return resolved


def derive_pick_lists(
    slots: Iterable[TimetableSlot], teacher_name: str
) -> tuple[list[str], list[str]] | None:
    """Sorted, de-duplicated subjects and classes taught by ``teacher_name``.

    Returns None when the teacher has no slots, so callers can keep their
    current lists.
    """
    teacher_slots = select_teacher_slots(slots, teacher_name)
    if not teacher_slots:
        return None
    subjects = {slot.subject.strip() for slot in teacher_slots if slot.subject.strip()}
    classes = {slot.class_name.strip() for slot in teacher_slots if slot.class_name.strip()}
    return sorted(subjects), sorted(classes)


def list_teachers(slots: Iterable[TimetableSlot]) -> list[str]:
    """Distinct teacher names in first-seen order."""
    seen: dict[str, None] = {}
    for slot in slots:
        name = slot.teacher_name.strip()
        if name:
            seen.setdefault(name, None)
    return list(seen)
