"""Teacher-scoped reconciliation of the shared schedule and equipment stores.

Every store holds all teachers' rows; teacher_name is the only partition.
The primitives here never touch rows outside the (teacher[, week]) slice they
are asked to replace, and always return a new list.

merge_teacher_rows() replaces the teacher's whole partition: callers must
pass the teacher's complete row set (every week), otherwise the missing
weeks are dropped. replace_teacher_week() is the narrower alternative for
single-week updates.
"""

from typing import Iterable, TypeVar

from src.lessonlog.logging import get_logger
from src.lessonlog.models import EquipmentRow, ScheduleRow

log = get_logger(__name__)

Row = TypeVar("Row", ScheduleRow, EquipmentRow)


def rows_for_teacher(rows: Iterable[Row], teacher_name: str) -> list[Row]:
    return [row for row in rows if row.teacher_name == teacher_name]


def rows_for_week(rows: Iterable[Row], teacher_name: str, week: int) -> list[Row]:
    return [row for row in rows if row.teacher_name == teacher_name and row.week == week]


def has_week_data(rows: Iterable[Row], teacher_name: str, week: int) -> bool:
    """True if the teacher already has at least one row in ``week``."""
    return any(row.week == week and row.teacher_name == teacher_name for row in rows)


def _tag(rows: Iterable[Row], teacher_name: str) -> list[Row]:
    return [
        row if row.teacher_name == teacher_name else row.model_copy(update={"teacher_name": teacher_name})
        for row in rows
    ]


def merge_teacher_rows(
    global_rows: Iterable[Row], teacher_name: str, updated_rows: Iterable[Row]
) -> list[Row]:
    """Replace the teacher's partition with ``updated_rows``.

    Rows of other teachers are kept as-is and in order; every updated row is
    stamped with ``teacher_name``.
    """
    global_rows = list(global_rows)
    others = [row for row in global_rows if row.teacher_name != teacher_name]
    tagged = _tag(updated_rows, teacher_name)
    log.debug(
        "teacher_rows_merged",
        teacher=teacher_name,
        replaced=len(global_rows) - len(others),
        supplied=len(tagged),
    )
    return others + tagged


def merge_teacher_schedule(
    global_schedule: Iterable[ScheduleRow],
    teacher_name: str,
    updated_rows: Iterable[ScheduleRow],
) -> list[ScheduleRow]:
    return merge_teacher_rows(global_schedule, teacher_name, updated_rows)


def merge_teacher_equipment(
    global_equipment: Iterable[EquipmentRow],
    teacher_name: str,
    updated_rows: Iterable[EquipmentRow],
) -> list[EquipmentRow]:
    return merge_teacher_rows(global_equipment, teacher_name, updated_rows)


def replace_teacher_week(
    global_rows: Iterable[Row], teacher_name: str, week: int, week_rows: Iterable[Row]
) -> list[Row]:
    """Replace only the teacher's rows of ``week``; every other row is kept."""
    kept = [
        row
        for row in global_rows
        if row.teacher_name != teacher_name or row.week != week
    ]
    return kept + _tag(week_rows, teacher_name)

