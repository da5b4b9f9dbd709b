"""Single-cell edits on a teacher's schedule and equipment sheets.

A cell is addressed by (week, day index, period). Editing an empty cell
creates its row lazily. Only the edited row is re-looked-up in the catalogs.
Each function takes the teacher's complete row list and returns a new one,
ready for the teacher-scoped merge.
"""

from typing import Any

from src.lessonlog.catalog import CatalogKey, EquipmentMatch, lookup_equipment, lookup_lesson_name
from src.lessonlog.dates import day_date
from src.lessonlog.equipment import DEFAULT_QUANTITY, normalize_quantity
from src.lessonlog.logging import get_logger
from src.lessonlog.models import DayOfWeek, EquipmentRow, ScheduleRow

log = get_logger(__name__)

SCHEDULE_FIELDS: frozenset[str] = frozenset(
    {"subject", "class_name", "ppct_number", "lesson_name", "notes"}
)
EQUIPMENT_FIELDS: frozenset[str] = frozenset(
    {"subject", "class_name", "ppct_number", "equipment_name", "quantity"}
)


def _find_cell(rows: list, week: int, day: DayOfWeek, period: int) -> int | None:
    for position, row in enumerate(rows):
        if row.week == week and row.day_of_week == day and row.period == period:
            return position
    return None


def _as_text(value: Any) -> str:
    return "" if value is None else str(value)


def edit_schedule_cell(
    teacher_rows: list[ScheduleRow],
    *,
    teacher_name: str,
    week: int,
    week_start_date: str,
    day_index: int,
    period: int,
    field: str,
    value: Any,
    lesson_index: dict[CatalogKey, str],
) -> list[ScheduleRow]:
    """Set one field of the schedule cell and re-fill its lesson name.

    The row's date is re-synced from the week start and its teacher re-stamped
    on every edit. Blanking ppct_number blanks the lesson name; changing
    ppct_number or subject looks the lesson name up again, keeping the old
    one on a miss.

    Raises:
        ValueError: If ``field`` is not editable, ``day_index`` is not 0..5
            or a new row would get a period outside 1..7.
    """
    if field not in SCHEDULE_FIELDS:
        raise ValueError(f"Field {field!r} is not editable. Valid: {sorted(SCHEDULE_FIELDS)}")
    day = DayOfWeek.from_index(day_index)
    text = _as_text(value)

    rows = list(teacher_rows)
    position = _find_cell(rows, week, day, period)
    if position is None:
        current = ScheduleRow(week=week, day_of_week=day, period=period, teacher_name=teacher_name)
    else:
        current = rows[position]

    update: dict[str, Any] = {
        field: text,
        "date": day_date(week_start_date, day_index),
        "teacher_name": teacher_name,
    }
    subject = text if field == "subject" else current.subject
    ppct_number = text if field == "ppct_number" else current.ppct_number

    if field == "ppct_number" and not text.strip():
        update["lesson_name"] = ""
    elif field in ("ppct_number", "subject"):
        found = lookup_lesson_name(lesson_index, subject, ppct_number)
        if found:
            update["lesson_name"] = found

    edited = current.model_copy(update=update)
    if position is None:
        rows.append(edited)
    else:
        rows[position] = edited

    log.debug(
        "schedule_cell_edited",
        teacher=teacher_name,
        week=week,
        day=day.value,
        period=period,
        field=field,
        created=position is None,
    )
    return rows


def edit_equipment_cell(
    teacher_rows: list[EquipmentRow],
    *,
    teacher_name: str,
    week: int,
    week_start_date: str,
    day_index: int,
    period: int,
    field: str,
    value: Any,
    equipment_index: dict[CatalogKey, EquipmentMatch],
) -> list[EquipmentRow]:
    """Set one field of the equipment cell.

    Naming an item with no quantity sets the quantity to "1"; clearing the
    name clears the quantity, and a quantity typed without an item is not
    kept. Changing subject or ppct_number applies the catalog entry for the
    new lesson when there is one.

    Raises:
        ValueError: If ``field`` is not editable, ``day_index`` is not 0..5
            or a new row would get a period outside 1..7.
    """
    if field not in EQUIPMENT_FIELDS:
        raise ValueError(f"Field {field!r} is not editable. Valid: {sorted(EQUIPMENT_FIELDS)}")
    day = DayOfWeek.from_index(day_index)
    text = _as_text(value)

    rows = list(teacher_rows)
    position = _find_cell(rows, week, day, period)
    if position is None:
        current = EquipmentRow(week=week, day_of_week=day, period=period, teacher_name=teacher_name)
    else:
        current = rows[position]

    update: dict[str, Any] = {
        field: text,
        "date": day_date(week_start_date, day_index),
        "teacher_name": teacher_name,
    }
    if field == "equipment_name":
        update["quantity"] = normalize_quantity(text, current.quantity)
    elif field == "quantity":
        update["quantity"] = normalize_quantity(current.equipment_name, text)

    if field in ("subject", "ppct_number"):
        subject = text if field == "subject" else current.subject
        ppct_number = text if field == "ppct_number" else current.ppct_number
        match = lookup_equipment(equipment_index, subject, ppct_number)
        if match is not None:
            update["equipment_name"] = match.equipment_name
            update["quantity"] = match.quantity or DEFAULT_QUANTITY

    edited = current.model_copy(update=update)
    if position is None:
        rows.append(edited)
    else:
        rows[position] = edited

    log.debug(
        "equipment_cell_edited",
        teacher=teacher_name,
        week=week,
        day=day.value,
        period=period,
        field=field,
        created=position is None,
    )
    return rows


def clear_schedule_week(teacher_rows: list[ScheduleRow], week: int) -> list[ScheduleRow]:
    """Blank subject, class, PPCT and lesson name of every row in ``week``.

    Notes are kept, and so are the rows themselves.
    """
    cleared = {"subject": "", "class_name": "", "ppct_number": "", "lesson_name": ""}
    return [row.model_copy(update=cleared) if row.week == week else row for row in teacher_rows]


def clear_equipment_week(teacher_rows: list[EquipmentRow], week: int) -> list[EquipmentRow]:
    """Drop every equipment row of ``week``."""
    return [row for row in teacher_rows if row.week != week]
