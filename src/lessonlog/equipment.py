"""Equipment projector: keep equipment rows in step with schedule rows.

The equipment catalog is authoritative whenever it has an entry for the
lesson (subject + PPCT number). Without a catalog entry, whatever the teacher
typed into the equipment sheet is kept.
"""

from typing import Iterable

from src.lessonlog.catalog import CatalogKey, EquipmentMatch, lookup_equipment
from src.lessonlog.logging import get_logger
from src.lessonlog.models import EquipmentRow, ScheduleRow

log = get_logger(__name__)

DEFAULT_QUANTITY = "1"


def normalize_quantity(equipment_name: str, quantity: str) -> str:
    """Quantity shown next to ``equipment_name``.

    A named item defaults to "1"; no item means no quantity.
    """
    if not (equipment_name or "").strip():
        return ""
    return quantity or DEFAULT_QUANTITY


def _has_lesson(row: ScheduleRow) -> bool:
    return bool(row.subject or row.class_name)


def _catalog_fields(match: EquipmentMatch) -> tuple[str, str]:
    return match.equipment_name, match.quantity or DEFAULT_QUANTITY


def project_equipment(
    schedule_rows: Iterable[ScheduleRow],
    existing_equipment: Iterable[EquipmentRow],
    equipment_index: dict[CatalogKey, EquipmentMatch],
) -> list[EquipmentRow]:
    """Derive the teacher's equipment rows from their schedule rows.

    Args:
        schedule_rows: Schedule rows of the affected week(s) for one teacher.
        existing_equipment: All current equipment rows of that teacher.
        equipment_index: Output of build_equipment_index().

    Returns:
        The teacher's complete equipment set. Rows whose (week, day, period)
        has no schedule row in ``schedule_rows`` pass through untouched and
        keep their position; new rows are appended. An existing row whose
        schedule row lost both subject and class is dropped.
    """
    schedule_by_key = {row.slot_key: row for row in schedule_rows}
    existing = list(existing_equipment)
    existing_keys = {row.slot_key for row in existing}

    result: list[EquipmentRow] = []
    updated = dropped = created = 0

    for current in existing:
        schedule_row = schedule_by_key.get(current.slot_key)
        if schedule_row is None:
            result.append(current)
            continue
        if not _has_lesson(schedule_row):
            dropped += 1
            continue

        match = lookup_equipment(equipment_index, schedule_row.subject, schedule_row.ppct_number)
        if match is not None:
            name, quantity = _catalog_fields(match)
        else:
            name, quantity = current.equipment_name, current.quantity

        result.append(
            current.model_copy(
                update={
                    "subject": schedule_row.subject,
                    "class_name": schedule_row.class_name,
                    "ppct_number": schedule_row.ppct_number,
                    "date": schedule_row.date,
                    "equipment_name": name,
                    "quantity": normalize_quantity(name, quantity),
                    "teacher_name": schedule_row.teacher_name,
                }
            )
        )
        updated += 1

    for key, schedule_row in schedule_by_key.items():
        if key in existing_keys or not _has_lesson(schedule_row):
            continue
        match = lookup_equipment(equipment_index, schedule_row.subject, schedule_row.ppct_number)
        name, quantity = _catalog_fields(match) if match is not None else ("", "")
        result.append(
            EquipmentRow(
                week=schedule_row.week,
                day_of_week=schedule_row.day_of_week,
                date=schedule_row.date,
                period=schedule_row.period,
                subject=schedule_row.subject,
                class_name=schedule_row.class_name,
                ppct_number=schedule_row.ppct_number,
                equipment_name=name,
                quantity=normalize_quantity(name, quantity),
                teacher_name=schedule_row.teacher_name,
            )
        )
        created += 1

    log.debug(
        "equipment_projected",
        updated=updated,
        created=created,
        dropped=dropped,
        passed_through=len(existing) - updated - dropped,
    )
    return result
