"""Import of catalogs (CSV exports of the curriculum sheets) and timetables.

Import failures are reported as ImportFormatError before any data reaches
the engine; nothing is ever imported partially.

CSV layouts (first row is a header and is skipped):

    lesson catalog:    number, lesson name
                       no., number, lesson name        (2nd column numeric)
    equipment catalog: number, equipment[, quantity]
                       number, lesson name, equipment[, quantity]
                       (2nd column a non-numeric text longer than 5 chars
                        and 3rd column not a number)
"""

import csv
import json
from pathlib import Path
from typing import Any, Iterable

from pydantic import TypeAdapter, ValidationError

from src.lessonlog.errors import ImportFormatError
from src.lessonlog.logging import get_logger
from src.lessonlog.models import EquipmentCatalogEntry, LessonCatalogEntry, TimetableSlot

log = get_logger(__name__)

_TIMETABLE_ADAPTER = TypeAdapter(list[TimetableSlot])

# camelCase keys produced by the timetable parser
_TIMETABLE_KEYS = {
    "dayOfWeek": "day_of_week",
    "className": "class_name",
    "teacherName": "teacher_name",
}


def _cell(row: list[str], position: int) -> str:
    return row[position].strip() if position < len(row) else ""


def _is_number(value: str) -> bool:
    try:
        float(value)
    except ValueError:
        return False
    return True


def _trim_trailing(row: list[str]) -> list[str]:
    row = list(row)
    while row and not row[-1].strip():
        row.pop()
    return row


def read_csv_rows(path: str | Path) -> list[list[str]]:
    """All rows of a CSV file (utf-8, BOM tolerated)."""
    try:
        with open(path, encoding="utf-8-sig", newline="") as f:
            return [row for row in csv.reader(f)]
    except (OSError, UnicodeDecodeError, csv.Error) as e:
        raise ImportFormatError(f"Cannot read {path}: {e}") from e


def parse_lesson_rows(rows: Iterable[list[str]], subject: str) -> list[LessonCatalogEntry]:
    entries: list[LessonCatalogEntry] = []
    for row in list(rows)[1:]:
        if len(row) < 2:
            continue
        number, name = _cell(row, 0), _cell(row, 1)
        if len(row) > 2 and _is_number(_cell(row, 1)):
            number, name = _cell(row, 1), _cell(row, 2)
        if number and name:
            entries.append(
                LessonCatalogEntry(subject=subject, lesson_number=number, lesson_name=name)
            )
    return entries


def parse_equipment_rows(
    rows: Iterable[list[str]], subject: str
) -> list[EquipmentCatalogEntry]:
    """Equipment entries, one per lesson number.

    Several rows for the same lesson are merged: names are joined with ", "
    (skipping a name already present) and the first quantity is kept.
    """
    merged: dict[str, EquipmentCatalogEntry] = {}
    for row in list(rows)[1:]:
        row = _trim_trailing(row)
        if len(row) < 2:
            continue
        number, name, quantity = _cell(row, 0), _cell(row, 1), _cell(row, 2)

        second, third = _cell(row, 1), _cell(row, 2)
        if len(row) >= 3 and len(second) > 5 and not _is_number(second) and not _is_number(third):
            # number, lesson name, equipment, quantity
            name, quantity = _cell(row, 2), _cell(row, 3)
            if not name:
                continue

        if not number or not name:
            continue
        existing = merged.get(number)
        if existing is None:
            merged[number] = EquipmentCatalogEntry(
                subject=subject,
                lesson_number=number,
                equipment_name=name,
                quantity=quantity or "1",
            )
        elif name not in existing.equipment_name:
            merged[number] = existing.model_copy(
                update={"equipment_name": f"{existing.equipment_name}, {name}"}
            )
    return list(merged.values())


def import_lesson_catalog(path: str | Path, subject: str) -> list[LessonCatalogEntry]:
    """Parse a lesson catalog CSV for ``subject``.

    Raises:
        ImportFormatError: If the file is unreadable or yields no entries.
    """
    entries = parse_lesson_rows(read_csv_rows(path), subject)
    if not entries:
        raise ImportFormatError(f"No lesson entries found in {path}")
    log.info("lesson_catalog_imported", path=str(path), subject=subject, entries=len(entries))
    return entries


def import_equipment_catalog(path: str | Path, subject: str) -> list[EquipmentCatalogEntry]:
    """Parse an equipment catalog CSV for ``subject``.

    Raises:
        ImportFormatError: If the file is unreadable or yields no entries.
    """
    entries = parse_equipment_rows(read_csv_rows(path), subject)
    if not entries:
        raise ImportFormatError(f"No equipment entries found in {path}")
    log.info("equipment_catalog_imported", path=str(path), subject=subject, entries=len(entries))
    return entries


def parse_timetable(payload: Any) -> list[TimetableSlot]:
    """Validate the timetable parser's output into slots.

    Accepts a list of slot objects, or an object with an "entries" list.
    Keys may be camelCase (dayOfWeek) or snake_case (day_of_week).

    Raises:
        ImportFormatError: If the payload does not describe timetable slots.
    """
    if isinstance(payload, dict) and "entries" in payload:
        payload = payload["entries"]
    if not isinstance(payload, list):
        raise ImportFormatError("Timetable must be a list of slots")

    normalized = []
    for item in payload:
        if not isinstance(item, dict):
            raise ImportFormatError(f"Timetable slot must be an object, got {type(item).__name__}")
        normalized.append({_TIMETABLE_KEYS.get(key, key): value for key, value in item.items()})

    try:
        return _TIMETABLE_ADAPTER.validate_python(normalized)
    except ValidationError as e:
        raise ImportFormatError(f"Invalid timetable slot: {e}") from e


def import_timetable(path: str | Path) -> list[TimetableSlot]:
    """Load timetable slots from a JSON file.

    Raises:
        ImportFormatError: If the file is unreadable, not JSON, or not slots.
    """
    try:
        with open(path, encoding="utf-8") as f:
            payload = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        raise ImportFormatError(f"Cannot read timetable {path}: {e}") from e
    slots = parse_timetable(payload)
    log.info("timetable_imported", path=str(path), slots=len(slots))
    return slots
