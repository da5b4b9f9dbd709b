"""Lookup tables over the lesson and equipment catalogs.

Both catalogs share one key space: a normalized subject (lowercased, all
whitespace removed) joined with the trimmed lesson number. A miss is a normal
outcome and returns None.
"""

from dataclasses import dataclass
from typing import Iterable, TypeVar

from src.lessonlog.logging import get_logger
from src.lessonlog.models import (
    EquipmentCatalogEntry,
    LessonCatalogEntry,
    normalize_text,
)

log = get_logger(__name__)

CatalogKey = tuple[str, str]

_Entry = TypeVar("_Entry", LessonCatalogEntry, EquipmentCatalogEntry)


@dataclass(frozen=True)
class EquipmentMatch:
    equipment_name: str
    quantity: str


def catalog_key(subject: str | None, lesson_number: str | int | None) -> CatalogKey | None:
    """Build the lookup key, or None when subject or number is empty."""
    subject_key = normalize_text(subject or "")
    number_key = "" if lesson_number is None else str(lesson_number).strip()
    if not subject_key or not number_key:
        return None
    return (subject_key, number_key)


def build_lesson_index(entries: Iterable[LessonCatalogEntry]) -> dict[CatalogKey, str]:
    """Map (subject, lesson number) -> lesson name. First entry per key wins."""
    index: dict[CatalogKey, str] = {}
    for entry in entries:
        key = catalog_key(entry.subject, entry.lesson_number)
        if key is None or key in index:
            continue
        index[key] = entry.lesson_name
    log.debug("lesson_index_built", keys=len(index))
    return index


def build_equipment_index(
    entries: Iterable[EquipmentCatalogEntry],
) -> dict[CatalogKey, EquipmentMatch]:
    """Map (subject, lesson number) -> merged equipment for that lesson.

    Names of duplicate keys are joined with ", " unless the new name already
    occurs in the accumulated one. The first quantity seen is kept.
    """
    index: dict[CatalogKey, EquipmentMatch] = {}
    for entry in entries:
        key = catalog_key(entry.subject, entry.lesson_number)
        if key is None:
            continue
        name = entry.equipment_name.strip()
        existing = index.get(key)
        if existing is None:
            index[key] = EquipmentMatch(equipment_name=name, quantity=entry.quantity.strip())
        elif name and name not in existing.equipment_name:
            merged = f"{existing.equipment_name}, {name}" if existing.equipment_name else name
            index[key] = EquipmentMatch(equipment_name=merged, quantity=existing.quantity)
    log.debug("equipment_index_built", keys=len(index))
    return index


def lookup_lesson_name(
    index: dict[CatalogKey, str], subject: str | None, lesson_number: str | int | None
) -> str | None:
    key = catalog_key(subject, lesson_number)
    if key is None:
        return None
    return index.get(key)


def lookup_equipment(
    index: dict[CatalogKey, EquipmentMatch],
    subject: str | None,
    lesson_number: str | int | None,
) -> EquipmentMatch | None:
    key = catalog_key(subject, lesson_number)
    if key is None:
        return None
    return index.get(key)


def replace_subject_entries(
    catalog: list[_Entry], subject: str, new_entries: Iterable[_Entry]
) -> list[_Entry]:
    """Swap out every entry of ``subject`` for ``new_entries``.

    Re-importing a subject's catalog replaces it wholesale; entries of other
    subjects are kept in their original order. New entries are tagged with
    ``subject``.
    """
    target = normalize_text(subject)
    kept = [entry for entry in catalog if normalize_text(entry.subject) != target]
    tagged = [entry.model_copy(update={"subject": subject}) for entry in new_entries]
    log.info(
        "catalog_subject_replaced",
        subject=subject,
        removed=len(catalog) - len(kept),
        added=len(tagged),
    )
    return kept + tagged
