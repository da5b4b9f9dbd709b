from src.lessonlog.catalog import (
    EquipmentMatch,
    build_equipment_index,
    build_lesson_index,
    catalog_key,
    lookup_equipment,
    lookup_lesson_name,
    replace_subject_entries,
)
from src.lessonlog.models import EquipmentCatalogEntry, LessonCatalogEntry


def _lesson(subject, number, name):
    return LessonCatalogEntry(subject=subject, lesson_number=number, lesson_name=name)


def _equipment(subject, number, name, quantity="1"):
    return EquipmentCatalogEntry(
        subject=subject, lesson_number=number, equipment_name=name, quantity=quantity
    )


def test_catalog_key_requires_subject_and_number():
    assert catalog_key("Toán Học", " 12 ") == ("toánhọc", "12")
    assert catalog_key("", "1") is None
    assert catalog_key("Toán", "") is None
    assert catalog_key(None, 3) is None


def test_lesson_lookup_ignores_case_and_whitespace():
    index = build_lesson_index([_lesson("Toán", "1", "Bài 1: Tập hợp")])
    assert lookup_lesson_name(index, " toán ", 1) == "Bài 1: Tập hợp"
    assert lookup_lesson_name(index, "TO ÁN", "1") == "Bài 1: Tập hợp"
    assert lookup_lesson_name(index, "Toán", "2") is None
    assert lookup_lesson_name(index, "", "1") is None


def test_lesson_index_first_entry_wins():
    index = build_lesson_index([_lesson("Toán", "1", "first"), _lesson("Toán", "1", "second")])
    assert lookup_lesson_name(index, "Toán", "1") == "first"


def test_lesson_index_skips_incomplete_entries():
    index = build_lesson_index([_lesson("", "1", "no subject"), _lesson("Toán", "", "no number")])
    assert index == {}


def test_equipment_merges_names_and_keeps_first_quantity():
    index = build_equipment_index(
        [
            _equipment("Toán", "1", "Máy chiếu", "1"),
            _equipment("Toán", "1", "Thước kẻ", "5"),
            _equipment("Toán", "1", "Máy chiếu", "2"),
        ]
    )
    assert lookup_equipment(index, "toán", "1") == EquipmentMatch("Máy chiếu, Thước kẻ", "1")


def test_equipment_skips_name_already_contained():
    index = build_equipment_index(
        [_equipment("Lý", "4", "Bộ thí nghiệm điện"), _equipment("Lý", "4", "thí nghiệm")]
    )
    assert lookup_equipment(index, "Lý", "4").equipment_name == "Bộ thí nghiệm điện"


def test_equipment_lookup_miss():
    index = build_equipment_index([_equipment("Toán", "1", "Máy chiếu")])
    assert lookup_equipment(index, "Toán", "2") is None
    assert lookup_equipment(index, "Văn", "1") is None


def test_replace_subject_entries_keeps_other_subjects():
    catalog = [_lesson("Toán", "1", "old"), _lesson("Văn", "1", "văn"), _lesson("toán", "2", "old2")]
    updated = replace_subject_entries(catalog, "Toán", [_lesson("", "1", "new")])
    assert [(e.subject, e.lesson_name) for e in updated] == [("Văn", "văn"), ("Toán", "new")]
    assert [e.lesson_name for e in catalog] == ["old", "văn", "old2"]
