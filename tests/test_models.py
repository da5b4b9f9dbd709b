import unicodedata

import pytest
from pydantic import ValidationError

from src.lessonlog.models import (
    DayOfWeek,
    EquipmentCatalogEntry,
    EquipmentRow,
    LessonCatalogEntry,
    ScheduleRow,
    TimetableSlot,
    normalize_text,
)


def test_day_positions_and_numbers():
    assert [day.position for day in DayOfWeek] == [0, 1, 2, 3, 4, 5]
    assert DayOfWeek.MONDAY.number == "2"
    assert DayOfWeek.SATURDAY.number == "7"
    assert DayOfWeek.from_index(4) is DayOfWeek.FRIDAY


@pytest.mark.parametrize("index", [-1, 6])
def test_from_index_rejects_out_of_range(index):
    with pytest.raises(ValueError):
        DayOfWeek.from_index(index)


@pytest.mark.parametrize(
    "label, expected",
    [
        ("Thứ 2", DayOfWeek.MONDAY),
        ("  THỨ 3 ", DayOfWeek.TUESDAY),
        ("Thứ4", DayOfWeek.WEDNESDAY),
        (unicodedata.normalize("NFD", "Thứ 5"), DayOfWeek.THURSDAY),
        ("Thứ 6 (sáng)", DayOfWeek.FRIDAY),
        ("T7", DayOfWeek.SATURDAY),
        ("monday", DayOfWeek.MONDAY),
        ("Tue", DayOfWeek.TUESDAY),
    ],
)
def test_parse_day_labels(label, expected):
    assert DayOfWeek.parse(label) is expected


@pytest.mark.parametrize("label", ["", "Chủ nhật", "Thứ 8", "sunday", None])
def test_parse_unknown_day_is_none(label):
    assert DayOfWeek.parse(label) is None


def test_normalize_text_drops_whitespace_and_case():
    assert normalize_text("  Toán  Học ") == "toánhọc"
    assert normalize_text(None) == ""


def test_catalog_numbers_are_text():
    assert LessonCatalogEntry(lesson_number=12, lesson_name="x").lesson_number == "12"
    assert EquipmentCatalogEntry(lesson_number=3, equipment_name="y", quantity=2).quantity == "2"


def test_schedule_rows_are_frozen_and_week_positive():
    row = ScheduleRow(week=1, day_of_week=DayOfWeek.MONDAY, period=1)
    with pytest.raises(ValidationError):
        row.subject = "Toán"
    with pytest.raises(ValidationError):
        ScheduleRow(week=0, day_of_week=DayOfWeek.MONDAY, period=1)


def test_rows_get_distinct_ids():
    first = ScheduleRow(week=1, day_of_week="Thứ 2", period=1)
    second = ScheduleRow(week=1, day_of_week="Thứ 2", period=1)
    assert first.id != second.id
    assert first.day_of_week is DayOfWeek.MONDAY


@pytest.mark.parametrize("period", [0, 8])
def test_period_must_be_on_the_grid(period):
    with pytest.raises(ValidationError):
        TimetableSlot(day_of_week="Thứ 2", period=period)
    with pytest.raises(ValidationError):
        ScheduleRow(week=1, day_of_week=DayOfWeek.MONDAY, period=period)
    with pytest.raises(ValidationError):
        EquipmentRow(week=1, day_of_week=DayOfWeek.MONDAY, period=period)
