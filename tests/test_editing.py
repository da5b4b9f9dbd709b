import pytest

from src.lessonlog.catalog import build_equipment_index, build_lesson_index
from src.lessonlog.editing import (
    clear_equipment_week,
    clear_schedule_week,
    edit_equipment_cell,
    edit_schedule_cell,
)
from src.lessonlog.models import (
    DayOfWeek,
    EquipmentCatalogEntry,
    EquipmentRow,
    LessonCatalogEntry,
    ScheduleRow,
)

TEACHER = "Nguyễn Văn A"
START = "2024-09-02"

LESSONS = build_lesson_index(
    [
        LessonCatalogEntry(subject="Toán", lesson_number="1", lesson_name="Tập hợp"),
        LessonCatalogEntry(subject="Toán", lesson_number="2", lesson_name="Phần tử"),
        LessonCatalogEntry(subject="Tin", lesson_number="2", lesson_name="Thông tin"),
    ]
)
EQUIPMENT = build_equipment_index(
    [EquipmentCatalogEntry(subject="Toán", lesson_number="2", equipment_name="Máy chiếu", quantity="")]
)


def _edit(rows, field, value, day_index=0, period=1, week=1):
    return edit_schedule_cell(
        rows,
        teacher_name=TEACHER,
        week=week,
        week_start_date=START,
        day_index=day_index,
        period=period,
        field=field,
        value=value,
        lesson_index=LESSONS,
    )


def _edit_equipment(rows, field, value, day_index=0, period=1):
    return edit_equipment_cell(
        rows,
        teacher_name=TEACHER,
        week=1,
        week_start_date=START,
        day_index=day_index,
        period=period,
        field=field,
        value=value,
        equipment_index=EQUIPMENT,
    )


def _row(**fields):
    base = dict(week=1, day_of_week=DayOfWeek.MONDAY, period=1, teacher_name=TEACHER)
    base.update(fields)
    return ScheduleRow(**base)


def test_editing_empty_cell_creates_row():
    rows = _edit([], "subject", "Toán", day_index=2, period=3)
    assert len(rows) == 1
    row = rows[0]
    assert (row.day_of_week, row.period, row.subject) == (DayOfWeek.WEDNESDAY, 3, "Toán")
    assert row.date == "2024-09-04"
    assert row.teacher_name == TEACHER


def test_ppct_change_looks_up_lesson_name():
    rows = _edit([_row(subject="Toán", ppct_number="1", lesson_name="Tập hợp")], "ppct_number", "2")
    assert rows[0].lesson_name == "Phần tử"


def test_subject_change_looks_up_lesson_name():
    rows = _edit([_row(subject="Toán", ppct_number="2", lesson_name="Phần tử")], "subject", "Tin")
    assert rows[0].lesson_name == "Thông tin"


def test_lookup_miss_keeps_lesson_name():
    rows = _edit([_row(subject="Toán", ppct_number="1", lesson_name="Tập hợp")], "ppct_number", "99")
    assert rows[0].lesson_name == "Tập hợp"


def test_blank_ppct_clears_lesson_name():
    rows = _edit([_row(subject="Toán", ppct_number="1", lesson_name="Tập hợp")], "ppct_number", " ")
    assert rows[0].lesson_name == ""


def test_notes_edit_resyncs_date_and_teacher():
    stale = _row(date="2020-01-01", teacher_name="", notes="")
    rows = _edit([stale], "notes", "Dự giờ")
    assert (rows[0].notes, rows[0].date, rows[0].teacher_name) == ("Dự giờ", START, TEACHER)
    assert rows[0].id == stale.id


def test_only_the_edited_row_changes():
    other = _row(period=2, subject="Toán", ppct_number="1", lesson_name="stale")
    rows = _edit([_row(), other], "subject", "Toán")
    assert rows[1] is other


def test_unknown_field_and_day_rejected():
    with pytest.raises(ValueError):
        _edit([], "teacher_name", "B")
    with pytest.raises(ValueError):
        _edit([], "notes", "x", day_index=6)
    with pytest.raises(ValueError):
        _edit_equipment([], "lesson_name", "x")


def test_equipment_name_edit_applies_quantity_rule():
    rows = _edit_equipment([], "equipment_name", "Bảng phụ")
    assert (rows[0].equipment_name, rows[0].quantity) == ("Bảng phụ", "1")
    rows = _edit_equipment(rows, "quantity", "3")
    rows = _edit_equipment(rows, "equipment_name", "Loa")
    assert rows[0].quantity == "3"
    rows = _edit_equipment(rows, "equipment_name", "")
    assert rows[0].quantity == ""


def test_equipment_ppct_edit_applies_catalog_match():
    row = EquipmentRow(week=1, day_of_week=DayOfWeek.MONDAY, period=1, subject="Toán", ppct_number="1")
    rows = _edit_equipment([row], "ppct_number", "2")
    assert (rows[0].equipment_name, rows[0].quantity) == ("Máy chiếu", "1")


def test_clear_schedule_week_keeps_notes_and_other_weeks():
    week1 = _row(subject="Toán", class_name="6A", ppct_number="3", lesson_name="x", notes="keep")
    week2 = _row(week=2, subject="Toán")
    rows = clear_schedule_week([week1, week2], 1)
    assert (rows[0].subject, rows[0].class_name, rows[0].ppct_number, rows[0].lesson_name) == ("", "", "", "")
    assert rows[0].notes == "keep"
    assert rows[1] is week2


def test_clear_equipment_week_drops_rows():
    rows = [
        EquipmentRow(week=1, day_of_week=DayOfWeek.MONDAY, period=1),
        EquipmentRow(week=2, day_of_week=DayOfWeek.MONDAY, period=1),
    ]
    assert [r.week for r in clear_equipment_week(rows, 1)] == [2]


def test_quantity_without_equipment_name_is_not_stored():
    rows = _edit_equipment([], "quantity", "5")
    assert (rows[0].equipment_name, rows[0].quantity) == ("", "")

    rows = _edit_equipment(rows, "equipment_name", "Máy chiếu")
    rows = _edit_equipment(rows, "quantity", "5")
    assert rows[0].quantity == "5"


def test_new_cell_outside_the_period_grid_is_rejected():
    with pytest.raises(ValueError):
        _edit([], "subject", "Toán", period=8)
