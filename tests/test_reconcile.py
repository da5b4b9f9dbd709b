from src.lessonlog.models import DayOfWeek, EquipmentRow, ScheduleRow
from src.lessonlog.reconcile import (
    has_week_data,
    merge_teacher_equipment,
    merge_teacher_schedule,
    replace_teacher_week,
    rows_for_teacher,
    rows_for_week,
)


def _row(teacher, week=1, period=1, subject="Toán", day=DayOfWeek.MONDAY):
    return ScheduleRow(week=week, day_of_week=day, period=period, subject=subject, teacher_name=teacher)


def test_merge_replaces_only_the_teachers_partition():
    b1, b2 = _row("B"), _row("B", week=2)
    store = [_row("A"), b1, _row("A", week=2), b2]
    updated = [_row("A", subject="Văn")]
    merged = merge_teacher_schedule(store, "A", updated)
    assert merged[:2] == [b1, b2]
    assert [r.subject for r in rows_for_teacher(merged, "A")] == ["Văn"]
    assert len(store) == 4


def test_merge_stamps_teacher_name_on_updated_rows():
    merged = merge_teacher_schedule([], "A", [_row(""), _row("Somebody else", period=2)])
    assert [r.teacher_name for r in merged] == ["A", "A"]


def test_merge_with_nothing_removes_the_teacher():
    store = [_row("A"), _row("B")]
    assert rows_for_teacher(merge_teacher_schedule(store, "A", []), "A") == []


def test_equipment_merge_is_teacher_scoped():
    other = EquipmentRow(week=1, day_of_week=DayOfWeek.MONDAY, period=1, teacher_name="B")
    mine = EquipmentRow(week=1, day_of_week=DayOfWeek.MONDAY, period=1, equipment_name="Loa")
    merged = merge_teacher_equipment([other], "A", [mine])
    assert merged[0] == other
    assert merged[1].teacher_name == "A" and merged[1].equipment_name == "Loa"


def test_replace_teacher_week_keeps_other_weeks():
    week1, week2, other = _row("A"), _row("A", week=2), _row("B")
    result = replace_teacher_week([week1, week2, other], "A", 1, [_row("A", subject="Tin")])
    assert result[:2] == [week2, other]
    assert rows_for_week(result, "A", 1)[0].subject == "Tin"


def test_has_week_data():
    rows = [_row("A", week=3)]
    assert has_week_data(rows, "A", 3)
    assert not has_week_data(rows, "A", 4)
    assert not has_week_data(rows, "B", 3)
