"""Workbook-level synchronization engine.

Ties the generator, the equipment projector and the teacher-scoped merge
together around the active (teacher, week) in WorkbookSettings. Every
operation takes a Workbook snapshot and returns a new one; persisting it is
the caller's job.

Each (teacher, week) carries an explicit WeekStatus:

    EMPTY --auto_populate/apply_template--> GENERATED --edit--> EDITED
    any   --clear_*_week-->                 EMPTY
    any   --apply_template-->               GENERATED

auto_populate() only runs on a week with no rows for the teacher, so
re-entering a week never renumbers it. apply_template() is the one operation
that overwrites an edited week.
"""

from typing import Any, Sequence

from src.lessonlog.catalog import build_equipment_index, build_lesson_index
from src.lessonlog.dates import shift_week
from src.lessonlog.editing import (
    clear_equipment_week as _clear_equipment_rows,
    clear_schedule_week as _clear_schedule_rows,
    edit_equipment_cell as _edit_equipment_rows,
    edit_schedule_cell as _edit_schedule_rows,
)
from src.lessonlog.equipment import project_equipment
from src.lessonlog.generator import generate_week
from src.lessonlog.logging import get_logger
from src.lessonlog.models import (
    EquipmentRow,
    ScheduleRow,
    TimetableSlot,
    WeekState,
    WeekStatus,
    Workbook,
)
from src.lessonlog.reconcile import (
    has_week_data,
    merge_teacher_equipment,
    merge_teacher_schedule,
    replace_teacher_week,
    rows_for_teacher,
    rows_for_week,
)
from src.lessonlog.timetable import derive_pick_lists

log = get_logger(__name__)


# ---------------------------------------------------------------------------
# Views
# ---------------------------------------------------------------------------
def teacher_schedule(workbook: Workbook) -> list[ScheduleRow]:
    return rows_for_teacher(workbook.schedule, workbook.settings.teacher_name)


def teacher_equipment(workbook: Workbook) -> list[EquipmentRow]:
    return rows_for_teacher(workbook.equipment, workbook.settings.teacher_name)


def current_week_schedule(workbook: Workbook) -> list[ScheduleRow]:
    settings = workbook.settings
    return rows_for_week(workbook.schedule, settings.teacher_name, settings.current_week)


def current_week_equipment(workbook: Workbook) -> list[EquipmentRow]:
    settings = workbook.settings
    return rows_for_week(workbook.equipment, settings.teacher_name, settings.current_week)


# ---------------------------------------------------------------------------
# Week state
# ---------------------------------------------------------------------------
def get_week_status(workbook: Workbook, teacher_name: str, week: int) -> WeekStatus:
    """Recorded status of (teacher, week).

    Weeks with rows but no record (data from before states were kept) count
    as EDITED, since nothing says they still match the template.
    """
    for state in workbook.week_states:
        if state.teacher_name == teacher_name and state.week == week:
            return state.status
    if has_week_data(workbook.schedule, teacher_name, week):
        return WeekStatus.EDITED
    return WeekStatus.EMPTY


def _set_status(workbook: Workbook, status: WeekStatus) -> list[WeekState]:
    teacher = workbook.settings.teacher_name
    week = workbook.settings.current_week
    previous = get_week_status(workbook, teacher, week)
    states = [
        state
        for state in workbook.week_states
        if not (state.teacher_name == teacher and state.week == week)
    ]
    states.append(WeekState(teacher_name=teacher, week=week, status=status))
    if previous is not status:
        log.info(
            "week_status_changed",
            teacher=teacher,
            week=week,
            previous=previous.value,
            status=status.value,
        )
    return states


# ---------------------------------------------------------------------------
# Settings changes
# ---------------------------------------------------------------------------
def refresh_pick_lists(workbook: Workbook) -> Workbook:
    """Re-derive subjects/classes from the active teacher's timetable slots.

    The lists are left alone when the teacher has no slots.
    """
    lists = derive_pick_lists(workbook.timetable, workbook.settings.teacher_name)
    if lists is None:
        return workbook
    subjects, classes = lists
    settings = workbook.settings.model_copy(update={"subjects": subjects, "classes": classes})
    return workbook.model_copy(update={"settings": settings})


def select_teacher(workbook: Workbook, teacher_name: str) -> Workbook:
    """Make ``teacher_name`` active, refresh pick-lists, fill an empty week."""
    settings = workbook.settings.model_copy(update={"teacher_name": teacher_name.strip()})
    workbook = refresh_pick_lists(workbook.model_copy(update={"settings": settings}))
    return auto_populate(workbook)


def set_timetable(workbook: Workbook, slots: Sequence[TimetableSlot]) -> Workbook:
    """Replace the timetable template, refresh pick-lists, fill an empty week."""
    workbook = refresh_pick_lists(workbook.model_copy(update={"timetable": list(slots)}))
    log.info("timetable_replaced", slots=len(slots))
    return auto_populate(workbook)


def set_week_start(workbook: Workbook, week_start_date: str) -> Workbook:
    settings = workbook.settings.model_copy(update={"week_start_date": week_start_date})
    return workbook.model_copy(update={"settings": settings})


def change_week(workbook: Workbook, new_week: int) -> Workbook:
    """Move to ``new_week``; the start date moves 7 days per week travelled."""
    if new_week < 1:
        raise ValueError(f"Week must be >= 1, got {new_week}")
    settings = workbook.settings
    week, start = shift_week(settings.current_week, settings.week_start_date, new_week)
    log.info(
        "week_changed",
        previous=settings.current_week,
        week=week,
        week_start_date=start,
    )
    settings = settings.model_copy(update={"current_week": week, "week_start_date": start})
    return auto_populate(workbook.model_copy(update={"settings": settings}))


# ---------------------------------------------------------------------------
# Generation
# ---------------------------------------------------------------------------
def auto_populate(workbook: Workbook) -> Workbook:
    """Generate the active week from the template if the teacher has no rows there.

    A no-op when no teacher is active, the timetable is empty, the week
    already has rows for the teacher, or the teacher has no slots; it never
    replaces existing data with an empty week.
    """
    settings = workbook.settings
    teacher, week = settings.teacher_name, settings.current_week
    if not teacher or not workbook.timetable:
        return workbook
    if has_week_data(workbook.schedule, teacher, week):
        log.debug("auto_populate_skipped", teacher=teacher, week=week, reason="has_data")
        return workbook

    rows = generate_week(
        teacher,
        week,
        settings.week_start_date,
        workbook.timetable,
        workbook.schedule,
        build_lesson_index(workbook.lesson_catalog),
    )
    if not rows:
        return workbook

    leftover = [row for row in teacher_equipment(workbook) if row.week != week]
    projected = project_equipment(rows, leftover, build_equipment_index(workbook.equipment_catalog))

    log.info("week_auto_populated", teacher=teacher, week=week, rows=len(rows))
    return workbook.model_copy(
        update={
            "schedule": workbook.schedule + rows,
            "equipment": merge_teacher_equipment(workbook.equipment, teacher, projected),
            "week_states": _set_status(workbook, WeekStatus.GENERATED),
        }
    )


def apply_template(
    workbook: Workbook, slots: Sequence[TimetableSlot] | None = None
) -> Workbook:
    """Force-regenerate the active week from the template.

    Args:
        workbook: Current snapshot.
        slots: Explicit slots to apply instead of the stored timetable. If the
            first one names a teacher, that teacher becomes active. Slots
            without a teacher name are treated as the active teacher's.

    Returns:
        Snapshot whose (teacher, week) slice of the schedule is replaced by
        freshly numbered rows, with that week's equipment re-projected. Left
        unchanged when generation yields nothing.
    """
    if slots and slots[0].teacher_name.strip():
        first = slots[0].teacher_name.strip()
        if first != workbook.settings.teacher_name:
            settings = workbook.settings.model_copy(update={"teacher_name": first})
            workbook = refresh_pick_lists(workbook.model_copy(update={"settings": settings}))

    settings = workbook.settings
    teacher, week = settings.teacher_name, settings.current_week
    if not teacher:
        log.warning("apply_template_without_teacher", week=week)
        return workbook

    if slots:
        source = [
            slot if slot.teacher_name.strip() else slot.model_copy(update={"teacher_name": teacher})
            for slot in slots
        ]
    else:
        source = workbook.timetable

    rows = generate_week(
        teacher,
        week,
        settings.week_start_date,
        source,
        workbook.schedule,
        build_lesson_index(workbook.lesson_catalog),
    )
    if not rows:
        log.warning("apply_template_no_rows", teacher=teacher, week=week)
        return workbook

    new_keys = {row.slot_key for row in rows}
    leftover = [
        row
        for row in teacher_equipment(workbook)
        if row.week != week or row.slot_key in new_keys
    ]
    projected = project_equipment(rows, leftover, build_equipment_index(workbook.equipment_catalog))

    log.info("template_applied", teacher=teacher, week=week, rows=len(rows))
    return workbook.model_copy(
        update={
            "schedule": replace_teacher_week(workbook.schedule, teacher, week, rows),
            "equipment": merge_teacher_equipment(workbook.equipment, teacher, projected),
            "week_states": _set_status(workbook, WeekStatus.GENERATED),
        }
    )


# ---------------------------------------------------------------------------
# Edits
# ---------------------------------------------------------------------------
def _commit_schedule(
    workbook: Workbook, teacher_rows: list[ScheduleRow], status: WeekStatus
) -> Workbook:
    settings = workbook.settings
    teacher, week = settings.teacher_name, settings.current_week

    schedule = merge_teacher_schedule(workbook.schedule, teacher, teacher_rows)
    week_rows = [row for row in teacher_rows if row.week == week]
    projected = project_equipment(
        week_rows,
        teacher_equipment(workbook),
        build_equipment_index(workbook.equipment_catalog),
    )
    log.info(
        "teacher_schedule_merged",
        teacher=teacher,
        week=week,
        teacher_rows=len(teacher_rows),
    )
    return workbook.model_copy(
        update={
            "schedule": schedule,
            "equipment": merge_teacher_equipment(workbook.equipment, teacher, projected),
            "week_states": _set_status(workbook, status),
        }
    )


def update_teacher_schedule(workbook: Workbook, teacher_rows: list[ScheduleRow]) -> Workbook:
    """Store the active teacher's complete schedule and re-project equipment.

    ``teacher_rows`` replaces every schedule row of the teacher (all weeks).
    Equipment is re-projected for the current week only.
    """
    return _commit_schedule(workbook, teacher_rows, WeekStatus.EDITED)


def update_teacher_equipment(workbook: Workbook, teacher_rows: list[EquipmentRow]) -> Workbook:
    """Store the active teacher's complete equipment set as given."""
    teacher = workbook.settings.teacher_name
    log.info("teacher_equipment_merged", teacher=teacher, teacher_rows=len(teacher_rows))
    return workbook.model_copy(
        update={
            "equipment": merge_teacher_equipment(workbook.equipment, teacher, teacher_rows),
            "week_states": _set_status(workbook, WeekStatus.EDITED),
        }
    )


def edit_schedule_cell(
    workbook: Workbook, day_index: int, period: int, field: str, value: Any
) -> Workbook:
    """Edit one cell of the active teacher's current week."""
    settings = workbook.settings
    rows = _edit_schedule_rows(
        teacher_schedule(workbook),
        teacher_name=settings.teacher_name,
        week=settings.current_week,
        week_start_date=settings.week_start_date,
        day_index=day_index,
        period=period,
        field=field,
        value=value,
        lesson_index=build_lesson_index(workbook.lesson_catalog),
    )
    return update_teacher_schedule(workbook, rows)


def edit_equipment_cell(
    workbook: Workbook, day_index: int, period: int, field: str, value: Any
) -> Workbook:
    """Edit one cell of the active teacher's current equipment sheet."""
    settings = workbook.settings
    rows = _edit_equipment_rows(
        teacher_equipment(workbook),
        teacher_name=settings.teacher_name,
        week=settings.current_week,
        week_start_date=settings.week_start_date,
        day_index=day_index,
        period=period,
        field=field,
        value=value,
        equipment_index=build_equipment_index(workbook.equipment_catalog),
    )
    return update_teacher_equipment(workbook, rows)


def clear_schedule_week(workbook: Workbook) -> Workbook:
    """Blank the current week's lessons (notes kept); equipment follows."""
    rows = _clear_schedule_rows(teacher_schedule(workbook), workbook.settings.current_week)
    return _commit_schedule(workbook, rows, WeekStatus.EMPTY)


def clear_equipment_week(workbook: Workbook) -> Workbook:
    """Drop the active teacher's equipment rows of the current week."""
    settings = workbook.settings
    rows = _clear_equipment_rows(teacher_equipment(workbook), settings.current_week)
    workbook = workbook.model_copy(
        update={"equipment": merge_teacher_equipment(workbook.equipment, settings.teacher_name, rows)}
    )
    log.info("equipment_week_cleared", teacher=settings.teacher_name, week=settings.current_week)
    return workbook
