"""Teaching-log engine: weekly lesson records and equipment requests.

Expands a teacher's timetable template into dated, PPCT-numbered lesson rows,
keeps the equipment request sheet in step with them, and merges each
teacher's edits into the shared stores without touching other teachers' data.
"""

from src.lessonlog.catalog import build_equipment_index, build_lesson_index
from src.lessonlog.equipment import project_equipment
from src.lessonlog.generator import generate_week
from src.lessonlog.models import (
    DayOfWeek,
    EquipmentCatalogEntry,
    EquipmentRow,
    LessonCatalogEntry,
    ScheduleRow,
    TimetableSlot,
    WeekStatus,
    Workbook,
)
from src.lessonlog.reconcile import merge_teacher_equipment, merge_teacher_schedule

__all__ = [
    "DayOfWeek",
    "EquipmentCatalogEntry",
    "EquipmentRow",
    "LessonCatalogEntry",
    "ScheduleRow",
    "TimetableSlot",
    "WeekStatus",
    "Workbook",
    "build_equipment_index",
    "build_lesson_index",
    "generate_week",
    "merge_teacher_equipment",
    "merge_teacher_schedule",
    "project_equipment",
]
