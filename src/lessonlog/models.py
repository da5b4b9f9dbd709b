"""Pydantic models for the teaching log.

All data structures use Pydantic v2 for validation, serialization, and type
safety. Row models are frozen: the engine never edits a row in place, it
builds a new one with model_copy(update=...).
"""

import re
import unicodedata
import uuid
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator


def new_row_id() -> str:
    return str(uuid.uuid4())


def normalize_text(value: str) -> str:
    """Lowercase, NFC-compose and drop all whitespace ("Thứ  2" -> "thứ2")."""
    composed = unicodedata.normalize("NFC", value or "")
    return re.sub(r"\s+", "", composed).lower()


class DayOfWeek(str, Enum):
    """The six teaching days, Monday (index 0) to Saturday (index 5)."""

    MONDAY = "Thứ 2"
    TUESDAY = "Thứ 3"
    WEDNESDAY = "Thứ 4"
    THURSDAY = "Thứ 5"
    FRIDAY = "Thứ 6"
    SATURDAY = "Thứ 7"

    @property
    def position(self) -> int:
        return list(DayOfWeek).index(self)

    @property
    def number(self) -> str:
        """Day number printed on exported sheets ("2".."7")."""
        return self.value.split()[-1]

    @classmethod
    def from_index(cls, index: int) -> "DayOfWeek":
        days = list(cls)
        if not 0 <= index < len(days):
            raise ValueError(f"Day index {index} outside 0..{len(days) - 1}")
        return days[index]

    @classmethod
    def parse(cls, label: str) -> "DayOfWeek | None":
        """Map a free-text day label to a day, or None if unrecognized.

        Accepts the canonical labels in any case/spacing ("thu 2" is not
        accepted, "THỨ 2" and "Thứ2" are), labels that contain a canonical
        label ("Thứ 2 (sáng)"), the short forms "T2".."T7" and English day
        names.
        """
        if isinstance(label, cls):
            return label
        key = normalize_text(str(label or ""))
        if not key:
            return None
        alias = _DAY_ALIASES.get(key)
        if alias is not None:
            return alias
        for day in cls:
            if normalize_text(day.value) in key:
                return day
        return None


_DAY_ALIASES: dict[str, DayOfWeek] = {}
for _day, _english in zip(
    DayOfWeek,
    ["monday", "tuesday", "wednesday", "thursday", "friday", "saturday"],
):
    _DAY_ALIASES[normalize_text(_day.value)] = _day
    _DAY_ALIASES[f"t{_day.number}"] = _day
    _DAY_ALIASES[_english] = _day
    _DAY_ALIASES[_english[:3]] = _day


class TimetableSlot(BaseModel):
    """One recurring weekly slot of the timetable template.

    day_of_week is kept as the raw label produced by the timetable parser;
    the generator resolves it with DayOfWeek.parse() and drops unknown days.
    """

    model_config = ConfigDict(frozen=True)

    day_of_week: str
    period: int = Field(ge=1, le=7)  # 1-4 morning, 5-7 afternoon
    subject: str = ""
    class_name: str = ""
    teacher_name: str = ""


class LessonCatalogEntry(BaseModel):
    """Curriculum entry: (subject, lesson number) -> lesson title."""

    model_config = ConfigDict(frozen=True)

    subject: str = ""
    lesson_number: str
    lesson_name: str

    @field_validator("lesson_number", mode="before")
    @classmethod
    def _number_as_text(cls, value):
        return "" if value is None else str(value)


class EquipmentCatalogEntry(BaseModel):
    """Equipment required for (subject, lesson number)."""

    model_config = ConfigDict(frozen=True)

    subject: str = ""
    lesson_number: str
    equipment_name: str
    quantity: str = "1"

    @field_validator("lesson_number", "quantity", mode="before")
    @classmethod
    def _as_text(cls, value):
        return "" if value is None else str(value)


class ScheduleRow(BaseModel):
    """One dated lesson of a teacher's week.

    Natural key: (teacher_name, week, day_of_week, period).
    """

    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=new_row_id)
    week: int = Field(ge=1)
    day_of_week: DayOfWeek
    date: str = ""  # YYYY-MM-DD, empty when the week start was unparseable
    period: int = Field(ge=1, le=7)  # 1-4 morning, 5-7 afternoon
    subject: str = ""
    class_name: str = ""
    ppct_number: str = ""
    lesson_name: str = ""
    notes: str = ""
    teacher_name: str = ""

    @property
    def slot_key(self) -> tuple[int, DayOfWeek, int]:
        return (self.week, self.day_of_week, self.period)


class EquipmentRow(BaseModel):
    """Equipment request for one lesson, keyed like ScheduleRow."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=new_row_id)
    week: int = Field(ge=1)
    day_of_week: DayOfWeek
    date: str = ""
    period: int = Field(ge=1, le=7)  # 1-4 morning, 5-7 afternoon
    subject: str = ""
    class_name: str = ""
    ppct_number: str = ""
    equipment_name: str = ""
    quantity: str = ""
    teacher_name: str = ""

    @property
    def slot_key(self) -> tuple[int, DayOfWeek, int]:
        return (self.week, self.day_of_week, self.period)


class WeekStatus(str, Enum):
    """Lifecycle of one (teacher, week): EMPTY -> GENERATED -> EDITED."""

    EMPTY = "empty"
    GENERATED = "generated"
    EDITED = "edited"


class WeekState(BaseModel):
    model_config = ConfigDict(frozen=True)

    teacher_name: str
    week: int
    status: WeekStatus


class WorkbookSettings(BaseModel):
    """Scalar settings persisted next to the data sets."""

    current_week: int = Field(default=1, ge=1)
    week_start_date: str = ""
    teacher_name: str = ""
    subjects: list[str] = Field(default_factory=list)
    classes: list[str] = Field(default_factory=list)


class Workbook(BaseModel):
    """Snapshot of every data set the engine works on.

    All collections are shared across teachers; teacher_name is the only
    partition. Engine operations return a new Workbook.
    """

    timetable: list[TimetableSlot] = Field(default_factory=list)
    schedule: list[ScheduleRow] = Field(default_factory=list)
    equipment: list[EquipmentRow] = Field(default_factory=list)
    lesson_catalog: list[LessonCatalogEntry] = Field(default_factory=list)
    equipment_catalog: list[EquipmentCatalogEntry] = Field(default_factory=list)
    settings: WorkbookSettings = Field(default_factory=WorkbookSettings)
    week_states: list[WeekState] = Field(default_factory=list)
