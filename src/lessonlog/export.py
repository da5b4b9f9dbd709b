"""Word (.docx) export of one teacher-week.

Renders the printable grid used by schools for the weekly teaching log and
the equipment request sheet: six days, seven periods each (periods 1-4 are the
morning session, 5-7 the afternoon session printed as 1-3).

Grid columns:
    day/date | session | period | subject | class | PPCT | lesson-or-equipment | notes-or-quantity
"""

from io import BytesIO
from pathlib import Path
from typing import BinaryIO, Iterable

from docx import Document
from docx.enum.section import WD_ORIENT
from docx.enum.table import WD_TABLE_ALIGNMENT
from docx.enum.text import WD_ALIGN_PARAGRAPH
from docx.shared import Cm, Pt

from src.lessonlog.dates import day_index_to_date, format_date_vn, week_end_date
from src.lessonlog.equipment import normalize_quantity
from src.lessonlog.logging import get_logger
from src.lessonlog.models import DayOfWeek, EquipmentRow, ScheduleRow

log = get_logger(__name__)

PERIODS = range(1, 8)
MORNING_PERIODS = 4

SCHEDULE_TITLE = "LỊCH BÁO GIẢNG"
EQUIPMENT_TITLE = "PHIẾU ĐĂNG KÝ SỬ DỤNG THIẾT BỊ"

SCHEDULE_HEADERS = ["Thứ / Ngày", "Buổi", "Tiết", "Môn", "Lớp", "PPCT", "Tên Bài Dạy", "Ghi Chú"]
EQUIPMENT_HEADERS = ["Thứ / Ngày", "Buổi", "Tiết", "Môn", "Lớp", "PPCT", "Tên Thiết Bị", "Số Lượng"]

SCHEDULE_SIGNATURES = ["NGƯỜI LẬP BIỂU", "DUYỆT CỦA BAN GIÁM HIỆU"]
EQUIPMENT_SIGNATURES = ["NGƯỜI LẬP BIỂU", "CÁN BỘ TV - TB", "DUYỆT CỦA BAN GIÁM HIỆU"]

BLANK_NAME = "." * 48
HEADER_ROWS = 1


def period_label(period: int) -> str:
    """Period number as printed: 1-4 unchanged, 5-7 restart at 1."""
    if period <= MORNING_PERIODS:
        return str(period)
    return str(period - MORNING_PERIODS)


def session_label(period: int) -> str:
    return "SÁNG" if period <= MORNING_PERIODS else "CHIỀU"


def grid_row_index(day: DayOfWeek, period: int) -> int:
    """Table row holding (day, period), header included."""
    return HEADER_ROWS + day.position * len(PERIODS) + (period - 1)


def _schedule_cells(row: ScheduleRow) -> list[str]:
    return [row.subject, row.class_name, row.ppct_number, row.lesson_name, row.notes]


def _equipment_cells(row: EquipmentRow) -> list[str]:
    return [
        row.subject,
        row.class_name,
        row.ppct_number,
        row.equipment_name,
        normalize_quantity(row.equipment_name, row.quantity),
    ]


def _set_cell(cell, text: str, *, bold: bool = False, center: bool = True, size: int = 12) -> None:
    cell.text = ""
    paragraph = cell.paragraphs[0]
    if center:
        paragraph.alignment = WD_ALIGN_PARAGRAPH.CENTER
    run = paragraph.add_run(text)
    run.bold = bold
    run.font.size = Pt(size)


def _landscape(document) -> None:
    section = document.sections[0]
    section.orientation = WD_ORIENT.LANDSCAPE
    section.page_width, section.page_height = section.page_height, section.page_width
    section.top_margin = Cm(2)
    section.bottom_margin = Cm(2)
    section.left_margin = Cm(2)
    section.right_margin = Cm(1)


def _heading(document, text: str, *, size: int, bold: bool = True, italic: bool = False) -> None:
    paragraph = document.add_paragraph()
    paragraph.alignment = WD_ALIGN_PARAGRAPH.CENTER
    run = paragraph.add_run(text)
    run.bold = bold
    run.italic = italic
    run.font.size = Pt(size)


def _build_document(
    *,
    title: str,
    headers: list[str],
    signatures: list[str],
    cells_by_key: dict[tuple[DayOfWeek, int], list[str]],
    week: int,
    week_start_date: str,
    teacher_name: str,
):
    document = Document()
    _landscape(document)

    _heading(document, f"{title} TUẦN {week}", size=16)
    start_label = format_date_vn(week_start_date)
    end_label = format_date_vn(week_end_date(week_start_date))
    _heading(
        document,
        f"(Từ ngày {start_label} đến ngày {end_label})",
        size=12,
        bold=False,
        italic=True,
    )

    days = list(DayOfWeek)
    table = document.add_table(rows=HEADER_ROWS + len(days) * len(PERIODS), cols=len(headers))
    table.style = "Table Grid"
    table.alignment = WD_TABLE_ALIGNMENT.CENTER

    for column, header in enumerate(headers):
        _set_cell(table.cell(0, column), header, bold=True, size=14)

    for day in days:
        first = grid_row_index(day, 1)
        last = grid_row_index(day, len(PERIODS))
        afternoon = grid_row_index(day, MORNING_PERIODS + 1)

        day_cell = table.cell(first, 0).merge(table.cell(last, 0))
        _set_cell(day_cell, f"{day.number}\n{day_index_to_date(week_start_date, day.position)}", bold=True)

        morning_cell = table.cell(first, 1).merge(table.cell(afternoon - 1, 1))
        _set_cell(morning_cell, session_label(1), bold=True)
        afternoon_cell = table.cell(afternoon, 1).merge(table.cell(last, 1))
        _set_cell(afternoon_cell, session_label(MORNING_PERIODS + 1), bold=True)

        for period in PERIODS:
            row_index = grid_row_index(day, period)
            _set_cell(table.cell(row_index, 2), period_label(period), bold=True, size=14)
            values = cells_by_key.get((day, period), ["", "", "", "", ""])
            for offset, value in enumerate(values):
                _set_cell(table.cell(row_index, 3 + offset), value, center=offset in (1, 2, 4), size=14)

    document.add_paragraph()
    footer = document.add_table(rows=1, cols=len(signatures))
    for column, signature in enumerate(signatures):
        cell = footer.cell(0, column)
        _set_cell(cell, signature, bold=True)
        note = "(Ký và đóng dấu)" if "GIÁM HIỆU" in signature else "(Ký và ghi rõ họ tên)"
        cell.add_paragraph(note).alignment = WD_ALIGN_PARAGRAPH.CENTER
        cell.add_paragraph("\n\n")
        name = (teacher_name or BLANK_NAME) if column == 0 else BLANK_NAME
        cell.add_paragraph(name).alignment = WD_ALIGN_PARAGRAPH.CENTER

    return document


def _save(document, target: str | Path | BinaryIO | None) -> bytes | Path | None:
    if target is None:
        buffer = BytesIO()
        document.save(buffer)
        return buffer.getvalue()
    if isinstance(target, (str, Path)):
        path = Path(target)
        path.parent.mkdir(parents=True, exist_ok=True)
        document.save(str(path))
        return path
    document.save(target)
    return None


def export_schedule_docx(
    rows: Iterable[ScheduleRow],
    *,
    week: int,
    week_start_date: str,
    teacher_name: str = "",
    target: str | Path | BinaryIO | None = None,
) -> bytes | Path | None:
    """Render the teaching log of ``week``.

    Args:
        rows: Schedule rows; only those of ``week`` are printed.
        week: Week number shown in the title.
        week_start_date: ISO date of the week's Monday.
        teacher_name: Printed under the first signature.
        target: File path or binary stream; None returns the document bytes.

    Returns:
        The document bytes when ``target`` is None, the written path for a
        file target, None for a stream.
    """
    cells = {
        (row.day_of_week, row.period): _schedule_cells(row)
        for row in rows
        if row.week == week
    }
    document = _build_document(
        title=SCHEDULE_TITLE,
        headers=SCHEDULE_HEADERS,
        signatures=SCHEDULE_SIGNATURES,
        cells_by_key=cells,
        week=week,
        week_start_date=week_start_date,
        teacher_name=teacher_name,
    )
    log.info("schedule_exported", week=week, teacher=teacher_name, cells=len(cells))
    return _save(document, target)


def export_equipment_docx(
    rows: Iterable[EquipmentRow],
    *,
    week: int,
    week_start_date: str,
    teacher_name: str = "",
    target: str | Path | BinaryIO | None = None,
) -> bytes | Path | None:
    """Render the equipment request sheet of ``week``; see export_schedule_docx()."""
    cells = {
        (row.day_of_week, row.period): _equipment_cells(row)
        for row in rows
        if row.week == week
    }
    document = _build_document(
        title=EQUIPMENT_TITLE,
        headers=EQUIPMENT_HEADERS,
        signatures=EQUIPMENT_SIGNATURES,
        cells_by_key=cells,
        week=week,
        week_start_date=week_start_date,
        teacher_name=teacher_name,
    )
    log.info("equipment_exported", week=week, teacher=teacher_name, cells=len(cells))
    return _save(document, target)


def default_export_name(kind: str, week: int) -> str:
    """File name used by the export script ("Lich_Bao_Giang_Tuan_13.docx")."""
    prefix = {"schedule": "Lich_Bao_Giang", "equipment": "Phieu_Thiet_Bi"}[kind]
    return f"{prefix}_Tuan_{week}.docx"
