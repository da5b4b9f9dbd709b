"""Open a teacher's week in the teaching log, generating it from the timetable if empty.

Loads the workbook from the data directory, switches to the requested teacher
and week (auto-populating an empty week from the timetable template), and
writes the workbook back. Prints the week as a table or JSON.

Run with:  python scripts/generate_week.py --teacher "Nguyễn Văn A" --week 14
Start:     python scripts/generate_week.py --teacher A --week 1 --start 2024-09-02
Force:     python scripts/generate_week.py --teacher A --apply-template
JSON:      python scripts/generate_week.py --teacher A --json
Data dir:  python scripts/generate_week.py --data-dir data/lessonlog --teacher A

Exit codes:
  0 = success (table or JSON on stdout)
  1 = error (message on stderr)
"""

import argparse
import json
import os
import sys
from datetime import date

# Add project root to path for src imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from src.lessonlog import sync  # noqa: E402
from src.lessonlog.config import get_config  # noqa: E402
from src.lessonlog.dates import format_date_vn, monday_of, week_end_date  # noqa: E402
from src.lessonlog.export import period_label  # noqa: E402
from src.lessonlog.logging import bind_teacher_context, setup_logging_from_config  # noqa: E402
from src.lessonlog.models import ScheduleRow  # noqa: E402
from src.lessonlog.store import JsonBlobStore, load_workbook, save_workbook  # noqa: E402


def _log(msg: str) -> None:
    """Write diagnostic messages to stderr so stdout stays clean for JSON."""
    print(msg, file=sys.stderr)


def _parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Open (and if needed generate) a teacher's week of the teaching log.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("--data-dir", type=str, default=None, help="Blob store directory.")
    parser.add_argument("--teacher", type=str, default=None, help="Teacher name (default: last used).")
    parser.add_argument("--week", type=int, default=None, help="Week number (default: last used).")
    parser.add_argument(
        "--start",
        type=str,
        default=None,
        help=(
            "ISO date (YYYY-MM-DD) of the week's Monday. Applied before moving to --week. "
            "Defaults to this week's Monday when no start date is stored."
        ),
    )
    parser.add_argument(
        "--apply-template",
        action="store_true",
        help="Regenerate the week from the timetable even if it already has rows.",
    )
    parser.add_argument("--json", action="store_true", help="Print rows as JSON instead of a table.")
    return parser.parse_args()


def _format_table(rows: list[ScheduleRow]) -> str:
    """Format schedule rows as a human-readable table."""
    if not rows:
        return "(no lessons this week)"

    headers = ["Day", "Date", "Session", "Period", "Subject", "Class", "PPCT", "Lesson", "Notes"]
    body = [
        [
            row.day_of_week.value,
            format_date_vn(row.date),
            "AM" if row.period <= 4 else "PM",
            period_label(row.period),
            row.subject,
            row.class_name,
            row.ppct_number,
            row.lesson_name,
            row.notes,
        ]
        for row in sorted(rows, key=lambda r: (r.day_of_week.position, r.period))
    ]

    widths = [len(h) for h in headers]
    for line in body:
        for i, cell in enumerate(line):
            widths[i] = max(widths[i], len(cell))

    header_line = " | ".join(h.ljust(widths[i]) for i, h in enumerate(headers))
    separator = "-+-".join("-" * w for w in widths)
    row_lines = [" | ".join(cell.ljust(widths[i]) for i, cell in enumerate(line)) for line in body]
    return "\n".join([header_line, separator, *row_lines])


def main(args: argparse.Namespace) -> None:
    config = get_config()
    setup_logging_from_config(config)

    store = JsonBlobStore(
        args.data_dir or config.data_dir,
        write_attempts=config.store_write_attempts,
        retry_wait_seconds=config.store_retry_wait_seconds,
    )
    workbook = load_workbook(store)

    start = args.start
    if not start and not workbook.settings.week_start_date:
        start = monday_of(date.today()).isoformat()
    if start:
        workbook = sync.set_week_start(workbook, start)
    if args.week is not None:
        workbook = sync.change_week(workbook, args.week)
    if args.teacher:
        workbook = sync.select_teacher(workbook, args.teacher)
    else:
        workbook = sync.auto_populate(workbook)

    settings = workbook.settings
    if not settings.teacher_name:
        _log("  ERROR: no teacher selected (use --teacher)")
        sys.exit(1)

    bind_teacher_context(settings.teacher_name, settings.current_week)

    if args.apply_template:
        workbook = sync.apply_template(workbook)

    save_workbook(store, workbook)

    rows = sync.current_week_schedule(workbook)
    status = sync.get_week_status(workbook, settings.teacher_name, settings.current_week)
    _log(
        f"  {settings.teacher_name} - week {settings.current_week} "
        f"({format_date_vn(settings.week_start_date)} -> "
        f"{format_date_vn(week_end_date(settings.week_start_date))}), "
        f"{len(rows)} lessons, {status.value}"
    )

    if args.json:
        print(json.dumps([row.model_dump(mode="json") for row in rows], indent=2, ensure_ascii=False))
    else:
        print(_format_table(rows))


if __name__ == "__main__":
    args = _parse_args()
    try:
        main(args)
    except Exception as e:
        print(f"ERROR: {e}", file=sys.stderr)
        sys.exit(1)
