"""Export a teacher's week as Word documents (teaching log and equipment sheet).

Run with:  python scripts/export_week.py
Week:      python scripts/export_week.py --teacher "Nguyễn Văn A" --week 14
Only one:  python scripts/export_week.py --kind equipment
Output:    python scripts/export_week.py --out-dir ~/Desktop

Defaults to the teacher and week last opened with generate_week.py. Files are
named Lich_Bao_Giang_Tuan_{n}.docx and Phieu_Thiet_Bi_Tuan_{n}.docx.
"""

import argparse
import os
import sys

# Add project root to path for src imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from src.lessonlog.config import get_config  # noqa: E402
from src.lessonlog.dates import shift_week  # noqa: E402
from src.lessonlog.export import (  # noqa: E402
    default_export_name,
    export_equipment_docx,
    export_schedule_docx,
)
from src.lessonlog.logging import bind_teacher_context, setup_logging_from_config  # noqa: E402
from src.lessonlog.reconcile import rows_for_week  # noqa: E402
from src.lessonlog.store import JsonBlobStore, load_workbook  # noqa: E402


def _log(msg: str) -> None:
    print(msg, file=sys.stderr)


def _parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Export one teacher-week to .docx.")
    parser.add_argument("--data-dir", type=str, default=None, help="Blob store directory.")
    parser.add_argument("--out-dir", type=str, default=None, help="Output directory.")
    parser.add_argument("--teacher", type=str, default=None, help="Teacher name (default: last used).")
    parser.add_argument("--week", type=int, default=None, help="Week number (default: last used).")
    parser.add_argument(
        "--kind",
        choices=["schedule", "equipment", "both"],
        default="both",
        help="Which sheet to export.",
    )
    return parser.parse_args()


def main(args: argparse.Namespace) -> None:
    config = get_config()
    setup_logging_from_config(config)

    store = JsonBlobStore(
        args.data_dir or config.data_dir,
        write_attempts=config.store_write_attempts,
        retry_wait_seconds=config.store_retry_wait_seconds,
    )
    workbook = load_workbook(store)
    settings = workbook.settings

    teacher = (args.teacher or settings.teacher_name).strip()
    if not teacher:
        _log("  ERROR: no teacher selected (use --teacher)")
        sys.exit(1)
    if args.week is not None and args.week < 1:
        _log(f"  ERROR: week must be >= 1, got {args.week}")
        sys.exit(1)

    # Exporting never changes the stored settings
    week, week_start = shift_week(
        settings.current_week, settings.week_start_date, args.week or settings.current_week
    )
    bind_teacher_context(teacher, week)

    out_dir = args.out_dir or config.export_dir
    kinds = ["schedule", "equipment"] if args.kind == "both" else [args.kind]

    for kind in kinds:
        target = os.path.join(out_dir, default_export_name(kind, week))
        if kind == "schedule":
            rows = rows_for_week(workbook.schedule, teacher, week)
            export_schedule_docx(
                rows, week=week, week_start_date=week_start, teacher_name=teacher, target=target
            )
        else:
            rows = rows_for_week(workbook.equipment, teacher, week)
            export_equipment_docx(
                rows, week=week, week_start_date=week_start, teacher_name=teacher, target=target
            )
        _log(f"  {kind}: {len(rows)} rows -> {target}")
        print(target)


if __name__ == "__main__":
    args = _parse_args()
    try:
        main(args)
    except Exception as e:
        print(f"ERROR: {e}", file=sys.stderr)
        sys.exit(1)
