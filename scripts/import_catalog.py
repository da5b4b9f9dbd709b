"""Import a subject's lesson or equipment catalog from a CSV export.

Re-importing a subject replaces every catalog entry of that subject; entries
of other subjects are kept.

Run with:  python scripts/import_catalog.py --subject "Toán" --lessons data/toan_ppct.csv
Equipment: python scripts/import_catalog.py --subject "Toán" --equipment data/toan_tb.csv
Dry run:   python scripts/import_catalog.py --subject "Toán" --lessons toan.csv --dry-run

CSV layouts (header row skipped):
  lessons:    number, lesson name            | no., number, lesson name
  equipment:  number, equipment[, quantity]  | number, lesson name, equipment[, quantity]
"""

import argparse
import os
import sys

# Add project root to path for src imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from src.lessonlog.catalog import replace_subject_entries  # noqa: E402
from src.lessonlog.config import get_config  # noqa: E402
from src.lessonlog.importers import import_equipment_catalog, import_lesson_catalog  # noqa: E402
from src.lessonlog.logging import setup_logging_from_config  # noqa: E402
from src.lessonlog.store import JsonBlobStore, load_data_set, save_data_set  # noqa: E402


def _log(msg: str) -> None:
    print(msg, file=sys.stderr)


def _parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Import a subject's lesson/equipment catalog from CSV.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("--data-dir", type=str, default=None, help="Blob store directory.")
    parser.add_argument("--subject", type=str, required=True, help="Subject the CSV belongs to.")
    parser.add_argument("--lessons", type=str, default=None, help="Lesson catalog CSV.")
    parser.add_argument("--equipment", type=str, default=None, help="Equipment catalog CSV.")
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Parse and report, but do not write the catalog.",
    )
    args = parser.parse_args()
    if not args.lessons and not args.equipment:
        parser.error("one of --lessons or --equipment is required")
    return args


def main(args: argparse.Namespace) -> None:
    config = get_config()
    setup_logging_from_config(config)

    store = JsonBlobStore(
        args.data_dir or config.data_dir,
        write_attempts=config.store_write_attempts,
        retry_wait_seconds=config.store_retry_wait_seconds,
    )
    subject = args.subject.strip()

    jobs = []
    if args.lessons:
        jobs.append(("lesson_catalog", import_lesson_catalog(args.lessons, subject)))
    if args.equipment:
        jobs.append(("equipment_catalog", import_equipment_catalog(args.equipment, subject)))

    for field, entries in jobs:
        current = load_data_set(store, field)
        updated = replace_subject_entries(current, subject, entries)
        _log(
            f"  {field}: {subject} -> {len(entries)} entries "
            f"({len(current)} -> {len(updated)} total)"
        )
        if args.dry_run:
            continue
        save_data_set(store, field, updated)

    if args.dry_run:
        _log("  Dry run: nothing written.")


if __name__ == "__main__":
    args = _parse_args()
    try:
        main(args)
    except Exception as e:
        print(f"ERROR: {e}", file=sys.stderr)
        sys.exit(1)
