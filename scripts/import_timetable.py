"""Replace the timetable template with the timetable parser's JSON output.

The file holds a list of slots (or an object with an "entries" list), each
with dayOfWeek, period, subject, className and teacherName. After the import
the pick-lists of the active teacher are refreshed and their current week is
generated if it is still empty.

Run with:  python scripts/import_timetable.py data/tkb_hk1.json
Teachers:  python scripts/import_timetable.py data/tkb_hk1.json --list-teachers
"""

import argparse
import os
import sys

# Add project root to path for src imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from src.lessonlog import sync  # noqa: E402
from src.lessonlog.config import get_config  # noqa: E402
from src.lessonlog.importers import import_timetable  # noqa: E402
from src.lessonlog.logging import setup_logging_from_config  # noqa: E402
from src.lessonlog.store import JsonBlobStore, load_workbook, save_workbook  # noqa: E402
from src.lessonlog.timetable import list_teachers  # noqa: E402


def _log(msg: str) -> None:
    print(msg, file=sys.stderr)


def _parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Import a timetable template from JSON.")
    parser.add_argument("path", type=str, help="Timetable JSON file.")
    parser.add_argument("--data-dir", type=str, default=None, help="Blob store directory.")
    parser.add_argument(
        "--list-teachers",
        action="store_true",
        help="Print the teachers found in the timetable (one per line).",
    )
    return parser.parse_args()


def main(args: argparse.Namespace) -> None:
    config = get_config()
    setup_logging_from_config(config)

    slots = import_timetable(args.path)

    store = JsonBlobStore(
        args.data_dir or config.data_dir,
        write_attempts=config.store_write_attempts,
        retry_wait_seconds=config.store_retry_wait_seconds,
    )
    workbook = sync.set_timetable(load_workbook(store), slots)
    save_workbook(store, workbook)

    teachers = list_teachers(slots)
    _log(f"  Imported {len(slots)} slots for {len(teachers)} teachers")
    if args.list_teachers:
        for name in teachers:
            print(name)


if __name__ == "__main__":
    args = _parse_args()
    try:
        main(args)
    except Exception as e:
        print(f"ERROR: {e}", file=sys.stderr)
        sys.exit(1)
