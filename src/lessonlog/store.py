"""JSON blob store for the workbook data sets.

Each data set lives in its own file under the data directory and is read and
written wholesale (read-all, compute, write-all). Writes go to a temporary
file that atomically replaces the blob, and are retried with tenacity when the
replace fails transiently (e.g. the file is open in another program).

Layout:
    {data_dir}/timetable.json          [TimetableSlot, ...]
    {data_dir}/schedule.json           [ScheduleRow, ...]
    {data_dir}/equipment.json          [EquipmentRow, ...]
    {data_dir}/lesson_catalog.json     [LessonCatalogEntry, ...]
    {data_dir}/equipment_catalog.json  [EquipmentCatalogEntry, ...]
    {data_dir}/week_states.json        [WeekState, ...]
    {data_dir}/settings.json           WorkbookSettings
"""

import json
import os
import tempfile
from pathlib import Path
from typing import Any

from pydantic import TypeAdapter, ValidationError
from tenacity import (
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_fixed,
)

from src.lessonlog.config import LessonLogConfig, get_config
from src.lessonlog.errors import CorruptBlobError, StoreWriteError
from src.lessonlog.logging import get_logger
from src.lessonlog.models import (
    EquipmentCatalogEntry,
    EquipmentRow,
    LessonCatalogEntry,
    ScheduleRow,
    TimetableSlot,
    WeekState,
    Workbook,
    WorkbookSettings,
)

logger = get_logger(__name__)

# Workbook field -> (blob name, adapter)
DATA_SETS: dict[str, tuple[str, TypeAdapter]] = {
    "timetable": ("timetable", TypeAdapter(list[TimetableSlot])),
    "schedule": ("schedule", TypeAdapter(list[ScheduleRow])),
    "equipment": ("equipment", TypeAdapter(list[EquipmentRow])),
    "lesson_catalog": ("lesson_catalog", TypeAdapter(list[LessonCatalogEntry])),
    "equipment_catalog": ("equipment_catalog", TypeAdapter(list[EquipmentCatalogEntry])),
    "week_states": ("week_states", TypeAdapter(list[WeekState])),
    "settings": ("settings", TypeAdapter(WorkbookSettings)),
}


class JsonBlobStore:
    """Key-value store of JSON blobs, one file per key."""

    def __init__(
        self,
        data_dir: str | Path,
        *,
        write_attempts: int = 3,
        retry_wait_seconds: float = 0.2,
    ) -> None:
        """Initialize the store.

        Args:
            data_dir: Directory holding the blobs (created if missing).
            write_attempts: Attempts per write before StoreWriteError propagates.
            retry_wait_seconds: Fixed wait between write attempts.
        """
        self.data_dir = Path(data_dir)
        self.data_dir.mkdir(parents=True, exist_ok=True)
        self._write_with_retry = retry(
            retry=retry_if_exception_type(StoreWriteError),
            stop=stop_after_attempt(write_attempts),
            wait=wait_fixed(retry_wait_seconds),
            reraise=True,
        )(self._write_once)

        logger.debug("blob_store_initialized", data_dir=str(self.data_dir))

    @classmethod
    def from_config(cls, config: LessonLogConfig | None = None) -> "JsonBlobStore":
        config = config or get_config()
        return cls(
            config.data_dir,
            write_attempts=config.store_write_attempts,
            retry_wait_seconds=config.store_retry_wait_seconds,
        )

    def path_for(self, name: str) -> Path:
        return self.data_dir / f"{name}.json"

    def exists(self, name: str) -> bool:
        return self.path_for(name).exists()

    def read(self, name: str) -> Any | None:
        """Parsed JSON of blob ``name``, or None if it was never written.

        Raises:
            CorruptBlobError: If the file is not valid JSON.
        """
        path = self.path_for(name)
        if not path.exists():
            return None
        try:
            with open(path, encoding="utf-8") as f:
                return json.load(f)
        except json.JSONDecodeError as e:
            raise CorruptBlobError(f"Blob {name!r} at {path} is not valid JSON: {e}") from e

    def write(self, name: str, payload: Any) -> Path:
        """Replace blob ``name`` with ``payload``.

        Raises:
            StoreWriteError: If every attempt failed.
        """
        return self._write_with_retry(name, payload)

    def _write_once(self, name: str, payload: Any) -> Path:
        path = self.path_for(name)
        tmp_name = None
        try:
            with tempfile.NamedTemporaryFile(
                "w",
                encoding="utf-8",
                dir=self.data_dir,
                prefix=f".{name}.",
                suffix=".tmp",
                delete=False,
            ) as tmp:
                tmp_name = tmp.name
                json.dump(payload, tmp, indent=2, ensure_ascii=False)
            os.replace(tmp_name, path)
        except OSError as e:
            if tmp_name and os.path.exists(tmp_name):
                os.unlink(tmp_name)
            logger.warning("blob_write_failed", blob=name, error=str(e))
            raise StoreWriteError(f"Could not write blob {name!r}: {e}") from e

        logger.debug("blob_written", blob=name, path=str(path))
        return path


def load_data_set(store: JsonBlobStore, field: str) -> Any:
    """Load one workbook data set; missing blobs give the empty default.

    Raises:
        CorruptBlobError: If the blob does not match its schema.
    """
    name, adapter = DATA_SETS[field]
    raw = store.read(name)
    if raw is None:
        return getattr(Workbook(), field)
    try:
        return adapter.validate_python(raw)
    except ValidationError as e:
        raise CorruptBlobError(f"Blob {name!r} does not match its schema: {e}") from e


def save_data_set(store: JsonBlobStore, field: str, value: Any) -> Path:
    name, adapter = DATA_SETS[field]
    return store.write(name, adapter.dump_python(value, mode="json"))


def load_workbook(store: JsonBlobStore) -> Workbook:
    """Read every data set into a Workbook snapshot."""
    workbook = Workbook(**{field: load_data_set(store, field) for field in DATA_SETS})
    logger.info(
        "workbook_loaded",
        data_dir=str(store.data_dir),
        timetable=len(workbook.timetable),
        schedule=len(workbook.schedule),
        equipment=len(workbook.equipment),
    )
    return workbook


def save_workbook(
    store: JsonBlobStore, workbook: Workbook, fields: list[str] | None = None
) -> None:
    """Write the workbook back, one blob per data set.

    Args:
        store: Target store.
        workbook: Snapshot to persist.
        fields: Only these data sets (default: all).
    """
    for field in fields or list(DATA_SETS):
        save_data_set(store, field, getattr(workbook, field))
    logger.info("workbook_saved", data_dir=str(store.data_dir), data_sets=fields or list(DATA_SETS))
