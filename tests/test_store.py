import json
import os

import pytest

from src.lessonlog import sync
from src.lessonlog.config import LessonLogConfig
from src.lessonlog.errors import CorruptBlobError, StoreWriteError, TransientError
from src.lessonlog.models import TimetableSlot, WeekStatus, Workbook, WorkbookSettings
from src.lessonlog.store import (
    JsonBlobStore,
    load_data_set,
    load_workbook,
    save_data_set,
    save_workbook,
)


def _store(tmp_path, attempts=3):
    return JsonBlobStore(tmp_path / "data", write_attempts=attempts, retry_wait_seconds=0)


def _populated() -> Workbook:
    wb = Workbook(
        timetable=[
            TimetableSlot(day_of_week="Thứ 2", period=1, subject="Toán", class_name="6A", teacher_name="A"),
        ],
        settings=WorkbookSettings(week_start_date="2024-09-02"),
    )
    return sync.select_teacher(wb, "A")


def test_missing_blobs_load_as_empty_workbook(tmp_path):
    wb = load_workbook(_store(tmp_path))
    assert wb.schedule == [] and wb.timetable == [] and wb.week_states == []
    assert wb.settings.current_week == 1


def test_workbook_survives_save_and_load(tmp_path):
    store = _store(tmp_path)
    wb = _populated()
    save_workbook(store, wb)

    loaded = load_workbook(store)
    assert loaded.model_dump() == wb.model_dump()
    assert sync.get_week_status(loaded, "A", 1) is WeekStatus.GENERATED
    assert store.exists("schedule") and store.exists("week_states")


def test_blobs_are_readable_json(tmp_path):
    store = _store(tmp_path)
    save_workbook(store, _populated(), fields=["schedule"])
    with open(store.path_for("schedule"), encoding="utf-8") as f:
        payload = json.load(f)
    assert payload[0]["day_of_week"] == "Thứ 2"
    assert payload[0]["ppct_number"] == "1"
    assert not store.exists("timetable")


def test_invalid_json_raises_corrupt_blob(tmp_path):
    store = _store(tmp_path)
    store.path_for("schedule").write_text("{not json", encoding="utf-8")
    with pytest.raises(CorruptBlobError):
        load_data_set(store, "schedule")


def test_schema_mismatch_raises_corrupt_blob(tmp_path):
    store = _store(tmp_path)
    store.write("schedule", [{"week": 0, "day_of_week": "Sunday", "period": 1}])
    with pytest.raises(CorruptBlobError):
        load_workbook(store)


def test_write_retries_transient_failures(tmp_path, monkeypatch):
    store = _store(tmp_path)
    real_replace = os.replace
    calls = {"count": 0}

    def flaky_replace(src, dst):
        calls["count"] += 1
        if calls["count"] < 3:
            raise PermissionError("file is open in another program")
        return real_replace(src, dst)

    monkeypatch.setattr(os, "replace", flaky_replace)
    save_data_set(store, "lesson_catalog", [])
    assert calls["count"] == 3
    assert store.read("lesson_catalog") == []


def test_write_gives_up_after_configured_attempts(tmp_path, monkeypatch):
    store = _store(tmp_path, attempts=2)
    calls = {"count": 0}

    def locked(src, dst):
        calls["count"] += 1
        raise PermissionError("locked")

    monkeypatch.setattr(os, "replace", locked)
    with pytest.raises(StoreWriteError) as excinfo:
        store.write("settings", {})
    assert isinstance(excinfo.value, TransientError)
    assert calls["count"] == 2
    assert [p.name for p in store.data_dir.iterdir()] == []


def test_store_from_config(tmp_path):
    config = LessonLogConfig(data_dir=str(tmp_path / "cfg"), store_write_attempts=1)
    store = JsonBlobStore.from_config(config)
    assert store.data_dir == tmp_path / "cfg"
    assert store.data_dir.is_dir()
