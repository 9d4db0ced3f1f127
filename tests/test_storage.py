"""Tests for the JSON task store."""

import json
import logging

import pytest

import taskr.storage
from taskr.models import Task, TaskStatus, WorkSession
from taskr.storage import TaskStore


def test_load_creates_missing_file(tmp_path):
    path = tmp_path / "nested" / "data.json"
    store = TaskStore(path)
    assert store.load() == []
    assert json.loads(path.read_text()) == []


def test_default_path_follows_taskr_home(tmp_path, monkeypatch):
    monkeypatch.setenv("TASKR_HOME", str(tmp_path / "home"))
    assert TaskStore().path == tmp_path / "home" / "data.json"


def test_save_then_load(store):
    tasks = [
        Task(id="1", name="write report", created_at="2026-10-19T09:00:00",
             work_flow=[WorkSession(start="2026-10-19T09:00:00")]),
        Task(id="2", name="review", status=TaskStatus.DONE,
             created_at="2026-10-19T09:05:00", end_at="2026-10-19T09:30:00"),
    ]
    store.save(tasks)
    assert store.load() == tasks


def test_corrupt_file_degrades_to_empty(store, caplog):
    store.path.write_text("{not json")
    with caplog.at_level(logging.WARNING, logger="taskr.storage"):
        assert store.load() == []
    assert "starting with an empty task list" in caplog.text


def test_non_list_document_degrades_to_empty(store, caplog):
    store.path.write_text(json.dumps({"id": "1"}))
    with caplog.at_level(logging.WARNING, logger="taskr.storage"):
        assert store.load() == []
    assert "is not a list" in caplog.text


def test_bad_records_are_skipped(store, caplog):
    store.path.write_text(json.dumps([
        {"id": "1", "name": "good", "status": "todo", "created_at": "2026-10-19T09:00:00"},
        {"id": "2"},
        "garbage",
        {"id": "3", "name": "bad session", "work_flow": [{"start": "??"}]},
    ]))
    with caplog.at_level(logging.WARNING, logger="taskr.storage"):
        tasks = store.load()
    assert [t.id for t in tasks] == ["1"]
    assert "Failed to load task 2" in caplog.text


@pytest.mark.parametrize("name", [None, 42, ["a"]])
def test_records_without_a_string_name_are_skipped(store, caplog, name):
    store.path.write_text(json.dumps([
        {"id": "1", "name": name},
        {"id": "2", "name": "real"},
        {"name": "no id"},
    ]))
    with caplog.at_level(logging.WARNING, logger="taskr.storage"):
        tasks = store.load()
    assert [t.name for t in tasks] == ["real"]
    assert "Failed to load task 1" in caplog.text


def test_sessions_with_unreadable_stop_are_skipped(store, caplog):
    store.path.write_text(json.dumps([
        {"id": "1", "name": "broken", "work_flow": [
            {"id": "a", "start": "2026-10-19T09:00:00", "stop": "garbage", "duration": 5},
        ]},
        {"id": "2", "name": "fine", "work_flow": [
            {"id": "b", "start": "2026-10-19T09:00:00", "stop": "2026-10-19T09:05:00", "duration": 5},
        ]},
    ]))
    with caplog.at_level(logging.WARNING, logger="taskr.storage"):
        tasks = store.load()
    assert [t.id for t in tasks] == ["2"]
    assert "Failed to load task 1" in caplog.text


def test_write_failure_is_logged_not_raised(store, monkeypatch, caplog):
    store.save([Task(id="1", name="keep me", created_at="2026-10-19T09:00:00")])
    before = store.path.read_text()

    def broken_mkstemp(*args, **kwargs):
        raise OSError("disk full")

    monkeypatch.setattr(taskr.storage.tempfile, "mkstemp", broken_mkstemp)
    with caplog.at_level(logging.ERROR, logger="taskr.storage"):
        store.save([])

    assert "disk full" in caplog.text
    assert store.path.read_text() == before


def test_save_leaves_no_temp_files(store):
    store.save([Task(id="1", name="a", created_at="2026-10-19T09:00:00")])
    leftovers = [p.name for p in store.path.parent.iterdir() if p.name != "data.json"]
    assert leftovers == []


@pytest.mark.parametrize("content", ["", "null"])
def test_empty_or_null_file(store, content):
    store.path.write_text(content)
    assert store.load() == []
