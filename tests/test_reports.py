"""Tests for day / week / month aggregation."""

from datetime import datetime

import pytest

from taskr.models import WorkSession
from taskr.reports import daily_total, day_report, format_duration, month_report, week_report

from .fakes import closed_session, make_task

NOW = datetime(2026, 10, 19, 18, 0, 0)  # Monday


@pytest.fixture()
def tasks():
    return [
        make_task(
            "1", "write report",
            closed_session("2026-10-19T14:00:00", 30),
            closed_session("2026-10-18T09:00:00", 45),   # Sunday
            closed_session("2026-10-05T09:00:00", 60),
        ),
        make_task(
            "2", "review",
            closed_session("2026-10-19T09:15:00", 20),
            WorkSession(start="2026-10-19T17:00:00"),    # still running
        ),
        make_task(
            "3", "write report",                          # same name, different task
            closed_session("2026-10-24T08:00:00", 15),   # Saturday
        ),
        make_task(
            "4", "old",
            closed_session("2026-09-30T23:30:00", 90),
        ),
    ]


@pytest.mark.parametrize("minutes, expected", [
    (0, "0m"),
    (59, "59m"),
    (60, "1h"),
    (125, "2h 5m"),
    (600, "10h"),
])
def test_format_duration(minutes, expected):
    assert format_duration(minutes) == expected


def test_daily_total_ignores_open_sessions_and_other_days(tasks):
    assert daily_total(tasks, "2026-10-19") == 50
    assert daily_total(tasks, "2026-10-18") == 45
    assert daily_total(tasks, "2026-10-20") == 0


def test_day_report_sorted_across_tasks(tasks):
    report = day_report(tasks, "2026-10-19")
    assert [(e.task.id, e.minutes) for e in report.entries] == [("2", 20), ("1", 30)]
    assert report.total == sum(e.minutes for e in report.entries) == 50


def test_day_report_keeps_collection_order_on_ties():
    tasks = [
        make_task("1", "a", closed_session("2026-10-19T09:00:00", 5)),
        make_task("2", "b", closed_session("2026-10-19T09:00:00", 5)),
    ]
    assert [e.task.id for e in day_report(tasks, "2026-10-19").entries] == ["1", "2"]


def test_day_report_empty_day(tasks):
    report = day_report(tasks, "2026-10-21")
    assert report.entries == []
    assert report.total == 0


def test_week_report_covers_sunday_to_saturday(tasks):
    report = week_report(tasks, NOW)
    assert [d.date for d in report.days] == [
        "2026-10-18", "2026-10-19", "2026-10-20", "2026-10-21",
        "2026-10-22", "2026-10-23", "2026-10-24",
    ]
    assert [d.total for d in report.days] == [45, 50, 0, 0, 0, 0, 15]
    assert report.total == 110
    assert (report.start, report.end) == ("2026-10-18", "2026-10-24")


def test_month_report_groups_by_name(tasks):
    report = month_report(tasks, NOW)
    assert (report.year, report.month) == (2026, 10)
    assert [(g.name, g.sessions, g.minutes) for g in report.groups] == [
        ("write report", 4, 150),
        ("review", 1, 20),
    ]
    assert report.total == 170
    assert report.average_per_day == pytest.approx(170 / 19)
    assert sum(g.percent for g in report.groups) == pytest.approx(100.0, abs=0.1)
    assert report.groups[0].percent == 88.2


def test_month_report_without_activity():
    tasks = [make_task("1", "idle", WorkSession(start="2026-10-19T09:00:00"))]
    report = month_report(tasks, NOW)
    assert report.groups == []
    assert report.total == 0
    assert report.average_per_day == 0


def test_month_report_zero_minute_sessions_do_not_divide_by_zero():
    tasks = [make_task("1", "blip", closed_session("2026-10-19T09:00:00", 0))]
    report = month_report(tasks, NOW)
    assert report.groups[0].percent == 0.0
    assert report.total == 0
