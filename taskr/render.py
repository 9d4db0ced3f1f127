"""Console output for taskr, built on rich."""

from datetime import datetime
from typing import List, Optional

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from taskr.config import (
    CANONICAL_DATE_FORMAT,
    DISPLAY_DATE_FORMAT,
    DISPLAY_TIME_FORMAT,
    STATUS_ICONS,
)
from taskr.dates import parse_timestamp, to_display
from taskr.engine import ActiveTimer, Outcome, StartResult, StatusChange, StopResult
from taskr.models import Task, WorkSession
from taskr.reports import DayReport, MonthReport, WeekReport, format_duration


def _clock(timestamp: Optional[str]) -> str:
    if not timestamp:
        return "--:--"
    return parse_timestamp(timestamp).strftime(DISPLAY_TIME_FORMAT)


def _weekday_label(iso_date: str) -> str:
    day = datetime.strptime(iso_date, CANONICAL_DATE_FORMAT)
    return f"{day.strftime('%A')} {day.strftime(DISPLAY_DATE_FORMAT)}"


def task_line(task: Task) -> str:
    """One-line summary: "⬜ [TODO] #3 - name 🗓️ 05/01/2026"."""
    icon = STATUS_ICONS.get(task.status.value, "")
    schedule = f" 🗓️  {to_display(task.schedule)}" if task.schedule else ""
    return f"{icon} \\[{task.status.value.upper()}] #{task.id} - {escape(task.name)}{schedule}"


def info(console: Console, message: str) -> None:
    console.print(f"[cyan]ℹ[/cyan] {escape(message)}")


def error(console: Console, message: str) -> None:
    console.print(f"[bold red]✗[/bold red] {escape(message)}")


def task_created(console: Console, task: Task) -> None:
    schedule = f" [dim](scheduled {to_display(task.schedule)})[/dim]" if task.schedule else ""
    console.print(f"[green]✓[/green] Created task #{task.id}: [bold]{escape(task.name)}[/bold]{schedule}")


def task_edited(console: Console, task: Task) -> None:
    console.print(f"[green]✓[/green] Updated {task_line(task)}")


def task_list(console: Console, tasks: List[Task], title: str, empty_message: str) -> None:
    if not tasks:
        info(console, empty_message)
        return
    console.print(f"\n[bold]{escape(title)}[/bold]")
    for task in tasks:
        console.print(task_line(task))


def stopped(console: Console, result: StopResult) -> None:
    if result.outcome == Outcome.NOTHING_ACTIVE:
        info(console, "No active timer.")
        return
    session = result.session
    console.print(
        f"[green]■[/green] Stopped [bold]{escape(result.task.name)}[/bold] "
        f"after {format_duration(session.duration)} "
        f"[dim]({_clock(session.start)} → {_clock(session.stop)})[/dim]"
    )


def started(console: Console, result: StartResult) -> None:
    task = result.task
    if result.outcome == Outcome.ALREADY_RUNNING:
        info(console, f'"{task.name}" is already running (since {_clock(result.session.start)}).')
        return
    if result.switched_from is not None:
        stopped(console, result.switched_from)
    if result.created:
        task_created(console, task)
    console.print(
        f"[green]▶[/green] Started [bold]{escape(task.name)}[/bold] #{task.id} "
        f"at {_clock(result.session.start)}"
    )


def status_changed(console: Console, change: StatusChange) -> None:
    if change.stopped is not None:
        stopped(console, change.stopped)
    console.print(task_line(change.task))


def active_timer(console: Console, timer: Optional[ActiveTimer]) -> None:
    if timer is None:
        info(console, "No task is running.")
        return
    console.print(
        f"[green]▶[/green] Working on [bold]{escape(timer.task.name)}[/bold] #{timer.task.id} "
        f"since {_clock(timer.session.start)} "
        f"[dim]({format_duration(timer.elapsed_minutes)} so far)[/dim]"
    )


def today_total(console: Console, day: str, minutes: int) -> None:
    console.print(f"🕒 Total for {to_display(day)}: [bold]{format_duration(minutes)}[/bold]")


def _session_rows(table: Table, entries) -> None:
    for entry in entries:
        session: WorkSession = entry.session
        table.add_row(
            _clock(session.start),
            _clock(session.stop),
            f"#{entry.task.id}",
            escape(entry.task.name),
            format_duration(entry.minutes),
        )


def _sessions_table(title: str) -> Table:
    table = Table(title=title, title_justify="left", show_footer=False)
    table.add_column("Start")
    table.add_column("Stop")
    table.add_column("Id", style="dim")
    table.add_column("Task")
    table.add_column("Time", justify="right")
    return table


def day_report(console: Console, report: DayReport) -> None:
    if not report.entries:
        info(console, f"Nothing tracked on {to_display(report.date)}.")
        return
    table = _sessions_table(f"📅 {_weekday_label(report.date)}")
    _session_rows(table, report.entries)
    console.print(table)
    console.print(f"Total: [bold]{format_duration(report.total)}[/bold]")


def week_report(console: Console, report: WeekReport) -> None:
    console.print(
        f"\n[bold]🗓️  Week {to_display(report.start)} - {to_display(report.end)}[/bold]"
    )
    for day in report.days:
        label = _weekday_label(day.date)
        if not day.entries:
            console.print(f"[dim]{label}: -[/dim]")
            continue
        table = _sessions_table(f"{label}  ({format_duration(day.total)})")
        _session_rows(table, day.entries)
        console.print(table)
    console.print(f"Week total: [bold]{format_duration(report.total)}[/bold]")


def month_report(console: Console, report: MonthReport) -> None:
    heading = datetime(report.year, report.month, 1).strftime("%B %Y")
    if not report.groups:
        info(console, f"Nothing tracked in {heading}.")
        return

    table = Table(title=f"📊 {heading}", title_justify="left")
    table.add_column("Task")
    table.add_column("Sessions", justify="right")
    table.add_column("Time", justify="right")
    table.add_column("%", justify="right")
    for group in report.groups:
        table.add_row(
            escape(group.name),
            str(group.sessions),
            format_duration(group.minutes),
            f"{group.percent:.1f}%",
        )
    console.print(table)
    console.print(f"Month total: [bold]{format_duration(report.total)}[/bold]")
    console.print(f"Average per day: {format_duration(round(report.average_per_day))}")
