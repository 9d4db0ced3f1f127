#!/usr/bin/env python3
"""taskr - command-line task and time tracker."""

import argparse
import logging
import sys
from typing import List, Optional

from rich.console import Console

from taskr import __version__, render
from taskr.config import CLEAR_SCHEDULE_VALUES
from taskr.dates import convert_to_iso, to_display
from taskr.engine import UNCHANGED, TaskEngine
from taskr.errors import InvalidInput, TaskrError
from taskr.logging_setup import setup_logging
from taskr.storage import TaskStore

logger = logging.getLogger(__name__)

EPILOG = """\
commands:
  add <name> [-t | -s DD/MM/YYYY]   create a task, optionally scheduled
  ls [-a] [-d]                      tasks scheduled today (-a all, -d include done)
  start <id | name>                 start the timer (unknown names create a task)
  stop                              stop the running timer
  status [-t]                       running task (-t: time tracked today)
  done <id | name>                  mark a task done
  todo <id | name>                  reopen a task
  edit <id | name> [-n NAME] [-s DD/MM/YYYY | ""]
                                    rename and/or reschedule ("" clears)
  report [day [DD/MM/YYYY] | week | month]
  del <id>                          not implemented yet
"""


def _join(words: List[str]) -> str:
    return " ".join(words).strip()


def _display_date_to_iso(value: str) -> str:
    iso = convert_to_iso(value)
    if iso is None:
        raise InvalidInput(f'Invalid date "{value}", use DD/MM/YYYY')
    return iso


def cmd_add(engine: TaskEngine, args, console: Console) -> int:
    schedule = None
    if args.today:
        schedule = engine.today()
    elif args.schedule is not None:
        schedule = _display_date_to_iso(args.schedule)
    task = engine.create(_join(args.name), schedule)
    render.task_created(console, task)
    return 0


def cmd_ls(engine: TaskEngine, args, console: Console) -> int:
    tasks = engine.list_tasks(include_done=args.done, today_only=not args.all)
    if args.all:
        render.task_list(console, tasks, "🗂️  All tasks", "The task list is empty.")
    else:
        day = to_display(engine.today())
        render.task_list(console, tasks, f"📅 Tasks for today ({day})", f"Nothing scheduled for today ({day}).")
    return 0


def cmd_start(engine: TaskEngine, args, console: Console) -> int:
    result = engine.start(_join(args.task), create_if_missing=True)
    render.started(console, result)
    return 0


def cmd_stop(engine: TaskEngine, args, console: Console) -> int:
    render.stopped(console, engine.stop())
    return 0


def cmd_status(engine: TaskEngine, args, console: Console) -> int:
    if args.today:
        render.today_total(console, engine.today(), engine.daily_total())
    else:
        render.active_timer(console, engine.current_status())
    return 0


def cmd_done(engine: TaskEngine, args, console: Console) -> int:
    render.status_changed(console, engine.mark_done(_join(args.task)))
    return 0


def cmd_todo(engine: TaskEngine, args, console: Console) -> int:
    render.status_changed(console, engine.mark_todo(_join(args.task)))
    return 0


def cmd_edit(engine: TaskEngine, args, console: Console) -> int:
    if args.name is None and args.schedule is None:
        raise InvalidInput("Nothing to edit: pass -n <name> and/or -s <DD/MM/YYYY | \"\">")

    name = _join(args.name) if args.name is not None else None
    if args.schedule is None:
        schedule = UNCHANGED
    elif args.schedule.strip() in CLEAR_SCHEDULE_VALUES:
        schedule = None
    else:
        schedule = _display_date_to_iso(args.schedule)

    task = engine.edit(_join(args.task), name=name, schedule=schedule)
    render.task_edited(console, task)
    return 0


def cmd_report(engine: TaskEngine, args, console: Console) -> int:
    if args.date is not None and args.period != "day":
        raise InvalidInput(f"A date can only be given to 'report day', not 'report {args.period}'")

    if args.period == "week":
        render.week_report(console, engine.week_report())
    elif args.period == "month":
        render.month_report(console, engine.month_report())
    else:
        day = _display_date_to_iso(args.date) if args.date else None
        render.day_report(console, engine.day_report(day))
    return 0


def cmd_del(engine: TaskEngine, args, console: Console) -> int:
    render.info(console, f"del is not implemented yet (id {args.id} left untouched).")
    return 0


COMMANDS = {
    "add": cmd_add,
    "ls": cmd_ls,
    "start": cmd_start,
    "stop": cmd_stop,
    "status": cmd_status,
    "done": cmd_done,
    "todo": cmd_todo,
    "edit": cmd_edit,
    "report": cmd_report,
    "del": cmd_del,
}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="taskr",
        description="Personal task and time tracker.",
        epilog=EPILOG,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("-v", "--verbose", action="store_true", help="show debug logging")
    sub = parser.add_subparsers(dest="command", metavar="<command>")

    p = sub.add_parser("add", help="create a task")
    p.add_argument("name", nargs="+")
    when = p.add_mutually_exclusive_group()
    when.add_argument("-t", "--today", action="store_true", help="schedule for today")
    when.add_argument("-s", "--schedule", metavar="DD/MM/YYYY", help="schedule for a date")

    p = sub.add_parser("ls", help="list tasks")
    p.add_argument("-a", "--all", action="store_true", help="all tasks, not only today's")
    p.add_argument("-d", "--done", action="store_true", help="include done tasks")

    p = sub.add_parser("start", help="start the timer on a task")
    p.add_argument("task", nargs="+", metavar="id|name")

    sub.add_parser("stop", help="stop the running timer")

    p = sub.add_parser("status", help="show the running task")
    p.add_argument("-t", "--today", action="store_true", help="time tracked today")

    p = sub.add_parser("done", help="mark a task done")
    p.add_argument("task", nargs="+", metavar="id|name")

    p = sub.add_parser("todo", help="reopen a task")
    p.add_argument("task", nargs="+", metavar="id|name")

    p = sub.add_parser("edit", help="rename or reschedule a task")
    p.add_argument("task", nargs="+", metavar="id|name")
    p.add_argument("-n", "--name", nargs="+", metavar="NAME")
    p.add_argument("-s", "--schedule", metavar="DD/MM/YYYY", help='new date, "" to clear')

    p = sub.add_parser("report", help="day, week or month summary")
    p.add_argument("period", nargs="?", choices=("day", "week", "month"), default="day")
    p.add_argument("date", nargs="?", metavar="DD/MM/YYYY")

    p = sub.add_parser("del", help="delete a task (not implemented)")
    p.add_argument("id")

    return parser


def main(argv: Optional[List[str]] = None, console: Optional[Console] = None) -> int:
    """Main entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 1

    console = console or Console()
    setup_logging(verbose=args.verbose)
    logger.debug("Running %s", args.command)

    engine = TaskEngine(TaskStore())
    try:
        return COMMANDS[args.command](engine, args, console)
    except TaskrError as e:
        render.error(console, str(e))
        return 1
    except KeyboardInterrupt:
        return 130


if __name__ == "__main__":
    sys.exit(main())
