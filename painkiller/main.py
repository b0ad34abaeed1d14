#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Painkiller Habits - Command line entry point

    painkiller add quit-smoking
    painkiller log "Quit Smoking" success
    painkiller calendar "Quit Smoking"
    painkiller serve --port 8080
"""

import argparse
import asyncio
import logging
import sys
from typing import List, Optional

from painkiller.config import config
from painkiller.core.ai_service import AdvisoryService
from painkiller.core.catalog import get_definition, habits_by_category
from painkiller.core.database import HabitRepository, create_repository
from painkiller.core.heatmap import MonthGrid, build_calendar
from painkiller.core.models import HabitStatus, UserHabit, ValidationError
from painkiller.core.streaks import calculate_current_streak, calculate_longest_streak
from painkiller.utils.datetime_utils import parse_date_key, today
from painkiller.utils.logger import setup_logging

logger = logging.getLogger(__name__)

CELL_SYMBOLS = {
    HabitStatus.NONE: ".",
    HabitStatus.SUCCESS: "#",
    HabitStatus.PARTIAL: "+",
    HabitStatus.FAIL: "x",
}


def resolve_habit(repository: HabitRepository, key: str) -> UserHabit:
    habit = repository.get(key) or repository.find_by_name(key)
    if habit is None:
        raise SystemExit(f"No tracked habit matches {key!r}")
    return habit


def render_month(month: MonthGrid) -> List[str]:
    lines = [f"{month.name} {month.year}", "S M T W T F S"]
    for week in month.weeks():
        symbols = []
        for cell in week:
            if cell is None:
                symbols.append(" ")
            elif cell.is_future:
                symbols.append("_")
            else:
                symbols.append(CELL_SYMBOLS[cell.status])
        lines.append(" ".join(symbols))
    return lines


def confirm(prompt: str) -> bool:
    try:
        answer = input(f"{prompt} [y/N] ")
    except EOFError:
        return False
    return answer.strip().lower() in ("y", "yes")


# ===== COMMANDS =====

def cmd_catalog(args, repository: HabitRepository) -> int:
    tracked = {habit.name for habit in repository.list()}
    for category, definitions in habits_by_category().items():
        print(f"[{category.value}]")
        for definition in definitions:
            marker = "*" if definition.name in tracked else " "
            print(f" {marker} {definition.id:<22} {definition.name}")
    return 0


def cmd_list(args, repository: HabitRepository) -> int:
    habits = repository.list()
    if not habits:
        print("No habits tracked yet. Pick one with `painkiller catalog` and `painkiller add <id>`.")
        return 0

    day = today()
    for habit in habits:
        streak = calculate_current_streak(habit.logs, day)
        print(f"{habit.id}  {habit.name:<28} streak {streak:>3}  today: {habit.status_on(day).label}")
    return 0


def cmd_add(args, repository: HabitRepository) -> int:
    definition = get_definition(args.definition_id)
    if definition is None:
        print(f"Unknown catalog habit {args.definition_id!r}", file=sys.stderr)
        return 1

    habit = repository.add(definition)
    if habit is None:
        print(f"{definition.name} is already tracked")
    else:
        print(f"Tracking {habit.name} ({habit.id})")
    return 0


def cmd_remove(args, repository: HabitRepository) -> int:
    habit = resolve_habit(repository, args.habit)
    if not args.yes and not confirm(f"Delete {habit.name} and all its data?"):
        print("Cancelled")
        return 1

    repository.remove(habit.id)
    print(f"Removed {habit.name}")
    return 0


def cmd_log(args, repository: HabitRepository) -> int:
    habit = resolve_habit(repository, args.habit)
    day = parse_date_key(args.date) if args.date else today()
    updated = repository.set_day_status(habit.id, day, args.status)
    print(f"{updated.name} on {day.isoformat()}: {updated.status_on(day).label}")
    return 0


def cmd_note(args, repository: HabitRepository) -> int:
    habit = resolve_habit(repository, args.habit)
    day = parse_date_key(args.date) if args.date else today()
    repository.set_day_note(habit.id, day, args.text)
    print(f"Note saved for {habit.name} on {day.isoformat()}")
    return 0


def cmd_calendar(args, repository: HabitRepository) -> int:
    habit = resolve_habit(repository, args.habit)
    day = today()
    print(f"{habit.name}: current streak {calculate_current_streak(habit.logs, day)}, "
          f"longest {calculate_longest_streak(habit.logs)}")
    for month in build_calendar(habit.logs, day):
        print()
        print("\n".join(render_month(month)))
    print()
    print("# success  + partial  x fail  . none  _ future")
    return 0


def cmd_advice(args, repository: HabitRepository) -> int:
    habit = resolve_habit(repository, args.habit)
    service = AdvisoryService()
    print(asyncio.run(service.get_motivation(habit, today())))
    return 0


def cmd_serve(args, repository: HabitRepository) -> int:
    from painkiller.dashboard.app import run

    run(host=args.host, port=args.port, repository=repository)
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="painkiller", description="Track daily habits")
    parser.add_argument('--data-file', help='Habit store (default: %(default)s)', default=str(config.storage.path))
    parser.add_argument('--dev', action='store_true', help='Verbose logging')
    subparsers = parser.add_subparsers(dest='command', required=True)

    subparsers.add_parser('catalog', help='Show predefined habits').set_defaults(func=cmd_catalog)
    subparsers.add_parser('list', help='Show tracked habits').set_defaults(func=cmd_list)

    add = subparsers.add_parser('add', help='Track a catalog habit')
    add.add_argument('definition_id')
    add.set_defaults(func=cmd_add)

    remove = subparsers.add_parser('remove', help='Delete a habit and all its data')
    remove.add_argument('habit', help='Habit id or name')
    remove.add_argument('--yes', action='store_true', help='Skip the confirmation prompt')
    remove.set_defaults(func=cmd_remove)

    log = subparsers.add_parser('log', help='Toggle a day status')
    log.add_argument('habit', help='Habit id or name')
    log.add_argument('status', choices=['success', 'partial', 'fail', 'none'])
    log.add_argument('--date', help='YYYY-MM-DD (default: today)')
    log.set_defaults(func=cmd_log)

    note = subparsers.add_parser('note', help='Write a note for a day')
    note.add_argument('habit', help='Habit id or name')
    note.add_argument('text')
    note.add_argument('--date', help='YYYY-MM-DD (default: today)')
    note.set_defaults(func=cmd_note)

    cal = subparsers.add_parser('calendar', help='Show the twelve-month heatmap')
    cal.add_argument('habit', help='Habit id or name')
    cal.set_defaults(func=cmd_calendar)

    adv = subparsers.add_parser('advice', help='Ask for a motivational message')
    adv.add_argument('habit', help='Habit id or name')
    adv.set_defaults(func=cmd_advice)

    serve = subparsers.add_parser('serve', help='Run the dashboard API')
    serve.add_argument('--host', default=None)
    serve.add_argument('--port', type=int, default=None)
    serve.set_defaults(func=cmd_serve)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    setup_logging()
    if args.dev or config.server.debug_mode:
        logging.getLogger().setLevel(logging.DEBUG)
        logger.debug(f"Configuration: {config.to_dict()}")

    repository = create_repository(args.data_file)
    try:
        return args.func(args, repository)
    except ValidationError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2


if __name__ == '__main__':
    sys.exit(main())
