"""
tracker/cli.py
Terminal front-end for the activity tracker, plus `serve` for the API.

Usage:
    tracker serve [--host 127.0.0.1] [--port 3001]
    tracker list [--date 2024-03-10]
    tracker add "Tarawih" --date 2024-03-10 --time 20:00 --notes "at the mosque"
    tracker edit <id> --name "Tarawih prayer"
    tracker toggle <id>
    tracker delete <id>
    tracker stats
"""
from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from typing import List, Optional

from tracker.client.state import ActivityStateManager
from tracker.config import get_api_url, get_data_file, get_host, get_log_level, get_port
from tracker.errors import ValidationFailure

logger = logging.getLogger(__name__)


def _print_status(manager: ActivityStateManager) -> None:
    status = manager.status
    if status is not None:
        print(f"[{status.kind}] {status.text}", file=sys.stderr)


def _print_activities(manager: ActivityStateManager, selected_date: str) -> None:
    activities = manager.filter_by_date(selected_date)
    print(f"Activities for {selected_date}")
    if not activities:
        print("  No activities for this date.")
        return
    for a in activities:
        mark = "x" if a.completed else " "
        when = f" {a.time}" if a.time else ""
        print(f"  [{mark}] {a.id}{when}  {a.name}")
        if a.notes:
            print(f"        {a.notes}")


def _print_stats(manager: ActivityStateManager) -> None:
    stats = manager.stats()
    print(f"Total activities: {stats['total']}")
    print(f"Completed: {stats['completed']}")
    print(f"Completion rate: {stats['completion_rate']}%")


async def _run_client(args: argparse.Namespace) -> int:
    async with ActivityStateManager(api_url=args.api_url) as manager:
        await manager.load()
        if args.command in ("list", "stats"):
            _print_status(manager)
            if args.command == "list":
                _print_activities(manager, args.date or manager.selected_date)
            else:
                _print_stats(manager)
            return 0

        if args.command == "add":
            try:
                activity = manager.add(args.name, date=args.date, time=args.time, notes=args.notes)
            except ValidationFailure as exc:
                print(str(exc), file=sys.stderr)
                return 2
            print(activity.id)
        else:
            current = manager.get(args.id)
            if current is None:
                print(f"No activity with id {args.id}", file=sys.stderr)
                return 1
            if args.command == "edit":
                changes = {
                    k: v for k, v in (
                        ("name", args.name), ("date", args.date), ("time", args.time), ("notes", args.notes),
                    ) if v is not None
                }
                try:
                    manager.edit(current.model_copy(update=changes))
                except ValidationFailure as exc:
                    print(str(exc), file=sys.stderr)
                    return 2
            elif args.command == "toggle":
                manager.toggle_complete(args.id)
            elif args.command == "delete":
                manager.delete(args.id)

        saved = await manager.last_save
        _print_status(manager)
        return 0 if saved else 1


def _serve(args: argparse.Namespace) -> int:
    import uvicorn

    from tracker.api.app import create_app

    logger.info(f"Server running on http://{args.host}:{args.port}")
    logger.info(f"Data file location: {get_data_file()}")
    uvicorn.run(create_app(), host=args.host, port=args.port, log_level=get_log_level().lower())
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="tracker", description="Ramadhan activity tracker.")
    parser.add_argument("--api-url", default=None, help=f"Activities endpoint (default {get_api_url()})")
    sub = parser.add_subparsers(dest="command", required=True)

    serve = sub.add_parser("serve", help="Run the activities API server")
    serve.add_argument("--host", default=get_host())
    serve.add_argument("--port", type=int, default=get_port())

    list_cmd = sub.add_parser("list", help="Show activities for a date (default today)")
    list_cmd.add_argument("--date", default=None, help="YYYY-MM-DD")

    sub.add_parser("stats", help="Show completion statistics")

    add = sub.add_parser("add", help="Add an activity")
    add.add_argument("name")
    add.add_argument("--date", default=None, help="YYYY-MM-DD (default today)")
    add.add_argument("--time", default="")
    add.add_argument("--notes", default="")

    edit = sub.add_parser("edit", help="Edit an activity")
    edit.add_argument("id")
    edit.add_argument("--name", default=None)
    edit.add_argument("--date", default=None)
    edit.add_argument("--time", default=None)
    edit.add_argument("--notes", default=None)

    toggle = sub.add_parser("toggle", help="Toggle an activity's completion")
    toggle.add_argument("id")

    delete = sub.add_parser("delete", help="Delete an activity")
    delete.add_argument("id")

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=get_log_level(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    if args.command == "serve":
        return _serve(args)
    return asyncio.run(_run_client(args))


if __name__ == "__main__":
    raise SystemExit(main())
