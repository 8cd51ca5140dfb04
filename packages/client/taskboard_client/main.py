"""
Client entry point.

Loads configuration, configures logging, loads the board and runs one command.
"""

from __future__ import annotations

import argparse
import asyncio
import sys
from typing import Optional

from taskboard_shared.logging import configure_logging
from taskboard_shared.schemas.common import TaskPriority, TaskStatus
from taskboard_shared.schemas.tasks import TaskCreate, TaskUpdate
from taskboard_shared.schemas.users import UserPublic

from .analysis import analyze, format_duration, tracked_time
from .api import ApiError, TaskBoardAPI
from .board import TaskBoard
from .config import ClientConfig, load_config
from .team import visible_tasks


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="TaskBoard command-line client")
    parser.add_argument(
        "-c", "--config",
        default="taskboard.yaml",
        help="Path to configuration file (default: taskboard.yaml)",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    tasks = sub.add_parser("tasks", help="List visible tasks")
    tasks.add_argument("--assignee", help="Only tasks assigned to this user id (admins)")

    add = sub.add_parser("add", help="Create a task")
    add.add_argument("title")
    add.add_argument("--description", default="")
    add.add_argument("--priority", choices=[p.value for p in TaskPriority], default="Medium")
    add.add_argument("--assignee", help="Assignee user id (defaults to yourself)")
    add.add_argument("--describe", action="store_true", help="Ask the server for a description")

    status = sub.add_parser("status", help="Move a task to another column")
    status.add_argument("task_id")
    status.add_argument("status", choices=[s.value for s in TaskStatus])

    remark = sub.add_parser("remark", help="Add a remark")
    remark.add_argument("task_id")
    remark.add_argument("text")

    for name, help_text in (
        ("start", "Start the task timer"),
        ("stop", "Stop the task timer"),
        ("delete", "Delete a task"),
    ):
        sub.add_parser(name, help=help_text).add_argument("task_id")

    sub.add_parser("analysis", help="Summarise visible tasks")

    describe = sub.add_parser("describe", help="Suggest a description for a title")
    describe.add_argument("title")
    return parser


async def _login(api: TaskBoardAPI, config: ClientConfig) -> Optional[UserPublic]:
    if config.user is None:
        return None
    password = config.user.password
    if password is None:
        raise ApiError(f"Set {config.user.password_env} to log in as {config.user.username}")
    return await api.login(config.user.username, password)


async def execute(args: argparse.Namespace, config: ClientConfig, api: TaskBoardAPI) -> int:
    board = TaskBoard(api, send_versions=config.board.send_versions)
    user = await _login(api, config)
    if not await board.load():
        print("Error: could not load the board", file=sys.stderr)
        return 1

    tasks = board.tasks
    if user is not None:
        tasks = visible_tasks(tasks, user, board.reporting, getattr(args, "assignee", None))

    if args.command == "tasks":
        for task in tasks:
            timer = " (running)" if task.running_log else ""
            print(
                f"{task.id}  {task.status.value:<11}  {task.priority.value:<6}  "
                f"{format_duration(tracked_time(task))}{timer}  {task.title}"
            )
        return 0

    if args.command == "analysis":
        report = analyze(tasks)
        print(f"Total tasks:   {report.total_tasks}")
        print(f"Time logged:   {report.total_hours} hrs")
        print(f"Overdue tasks: {report.overdue_tasks}")
        for status, count in report.by_status.items():
            print(f"  {status.value:<11} {count}")
        for priority, count in report.by_priority.items():
            print(f"  {priority.value:<11} {count}")
        for task in report.recently_completed:
            print(f"  completed: {task.title}")
        return 0

    if args.command == "describe":
        print(await board.describe(args.title) or "")
        return 0

    if args.command == "add":
        assignee = args.assignee or (user.id if user else None)
        if not assignee:
            print("Error: --assignee is required without a configured user", file=sys.stderr)
            return 1
        description = args.description
        if args.describe and not description:
            description = await board.describe(args.title) or ""
        task = await board.add_task(
            TaskCreate(
                title=args.title,
                description=description,
                priority=TaskPriority(args.priority),
                assignee_id=assignee,
            )
        )
        if task:
            print(task.id)
        return 0 if task else 1

    if args.command == "delete":
        return 0 if await board.delete_task(args.task_id) else 1

    if args.command == "status":
        result = await board.update_task(args.task_id, TaskUpdate(status=TaskStatus(args.status)))
    elif args.command == "remark":
        result = await board.add_remark(args.task_id, args.text)
    elif args.command == "start":
        result = await board.start_timer(args.task_id)
    else:
        result = await board.stop_timer(args.task_id)

    if result is None:
        print(f"Error: {args.command} failed for {args.task_id}", file=sys.stderr)
        return 1
    print(f"{result.id}  {result.status.value}  {format_duration(tracked_time(result))}")
    return 0


async def _main(args: argparse.Namespace, config: ClientConfig) -> int:
    async with TaskBoardAPI(
        config.server.url,
        verify_tls=config.server.verify_tls,
        request_timeout=config.server.request_timeout_seconds,
    ) as api:
        try:
            return await execute(args, config, api)
        except ApiError as exc:
            print(f"Error: {exc.message}", file=sys.stderr)
            return 1


def run() -> None:
    """CLI entry point for the client."""
    args = build_parser().parse_args()

    try:
        config = load_config(args.config)
    except FileNotFoundError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        sys.exit(1)
    except Exception as exc:
        print(f"Configuration error: {exc}", file=sys.stderr)
        sys.exit(1)

    configure_logging(config.logging.level, config.logging.format)
    sys.exit(asyncio.run(_main(args, config)))


if __name__ == "__main__":
    run()
