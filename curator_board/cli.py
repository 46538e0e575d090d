"""Developer CLI for the curator board engine.

Inspect week mappings and build a board offline from exported task and group
JSON, using the same code path the web layer uses.
"""

import json
from dataclasses import replace
from datetime import UTC, date, datetime
from pathlib import Path

import typer
from loguru import logger
from pydantic import TypeAdapter, ValidationError
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from curator_board.config.settings import settings
from curator_board.core.logger import setup_logger
from curator_board.scheduling.board import WeekBoard, build_board
from curator_board.scheduling.classification import CATEGORY_LABELS
from curator_board.scheduling.errors import SchedulingError
from curator_board.scheduling.grouping import STATUS_LABELS
from curator_board.scheduling.iso_week import current_week, shift_weeks, week_date_range_label, week_dates, week_offset
from curator_board.scheduling.navigation import CalendarMode, NavigationState, go_to_program_week, select_group
from curator_board.scheduling.program_week import iso_week_for_program_week, program_week_for_iso_week
from curator_board.scheduling.projection import local_time_label
from curator_board.scheduling.types import CalendarWeek, CuratorGroup, CuratorTask

console = Console()

app = typer.Typer(
    name="curator-board",
    help="Curator board CLI - week mapping and offline board rendering",
    add_completion=False,
)

_tasks_adapter = TypeAdapter(list[CuratorTask])
_groups_adapter = TypeAdapter(list[CuratorGroup])


@app.callback()
def main(
    debug: bool = typer.Option(False, "--debug", help="Enable debug logging"),
    log_file: Path | None = typer.Option(None, "--log-file", help="Also write log records to this file"),
) -> None:
    setup_logger(level="DEBUG" if debug else settings.log_level, log_file=str(log_file) if log_file else None)


def _parse_now(value: str | None) -> datetime:
    if value is None:
        return datetime.now(UTC)
    try:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError as e:
        raise typer.BadParameter(f"not an ISO timestamp: {value}") from e
    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=UTC)
    return parsed


def _parse_date(value: str) -> date:
    try:
        return date.fromisoformat(value)
    except ValueError as e:
        raise typer.BadParameter(f"not a YYYY-MM-DD date: {value}") from e


def _parse_week(value: str) -> CalendarWeek:
    try:
        return CalendarWeek.parse(value)
    except SchedulingError as e:
        raise typer.BadParameter(str(e)) from e


def _load_json(path: Path) -> object:
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as e:
        raise typer.BadParameter(f"cannot read {path}: {e}") from e


def _unwrap_tasks(payload: object) -> object:
    # The task API wraps the list as {"tasks": [...], "total": N}
    if isinstance(payload, dict) and "tasks" in payload:
        return payload["tasks"]
    return payload


def _print_week(week: CalendarWeek) -> None:
    dates = ", ".join(day.isoformat() for day in week_dates(week))
    console.print(f"[bold]{week}[/bold]  {week_date_range_label(week)}")
    console.print(dates)


@app.command()
def week(
    offset: int = typer.Option(0, "--offset", "-o", help="Weeks from the current week"),
    now: str | None = typer.Option(None, "--now", help="Current instant (ISO 8601), defaults to the wall clock"),
) -> None:
    """Show the ISO week at an offset from the current one."""
    current = current_week(_parse_now(now), settings.board_utc_offset_minutes)
    _print_week(shift_weeks(current, offset))


@app.command("program-week")
def program_week_command(
    start_date: str = typer.Argument(..., help="Group start date (YYYY-MM-DD)"),
    program_week: int = typer.Argument(..., help="1-based program week"),
) -> None:
    """Map a program week of a group to its ISO calendar week."""
    try:
        target = iso_week_for_program_week(_parse_date(start_date), program_week)
    except SchedulingError as e:
        console.print(f"[red]{escape(str(e))}[/red]")
        raise typer.Exit(code=1) from e
    _print_week(target)


@app.command("calendar-week")
def calendar_week_command(
    week_value: str = typer.Argument(..., metavar="WEEK", help="ISO week (YYYY-Www)"),
    start_date: str = typer.Argument(..., help="Group start date (YYYY-MM-DD)"),
) -> None:
    """Map an ISO calendar week to the program week of a group."""
    program_week = program_week_for_iso_week(_parse_week(week_value), _parse_date(start_date))
    if program_week is None:
        console.print(f"{week_value} is before the group start")
        return
    console.print(f"{week_value} is program week {program_week}")


def _render_board(board: WeekBoard, utc_offset_minutes: int) -> None:
    header = board.week_label
    if board.phase_label:
        header = f"{header} · {board.phase_label}"
    console.print(f"[bold]{escape(header)}[/bold]  ({board.week}, {board.date_range_label})")
    console.print(f"Done {board.progress.done} of {board.progress.total} ({board.progress.percent}%)")

    table = Table(show_lines=True)
    for day in board.days:
        table.add_column(f"{day.label} {day.date.day}")

    cells = []
    for day in board.days:
        lines = []
        for group in day.groups:
            time_label = local_time_label(group.due_date, utc_offset_minutes) or "--:--"
            count = f" x{len(group.tasks)}" if group.is_grouped else ""
            lines.append(
                f"{time_label} {escape(group.template_title)}{count}\n"
                f"  {CATEGORY_LABELS[group.category]} / {STATUS_LABELS[group.status]}"
            )
        cells.append("\n".join(lines))
    table.add_row(*cells)
    console.print(table)

    arrows = ("<-" if board.can_go_prev else "  ") + " | " + ("->" if board.can_go_next else "  ")
    console.print(f"Navigation: {arrows}")


@app.command()
def board(
    tasks_file: Path = typer.Argument(..., help="JSON list of tasks (or {'tasks': [...]})"),
    groups_file: Path | None = typer.Option(None, "--groups", "-g", help="JSON list of group metadata"),
    group_id: int | None = typer.Option(None, "--group-id", help="Selected group"),
    week_value: str | None = typer.Option(None, "--week", "-w", help="Calendar week to show (YYYY-Www)"),
    program_week: int | None = typer.Option(None, "--program-week", "-p", help="Program week of the selected group"),
    status: str | None = typer.Option(None, "--status", "-s", help="Status filter"),
    now: str | None = typer.Option(None, "--now", help="Current instant (ISO 8601)"),
) -> None:
    """Build the weekly board from exported tasks and print it."""
    current_instant = _parse_now(now)
    offset = settings.board_utc_offset_minutes
    try:
        tasks = _tasks_adapter.validate_python(_unwrap_tasks(_load_json(tasks_file)))
        groups = _groups_adapter.validate_python(_load_json(groups_file)) if groups_file else []
    except ValidationError as e:
        console.print(f"[red]Invalid input: {escape(str(e))}[/red]")
        raise typer.Exit(code=1) from e

    state = select_group(NavigationState(), group_id)
    if week_value is not None:
        target_offset = week_offset(_parse_week(week_value), current_week(current_instant, offset))
        state = replace(state, mode=CalendarMode(target_offset))

    try:
        if program_week is not None:
            selected = next((group for group in groups if group.id == group_id), None)
            state = go_to_program_week(state, selected, program_week)
        result = build_board(tasks, state, groups, current_instant, status_filter=status, utc_offset_minutes=offset)
    except SchedulingError as e:
        console.print(f"[red]{escape(str(e))}[/red]")
        raise typer.Exit(code=1) from e

    logger.debug(f"Rendering board for {result.week}")
    _render_board(result, offset)


if __name__ == "__main__":
    app()
