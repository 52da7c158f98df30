"""Focus mode commands with fullscreen Pomodoro timer."""

from pathlib import Path

import typer
from pydantic import ValidationError
from rich.table import Table

from sentience_cli.models.config_models import FocusSettings
from sentience_cli.models.focus.events import PersistenceFailedEvent
from sentience_cli.models.focus.exceptions import ConfigurationError
from sentience_cli.models.focus.state import TimerStateManager
from sentience_cli.models.focus.stats import (
    compute_stats,
    current_streak_days,
    daily_breakdown,
)
from sentience_cli.models.focus.ui import (
    PHASE_LABELS,
    TimerDisplay,
    format_time,
    format_total_time,
    show_summary,
)
from sentience_cli.services.config_service import get_config_service
from sentience_cli.services.store_service import (
    build_engine,
    build_notifier,
    build_session_store,
)
from sentience_cli.utils.ui.console import get_console
from sentience_cli.utils.ui.formatters import (
    format_output,
    format_success,
    format_warning,
)

from .decorators import command_wrapper

console = get_console()
app = typer.Typer(help="Focus mode with Pomodoro timer")


def get_state_manager() -> TimerStateManager:
    """TimerStateManager rooted in the configured data directory."""
    svc = get_config_service()
    return TimerStateManager(state_dir=Path(svc.data_dir) / "state")


def _open_store():
    svc = get_config_service()
    return build_session_store(svc.config, data_dir=Path(svc.data_dir))


def render_progress_bar(value: float, max_value: float, width: int = 10) -> str:
    """Render a progress bar using block characters."""
    ratio = 0.0 if max_value <= 0 else min(value / max_value, 1.0)
    filled = int(ratio * width)
    return "█" * filled + "░" * (width - filled)


@app.command("start")
@command_wrapper
def start_focus(
    work: int | None = typer.Option(
        None, "--work", "-w", help="Work duration (minutes)"
    ),
    break_minutes: int | None = typer.Option(
        None, "--break", "-b", help="Break duration (minutes)"
    ),
    fresh: bool = typer.Option(
        False, "--fresh", help="Discard the saved timer and start a new one"
    ),
):
    """Start (or continue) the focus timer."""
    svc = get_config_service()
    config = svc.config

    overrides = {}
    if work is not None:
        overrides["work_minutes"] = work
    if break_minutes is not None:
        overrides["break_minutes"] = break_minutes
    try:
        focus = FocusSettings.model_validate({**config.focus.model_dump(), **overrides})
    except ValidationError as e:
        raise ConfigurationError(str(e)) from e
    timer_config = focus.to_timer_config()

    screen = get_console(color=config.output.color)
    state_manager = get_state_manager()
    store = _open_store()
    try:
        engine = build_engine(
            config, store=store, notifier=build_notifier(config, screen)
        )
        failed: list[PersistenceFailedEvent] = []

        def collect_failure(event):
            if isinstance(event, PersistenceFailedEvent):
                failed.append(event)

        engine.subscribe(collect_failure)
        if fresh:
            state_manager.delete()
        elif state_manager.restore_into(engine):
            console.print("[dim]Continuing saved timer[/dim]")
        engine.apply_settings(timer_config)

        display = TimerDisplay(screen)
        try:
            final = display.run(engine)
        finally:
            state_manager.save(engine)
            engine.sync_store()
    finally:
        store.close()

    show_summary(final, screen)
    if failed:
        format_warning(
            f"{len(failed)} interval(s) could not be saved: {failed[-1].reason}"
        )


@app.command("status")
@command_wrapper
def focus_status():
    """Show the saved timer."""
    state_manager = get_state_manager()
    config = get_config_service().config

    engine = build_engine(config)
    if not state_manager.restore_into(engine):
        console.print("[dim]No saved focus timer[/dim]")
        raise typer.Exit(0)

    state = engine.get_snapshot()
    console.print("\n[bold cyan]Focus Timer[/bold cyan]\n")
    console.print(f"Phase: {PHASE_LABELS[state.phase]}")
    console.print(f"Status: {state.status}")
    console.print(f"Time remaining: {format_time(state.remaining_seconds)}")
    console.print(f"Sessions completed: {state.sessions_completed}")
    console.print(f"Total focus time: {format_total_time(state.total_focus_seconds)}")
    console.print(
        f"Durations: {config.focus.work_minutes}m work / "
        f"{config.focus.break_minutes}m break"
    )
    console.print()


@app.command("settings")
@command_wrapper
def focus_settings(
    work: int | None = typer.Option(
        None, "--work", "-w", help="Work duration (minutes)"
    ),
    break_minutes: int | None = typer.Option(
        None, "--break", "-b", help="Break duration (minutes)"
    ),
    sound: bool | None = typer.Option(
        None, "--sound/--no-sound", help="Completion sound"
    ),
    notifications: bool | None = typer.Option(
        None, "--notifications/--no-notifications", help="Desktop notifications"
    ),
    weekly_goal: int | None = typer.Option(
        None, "--weekly-goal", help="Weekly focus goal (minutes)"
    ),
):
    """Apply new timer settings (takes effect from the next phase if running)."""
    svc = get_config_service()
    changes = {
        key: value
        for key, value in {
            "work_minutes": work,
            "break_minutes": break_minutes,
            "sound_enabled": sound,
            "notifications_enabled": notifications,
            "weekly_goal_minutes": weekly_goal,
        }.items()
        if value is not None
    }

    if not changes:
        format_output(svc.config.focus.model_dump(), "table", title="Focus settings")
        return

    try:
        focus = FocusSettings.model_validate({**svc.config.focus.model_dump(), **changes})
    except ValidationError as e:
        raise ConfigurationError(str(e)) from e

    # Saved timer first: the engine validates durations too
    state_manager = get_state_manager()
    engine = build_engine(svc.config)
    if state_manager.restore_into(engine):
        engine.apply_settings(focus.to_timer_config())
        state_manager.save(engine)

    svc.set("focus", focus.model_dump())
    format_success(
        f"Focus settings saved ({focus.work_minutes}m work / {focus.break_minutes}m break)"
    )


@app.command("stats")
@command_wrapper
def focus_stats(
    days: int = typer.Option(7, "--days", "-d", help="Days in the daily breakdown"),
    output: str | None = typer.Option(
        None, "--output", "-o", help="Output format: table, json, yaml"
    ),
):
    """Show focus statistics."""
    config = get_config_service().config
    output = output or config.output.format

    store = _open_store()
    try:
        intervals = store.list_intervals()
    finally:
        store.close()

    stats = compute_stats(intervals, weekly_goal_minutes=config.focus.weekly_goal_minutes)
    daily = daily_breakdown(intervals, days=days)
    streak = current_streak_days(intervals)

    if output in ("json", "yaml"):
        data = stats.to_dict()
        data["streak_days"] = streak
        data["daily"] = daily
        format_output(data, output)
        return

    console.print("\n[bold]Focus Statistics[/bold]\n")
    console.print(f"Total sessions: {stats.total_sessions}")
    console.print(f"Total focus time: {format_total_time(stats.total_minutes * 60)}")
    console.print(f"Average session: {stats.average_session_length} minutes")
    console.print(f"Break time: {format_total_time(stats.break_minutes * 60)}")
    console.print(f"Current streak: {streak} day(s)")
    bar = render_progress_bar(stats.weekly_progress, stats.weekly_goal, width=20)
    console.print(
        f"This week: {bar} {stats.weekly_progress}/{stats.weekly_goal} min "
        f"({stats.weekly_progress_percent}%)"
    )

    table = Table(title=f"Last {days} days", show_header=True)
    table.add_column("Date", style="cyan")
    table.add_column("Sessions", justify="right")
    table.add_column("Minutes", justify="right")
    for day in daily:
        table.add_row(day["date"], str(day["sessions"]), str(day["minutes"]))
    console.print(table)


@app.command("history")
@command_wrapper
def focus_history(
    limit: int = typer.Option(20, "--limit", "-n", help="Number of intervals to show"),
    type_: str | None = typer.Option(None, "--type", "-t", help="Filter: work or break"),
):
    """Show recently completed focus and break intervals."""
    if type_ is not None and type_ not in ("work", "break"):
        raise ConfigurationError("--type must be 'work' or 'break'")

    store = _open_store()
    try:
        intervals = store.list_intervals()
    finally:
        store.close()

    if type_:
        intervals = [i for i in intervals if i.type == type_]
    intervals = sorted(intervals, key=lambda i: i.date, reverse=True)[:limit]

    if not intervals:
        console.print("[yellow]No focus sessions found[/yellow]")
        return

    table = Table(title=f"Recent Sessions ({len(intervals)})", show_header=True)
    table.add_column("Date", style="cyan")
    table.add_column("Type")
    table.add_column("Duration", justify="right")
    for interval in intervals:
        table.add_row(
            interval.date.strftime("%Y-%m-%d %H:%M"),
            PHASE_LABELS[interval.type],
            f"{interval.duration_minutes}m",
        )
    console.print(table)


@app.command("clear")
@command_wrapper
def clear_history(
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation"),
):
    """Delete all recorded focus sessions."""
    if not yes and not typer.confirm("Delete all recorded focus sessions?"):
        format_warning("Cancelled")
        raise typer.Exit(0)

    store = _open_store()
    try:
        count = len(store.list_intervals())
        store.clear()
    finally:
        store.close()

    format_success(f"Deleted {count} focus session(s)")


@app.command("reset")
@command_wrapper
def reset_timer():
    """Forget the saved timer (recorded sessions are kept)."""
    state_manager = get_state_manager()
    if state_manager.load() is None:
        console.print("[dim]No saved focus timer[/dim]")
        raise typer.Exit(0)
    state_manager.delete()
    format_success("Saved timer discarded")
