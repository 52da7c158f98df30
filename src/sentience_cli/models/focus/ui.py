"""Full-screen timer UI for focus mode."""

import time

from rich.align import Align
from rich.console import Console, Group
from rich.layout import Layout
from rich.live import Live
from rich.panel import Panel
from rich.text import Text

from .events import PersistenceFailedEvent, PhaseCompletedEvent, TimerEvent
from .keyboard import KeyboardHandler
from .notifier import completion_message
from .ticker import Ticker
from .timer import TimerEngine, TimerState

PHASE_LABELS = {"work": "Focus", "break": "Break"}


def format_time(seconds: int) -> str:
    """Format a countdown as MM:SS."""
    mins = seconds // 60
    secs = seconds % 60
    return f"{mins:02d}:{secs:02d}"


def format_total_time(seconds: int) -> str:
    """Format accumulated time as '1h 5m' or '5m'."""
    hours = seconds // 3600
    mins = (seconds % 3600) // 60
    if hours > 0:
        return f"{hours}h {mins}m"
    return f"{mins}m"


class TimerDisplay:
    """Renders a TimerEngine full-screen and drives it from the keyboard."""

    def __init__(self, console: Console | None = None):
        self.console = console or Console()
        self.notice: Text | None = None

    def create_layout(self, state: TimerState) -> Layout:
        """Create the timer layout with all components."""
        layout = Layout()
        layout.split_column(
            Layout(name="header", size=3),
            Layout(name="body"),
            Layout(name="footer", size=3),
        )

        if state.status == "paused":
            title, color = "PAUSED", "yellow"
        elif state.status == "idle":
            title, color = "READY", "dim"
        elif state.phase == "work":
            title, color = "Sentience Focus Mode", "cyan"
        else:
            title, color = "On Break", "green"

        header_text = Text(title, style=f"bold {color}", justify="center")
        layout["header"].update(Align.center(header_text, vertical="middle"))
        layout["body"].update(Align.center(self._create_body(state), vertical="middle"))
        layout["footer"].update(
            Align.center(self._create_footer(state), vertical="middle")
        )
        return layout

    def _create_body(self, state: TimerState) -> Group:
        components = [
            Text(PHASE_LABELS[state.phase], style="bold white", justify="center"),
            Text(""),
        ]

        remaining = state.remaining_seconds
        if state.status != "running":
            timer_color = "yellow"
        elif state.phase == "break":
            timer_color = "green"
        elif remaining < 60:
            timer_color = "red"
        else:
            timer_color = "cyan"
        components.append(
            Text(format_time(remaining), style=f"bold {timer_color}", justify="center")
        )
        components.append(Text(""))

        bar_width = 40
        progress_pct = int(state.progress * 100)
        filled = int(bar_width * state.progress)
        progress_bar = "▓" * filled + "░" * (bar_width - filled)
        components.append(
            Text(f"{progress_bar}  {progress_pct}%", style="dim", justify="center")
        )
        components.append(Text(""))
        components.append(
            Text(
                f"Sessions: {state.sessions_completed}  •  "
                f"Focus time: {format_total_time(state.total_focus_seconds)}",
                style="dim",
                justify="center",
            )
        )

        if self.notice is not None:
            components.append(Text(""))
            components.append(self.notice)

        return Group(*components)

    def _create_footer(self, state: TimerState) -> Text:
        if state.status == "running":
            hints = "Press 'p' to pause  •  'r' to reset  •  'q' to quit"
        else:
            hints = "Press 's' to start  •  'r' to reset  •  'q' to quit"
        return Text(hints, style="dim", justify="center")

    def handle_event(self, event: TimerEvent) -> None:
        """Turn engine events into the on-screen notice."""
        if isinstance(event, PhaseCompletedEvent):
            title, body = completion_message(event)
            self.notice = Text(f"{title} {body}", style="bold green", justify="center")
        elif isinstance(event, PersistenceFailedEvent):
            self.notice = Text(
                f"Could not save session: {event.reason}",
                style="yellow",
                justify="center",
            )

    @staticmethod
    def apply_action(engine: TimerEngine, action: str | None) -> None:
        """Apply a keyboard action to the engine."""
        if action == "start":
            engine.start()
        elif action == "pause":
            engine.pause()
        elif action == "toggle":
            if engine.is_running:
                engine.pause()
            else:
                engine.start()
        elif action == "reset":
            engine.reset()

    def run(
        self,
        engine: TimerEngine,
        ticker: Ticker | None = None,
        keyboard: KeyboardHandler | None = None,
        autostart: bool = True,
    ) -> TimerState:
        """
        Run the full-screen timer until the user quits.

        The ticker and keyboard are always released on exit.

        Returns the final snapshot.
        """
        ticker = ticker or Ticker()
        keyboard = keyboard or KeyboardHandler()
        unsubscribe = engine.subscribe(self.handle_event)

        try:
            if autostart:
                engine.start()
            with Live(
                self.create_layout(engine.get_snapshot()),
                console=self.console,
                refresh_per_second=4,
                screen=True,
            ) as live:
                while True:
                    action = keyboard.get_action()
                    if action == "quit":
                        break
                    self.apply_action(engine, action)

                    if engine.is_running:
                        ticker.resume()
                    else:
                        ticker.pause()
                    for _ in range(ticker.poll()):
                        engine.tick()
                    engine.report_store_failures()

                    live.update(self.create_layout(engine.get_snapshot()))
                    time.sleep(min(0.25, ticker.seconds_until_next()))
        except KeyboardInterrupt:
            pass
        finally:
            unsubscribe()
            keyboard.stop()
            ticker.close()

        return engine.get_snapshot()


def show_summary(state: TimerState, console: Console | None = None) -> None:
    """Show a summary panel after the timer UI closes."""
    console = console or Console()

    panel = Panel(
        f"""[bold]Focus timer stopped[/bold]

Phase: {PHASE_LABELS[state.phase]} ({format_time(state.remaining_seconds)} left)
Sessions completed: {state.sessions_completed}
Total focus time: {format_total_time(state.total_focus_seconds)}

Timer saved. Run 'sentience focus start' to continue.""",
        border_style="cyan",
        padding=(1, 2),
    )

    console.print(panel)
