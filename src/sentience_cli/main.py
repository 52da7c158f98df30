"""Main entry point for Sentience CLI."""

import typer
from rich.console import Console

from sentience_cli import __version__
from sentience_cli.commands import config, focus

app = typer.Typer(
    name="sentience",
    help="Focus timer and study statistics for Sentience",
    no_args_is_help=True,
)

console = Console()

app.add_typer(focus.app, name="focus", help="Pomodoro focus timer and statistics")
app.add_typer(config.app, name="config", help="Configuration management")


@app.command()
def version() -> None:
    """Show version information."""
    console.print(f"[bold]Sentience CLI[/bold] version [cyan]{__version__}[/cyan]")


def main() -> None:
    """Main entry point."""
    app()


if __name__ == "__main__":
    main()
