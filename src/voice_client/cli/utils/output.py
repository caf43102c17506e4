"""Rich console output formatting utilities."""

from typing import Any

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from voice_client.models import Clip, ClipStat, Sentence

console = Console()


def print_error(message: str) -> None:
    """Print an error message in red."""
    console.print(f"[bold red]Error:[/bold red] {escape(message)}")


def print_warning(message: str) -> None:
    """Print a warning message in yellow."""
    console.print(f"[bold yellow]Warning:[/bold yellow] {escape(message)}")


def print_success(message: str) -> None:
    """Print a success message in green."""
    console.print(f"[bold green]Success:[/bold green] {escape(message)}")


def create_sentence_table(sentences: list[Sentence]) -> Table:
    table = Table(title="Sentences")
    table.add_column("ID", style="cyan", no_wrap=True)
    table.add_column("Text")
    for sentence in sentences:
        table.add_row(sentence.id, sentence.text)
    return table


def create_clip_table(clips: list[Clip]) -> Table:
    table = Table(title="Clips")
    table.add_column("ID", style="cyan", no_wrap=True)
    table.add_column("Text")
    table.add_column("Sound", style="magenta")
    for clip in clips:
        table.add_row(clip.id, clip.text, clip.sound)
    return table


def create_stats_table(stats: list[ClipStat]) -> Table:
    """Create a table of recorded vs. validated clip totals per date."""
    table = Table(title="Clip Statistics")
    table.add_column("Date", no_wrap=True)
    table.add_column("Total", justify="right", style="green")
    table.add_column("Valid", justify="right")
    for stat in stats:
        table.add_row(stat.date, f"{stat.total:,}", f"{stat.valid:,}")
    return table


def create_leaderboard_table(rows: list[dict[str, Any]]) -> Table:
    """Create a table from leaderboard rows.

    Leaderboard rows are opaque; columns are taken from the first row.
    """
    table = Table(title="Leaderboard")
    if not rows:
        return table
    columns = list(rows[0].keys())
    for column in columns:
        table.add_column(column)
    for row in rows:
        table.add_row(*(str(row.get(column, "")) for column in columns))
    return table
