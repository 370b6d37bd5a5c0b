"""
CLI commands for stored deck mastery.

Commands:
    drill mastery show <deck>   - Mastery summary and per-card records
    drill mastery list          - Decks with stored mastery
    drill mastery reset <deck>  - Delete a deck's mastery
"""
from __future__ import annotations

from pathlib import Path

import typer
from rich import print as rprint
from rich.console import Console
from rich.table import Table

from config import get_settings
from src.core.errors import MasteryDataError
from src.mastery.repository import JsonFileMasteryRepository

console = Console()

mastery_app = typer.Typer(
    name="mastery",
    help="Inspect and reset stored deck mastery",
    no_args_is_help=True,
)


def _get_repository(mastery_dir: Path | None) -> JsonFileMasteryRepository:
    return JsonFileMasteryRepository(mastery_dir or get_settings().mastery_dir)


def _format_progress_bar(percentage: int, width: int = 20) -> str:
    filled = int(percentage / 100 * width)
    return "#" * filled + "-" * (width - filled)


@mastery_app.command("show")
def show_mastery(
    deck_id: str = typer.Argument(..., help="Deck identifier"),
    mastery_dir: Path = typer.Option(None, "--dir", help="Mastery store directory"),
) -> None:
    """Show mastery for a deck."""
    try:
        deck = _get_repository(mastery_dir).load(deck_id)
    except MasteryDataError as e:
        rprint(f"[red]Error:[/red] {e}")
        raise typer.Exit(code=1)

    if deck is None:
        rprint(f"[yellow]No mastery stored for deck '{deck_id}'.[/yellow]")
        raise typer.Exit(code=1)

    percentage = deck.mastery_percentage
    rprint(
        f"[bold]{deck.deck_id}[/bold]  {_format_progress_bar(percentage)} {percentage}%  "
        f"({deck.mastered_count}/{deck.total_cards} mastered, threshold {deck.mastery_threshold})"
    )

    table = Table()
    table.add_column("Card", justify="right")
    table.add_column("Streak", justify="right")
    table.add_column("Attempts", justify="right")
    table.add_column("Status")
    table.add_column("Mastered at", style="dim")

    for index, record in sorted(deck.mastered_cards.items()):
        mastered = deck.is_record_mastered(record)
        table.add_row(
            str(index),
            str(record.consecutive_correct),
            str(record.attempt_count),
            "[green]mastered[/green]" if mastered else "[yellow]learning[/yellow]",
            record.mastered_at.isoformat(timespec="seconds") if mastered and record.mastered_at else "",
        )

    console.print(table)


@mastery_app.command("list")
def list_decks(
    mastery_dir: Path = typer.Option(None, "--dir", help="Mastery store directory"),
) -> None:
    """List decks with stored mastery."""
    deck_ids = _get_repository(mastery_dir).list_decks()
    if not deck_ids:
        rprint("[dim]No stored mastery.[/dim]")
        return
    for deck_id in deck_ids:
        rprint(f"  {deck_id}")


@mastery_app.command("reset")
def reset_mastery(
    deck_id: str = typer.Argument(..., help="Deck identifier"),
    mastery_dir: Path = typer.Option(None, "--dir", help="Mastery store directory"),
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation"),
) -> None:
    """Delete all stored mastery for a deck."""
    if not yes and not typer.confirm(f"Reset mastery for '{deck_id}'?"):
        raise typer.Abort()

    if _get_repository(mastery_dir).delete(deck_id):
        rprint(f"[green]Reset mastery for '{deck_id}'.[/green]")
    else:
        rprint(f"[yellow]No mastery stored for deck '{deck_id}'.[/yellow]")
