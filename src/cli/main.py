"""
Typer CLI for spaced-drill.

Commands:
    drill strategies            - List registered scheduling strategies
    drill simulate              - Simulate a round and show the resulting order
    drill mastery show <deck>   - Show stored mastery for a deck
    drill mastery list          - List decks with stored mastery
    drill mastery reset <deck>  - Delete stored mastery for a deck

Usage:
    drill --help
    drill simulate --cards 20 --miss-rate 0.3 --seed 7
    drill simulate --strategy leitner_box --aggressiveness intensive
    drill simulate --deck spanish-101 --seed 7
    drill mastery show spanish-101
"""

from __future__ import annotations

import random
import sys
from dataclasses import replace
from pathlib import Path

import typer
from loguru import logger
from rich import print as rprint
from rich.console import Console
from rich.table import Table

from config import get_settings
from src.cli.mastery_commands import mastery_app
from src.core.errors import SchedulerError
from src.core.models import Card
from src.mastery.repository import JsonFileMasteryRepository
from src.mastery.tracker import MasteryTracker
from src.scheduling.registry import default_registry
from src.scheduling.smart_spaced import SmartSpacedScheduler
from src.session.history import SessionHistory
from src.session.manager import SessionStateManager

console = Console()

app = typer.Typer(
    help="spaced-drill CLI: in-session spaced reinforcement and mastery tracking",
    no_args_is_help=True,
)
app.add_typer(mastery_app, name="mastery")

# Upper bound on answers per simulated round, as a multiple of the card count
MAX_ANSWERS_FACTOR = 10


@app.callback()
def main_callback(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show scheduling debug logs"),
):
    """Configure logging for every command."""
    settings = get_settings()
    logger.remove()
    logger.add(
        sys.stderr,
        level="DEBUG" if verbose else settings.log_level.upper(),
        format="<dim>{time:HH:mm:ss}</dim> | <level>{level: <8}</level> | {message}",
    )


@app.command("strategies")
def list_strategies() -> None:
    """List available scheduling strategies."""
    settings = get_settings()

    table = Table(title="Scheduling Strategies")
    table.add_column("Key", style="cyan")
    table.add_column("Name", style="bold")
    table.add_column("Description")

    for info in default_registry().available():
        key = info.key
        if key == settings.scheduling_algorithm:
            key = f"{key} (default)"
        table.add_row(key, info.name, info.description)

    console.print(table)


@app.command("simulate")
def simulate(
    cards: int = typer.Option(20, "--cards", "-n", min=1, help="Cards in the round"),
    miss_rate: float = typer.Option(0.3, "--miss-rate", min=0.0, max=1.0, help="Chance of a wrong answer"),
    strategy: str = typer.Option(None, "--strategy", "-s", help="Strategy key (default from settings)"),
    aggressiveness: str = typer.Option(None, "--aggressiveness", "-a", help="gentle | balanced | intensive"),
    threshold: int = typer.Option(None, "--threshold", "-t", help="Mastery threshold"),
    seed: int = typer.Option(None, "--seed", help="Random seed for answers and jitter"),
    deck_id: str = typer.Option(None, "--deck", "-d", help="Load and save mastery under this deck id"),
    mastery_dir: Path = typer.Option(None, "--dir", help="Mastery store directory"),
) -> None:
    """
    Simulate a round with random answers.

    Shows the order cards were asked in, with reinserted cards highlighted,
    and the final session metrics. With --deck, mastery from earlier runs is
    loaded before the round and saved after it.
    """
    settings = get_settings()
    rng = random.Random(seed)
    tracker = MasteryTracker()
    repository = None

    try:
        config = settings.scheduler_config()
        if aggressiveness:
            config = replace(config, aggressiveness=aggressiveness)

        stored = None
        if deck_id:
            repository = JsonFileMasteryRepository(mastery_dir or settings.mastery_dir)
            stored = repository.load(deck_id)
            if stored is not None:
                tracker.load_deck(stored)

        manager = SessionStateManager(
            deck_id=deck_id or "simulation",
            tracker=tracker,
            registry=default_registry(SmartSpacedScheduler(rng=random.Random(seed))),
            strategy_key=strategy or settings.scheduling_algorithm,
            config=config,
            # A stored deck keeps its own threshold unless one is given
            mastery_threshold=threshold or (None if stored else settings.mastery_threshold),
            history=SessionHistory(max_entries=settings.session_history_limit),
        )
    except SchedulerError as e:
        rprint(f"[red]Error:[/red] {e}")
        raise typer.Exit(code=1)

    deck = [Card(idx=i, name=f"Card {i}", side_a=f"front {i}", side_b=f"back {i}") for i in range(cards)]
    manager.start_round(deck)

    order: list[tuple[int, bool]] = []
    seen: set[int] = set()
    while not manager.is_round_complete and len(order) < cards * MAX_ANSWERS_FACTOR:
        card = manager.current_card
        is_correct = rng.random() >= miss_rate
        manager.record_answer(card.idx, is_correct)
        order.append((card.idx, is_correct))

    table = Table(title=f"Simulated round ({manager.strategy.name})")
    table.add_column("#", justify="right", style="dim")
    table.add_column("Card", justify="right")
    table.add_column("Kind")
    table.add_column("Answer")

    for position, (idx, is_correct) in enumerate(order, start=1):
        kind = "[yellow]reinserted[/yellow]" if idx in seen else "new"
        seen.add(idx)
        answer = "[green]correct[/green]" if is_correct else "[red]missed[/red]"
        table.add_row(str(position), str(idx), kind, answer)

    console.print(table)

    results = manager.complete_round()
    metrics = manager.metrics()
    rprint(
        f"\n[bold]Answered:[/bold] {results.total_questions}  "
        f"[bold]Accuracy:[/bold] {results.accuracy:.0f}%  "
        f"[bold]Best streak:[/bold] {metrics.max_streak}  "
        f"[bold]Mastered:[/bold] {metrics.mastered_count}/{cards}  "
        f"[bold]Still missed:[/bold] {metrics.incorrect_count}"
    )
    if not manager.is_round_complete:
        rprint(f"[yellow]Stopped after {len(order)} answers.[/yellow]")

    if repository is not None:
        repository.save(tracker.get_deck(manager.deck_id))
        rprint(f"[green]Saved mastery for '{manager.deck_id}'.[/green]")


def run() -> None:
    app()


if __name__ == "__main__":
    run()
