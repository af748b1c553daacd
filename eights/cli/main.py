"""Typer entry-point wiring for the Eights CLI."""

from __future__ import annotations

import logging
import random
from typing import List

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.prompt import Prompt

from ..errors import EightsError, ErrorKind
from ..game import Game, GameConfig
from ..players import Player
from ..simulate import build_players, run_batch
from .human import HumanPlayer
from .render import render_batch, render_events, render_results, render_table

DEFAULT_HUMANS = 1
DEFAULT_BASICS = 1
DEFAULT_RANDOMS = 0

app = typer.Typer(add_completion=False, rich_markup_mode="rich")
console = Console()


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, show_path=False)],
        force=True,
    )


def _resolve_count(option: int | None, positional: int | None, default: int) -> int:
    if option is not None:
        return option
    if positional is not None:
        return positional
    return default


def _ask_names(count: int) -> List[str]:
    names: List[str] = []
    for idx in range(1, count + 1):
        while True:
            name = Prompt.ask(f"Human {idx}: Enter name", console=console, default=f"Human {idx}").strip()
            if name and name not in names:
                names.append(name)
                break
            console.print("[red]Names must be non-empty and unique.[/red]")
    return names


def _fail(exc: EightsError) -> None:
    console.print(f"[bold red]Fatal error:[/bold red] {exc}")
    raise typer.Exit(code=1)


@app.command()
def play(
    humans_arg: int | None = typer.Argument(
        None, metavar="[HUMANS]", min=0, show_default=False, help="Human players."
    ),
    basics_arg: int | None = typer.Argument(
        None, metavar="[BASICS]", min=0, show_default=False, help="Basic AI players."
    ),
    randoms_arg: int | None = typer.Argument(
        None, metavar="[RANDOMS]", min=0, show_default=False, help="Random AI players."
    ),
    humans: int | None = typer.Option(None, "--humans", min=0, help=f"Human players (default {DEFAULT_HUMANS})."),
    basics: int | None = typer.Option(None, "--basics", min=0, help=f"Basic AI players (default {DEFAULT_BASICS})."),
    randoms: int | None = typer.Option(None, "--randoms", min=0, help=f"Random AI players (default {DEFAULT_RANDOMS})."),
    seed: int | None = typer.Option(None, help="Random seed for reproducible games (omit for randomness)."),
    hand_size: int = typer.Option(5, min=1, help="Starting hand size."),
    jokers: bool = typer.Option(True, "--jokers/--no-jokers", help="Include the two jokers in each deck."),
    shuffle_seats: bool = typer.Option(False, "--shuffle-seats", help="Seat players in random order."),
    max_turns: int = typer.Option(10000, min=1, help="Abort the game after this many turns."),
    report: bool = typer.Option(False, "--report", help="Print the full event log and every hand at the end."),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show engine debug logging."),
) -> None:
    """Play a game. Player counts may be given positionally or as options."""

    _configure_logging(verbose)
    n_humans = _resolve_count(humans, humans_arg, DEFAULT_HUMANS)
    n_basics = _resolve_count(basics, basics_arg, DEFAULT_BASICS)
    n_randoms = _resolve_count(randoms, randoms_arg, DEFAULT_RANDOMS)
    if n_humans + n_basics + n_randoms < 2:
        raise typer.BadParameter("At least two players are required for this game.")

    rng = random.Random(seed)
    config = GameConfig(starting_hand_size=hand_size, include_jokers=jokers, seed=seed)
    if n_humans:
        console.print("Type 'help' for help.")
    players: List[Player] = [HumanPlayer(name, console=console) for name in _ask_names(n_humans)]
    players += build_players(n_basics, n_randoms, rng)
    if shuffle_seats:
        rng.shuffle(players)

    game = Game(players, config, rng=rng)
    try:
        game.run_all(max_turns=max_turns)
    except EightsError as exc:
        if exc.kind is ErrorKind.FATAL:
            _fail(exc)
        raise

    console.print("The game is over.")
    console.print(render_table(game))
    console.print(render_results(game))
    console.print(render_events(game.view.history_summary(config.history_turns), title="Last few turns"))
    if report:
        console.print(game.report(), markup=False)


@app.command()
def simulate(
    games: int = typer.Option(100, min=1, help="Number of games to play."),
    basics: int = typer.Option(2, min=0, help="Basic AI players per game."),
    randoms: int = typer.Option(2, min=0, help="Random AI players per game."),
    seed: int = typer.Option(123, help="Random seed for the batch."),
    max_turns: int = typer.Option(2000, min=1, help="Abort a game after this many turns."),
    blunder_rate: float = typer.Option(
        0.1, min=0.0, max=1.0, help="Chance a random AI plays an arbitrary card."
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show engine debug logging."),
) -> None:
    """Play many AI-only games and report the outcomes."""

    _configure_logging(verbose)
    if basics + randoms < 2:
        raise typer.BadParameter("At least two players are required for this game.")

    report = run_batch(
        games,
        basics=basics,
        randoms=randoms,
        seed=seed,
        max_turns=max_turns,
        blunder_rate=blunder_rate,
    )
    console.print(render_batch(report))
    console.print(f"[cyan]Average game length: {report.average_turns:.1f} turns.[/cyan]")
    if report.failures:
        for failure in report.failures:
            console.print(f"[red]{failure}[/red]")
        raise typer.Exit(code=1)
    console.print("No errors received.")


def main() -> None:
    """Entry-point for ``python -m eights.cli``."""

    app()


if __name__ == "__main__":  # pragma: no cover - CLI invocation
    main()
