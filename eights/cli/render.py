"""Rendering helpers dedicated to the CLI experience."""

from __future__ import annotations

from typing import Sequence

from rich import box
from rich.console import Group, RenderableType
from rich.panel import Panel
from rich.table import Table

from ..cards import Card, Suit, sort_cards
from ..game import Game
from ..simulate import BatchReport

_SUIT_SYMBOLS = {
    Suit.SPADES: ("♠", "cyan"),
    Suit.HEARTS: ("♥", "red"),
    Suit.DIAMONDS: ("♦", "magenta"),
    Suit.CLUBS: ("♣", "green"),
}


def format_suit(suit: Suit) -> str:
    symbol, color = _SUIT_SYMBOLS.get(suit, (suit.value, "white"))
    return f"[{color}]{symbol} {suit.name.title()}[/{color}]"


def format_card(card: Card) -> str:
    """Return a Rich-rendered label for ``card``."""

    if card.is_joker:
        color = "red" if card.suit is Suit.RED_JOKER else "white"
        return f"[{color}]🃏 {card.suit.color.name.title()} Joker[/{color}]"
    symbol, color = _SUIT_SYMBOLS[card.suit]
    return f"[{color}]{card.rank.value}{symbol}[/{color}]"


def hand_entries(hand: Sequence[Card]) -> list[tuple[int, Card]]:
    """Number the sorted hand from 1 for selection prompts."""

    return list(enumerate(sort_cards(hand), start=1))


def render_table(game: Game, *, reveal: str | None = None) -> RenderableType:
    """Players with hand sizes and status, plus the top of the stack."""

    table = Table(box=box.ROUNDED, expand=True)
    table.add_column("Player", justify="left", style="bold")
    table.add_column("Cards", justify="right")
    table.add_column("Status", justify="left")

    current = game.order.current.name if game.order.roster else None
    for seat in game.order.roster:
        name = seat.name
        if name == current:
            name = f"[bold yellow]{name}[/bold yellow]"
        table.add_row(name, str(seat.hand_size()), "Playing")
    for seat in game.winners:
        table.add_row(seat.name, str(seat.hand_size()), "[bold green]Winner[/bold green]")
    for seat in game.losers:
        table.add_row(seat.name, str(seat.hand_size()), "[bold red]Loser[/bold red]")

    grid = Table.grid(expand=True)
    grid.add_column(justify="left")
    grid.add_row(f"[cyan]Turn[/cyan]: {game.turn}")
    grid.add_row(f"[cyan]Deck[/cyan]: {len(game.piles.draw_pile)} card(s)")
    if game.piles.discard and game.constraint is not None:
        grid.add_row(
            f"[cyan]Stack[/cyan]: {format_card(game.piles.top)} ({len(game.piles.discard)} card(s))"
        )
        grid.add_row(
            f"[cyan]Must match[/cyan]: {game.constraint.rank.name} or {format_suit(game.constraint.suit)}"
        )
    direction = "reversed" if game.order.reversed else "forward"
    grid.add_row(f"[cyan]Direction[/cyan]: {direction}")

    components: list[RenderableType] = [table, Panel(grid, box=box.SQUARE, border_style="blue")]
    if reveal is not None:
        seat = game.seat(reveal)
        cards = " ".join(format_card(card) for card in sort_cards(seat.hand)) or "(empty)"
        components.append(Panel(cards, title=f"{seat.name}'s hand", border_style="yellow"))
    return Panel(Group(*components), title="Eights", border_style="cyan")


def render_events(lines: Sequence[str], title: str = "Event Log") -> Panel:
    log_table = Table.grid(expand=True)
    log_table.add_column(justify="left")
    if lines:
        for line in lines:
            log_table.add_row(line)
    else:
        log_table.add_row("[dim]Nothing has happened yet[/dim]")
    return Panel(log_table, title=title, border_style="magenta", box=box.SIMPLE)


def render_results(game: Game) -> Table:
    """Final standings: winners in finishing order, then losers."""

    table = Table(title="Results", box=box.SIMPLE_HEAVY)
    table.add_column("Place", justify="right")
    table.add_column("Player", justify="left")
    table.add_column("Result", justify="center")
    table.add_column("Cards left", justify="right")

    place = 1
    for seat in game.winners:
        table.add_row(str(place), seat.name, "[bold green]Win[/bold green]", str(seat.hand_size()))
        place += 1
    for seat in game.losers:
        table.add_row(str(place), seat.name, "[bold red]Loss[/bold red]", str(seat.hand_size()))
        place += 1
    return table


def render_batch(report: BatchReport) -> Table:
    table = Table(title=f"{report.completed}/{report.games} games completed", box=box.SIMPLE_HEAVY)
    table.add_column("Player", justify="left")
    table.add_column("Wins", justify="right")
    table.add_column("First", justify="right")
    table.add_column("Losses", justify="right")

    best = max((tally.first_places for tally in report.tallies.values()), default=0)
    for tally in report.tallies.values():
        name = tally.name
        if best and tally.first_places == best:
            name = f"[bold blue]{name}[/bold blue]"
        table.add_row(name, str(tally.wins), str(tally.first_places), str(tally.losses))
    return table
