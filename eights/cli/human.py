"""Interactive player driven from the terminal."""

from __future__ import annotations

from typing import Sequence

from rich.console import Console
from rich.panel import Panel
from rich.prompt import Prompt

from ..cards import NORMAL_SUITS, Card, Suit
from ..errors import Forfeit
from ..players import Player
from ..rules import Attempt, is_wild
from ..view import GameView
from .render import format_card, format_suit, hand_entries, render_events

HELP_TEXT = """\
[bold]<number>[/bold]  play that card from your hand
[bold]draw[/bold]      draw a card instead of playing
[bold]hand[/bold]      show your hand again
[bold]players[/bold]   list players and their hand sizes
[bold]history[/bold]   show recent events
[bold]next[/bold]      show who plays after you
[bold]quit[/bold]      forfeit the game
A card must match the suit or the value on the stack. Eights and jokers are wild.
Queens skip the next player; aces reverse the direction of play."""

_SUIT_ALIASES = {
    **{suit.name.lower(): suit for suit in NORMAL_SUITS},
    **{suit.value.lower(): suit for suit in NORMAL_SUITS},
}


class HumanPlayer(Player):
    """Asks a person for each decision. Blocks until an answer arrives."""

    def __init__(self, name: str, console: Console | None = None, history_turns: int = 3) -> None:
        super().__init__(name)
        self.console = console or Console()
        self.history_turns = history_turns

    def _show_hand(self, hand: Sequence[Card]) -> None:
        entries = [f"[bold]{idx}[/bold] {format_card(card)}" for idx, card in hand_entries(hand)]
        self.console.print(Panel("  ".join(entries) or "(empty)", title=f"{self.name}'s hand", border_style="yellow"))

    def _ask_suit(self) -> Suit:
        while True:
            answer = Prompt.ask(
                "Declare a suit (clubs, diamonds, hearts, spades)", console=self.console
            ).strip().lower()
            if answer == "quit":
                raise Forfeit(f"{self.name} quit")
            suit = _SUIT_ALIASES.get(answer)
            if suit is not None:
                return suit
            self.console.print(f"[red]'{answer}' is not a suit.[/red]")

    def _answer_query(self, command: str, view: GameView, hand: Sequence[Card]) -> bool:
        if command == "help":
            self.console.print(Panel(HELP_TEXT, title="Help", border_style="green"))
        elif command == "hand":
            self._show_hand(hand)
        elif command == "players":
            self.console.print(view.players_summary())
        elif command == "history":
            self.console.print(render_events(view.history_summary(self.history_turns)))
        elif command == "next":
            self.console.print(", ".join(view.predict_next_players(3)) or "Nobody")
        else:
            return False
        return True

    def play(self, view, hand, top, suit, rank):
        self.console.rule(f"[bold]{self.name}[/bold] - turn {view.turn_number()}")
        self.console.print(render_events(view.history_summary(len(view.player_names())), title="Recent events"))
        self.console.print(
            f"Top card: {format_card(top)}. Next card must match "
            f"[bold]{rank.name}[/bold] or {format_suit(suit)}."
        )
        self._show_hand(hand)
        entries = dict(hand_entries(hand))
        while True:
            command = Prompt.ask("Play a card number, or type help", console=self.console).strip().lower()
            if command == "quit":
                raise Forfeit(f"{self.name} quit")
            if command == "draw":
                return None
            if self._answer_query(command, view, hand):
                continue
            if command.isdigit() and int(command) in entries:
                card = entries[int(command)]
                if is_wild(card.rank):
                    return Attempt(card, self._ask_suit())
                return Attempt(card)
            self.console.print(f"[red]Unrecognised command '{command}'. Type help for options.[/red]")

    def declare_suit(self, view, hand):
        self.console.print(f"{self.name}, the opening card is wild.")
        self._show_hand(hand)
        return self._ask_suit()
