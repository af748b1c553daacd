"""Read-only query handle passed to player strategies."""

from __future__ import annotations

from typing import TYPE_CHECKING, List

from .events import DECISION_KINDS

if TYPE_CHECKING:  # pragma: no cover - typing helper
    from .game import Game


class GameView:
    """Public information about a game.

    Strategies receive this instead of the game itself; nothing here mutates
    game state.
    """

    __slots__ = ("_game",)

    def __init__(self, game: "Game") -> None:
        self._game = game

    def players_summary(self) -> str:
        """List every player with public info, grouped as active, winners, losers."""

        game = self._game
        lines = [f"{seat.name} (player) ({seat.hand_size()} cards)" for seat in game.order.roster]
        lines += [f"{seat.name} (winner) ({seat.hand_size()} cards)" for seat in game.winners]
        lines += [f"{seat.name} (loser) ({seat.hand_size()} cards)" for seat in game.losers]
        return "\n".join(lines)

    def player_names(self) -> List[str]:
        """Names in seating order; unaffected by turn order or eliminations."""

        return [seat.name for seat in self._game.seats]

    def history_summary(self, turns: int) -> List[str]:
        return self._game.log.since(turns)

    def decision_summary(self, turns: int) -> List[str]:
        """Only plays and suit declarations from the last ``turns`` turns."""

        return self._game.log.since(turns, DECISION_KINDS)

    def turn_number(self) -> int:
        return self._game.turn

    def non_player_summary(self) -> str:
        game = self._game
        piles = game.piles
        if not piles.discard or game.constraint is None:
            return f"No card has been played yet.\n{len(piles.draw_pile)} cards in deck."
        constraint = game.constraint
        return (
            f"Stack ({len(piles.discard)} cards): Top card is {piles.top}.\n"
            f"Next card must match {constraint.rank.name} or {constraint.suit.name}.\n"
            f"{len(piles.draw_pile)} cards in deck."
        )

    def constraints_summary(self) -> List[str]:
        """Machine readable ``Key: value`` pairs; empty means any card is playable."""

        constraint = self._game.constraint
        return constraint.summary() if constraint is not None else []

    def predict_next_player(self) -> str | None:
        names = self.predict_next_players(1)
        return names[0] if names else None

    def predict_next_players(self, turns: int) -> List[str]:
        """Names expected to act after the current player, ignoring future reversals and skips."""

        order = self._game.order
        if not order.roster:
            return []
        return [order.roster[index].name for index in order.next_indices(order.index, turns)]
