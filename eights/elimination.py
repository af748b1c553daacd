"""Moving players out of the active roster as winners or losers."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List

from .errors import ConsistencyError
from .events import EventKind, EventLog
from .piles import Piles
from .players import Seat
from .turn_order import TurnOrder

logger = logging.getLogger(__name__)


def _has_cards(seat: Seat) -> bool:
    return bool(seat.hand)


@dataclass(slots=True)
class Elimination:
    """Keeps roster, winners and losers disjoint while players leave the game."""

    order: TurnOrder
    piles: Piles
    log: EventLog
    winners: List[Seat] = field(default_factory=list)
    losers: List[Seat] = field(default_factory=list)

    @property
    def roster(self) -> List[Seat]:
        return self.order.roster

    @property
    def finished(self) -> bool:
        return not self.roster

    def remove_winners(self, skip: bool = False) -> bool:
        """Move every empty-handed seat from the roster to ``winners``.

        Returns ``True`` when the acting seat was among them and the turn
        pointer has already been moved to the next player (honouring ``skip``),
        so the caller must not advance it again.
        """

        won = [seat for seat in self.roster if not seat.hand]
        if not won:
            return False

        acting = self.order.current
        successor: Seat | None
        if acting in won:
            next_index = self.order.next_active_index(_has_cards)
            successor = self.roster[next_index] if next_index is not None else None
        else:
            successor = acting

        for seat in won:
            self.log.add(f"{seat.name} has won the game and will be removed.", EventKind.ELIMINATION)
            self.winners.append(seat)
            self.roster.remove(seat)
        logger.info("winners removed: %s", ", ".join(seat.name for seat in won))

        if not self.roster:
            self.log.add("All players have won. The game will end.", EventKind.ELIMINATION)
            self.order.index = 0
            return True
        if successor is None:
            raise ConsistencyError("players remain but none of them can act next")
        self.order.index = self.roster.index(successor)
        if self.settle():
            return True
        if acting in won:
            if skip:
                self.order.advance()
            return True
        return False

    def remove_loser(self, seat: Seat, *, recycle: bool = True) -> None:
        """Move ``seat`` to ``losers`` and point the turn at whoever acts next.

        The seat's remaining cards go back into the draw pile unless
        ``recycle`` is false.
        """

        if seat not in self.roster:
            raise ConsistencyError(f"{seat.name} is not an active player")

        acting = self.order.current
        successor: Seat | None
        if seat is acting:
            next_index = self.order.next_active_index(_has_cards)
            successor = self.roster[next_index] if next_index is not None else None
        else:
            successor = acting

        self.losers.append(seat)
        if recycle and seat.hand:
            returned = self.piles.recycle(seat.hand)
            seat.hand.clear()
            self.log.add(f"{returned} cards from {seat.name} returned to the deck.")
        self.roster.remove(seat)
        self.log.add(f"{seat.name} has lost the game.", EventKind.ELIMINATION)
        logger.info("loser removed: %s", seat.name)

        if successor is None:
            self.order.index = 0
            if self.roster:
                self.remove_winners()
            if not self.roster:
                self.log.add("The game is over.", EventKind.ELIMINATION)
            return
        self.order.index = self.roster.index(successor)
        self.settle()

    def settle(self) -> bool:
        """Resolve a lone remaining player as the loser. Returns ``True`` if the game ended."""

        if len(self.roster) != 1:
            return self.finished
        last = self.roster[0]
        self.log.add(f"{last.name} is the last player remaining.", EventKind.ELIMINATION)
        self.remove_loser(last, recycle=False)
        return True
