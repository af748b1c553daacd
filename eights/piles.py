"""Draw pile and discard stack lifecycle."""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass, field
from typing import Iterable, List

from .cards import Card
from .errors import EightsError, ErrorKind, InsufficientCards
from .events import EventKind, EventLog

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class Piles:
    """Owns the draw pile and the discard stack.

    Both piles keep their top card at index 0: cards are dealt from the front
    of ``draw_pile`` and played onto the front of ``discard``.
    """

    draw_pile: List[Card]
    log: EventLog
    rng: random.Random = field(default_factory=random.Random)
    discard: List[Card] = field(default_factory=list)

    @property
    def top(self) -> Card:
        if not self.discard:
            raise IndexError("discard stack is empty")
        return self.discard[0]

    def total(self) -> int:
        return len(self.draw_pile) + len(self.discard)

    def shuffle(self) -> None:
        self.rng.shuffle(self.draw_pile)

    def flip(self) -> Card:
        """Turn the top of the draw pile onto the discard stack."""

        if not self.draw_pile:
            raise InsufficientCards("no card left to flip")
        card = self.draw_pile.pop(0)
        self.discard.insert(0, card)
        return card

    def play(self, card: Card) -> None:
        self.discard.insert(0, card)

    def reshuffle(self) -> None:
        """Move every discard except the top one into the draw pile and shuffle.

        Raises :class:`InsufficientCards` when the draw pile still holds at most
        one card afterwards.
        """

        if len(self.discard) > 1:
            self.draw_pile.extend(self.discard[1:])
            del self.discard[1:]
        if len(self.draw_pile) <= 1:
            self.log.add("Failed to reshuffle.", EventKind.RESHUFFLE)
            raise InsufficientCards("not enough cards left to redeal after reshuffling")
        self.shuffle()
        self.log.add("Stack reshuffled into deck.", EventKind.RESHUFFLE)

    def deal_one(self, hand: List[Card], recipient: str, *, quiet: bool = False) -> Card:
        if not self.draw_pile:
            try:
                self.reshuffle()
            except InsufficientCards:
                self.log.add(f"Failed to deal to {recipient} after reshuffle.", EventKind.DRAW)
                raise
        card = self.draw_pile.pop(0)
        hand.append(card)
        if not quiet:
            self.log.add(f"Card dealt to {recipient}.", EventKind.DRAW)
        return card

    def deal_several(self, hand: List[Card], recipient: str, count: int) -> List[Card]:
        """Deal ``count`` cards; a failure part way through propagates."""

        self.log.add(f"Dealt {count} cards to {recipient}.", EventKind.DRAW)
        return [self.deal_one(hand, recipient, quiet=True) for _ in range(count)]

    def safe_deal(self, hand: List[Card], recipient: str, count: int = 1) -> int:
        """Deal like :meth:`deal_several` but turn exhaustion into a skipped draw.

        Returns the number of cards actually dealt.
        """

        before = len(hand)
        try:
            if count == 1:
                self.deal_one(hand, recipient)
            else:
                self.deal_several(hand, recipient, count)
        except EightsError as exc:
            if exc.kind is not ErrorKind.RECOVERABLE:
                raise
            logger.warning("skipping draw for %s: %s", recipient, exc)
            self.log.add("Skipping this draw due to insufficient cards.", EventKind.PENALTY)
        return len(hand) - before

    def recycle(self, cards: Iterable[Card]) -> int:
        """Return ``cards`` to the draw pile and shuffle it."""

        returned = list(cards)
        self.draw_pile.extend(returned)
        self.shuffle()
        return len(returned)
