"""Player strategies and the seat records the game keeps for them."""

from __future__ import annotations

import random
from abc import ABC, abstractmethod
from collections import Counter, deque
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Iterable, List, Sequence, Union

from .cards import NORMAL_SUITS, Card, Rank, Suit, format_cards
from .errors import Forfeit
from .rules import Attempt, Constraint, is_wild, possible_plays

if TYPE_CHECKING:  # pragma: no cover - typing helper
    from .view import GameView

__all__ = [
    "Player",
    "Seat",
    "BasicPlayer",
    "RandomPlayer",
    "ScriptedPlayer",
    "Decision",
]


class Player(ABC):
    """A named decision maker.

    Strategies never own cards. Each call receives a read-only copy of the hand
    and the game's query view; the game removes the chosen card itself.
    """

    def __init__(self, name: str) -> None:
        self.name = name

    @abstractmethod
    def play(
        self,
        view: "GameView",
        hand: Sequence[Card],
        top: Card,
        suit: Suit,
        rank: Rank,
    ) -> Attempt | None:
        """Pick a card from ``hand`` to play, or ``None`` to draw instead.

        May raise :class:`~eights.errors.Forfeit` to leave the game.
        """

    @abstractmethod
    def declare_suit(self, view: "GameView", hand: Sequence[Card]) -> Suit:
        """Declare the suit for a wild opening card from hand contents alone."""

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.name!r})"


@dataclass(eq=False, slots=True)
class Seat:
    """The game's record of one player: identity plus the hand it owns."""

    player: Player
    hand: List[Card] = field(default_factory=list)

    @property
    def name(self) -> str:
        return self.player.name

    def hand_size(self) -> int:
        return len(self.hand)

    def take(self, card: Card) -> bool:
        """Remove ``card`` from the hand; ``False`` when it is not held."""

        try:
            self.hand.remove(card)
        except ValueError:
            return False
        return True

    def show_hand(self) -> str:
        return format_cards(self.hand)


def _suit_counts(hand: Iterable[Card]) -> Counter[Suit]:
    return Counter(card.suit for card in hand if not is_wild(card.rank))


def _rank_counts(hand: Iterable[Card]) -> Counter[Rank]:
    return Counter(card.rank for card in hand if not is_wild(card.rank))


class BasicPlayer(Player):
    """Greedy strategy: match rank, then suit, and keep wild cards for last.

    Among matching cards it prefers the one that leaves the most follow-up
    plays, and declares the suit it holds the most of.
    """

    def __init__(self, name: str, rng: random.Random | None = None) -> None:
        super().__init__(name)
        self.rng = rng or random.Random()

    def _best_of_rank(self, hand: Sequence[Card], rank: Rank) -> Card | None:
        suits = _suit_counts(hand)
        matches = [card for card in hand if card.rank is rank and not is_wild(card.rank)]
        return max(matches, key=lambda card: suits[card.suit], default=None)

    def _best_of_suit(self, hand: Sequence[Card], suit: Suit) -> Card | None:
        ranks = _rank_counts(hand)
        matches = [card for card in hand if card.suit is suit and not is_wild(card.rank)]
        return max(matches, key=lambda card: ranks[card.rank], default=None)

    def choose_suit(self, hand: Sequence[Card]) -> Suit:
        counts = _suit_counts(hand)
        if not counts:
            return self.rng.choice(NORMAL_SUITS)
        return max(NORMAL_SUITS, key=lambda suit: counts[suit])

    def play(self, view, hand, top, suit, rank):
        choice = None
        if not is_wild(rank):
            choice = self._best_of_rank(hand, rank)
        if choice is None:
            choice = self._best_of_suit(hand, suit)
        if choice is None:
            choice = next((card for card in hand if is_wild(card.rank)), None)
        if choice is None:
            return None
        if is_wild(choice.rank):
            rest = list(hand)
            rest.remove(choice)
            return Attempt(choice, self.choose_suit(rest))
        return Attempt(choice)

    def declare_suit(self, view, hand):
        return self.choose_suit(hand)


class RandomPlayer(Player):
    """Plays a random legal card; with ``blunder_rate`` it plays any card at all."""

    def __init__(
        self,
        name: str,
        rng: random.Random | None = None,
        blunder_rate: float = 0.0,
    ) -> None:
        super().__init__(name)
        if not 0.0 <= blunder_rate <= 1.0:
            raise ValueError("blunder_rate must be within [0, 1]")
        self.rng = rng or random.Random()
        self.blunder_rate = blunder_rate

    def play(self, view, hand, top, suit, rank):
        if hand and self.rng.random() < self.blunder_rate:
            candidates = list(hand)
        else:
            candidates = possible_plays(hand, Constraint(suit, rank))
        if not candidates:
            return None
        card = self.rng.choice(candidates)
        if is_wild(card.rank):
            return Attempt(card, self.rng.choice(NORMAL_SUITS))
        return Attempt(card)

    def declare_suit(self, view, hand):
        return self.rng.choice(NORMAL_SUITS)


Decision = Union[Attempt, None, Forfeit]


class ScriptedPlayer(Player):
    """Replays queued decisions in order.

    Each queued entry is an :class:`Attempt`, ``None`` (draw) or a
    :class:`Forfeit` instance, which is raised. Once the script runs out the
    ``fallback`` strategy decides, or the player draws when there is none.
    """

    def __init__(
        self,
        name: str,
        decisions: Iterable[Decision] = (),
        suits: Iterable[Suit] = (),
        fallback: Player | None = None,
    ) -> None:
        super().__init__(name)
        self.decisions: deque[Decision] = deque(decisions)
        self.suits: deque[Suit] = deque(suits)
        self.fallback = fallback
        self.seen: List[tuple[Card, Suit, Rank]] = []

    def play(self, view, hand, top, suit, rank):
        self.seen.append((top, suit, rank))
        if not self.decisions:
            if self.fallback is not None:
                return self.fallback.play(view, hand, top, suit, rank)
            return None
        decision = self.decisions.popleft()
        if isinstance(decision, Forfeit):
            raise decision
        return decision

    def declare_suit(self, view, hand):
        if self.suits:
            return self.suits.popleft()
        if self.fallback is not None:
            return self.fallback.declare_suit(view, hand)
        return NORMAL_SUITS[0]
