"""Rule constants, attempt validation and the special-rank effect table."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Final, Iterable, List, Mapping

from .cards import NORMAL_SUITS, Card, Rank, Suit
from .errors import InvalidAttempt

__all__ = [
    "WILD_RANKS",
    "Effect",
    "EFFECTS",
    "Attempt",
    "Constraint",
    "is_wild",
    "is_legal",
    "effect_for",
    "possible_plays",
]

WILD_RANKS: Final[frozenset[Rank]] = frozenset({Rank.EIGHT, Rank.JOKER})


class Effect(str, Enum):
    """What a legally played card does to turn order."""

    NONE = "none"
    SKIP_NEXT = "skip_next"
    REVERSE_DIRECTION = "reverse_direction"


EFFECTS: Final[Mapping[Rank, Effect]] = {
    Rank.QUEEN: Effect.SKIP_NEXT,
    Rank.ACE: Effect.REVERSE_DIRECTION,
}


def is_wild(rank: Rank) -> bool:
    return rank in WILD_RANKS


def effect_for(rank: Rank) -> Effect:
    return EFFECTS.get(rank, Effect.NONE)


@dataclass(frozen=True, slots=True)
class Attempt:
    """A proposed play: one card, plus a declared suit when the card is wild."""

    card: Card
    declared_suit: Suit | None = None

    def __post_init__(self) -> None:
        if is_wild(self.card.rank):
            if self.declared_suit is None:
                raise InvalidAttempt(f"a suit must be declared for wild card {self.card}")
            if self.declared_suit not in NORMAL_SUITS:
                raise InvalidAttempt(f"cannot declare {self.declared_suit.label} for {self.card}")
            return
        if self.card.suit.is_joker:
            raise InvalidAttempt(f"unexpected joker-suited card {self.card}")
        if self.declared_suit is not None and self.declared_suit is not self.card.suit:
            raise InvalidAttempt(
                f"cannot declare {self.declared_suit.label} for non-wild card {self.card}"
            )

    @property
    def suit(self) -> Suit:
        """Suit used for matching: the declaration for wild cards, else the card's own."""

        if self.declared_suit is not None:
            return self.declared_suit
        return self.card.suit

    @property
    def rank(self) -> Rank:
        return self.card.rank

    def describe(self) -> str:
        if is_wild(self.card.rank):
            return f"{self.card} ({self.suit.label})"
        return str(self.card)


@dataclass(frozen=True, slots=True)
class Constraint:
    """The suit/rank pair the next play must satisfy."""

    suit: Suit
    rank: Rank

    def summary(self) -> List[str]:
        return [f"Suit: {self.suit.name}", f"Value: {self.rank.name}"]


def is_legal(attempt: Attempt, constraint: Constraint) -> bool:
    """Wild cards always match; otherwise rank or suit must match."""

    return (
        is_wild(attempt.rank)
        or attempt.rank is constraint.rank
        or attempt.suit is constraint.suit
    )


def possible_plays(hand: Iterable[Card], constraint: Constraint) -> List[Card]:
    """Cards in ``hand`` that could legally be played against ``constraint``."""

    return [
        card
        for card in hand
        if is_wild(card.rank) or card.rank is constraint.rank or card.suit is constraint.suit
    ]
