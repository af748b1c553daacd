"""Card abstractions and deck construction for Eights."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Iterator, List, Sequence


class Color(str, Enum):
    """Card colours; every suit belongs to exactly one."""

    BLACK = "black"
    RED = "red"


class Suit(str, Enum):
    """Four normal suits plus the two joker pseudo-suits."""

    CLUBS = "C"
    DIAMONDS = "D"
    HEARTS = "H"
    SPADES = "S"
    BLACK_JOKER = "BJ"
    RED_JOKER = "RJ"

    @property
    def color(self) -> Color:
        if self in (Suit.CLUBS, Suit.SPADES, Suit.BLACK_JOKER):
            return Color.BLACK
        return Color.RED

    @property
    def is_joker(self) -> bool:
        return self in (Suit.BLACK_JOKER, Suit.RED_JOKER)

    @property
    def label(self) -> str:
        return self.name.replace("_", " ")


class Rank(str, Enum):
    """Ranks in catalog order. ``JOKER`` is only ever paired with a joker suit."""

    ACE = "A"
    TWO = "2"
    THREE = "3"
    FOUR = "4"
    FIVE = "5"
    SIX = "6"
    SEVEN = "7"
    EIGHT = "8"
    NINE = "9"
    TEN = "10"
    JACK = "J"
    QUEEN = "Q"
    KING = "K"
    JOKER = "JOKER"

    @property
    def label(self) -> str:
        return self.name


NORMAL_SUITS: tuple[Suit, ...] = (Suit.CLUBS, Suit.DIAMONDS, Suit.HEARTS, Suit.SPADES)
NORMAL_RANKS: tuple[Rank, ...] = tuple(rank for rank in Rank if rank is not Rank.JOKER)


@dataclass(frozen=True, slots=True)
class Card:
    """Value object describing a physical card.

    ``deck`` records which source deck the card was printed in, so two cards
    with the same face in a multi-deck shoe are still distinct tokens.
    """

    suit: Suit
    rank: Rank
    deck: int = 0

    @property
    def is_joker(self) -> bool:
        return self.rank is Rank.JOKER

    @property
    def code(self) -> str:
        """Compact code such as ``QH#0`` or ``JOKER-RJ#1``."""

        if self.is_joker:
            return f"JOKER-{self.suit.value}#{self.deck}"
        return f"{self.rank.value}{self.suit.value}#{self.deck}"

    @classmethod
    def from_code(cls, code: str) -> "Card":
        face, sep, deck_str = code.partition("#")
        if not sep or not deck_str.isdigit():
            raise ValueError(f"invalid card code '{code}'")
        deck = int(deck_str)
        if face.startswith("JOKER-"):
            suit = Suit(face.split("-", maxsplit=1)[1])
            if not suit.is_joker:
                raise ValueError(f"invalid joker suit in '{code}'")
            return cls(suit, Rank.JOKER, deck)
        suit = Suit(face[-1])
        rank = Rank(face[:-1])
        if suit.is_joker or rank is Rank.JOKER:
            raise ValueError(f"invalid card code '{code}'")
        return cls(suit, rank, deck)

    def label(self) -> str:
        """Human readable label, e.g. ``QUEEN OF HEARTS``."""

        if self.is_joker:
            return f"{self.suit.color.name} JOKER"
        return f"{self.rank.label} OF {self.suit.label}"

    def __str__(self) -> str:
        return self.label()


def jokers(deck: int = 0) -> List[Card]:
    return [Card(Suit.BLACK_JOKER, Rank.JOKER, deck), Card(Suit.RED_JOKER, Rank.JOKER, deck)]


def normal_cards(deck: int = 0) -> List[Card]:
    return [Card(suit, rank, deck) for suit in NORMAL_SUITS for rank in NORMAL_RANKS]


def full_deck(deck: int = 0, *, include_jokers: bool = True) -> List[Card]:
    """Return one catalog deck in a fixed, unshuffled order."""

    cards = jokers(deck) if include_jokers else []
    cards.extend(normal_cards(deck))
    return cards


def cards_per_deck(include_jokers: bool = True) -> int:
    return len(NORMAL_SUITS) * len(NORMAL_RANKS) + (2 if include_jokers else 0)


def build_shoe(num_decks: int, *, include_jokers: bool = True) -> List[Card]:
    """Concatenate ``num_decks`` catalog decks, each card tagged with its deck."""

    if num_decks <= 0:
        raise ValueError("num_decks must be positive")
    shoe: List[Card] = []
    for deck in range(num_decks):
        shoe.extend(full_deck(deck, include_jokers=include_jokers))
    return shoe


def decks_for_players(num_players: int, players_per_deck: int = 5) -> int:
    """One deck, plus another for every ``players_per_deck`` seated players."""

    return num_players // players_per_deck + 1


_CATALOG_ORDER = {(card.suit, card.rank): idx for idx, card in enumerate(full_deck())}


def card_key(card: Card) -> tuple[int, int]:
    """Sort key following catalog order; only used for display."""

    return (_CATALOG_ORDER[(card.suit, card.rank)], card.deck)


def sort_cards(cards: Iterable[Card]) -> List[Card]:
    return sorted(cards, key=card_key)


def iter_codes(cards: Iterable[Card]) -> Iterator[str]:
    for card in cards:
        yield card.code


def format_cards(cards: Sequence[Card]) -> str:
    """Join labels as ``A, B, and C``."""

    labels = [card.label() for card in sort_cards(cards)]
    if len(labels) <= 1:
        return "".join(labels)
    return ", ".join(labels[:-1]) + f", and {labels[-1]}"
