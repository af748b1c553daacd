"""Tests covering attempt construction, validation and the effect table."""

from __future__ import annotations

import pytest

from eights import rules
from eights.cards import Card, Rank, Suit
from eights.errors import InvalidAttempt
from eights.rules import Attempt, Constraint, Effect


def card(code: str) -> Card:
    return Card.from_code(code)


def test_wild_attempt_requires_declared_suit() -> None:
    with pytest.raises(InvalidAttempt):
        Attempt(card("8H#0"))
    with pytest.raises(InvalidAttempt):
        Attempt(card("JOKER-RJ#0"))


def test_wild_attempt_cannot_declare_joker_suit() -> None:
    with pytest.raises(InvalidAttempt):
        Attempt(card("8H#0"), Suit.RED_JOKER)


def test_non_wild_attempt_uses_own_suit() -> None:
    attempt = Attempt(card("KC#0"))
    assert attempt.suit is Suit.CLUBS
    assert Attempt(card("KC#0"), Suit.CLUBS).suit is Suit.CLUBS

    with pytest.raises(InvalidAttempt):
        Attempt(card("KC#0"), Suit.HEARTS)


def test_wild_attempt_uses_declared_suit() -> None:
    attempt = Attempt(card("JOKER-BJ#0"), Suit.DIAMONDS)

    assert attempt.suit is Suit.DIAMONDS
    assert attempt.rank is Rank.JOKER
    assert attempt.describe() == "BLACK JOKER (DIAMONDS)"


@pytest.mark.parametrize(
    ("attempt", "expected"),
    [
        (Attempt(Card(Suit.HEARTS, Rank.KING)), True),
        (Attempt(Card(Suit.CLUBS, Rank.FIVE)), True),
        (Attempt(Card(Suit.CLUBS, Rank.KING)), False),
        (Attempt(Card(Suit.SPADES, Rank.EIGHT), Suit.CLUBS), True),
        (Attempt(Card(Suit.RED_JOKER, Rank.JOKER), Suit.SPADES), True),
    ],
)
def test_is_legal_against_hearts_five(attempt: Attempt, expected: bool) -> None:
    constraint = Constraint(Suit.HEARTS, Rank.FIVE)
    assert rules.is_legal(attempt, constraint) is expected


def test_declared_suit_is_what_gets_matched() -> None:
    constraint = Constraint(Suit.DIAMONDS, Rank.EIGHT)

    assert rules.is_legal(Attempt(card("3D#0")), constraint)
    assert rules.is_legal(Attempt(card("8S#0"), Suit.HEARTS), constraint)
    assert not rules.is_legal(Attempt(card("3H#0")), constraint)


@pytest.mark.parametrize(
    ("rank", "effect"),
    [
        (Rank.QUEEN, Effect.SKIP_NEXT),
        (Rank.ACE, Effect.REVERSE_DIRECTION),
        (Rank.EIGHT, Effect.NONE),
        (Rank.KING, Effect.NONE),
        (Rank.JOKER, Effect.NONE),
    ],
)
def test_effect_table(rank: Rank, effect: Effect) -> None:
    assert rules.effect_for(rank) is effect


def test_possible_plays_filters_hand() -> None:
    hand = [card("KC#0"), card("5S#0"), card("2H#0"), card("8D#0")]
    playable = rules.possible_plays(hand, Constraint(Suit.HEARTS, Rank.FIVE))

    assert playable == [card("5S#0"), card("2H#0"), card("8D#0")]


def test_constraint_summary_is_machine_readable() -> None:
    assert Constraint(Suit.SPADES, Rank.QUEEN).summary() == ["Suit: SPADES", "Value: QUEEN"]
