"""Tests for circular turn order and lookahead."""

from __future__ import annotations

import pytest

from eights.cards import Card
from eights.errors import ConsistencyError
from eights.players import ScriptedPlayer, Seat
from eights.turn_order import TurnOrder, step


def _order(*names: str, empty: tuple[str, ...] = ()) -> TurnOrder:
    seats = []
    for name in names:
        hand = [] if name in empty else [Card.from_code("3C#0")]
        seats.append(Seat(ScriptedPlayer(name), hand))
    return TurnOrder(roster=seats)


def _walk(order: TurnOrder, start: int, steps: int) -> list[int]:
    result = []
    index = start
    for _ in range(steps):
        index = order.next_index(index)
        result.append(index)
    return result


def test_forward_order_cycles() -> None:
    order = _order("A", "B", "C", "D")

    assert _walk(order, 0, 5) == [1, 2, 3, 0, 1]


def test_reversed_order_cycles_backwards() -> None:
    order = _order("A", "B", "C", "D")
    order.reverse()

    assert _walk(order, 0, 5) == [3, 2, 1, 0, 3]


def test_step_rejects_empty_roster() -> None:
    with pytest.raises(ConsistencyError):
        step(0, 0, False)


def test_lookahead_is_restartable_and_frozen() -> None:
    order = _order("A", "B", "C")
    lookahead = order.next_indices(0, 4)

    assert list(lookahead) == [1, 2, 0, 1]
    order.reverse()
    order.roster.pop()
    assert list(lookahead) == [1, 2, 0, 1]
    assert len(lookahead) == 4
    assert list(order.next_indices(0, 3)) == [1, 0, 1]


def test_advance_with_skip_moves_two_seats() -> None:
    order = _order("A", "B", "C")

    assert order.advance(skip=True) == 2
    assert order.current.name == "C"
    assert order.advance() == 0


def test_next_active_index_skips_empty_hands() -> None:
    order = _order("A", "B", "C", "D", empty=("B", "C"))

    assert order.next_active_index(lambda seat: bool(seat.hand)) == 3
    order.reverse()
    assert order.next_active_index(lambda seat: bool(seat.hand)) == 3


def test_next_active_index_returns_none_without_other_players() -> None:
    order = _order("A", "B", empty=("B",))

    assert order.next_active_index(lambda seat: bool(seat.hand)) is None


def test_current_requires_roster() -> None:
    with pytest.raises(ConsistencyError):
        TurnOrder().current
