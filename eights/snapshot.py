"""Capture a game's state as plain data and rebuild a game from it."""

from __future__ import annotations

import random
from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List, Mapping, Sequence

from .cards import Card, Rank, Suit, iter_codes
from .errors import ConsistencyError
from .game import Game, GameConfig, GameStatus
from .players import Player
from .rules import Constraint

__all__ = ["GameSnapshot", "capture", "restore"]


@dataclass(slots=True)
class GameSnapshot:
    """Everything needed to replay a game from the current turn onward.

    Cards are stored as codes (see :meth:`eights.cards.Card.code`) so the
    snapshot round-trips through JSON. The event log is not included.
    """

    draw_pile: List[str]
    discard: List[str]
    hands: Dict[str, List[str]]
    roster: List[str]
    winners: List[str]
    losers: List[str]
    index: int
    reversed: bool
    suit: str | None
    rank: str | None
    turn: int
    status: str
    config: Dict[str, Any] = field(default_factory=dict)
    rng_state: List[Any] | None = None

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "GameSnapshot":
        return cls(
            draw_pile=list(data["draw_pile"]),
            discard=list(data["discard"]),
            hands={name: list(codes) for name, codes in data["hands"].items()},
            roster=list(data["roster"]),
            winners=list(data["winners"]),
            losers=list(data["losers"]),
            index=int(data["index"]),
            reversed=bool(data["reversed"]),
            suit=data.get("suit"),
            rank=data.get("rank"),
            turn=int(data["turn"]),
            status=str(data["status"]),
            config=dict(data.get("config") or {}),
            rng_state=data.get("rng_state"),
        )


def _encode_rng_state(rng: random.Random) -> List[Any]:
    version, internal, gauss = rng.getstate()
    return [version, list(internal), gauss]


def _decode_rng_state(state: Sequence[Any]) -> tuple:
    version, internal, gauss = state
    return (version, tuple(internal), gauss)


def _cards(codes: Sequence[str]) -> List[Card]:
    return [Card.from_code(code) for code in codes]


def capture(game: Game) -> GameSnapshot:
    constraint = game.constraint
    return GameSnapshot(
        draw_pile=list(iter_codes(game.piles.draw_pile)),
        discard=list(iter_codes(game.piles.discard)),
        hands={seat.name: list(iter_codes(seat.hand)) for seat in game.seats},
        roster=[seat.name for seat in game.order.roster],
        winners=[seat.name for seat in game.winners],
        losers=[seat.name for seat in game.losers],
        index=game.order.index,
        reversed=game.order.reversed,
        suit=constraint.suit.value if constraint is not None else None,
        rank=constraint.rank.value if constraint is not None else None,
        turn=game.turn,
        status=game.status.value,
        config=asdict(game.config),
        rng_state=_encode_rng_state(game.rng),
    )


def restore(snapshot: GameSnapshot, players: Sequence[Player]) -> Game:
    """Rebuild a game from ``snapshot`` with ``players`` in their original seating order.

    Player names must match the snapshot's hands exactly.
    """

    by_name = {player.name: player for player in players}
    if set(by_name) != set(snapshot.hands):
        raise ValueError("players do not match the snapshot")
    for group in (snapshot.roster, snapshot.winners, snapshot.losers):
        if not set(group) <= set(by_name):
            raise ValueError("snapshot references unknown players")

    game = Game(
        players,
        GameConfig(**snapshot.config),
        deck=_cards(snapshot.draw_pile),
    )
    if snapshot.rng_state is not None:
        game.rng.setstate(_decode_rng_state(snapshot.rng_state))
    game.piles.discard = _cards(snapshot.discard)
    for seat in game.seats:
        seat.hand = _cards(snapshot.hands[seat.name])
    game.order.roster = [game.seat(name) for name in snapshot.roster]
    game.order.index = snapshot.index
    game.order.reversed = snapshot.reversed
    game.winners.extend(game.seat(name) for name in snapshot.winners)
    game.losers.extend(game.seat(name) for name in snapshot.losers)
    if snapshot.suit is not None and snapshot.rank is not None:
        game.constraint = Constraint(Suit(snapshot.suit), Rank(snapshot.rank))
    game.turn = snapshot.turn
    game.started = GameStatus(snapshot.status) is not GameStatus.NOT_STARTED
    game.total_cards = game.card_count()

    if game.order.roster and not 0 <= game.order.index < len(game.order.roster):
        raise ConsistencyError("snapshot turn index is outside the roster")
    game.log.add("Game restored from snapshot.")
    return game
