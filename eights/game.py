"""Game controller: dealing, the turn state machine and post-game reporting."""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from enum import Enum
from typing import List, Sequence

from . import cards as cards_module
from .cards import NORMAL_SUITS, Card
from .elimination import Elimination
from .errors import ConsistencyError, EightsError, ErrorKind, TurnLimitExceeded
from .events import EventKind, EventLog
from .piles import Piles
from .players import Player, Seat
from .rules import Attempt, Constraint, Effect, effect_for, is_legal, is_wild, possible_plays
from .turn_order import TurnOrder
from .view import GameView

logger = logging.getLogger(__name__)

__all__ = ["GameStatus", "GameConfig", "TurnResult", "Game"]


class GameStatus(str, Enum):
    NOT_STARTED = "not_started"
    IN_PROGRESS = "in_progress"
    FINISHED = "finished"


@dataclass(slots=True)
class GameConfig:
    """Runtime configuration for a single game."""

    starting_hand_size: int = 5
    players_per_deck: int = 5
    include_jokers: bool = True
    seed: int | None = None
    history_turns: int = 10

    def __post_init__(self) -> None:
        if self.starting_hand_size <= 0:
            raise ValueError("starting_hand_size must be positive")
        if self.players_per_deck <= 0:
            raise ValueError("players_per_deck must be positive")


@dataclass(frozen=True, slots=True)
class TurnResult:
    """What happened during one call to :meth:`Game.run_turn`."""

    turn: int
    player: str
    attempt: Attempt | None = None
    accepted: bool = False
    effect: Effect = Effect.NONE
    forfeited: bool = False


class Game:
    """Owns every hand, both piles and the roster, and runs turns one at a time."""

    def __init__(
        self,
        players: Sequence[Player],
        config: GameConfig | None = None,
        *,
        deck: Sequence[Card] | None = None,
        rng: random.Random | None = None,
    ) -> None:
        if len(players) < 2:
            raise ValueError("At least two players are required for this game.")
        names = [player.name for player in players]
        if len(set(names)) != len(names):
            raise ValueError("player names must be unique")

        self.config = config or GameConfig()
        self.rng = rng or random.Random(self.config.seed)
        self.seats: List[Seat] = [Seat(player) for player in players]
        self.log = EventLog()

        if deck is None:
            num_decks = cards_module.decks_for_players(len(players), self.config.players_per_deck)
            draw_pile = cards_module.build_shoe(num_decks, include_jokers=self.config.include_jokers)
            self.rng.shuffle(draw_pile)
        else:
            draw_pile = list(deck)
        self.total_cards = len(draw_pile)

        self.piles = Piles(draw_pile=draw_pile, log=self.log, rng=self.rng)
        self.order = TurnOrder(roster=list(self.seats))
        self.elimination = Elimination(order=self.order, piles=self.piles, log=self.log)
        self.constraint: Constraint | None = None
        self.started = False
        self._announced = False
        self.view = GameView(self)
        self.log.add("Game began.")

    # Read-only helpers -------------------------------------------------

    @property
    def turn(self) -> int:
        return self.log.turn

    @turn.setter
    def turn(self, value: int) -> None:
        self.log.turn = value

    @property
    def winners(self) -> List[Seat]:
        return self.elimination.winners

    @property
    def losers(self) -> List[Seat]:
        return self.elimination.losers

    @property
    def status(self) -> GameStatus:
        if not self.started:
            return GameStatus.NOT_STARTED
        if not self.order.roster:
            return GameStatus.FINISHED
        return GameStatus.IN_PROGRESS

    @property
    def finished(self) -> bool:
        return self.status is GameStatus.FINISHED

    def seat(self, name: str) -> Seat:
        for seat in self.seats:
            if seat.name == name:
                return seat
        raise KeyError(name)

    def card_count(self) -> int:
        """Cards across both piles and every hand; always equals ``total_cards``."""

        return self.piles.total() + sum(seat.hand_size() for seat in self.seats)

    def possible_plays(self, seat: Seat) -> List[Card]:
        if self.constraint is None:
            return []
        return possible_plays(seat.hand, self.constraint)

    # Setup -------------------------------------------------------------

    def start(self) -> None:
        """Deal starting hands and flip the opening card."""

        if self.status is not GameStatus.NOT_STARTED:
            raise ConsistencyError("game has already started")
        size = self.config.starting_hand_size
        self.log.add(f"Starting hand ({size} cards) dealt to players.")
        try:
            for seat in self.seats:
                self.piles.deal_several(seat.hand, seat.name, size)
            opening = self.piles.flip()
        except EightsError as exc:
            # A short deal at this point means the game cannot start fairly.
            logger.error("initial deal failed: %s", exc)
            raise ConsistencyError(f"cannot deal starting hands: {exc}") from exc
        self.log.add(f"First card played from deck ({opening}).")
        self.started = True

        if not is_wild(opening.rank):
            self.constraint = Constraint(opening.suit, opening.rank)
            return
        # The first player declares the suit for a wild opening card rather than redealing.
        while self.order.roster:
            seat = self.order.current
            try:
                suit = seat.player.declare_suit(self.view, tuple(seat.hand))
            except EightsError as exc:
                if exc.kind is not ErrorKind.FORFEITED:
                    raise
                self.log.add(f"{seat.name} forfeited.", EventKind.ELIMINATION)
                self.elimination.remove_loser(seat)
                continue
            if suit not in NORMAL_SUITS:
                raise ConsistencyError(f"{seat.name} declared an unplayable suit {suit!r}")
            self.constraint = Constraint(suit, opening.rank)
            self.log.add(f"{seat.name} declared suit for {opening}: {suit.name}.", EventKind.DECLARE)
            return
        self._check_finished()

    # Applying decisions ------------------------------------------------

    def accept_attempt(self, attempt: Attempt, seat: Seat) -> bool:
        """Commit a legal attempt, or hand the card back with a one-card penalty.

        The card must already be out of ``seat``'s hand.
        """

        if self.constraint is None:
            raise ConsistencyError("no card has been played yet")
        if attempt.card in seat.hand:
            raise ConsistencyError(
                f"{seat.name} attempted to play a card ({attempt.card}) without removing it "
                "from their hand."
            )
        if is_legal(attempt, self.constraint):
            self.piles.play(attempt.card)
            self.constraint = Constraint(attempt.suit, attempt.rank)
            self.log.add(
                f"{seat.name} played {attempt.describe()}. "
                f"Next card must be {self.constraint.suit.name} or {self.constraint.rank.name}.",
                EventKind.PLAY,
            )
            if not seat.hand:
                self.log.add(f"{seat.name} has zero cards and will be declared a winner.")
            return True

        seat.hand.append(attempt.card)
        self.log.add(
            f"Returned {attempt.card} to {seat.name}. Penalty of 1 card applied.",
            EventKind.PENALTY,
        )
        self.piles.safe_deal(seat.hand, seat.name)
        return False

    def accept_draw(self, seat: Seat) -> None:
        """A player who does not play draws one card; no validation is involved."""

        self.log.add(f"{seat.name} has chosen to draw. Penalty of 1 card applied.", EventKind.DRAW)
        self.piles.safe_deal(seat.hand, seat.name)

    def _apply_effect(self, effect: Effect) -> bool:
        """Apply ``effect`` to turn order and return whether the next player is skipped."""

        if effect is Effect.SKIP_NEXT:
            return True
        if effect is Effect.REVERSE_DIRECTION:
            self.order.reverse()
            # Two players: the reversal alone changes nothing, so the Ace also
            # skips and the same player acts again.
            return len(self.order) == 2
        return False

    # Turn state machine --------------------------------------------------

    def run_turn(self) -> TurnResult | None:
        """Run one turn for the current player.

        Returns ``None`` when the only thing left to do was to resolve a lone
        remaining player as the loser.
        """

        if self.status is GameStatus.NOT_STARTED:
            raise ConsistencyError("game has not started")
        if self.finished:
            raise ConsistencyError("the game is over; there can be no more play")
        if len(self.order) == 1:
            self.elimination.settle()
            self._check_finished()
            return None

        seat = self.order.current
        if not seat.hand:
            raise ConsistencyError(f"{seat.name} has a hand size of zero but has not already won")
        if self.constraint is None:
            raise ConsistencyError("no opening card has been flipped")
        turn = self.turn

        try:
            attempt = seat.player.play(
                self.view,
                tuple(seat.hand),
                self.piles.top,
                self.constraint.suit,
                self.constraint.rank,
            )
        except EightsError as exc:
            if exc.kind is not ErrorKind.FORFEITED:
                raise
            self.log.add(f"{seat.name} forfeited.", EventKind.ELIMINATION)
            self.elimination.remove_loser(seat)
            self._end_turn()
            return TurnResult(turn=turn, player=seat.name, forfeited=True)

        accepted = False
        if attempt is None:
            self.accept_draw(seat)
        else:
            if not seat.take(attempt.card):
                raise ConsistencyError(
                    f"{seat.name} attempted to play {attempt.card}, which is not in their hand"
                )
            accepted = self.accept_attempt(attempt, seat)

        effect = effect_for(attempt.rank) if attempt is not None and accepted else Effect.NONE
        skip = self._apply_effect(effect)
        if not self.elimination.remove_winners(skip):
            self.order.advance(skip)
        self._end_turn()
        return TurnResult(
            turn=turn,
            player=seat.name,
            attempt=attempt,
            accepted=accepted,
            effect=effect,
        )

    def run_all(self, max_turns: int | None = None) -> None:
        """Play turns until at most one player is left, then resolve the loser."""

        if self.status is GameStatus.NOT_STARTED:
            self.start()
        played = 0
        while len(self.order) > 1:
            if max_turns is not None and played >= max_turns:
                logger.error("turn limit of %d reached", max_turns)
                raise TurnLimitExceeded(f"game did not finish within {max_turns} turns")
            self.run_turn()
            played += 1
        if len(self.order) == 1:
            self.elimination.settle()
        self._check_finished()

    def _end_turn(self) -> None:
        self.turn += 1
        self._check_finished()

    def _check_finished(self) -> None:
        if self.finished and not self._announced:
            self._announced = True
            logger.info(
                "game finished after %d turns; winners=%s losers=%s",
                self.turn,
                [seat.name for seat in self.winners],
                [seat.name for seat in self.losers],
            )

    # Reporting -----------------------------------------------------------

    def report(self, next_players: int = 20) -> str:
        """Post-game summary with the full event log and every hand revealed."""

        upcoming = self.view.predict_next_players(next_players)
        hands = [f"{seat.name}: {seat.show_hand()}" for seat in self.seats]
        return "\n".join(
            [
                "[GAME SUMMARY]",
                "[EVENT LOG]",
                *self.log.lines(),
                "[GAME STATE]",
                self.view.non_player_summary(),
                "[NEXT PLAYERS]",
                ", ".join(upcoming) if upcoming else "None",
                "[PLAYERS SUMMARY]",
                self.view.players_summary(),
                "[HANDS]",
                *hands,
            ]
        )
