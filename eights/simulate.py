"""Batch harness that plays many all-AI games and tallies the results."""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass, field
from typing import Dict, List

from .errors import EightsError
from .game import Game, GameConfig
from .players import BasicPlayer, Player, RandomPlayer

logger = logging.getLogger(__name__)

__all__ = ["PlayerTally", "BatchReport", "build_players", "run_batch"]


@dataclass(slots=True)
class PlayerTally:
    """Outcomes accumulated for one player across a batch."""

    name: str
    wins: int = 0
    losses: int = 0
    first_places: int = 0


@dataclass(slots=True)
class BatchReport:
    games: int
    completed: int = 0
    total_turns: int = 0
    failures: List[str] = field(default_factory=list)
    tallies: Dict[str, PlayerTally] = field(default_factory=dict)

    @property
    def average_turns(self) -> float:
        return self.total_turns / self.completed if self.completed else 0.0


def build_players(
    basics: int,
    randoms: int,
    rng: random.Random,
    *,
    blunder_rate: float = 0.0,
    shuffle: bool = False,
) -> List[Player]:
    players: List[Player] = [
        BasicPlayer(f"Basic AI {idx}", rng=random.Random(rng.getrandbits(32)))
        for idx in range(1, basics + 1)
    ]
    players += [
        RandomPlayer(f"Random AI {idx}", rng=random.Random(rng.getrandbits(32)), blunder_rate=blunder_rate)
        for idx in range(1, randoms + 1)
    ]
    if shuffle:
        rng.shuffle(players)
    return players


def run_batch(
    games: int,
    *,
    basics: int = 2,
    randoms: int = 2,
    seed: int = 123,
    max_turns: int = 2000,
    blunder_rate: float = 0.1,
    shuffle_seats: bool = True,
    config: GameConfig | None = None,
) -> BatchReport:
    """Play ``games`` games between AI players and collect the outcomes.

    Engine failures are recorded in ``failures`` rather than stopping the batch.
    """

    if games <= 0:
        raise ValueError("games must be positive")
    if basics + randoms < 2:
        raise ValueError("at least two players are required")

    rng = random.Random(seed)
    report = BatchReport(games=games)
    for game_number in range(1, games + 1):
        players = build_players(
            basics, randoms, rng, blunder_rate=blunder_rate, shuffle=shuffle_seats
        )
        for player in players:
            report.tallies.setdefault(player.name, PlayerTally(player.name))
        game = Game(players, config, rng=random.Random(rng.getrandbits(32)))
        try:
            game.run_all(max_turns=max_turns)
        except EightsError as exc:
            logger.error("game %d failed: %s", game_number, exc)
            report.failures.append(f"game {game_number}: {exc}")
            continue

        if game.card_count() != game.total_cards:
            report.failures.append(f"game {game_number}: card count drifted")
            continue
        report.completed += 1
        report.total_turns += game.turn
        for place, seat in enumerate(game.winners):
            tally = report.tallies[seat.name]
            tally.wins += 1
            if place == 0:
                tally.first_places += 1
        for seat in game.losers:
            report.tallies[seat.name].losses += 1
    return report
