"""Top-level package for the Eights game engine."""

from . import cards, elimination, errors, events, game, piles, players, rules, snapshot, turn_order, view

__all__ = [
    "cards",
    "elimination",
    "errors",
    "events",
    "game",
    "piles",
    "players",
    "rules",
    "snapshot",
    "turn_order",
    "view",
]
