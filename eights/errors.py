"""Error taxonomy for the Eights engine.

Every engine exception carries an :class:`ErrorKind`. The game controller
decides what to do with a failure by looking at ``kind`` rather than at the
exception class.
"""

from __future__ import annotations

from enum import Enum

__all__ = [
    "ErrorKind",
    "EightsError",
    "InsufficientCards",
    "Forfeit",
    "ConsistencyError",
    "TurnLimitExceeded",
    "InvalidAttempt",
]


class ErrorKind(str, Enum):
    """Severity of an engine failure."""

    RECOVERABLE = "recoverable"
    FORFEITED = "forfeited"
    FATAL = "fatal"


class EightsError(RuntimeError):
    """Base class for engine failures."""

    kind: ErrorKind = ErrorKind.FATAL


class InsufficientCards(EightsError):
    """Raised when no card can be dealt, even after reshuffling."""

    kind = ErrorKind.RECOVERABLE


class Forfeit(EightsError):
    """Raised by a strategy to leave the game voluntarily."""

    kind = ErrorKind.FORFEITED

    def __init__(self, message: str = "player forfeited") -> None:
        super().__init__(message)


class ConsistencyError(EightsError):
    """Raised when engine bookkeeping is violated; the game cannot continue."""


class TurnLimitExceeded(EightsError):
    """Raised when ``run_all`` hits its configured turn cap."""


class InvalidAttempt(ValueError):
    """Raised when an :class:`~eights.rules.Attempt` is constructed badly."""
