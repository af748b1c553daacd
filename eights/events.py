"""Append-only, turn-stamped event log."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable, List

logger = logging.getLogger(__name__)


class EventKind(str, Enum):
    """Categories of logged events."""

    INFO = "info"
    PLAY = "play"
    DECLARE = "declare"
    DRAW = "draw"
    PENALTY = "penalty"
    RESHUFFLE = "reshuffle"
    ELIMINATION = "elimination"


DECISION_KINDS = frozenset({EventKind.PLAY, EventKind.DECLARE})


@dataclass(frozen=True, slots=True)
class Event:
    turn: int
    kind: EventKind
    message: str


@dataclass(slots=True)
class EventLog:
    """Game history. Entries are never removed or rewritten."""

    entries: List[Event] = field(default_factory=list)
    turn: int = 0

    def add(self, message: str, kind: EventKind = EventKind.INFO) -> Event:
        event = Event(self.turn, kind, message)
        self.entries.append(event)
        logger.debug("[turn %d] %s", self.turn, message)
        return event

    def lines(self) -> List[str]:
        return [event.message for event in self.entries]

    def since(self, turns: int, kinds: Iterable[EventKind] | None = None) -> List[str]:
        """Messages from the last ``turns`` turns, optionally filtered by kind."""

        if turns <= 0:
            return []
        first_turn = self.turn - turns
        wanted = frozenset(kinds) if kinds is not None else None
        return [
            event.message
            for event in self.entries
            if event.turn >= first_turn and (wanted is None or event.kind in wanted)
        ]

    def __len__(self) -> int:
        return len(self.entries)
