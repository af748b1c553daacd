"""Circular turn order over the active roster."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Callable, Iterator, List

from .errors import ConsistencyError

if TYPE_CHECKING:  # pragma: no cover - typing helper
    from .players import Seat

__all__ = ["step", "Lookahead", "TurnOrder"]


def step(index: int, size: int, reversed_: bool) -> int:
    """Index after ``index`` in a circle of ``size`` seats."""

    if size <= 0:
        raise ConsistencyError("turn order has no seats")
    if reversed_:
        return size - 1 if index - 1 < 0 else index - 1
    return 0 if index + 1 >= size else index + 1


@dataclass(frozen=True, slots=True)
class Lookahead:
    """The next ``count`` seat indices after ``start``.

    Size and direction are captured when the lookahead is created, so later
    roster changes do not leak into it. Iterating again restarts from ``start``.
    """

    start: int
    count: int
    size: int
    reversed_: bool

    def __iter__(self) -> Iterator[int]:
        index = self.start
        for _ in range(self.count):
            index = step(index, self.size, self.reversed_)
            yield index

    def __len__(self) -> int:
        return self.count


@dataclass(slots=True)
class TurnOrder:
    """Ordered active roster, the acting index and the direction flag."""

    roster: List["Seat"] = field(default_factory=list)
    index: int = 0
    reversed: bool = False

    def __len__(self) -> int:
        return len(self.roster)

    @property
    def current(self) -> "Seat":
        if not self.roster:
            raise ConsistencyError("no active players remain")
        if not 0 <= self.index < len(self.roster):
            raise ConsistencyError(f"turn index {self.index} outside roster of {len(self.roster)}")
        return self.roster[self.index]

    def next_index(self, index: int) -> int:
        return step(index, len(self.roster), self.reversed)

    def next_indices(self, index: int, count: int) -> Lookahead:
        return Lookahead(index, max(count, 0), len(self.roster), self.reversed)

    def next_active_index(
        self, is_active: Callable[["Seat"], bool], start: int | None = None
    ) -> int | None:
        """First seat after ``start`` satisfying ``is_active``.

        Returns ``None`` when the walk comes back to ``start`` without finding
        one, i.e. no distinct next player exists.
        """

        origin = self.index if start is None else start
        index = self.next_index(origin)
        while index != origin:
            if is_active(self.roster[index]):
                return index
            index = self.next_index(index)
        return None

    def reverse(self) -> None:
        self.reversed = not self.reversed

    def advance(self, skip: bool = False) -> int:
        """Move to the next seat; ``skip`` passes over one extra seat."""

        self.index = self.next_index(self.index)
        if skip:
            self.index = self.next_index(self.index)
        return self.index
