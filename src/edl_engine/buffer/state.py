"""Position and range value types shared by documents and selections."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class Pos:
    """1-indexed line, 0-indexed column."""

    line: int
    col: int

    def __str__(self) -> str:
        return f"{self.line}:{self.col}"


@dataclass(frozen=True, slots=True)
class Range:
    """Half-open character interval ``[start, end)``."""

    start: int
    end: int

    def __post_init__(self) -> None:
        if self.end < self.start:
            raise ValueError(f"Range end {self.end} precedes start {self.start}")

    @classmethod
    def point(cls, offset: int) -> "Range":
        return cls(offset, offset)

    @property
    def length(self) -> int:
        return self.end - self.start

    def contains(self, other: "Range") -> bool:
        return self.start <= other.start and other.end <= self.end


__all__ = ["Pos", "Range"]
