"""Replay log mapping original-file offsets onto the current content.

Every splice applied to a file appends a ``Transform`` recorded in the
coordinates that were live just before it ran. Replaying the log in order
moves an offset from the file's pre-script layout to its current layout,
which keeps line and line:col addressing stable across earlier edits.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Sequence

from .document import Document, DocumentRangeError
from .state import Range


class UnresolvablePositionError(ValueError):
    """Raised when an original offset lies inside text an edit replaced."""

    def __init__(self, offset: int, transform: "Transform") -> None:
        super().__init__(
            f"Cannot resolve position {offset}: it falls inside "
            f"[{transform.start}, {transform.before_end}), which an earlier "
            "edit already replaced"
        )
        self.offset = offset
        self.transform = transform


@dataclass(frozen=True, slots=True)
class Transform:
    """``[start, before_end)`` was replaced by ``after_end - start`` chars."""

    start: int
    before_end: int
    after_end: int

    @property
    def delta(self) -> int:
        return self.after_end - self.before_end


def resolve_index(original_offset: int, transforms: Iterable[Transform]) -> int:
    offset = original_offset
    for transform in transforms:
        if offset <= transform.start:
            continue
        if offset < transform.before_end:
            raise UnresolvablePositionError(offset, transform)
        offset += transform.delta
    return offset


@dataclass(frozen=True, slots=True)
class InitialDocIndex:
    """Line layout of a file as it was when first loaded."""

    line_starts: tuple[int, ...]
    length: int

    @classmethod
    def capture(cls, document: Document) -> "InitialDocIndex":
        return cls(line_starts=tuple(document.line_starts), length=len(document))

    @property
    def line_count(self) -> int:
        return len(self.line_starts)

    def line_range(self, line: int) -> Range:
        index = line - 1
        if index < 0 or index >= len(self.line_starts):
            raise DocumentRangeError(line, self.line_count)
        start = self.line_starts[index]
        if index + 1 < len(self.line_starts):
            return Range(start, self.line_starts[index + 1] - 1)
        return Range(start, self.length)

    def offset_for(self, line: int, col: int) -> int:
        span = self.line_range(line)
        if col < 0 or col > span.length:
            raise ValueError(
                f"Column {col} out of range for line {line} (0-{span.length})"
            )
        return span.start + col


def resolve_range(span: Range, transforms: Sequence[Transform]) -> Range:
    return Range(
        resolve_index(span.start, transforms), resolve_index(span.end, transforms)
    )


__all__ = [
    "InitialDocIndex",
    "Transform",
    "UnresolvablePositionError",
    "resolve_index",
    "resolve_range",
]
