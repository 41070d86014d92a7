"""Single-file text storage with an offset/line index."""

from __future__ import annotations

from bisect import bisect_right
from typing import List, Sequence

from .state import Pos, Range


class DocumentRangeError(IndexError):
    """Raised when a line number falls outside ``[1, line_count]``."""

    def __init__(self, line: int, line_count: int) -> None:
        super().__init__(f"Line {line} out of range (1-{line_count})")
        self.line = line
        self.line_count = line_count


def compute_line_starts(content: str) -> List[int]:
    starts = [0]
    index = content.find("\n")
    while index != -1:
        starts.append(index + 1)
        index = content.find("\n", index + 1)
    return starts


class Document:
    """Text content plus the offset at which each line begins.

    A trailing newline produces one extra, empty, final line. ``splice`` is
    the only way to change the content and it rebuilds the line index.
    """

    def __init__(self, content: str = "") -> None:
        self._content = content
        self._line_starts = compute_line_starts(content)

    @property
    def content(self) -> str:
        return self._content

    @property
    def line_count(self) -> int:
        return len(self._line_starts)

    @property
    def line_starts(self) -> Sequence[int]:
        return tuple(self._line_starts)

    def __len__(self) -> int:
        return len(self._content)

    def _check_line(self, line: int) -> int:
        index = line - 1
        if index < 0 or index >= len(self._line_starts):
            raise DocumentRangeError(line, self.line_count)
        return index

    def pos_to_offset(self, pos: Pos) -> int:
        return self._line_starts[self._check_line(pos.line)] + pos.col

    def offset_to_pos(self, offset: int) -> Pos:
        index = bisect_right(self._line_starts, offset) - 1
        index = max(index, 0)
        return Pos(line=index + 1, col=offset - self._line_starts[index])

    def line_range(self, line: int) -> Range:
        """Range of ``line`` without its terminating newline."""

        index = self._check_line(line)
        start = self._line_starts[index]
        if index + 1 < len(self._line_starts):
            end = self._line_starts[index + 1] - 1
        else:
            end = len(self._content)
        return Range(start, end)

    def full_range(self) -> Range:
        return Range(0, len(self._content))

    def get_text(self, span: Range) -> str:
        return self._content[span.start : span.end]

    def splice(self, span: Range, replacement: str) -> None:
        self._content = (
            self._content[: span.start] + replacement + self._content[span.end :]
        )
        self._line_starts = compute_line_starts(self._content)


__all__ = ["Document", "DocumentRangeError", "compute_line_starts"]
