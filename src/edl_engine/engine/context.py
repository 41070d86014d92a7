"""Mutable executor state and the records it accumulates while running."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence

from edl_engine.buffer import (
    Document,
    FileIO,
    InitialDocIndex,
    Range,
    RegisterBank,
    Transform,
)
from edl_engine.runtime.settings import EngineSettings


class ExecutionError(RuntimeError):
    """A command failed; carries the trace of commands that succeeded before it."""

    def __init__(self, message: str, trace: Sequence["TraceEntry"] = ()) -> None:
        super().__init__(message)
        self.message = message
        self.trace: List[TraceEntry] = list(trace)


@dataclass(slots=True)
class MutationSummary:
    insertions: int = 0
    deletions: int = 0
    replacements: int = 0
    lines_added: int = 0
    lines_removed: int = 0

    @property
    def changed(self) -> bool:
        return bool(self.insertions or self.deletions or self.replacements)


@dataclass(frozen=True, slots=True)
class TraceEntry:
    """One executed command, the ranges it left selected and their text."""

    command: str
    ranges: tuple[Range, ...]
    snippet: str
    path: Optional[str] = None


@dataclass(frozen=True, slots=True)
class SavedRegister:
    name: str
    size_chars: int


@dataclass(slots=True)
class FileError:
    """Failure of one file section, with the text rescued from it."""

    path: str
    error: str
    trace: List[TraceEntry] = field(default_factory=list)
    saved_registers: List[SavedRegister] = field(default_factory=list)


@dataclass(slots=True)
class FileState:
    path: str
    document: Document
    initial_index: InitialDocIndex
    transforms: List[Transform] = field(default_factory=list)
    mutations: MutationSummary = field(default_factory=MutationSummary)
    is_new: bool = False

    @classmethod
    def load(cls, path: str, content: str, *, is_new: bool = False) -> "FileState":
        document = Document(content)
        return cls(
            path=path,
            document=document,
            initial_index=InitialDocIndex.capture(document),
            is_new=is_new,
        )

    def splice(self, span: Range, replacement: str) -> None:
        """Apply an edit and log it in the coordinates live right now."""

        self.document.splice(span, replacement)
        self.transforms.append(
            Transform(
                start=span.start,
                before_end=span.end,
                after_end=span.start + len(replacement),
            )
        )


@dataclass(slots=True)
class ExecutionContext:
    """Everything a command handler may read or change."""

    file_io: FileIO
    registers: RegisterBank
    settings: EngineSettings = field(default_factory=EngineSettings)
    files: Dict[str, FileState] = field(default_factory=dict)
    current: Optional[FileState] = None
    selection: List[Range] = field(default_factory=list)
    trace: List[TraceEntry] = field(default_factory=list)

    def fail(self, message: str) -> ExecutionError:
        return ExecutionError(message, self.trace)

    def require_file(self) -> FileState:
        if self.current is None:
            raise self.fail("No file selected. Use 'file' command first.")
        return self.current

    def require_single(self) -> Range:
        if len(self.selection) != 1:
            raise self.fail(f"Expected single selection, got {len(self.selection)}")
        return self.selection[0]

    def require_selection(self, keyword: str) -> List[Range]:
        if not self.selection:
            raise self.fail(f"{keyword}: no selection")
        return self.selection

    def add_trace(
        self,
        command: str,
        ranges: Sequence[Range],
        snippet: Optional[str] = None,
    ) -> None:
        path = self.current.path if self.current is not None else None
        if snippet is None:
            document = self.require_file().document
            snippet = " | ".join(
                format_snippet(document.get_text(span), self.settings)
                for span in ranges
            )
        self.trace.append(
            TraceEntry(
                command=command, ranges=tuple(ranges), snippet=snippet, path=path
            )
        )


def format_snippet(text: str, settings: Optional[EngineSettings] = None) -> str:
    """Shorten ``text`` for a trace line.

    A single line longer than the limit keeps its head and tail around
    ``...``; multi-line text shows only its first and last line.
    """

    limit = (settings or EngineSettings()).max_snippet_length
    lines = text.split("\n")
    if len(lines) == 1:
        if len(text) > limit:
            half = (limit - 3) // 2
            return text[:half] + "..." + text[len(text) - half :]
        return text
    return lines[0] + "\n...\n" + lines[-1]


def count_lines(text: str) -> int:
    if not text:
        return 0
    return text.count("\n") + 1


__all__ = [
    "ExecutionContext",
    "ExecutionError",
    "FileError",
    "FileState",
    "MutationSummary",
    "SavedRegister",
    "TraceEntry",
    "count_lines",
    "format_snippet",
]
