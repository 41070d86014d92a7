"""Dataclasses describing EDL tokens, patterns, and commands."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Union


@dataclass(frozen=True, slots=True)
class WordToken:
    value: str
    kind: str = "word"


@dataclass(frozen=True, slots=True)
class PathToken:
    value: str
    kind: str = "path"


@dataclass(frozen=True, slots=True)
class RegexToken:
    pattern: str
    flags: str
    kind: str = "regex"


@dataclass(frozen=True, slots=True)
class HeredocToken:
    value: str
    kind: str = "heredoc"


Token = Union[WordToken, PathToken, RegexToken, HeredocToken]


@dataclass(frozen=True, slots=True)
class RegexPattern:
    """Compiled regular expression; ``flags`` keeps the script spelling."""

    regex: re.Pattern[str]
    flags: str = ""

    def describe(self) -> str:
        return f"/{self.regex.pattern}/{self.flags}"


@dataclass(frozen=True, slots=True)
class LiteralPattern:
    """Exact text, always sourced from a heredoc."""

    text: str

    def describe(self) -> str:
        return "<<HEREDOC"


@dataclass(frozen=True, slots=True)
class LinePattern:
    line: int

    def describe(self) -> str:
        return str(self.line)


@dataclass(frozen=True, slots=True)
class LineColPattern:
    line: int
    col: int

    def describe(self) -> str:
        return f"{self.line}:{self.col}"


@dataclass(frozen=True, slots=True)
class BofPattern:
    def describe(self) -> str:
        return "bof"


@dataclass(frozen=True, slots=True)
class EofPattern:
    def describe(self) -> str:
        return "eof"


PositionalPattern = Union[LinePattern, LineColPattern, BofPattern, EofPattern]


@dataclass(frozen=True, slots=True)
class RangePattern:
    """Span from the start of ``start``'s match to the end of ``end``'s."""

    start: PositionalPattern
    end: PositionalPattern

    def describe(self) -> str:
        return f"{self.start.describe()}-{self.end.describe()}"


Pattern = Union[
    RegexPattern,
    LiteralPattern,
    LinePattern,
    LineColPattern,
    BofPattern,
    EofPattern,
    RangePattern,
]


@dataclass(frozen=True, slots=True)
class MutationText:
    """Inline heredoc text or a reference to a register holding the text."""

    text: str | None = None
    register: str | None = None

    def __post_init__(self) -> None:
        if (self.text is None) == (self.register is None):
            raise ValueError("MutationText needs exactly one of text or register")

    @classmethod
    def literal(cls, text: str) -> "MutationText":
        return cls(text=text)

    @classmethod
    def from_register(cls, name: str) -> "MutationText":
        return cls(register=name)

    @property
    def is_literal(self) -> bool:
        return self.text is not None


@dataclass(frozen=True, slots=True)
class FileCommand:
    path: str
    keyword: str = "file"


@dataclass(frozen=True, slots=True)
class NewFileCommand:
    path: str
    keyword: str = "newfile"


@dataclass(frozen=True, slots=True)
class PatternCommand:
    """Any selection command driven by a pattern.

    ``keyword`` is one of ``narrow``, ``narrow_one``, ``select``,
    ``select_one``, ``select_next``, ``select_prev``, ``extend_forward``,
    ``extend_back``.
    """

    keyword: str
    pattern: Pattern


@dataclass(frozen=True, slots=True)
class RetainCommand:
    """``retain_first``, ``retain_last`` or ``retain_nth <n>``."""

    keyword: str
    index: int | None = None


@dataclass(frozen=True, slots=True)
class TextCommand:
    """``replace``, ``insert_before`` or ``insert_after``."""

    keyword: str
    source: MutationText


@dataclass(frozen=True, slots=True)
class DeleteCommand:
    keyword: str = "delete"


@dataclass(frozen=True, slots=True)
class CutCommand:
    register: str
    keyword: str = "cut"


Command = Union[
    FileCommand,
    NewFileCommand,
    PatternCommand,
    RetainCommand,
    TextCommand,
    DeleteCommand,
    CutCommand,
]

FILE_COMMANDS = (FileCommand, NewFileCommand)


def describe_command(command: Command) -> str:
    """One-line rendering used in traces and logs."""

    if isinstance(command, (FileCommand, NewFileCommand)):
        return f"{command.keyword} {command.path}"
    if isinstance(command, PatternCommand):
        return f"{command.keyword} {command.pattern.describe()}"
    if isinstance(command, RetainCommand):
        if command.keyword == "retain_nth":
            return f"retain_nth {command.index}"
        return command.keyword
    if isinstance(command, TextCommand):
        if command.source.register is not None:
            return f"{command.keyword} {command.source.register}"
        return command.keyword
    if isinstance(command, CutCommand):
        return f"cut {command.register}"
    return command.keyword


__all__ = [
    "BofPattern",
    "Command",
    "CutCommand",
    "DeleteCommand",
    "EofPattern",
    "FILE_COMMANDS",
    "FileCommand",
    "HeredocToken",
    "LineColPattern",
    "LinePattern",
    "LiteralPattern",
    "MutationText",
    "NewFileCommand",
    "PathToken",
    "Pattern",
    "PatternCommand",
    "PositionalPattern",
    "RangePattern",
    "RegexPattern",
    "RegexToken",
    "RetainCommand",
    "TextCommand",
    "Token",
    "WordToken",
    "describe_command",
]
