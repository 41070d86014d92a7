"""One-pass parser turning EDL tokens into a flat command list."""

from __future__ import annotations

import re
from functools import partial
from typing import Callable, Dict, Iterator, List, Optional

from edl_engine.runtime import telemetry

from .lexer import ParseError, lex
from .models import (
    BofPattern,
    Command,
    CutCommand,
    DeleteCommand,
    EofPattern,
    FileCommand,
    HeredocToken,
    LineColPattern,
    LinePattern,
    LiteralPattern,
    MutationText,
    NewFileCommand,
    PathToken,
    Pattern,
    PatternCommand,
    PositionalPattern,
    RangePattern,
    RegexPattern,
    RegexToken,
    RetainCommand,
    TextCommand,
    Token,
    WordToken,
)

_REGEX_FLAGS: Dict[str, re.RegexFlag] = {
    "i": re.IGNORECASE,
    "m": re.MULTILINE,
    "s": re.DOTALL,
    "x": re.VERBOSE,
}

_LINE_COL = re.compile(r"(\d+):(\d+)")
_LINE = re.compile(r"(\d+):?")
_INTEGER = re.compile(r"[+-]?\d+")
_HEREDOC_MARKER = re.compile(r"<<'?(\w+)'?")


class _TokenStream:
    def __init__(self, tokens: Iterator[Token]) -> None:
        self._tokens = tokens

    def next(self) -> Optional[Token]:
        return next(self._tokens, None)

    def require(self, expected: str) -> Token:
        token = self.next()
        if token is None:
            raise ParseError(f"Expected {expected}, got end of input")
        return token

    def word(self, expected: str) -> WordToken:
        token = self.require(expected)
        if not isinstance(token, WordToken):
            raise ParseError(f"Expected {expected}, got {token.kind}")
        return token


def compile_regex(source: str, flags: str) -> RegexPattern:
    """Compile ``/source/flags``; ``g`` and ``y`` are dropped, as are duplicates."""

    spelled = "".join(dict.fromkeys(flag for flag in flags if flag not in "gy"))
    compiled = 0
    for flag in spelled:
        compiled |= _REGEX_FLAGS.get(flag, 0)
    try:
        regex = re.compile(source, compiled)
    except re.error as exc:
        raise ParseError(f"Invalid regex /{source}/{flags}: {exc}") from exc
    return RegexPattern(regex=regex, flags=spelled)


def parse_positional(word: str) -> Optional[PositionalPattern]:
    if word == "bof":
        return BofPattern()
    if word == "eof":
        return EofPattern()
    match = _LINE_COL.fullmatch(word)
    if match:
        return LineColPattern(line=int(match.group(1)), col=int(match.group(2)))
    match = _LINE.fullmatch(word)
    if match:
        return LinePattern(line=int(match.group(1)))
    return None


def token_to_pattern(token: Token) -> Pattern:
    if isinstance(token, RegexToken):
        return compile_regex(token.pattern, token.flags)
    if isinstance(token, HeredocToken):
        return LiteralPattern(text=token.value)
    if isinstance(token, PathToken):
        raise ParseError("Unexpected path literal in pattern position")

    value = token.value
    dash = value.find("-")
    if 0 < dash < len(value) - 1:
        start = parse_positional(value[:dash])
        end = parse_positional(value[dash + 1 :])
        if start is not None and end is not None:
            return RangePattern(start=start, end=end)

    positional = parse_positional(value)
    if positional is not None:
        return positional
    raise ParseError(f"Invalid pattern: {value}")


def _mutation_text(stream: _TokenStream, keyword: str) -> MutationText:
    token = stream.require("heredoc or register name")
    if isinstance(token, HeredocToken):
        return MutationText.literal(token.value)
    if isinstance(token, WordToken):
        return MutationText.from_register(token.value)
    raise ParseError(
        f"Expected heredoc or register name after {keyword}, got {token.kind}"
    )


def _parse_file(stream: _TokenStream, keyword: str) -> Command:
    token = stream.require("file path")
    if not isinstance(token, (WordToken, PathToken)):
        raise ParseError(f"Expected file path, got {token.kind}")
    if keyword == "newfile":
        return NewFileCommand(path=token.value)
    return FileCommand(path=token.value)


def _parse_pattern(stream: _TokenStream, keyword: str) -> Command:
    pattern = token_to_pattern(stream.require("pattern"))
    return PatternCommand(keyword=keyword, pattern=pattern)


def _parse_retain(
    stream: _TokenStream, keyword: str, *, indexed: bool = False
) -> Command:
    if not indexed:
        return RetainCommand(keyword=keyword)
    token = stream.word("number")
    if not _INTEGER.fullmatch(token.value):
        raise ParseError(f"Expected number after retain_nth, got {token.value}")
    return RetainCommand(keyword=keyword, index=int(token.value))


def _parse_text(stream: _TokenStream, keyword: str) -> Command:
    return TextCommand(keyword=keyword, source=_mutation_text(stream, keyword))


def _parse_delete(stream: _TokenStream, keyword: str) -> Command:
    del stream, keyword
    return DeleteCommand()


def _parse_cut(stream: _TokenStream, keyword: str) -> Command:
    del keyword
    return CutCommand(register=stream.word("register name").value)


CommandParser = Callable[[_TokenStream, str], Command]

_COMMAND_PARSERS: Dict[str, CommandParser] = {
    "file": _parse_file,
    "newfile": _parse_file,
    "narrow": _parse_pattern,
    "narrow_one": _parse_pattern,
    "select": _parse_pattern,
    "select_one": _parse_pattern,
    "select_next": _parse_pattern,
    "select_prev": _parse_pattern,
    "extend_forward": _parse_pattern,
    "extend_back": _parse_pattern,
    "retain_first": _parse_retain,
    "retain_last": _parse_retain,
    "retain_nth": partial(_parse_retain, indexed=True),
    "replace": _parse_text,
    "insert_before": _parse_text,
    "insert_after": _parse_text,
    "delete": _parse_delete,
    "cut": _parse_cut,
}

COMMAND_KEYWORDS = tuple(_COMMAND_PARSERS)


def find_conflicting_heredoc_delimiters(script: str) -> List[str]:
    """Heredoc delimiters that occur more than once as a standalone line."""

    delimiters = dict.fromkeys(_HEREDOC_MARKER.findall(script))
    lines = script.split("\n")
    return [delim for delim in delimiters if lines.count(delim) > 1]


def _conflict_hint(conflicts: List[str]) -> str:
    plural = len(conflicts) > 1
    names = ", ".join(f'"{delim}"' for delim in conflicts)
    return (
        f"Note: heredoc delimiter{'s' if plural else ''} {names} appeared "
        f"multiple times as standalone line{'s' if plural else ''} in the script. "
        "This likely means the delimiter conflicts with the heredoc content. "
        "Use a unique termination code that does not appear in the content "
        f"(e.g. <<UNIQUE_MARKER instead of <<{conflicts[0]})."
    )


def _parse_commands(script: str) -> List[Command]:
    stream = _TokenStream(lex(script))
    commands: List[Command] = []
    while True:
        token = stream.next()
        if token is None:
            break
        if not isinstance(token, WordToken):
            raise ParseError(f"Expected command, got {token.kind}")
        handler = _COMMAND_PARSERS.get(token.value)
        if handler is None:
            raise ParseError(f"Unknown command: {token.value}")
        commands.append(handler(stream, token.value))
    return commands


def parse(script: str) -> List[Command]:
    try:
        return _parse_commands(script)
    except ParseError as exc:
        conflicts = find_conflicting_heredoc_delimiters(script)
        telemetry.record_event(
            "parser.error",
            level="debug",
            data={"message": str(exc), "conflicts": conflicts},
        )
        if not conflicts:
            raise
        raise ParseError(
            f"{exc}\n{_conflict_hint(conflicts)}", offset=exc.offset
        ) from exc


__all__ = [
    "COMMAND_KEYWORDS",
    "ParseError",
    "compile_regex",
    "find_conflicting_heredoc_delimiters",
    "parse",
    "parse_positional",
    "token_to_pattern",
]
