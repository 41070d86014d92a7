"""Tokenizer turning raw EDL text into words, paths, regexes, and heredocs."""

from __future__ import annotations

from typing import Iterator

from .models import HeredocToken, PathToken, RegexToken, Token, WordToken

REGEX_FLAG_CHARS = frozenset("gimsuxy")


class ParseError(ValueError):
    """Raised for any lexing or parsing failure; aborts the whole script."""

    def __init__(self, message: str, *, offset: int | None = None) -> None:
        super().__init__(message)
        self.offset = offset


def _is_word_char(ch: str) -> bool:
    return ch.isalnum() or ch == "_"


class Lexer:
    """Single forward pass over the script text."""

    def __init__(self, script: str) -> None:
        self.script = script
        self.pos = 0

    def _peek(self, ahead: int = 0) -> str:
        index = self.pos + ahead
        return self.script[index] if index < len(self.script) else ""

    def _at_end(self) -> bool:
        return self.pos >= len(self.script)

    def tokens(self) -> Iterator[Token]:
        script = self.script
        while True:
            while not self._at_end() and script[self.pos].isspace():
                self.pos += 1
            if self._at_end():
                return

            ch = script[self.pos]
            if ch == "#":
                end = script.find("\n", self.pos)
                self.pos = len(script) if end == -1 else end
            elif ch == "/":
                yield self._regex()
            elif ch == "`":
                yield self._path()
            elif ch == "<" and self._peek(1) == "<":
                yield self._heredoc()
            else:
                yield self._word()

    def _regex(self) -> RegexToken:
        script = self.script
        start = self.pos
        self.pos += 1
        body_start = self.pos
        while not self._at_end():
            ch = script[self.pos]
            if ch == "\n" or ch == "/":
                break
            self.pos += 2 if ch == "\\" else 1
        if self._at_end() or script[self.pos] != "/":
            raise ParseError(
                f"Unterminated regex: {script[start:self.pos]}", offset=start
            )
        body = script[body_start : self.pos]
        self.pos += 1
        flags_start = self.pos
        while not self._at_end() and script[self.pos] in REGEX_FLAG_CHARS:
            self.pos += 1
        return RegexToken(pattern=body, flags=script[flags_start : self.pos])

    def _path(self) -> PathToken:
        start = self.pos
        end = self.script.find("`", start + 1)
        if end == -1:
            raise ParseError("Unterminated path literal", offset=start)
        self.pos = end + 1
        return PathToken(value=self.script[start + 1 : end])

    def _heredoc(self) -> HeredocToken:
        script = self.script
        marker_start = self.pos
        self.pos += 2
        if self._peek() == "'":
            self.pos += 1
            delim_start = self.pos
            while not self._at_end() and script[self.pos] not in "'\n":
                self.pos += 1
            if self._at_end() or script[self.pos] != "'":
                raise ParseError(
                    "Unterminated quoted heredoc marker", offset=marker_start
                )
            delimiter = script[delim_start : self.pos]
            self.pos += 1
            if not delimiter:
                raise ParseError("Invalid heredoc marker", offset=marker_start)
        else:
            delim_start = self.pos
            while not self._at_end() and _is_word_char(script[self.pos]):
                self.pos += 1
            delimiter = script[delim_start : self.pos]
            if not delimiter:
                raise ParseError("Invalid heredoc marker", offset=marker_start)

        while not self._at_end() and script[self.pos] != "\n":
            if not script[self.pos].isspace():
                raise ParseError(
                    f"Unexpected content after heredoc marker <<{delimiter}",
                    offset=self.pos,
                )
            self.pos += 1
        if not self._at_end():
            self.pos += 1

        content_start = self.pos
        while not self._at_end():
            line_start = self.pos
            line_end = script.find("\n", line_start)
            if line_end == -1:
                line_end = len(script)
            self.pos = line_end
            if script[line_start:line_end] == delimiter:
                content_end = line_start
                if line_start > content_start:
                    content_end -= 1
                if not self._at_end():
                    self.pos += 1
                return HeredocToken(value=script[content_start:content_end])
            if not self._at_end():
                self.pos += 1

        raise ParseError(
            f"Unterminated heredoc, expected {delimiter}", offset=marker_start
        )

    def _word(self) -> WordToken:
        start = self.pos
        while not self._at_end() and not self.script[self.pos].isspace():
            self.pos += 1
        return WordToken(value=self.script[start : self.pos])


def lex(script: str) -> Iterator[Token]:
    return Lexer(script).tokens()


__all__ = ["Lexer", "ParseError", "REGEX_FLAG_CHARS", "lex"]
