"""Pattern search against the current document.

Regex and literal patterns scan live text. Line, line:col and range patterns
address the file as it was loaded and are carried forward through the
file's transform log, so a script can keep using the line numbers it was
written against after earlier edits shift them.
"""

from __future__ import annotations

from typing import List, Optional, Sequence

from edl_engine.buffer import (
    DocumentRangeError,
    Range,
    resolve_index,
    resolve_range,
)
from edl_engine.script.models import (
    BofPattern,
    EofPattern,
    LineColPattern,
    LinePattern,
    LiteralPattern,
    Pattern,
    PositionalPattern,
    RangePattern,
    RegexPattern,
)

from .context import ExecutionContext, FileState


def is_textual(pattern: Pattern) -> bool:
    return isinstance(pattern, (RegexPattern, LiteralPattern))


def find_in_text(
    context: ExecutionContext,
    pattern: Pattern,
    text: str,
    base: int,
    keyword: str,
) -> List[Range]:
    """Non-overlapping matches of a regex or literal pattern inside ``text``."""

    if isinstance(pattern, RegexPattern):
        return [
            Range(base + match.start(), base + match.end())
            for match in pattern.regex.finditer(text)
        ]
    if isinstance(pattern, LiteralPattern):
        needle = pattern.text
        if not needle:
            raise context.fail(f"Empty literal pattern is not allowed for {keyword}")
        results: List[Range] = []
        index = text.find(needle)
        while index != -1:
            results.append(Range(base + index, base + index + len(needle)))
            index = text.find(needle, index + len(needle))
        return results
    raise TypeError(f"{type(pattern).__name__} is not a text pattern")


def _resolve_point(file: FileState, pattern: PositionalPattern) -> Range:
    if isinstance(pattern, BofPattern):
        return Range.point(0)
    if isinstance(pattern, EofPattern):
        return Range.point(len(file.document))
    if isinstance(pattern, LinePattern):
        span = file.initial_index.line_range(pattern.line)
        return resolve_range(span, file.transforms)
    offset = file.initial_index.offset_for(pattern.line, pattern.col)
    return Range.point(resolve_index(offset, file.transforms))


def resolve_positional(
    context: ExecutionContext, pattern: Pattern, keyword: str
) -> Range:
    """Current-document range addressed by a positional or range pattern."""

    file = context.require_file()
    try:
        if isinstance(pattern, RangePattern):
            start = _resolve_point(file, pattern.start)
            end = _resolve_point(file, pattern.end)
            return Range(start.start, end.end)
        if isinstance(pattern, (LinePattern, LineColPattern, BofPattern, EofPattern)):
            return _resolve_point(file, pattern)
    except (DocumentRangeError, ValueError) as exc:
        raise context.fail(f"{keyword}: {exc}") from exc
    raise TypeError(f"{type(pattern).__name__} is not a positional pattern")


def find_matches(
    context: ExecutionContext,
    pattern: Pattern,
    keyword: str,
    scopes: Optional[Sequence[Range]] = None,
) -> List[Range]:
    """All matches of ``pattern``, limited to ``scopes`` when given.

    Text patterns are searched inside each scope separately. A positional
    pattern resolves to a single range, kept only if some scope contains it.
    """

    document = context.require_file().document
    if not is_textual(pattern):
        span = resolve_positional(context, pattern, keyword)
        if scopes is None or any(scope.contains(span) for scope in scopes):
            return [span]
        return []

    if scopes is None:
        scopes = [document.full_range()]
    results: List[Range] = []
    for scope in scopes:
        results.extend(
            find_in_text(
                context, pattern, document.get_text(scope), scope.start, keyword
            )
        )
    return results


def find_after(
    context: ExecutionContext, pattern: Pattern, offset: int, keyword: str
) -> List[Range]:
    document = context.require_file().document
    if not is_textual(pattern):
        span = resolve_positional(context, pattern, keyword)
        return [span] if span.start >= offset else []
    return find_in_text(context, pattern, document.content[offset:], offset, keyword)


def find_before(
    context: ExecutionContext, pattern: Pattern, offset: int, keyword: str
) -> List[Range]:
    document = context.require_file().document
    if not is_textual(pattern):
        span = resolve_positional(context, pattern, keyword)
        return [span] if span.end <= offset else []
    return find_in_text(context, pattern, document.content[:offset], 0, keyword)


__all__ = [
    "find_after",
    "find_before",
    "find_in_text",
    "find_matches",
    "is_textual",
    "resolve_positional",
]
