"""Handlers for commands that only move or reshape the active selection."""

from __future__ import annotations

from typing import List

from edl_engine.buffer import Range
from edl_engine.script.models import PatternCommand, RetainCommand, describe_command

from .context import ExecutionContext
from .matching import find_after, find_before, find_matches


def _require_matches(
    context: ExecutionContext, command: PatternCommand, matches: List[Range]
) -> List[Range]:
    if not matches:
        raise context.fail(
            f"{command.keyword}: no matches for pattern "
            f"{command.pattern.describe()}"
        )
    return matches


def _require_one(
    context: ExecutionContext, command: PatternCommand, matches: List[Range]
) -> Range:
    _require_matches(context, command, matches)
    if len(matches) > 1:
        raise context.fail(f"{command.keyword}: expected 1 match, got {len(matches)}")
    return matches[0]


def narrow(context: ExecutionContext, command: PatternCommand) -> None:
    context.require_file()
    matches = find_matches(
        context, command.pattern, command.keyword, scopes=context.selection
    )
    context.selection = _require_matches(context, command, matches)
    context.add_trace(describe_command(command), context.selection)


def narrow_one(context: ExecutionContext, command: PatternCommand) -> None:
    context.require_file()
    matches = find_matches(
        context, command.pattern, command.keyword, scopes=context.selection
    )
    context.selection = [_require_one(context, command, matches)]
    context.add_trace(describe_command(command), context.selection)


def select(context: ExecutionContext, command: PatternCommand) -> None:
    context.require_file()
    matches = find_matches(context, command.pattern, command.keyword)
    context.selection = _require_matches(context, command, matches)
    context.add_trace(describe_command(command), context.selection)


def select_one(context: ExecutionContext, command: PatternCommand) -> None:
    context.require_file()
    matches = find_matches(context, command.pattern, command.keyword)
    context.selection = [_require_one(context, command, matches)]
    context.add_trace(describe_command(command), context.selection)


def _first_after(context: ExecutionContext, command: PatternCommand) -> Range:
    current = context.require_single()
    matches = find_after(context, command.pattern, current.end, command.keyword)
    if not matches:
        raise context.fail(f"{command.keyword}: no matches after selection")
    return matches[0]


def _last_before(context: ExecutionContext, command: PatternCommand) -> Range:
    current = context.require_single()
    matches = find_before(context, command.pattern, current.start, command.keyword)
    if not matches:
        raise context.fail(f"{command.keyword}: no matches before selection")
    return matches[-1]


def select_next(context: ExecutionContext, command: PatternCommand) -> None:
    context.require_file()
    context.selection = [_first_after(context, command)]
    context.add_trace(describe_command(command), context.selection)


def select_prev(context: ExecutionContext, command: PatternCommand) -> None:
    context.require_file()
    context.selection = [_last_before(context, command)]
    context.add_trace(describe_command(command), context.selection)


def extend_forward(context: ExecutionContext, command: PatternCommand) -> None:
    context.require_file()
    current = context.require_single()
    match = _first_after(context, command)
    context.selection = [Range(current.start, match.end)]
    context.add_trace(describe_command(command), context.selection)


def extend_back(context: ExecutionContext, command: PatternCommand) -> None:
    context.require_file()
    current = context.require_single()
    match = _last_before(context, command)
    context.selection = [Range(match.start, current.end)]
    context.add_trace(describe_command(command), context.selection)


def retain(context: ExecutionContext, command: RetainCommand) -> None:
    """``retain_first``, ``retain_last`` and ``retain_nth`` (negative counts back)."""

    context.require_file()
    total = len(context.selection)
    if total == 0:
        raise context.fail(f"{command.keyword}: no selections")

    if command.keyword == "retain_first":
        index = 0
    elif command.keyword == "retain_last":
        index = total - 1
    else:
        requested = command.index if command.index is not None else 0
        index = total + requested if requested < 0 else requested
        if index < 0 or index >= total:
            raise context.fail(
                f"{command.keyword}: index {requested} out of range "
                f"({total} selections)"
            )

    context.selection = [context.selection[index]]
    context.add_trace(describe_command(command), context.selection)


__all__ = [
    "extend_back",
    "extend_forward",
    "narrow",
    "narrow_one",
    "retain",
    "select",
    "select_next",
    "select_one",
    "select_prev",
]
