"""Handlers that load files or change document text."""

from __future__ import annotations

from typing import List, Sequence

from edl_engine.buffer import MissingRegisterError, Range
from edl_engine.script.models import (
    CutCommand,
    DeleteCommand,
    FileCommand,
    MutationText,
    NewFileCommand,
    TextCommand,
    describe_command,
)

from .context import ExecutionContext, FileState, count_lines, format_snippet


def open_file(context: ExecutionContext, command: FileCommand) -> None:
    """Make ``command.path`` current, reading it on first use, and select it all."""

    path = command.path
    state = context.files.get(path)
    if state is None:
        try:
            content = context.file_io.read_file(path)
        except (OSError, UnicodeDecodeError) as exc:
            raise context.fail(f"Failed to read file: {path}: {exc}") from exc
        state = FileState.load(path, content)
        context.files[path] = state

    context.current = state
    context.selection = [state.document.full_range()]
    context.add_trace(
        describe_command(command),
        context.selection,
        snippet=f"switched to {path} ({state.document.line_count} lines)",
    )


def new_file(context: ExecutionContext, command: NewFileCommand) -> None:
    path = command.path
    if path in context.files:
        raise context.fail(f"newfile: file already loaded: {path}")
    if context.file_io.file_exists(path):
        raise context.fail(f"newfile: file already exists on disk: {path}")

    state = FileState.load(path, "", is_new=True)
    context.files[path] = state
    context.current = state
    context.selection = [Range.point(0)]
    context.add_trace(
        describe_command(command), context.selection, snippet=f"created {path}"
    )


def resolve_text(context: ExecutionContext, source: MutationText) -> str:
    if source.text is not None:
        return source.text
    if source.register is None:
        raise TypeError("MutationText needs either text or a register")
    try:
        return context.registers.get(source.register)
    except MissingRegisterError as exc:
        raise context.fail(str(exc)) from exc


def _descending(ranges: Sequence[Range]) -> List[Range]:
    return sorted(ranges, key=lambda span: span.start, reverse=True)


def _ascending(ranges: Sequence[Range]) -> List[Range]:
    return sorted(ranges, key=lambda span: span.start)


def selection_after_replace(ranges: Sequence[Range], text: str) -> List[Range]:
    """Each range becomes the replacement text, shifted by earlier length changes."""

    result: List[Range] = []
    shift = 0
    for span in _ascending(ranges):
        start = span.start + shift
        result.append(Range(start, start + len(text)))
        shift += len(text) - span.length
    return result


def replace(context: ExecutionContext, command: TextCommand) -> None:
    file = context.require_file()
    ranges = context.require_selection(command.keyword)
    text = resolve_text(context, command.source)

    for span in _descending(ranges):
        old_text = file.document.get_text(span)
        file.splice(span, text)
        file.mutations.replacements += 1
        file.mutations.lines_removed += count_lines(old_text)
        file.mutations.lines_added += count_lines(text)

    context.selection = selection_after_replace(ranges, text)
    context.add_trace(describe_command(command), context.selection)


def delete(context: ExecutionContext, command: DeleteCommand) -> None:
    file = context.require_file()
    ranges = context.require_selection(command.keyword)
    context.add_trace(describe_command(command), ranges)

    for span in _descending(ranges):
        old_text = file.document.get_text(span)
        file.splice(span, "")
        file.mutations.deletions += 1
        file.mutations.lines_removed += count_lines(old_text)

    context.selection = [Range.point(min(span.start for span in ranges))]


def _insert(context: ExecutionContext, command: TextCommand, *, before: bool) -> None:
    file = context.require_file()
    ranges = context.require_selection(command.keyword)
    text = resolve_text(context, command.source)

    for span in _descending(ranges):
        at = span.start if before else span.end
        file.splice(Range.point(at), text)
        file.mutations.insertions += 1
        file.mutations.lines_added += count_lines(text)

    context.selection = list(ranges)
    context.add_trace(describe_command(command), context.selection)


def insert_before(context: ExecutionContext, command: TextCommand) -> None:
    _insert(context, command, before=True)


def insert_after(context: ExecutionContext, command: TextCommand) -> None:
    _insert(context, command, before=False)


def cut(context: ExecutionContext, command: CutCommand) -> None:
    """Move the single selected range into a register, leaving a point behind."""

    file = context.require_file()
    span = context.require_single()
    text = file.document.get_text(span)

    context.registers.set(command.register, text)
    file.splice(span, "")
    file.mutations.deletions += 1
    file.mutations.lines_removed += count_lines(text)

    context.selection = [Range.point(span.start)]
    context.add_trace(
        describe_command(command),
        context.selection,
        snippet=format_snippet(text, context.settings),
    )


__all__ = [
    "cut",
    "delete",
    "insert_after",
    "insert_before",
    "new_file",
    "open_file",
    "replace",
    "resolve_text",
    "selection_after_replace",
]
