"""Command interpreter with per-file fault isolation.

Commands run in order against one ``ExecutionContext``. When a command fails
while a file is current, that file is marked failed: none of its edits are
written, text carried by the commands that will not run is parked in fresh
``_saved_N`` registers, and execution resumes at the next command that
switches to a different file. Files that finished cleanly are written once
the whole script has run.
"""

from __future__ import annotations

import posixpath
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Sequence

from edl_engine.buffer import EdlRegisters, FileIO, Pos, Range, RegisterBank
from edl_engine.runtime import telemetry
from edl_engine.runtime.settings import EngineSettings
from edl_engine.script.models import (
    FILE_COMMANDS,
    Command,
    TextCommand,
    describe_command,
)

from . import mutation, selection
from .context import (
    ExecutionContext,
    ExecutionError,
    FileError,
    MutationSummary,
    SavedRegister,
    TraceEntry,
)

CommandHandler = Callable[[ExecutionContext, Any], None]

_COMMAND_HANDLERS: Dict[str, CommandHandler] = {
    "file": mutation.open_file,
    "newfile": mutation.new_file,
    "narrow": selection.narrow,
    "narrow_one": selection.narrow_one,
    "select": selection.select,
    "select_one": selection.select_one,
    "select_next": selection.select_next,
    "select_prev": selection.select_prev,
    "extend_forward": selection.extend_forward,
    "extend_back": selection.extend_back,
    "retain_first": selection.retain,
    "retain_last": selection.retain,
    "retain_nth": selection.retain,
    "replace": mutation.replace,
    "insert_before": mutation.insert_before,
    "insert_after": mutation.insert_after,
    "delete": mutation.delete,
    "cut": mutation.cut,
}


@dataclass(frozen=True, slots=True)
class SelectionRange:
    range: Range
    start: Pos
    end: Pos
    content: str


@dataclass(slots=True)
class ScriptResult:
    """Everything a run produced, in script order where order matters."""

    trace: List[TraceEntry]
    mutations: Dict[str, MutationSummary]
    file_contents: Dict[str, str]
    final_selection: Optional[List[SelectionRange]]
    file_errors: List[FileError] = field(default_factory=list)
    registers: EdlRegisters = field(default_factory=EdlRegisters)


class Executor:
    """Runs parsed commands; one instance per script invocation."""

    def __init__(
        self,
        file_io: FileIO,
        registers: Optional[EdlRegisters] = None,
        settings: Optional[EngineSettings] = None,
    ) -> None:
        self.context = ExecutionContext(
            file_io=file_io,
            registers=RegisterBank(registers),
            settings=settings or EngineSettings(),
        )
        self._failed: Dict[str, FileError] = {}

    @property
    def registers(self) -> RegisterBank:
        return self.context.registers

    def run_command(self, command: Command) -> None:
        handler = _COMMAND_HANDLERS.get(command.keyword)
        if handler is None:
            raise ExecutionError(f"Unknown command: {command.keyword}")
        with telemetry.span(
            name=f"command::{command.keyword}",
            component="executor",
            metadata={"command": describe_command(command)},
        ) as handle:
            handler(self.context, command)
            handle.add_metadata("ranges", len(self.context.selection))

    def execute(self, commands: Sequence[Command]) -> ScriptResult:
        """Run every command; raises ``ExecutionError`` only when no file is current."""

        context = self.context
        index = 0
        while index < len(commands):
            command = commands[index]
            if isinstance(command, FILE_COMMANDS) and command.path in self._failed:
                index = self._skip_section(
                    commands, index + 1, command.path, self._failed[command.path]
                )
                continue
            try:
                self.run_command(command)
            except ExecutionError as exc:
                path = self._anchor_path(command)
                if path is None:
                    raise
                error = self._mark_failed(path, exc)
                index = self._skip_section(commands, index, path, error)
                context.current = None
                context.selection = []
                continue
            index += 1

        return self._finish()

    def _anchor_path(self, command: Command) -> Optional[str]:
        if isinstance(command, FILE_COMMANDS):
            return command.path
        if self.context.current is not None:
            return self.context.current.path
        return None

    def _mark_failed(self, path: str, exc: ExecutionError) -> FileError:
        error = FileError(
            path=path,
            error=exc.message,
            trace=[entry for entry in exc.trace if entry.path == path],
        )
        self._failed[path] = error
        telemetry.record_event(
            "executor.file_failed",
            level="warning",
            data={"path": path, "error": exc.message},
        )
        return error

    def _skip_section(
        self,
        commands: Sequence[Command],
        start: int,
        path: str,
        error: FileError,
    ) -> int:
        """Skip to the next switch to another file, saving literal texts on the way."""

        index = start
        while index < len(commands):
            command = commands[index]
            if isinstance(command, FILE_COMMANDS) and command.path != path:
                break
            if isinstance(command, TextCommand) and command.source.text is not None:
                text = command.source.text
                name = self.registers.allocate_saved(text)
                error.saved_registers.append(SavedRegister(name, len(text)))
                telemetry.record_event(
                    "executor.register_saved",
                    data={"path": path, "register": name, "size": len(text)},
                )
            index += 1
        return index

    def _write_files(self) -> Dict[str, MutationSummary]:
        written: Dict[str, MutationSummary] = {}
        file_io = self.context.file_io
        for path, state in self.context.files.items():
            if path in self._failed:
                continue
            if not (state.mutations.changed or state.is_new):
                continue
            directory = posixpath.dirname(path)
            try:
                if directory:
                    file_io.mkdir(directory)
                file_io.write_file(path, state.document.content)
            except OSError as exc:
                self._mark_failed(
                    path,
                    ExecutionError(
                        f"Failed to write file: {path}: {exc}", self.context.trace
                    ),
                )
                continue
            written[path] = state.mutations
            telemetry.record_event(
                "executor.file_written",
                data={"path": path, "is_new": state.is_new},
            )
        return written

    def _final_selection(self) -> Optional[List[SelectionRange]]:
        current = self.context.current
        if current is None or current.path in self._failed:
            return None
        if not self.context.selection:
            return None
        document = current.document
        return [
            SelectionRange(
                range=span,
                start=document.offset_to_pos(span.start),
                end=document.offset_to_pos(span.end),
                content=document.get_text(span),
            )
            for span in self.context.selection
        ]

    def _finish(self) -> ScriptResult:
        context = self.context
        mutations = self._write_files()
        return ScriptResult(
            trace=list(context.trace),
            mutations=mutations,
            file_contents={
                path: context.files[path].document.content for path in mutations
            },
            final_selection=self._final_selection(),
            file_errors=list(self._failed.values()),
            registers=self.registers.serialize(),
        )


def execute(
    commands: Sequence[Command],
    file_io: FileIO,
    registers: Optional[EdlRegisters] = None,
    settings: Optional[EngineSettings] = None,
) -> ScriptResult:
    return Executor(file_io, registers, settings).execute(commands)


__all__ = [
    "CommandHandler",
    "Executor",
    "ScriptResult",
    "SelectionRange",
    "execute",
]
