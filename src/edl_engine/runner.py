"""Parse, execute, and report on an EDL script in one call.

``run_script`` never raises for script problems: syntax errors and
unanchored execution errors come back as ``RunScriptError``; everything else
is a ``RunScriptOk`` carrying JSON-friendly data, a readable report, and the
registers to hand to the next invocation.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any, Dict, List, Optional, Sequence, Union

from edl_engine.buffer import EdlRegisters, FileIO, FsFileIO, Pos
from edl_engine.engine import (
    ExecutionError,
    Executor,
    FileError,
    MutationSummary,
    ScriptResult,
    SelectionRange,
    TraceEntry,
)
from edl_engine.runtime import telemetry
from edl_engine.runtime.settings import EngineSettings
from edl_engine.script import ParseError, parse
from edl_engine.script.models import (
    CutCommand,
    DeleteCommand,
    FileCommand,
    NewFileCommand,
    TextCommand,
)


@dataclass(frozen=True, slots=True)
class RunScriptOk:
    data: Dict[str, Any]
    formatted: str
    registers: EdlRegisters
    status: str = "ok"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "status": self.status,
            "data": self.data,
            "formatted": self.formatted,
            "registers": self.registers.to_dict(),
        }


@dataclass(frozen=True, slots=True)
class RunScriptError:
    error: str
    status: str = "error"

    def to_dict(self) -> Dict[str, Any]:
        return {"status": self.status, "error": self.error}


RunScriptResult = Union[RunScriptOk, RunScriptError]


def abridge_content(content: str, settings: Optional[EngineSettings] = None) -> str:
    limit = (settings or EngineSettings()).max_content_chars
    if len(content) <= limit:
        return content
    half = (limit - 5) // 2
    return content[:half] + "\n...\n" + content[len(content) - half :]


def format_trace(trace: Sequence[TraceEntry], indent: str = "  ") -> str:
    return "\n".join(f"{indent}{entry.command} → {entry.snippet}" for entry in trace)


def format_mutations(mutations: Dict[str, MutationSummary]) -> str:
    if not mutations:
        return "No files modified."
    lines = []
    for path, summary in mutations.items():
        parts = []
        if summary.replacements:
            parts.append(f"{summary.replacements} replacements")
        if summary.insertions:
            parts.append(f"{summary.insertions} insertions")
        if summary.deletions:
            parts.append(f"{summary.deletions} deletions")
        parts.append(f"+{summary.lines_added}/-{summary.lines_removed} lines")
        lines.append(f"  {path}: {', '.join(parts)}")
    return "\n".join(lines)


def _format_range(selected: SelectionRange, settings: EngineSettings) -> str:
    return (
        f"[{selected.start} - {selected.end}]\n"
        f"{abridge_content(selected.content, settings)}"
    )


def format_file_errors(file_errors: Sequence[FileError]) -> str:
    lines = []
    for error in file_errors:
        lines.append(f"  {error.path}: {error.error}")
        if error.trace:
            lines.append(f"    Trace:\n{format_trace(error.trace, '      ')}")
        if error.saved_registers:
            saved = ", ".join(
                f"{register.name} ({register.size_chars} chars)"
                for register in error.saved_registers
            )
            lines.append(f"    Saved registers: {saved}")
    return "\n".join(lines)


def format_result(
    result: ScriptResult, settings: Optional[EngineSettings] = None
) -> str:
    settings = settings or EngineSettings()
    sections = [
        f"Trace:\n{format_trace(result.trace)}",
        f"Mutations:\n{format_mutations(result.mutations)}",
    ]
    if result.final_selection:
        ranges = "\n\n".join(
            f"  Range {number}: {_format_range(selected, settings)}"
            for number, selected in enumerate(result.final_selection, start=1)
        )
        sections.append(
            f"Final selection ({len(result.final_selection)} ranges):\n{ranges}"
        )
    if result.file_errors:
        sections.append(f"File errors:\n{format_file_errors(result.file_errors)}")
    return "\n\n".join(sections)


def _trace_data(trace: Sequence[TraceEntry]) -> List[Dict[str, str]]:
    return [{"command": entry.command, "snippet": entry.snippet} for entry in trace]


def _pos_data(pos: Pos) -> Dict[str, int]:
    return {"line": pos.line, "col": pos.col}


def to_dict(
    result: ScriptResult, settings: Optional[EngineSettings] = None
) -> Dict[str, Any]:
    """JSON-ready view of ``result``; selection content is abridged."""

    settings = settings or EngineSettings()
    final_selection = None
    if result.final_selection:
        final_selection = {
            "ranges": [
                {
                    "start_pos": _pos_data(selected.start),
                    "end_pos": _pos_data(selected.end),
                    "content": abridge_content(selected.content, settings),
                }
                for selected in result.final_selection
            ]
        }
    return {
        "trace": _trace_data(result.trace),
        "mutations": [
            {
                "path": path,
                "summary": asdict(summary),
                "content": result.file_contents.get(path, ""),
            }
            for path, summary in result.mutations.items()
        ],
        "final_selection": final_selection,
        "file_errors": [
            {
                "path": error.path,
                "error": error.error,
                "trace": _trace_data(error.trace),
                "saved_registers": [
                    {"name": saved.name, "size_chars": saved.size_chars}
                    for saved in error.saved_registers
                ],
            }
            for error in result.file_errors
        ],
    }


def run_script(
    script: str,
    file_io: Optional[FileIO] = None,
    registers: Optional[EdlRegisters] = None,
    settings: Optional[EngineSettings] = None,
) -> RunScriptResult:
    settings = settings or EngineSettings.from_env()
    with telemetry.span(name="run_script", component="runner"):
        try:
            commands = parse(script)
        except ParseError as exc:
            return RunScriptError(error=f"Parse error: {exc}")

        executor = Executor(file_io or FsFileIO(), registers, settings)
        try:
            result = executor.execute(commands)
        except ExecutionError as exc:
            sections = [f"Error: {exc.message}"]
            if exc.trace:
                sections.append(f"Trace:\n{format_trace(exc.trace)}")
            return RunScriptError(error="\n\n".join(sections))

    return RunScriptOk(
        data=to_dict(result, settings),
        formatted=format_result(result, settings),
        registers=result.registers,
    )


@dataclass(frozen=True, slots=True)
class FileAccess:
    path: str
    read: bool
    write: bool


_MUTATION_COMMANDS = (TextCommand, DeleteCommand, CutCommand)


def analyze_file_access(script: str) -> List[FileAccess]:
    """Which paths a script would read and which it would write, without running it.

    Raises ``ParseError`` for invalid scripts.
    """

    access: Dict[str, Dict[str, bool]] = {}
    current: Optional[str] = None
    for command in parse(script):
        if isinstance(command, FileCommand):
            current = command.path
            access.setdefault(command.path, {"read": True, "write": False})
        elif isinstance(command, NewFileCommand):
            current = command.path
            access[command.path] = {"read": False, "write": True}
        elif isinstance(command, _MUTATION_COMMANDS) and current is not None:
            access[current]["write"] = True
    return [FileAccess(path=path, **flags) for path, flags in access.items()]


__all__ = [
    "FileAccess",
    "RunScriptError",
    "RunScriptOk",
    "RunScriptResult",
    "abridge_content",
    "analyze_file_access",
    "format_result",
    "run_script",
    "to_dict",
]
