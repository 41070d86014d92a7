"""EDL interpreter: execution state, pattern matching, and command handlers."""

from .context import (
    ExecutionContext,
    ExecutionError,
    FileError,
    FileState,
    MutationSummary,
    SavedRegister,
    TraceEntry,
    count_lines,
    format_snippet,
)
from .executor import Executor, ScriptResult, SelectionRange, execute

__all__ = [
    "ExecutionContext",
    "ExecutionError",
    "Executor",
    "FileError",
    "FileState",
    "MutationSummary",
    "SavedRegister",
    "ScriptResult",
    "SelectionRange",
    "TraceEntry",
    "count_lines",
    "execute",
    "format_snippet",
]
