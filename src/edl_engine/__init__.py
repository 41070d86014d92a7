"""Multi-file text edits driven by EDL scripts."""

from edl_engine.buffer import EdlRegisters, FileIO, FsFileIO, InMemoryFileIO
from edl_engine.runner import (
    FileAccess,
    RunScriptError,
    RunScriptOk,
    RunScriptResult,
    analyze_file_access,
    run_script,
)

__all__ = [
    "EdlRegisters",
    "FileAccess",
    "FileIO",
    "FsFileIO",
    "InMemoryFileIO",
    "RunScriptError",
    "RunScriptOk",
    "RunScriptResult",
    "analyze_file_access",
    "run_script",
]

__version__ = "0.1.0"
