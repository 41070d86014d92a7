"""Command-line entry point running an EDL script against the local filesystem."""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from typing import Optional, Sequence

from edl_engine.buffer import EdlRegisters, FsFileIO
from edl_engine.runner import RunScriptOk, run_script
from edl_engine.runtime import telemetry
from edl_engine.runtime.settings import EngineSettings


def _parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Run an EDL edit script.")
    parser.add_argument(
        "script",
        help="Path to the script file, or '-' to read it from stdin",
    )
    parser.add_argument(
        "--registers",
        metavar="PATH",
        help="JSON file holding registers; loaded if present and rewritten after",
    )
    parser.add_argument(
        "--json",
        action="store_true",
        help="Print the full result as JSON instead of the text report",
    )
    parser.add_argument(
        "--log-preset",
        choices=("development", "production", "performance"),
        help="telelog preset to use instead of EDL_ENGINE_* variables",
    )
    return parser.parse_args(argv)


def _read_script(source: str) -> str:
    if source == "-":
        return sys.stdin.read()
    return Path(source).read_text(encoding="utf-8")


def load_registers(path: Optional[str]) -> Optional[EdlRegisters]:
    if not path or not Path(path).exists():
        return None
    return EdlRegisters.from_dict(json.loads(Path(path).read_text(encoding="utf-8")))


def save_registers(path: str, registers: EdlRegisters) -> None:
    Path(path).write_text(json.dumps(registers.to_dict(), indent=2), encoding="utf-8")


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Exit status is 0 on success, 1 when the script failed or any file failed."""

    args = _parse_args(argv)
    if args.log_preset:
        telemetry.configure(preset=args.log_preset)

    result = run_script(
        _read_script(args.script),
        file_io=FsFileIO(),
        registers=load_registers(args.registers),
        settings=EngineSettings.from_env(),
    )

    if args.json:
        print(json.dumps(result.to_dict(), indent=2))
    elif isinstance(result, RunScriptOk):
        print(result.formatted)
    else:
        print(result.error, file=sys.stderr)

    if not isinstance(result, RunScriptOk):
        return 1
    if args.registers:
        save_registers(args.registers, result.registers)
    return 1 if result.data["file_errors"] else 0


if __name__ == "__main__":  # pragma: no cover - manual entry
    raise SystemExit(main())
