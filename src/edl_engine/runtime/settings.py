"""Environment-driven settings shared by the engine and its runner."""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Optional

ENV_PREFIX = "EDL_ENGINE_"


def env(name: str, default: Optional[str] = None) -> Optional[str]:
    return os.getenv(f"{ENV_PREFIX}{name}", default)


def env_flag(name: str, default: bool) -> bool:
    raw = env(name)
    if raw is None:
        return default
    return raw.lower() in {"1", "true", "yes", "on"}


def env_int(name: str, fallback: int) -> int:
    value = env(name)
    if value is None:
        return fallback
    try:
        return int(value)
    except ValueError:
        return fallback


@dataclass(frozen=True, slots=True)
class EngineSettings:
    """Limits applied when rendering traces and selection reports."""

    max_snippet_length: int = 120
    max_content_chars: int = 800

    @classmethod
    def from_env(cls) -> "EngineSettings":
        defaults = cls()
        return cls(
            max_snippet_length=env_int(
                "MAX_SNIPPET_LENGTH", defaults.max_snippet_length
            ),
            max_content_chars=env_int("MAX_CONTENT_CHARS", defaults.max_content_chars),
        )


__all__ = ["ENV_PREFIX", "EngineSettings", "env", "env_flag", "env_int"]
