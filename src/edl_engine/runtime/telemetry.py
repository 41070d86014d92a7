"""telelog-backed events and profiling spans for the EDL engine.

Configuration comes from a named preset (`--log-preset` on the CLI) or from
`EDL_ENGINE_LOG_*` environment variables. Handlers call `record_event` for
state changes worth logging and wrap each command in a `span`.
"""

from __future__ import annotations

from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, Optional, cast

import telelog  # type: ignore[import]

from .settings import env, env_flag, env_int

tl = cast(Any, telelog)

LOGGER_NAME = "edl_engine"

_ACTIVE_CONFIG: Optional[Any] = None
_LOGGER: Optional[Any] = None


def _stringify(value: Any) -> str:
    if isinstance(value, str):
        return value
    return repr(value) if isinstance(value, (dict, list, tuple, set)) else str(value)


def _pairs(data: Dict[str, Any]) -> list[tuple[str, str]]:
    return [(str(key), _stringify(value)) for key, value in data.items()]


def _preset_config(preset: str) -> Any:
    config = tl.Config()
    key = preset.lower()

    if key == "development":
        config.with_min_level("DEBUG")
        config.with_console_output(True)
        config.with_colored_output(True)
        config.with_json_format(False)
    elif key == "production":
        config.with_min_level("INFO")
        config.with_console_output(False)
        config.with_file_output(env("LOG_FILE") or "edl_engine.log")
        config.with_buffering(True)
    elif key == "performance":
        config.with_min_level("DEBUG")
        config.with_console_output(False)
        config.with_buffering(True)
        config.with_json_format(True)
        config.with_file_output(env("LOG_FILE") or "edl_engine-performance.log")
    else:
        raise ValueError(f"Unknown preset '{preset}'.")

    return config


def _env_config() -> Any:
    config = tl.Config()
    config.with_min_level((env("LOG_LEVEL") or "WARNING").upper())

    console = not env_flag("DISABLE_CONSOLE", False)
    config.with_console_output(console)
    if console:
        config.with_colored_output(not env_flag("NO_COLOR", False))

    if env_flag("LOG_JSON", False):
        config.with_json_format(True)

    log_file = env("LOG_FILE")
    if log_file:
        config.with_file_output(log_file)

    if env_flag("LOG_BUFFERED", False):
        config.with_buffering(True)
        config.with_buffer_size(env_int("LOG_BUFFER_SIZE", 2048))

    return config


def configure(*, config: Optional[Any] = None, preset: Optional[str] = None) -> None:
    """Replace the active telelog configuration.

    ``config`` and ``preset`` are mutually exclusive; with neither, the
    configuration is rebuilt from ``EDL_ENGINE_*`` environment variables.
    The cached logger is dropped so the next ``get_logger`` call picks up the
    new settings.
    """

    global _ACTIVE_CONFIG, _LOGGER
    if config and preset:
        raise ValueError("Provide either `config` or `preset`, not both.")

    if preset:
        config = _preset_config(preset)
    elif config is None:
        config = _env_config()

    config.with_profiling(True)
    _ACTIVE_CONFIG = config
    _LOGGER = None


def get_logger() -> Any:
    """Return the cached ``telelog.Logger`` built from the active configuration."""

    global _LOGGER
    if _ACTIVE_CONFIG is None:
        configure()
    if _LOGGER is None:
        _LOGGER = tl.Logger.with_config(LOGGER_NAME, _ACTIVE_CONFIG)
    return _LOGGER


def _emit(logger: Any, level: str, message: str, payload: Dict[str, Any]) -> None:
    name = level.lower()
    with_data = getattr(logger, f"{name}_with", None)
    if with_data is not None:
        with_data(message, _pairs(payload))
        return
    plain = getattr(logger, name, None)
    if plain is None:
        raise ValueError(f"Unsupported log level '{level}'.")
    plain(f"{message} {payload}")


def record_event(
    name: str, *, level: str = "info", data: Optional[Dict[str, Any]] = None
) -> None:
    """Emit ``event::<name>`` with ``data`` attached as key/value pairs."""

    _emit(get_logger(), level, f"event::{name}", {"event": name, **(data or {})})


@dataclass
class SpanHandle:
    """Handle yielded by ``span`` for attaching metadata mid-block."""

    span_name: str
    component_name: str
    metadata: Dict[str, Any] = field(default_factory=dict)

    def add_metadata(self, key: str, value: Any) -> None:
        self.metadata[key] = _stringify(value)


@contextmanager
def span(
    name: str, *, component: str, metadata: Optional[Dict[str, Any]] = None
) -> Iterator[SpanHandle]:
    """Profile a block under ``component``; ``metadata`` rides along as context."""

    log = get_logger()
    serialized = {key: _stringify(value) for key, value in (metadata or {}).items()}
    for key, value in serialized.items():
        log.add_context(key, value)

    handle = SpanHandle(
        span_name=name, component_name=component, metadata=dict(serialized)
    )
    try:
        with log.track_component(component), log.profile(name):
            yield handle
    except Exception as exc:
        payload = {"span": name, "component": component, **handle.metadata}
        _emit(log, "error", "span::fail", {**payload, "reason": str(exc)})
        raise
    finally:
        for key in serialized:
            log.remove_context(key)


configure()

__all__ = [
    "SpanHandle",
    "configure",
    "get_logger",
    "record_event",
    "span",
]
