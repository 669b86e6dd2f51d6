"""Structured logging configuration with structlog.

Environment variables:
- LOG_FORMAT: "json" for one JSON object per line (simulation runs whose logs
  are post-processed), "console" or unset for human-readable output.
- LOG_LEVEL: "DEBUG", "INFO" (default), "WARNING", "ERROR", or "CRITICAL".
  An explicit level passed to setup_logging wins over the variable.

Game state values (enums, cell sets, dice tuples) are flattened to plain
JSON-friendly values before rendering so that both renderers show
"house" rather than "<Building.HOUSE: 'house'>".
"""

from __future__ import annotations

import logging
import os
import sys
from datetime import UTC, datetime
from enum import Enum
from pathlib import Path
from typing import TYPE_CHECKING

import structlog

if TYPE_CHECKING:
    from collections.abc import Iterator, MutableMapping
    from contextlib import AbstractContextManager
    from typing import Any

LOG_FILE_TIMESTAMP_FORMAT = "%Y-%m-%d_%H-%M-%S"
DEFAULT_LOG_FILE_PREFIX = "city"

_VALID_LOG_FORMATS = {"json", "console", ""}
_VALID_LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


def _plain(value: Any) -> Any:
    """Flatten a logged value: enums to their value, sets to sorted lists, sequences to lists."""
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, set | frozenset):
        return sorted((_plain(v) for v in value), key=lambda v: (type(v).__name__, v))
    if isinstance(value, tuple | list):
        return [_plain(v) for v in value]
    if isinstance(value, dict):
        return {_plain(k): _plain(v) for k, v in value.items()}
    return value


def _serialize_game_values(
    _logger: object,
    _method_name: str,
    event_dict: MutableMapping[str, Any],
) -> MutableMapping[str, Any]:
    for key, value in event_dict.items():
        event_dict[key] = _plain(value)
    return event_dict


def build_processors(*, serialize: bool = True) -> list[Any]:
    """Return the structlog processor chain that feeds stdlib handlers.

    format_exc_info is left to ProcessorFormatter so tracebacks are rendered once.
    """
    processors: list[Any] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
    ]
    if serialize:
        processors.append(_serialize_game_values)
    processors.extend(
        [
            structlog.processors.StackInfoRenderer(),
            structlog.processors.UnicodeDecoder(),
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
    )
    return processors


def game_log_context(**values: Any) -> AbstractContextManager[None]:
    """Bind values (seed, strategy, ...) to every log line emitted inside the block."""
    return structlog.contextvars.bound_contextvars(**values)


def _is_test() -> bool:
    return "pytest" in sys.modules


def _resolve_json_mode() -> bool:
    value = os.environ.get("LOG_FORMAT", "").lower()
    if value not in _VALID_LOG_FORMATS:
        msg = f"Invalid LOG_FORMAT={value!r}. Must be 'json', 'console', or unset."
        raise ValueError(msg)
    return value == "json"


def _resolve_log_level() -> int:
    """Resolve log level from LOG_LEVEL env var. Defaults to INFO."""
    value = os.environ.get("LOG_LEVEL", "INFO").upper()
    if value not in _VALID_LOG_LEVELS:
        msg = f"Invalid LOG_LEVEL={value!r}. Must be one of {', '.join(sorted(_VALID_LOG_LEVELS))}."
        raise ValueError(msg)
    return getattr(logging, value)


def _build_stdlib_formatter(*, json_mode: bool, colors: bool = False) -> logging.Formatter:
    renderer = structlog.processors.JSONRenderer() if json_mode else structlog.dev.ConsoleRenderer(colors=colors)
    return structlog.stdlib.ProcessorFormatter(
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            structlog.processors.format_exc_info,
            renderer,
        ],
    )


def _log_file_path(log_dir: Path | str, prefix: str) -> Path:
    dir_path = Path(log_dir)
    dir_path.mkdir(parents=True, exist_ok=True)
    timestamp = datetime.now(tz=UTC).strftime(LOG_FILE_TIMESTAMP_FORMAT)
    return dir_path / f"{prefix}_{timestamp}.log"


def _iter_handlers(
    *,
    json_mode: bool,
    log_file: Path | None,
) -> Iterator[logging.Handler]:
    stdout_handler = logging.StreamHandler(sys.stdout)
    stdout_handler.setFormatter(_build_stdlib_formatter(json_mode=json_mode, colors=sys.stdout.isatty()))
    yield stdout_handler

    if log_file is not None:
        file_handler = logging.FileHandler(log_file)
        file_handler.setFormatter(_build_stdlib_formatter(json_mode=json_mode, colors=False))
        yield file_handler


def setup_logging(
    log_dir: Path | str | None = None,
    level: int | None = None,
    prefix: str = DEFAULT_LOG_FILE_PREFIX,
) -> Path | None:
    """Configure structlog with stdout and optional file output.

    When log_dir is provided, creates "<prefix>_<datetime>.log" inside that
    directory. No file is written while running under pytest. Returns the
    log file path if created, None otherwise.
    """
    json_mode = _resolve_json_mode()
    if level is None:
        level = _resolve_log_level()

    structlog.configure(
        processors=build_processors(),
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=False,
    )

    log_file = _log_file_path(log_dir, prefix) if log_dir is not None and not _is_test() else None

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.handlers.clear()
    for handler in _iter_handlers(json_mode=json_mode, log_file=log_file):
        root_logger.addHandler(handler)

    return log_file
