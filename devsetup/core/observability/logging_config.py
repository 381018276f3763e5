"""
Logging configuration — one call from the CLI before any work starts.

Logging here is diagnostic: commands run, probe results, step failures.
The progress lines a user follows come from ``console.Console``.

Console level precedence:
    -q / -v / --debug  >  DEVSETUP_LOG_LEVEL  >  WARNING

DEVSETUP_LOG_FILE adds a full-detail file log at DEVSETUP_LOG_FILE_LEVEL
(or the console level). A log file that cannot be opened is reported on
stderr and the run continues with console logging only.
"""

from __future__ import annotations

import logging
import sys

_DETAIL = "%(asctime)s %(levelname)-5s %(name)s:%(lineno)d: %(message)s"

# Console layouts, most verbose first: (max level, format, datefmt).
_CONSOLE_LAYOUTS: tuple[tuple[int, str, str | None], ...] = (
    (logging.DEBUG, _DETAIL, "%H:%M:%S"),
    (logging.INFO, "%(asctime)s [%(name)s] %(message)s", "%H:%M:%S"),
)
_PLAIN_LAYOUT = ("%(message)s", None)

_FILE_DATEFMT = "%Y-%m-%d %H:%M:%S"


def setup_logging(
    level: str = "WARNING",
    log_file: str | None = None,
    log_file_level: str | None = None,
) -> None:
    """Replace the root logger's handlers for this process.

    Args:
        level: Console level name (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        log_file: Optional path of a file log.
        log_file_level: Level for the file log; defaults to ``level``.
    """
    console_level = _parse_level(level)
    handlers: list[logging.Handler] = [_console_handler(console_level)]

    unopened: OSError | None = None
    if log_file:
        file_level = _parse_level(log_file_level) if log_file_level else console_level
        try:
            handlers.append(_file_handler(log_file, file_level))
        except OSError as exc:
            unopened = exc

    root = logging.getLogger()
    for old in root.handlers[:]:
        root.removeHandler(old)
    for handler in handlers:
        root.addHandler(handler)
    root.setLevel(min(handler.level for handler in handlers))

    # A broken stream must not turn into an install failure.
    logging.raiseExceptions = False

    if unopened is not None:
        reason = unopened.strerror or unopened
        sys.stderr.write(
            f"warning: cannot open log file {log_file} ({reason}); "
            "logging to stderr only\n",
        )


def _console_handler(level: int) -> logging.Handler:
    fmt, datefmt = next(
        ((fmt, datefmt) for ceiling, fmt, datefmt in _CONSOLE_LAYOUTS if level <= ceiling),
        _PLAIN_LAYOUT,
    )
    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(fmt, datefmt=datefmt))
    return handler


def _file_handler(path: str, level: int) -> logging.Handler:
    """Open the file log; raises OSError when the path is unusable."""
    handler = logging.FileHandler(path, encoding="utf-8")
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(_DETAIL, datefmt=_FILE_DATEFMT))
    return handler


def _parse_level(level: str | None) -> int:
    """Level name → numeric level; unknown or empty names mean WARNING."""
    numeric = getattr(logging, (level or "").upper(), None)
    return numeric if isinstance(numeric, int) else logging.WARNING
