"""
Logging for pqconsolidator.

All modules log under the "pqconsolidator" namespace. Nothing is printed
until a caller opts in with setup_basic_logging(), pqconsolidator.verbose()
or the CLI's -v flags; applications can instead attach their own handlers
through the standard logging config.

Usage:
    from pqconsolidator._logging import get_logger, phase_timer

    logger = get_logger(__name__)
    with phase_timer(logger, "schema validation"):
        ...
"""

import logging
import sys
import time
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Optional, TextIO

ROOT_LOGGER = "pqconsolidator"
DEFAULT_FORMAT = "%(levelname)s [%(name)s] %(message)s"

# Name of the console handler installed by setup_basic_logging()
CONSOLE_HANDLER = "pqconsolidator-console"


def get_logger(name: str) -> logging.Logger:
    """Get logger under the pqconsolidator namespace."""
    if not name.startswith(ROOT_LOGGER):
        name = ROOT_LOGGER if name == "__main__" else f"{ROOT_LOGGER}.{name}"

    return logging.getLogger(name)


def verbosity_to_level(count: int) -> int:
    """Map a repeated -v count to a level: 0 warning, 1 info, 2+ debug."""
    if count >= 2:
        return logging.DEBUG
    if count == 1:
        return logging.INFO
    return logging.WARNING


def setup_basic_logging(
    level: int = logging.INFO,
    format: Optional[str] = None,
    stream: Optional[TextIO] = None,
) -> logging.Handler:
    """
    Route pqconsolidator records to a console stream.

    Installs one named handler on the root pqconsolidator logger and reuses
    it on later calls, updating its level, format and stream. Handlers
    attached by the application are left untouched.

    Args:
        level: Minimum level for the logger and the console handler
        format: logging.Formatter format string (default DEFAULT_FORMAT)
        stream: Output stream (default sys.stderr, so stdout stays clean
            for the CLI's summary line)

    Returns:
        The console handler
    """
    logger = logging.getLogger(ROOT_LOGGER)
    logger.setLevel(level)

    handler = _console_handler(logger)
    if handler is None:
        handler = logging.StreamHandler()
        handler.set_name(CONSOLE_HANDLER)
        logger.addHandler(handler)

    handler.setStream(stream or sys.stderr)
    handler.setFormatter(logging.Formatter(format or DEFAULT_FORMAT))
    handler.setLevel(level)

    logger.propagate = False
    return handler


def enable_debug_logging() -> logging.Handler:
    """Shorthand for setup_basic_logging(logging.DEBUG)."""
    return setup_basic_logging(level=logging.DEBUG)


def disable_logging() -> None:
    """Silence all pqconsolidator logging."""
    logging.getLogger(ROOT_LOGGER).setLevel(logging.CRITICAL + 1)


@contextmanager
def phase_timer(logger: logging.Logger, label: str) -> Iterator[None]:
    """Log the wall time of a block at debug level, also when it raises."""
    start = time.perf_counter()
    outcome = "failed"
    try:
        yield
        outcome = "finished"
    finally:
        logger.debug(f"{label} {outcome} in {time.perf_counter() - start:.2f}s")


def _console_handler(logger: logging.Logger) -> Optional[logging.StreamHandler]:
    for handler in logger.handlers:
        if handler.get_name() == CONSOLE_HANDLER:
            return handler  # type: ignore[return-value]
    return None
