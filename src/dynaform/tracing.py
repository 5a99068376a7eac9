"""
Logging and tracing helpers for dynaform.

The engine logs through the standard ``logging`` module under the
``dynaform`` logger hierarchy. These helpers configure that hierarchy and
time engine operations such as validation passes and LOV queries.
"""

import functools
import logging
import time
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from dynaform.config import get_config

LOGGER_NAME = "dynaform"

logger = logging.getLogger(LOGGER_NAME)


def setup_logging(
    level: str | int | None = None,
    console: bool = True,
    file_path: str | None = None,
) -> logging.Logger:
    """
    Configure logging for the dynaform logger hierarchy.

    Args:
        level: Log level name or number. Defaults to config.log_level.
        console: Whether to attach a stream handler.
        file_path: Optional file path to also write log records to.

    Returns:
        The configured root ``dynaform`` logger.

    Example:
        >>> from dynaform.tracing import setup_logging
        >>> setup_logging(level="DEBUG")
    """
    root = logging.getLogger(LOGGER_NAME)
    root.setLevel(level if level is not None else get_config().log_level)

    formatter = logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s")
    handlers: list[logging.Handler] = []

    if console:
        handlers.append(logging.StreamHandler())

    if file_path:
        handlers.append(logging.FileHandler(file_path))

    for handler in handlers:
        handler.setFormatter(formatter)
        root.addHandler(handler)

    return root


def disable_logging() -> None:
    """Silence all dynaform log output, including child loggers."""
    logging.getLogger(LOGGER_NAME).setLevel(logging.CRITICAL + 1)


def enable_logging(level: str | int | None = None) -> None:
    """Re-enable dynaform log output at ``level`` (defaults to config.log_level)."""
    logging.getLogger(LOGGER_NAME).setLevel(level if level is not None else get_config().log_level)


@asynccontextmanager
async def traced_operation(
    name: str,
    metadata: dict | None = None,
) -> AsyncGenerator[None, None]:
    """
    Context manager for timing a specific operation.

    Args:
        name: Name of the operation to trace.
        metadata: Optional metadata to attach to the log record.

    Example:
        >>> async with traced_operation("form_validation", {"form": "order"}):
        ...     result = await pipeline.validate(model, form)
    """
    started = time.perf_counter()
    logger.debug(f"[TRACE START] {name} {metadata or {}}")
    try:
        yield
    finally:
        elapsed_ms = (time.perf_counter() - started) * 1000
        logger.debug(f"[TRACE END] {name} ({elapsed_ms:.1f} ms)")


def trace_validation(func):
    """Decorator to trace validation operations."""

    @functools.wraps(func)
    async def wrapper(*args, **kwargs):
        async with traced_operation("validation", {"operation": func.__name__}):
            return await func(*args, **kwargs)

    return wrapper


def trace_lov_query(func):
    """Decorator to trace LOV data queries."""

    @functools.wraps(func)
    async def wrapper(*args, **kwargs):
        async with traced_operation("lov_query", {"operation": func.__name__}):
            return await func(*args, **kwargs)

    return wrapper
