"""Logging configuration for converge.

Structured logging via loguru. Logging is disabled by default, as befits a
library, and enabled by ``setup_logging``.

Example:
    from converge.logging import LogConfig, setup_logging, teardown_logging

    handler_ids = setup_logging(LogConfig(level="DEBUG", file="converge.log"))
    try:
        wait_for_node(client, node, NodeStatus.RUNNING)
    finally:
        teardown_logging(handler_ids)
"""

from __future__ import annotations

import sys
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Literal

from loguru import logger

# Disable by default (library behavior)
logger.disable("converge")

type LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "TRACE"]

_CONTEXT_KEYS = ("component", "resource_id", "target")


def _format_context(record: Any) -> str:
    extra = record.get("extra", {})
    parts = [f"{k}={extra[k]}" for k in _CONTEXT_KEYS if k in extra]
    return f" [{' '.join(parts)}]" if parts else ""


CONSOLE_FORMAT = (
    "<green>{time:HH:mm:ss.SSS}</green> | "
    "<level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan>"
    "<dim>{ctx}</dim> - "
    "<level>{message}</level>"
)

FILE_FORMAT = (
    "{time:YYYY-MM-DD HH:mm:ss.SSS} | {level: <8} | "
    "{name}:{function}:{line}{ctx} - {message}"
)


def _with_context(template: str) -> Callable[[Any], str]:
    """Per-sink formatter that inlines the bound context into ``template``."""

    def formatter(record: Any) -> str:
        ctx = _format_context(record)
        ctx = ctx.replace("{", "{{").replace("}", "}}").replace("<", r"\<")
        return template.replace("{ctx}", ctx) + "\n{exception}"

    return formatter


@dataclass(frozen=True, slots=True)
class LogConfig:
    """Logging configuration.

    Attributes:
        level: Minimum log level for the console.
        file: Path to log file. If provided, logs are written to this file.
        console: Whether to log to stderr. Defaults to True.
        rotation: File rotation policy (e.g., "50 MB", "1 day"). Defaults to "50 MB".
        retention: Number of old log files to keep. Defaults to 10.
    """

    level: LogLevel = "INFO"
    file: str | None = None
    console: bool = True
    rotation: str = "50 MB"
    retention: int = 10


def setup_logging(config: LogConfig) -> list[int]:
    """Configure logging and return handler IDs for cleanup."""
    logger.enable("converge")
    handler_ids: list[int] = []

    if config.console:
        hid = logger.add(
            sys.stderr,
            level=config.level,
            format=_with_context(CONSOLE_FORMAT),
            colorize=True,
            filter="converge",
        )
        handler_ids.append(hid)

    if config.file:
        Path(config.file).parent.mkdir(parents=True, exist_ok=True)
        hid = logger.add(
            config.file,
            level="DEBUG",  # File always captures everything
            format=_with_context(FILE_FORMAT),
            rotation=config.rotation,
            retention=config.retention,
            compression="zip",
            diagnose=False,  # Don't expose credentials in tracebacks
            filter="converge",
        )
        handler_ids.append(hid)

    return handler_ids


def teardown_logging(handler_ids: list[int]) -> None:
    """Remove handlers and disable logging."""
    for hid in handler_ids:
        logger.remove(hid)
    logger.disable("converge")
