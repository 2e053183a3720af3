"""Structured logging configuration for pixelcheck using structlog.

Provides structured logging with context preservation, plus two small
specialized loggers: one for selection state transitions and one for the
timing of capture phases.
"""

import logging
import os
import sys
import time
from collections.abc import Iterator
from contextlib import contextmanager
from datetime import datetime
from pathlib import Path
from typing import Any, cast

import structlog

from ..config import get_settings


def setup_logging(
    level: str = "INFO",
    log_file: Path | None = None,
    structured: bool = True,
    console: bool = True,
    add_timestamp: bool = True,
    add_caller_info: bool = False,
    colorize: bool = True,
) -> None:
    """Configure structured logging for pixelcheck.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_file: Optional path to log file
        structured: Use JSON structured output
        console: Enable console output (overridden by PIXELCHECK_DISABLE_CONSOLE_LOGGING)
        add_timestamp: Add timestamps to logs
        add_caller_info: Add caller information
        colorize: Colorize console output (only for non-structured)
    """
    if os.getenv("PIXELCHECK_DISABLE_CONSOLE_LOGGING") == "1":
        console = False
        log_file = None

    processors: list[Any] = [
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
    ]

    if add_timestamp:
        processors.append(structlog.processors.TimeStamper(fmt="iso"))

    if add_caller_info:
        processors.append(
            structlog.processors.CallsiteParameterAdder(
                parameters=[
                    structlog.processors.CallsiteParameter.FILENAME,
                    structlog.processors.CallsiteParameter.LINENO,
                    structlog.processors.CallsiteParameter.FUNC_NAME,
                ]
            )
        )

    processors.extend(
        [
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
        ]
    )

    if structured:
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=colorize and console))

    structlog.configure(
        processors=processors,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    handlers: list[logging.Handler] = []

    if console:
        # stdout is reserved for command output
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setFormatter(logging.Formatter("%(message)s"))
        handlers.append(console_handler)

    if log_file:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setFormatter(logging.Formatter("%(message)s"))
        handlers.append(file_handler)

    if not handlers:
        handlers.append(logging.NullHandler())
        level = "CRITICAL"

    logging.basicConfig(
        format="%(message)s",
        level=getattr(logging, level.upper()),
        handlers=handlers,
        force=True,
    )


_logging_initialized = False


def _ensure_logging_initialized() -> None:
    """Ensure logging is initialized (called lazily, not at import time)."""
    global _logging_initialized

    if _logging_initialized:
        return

    if os.getenv("PIXELCHECK_DISABLE_CONSOLE_LOGGING") == "1":
        logging.disable(logging.CRITICAL)
        _logging_initialized = True
        return

    try:
        settings = get_settings()
        log_file = None
        if settings.log_to_file:
            log_file = settings.log_path / f"pixelcheck_{datetime.now().strftime('%Y%m%d')}.log"
        setup_logging(
            level="DEBUG" if settings.debug_mode else settings.log_level,
            log_file=log_file,
            structured=not settings.debug_mode,
            colorize=settings.debug_mode,
        )
    except (ImportError, AttributeError, OSError, ValueError):
        # Settings failed to load or the log path is unusable
        setup_logging(level="INFO", structured=False)

    _logging_initialized = True


def get_logger(name: str) -> structlog.BoundLogger:
    """Get a structured logger instance.

    Args:
        name: Logger name (typically __name__)

    Returns:
        Structured logger instance
    """
    _ensure_logging_initialized()
    return cast(structlog.BoundLogger, structlog.get_logger(name))


class SelectionLogger:
    """Specialized logger for selection state transitions."""

    def __init__(self, base_logger: structlog.BoundLogger | None = None) -> None:
        self.logger = base_logger or get_logger(__name__)

    def log_transition(
        self,
        from_state: str,
        to_state: str,
        trigger: str | None = None,
        **kwargs: Any,
    ) -> None:
        """Log a selection state transition.

        Args:
            from_state: Source state
            to_state: Target state
            trigger: Event that caused the transition
            **kwargs: Additional context
        """
        log_data = {"from_state": from_state, "to_state": to_state, **kwargs}
        if trigger:
            log_data["trigger"] = trigger
        self.logger.debug("selection_transition", **log_data)


class PerformanceLogger:
    """Logger for capture phase timings."""

    def __init__(self, base_logger: structlog.BoundLogger | None = None) -> None:
        self.logger = base_logger or get_logger(__name__)
        self.metrics: dict[str, list[float]] = {}

    def log_timing(self, operation: str, duration: float, **kwargs: Any) -> None:
        """Record and log an operation timing.

        Args:
            operation: Operation name
            duration: Duration in seconds
            **kwargs: Additional context
        """
        self.metrics.setdefault(operation, []).append(duration)
        self.logger.debug("performance_timing", operation=operation, duration=duration, **kwargs)

    @contextmanager
    def timed(self, operation: str, **kwargs: Any) -> Iterator[None]:
        """Time the enclosed block, recording it even when the block raises."""
        start = time.perf_counter()
        try:
            yield
        finally:
            self.log_timing(operation, time.perf_counter() - start, **kwargs)

    def get_stats(self, operation: str) -> dict[str, Any]:
        """Get count/mean/min/max/total for one operation."""
        values = self.metrics.get(operation)
        if not values:
            return {}
        return {
            "count": len(values),
            "mean": sum(values) / len(values),
            "min": min(values),
            "max": max(values),
            "total": sum(values),
        }


performance_logger = PerformanceLogger()
