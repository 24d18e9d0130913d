"""Logging utilities for Polyroute."""

import logging
from dataclasses import dataclass, field
from pathlib import Path

import structlog

# Marks handlers installed by configure_logging so a second call replaces them
_HANDLER_TAG = "_polyroute_handler"


@dataclass
class ProcessingStats:
    """Statistics from processing run."""

    processed_count: int = 0
    skipped_count: int = 0
    error_count: int = 0
    detours_added: int = 0
    errors: list[tuple[str, str]] = field(default_factory=list)
    start_time: float | None = None
    end_time: float | None = None
    connector_timings_ms: list[float] = field(default_factory=list)
    was_cancelled: bool = False
    cancelled_count: int = 0

    @property
    def duration_seconds(self) -> float:
        """Calculate processing duration."""
        if self.start_time and self.end_time:
            return self.end_time - self.start_time
        return 0.0

    @property
    def avg_connector_ms(self) -> float:
        """Average time spent per routed connector."""
        if not self.connector_timings_ms:
            return 0.0
        return sum(self.connector_timings_ms) / len(self.connector_timings_ms)

    @property
    def min_connector_ms(self) -> float:
        return min(self.connector_timings_ms, default=0.0)

    @property
    def max_connector_ms(self) -> float:
        return max(self.connector_timings_ms, default=0.0)


def _install(handler: logging.Handler, root_logger: logging.Logger) -> None:
    setattr(handler, _HANDLER_TAG, True)
    root_logger.addHandler(handler)


def configure_logging(
    log_file: Path | None = None,
    console_level: str = "INFO",
    file_level: str = "DEBUG",
    quiet: bool = False,
) -> structlog.stdlib.BoundLogger:
    """Configure dual-output structured logging.

    Args:
        log_file: Path to log file (no file output if None)
        console_level: Logging level for console output
        file_level: Logging level for file output
        quiet: If True, suppress console output except errors

    Returns:
        Configured structlog logger
    """
    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG)
    for handler in list(root_logger.handlers):
        if getattr(handler, _HANDLER_TAG, False):
            root_logger.removeHandler(handler)
            handler.close()

    if log_file is not None:
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(getattr(logging, file_level.upper()))
        file_handler.setFormatter(
            logging.Formatter("%(asctime)s | %(levelname)-8s | %(name)s | %(message)s")
        )
        _install(file_handler, root_logger)

    console_handler = logging.StreamHandler()
    console_handler.setLevel(logging.ERROR if quiet else getattr(logging, console_level.upper()))
    console_handler.setFormatter(logging.Formatter("%(message)s"))
    _install(console_handler, root_logger)

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            structlog.processors.JSONRenderer(),
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    logger = structlog.get_logger("polyroute")
    logger.info(
        "Logging initialized",
        log_file=str(log_file) if log_file else None,
        level=file_level,
    )

    return logger


class ProcessingLogger:
    """Logger for tracking processing progress and statistics."""

    def __init__(self, logger: structlog.stdlib.BoundLogger) -> None:
        self._logger = logger
        self._stats = ProcessingStats()

    def log_connector_start(self, connector_id: str, point_count: int) -> None:
        """Log start of connector routing."""
        self._logger.debug("Routing connector", connector=connector_id, points=point_count)

    def log_connector_complete(
        self,
        connector_id: str,
        detours_added: int,
        duration_ms: float,
    ) -> None:
        """Log successful connector routing."""
        self._logger.info(
            "Connector routed",
            connector=connector_id,
            detours=detours_added,
            duration_ms=round(duration_ms, 2),
        )
        self._stats.processed_count += 1
        self._stats.detours_added += detours_added

    def log_connector_skipped(self, connector_id: str, reason: str) -> None:
        """Log skipped connector."""
        self._logger.debug("Connector skipped", connector=connector_id, reason=reason)
        self._stats.skipped_count += 1

    def log_connector_error(
        self,
        connector_id: str,
        error: Exception,
        traceback: str | None = None,
    ) -> None:
        """Log connector routing error."""
        self._logger.error(
            "Connector routing failed",
            connector=connector_id,
            error=str(error),
            error_type=type(error).__name__,
            traceback=traceback,
        )
        self._stats.error_count += 1
        self._stats.errors.append((connector_id, str(error)))

    def log_detour(
        self,
        connector_id: str,
        obstacle_id: str | None,
        points_before: int,
        points_after: int,
    ) -> None:
        """Log a detour around one obstacle."""
        self._logger.debug(
            "Detour added",
            connector=connector_id,
            obstacle=obstacle_id,
            before=points_before,
            after=points_after,
        )

    @property
    def stats(self) -> ProcessingStats:
        """Get current processing statistics."""
        return self._stats
