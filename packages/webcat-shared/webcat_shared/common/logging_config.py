"""
Structured logging setup

Events are snake_case names with keyword context:

    logger.info("snapshot_import_complete", imported=12, failed=1)

Log lines go to stderr so CLI commands can print catalogs on stdout.
"""

import logging
import sys
import time

import structlog

_SHARED_PROCESSORS = (
    structlog.stdlib.filter_by_level,
    structlog.stdlib.add_logger_name,
    structlog.stdlib.add_log_level,
    structlog.processors.TimeStamper(fmt="iso"),
    structlog.processors.StackInfoRenderer(),
    structlog.processors.format_exc_info,
)


def configure_logging(level: str = "INFO", json_format: bool = False) -> None:
    """
    Route structlog through stdlib logging.

    Args:
        level: Root log level name
        json_format: JSON lines instead of the colored console renderer
    """
    renderer = structlog.processors.JSONRenderer() if json_format else structlog.dev.ConsoleRenderer()
    structlog.configure(
        processors=[*_SHARED_PROCESSORS, renderer],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )
    logging.basicConfig(
        stream=sys.stderr,
        format="%(message)s",
        level=getattr(logging, level.upper(), logging.INFO),
    )


def get_logger(name: str):
    """Structured logger for ``name``."""
    return structlog.get_logger(name)


# ============================================================
# Hot path summaries
# ============================================================


class BatchLogger:
    """
    One summary event for a loop instead of one event per item.

    Example:
        with BatchLogger(logger, "instance_attribution") as batch:
            for node_id in instance_ids:
                batch.record(node_id=node_id)
        # -> "instance_attribution_complete" count=.. duration_ms=.. samples=[..]
    """

    def __init__(self, logger, operation: str, sample_size: int = 3):
        self.logger = logger
        self.operation = operation
        self.sample_size = sample_size
        self.count = 0
        self.samples: list[dict] = []
        self._started = 0.0

    def __enter__(self):
        self._started = time.perf_counter()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        summary = {
            "count": self.count,
            "duration_ms": round((time.perf_counter() - self._started) * 1000, 2),
        }
        if self.samples:
            summary["samples"] = self.samples
        if exc_type is not None:
            self.logger.warning(f"{self.operation}_aborted", error=str(exc_val), **summary)
        else:
            self.logger.info(f"{self.operation}_complete", **summary)

    def record(self, **context):
        self.count += 1
        if len(self.samples) < self.sample_size:
            self.samples.append(context)
