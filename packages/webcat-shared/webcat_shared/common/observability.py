"""
Observability entry point

Modules call ``get_logger(__name__)``; logging is configured from Settings
the first time any logger is requested.
"""

from webcat_shared.common.logging_config import configure_logging
from webcat_shared.common.logging_config import get_logger as get_structured_logger

_loggers: dict = {}
_configured = False


def get_logger(name: str):
    """Structured logger for ``name`` (configures logging once)."""
    global _configured

    if not _configured:
        _configure_from_settings()
        _configured = True

    logger = _loggers.get(name)
    if logger is None:
        logger = _loggers[name] = get_structured_logger(name)
    return logger


def _configure_from_settings():
    from webcat_shared.infra.config.settings import get_settings

    settings = get_settings()
    configure_logging(level=settings.log_level, json_format=settings.log_json)


def reset_logging():
    """Forget configuration and cached loggers (tests)."""
    global _configured
    _configured = False
    _loggers.clear()
