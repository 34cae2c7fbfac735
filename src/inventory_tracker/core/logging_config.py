import logging
import os
import sys
from typing import Iterable, Optional


class NamespaceFilter(logging.Filter):
    def __init__(self, allowed_namespaces=None):
        super().__init__()
        self.allowed_namespaces = allowed_namespaces if allowed_namespaces is not None else []

    def filter(self, record):
        if not self.allowed_namespaces:
            return True  # If no namespaces are specified, allow all records
        # Allow record if its name starts with any of the allowed namespaces
        return any(record.name.startswith(ns) for ns in self.allowed_namespaces)


log_formatter = logging.Formatter(
    fmt="%(asctime)s - %(name)s:%(lineno)d - %(levelname)s - %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)

app_logger = logging.getLogger("inventory_tracker")


def _namespaces_from_env() -> list[str]:
    raw = os.getenv("LOG_NAMESPACES", "")
    return [ns.strip() for ns in raw.split(",") if ns.strip()]


def configure_logging(
    level: int = logging.INFO,
    allowed_namespaces: Optional[Iterable[str]] = None,
    level_overrides: Optional[dict[str, int]] = None,
) -> logging.Logger:
    """
    Configures the application logger hierarchy.

    Modules log through `logging.getLogger(__name__)`, which creates loggers
    like "inventory_tracker.features.reports.service". Those inherit the
    level and handler configured here on the "inventory_tracker" logger,
    unless a more specific level is given in `level_overrides`.

    Calling this more than once replaces the console handler instead of
    stacking a second one.
    """
    app_logger.setLevel(level)
    for handler in list(app_logger.handlers):
        if getattr(handler, "_inventory_tracker_console", False):
            app_logger.removeHandler(handler)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(log_formatter)
    console_handler._inventory_tracker_console = True

    namespaces = list(allowed_namespaces) if allowed_namespaces is not None else _namespaces_from_env()
    if namespaces:
        console_handler.addFilter(NamespaceFilter(namespaces))
    app_logger.addHandler(console_handler)

    for logger_name, logger_level in (level_overrides or {}).items():
        logging.getLogger(logger_name).setLevel(logger_level)

    return app_logger
