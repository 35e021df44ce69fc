"""structlog configuration.

Learn: every module does `logger = structlog.get_logger()` and logs dotted
event names with keyword context (`logger.info("goals.created", goal_id=...)`).
configure_logging() wires the processor chain once at startup. The request
id bound by RequestIdMiddleware is merged into every entry via contextvars.
"""

import logging

import structlog

from fitgoals.config import settings


def configure_logging(level: str | None = None, json_logs: bool | None = None) -> None:
    """Configure structlog (and the stdlib root logger it writes through)."""
    level_name = (level or settings.log_level).upper()
    use_json = settings.log_json if json_logs is None else json_logs

    logging.basicConfig(format="%(message)s", level=level_name)

    renderer = (
        structlog.processors.JSONRenderer()
        if use_json
        else structlog.dev.ConsoleRenderer()
    )
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(
            logging.getLevelName(level_name)
        ),
        cache_logger_on_first_use=True,
    )
