import logging
import sys

import google.cloud.logging
import structlog

from preview_api.configurations.config import settings


class ContextFieldsFilter(logging.Filter):
    """Copies bound structlog context vars onto records as Cloud Logging json_fields."""

    def filter(self, record: logging.LogRecord) -> bool:
        context = structlog.contextvars.get_contextvars()
        if context:
            record.json_fields = {**getattr(record, "json_fields", {}), **context}
        return True


def _log_level() -> int:
    level = logging.getLevelName(settings.log_level.upper())
    return level if isinstance(level, int) else logging.INFO


def setup_logging():
    level = _log_level()
    if settings.env == "prod":
        client = google.cloud.logging.Client(project=settings.gcp_project_id)
        client.setup_logging(log_level=level)
        for handler in logging.getLogger().handlers:
            handler.addFilter(ContextFieldsFilter())
    else:
        formatter = structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=[structlog.stdlib.ExtraAdder()],
            processors=[
                structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                structlog.contextvars.merge_contextvars,
                structlog.processors.add_log_level,
                structlog.processors.StackInfoRenderer(),
                structlog.dev.set_exc_info,
                structlog.processors.TimeStamper(fmt="iso"),
                structlog.dev.ConsoleRenderer(colors=True, pad_level=False),
            ],
        )

        root_logger = logging.getLogger()
        root_logger.handlers.clear()

        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(formatter)

        root_logger.addHandler(handler)
        root_logger.setLevel(level)

    # httpx logs every request at INFO, which drowns the resolver logs
    logging.getLogger("httpx").setLevel(max(level, logging.WARNING))
