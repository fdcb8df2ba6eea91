# In: logging_config.py

import json
import logging
import logging.config

from config import Config

# Keys passed through `extra=` by the app that belong in JSON output
CONTEXT_FIELDS = ("method", "path", "status_code", "duration_ms", "profile_id", "item_name")


class JsonLineFormatter(logging.Formatter):
    """One JSON object per line, with request context lifted to the top level."""

    def format(self, record):
        entry = {
            "time": self.formatTime(record, "%Y-%m-%dT%H:%M:%S"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        for field in CONTEXT_FIELDS:
            if hasattr(record, field):
                entry[field] = getattr(record, field)
        if record.exc_info:
            entry["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(entry, default=str)


def setup_logging(level=None, fmt=None):
    if (fmt or Config.LOG_FORMAT) == "json":
        formatter = {"()": JsonLineFormatter}
    else:
        formatter = {"format": "%(asctime)s %(levelname)-8s %(name)s: %(message)s"}

    logging.config.dictConfig({
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {"default": formatter},
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "formatter": "default",
                "stream": "ext://sys.stdout",
            },
        },
        "root": {"level": (level or Config.LOG_LEVEL).upper(), "handlers": ["console"]},
        "loggers": {
            # SQL echo only when debugging
            "sqlalchemy.engine": {"level": "INFO" if Config.DEBUG else "WARNING"},
        },
    })
