"""Process-wide logging setup.

Modules log through ``logging.getLogger(__name__)``; this only decides the
package log level and how records are rendered (plain text or one JSON object
per line via python-json-logger).
"""

from __future__ import annotations

import logging.config

PACKAGE_LOGGER = __name__.rpartition(".")[0]

TEXT_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"
JSON_FORMAT = "%(asctime)s %(levelname)s %(name)s %(module)s %(funcName)s %(lineno)d %(message)s"


def build_logging_config(*, level: str = "INFO", fmt: str = "text") -> dict:
    formatter = "json" if str(fmt).lower() == "json" else "text"
    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "text": {"format": TEXT_FORMAT},
            "json": {
                "()": "pythonjsonlogger.json.JsonFormatter",
                "fmt": JSON_FORMAT,
            },
        },
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "formatter": formatter,
                "stream": "ext://sys.stdout",
            },
        },
        "loggers": {
            PACKAGE_LOGGER: {"level": str(level).upper()},
            # mysql-connector is chatty at DEBUG
            "mysql.connector": {"level": "WARNING"},
        },
        "root": {"level": "WARNING", "handlers": ["console"]},
    }


def configure_logging(*, level: str = "INFO", fmt: str = "text") -> None:
    logging.config.dictConfig(build_logging_config(level=level, fmt=fmt))
