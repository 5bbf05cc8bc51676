"""JSON logging for PresuX.

One object per line with the service name, the request id and, once the
session gate has resolved a caller, the ``owner_id`` whose data the request
works on. Noisy third-party loggers are kept at WARNING.
"""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from typing import Mapping

from ..middlewares.request_id import owner_ctx_var, request_id_ctx_var
from .config import settings

QUIET_LOGGERS = ("httpx", "httpcore", "uvicorn.access")


class JsonLogFormatter(logging.Formatter):
    def __init__(self, service: str) -> None:
        super().__init__()
        self.service = service

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "ts": datetime.fromtimestamp(record.created, timezone.utc).isoformat(timespec="milliseconds"),
            "service": self.service,
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        for key, var in (("request_id", request_id_ctx_var), ("owner_id", owner_ctx_var)):
            value = var.get()
            if value:
                entry[key] = value
        extra = getattr(record, "extra_data", None)
        if isinstance(extra, Mapping):
            entry.update(extra)
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(entry, ensure_ascii=False, default=str)


def configure_logging(level: str | None = None) -> None:
    handler = logging.StreamHandler()
    handler.setFormatter(JsonLogFormatter(settings.APP_NAME))
    logging.root.handlers = [handler]
    logging.root.setLevel((level or settings.LOG_LEVEL).upper())
    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
