import logging
from contextvars import ContextVar
from datetime import datetime, timezone
from typing import Any, Dict

from pythonjsonlogger import jsonlogger

from bono.core.config import settings

# Set by CorrelationIdMiddleware for the lifetime of one request
request_id_var: ContextVar[str] = ContextVar("request_id", default="")

LOG_FORMAT = "%(timestamp) %(level) %(name) %(message)"


class BonoJsonFormatter(jsonlogger.JsonFormatter):
    """One JSON object per line, tagged with the service, environment and request id."""

    def add_fields(self, log_record: Dict[str, Any], record: logging.LogRecord, message_dict: Dict[str, Any]) -> None:
        super().add_fields(log_record, record, message_dict)

        if not log_record.get("timestamp"):
            log_record["timestamp"] = datetime.now(timezone.utc).isoformat()
        log_record["level"] = record.levelname
        log_record["service"] = settings.app_name
        log_record["environment"] = settings.environment

        req_id = request_id_var.get()
        if req_id:
            log_record["request_id"] = req_id


def setup_logging():
    root = logging.getLogger()
    # Lifespan runs again for every TestClient, keep a single handler
    if any(isinstance(h.formatter, BonoJsonFormatter) for h in root.handlers):
        return
    handler = logging.StreamHandler()
    handler.setFormatter(BonoJsonFormatter(LOG_FORMAT))
    root.addHandler(handler)
    root.setLevel(settings.log_level.upper())

    # Per-request access lines come from LoggingMiddleware instead
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
