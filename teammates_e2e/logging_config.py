import json
import logging
from datetime import datetime, timezone
from typing import Optional

PLAIN_FORMAT = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"


class JSONFormatter(logging.Formatter):
    """
    Formatter that outputs one JSON object per record, for CI log collectors
    """

    def format(self, record: logging.LogRecord) -> str:
        log_obj = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }

        if record.exc_info:
            log_obj["exception"] = self.formatException(record.exc_info)

        # Extra fields passed via 'extra'
        if hasattr(record, "test_class"):
            log_obj["test_class"] = record.test_class

        return json.dumps(log_obj)


def setup_logging(level: str = "INFO", json_output: bool = False, stream: bool = True) -> Optional[logging.Handler]:
    """
    Configure the harness loggers, replacing any handler installed by a previous call

    With ``stream`` the harness logs to stderr and stops propagating, so each
    record is printed once. Without it records only propagate to handlers
    already in place, such as pytest's log capture.
    """
    harness_logger = logging.getLogger("teammates_e2e")
    harness_logger.setLevel(level.upper())

    if not stream:
        harness_logger.handlers = []
        harness_logger.propagate = True
        return None

    handler = logging.StreamHandler()
    handler.setFormatter(JSONFormatter() if json_output else logging.Formatter(PLAIN_FORMAT))
    harness_logger.handlers = [handler]
    harness_logger.propagate = False

    return handler
