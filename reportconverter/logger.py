"""JSON logging set up at debug level."""

import json
import logging
import sys
from datetime import datetime

_LEVEL_NAMES = {
    logging.DEBUG: "debug",
    logging.INFO: "info",
    logging.WARNING: "warning",
    logging.ERROR: "error",
    logging.CRITICAL: "fatal",
}


def _timestamp(created: float) -> str:
    stamp = datetime.fromtimestamp(created).astimezone().isoformat(timespec="seconds")
    return stamp[:-6] + "Z" if stamp.endswith("+00:00") else stamp


class JsonFormatter(logging.Formatter):
    """Formats records as one JSON object with level, msg and time keys."""

    def format(self, record):
        entry = {
            "level": _LEVEL_NAMES.get(record.levelno, record.levelname.lower()),
            "msg": record.getMessage(),
            "time": _timestamp(record.created),
        }
        if record.exc_info:
            entry["error"] = self.formatException(record.exc_info)
        return json.dumps(entry, sort_keys=True, default=str)


def new_logger(name="reportconverter") -> logging.Logger:
    """Return the named logger writing JSON lines to stderr at debug level."""
    logger = logging.getLogger(name)
    logger.setLevel(logging.DEBUG)
    if not any(isinstance(h.formatter, JsonFormatter) for h in logger.handlers):
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(JsonFormatter())
        logger.addHandler(handler)
    logger.propagate = False
    return logger