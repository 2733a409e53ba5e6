import logging
import json
from logging.handlers import TimedRotatingFileHandler
import os
from datetime import datetime, timezone

LOG_FILENAME = "clinic.log"


class JsonFormatter(logging.Formatter):
    def format(self, record):
        log_entry = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        # request context attached via `extra=`
        for key in ("method", "path", "status"):
            value = getattr(record, key, None)
            if value is not None:
                log_entry[key] = value

        if record.exc_info:
            log_entry["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_entry)


def setup_logger(log_dir: str = "logs", to_file: bool = True, level: int = logging.INFO):
    """Configure the root logger once per process."""
    logger = logging.getLogger()
    logger.setLevel(level)

    if getattr(logger, "_clinic_configured", False):
        return logger

    if to_file:
        os.makedirs(log_dir, exist_ok=True)
        # rotates daily, keeps 14 days
        handler = TimedRotatingFileHandler(
            filename=os.path.join(log_dir, LOG_FILENAME),
            when="midnight",
            backupCount=14,
            encoding="utf-8"
        )
        handler.setFormatter(JsonFormatter())
        logger.addHandler(handler)

    # Also log to console for debugging
    console = logging.StreamHandler()
    console.setFormatter(JsonFormatter())
    logger.addHandler(console)

    logger._clinic_configured = True
    return logger
