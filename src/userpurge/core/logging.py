from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict

from userpurge.core.settings import Settings

_CONFIGURED = False

# Attributes every LogRecord carries; anything else arrived through ``extra=``.
_RESERVED_ATTRS = frozenset(
    vars(logging.LogRecord("", logging.INFO, "", 0, "", None, None)).keys()
) | {"message", "asctime"}


class JsonFormatter(logging.Formatter):
    """Serialize log records as structured JSON, including ``extra`` fields."""

    default_time_format = "%Y-%m-%dT%H:%M:%S"
    default_msec_format = "%s.%03dZ"

    def format(self, record: logging.LogRecord) -> str:
        data: Dict[str, Any] = {
            "timestamp": self.formatTime(record, self.default_time_format),
            "level": record.levelname,
            "name": record.name,
            "message": record.getMessage(),
        }
        for key, value in vars(record).items():
            if key in _RESERVED_ATTRS or key.startswith("_"):
                continue
            data[key] = value
        if record.exc_info:
            data["exc_info"] = self.formatException(record.exc_info)
        if record.stack_info:
            data["stack_info"] = record.stack_info
        return json.dumps(data, ensure_ascii=False, default=str)


def configure_logging(settings: Settings, *, filename: str = "api.log") -> None:
    """Configure root logging handlers once per process."""
    global _CONFIGURED
    if _CONFIGURED:
        return

    log_dir = Path(settings.log_dir) if settings.log_dir else Path.cwd() / "logs"
    handlers: list[logging.Handler] = [logging.StreamHandler()]
    try:
        log_dir.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        logging.warning("Unable to create log directory %s: %s", log_dir, exc)
    else:
        handlers.append(
            logging.FileHandler(log_dir / filename, mode="a", encoding="utf-8")
        )

    if settings.log_format == "json":
        formatter: logging.Formatter = JsonFormatter()
    else:
        formatter = logging.Formatter("%(asctime)s %(levelname)s %(name)s %(message)s")

    for handler in handlers:
        handler.setFormatter(formatter)

    logging.basicConfig(
        level=logging.INFO,
        handlers=handlers,
        force=True,
    )

    _CONFIGURED = True


__all__ = ["JsonFormatter", "configure_logging"]
