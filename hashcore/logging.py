"""
hashcore.logging
----------------

Logging for the hashcore package. Library modules only ever call
`get_logger(__name__)` and pass structured fields through ``extra={...}``;
the ``hashcore`` logger carries a `NullHandler` so nothing is printed until
an application opts in:

    from hashcore import logging as hlog

    hlog.configure(json=True, level="DEBUG")

or, from a loaded `hashcore.config.Config`:

    hlog.configure_from_config(get_config())

Only the stdlib is used.
"""

from __future__ import annotations

import datetime as _dt
import json
import logging
import os
import sys
import traceback
from typing import Any, Dict, Optional

ROOT_LOGGER_NAME = "hashcore"

# Attributes every LogRecord has; anything else on a record came from `extra`.
_RECORD_ATTRS = frozenset(vars(logging.LogRecord("", 0, "", 0, "", (), None))) | {"message", "asctime"}


def _plain(v: Any) -> Any:
    if v is None or isinstance(v, (bool, int, float, str)):
        return v
    if isinstance(v, (bytes, bytearray, memoryview)):
        return bytes(v).hex()
    if isinstance(v, (list, tuple)):
        return [_plain(x) for x in v]
    if isinstance(v, dict):
        return {str(k): _plain(x) for k, x in v.items()}
    return str(v)


def _fields(record: logging.LogRecord) -> Dict[str, Any]:
    return {k: _plain(v) for k, v in vars(record).items() if k not in _RECORD_ATTRS and not k.startswith("_")}


class JSONFormatter(logging.Formatter):
    """One JSON object per line: ts, level, logger, msg, then the extra fields."""

    def format(self, record: logging.LogRecord) -> str:
        payload: Dict[str, Any] = {
            "ts": _dt.datetime.fromtimestamp(record.created, _dt.timezone.utc).isoformat(timespec="milliseconds"),
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
        }
        for k, v in _fields(record).items():
            payload.setdefault(k, v)
        if record.exc_info:
            payload["err"] = "".join(traceback.format_exception(*record.exc_info)).rstrip()
        return json.dumps(payload, separators=(",", ":"))


class TextFormatter(logging.Formatter):
    """``LEVEL | logger | message k=v ...``"""

    def format(self, record: logging.LogRecord) -> str:
        line = f"{record.levelname} | {record.name} | {record.getMessage()}"
        fields = _fields(record)
        if fields:
            line += " " + " ".join(f"{k}={v}" for k, v in fields.items())
        if record.exc_info:
            line += "\n" + self.formatException(record.exc_info)
        return line


def configure(
    *,
    json: Optional[bool] = None,
    level: str | int = "INFO",
    stream: Any = None,
) -> logging.Logger:
    """
    Replace the handlers of the ``hashcore`` logger with one stream handler.

    ``json=None`` defers to ``HASHCORE_LOG_FORMAT`` (``json`` or ``text``,
    default text). ``stream`` defaults to stderr.
    """
    if json is None:
        json = os.environ.get("HASHCORE_LOG_FORMAT", "").strip().lower() == "json"
    lvl = level if isinstance(level, int) else logging.getLevelName(level.strip().upper())
    if not isinstance(lvl, int):
        lvl = logging.INFO

    root = logging.getLogger(ROOT_LOGGER_NAME)
    for h in list(root.handlers):
        root.removeHandler(h)
    handler = logging.StreamHandler(stream if stream is not None else sys.stderr)
    handler.setFormatter(JSONFormatter() if json else TextFormatter())
    root.addHandler(handler)
    root.setLevel(lvl)
    return root


def configure_from_config(cfg: Any, *, stream: Any = None) -> logging.Logger:
    """Configure logging from a `hashcore.config.Config`."""
    return configure(
        json=str(cfg.log_format).strip().lower() == "json",
        level=cfg.log_level,
        stream=stream,
    )


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """A logger under the ``hashcore`` namespace."""
    if not name:
        return logging.getLogger(ROOT_LOGGER_NAME)
    if name == ROOT_LOGGER_NAME or name.startswith(ROOT_LOGGER_NAME + "."):
        return logging.getLogger(name)
    return logging.getLogger(f"{ROOT_LOGGER_NAME}.{name}")


logging.getLogger(ROOT_LOGGER_NAME).addHandler(logging.NullHandler())


__all__ = [
    "ROOT_LOGGER_NAME",
    "JSONFormatter",
    "TextFormatter",
    "configure",
    "configure_from_config",
    "get_logger",
]
