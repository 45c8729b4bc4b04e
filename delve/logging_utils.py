"""Structured event records for generation, search and the API.

Every record is a single line of key=value pairs::

    level=warn ts=1700000000 event=generation_exhausted seed=5 placed=1 target=3 logger=delve.dungeon

or a compact JSON object when ``DELVE_LOG_JSON`` is set. ``DELVE_LOG_LEVEL``
(debug | info | warn | error) is read on each call, so the CLI and tests can
change it at runtime.

Loggers can carry context that is added to each of their records::

    log = get_logger("delve.dungeon").bind(seed=42, kind="rooms")
    log.warn(event="generation_exhausted", placed=1, target=3)

Warn and error records are also passed to the stdlib logger of the same
name, so a server set up with ``delve.server.configure_logging`` keeps them
in its rotating file.
"""

from __future__ import annotations

import json
import logging
import os
import sys
import time

LEVELS = {"debug": 10, "info": 20, "warn": 30, "error": 40}
_STDLIB_LEVELS = {"warn": logging.WARNING, "error": logging.ERROR}


def _threshold() -> int:
    return LEVELS.get(os.getenv("DELVE_LOG_LEVEL", "info").lower(), LEVELS["info"])


def _json_mode() -> bool:
    return os.getenv("DELVE_LOG_JSON", "0").lower() in ("1", "true", "yes", "on")


def _text_value(v) -> str:
    if isinstance(v, bool):
        return "true" if v else "false"
    if isinstance(v, float):
        return f"{v:.3f}".rstrip("0").rstrip(".")
    if isinstance(v, int):
        return str(v)
    # Grid coordinates and other short sequences print as "x,y"
    if isinstance(v, (tuple, list)):
        return ",".join(_text_value(item) for item in v)
    return str(v).replace(" ", "_")


def format_record(level: str, fields: dict) -> str:
    """Render one record; ``None`` values are dropped."""
    kept = {k: v for k, v in fields.items() if v is not None}
    ts = int(time.time())
    if _json_mode():
        return json.dumps({"level": level, "ts": ts, **kept}, separators=(",", ":"), default=str)
    return " ".join([f"level={level}", f"ts={ts}"] + [f"{k}={_text_value(v)}" for k, v in kept.items()])


class StructuredLogger:
    def __init__(self, name: str, context: dict | None = None):
        self.name = name
        self.context = dict(context or {})

    def bind(self, **context) -> "StructuredLogger":
        """Child logger whose records all carry ``context``."""
        return StructuredLogger(self.name, {**self.context, **context})

    def _emit(self, level: str, fields: dict) -> None:
        if LEVELS[level] < _threshold():
            return
        record = {**self.context, **fields}
        record.setdefault("logger", self.name)
        line = format_record(level, record)
        print(line, file=sys.stderr if level == "error" else sys.stdout)
        if level in _STDLIB_LEVELS:
            logging.getLogger(self.name).log(_STDLIB_LEVELS[level], line)

    def debug(self, **fields):
        self._emit("debug", fields)

    def info(self, **fields):
        self._emit("info", fields)

    def warn(self, **fields):
        self._emit("warn", fields)

    def error(self, **fields):
        self._emit("error", fields)


_LOGGERS: dict = {}


def get_logger(name: str = "delve") -> StructuredLogger:
    if name not in _LOGGERS:
        _LOGGERS[name] = StructuredLogger(name)
    return _LOGGERS[name]


log = get_logger("delve")
