"""
shop_pos/utils/loggers.py

- get_logger(name) -> console logger for the app
- get_audit_logger(file_path) -> JSON-lines logger for sale/receipt events
- log_event(logger, op, phase, message, extra)
"""
from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Dict, Optional

__all__ = ["get_logger", "get_audit_logger", "log_event"]

_AUDIT_LOGGER_NAME = "shop_pos.audit"


def get_logger(name="shop_pos"):
    logger = logging.getLogger(name)
    if not logger.handlers:
        logger.setLevel(logging.INFO)
        ch = logging.StreamHandler()
        ch.setFormatter(logging.Formatter("%(asctime)s [%(levelname)s] %(name)s: %(message)s"))
        logger.addHandler(ch)
    return logger


class _JsonLineFormatter(logging.Formatter):
    """
    {"ts":"2025-09-16T12:00:01.123Z","level":"INFO","name":"shop_pos.audit","msg":"...","extra":{...}}
    """
    def format(self, record: logging.LogRecord) -> str:  # type: ignore[override]
        payload = {
            "ts": datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z"),
            "level": record.levelname,
            "name": record.name,
            "msg": record.getMessage(),
        }
        if hasattr(record, "extra_payload") and isinstance(record.extra_payload, dict):
            payload["extra"] = record.extra_payload
        return json.dumps(payload, ensure_ascii=False, default=str)


def get_audit_logger(file_path: Optional[str | Path] = None, level: int = logging.INFO) -> logging.Logger:
    """
    Return the audit logger. The first call that passes `file_path` attaches a
    JSON-lines file handler; without a path (or if the file cannot be opened)
    records go to stderr. Later calls reuse the configured handlers.
    """
    logger = logging.getLogger(_AUDIT_LOGGER_NAME)
    logger.setLevel(level)
    logger.propagate = False

    if logger.handlers:
        return logger

    if file_path is not None:
        path = Path(file_path)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            fh = logging.FileHandler(str(path), mode="a", encoding="utf-8", delay=True)
        except OSError:
            fh = None
        if fh is not None:
            fh.setLevel(level)
            fh.setFormatter(_JsonLineFormatter())
            logger.addHandler(fh)
            return logger

    sh = logging.StreamHandler()
    sh.setLevel(logging.WARNING)
    sh.setFormatter(_JsonLineFormatter())
    logger.addHandler(sh)
    return logger


def log_event(
    logger: logging.Logger,
    op: str,
    phase: str,
    message: str,
    extra: Dict[str, object] | None = None,
    level: int = logging.INFO,
) -> None:
    """
    Log a structured event line.

    Args:
        logger: Obtained from get_audit_logger().
        op: Operation name, e.g. "sale" or "receipt".
        phase: Phase within the operation, e.g. "commit", "failed", "export".
        message: Human-readable short message.
        extra: Optional additional key/values (ids, totals, paths).
        level: Logging level (default INFO).
    """
    extra_payload = {"op": op, "phase": phase}
    if extra:
        for k, v in extra.items():
            if k not in extra_payload:
                extra_payload[k] = v
    logger.log(level, message, extra={"extra_payload": extra_payload})
