"""Lightweight structured logging for provider calls and retries."""

from __future__ import annotations

import json
import sys
from datetime import datetime, timezone
from typing import Any, Dict


def log_event(event: str, payload: Dict[str, Any] | None = None, *, level: str = "info") -> None:
    """Emit a structured JSON log line to stderr.

    Args:
        event (str): Event name, e.g. ``llm_retry``.
        payload (Dict[str, Any] | None): Extra fields merged into the log line.
        level (str): Severity label, ``info`` or ``warning``.
    """
    data = {
        "event": event,
        "level": level,
        "ts": datetime.now(timezone.utc).isoformat(),
    }
    if payload:
        data.update(payload)
    print(json.dumps(data, ensure_ascii=False, default=str), file=sys.stderr)
