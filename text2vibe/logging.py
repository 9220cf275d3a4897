"""Utilities for structured logging in text2vibe."""

from __future__ import annotations

import datetime as _dt
import json
import os
from typing import Any, Dict, Optional

_ANALYZER_LOG_PATH = "meta/output/text2vibe/analyzer.jsonl"


def log_jsonl(path: str, record: Dict[str, Any]) -> None:
    """Append *record* as a JSON line to *path*.

    The target directory is created on demand and each record is written as
    UTF-8 JSON followed by a newline so that downstream tooling can consume
    the log as a JSONL stream.
    """

    directory = os.path.dirname(path)
    if directory:
        os.makedirs(directory, exist_ok=True)

    with open(path, "a", encoding="utf-8") as handle:
        handle.write(json.dumps(record, sort_keys=True, ensure_ascii=False))
        handle.write("\n")


def log_analysis(record: Dict[str, Any], *, path: Optional[str] = None) -> None:
    """Append *record* to the analyzer log stream."""

    payload = dict(record)
    payload.setdefault("timestamp", _dt.datetime.now(tz=_dt.timezone.utc).isoformat())
    log_jsonl(path or os.getenv("TEXT2VIBE_LOG_PATH") or _ANALYZER_LOG_PATH, payload)
