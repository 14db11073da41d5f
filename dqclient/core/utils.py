from __future__ import annotations
import json
import os
from typing import Any, Optional

from .constants import _LABEL_ELLIPSIS


def _truncate_label(text: Any, width: int) -> str:
    value = str(text)
    if len(value) > width:
        return value[:width] + _LABEL_ELLIPSIS
    return value


def _safe_filename(name: Optional[str], fallback: str) -> str:
    candidate = (name or fallback).strip() or fallback
    candidate = os.path.basename(candidate)
    candidate = candidate.replace("..", "_")
    return candidate or fallback


def _file_extension(filename: str) -> str:
    _, ext = os.path.splitext(filename or "")
    return ext.lower()


def _json_bytes(data: Any) -> bytes:
    return json.dumps(data, indent=2, ensure_ascii=False).encode("utf-8")


def _error_message_from_body(body: Any) -> Optional[str]:
    """Pull a human readable message out of an error response body."""
    if isinstance(body, dict):
        for key in ("message", "detail", "error"):
            value = body.get(key)
            if isinstance(value, str) and value.strip():
                return value.strip()
    if isinstance(body, str) and body.strip():
        return body.strip()[:500]
    return None
