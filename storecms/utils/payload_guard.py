from __future__ import annotations

import json
from typing import Any

from storecms.core.errors import PayloadTooLargeError, ValidationError
from storecms.core.settings import settings


def enforce_content_json_size(content_json: Any, *, limit_kb: float | None = None) -> None:
    """
    Enforces a maximum serialized JSON size (in KB) for a contentJson document.
    Raises PayloadTooLargeError (413) on overflow, ValidationError (400) if
    the value cannot be serialized at all.
    """
    if content_json is None:
        return
    if limit_kb is None:
        limit_kb = float(settings.MAX_CONTENT_JSON_KB or 0)
    if limit_kb <= 0:
        return
    try:
        # compact JSON to measure true wire-size
        b = json.dumps(content_json, ensure_ascii=False, separators=(",", ":")).encode("utf-8")
    except (TypeError, ValueError):
        raise ValidationError.for_field("contentJson", "contentJson is not serializable JSON")
    kb = len(b) / 1024.0
    if kb > limit_kb:
        raise PayloadTooLargeError(
            f"Payload too large: contentJson is {kb:.1f}KB, limit is {limit_kb:.0f}KB",
            details=[{"field": "contentJson", "message": f"limit is {limit_kb:.0f}KB"}],
        )
