# storecms/utils/slugify.py
from __future__ import annotations

import re

SLUG_PATTERN = r"^[a-z0-9]+(?:-[a-z0-9]+)*$"
SLUG_RE = re.compile(SLUG_PATTERN)

_SEPARATORS = re.compile(r"[\s_]+")
_DISALLOWED = re.compile(r"[^a-z0-9-]")
_HYPHEN_RUNS = re.compile(r"-{2,}")


def slugify(text: str | None) -> str:
    """
    "Power Plunge™ Portable" -> "power-plunge-portable".
    Returns "" when nothing usable is left (e.g. "™®©").
    """
    if not text:
        return ""
    s = text.strip().lower()
    s = _SEPARATORS.sub("-", s)
    s = _DISALLOWED.sub("", s)
    s = _HYPHEN_RUNS.sub("-", s)
    return s.strip("-")


def is_valid_slug(value: str) -> bool:
    return bool(SLUG_RE.match(value or ""))
