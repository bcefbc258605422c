from __future__ import annotations

import re

_WHITESPACE = re.compile(r"\s+")
_UNSAFE = re.compile(r"[^\w-]+", re.ASCII)
_REPEATED_HYPHENS = re.compile(r"-{2,}")


def slugify(name: str | None) -> str:
    if not name:
        return ""

    value = _WHITESPACE.sub("-", str(name).lower())
    value = _UNSAFE.sub("", value)
    value = _REPEATED_HYPHENS.sub("-", value)
    return value.strip("-")
