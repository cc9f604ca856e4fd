"""Text utility helpers."""

from __future__ import annotations

import re

_WHITESPACE_RE = re.compile(r"\s+")


def normalize_whitespace(value: str) -> str:
    """Collapse repeated whitespace and trim ends."""
    return _WHITESPACE_RE.sub(" ", value).strip()


def split_lines(value: str | None) -> list[str]:
    """Split source text on newlines; anything that is not a string is empty."""
    if not isinstance(value, str) or not value:
        return []
    return [line.rstrip("\r") for line in value.split("\n")]


def ellipsize(value: str, width: int) -> str:
    """Shorten long strings while preserving suffix visibility."""
    if width <= 0:
        return ""
    if len(value) <= width:
        return value
    if width <= 1:
        return "…"
    return f"{value[: width - 1]}…"
