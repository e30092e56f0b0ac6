"""Sentence cleanup for LLM-generated cards."""

import re

_QUOTES_RE = re.compile(r"[\"']")
# Emoji and everything else outside the Basic Multilingual Plane
_ASTRAL_RE = re.compile("[\U00010000-\U0010FFFF]")
_TRAILING_PUNCT_RE = re.compile(r"[?!…]+$")


def normalize_da(text: object) -> str:
    """Clean one generated sentence so it reads as a plain '~다' statement.

    Removes quote characters and emoji, drops trailing question/exclamation
    marks and ellipses. Returns ``""`` when nothing is left.
    """
    s = str(text or "").strip()
    s = _QUOTES_RE.sub("", s)
    s = _ASTRAL_RE.sub("", s)
    s = _TRAILING_PUNCT_RE.sub("", s.strip())
    return s.strip()


def card_text(item: object) -> str:
    """Pull the text out of a ``{"text": ...}`` card or a bare string."""
    if isinstance(item, dict):
        return normalize_da(item.get("text", ""))
    if isinstance(item, str):
        return normalize_da(item)
    return ""
