"""
cleaner.py — Normalise a single caption fragment for reading.
"""

from __future__ import annotations

import html
import re

# Stage directions such as "[Music]" or "[Applause]".
_TAG_TOKEN_RE = re.compile(r"\[(?:[a-zA-Z ]{1,30})\]")

# Inline timestamps such as "1:23" or "01:02:03".
_TIMESTAMP_RE = re.compile(r"\b\d{1,2}:\d{2}(?::\d{2})?\b")

_MULTI_WHITESPACE_RE = re.compile(r"\s{2,}")

_ZERO_WIDTH_SPACE = "\u200b"


def clean_fragment(fragment: str | None) -> str:
    """
    Clean one caption fragment.

    Decodes HTML entities, turns line breaks into spaces, drops zero-width
    spaces, bracketed stage directions and inline timestamps, then collapses
    whitespace and trims.  Blank input gives "".
    """
    if not fragment or not fragment.strip():
        return ""

    text = html.unescape(fragment)
    text = text.replace("\n", " ").replace("\r", " ").replace(_ZERO_WIDTH_SPACE, "")
    text = _TAG_TOKEN_RE.sub("", text)
    text = _TIMESTAMP_RE.sub("", text)
    text = _MULTI_WHITESPACE_RE.sub(" ", text)
    return text.strip()
