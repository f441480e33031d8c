"""
locator.py — Turn whatever the user pasted into a canonical video ID.

Accepted inputs include a bare 11-character ID, any URL carrying a `v=`
query parameter, short links where the ID is the tail of the path
(youtu.be, /embed/, /shorts/, /live/), and free text that merely contains
`v=<id>` or `/<id>` somewhere.
"""

from __future__ import annotations

import re
from urllib.parse import parse_qs, urlparse

from yt_transcript_service.errors import InvalidLocatorError

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

VIDEO_ID_LENGTH = 11

# A video ID is exactly 11 characters from the base64url alphabet.
_VIDEO_ID_PATTERN = re.compile(r"^[A-Za-z0-9_-]{11}$")

# Last-resort scan: an ID right after "v=" or a path separator.
_EMBEDDED_ID_PATTERN = re.compile(r"(?:v=|/)([0-9A-Za-z_-]{11})")


def is_valid_video_id(candidate: str | None) -> bool:
    """Return True if *candidate* is exactly a canonical 11-character ID."""
    return bool(candidate) and _VIDEO_ID_PATTERN.match(candidate) is not None


def _from_url(text: str) -> str | None:
    """
    Try the URL-based strategies: the `v` query parameter first, then the
    trailing 11 characters of the last non-empty path segment.

    Returns None when *text* isn't an absolute URL or neither strategy fits.
    """
    try:
        parsed = urlparse(text)
    except ValueError:
        # e.g. an unbalanced "[" in the host
        return None
    if not parsed.scheme or not parsed.netloc:
        return None

    values = parse_qs(parsed.query).get("v")
    if values and is_valid_video_id(values[0]):
        return values[0]

    segments = [seg for seg in parsed.path.split("/") if seg]
    if segments and len(segments[-1]) >= VIDEO_ID_LENGTH:
        candidate = segments[-1][-VIDEO_ID_LENGTH:]
        if is_valid_video_id(candidate):
            return candidate

    return None


def resolve_video_id(raw: str) -> str:
    """
    Resolve a URL or raw ID string to the canonical 11-character video ID.

    Strategies are tried in order and the first hit wins:
        1. The trimmed input already is a valid ID.
        2. It is an absolute URL with a valid `v` query parameter.
        3. It is an absolute URL whose last path segment ends in a valid ID.
        4. A scan for `v=` or `/` followed by 11 ID characters.

    Args:
        raw: A YouTube URL, short link, or bare video ID.

    Returns:
        The 11-character video ID.

    Raises:
        InvalidLocatorError: If the input is blank or no strategy matches.
    """
    if raw is None or not raw.strip():
        raise InvalidLocatorError(raw or "")

    text = raw.strip()
    if is_valid_video_id(text):
        return text

    video_id = _from_url(text)
    if video_id:
        return video_id

    match = _EMBEDDED_ID_PATTERN.search(text)
    if match and is_valid_video_id(match.group(1)):
        return match.group(1)

    raise InvalidLocatorError(raw)
