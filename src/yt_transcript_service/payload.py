"""
payload.py — Parse YouTube's timed-text "json3" payload into segments.

The payload looks like:

    {"events": [
        {"tStartMs": 1200, "dDurationMs": 2400,
         "segs": [{"utf8": "never gonna"}, {"utf8": " give you up"}]},
        {"tStartMs": 3600, "aAppend": 1, "segs": [{"utf8": "\\n"}]},
        ...
    ]}

Events without `segs` (window/style definitions) are skipped, as are events
whose text is blank once joined and trimmed.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from datetime import timedelta

from yt_transcript_service.errors import TranscriptUnavailableError


@dataclass(frozen=True)
class CaptionSegment:
    """
    One caption cue.

    Attributes:
        text:  Trimmed, non-empty caption text (not yet cleaned).
        start: Offset from the start of the video, if the event had one.
    """
    text: str
    start: timedelta | None = None


def _event_text(segs: list) -> str:
    parts = []
    for seg in segs:
        if not isinstance(seg, dict):
            continue
        utf8 = seg.get("utf8")
        if isinstance(utf8, str) and utf8:
            parts.append(utf8)
    return "".join(parts).strip()


def _start_offset(start_ms) -> timedelta | None:
    """tStartMs as a timedelta; None when absent or not a usable number."""
    # bool is an int subclass; it's never a real offset.
    if not isinstance(start_ms, (int, float)) or isinstance(start_ms, bool):
        return None
    try:
        return timedelta(milliseconds=start_ms)
    except (OverflowError, ValueError):
        # inf, nan, or beyond timedelta's range
        return None


def parse_caption_payload(payload: str) -> list[CaptionSegment]:
    """
    Parse a json3 caption payload into ordered segments.

    Args:
        payload: The raw response body of the caption request.

    Returns:
        Segments in event order.  Empty if the payload has no `events`
        array; the caller decides whether that is fatal.

    Raises:
        TranscriptUnavailableError: If the body isn't JSON at all.
    """
    try:
        data = json.loads(payload)
    except json.JSONDecodeError as exc:
        raise TranscriptUnavailableError("Caption payload is not valid JSON.") from exc

    events = data.get("events") if isinstance(data, dict) else None
    if not isinstance(events, list):
        return []

    segments: list[CaptionSegment] = []
    for event in events:
        if not isinstance(event, dict):
            continue
        segs = event.get("segs")
        if not isinstance(segs, list):
            continue

        text = _event_text(segs)
        if not text:
            continue

        segments.append(CaptionSegment(text=text, start=_start_offset(event.get("tStartMs"))))

    return segments
