"""
chunker.py — Group cleaned caption fragments into readable paragraphs.

Fragments are appended to a buffer (each followed by a single space).  When
the next fragment would bring the buffer to the target length, the buffer
is emitted as a paragraph first, so the triggering fragment opens the next
paragraph.  Only the last paragraph may run past the target.
"""

from __future__ import annotations

from collections.abc import Iterable

from yt_transcript_service.cleaner import clean_fragment
from yt_transcript_service.payload import CaptionSegment

DEFAULT_PARAGRAPH_LENGTH = 900


def chunk_paragraphs(
    segments: Iterable[CaptionSegment],
    target_length: int = DEFAULT_PARAGRAPH_LENGTH,
) -> list[str]:
    """
    Clean *segments* and join them into paragraphs of about *target_length*
    characters.

    Returns an empty list if every fragment cleans down to nothing.
    """
    paragraphs: list[str] = []
    buffer = ""

    for segment in segments:
        cleaned = clean_fragment(segment.text)
        if not cleaned:
            continue

        if buffer and len(buffer) + len(cleaned) >= target_length:
            paragraphs.append(buffer.strip())
            buffer = ""

        buffer += cleaned + " "

    if buffer:
        paragraphs.append(buffer.strip())

    return paragraphs
