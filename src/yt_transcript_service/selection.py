"""
selection.py — Pick one caption track for the requested language.

A strict waterfall; the first rule that yields a track wins and page order
breaks ties:

    1. A track in the preferred language (case-insensitive).
    2. The first translatable track, re-pointed at the preferred language
       via YouTube's `tlang` parameter.
    3. The first manually authored (non-"asr") track.
    4. The first track, whatever it is.

Rule 2 relies on YouTube's translation endpoint behaving as observed;
treat it as best-effort.
"""

from __future__ import annotations

from collections.abc import Sequence

from yt_transcript_service.errors import NoCaptionsAvailableError
from yt_transcript_service.metadata import CaptionTrack


def select_track(
    tracks: Sequence[CaptionTrack],
    preferred_language: str | None = None,
) -> CaptionTrack:
    """
    Choose the best caption track.

    Args:
        tracks:             Tracks in page order.
        preferred_language: Optional language code such as "es".  Blank
                            strings count as no preference.

    Returns:
        The chosen track, or a translated copy of one.

    Raises:
        NoCaptionsAvailableError: If *tracks* is empty.
    """
    if not tracks:
        raise NoCaptionsAvailableError("Caption metadata is empty.")

    if preferred_language and preferred_language.strip():
        wanted = preferred_language.strip()
        for track in tracks:
            if track.language_code and track.language_code.lower() == wanted.lower():
                return track

        for track in tracks:
            if track.translatable:
                return track.with_translation(wanted)

    for track in tracks:
        if not track.is_auto_generated:
            return track

    return tracks[0]
