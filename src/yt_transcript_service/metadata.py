"""
metadata.py — Mine the watch page for the embedded player response.

YouTube's watch page assigns a large JSON object to a page-global variable
(`ytInitialPlayerResponse = {...};`).  That object carries the video title
and the list of caption tracks, each with a signed `baseUrl` we can fetch
directly.  The format is undocumented and changes without notice, so all
page scraping lives in find_player_response() and everything else works on
the decoded dict.

Missing keys are normal here: every lookup goes through _dig(), which
returns None instead of raising.
"""

from __future__ import annotations

import json
import logging
import re
from dataclasses import dataclass, replace
from typing import Any
from urllib.parse import quote

from yt_transcript_service.errors import MetadataNotFoundError, NoCaptionsAvailableError

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

# Locates the assignment; the object itself is decoded with raw_decode so
# nested braces and strings containing "};" are handled correctly.
_PLAYER_RESPONSE_START = re.compile(r"ytInitialPlayerResponse\s*=\s*(?=\{)")

DEFAULT_TITLE = "Unknown Title"

# Caption track kind YouTube uses for auto-generated (speech recognition) tracks.
ASR_KIND = "asr"


# ---------------------------------------------------------------------------
# Data structures
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class CaptionTrack:
    """
    One caption stream advertised by the player response.

    Attributes:
        base_url:      Signed URL for the timed-text payload (never empty).
        language_code: BCP-47-ish code such as "en" or "pt-BR", if given.
        kind:          "asr" for auto-generated tracks, "" for manual ones.
        translatable:  Whether YouTube can machine-translate this track.
    """
    base_url: str
    language_code: str | None = None
    kind: str = ""
    translatable: bool = False

    @property
    def is_auto_generated(self) -> bool:
        return self.kind.lower() == ASR_KIND

    def with_translation(self, language: str) -> CaptionTrack:
        """
        Return a copy whose URL asks YouTube to translate into *language*.

        The original track is left untouched.
        """
        separator = "&" if "?" in self.base_url else "?"
        url = f"{self.base_url}{separator}tlang={quote(language, safe='')}"
        return replace(self, base_url=url)


@dataclass(frozen=True)
class PlayerMetadata:
    """Title plus caption tracks pulled from one watch page."""
    title: str
    tracks: tuple[CaptionTrack, ...]


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _dig(data: Any, *keys: str) -> Any:
    """Walk nested dicts by *keys*, returning None at the first gap."""
    for key in keys:
        if not isinstance(data, dict):
            return None
        data = data.get(key)
    return data


def find_player_response(html: str) -> dict | None:
    """
    Locate and decode the `ytInitialPlayerResponse` object in *html*.

    Returns None if the assignment is missing or its value isn't a JSON
    object.  This is the only function that knows about the page format.
    """
    match = _PLAYER_RESPONSE_START.search(html)
    if match is None:
        return None

    try:
        value, _ = json.JSONDecoder().raw_decode(html, match.end())
    except json.JSONDecodeError as exc:
        logger.debug("Player response found but not decodable: %s", exc)
        return None

    return value if isinstance(value, dict) else None


def _parse_track(entry: Any) -> CaptionTrack:
    """Build a CaptionTrack from one captionTracks entry."""
    base_url = _dig(entry, "baseUrl")
    if not isinstance(base_url, str) or not base_url:
        raise NoCaptionsAvailableError("Encountered caption track without a base URL.")

    language_code = _dig(entry, "languageCode")
    kind = _dig(entry, "kind")

    return CaptionTrack(
        base_url=base_url,
        language_code=language_code if isinstance(language_code, str) and language_code else None,
        kind=kind if isinstance(kind, str) else "",
        translatable=_dig(entry, "isTranslatable") is True,
    )


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def extract_player_metadata(html: str, video_id: str = "") -> PlayerMetadata:
    """
    Extract the video title and caption tracks from a watch page body.

    Args:
        html:     The watch page HTML.
        video_id: Used only in error messages.

    Returns:
        PlayerMetadata with the title (or "Unknown Title") and tracks in
        page order.  The track tuple may be empty; the selector decides
        whether that is fatal.

    Raises:
        MetadataNotFoundError:     No embedded player response in the page.
        NoCaptionsAvailableError:  The caption track list is absent, or a
                                   track has no baseUrl.
    """
    player = find_player_response(html)
    if player is None:
        logger.warning("Player response payload not found for video %s", video_id)
        raise MetadataNotFoundError(video_id)

    title = _dig(player, "videoDetails", "title")
    if not isinstance(title, str) or not title:
        title = DEFAULT_TITLE

    raw_tracks = _dig(player, "captions", "playerCaptionsTracklistRenderer", "captionTracks")
    if not isinstance(raw_tracks, list):
        raise NoCaptionsAvailableError()

    tracks = tuple(_parse_track(entry) for entry in raw_tracks)
    logger.debug("Found %d caption track(s) for %r", len(tracks), title)
    return PlayerMetadata(title=title, tracks=tracks)
