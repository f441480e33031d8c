"""
extractor.py — The transcript extraction pipeline.

This is the heart of yt-transcript-service.  One call walks a fixed,
forward-only sequence of stages:

    resolving locator → fetching page → extracting metadata →
    selecting track → fetching captions → parsing segments → cleaning → done

Any stage may fail with a TranscriptError subclass; the first failure aborts
the request and no partial result is returned.  There are no retries.

The two network calls go through an injected Fetcher (see fetcher.py), so
the pipeline itself never touches sockets.  Formatting helpers for the CLI
and API live at the bottom of this module.
"""

from __future__ import annotations

import enum
import logging
import threading
from datetime import datetime, timezone

from yt_transcript_service.chunker import DEFAULT_PARAGRAPH_LENGTH, chunk_paragraphs
from yt_transcript_service.errors import FetchCancelledError, TranscriptUnavailableError
from yt_transcript_service.fetcher import Fetcher, RequestsFetcher
from yt_transcript_service.locator import resolve_video_id
from yt_transcript_service.metadata import ASR_KIND, CaptionTrack, extract_player_metadata
from yt_transcript_service.models import TranscriptResult
from yt_transcript_service.payload import parse_caption_payload
from yt_transcript_service.selection import select_track

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

# `hl=en` keeps the page (and the default title) in English.
WATCH_URL_TEMPLATE = "https://www.youtube.com/watch?v={video_id}&hl=en"

CAPTION_FORMAT = "json3"

UNKNOWN_LANGUAGE = "unknown"


class Stage(enum.Enum):
    """Pipeline stages, in the order they run."""
    RESOLVING_LOCATOR = "resolving locator"
    FETCHING_PAGE = "fetching page"
    EXTRACTING_METADATA = "extracting metadata"
    SELECTING_TRACK = "selecting track"
    FETCHING_CAPTIONS = "fetching captions"
    PARSING_SEGMENTS = "parsing segments"
    CLEANING = "cleaning"
    DONE = "done"


# ---------------------------------------------------------------------------
# URL builders
# ---------------------------------------------------------------------------

def build_watch_url(video_id: str) -> str:
    """Watch page URL for a canonical video ID."""
    return WATCH_URL_TEMPLATE.format(video_id=video_id)


def build_caption_url(track: CaptionTrack) -> str:
    """
    Caption payload URL for *track*.

    Appends `fmt=json3` unless the track URL already pins a format.
    """
    url = track.base_url
    if "fmt=" in url.lower():
        return url
    separator = "&" if "?" in url else "?"
    return f"{url}{separator}fmt={CAPTION_FORMAT}"


# ---------------------------------------------------------------------------
# Pipeline
# ---------------------------------------------------------------------------

def _enter(stage: Stage, video_id: str | None = None) -> None:
    logger.debug("[%s] %s", video_id or "-", stage.value)


def _fetch(fetcher: Fetcher, url: str, cancel: threading.Event | None, stage: Stage) -> str:
    """Run one fetch, honouring *cancel* on both sides of the call."""
    if cancel is not None and cancel.is_set():
        raise FetchCancelledError(stage.value)
    try:
        body = fetcher.get_text(url, cancel=cancel)
    except FetchCancelledError:
        raise FetchCancelledError(stage.value) from None
    if cancel is not None and cancel.is_set():
        raise FetchCancelledError(stage.value)
    return body


def fetch_transcript(
    locator: str,
    preferred_language: str | None = None,
    cancel: threading.Event | None = None,
    *,
    fetcher: Fetcher | None = None,
    paragraph_length: int = DEFAULT_PARAGRAPH_LENGTH,
) -> TranscriptResult:
    """
    Fetch a cleaned, paragraphed transcript for a YouTube video.

    Args:
        locator:            A YouTube URL or raw 11-character video ID.
        preferred_language: Optional language code (e.g. "es").  Falls back
                            to a translated track, then a manual track, then
                            whatever is first.
        cancel:             Optional event; if set at either fetch point the
                            whole request is abandoned.
        fetcher:            HTTP collaborator.  Defaults to a fresh
                            RequestsFetcher that is closed afterwards.
        paragraph_length:   Target paragraph size in characters.

    Returns:
        A TranscriptResult.

    Raises:
        InvalidLocatorError:        The locator holds no valid video ID.
        MetadataNotFoundError:      The watch page had no player response.
        NoCaptionsAvailableError:   The video publishes no usable tracks.
        TranscriptUnavailableError: The captions contained no readable text.
        NetworkFailureError:        A request failed.
        FetchCancelledError:        *cancel* was set.
    """
    _enter(Stage.RESOLVING_LOCATOR)
    video_id = resolve_video_id(locator)

    if fetcher is None:
        with RequestsFetcher() as default_fetcher:
            return _run(video_id, preferred_language, cancel, default_fetcher, paragraph_length)
    return _run(video_id, preferred_language, cancel, fetcher, paragraph_length)


def _run(
    video_id: str,
    preferred_language: str | None,
    cancel: threading.Event | None,
    fetcher: Fetcher,
    paragraph_length: int,
) -> TranscriptResult:
    _enter(Stage.FETCHING_PAGE, video_id)
    html = _fetch(fetcher, build_watch_url(video_id), cancel, Stage.FETCHING_PAGE)

    _enter(Stage.EXTRACTING_METADATA, video_id)
    metadata = extract_player_metadata(html, video_id)

    _enter(Stage.SELECTING_TRACK, video_id)
    track = select_track(metadata.tracks, preferred_language)
    track_type = "auto" if track.kind == ASR_KIND else "manual"
    logger.info(
        "Selected %s caption track (lang=%s) for %s",
        track_type,
        track.language_code or UNKNOWN_LANGUAGE,
        video_id,
    )

    _enter(Stage.FETCHING_CAPTIONS, video_id)
    payload = _fetch(fetcher, build_caption_url(track), cancel, Stage.FETCHING_CAPTIONS)

    _enter(Stage.PARSING_SEGMENTS, video_id)
    segments = parse_caption_payload(payload)
    if not segments:
        raise TranscriptUnavailableError("No transcript segments were returned for this video.")

    _enter(Stage.CLEANING, video_id)
    paragraphs = chunk_paragraphs(segments, paragraph_length)
    if not paragraphs:
        raise TranscriptUnavailableError("Transcript text could not be cleaned.")

    _enter(Stage.DONE, video_id)
    return TranscriptResult(
        video_id=video_id,
        title=metadata.title,
        source_language=track.language_code or UNKNOWN_LANGUAGE,
        track_type=track_type,
        paragraphs=tuple(paragraphs),
        full_text="\n\n".join(paragraphs),
        retrieved_at=datetime.now(timezone.utc),
    )


# ---------------------------------------------------------------------------
# Formatting helpers
# ---------------------------------------------------------------------------

def format_text(result: TranscriptResult) -> str:
    """Plain text: paragraphs separated by blank lines."""
    return result.full_text


def format_json(result: TranscriptResult) -> dict:
    """JSON-serialisable dict of the whole result."""
    return result.to_dict()


def format_doc(result: TranscriptResult) -> str:
    """
    Readable markdown document: title heading, one metadata line, then the
    paragraphs separated by blank lines.
    """
    meta = (
        f"_Video {result.video_id} · language: {result.source_language} · "
        f"{result.track_type} captions_"
    )
    return "\n\n".join([f"# {result.title}", meta, *result.paragraphs])
