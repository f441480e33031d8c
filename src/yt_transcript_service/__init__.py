"""
yt_transcript_service — Readable, paragraphed YouTube transcripts.

Public API:
    fetch_transcript()      High-level one-call interface (URL → TranscriptResult).
    resolve_video_id()      Parse a YouTube URL or validate a bare video ID.
    extract_player_metadata()  Pull title and caption tracks out of a watch page.
    select_track()          Choose a caption track for a preferred language.
    parse_caption_payload() Parse a json3 caption payload into segments.
    clean_fragment()        Normalise one caption fragment.
    chunk_paragraphs()      Group cleaned fragments into paragraphs.
    RequestsFetcher         Default HTTP collaborator.
    TranscriptResult        Frozen dataclass holding the final transcript.

Exception hierarchy (all importable from this package):
    TranscriptError                 Base exception for all pipeline errors.
    ├── InvalidLocatorError         Input holds no valid video ID.
    ├── MetadataNotFoundError       Watch page had no player response.
    ├── NoCaptionsAvailableError    Video publishes no usable caption tracks.
    ├── TranscriptUnavailableError  Captions contained no readable text.
    ├── NetworkFailureError         A request to YouTube failed.
    └── FetchCancelledError         The caller cancelled the request.

Usage:
    from yt_transcript_service import fetch_transcript
    result = fetch_transcript("https://www.youtube.com/watch?v=dQw4w9WgXcQ")
    print(result.full_text)
"""

from yt_transcript_service.chunker import chunk_paragraphs
from yt_transcript_service.cleaner import clean_fragment
from yt_transcript_service.errors import (
    FetchCancelledError,
    InvalidLocatorError,
    MetadataNotFoundError,
    NetworkFailureError,
    NoCaptionsAvailableError,
    TranscriptError,
    TranscriptUnavailableError,
)
from yt_transcript_service.extractor import fetch_transcript
from yt_transcript_service.fetcher import Fetcher, RequestsFetcher
from yt_transcript_service.locator import resolve_video_id
from yt_transcript_service.metadata import CaptionTrack, PlayerMetadata, extract_player_metadata
from yt_transcript_service.models import TranscriptResult
from yt_transcript_service.payload import CaptionSegment, parse_caption_payload
from yt_transcript_service.selection import select_track

__all__ = [
    "fetch_transcript",
    "resolve_video_id",
    "extract_player_metadata",
    "select_track",
    "parse_caption_payload",
    "clean_fragment",
    "chunk_paragraphs",
    "Fetcher",
    "RequestsFetcher",
    "CaptionTrack",
    "CaptionSegment",
    "PlayerMetadata",
    "TranscriptResult",
    "TranscriptError",
    "InvalidLocatorError",
    "MetadataNotFoundError",
    "NoCaptionsAvailableError",
    "TranscriptUnavailableError",
    "NetworkFailureError",
    "FetchCancelledError",
]
