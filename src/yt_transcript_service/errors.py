"""
errors.py — Exception hierarchy for yt-transcript-service.

Every exception carries an `http_status` attribute so the FastAPI error
handler can translate pipeline failures directly into the correct HTTP
response code without a separate mapping table.  Each class also exposes a
stable `kind` string that API clients can switch on.

The pipeline is first-failure-wins: whichever stage detects a problem raises
one of these and nothing downstream runs.

Hierarchy:
    TranscriptError (base, 500)
    ├── InvalidLocatorError (400)
    ├── MetadataNotFoundError (404)
    ├── NoCaptionsAvailableError (404)
    ├── TranscriptUnavailableError (404)
    ├── NetworkFailureError (503)
    └── FetchCancelledError (499)
"""


# ---------------------------------------------------------------------------
# Base exception
# ---------------------------------------------------------------------------

class TranscriptError(Exception):
    """
    Root exception for all transcript pipeline errors.

    Attributes:
        message:     Human-readable description of what went wrong.
        http_status: Suggested HTTP status code for the API layer.
        kind:        Short machine-readable error category.
    """

    kind = "transcript_error"

    def __init__(self, message: str, http_status: int = 500) -> None:
        super().__init__(message)
        self.message = message
        self.http_status = http_status


# ---------------------------------------------------------------------------
# Specific error cases
# ---------------------------------------------------------------------------

class InvalidLocatorError(TranscriptError):
    """
    Raised when a URL or raw string can't be resolved to an 11-character
    video ID.  Maps to HTTP 400.
    """

    kind = "invalid_locator"

    def __init__(self, locator: str) -> None:
        super().__init__(
            message=f"Unable to determine a valid YouTube video id from: {locator!r}",
            http_status=400,
        )
        self.locator = locator


class MetadataNotFoundError(TranscriptError):
    """
    Raised when the watch page doesn't contain the embedded player response.

    Usually means YouTube served a consent wall, an error page, or changed
    its page layout.  Maps to HTTP 404.
    """

    kind = "metadata_not_found"

    def __init__(self, video_id: str) -> None:
        super().__init__(
            message=f"Unable to locate caption metadata for video: {video_id}",
            http_status=404,
        )
        self.video_id = video_id


class NoCaptionsAvailableError(TranscriptError):
    """
    Raised when the video publishes no usable caption tracks.

    Covers a missing track list, an empty one, and a track entry without a
    `baseUrl`.  Maps to HTTP 404.
    """

    kind = "no_captions_available"

    def __init__(self, message: str = "No captions are published for this video.") -> None:
        super().__init__(message=message, http_status=404)


class TranscriptUnavailableError(TranscriptError):
    """
    Raised when a caption track was downloaded but yielded no usable text.

    Either the payload had no segments, or every segment cleaned down to
    nothing.  Maps to HTTP 404.
    """

    kind = "transcript_unavailable"

    def __init__(self, message: str = "No transcript segments were returned for this video.") -> None:
        super().__init__(message=message, http_status=404)


class NetworkFailureError(TranscriptError):
    """
    Raised when the page or caption request fails at the transport level
    or returns a non-success status.  Maps to HTTP 503.
    """

    kind = "network_failure"

    def __init__(self, url: str, reason: str = "") -> None:
        detail = f": {reason}" if reason else ""
        super().__init__(
            message=f"Unable to reach YouTube ({url}){detail}",
            http_status=503,
        )
        self.url = url


class FetchCancelledError(TranscriptError):
    """
    Raised when the caller's cancellation signal is set at a fetch point.

    No partial result is ever returned.  Maps to HTTP 499 (client closed
    request).
    """

    kind = "cancelled"

    def __init__(self, stage: str) -> None:
        super().__init__(
            message=f"Transcript request cancelled during {stage}",
            http_status=499,
        )
        self.stage = stage
