"""
fetcher.py — The HTTP collaborator used by the extraction pipeline.

The pipeline only ever needs "GET this URL and give me the body as text",
so that's the whole interface.  Tests swap in an in-memory fake; production
uses RequestsFetcher.
"""

from __future__ import annotations

import logging
import threading
from typing import Protocol

import requests

from yt_transcript_service.errors import FetchCancelledError, NetworkFailureError

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

DEFAULT_TIMEOUT_SECS = 20
DEFAULT_USER_AGENT = "TranscriptDownloader/1.0 (+https://github.com)"

# Body is read in chunks so a cancellation can interrupt a slow download.
_CHUNK_SIZE = 64 * 1024


def _body_encoding(response: requests.Response) -> str:
    """
    Charset declared in Content-Type, else UTF-8.

    requests reports ISO-8859-1 for any text/* response without a charset;
    YouTube pages and caption payloads are UTF-8.
    """
    content_type = response.headers.get("Content-Type", "")
    if "charset=" in content_type.lower() and response.encoding:
        return response.encoding
    return "utf-8"


class Fetcher(Protocol):
    """Anything that can GET a URL and return its body as text."""

    def get_text(self, url: str, cancel: threading.Event | None = None) -> str:
        ...


class RequestsFetcher:
    """
    Fetcher backed by a requests.Session.

    One request per call, no retries.  Transport errors and non-2xx
    responses become NetworkFailureError; a set *cancel* event becomes
    FetchCancelledError.

    Usage:
        with RequestsFetcher() as fetcher:
            html = fetcher.get_text("https://www.youtube.com/watch?v=...")
    """

    def __init__(
        self,
        session: requests.Session | None = None,
        timeout: float = DEFAULT_TIMEOUT_SECS,
        user_agent: str = DEFAULT_USER_AGENT,
    ) -> None:
        self.session = session or requests.Session()
        self.session.headers.update({
            "User-Agent": user_agent,
            "Accept-Language": "en-US,en;q=0.9",
        })
        self.timeout = timeout

    def get_text(self, url: str, cancel: threading.Event | None = None) -> str:
        """
        GET *url* and return the decoded body.

        Raises:
            NetworkFailureError:  Connection error, timeout, or HTTP error status.
            FetchCancelledError:  *cancel* was set before or during the download.
        """
        if cancel is not None and cancel.is_set():
            raise FetchCancelledError("fetch")

        try:
            with self.session.get(url, timeout=self.timeout, stream=True) as response:
                response.raise_for_status()
                chunks = []
                for chunk in response.iter_content(chunk_size=_CHUNK_SIZE):
                    if cancel is not None and cancel.is_set():
                        raise FetchCancelledError("fetch")
                    chunks.append(chunk)
                encoding = _body_encoding(response)
        except requests.RequestException as exc:
            logger.debug("GET %s failed: %s", url, exc)
            raise NetworkFailureError(url, reason=str(exc)) from exc

        return b"".join(chunks).decode(encoding, errors="replace")

    def close(self) -> None:
        self.session.close()

    def __enter__(self) -> RequestsFetcher:
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()
