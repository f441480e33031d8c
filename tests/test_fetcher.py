"""
test_fetcher.py — Tests for the requests-backed HTTP collaborator.

The requests.Session is a MagicMock, so no sockets are opened.
"""

from __future__ import annotations

import threading
from unittest.mock import MagicMock

import pytest
import requests

from yt_transcript_service.errors import FetchCancelledError, NetworkFailureError
from yt_transcript_service.fetcher import DEFAULT_TIMEOUT_SECS, RequestsFetcher


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _make_session(
    chunks: list[bytes],
    encoding: str | None = "utf-8",
    status_error=None,
    content_type: str = "text/html; charset=utf-8",
) -> MagicMock:
    """Build a mock Session whose get() yields a streaming response."""
    response = MagicMock()
    response.encoding = encoding
    response.headers = {"Content-Type": content_type}
    response.iter_content.return_value = iter(chunks)
    if status_error is not None:
        response.raise_for_status.side_effect = status_error
    response.__enter__ = MagicMock(return_value=response)
    response.__exit__ = MagicMock(return_value=False)

    session = MagicMock()
    session.headers = {}
    session.get.return_value = response
    return session


class TestRequestsFetcher:
    """Tests for RequestsFetcher.get_text()."""

    def test_returns_decoded_body(self) -> None:
        """Chunks are joined and decoded with the response encoding."""
        session = _make_session([b"caf", "é".encode("utf-8")])
        fetcher = RequestsFetcher(session=session)

        assert fetcher.get_text("https://example.com/") == "café"
        session.get.assert_called_once_with(
            "https://example.com/", timeout=DEFAULT_TIMEOUT_SECS, stream=True,
        )

    def test_missing_encoding_defaults_to_utf8(self) -> None:
        session = _make_session(
            ['{"k": "ü"}'.encode("utf-8")], encoding=None, content_type="application/json",
        )
        assert RequestsFetcher(session=session).get_text("https://x/") == '{"k": "ü"}'

    def test_html_without_charset_decoded_as_utf8(self) -> None:
        """requests' ISO-8859-1 guess for charset-less text/html is ignored."""
        session = _make_session(
            ["Beyoncé – Halo".encode("utf-8")], encoding="ISO-8859-1", content_type="text/html",
        )
        assert RequestsFetcher(session=session).get_text("https://x/") == "Beyoncé – Halo"

    def test_declared_charset_is_honoured(self) -> None:
        session = _make_session(
            [b"caf\xe9"], encoding="ISO-8859-1", content_type="text/plain; charset=ISO-8859-1",
        )
        assert RequestsFetcher(session=session).get_text("https://x/") == "café"

    def test_sets_headers(self) -> None:
        """User-Agent and Accept-Language are set on the session."""
        session = _make_session([])
        RequestsFetcher(session=session, user_agent="agent/1")
        assert session.headers["User-Agent"] == "agent/1"
        assert session.headers["Accept-Language"].startswith("en")

    def test_http_error_becomes_network_failure(self) -> None:
        session = _make_session([], status_error=requests.HTTPError("429 Too Many Requests"))
        with pytest.raises(NetworkFailureError) as excinfo:
            RequestsFetcher(session=session).get_text("https://x/")
        assert "429" in excinfo.value.message
        assert isinstance(excinfo.value.__cause__, requests.HTTPError)

    def test_connection_error_becomes_network_failure(self) -> None:
        session = _make_session([])
        session.get.side_effect = requests.ConnectionError("refused")
        with pytest.raises(NetworkFailureError):
            RequestsFetcher(session=session).get_text("https://x/")

    def test_cancelled_before_request(self) -> None:
        """A set event means no request is sent."""
        session = _make_session([b"x"])
        cancel = threading.Event()
        cancel.set()

        with pytest.raises(FetchCancelledError):
            RequestsFetcher(session=session).get_text("https://x/", cancel=cancel)
        session.get.assert_not_called()

    def test_cancelled_mid_download(self) -> None:
        """The event is checked between body chunks."""
        cancel = threading.Event()

        def _chunks():
            yield b"first"
            cancel.set()
            yield b"second"

        session = _make_session([])
        session.get.return_value.iter_content.return_value = _chunks()

        with pytest.raises(FetchCancelledError):
            RequestsFetcher(session=session).get_text("https://x/", cancel=cancel)

    def test_context_manager_closes_session(self) -> None:
        session = _make_session([])
        with RequestsFetcher(session=session):
            pass
        session.close.assert_called_once()
