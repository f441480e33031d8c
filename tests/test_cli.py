"""
test_cli.py — Tests for the `yt-transcript` command group.

Covers:
    - Default output of `get` (plain paragraphs on stdout)
    - --format json / doc
    - --output writing a file (the "download as txt" export)
    - --lang and --paragraph-length being forwarded
    - Clean error output and exit code on TranscriptError
    - `serve` handing off to uvicorn
"""

from __future__ import annotations

import json
from datetime import datetime, timezone
from unittest.mock import MagicMock, patch

from click.testing import CliRunner

from yt_transcript_service.cli import main
from yt_transcript_service.errors import InvalidLocatorError, NoCaptionsAvailableError
from yt_transcript_service.models import TranscriptResult

_SAMPLE_RESULT = TranscriptResult(
    video_id="dQw4w9WgXcQ",
    title="Never Gonna Give You Up",
    source_language="en",
    track_type="manual",
    paragraphs=("Hello world", "Second paragraph"),
    full_text="Hello world\n\nSecond paragraph",
    retrieved_at=datetime(2024, 1, 1, tzinfo=timezone.utc),
)


# ---------------------------------------------------------------------------
# Subcommand: get
# ---------------------------------------------------------------------------

class TestGetCommand:
    """Tests for `yt-transcript get` with mocked extraction."""

    @patch("yt_transcript_service.cli.fetch_transcript")
    def test_default_prints_text(self, mock_fetch: MagicMock) -> None:
        """Without options the paragraphs go to stdout."""
        mock_fetch.return_value = _SAMPLE_RESULT

        result = CliRunner().invoke(main, ["get", "https://youtu.be/dQw4w9WgXcQ"])

        assert result.exit_code == 0
        assert result.output == "Hello world\n\nSecond paragraph\n"
        mock_fetch.assert_called_once_with(
            "https://youtu.be/dQw4w9WgXcQ",
            preferred_language=None,
            paragraph_length=900,
        )

    @patch("yt_transcript_service.cli.fetch_transcript")
    def test_lang_and_paragraph_length_forwarded(self, mock_fetch: MagicMock) -> None:
        mock_fetch.return_value = _SAMPLE_RESULT

        result = CliRunner().invoke(
            main, ["get", "dQw4w9WgXcQ", "--lang", "es", "--paragraph-length", "400"],
        )

        assert result.exit_code == 0
        mock_fetch.assert_called_once_with(
            "dQw4w9WgXcQ", preferred_language="es", paragraph_length=400,
        )

    @patch("yt_transcript_service.cli.fetch_transcript")
    def test_json_format(self, mock_fetch: MagicMock) -> None:
        mock_fetch.return_value = _SAMPLE_RESULT

        result = CliRunner().invoke(main, ["get", "dQw4w9WgXcQ", "-f", "json"])

        assert result.exit_code == 0
        data = json.loads(result.output)
        assert data["video_id"] == "dQw4w9WgXcQ"
        assert data["paragraphs"] == ["Hello world", "Second paragraph"]

    @patch("yt_transcript_service.cli.fetch_transcript")
    def test_doc_format(self, mock_fetch: MagicMock) -> None:
        mock_fetch.return_value = _SAMPLE_RESULT

        result = CliRunner().invoke(main, ["get", "dQw4w9WgXcQ", "--format", "doc"])

        assert result.exit_code == 0
        assert result.output.startswith("# Never Gonna Give You Up\n")

    @patch("yt_transcript_service.cli.fetch_transcript")
    def test_output_file(self, mock_fetch: MagicMock, tmp_path) -> None:
        """--output writes the transcript to disk and reports the path on stderr."""
        mock_fetch.return_value = _SAMPLE_RESULT
        out = tmp_path / "dQw4w9WgXcQ.txt"

        runner = CliRunner()
        result = runner.invoke(main, ["get", "dQw4w9WgXcQ", "-o", str(out)])

        assert result.exit_code == 0
        assert out.read_text(encoding="utf-8") == "Hello world\n\nSecond paragraph\n"
        assert f"Transcript written to {out}" in result.output

    def test_rejects_zero_paragraph_length(self) -> None:
        result = CliRunner().invoke(main, ["get", "dQw4w9WgXcQ", "--paragraph-length", "0"])
        assert result.exit_code == 2


# ---------------------------------------------------------------------------
# Error handling
# ---------------------------------------------------------------------------

class TestGetErrors:
    """TranscriptErrors become one clean line and exit code 1."""

    @patch("yt_transcript_service.cli.fetch_transcript")
    def test_invalid_locator(self, mock_fetch: MagicMock) -> None:
        mock_fetch.side_effect = InvalidLocatorError("garbage")

        result = CliRunner().invoke(main, ["get", "garbage"])

        assert result.exit_code == 1
        assert "Error: Unable to determine a valid YouTube video id" in result.output
        assert "Traceback" not in result.output

    @patch("yt_transcript_service.cli.fetch_transcript")
    def test_no_captions(self, mock_fetch: MagicMock) -> None:
        mock_fetch.side_effect = NoCaptionsAvailableError()

        result = CliRunner().invoke(main, ["get", "dQw4w9WgXcQ"])

        assert result.exit_code == 1
        assert "No captions are published" in result.output


# ---------------------------------------------------------------------------
# Subcommand: serve
# ---------------------------------------------------------------------------

class TestServeCommand:
    """Tests for `yt-transcript serve`."""

    @patch("uvicorn.run")
    def test_runs_uvicorn(self, mock_run: MagicMock) -> None:
        result = CliRunner().invoke(main, ["serve", "--port", "9000"])

        assert result.exit_code == 0
        mock_run.assert_called_once_with(
            "yt_transcript_service.api:app", host="127.0.0.1", port=9000,
        )
