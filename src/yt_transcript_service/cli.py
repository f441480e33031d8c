"""
cli.py — Command-line interface for yt-transcript-service.

Provides the `yt-transcript` command group (registered as a console script
in pyproject.toml):

    get    Fetch a transcript and print it or write it to a file.
    serve  Run the REST API with uvicorn.

Usage examples:
    yt-transcript get "https://www.youtube.com/watch?v=dQw4w9WgXcQ"
    yt-transcript get dQw4w9WgXcQ --lang es --format json
    yt-transcript get https://youtu.be/dQw4w9WgXcQ -o transcript.txt
    yt-transcript serve --port 8080
"""

from __future__ import annotations

import json
import logging
import sys

import click

from yt_transcript_service.chunker import DEFAULT_PARAGRAPH_LENGTH
from yt_transcript_service.errors import TranscriptError
from yt_transcript_service.extractor import (
    fetch_transcript,
    format_doc,
    format_json,
    format_text,
)


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


# ---------------------------------------------------------------------------
# CLI group — the top-level `yt-transcript` command
# ---------------------------------------------------------------------------

@click.group()
def main() -> None:
    """
    YouTube Transcript Service — readable, paragraphed video transcripts.
    """
    pass


# ---------------------------------------------------------------------------
# Subcommand: get — fetch a transcript from YouTube
# ---------------------------------------------------------------------------

@main.command()
@click.argument("video", metavar="URL_OR_ID")
@click.option(
    "--lang", "-l",
    default=None,
    help="Preferred caption language code (e.g. 'es'). Falls back to a translated or manual track.",
)
@click.option(
    "--format", "-f",
    "fmt",                           # avoid shadowing the builtin "format"
    type=click.Choice(["text", "json", "doc"], case_sensitive=False),
    default="text",
    show_default=True,
    help="Output format: paragraphs, full JSON result, or a markdown document.",
)
@click.option(
    "--output", "-o",
    type=click.Path(dir_okay=False),
    default=None,
    help="Write output to a file instead of stdout.",
)
@click.option(
    "--paragraph-length",
    type=click.IntRange(min=1),
    default=DEFAULT_PARAGRAPH_LENGTH,
    show_default=True,
    help="Target paragraph size in characters.",
)
@click.option("--verbose", "-v", is_flag=True, help="Log each pipeline stage to stderr.")
def get(
    video: str,
    lang: str | None,
    fmt: str,
    output: str | None,
    paragraph_length: int,
    verbose: bool,
) -> None:
    """
    Fetch a YouTube video transcript.

    VIDEO can be a full YouTube URL, a short link, or an 11-character video ID.
    """
    _configure_logging(verbose)

    try:
        result = fetch_transcript(
            video,
            preferred_language=lang,
            paragraph_length=paragraph_length,
        )
    except TranscriptError as exc:
        click.echo(f"Error: {exc.message}", err=True)
        sys.exit(1)

    fmt = fmt.lower()
    if fmt == "json":
        text = json.dumps(format_json(result), indent=2, ensure_ascii=False)
    elif fmt == "doc":
        text = format_doc(result)
    else:
        text = format_text(result)

    if output:
        with open(output, "w", encoding="utf-8") as fh:
            fh.write(text)
            fh.write("\n")
        click.echo(f"Transcript written to {output}", err=True)
    else:
        click.echo(text)


# ---------------------------------------------------------------------------
# Subcommand: serve — run the REST API
# ---------------------------------------------------------------------------

@main.command()
@click.option("--host", default="127.0.0.1", show_default=True, help="Interface to bind.")
@click.option("--port", default=8000, show_default=True, type=int, help="Port to listen on.")
def serve(host: str, port: int) -> None:
    """
    Run the transcript REST API.
    """
    import uvicorn

    uvicorn.run("yt_transcript_service.api:app", host=host, port=port)
