"""
api.py — FastAPI REST API for yt-transcript-service.

Endpoints:
    POST /api/transcripts         — Fetch a paragraphed transcript for a URL.
    GET  /transcript/{video_id}   — Same, addressed by ID, as JSON/text/markdown.
    GET  /health                  — Simple health-check for load balancers / monitoring.

Run with:
    uv run uvicorn yt_transcript_service.api:app
or:
    yt-transcript serve

The global exception handler catches any TranscriptError and converts it to
the appropriate HTTP response using the status code stored on the exception.
CORS origins come from the YT_TRANSCRIPT_CORS_ORIGINS environment variable
(comma-separated); when unset, any origin is allowed.

The pipeline runs in the threadpool while the endpoint watches the
connection.  If the client disconnects first, the pipeline's cancel event is
set and the request is abandoned at its next fetch point.
"""

from __future__ import annotations

import asyncio
import logging
import os
import threading
from typing import Annotated

from fastapi import FastAPI, Query, Request
from fastapi.concurrency import run_in_threadpool
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse
from pydantic import BaseModel, Field

from yt_transcript_service.errors import NetworkFailureError, TranscriptError
from yt_transcript_service.extractor import fetch_transcript, format_doc, format_text
from yt_transcript_service.models import TranscriptResult

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Configuration
# ---------------------------------------------------------------------------

CORS_ORIGINS_ENV = "YT_TRANSCRIPT_CORS_ORIGINS"

# How often a running fetch checks whether its client is still there.
DISCONNECT_POLL_SECS = 0.25


def cors_origins() -> list[str]:
    """Allowed CORS origins from the environment, or ["*"] when unset."""
    raw = os.environ.get(CORS_ORIGINS_ENV, "")
    origins = [origin.strip() for origin in raw.split(",") if origin.strip()]
    return origins or ["*"]


# ---------------------------------------------------------------------------
# App setup
# ---------------------------------------------------------------------------

app = FastAPI(
    title="YouTube Transcript Service",
    description="Fetch readable, paragraphed transcripts for YouTube videos.",
    version="1.0.0",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=cors_origins(),
    allow_methods=["*"],
    allow_headers=["*"],
)


class TranscriptRequest(BaseModel):
    """Body of POST /api/transcripts."""
    url: str
    language: Annotated[str, Field(pattern=r"^[a-zA-Z-]{2,10}$")] | None = Field(
        default=None,
        description="Optional ISO language code (e.g. en, es) to target when multiple caption tracks exist.",
    )


# ---------------------------------------------------------------------------
# Global error handler
# ---------------------------------------------------------------------------

@app.exception_handler(TranscriptError)
async def transcript_error_handler(request: Request, exc: TranscriptError) -> JSONResponse:
    """
    Translate any TranscriptError (or subclass) into an HTTP error response.

    The http_status on the exception drives the response code, so endpoint
    code never needs to think about HTTP semantics.
    """
    if isinstance(exc, NetworkFailureError):
        logger.error("HTTP error retrieving captions from YouTube: %s", exc.message)
    return JSONResponse(
        status_code=exc.http_status,
        content={"error": exc.message, "kind": exc.kind},
    )


# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------

async def _fetch_until_disconnect(
    request: Request,
    locator: str,
    language: str | None,
) -> TranscriptResult:
    """
    Run fetch_transcript() in the threadpool, cancelling it if the client
    disconnects before it finishes.

    Raises whatever fetch_transcript() raises; FetchCancelledError once the
    client has gone.
    """
    cancel = threading.Event()
    task = asyncio.ensure_future(
        run_in_threadpool(fetch_transcript, locator, preferred_language=language, cancel=cancel)
    )
    try:
        while True:
            done, _ = await asyncio.wait({task}, timeout=DISCONNECT_POLL_SECS)
            if done:
                return task.result()
            if await request.is_disconnected():
                logger.info("Client disconnected, cancelling transcript fetch for %s", locator)
                cancel.set()
                return await task
    finally:
        # Stops the worker thread if this coroutine itself is cancelled.
        cancel.set()


@app.post("/api/transcripts")
async def create_transcript(body: TranscriptRequest, request: Request) -> JSONResponse:
    """
    Fetch the transcript for the video at **url**.

    **url** may be any YouTube URL or a bare video ID.  **language** picks a
    caption track; if none matches, a translated track is requested.
    """
    if not body.url.strip():
        return JSONResponse(
            status_code=400,
            content={"error": "A YouTube URL is required.", "kind": "invalid_locator"},
        )

    result = await _fetch_until_disconnect(request, body.url, body.language)
    return JSONResponse(content=result.to_dict())


# response_model=None because the Response subclass depends on `format`.
@app.get("/transcript/{video_id}", response_model=None)
async def get_transcript(
    request: Request,
    video_id: str,
    format: str = Query(
        default="json",
        description="Output format: 'json' for the full result, 'text' for paragraphs only, 'doc' for a markdown document.",
        pattern="^(json|text|doc)$",
    ),
    lang: str = Query(
        default="",
        description="Preferred caption language code (e.g. 'es'). Empty means no preference.",
    ),
) -> PlainTextResponse | JSONResponse:
    """
    Fetch the transcript for a single YouTube video by its 11-character ID.
    """
    result = await _fetch_until_disconnect(request, video_id, lang or None)

    if format == "text":
        return PlainTextResponse(content=format_text(result))
    if format == "doc":
        return PlainTextResponse(content=format_doc(result), media_type="text/markdown")
    return JSONResponse(content=result.to_dict())


@app.get("/health")
async def health() -> dict:
    """
    Minimal health-check endpoint.

    Returns HTTP 200 with {"status": "ok"}.
    """
    return {"status": "ok"}
