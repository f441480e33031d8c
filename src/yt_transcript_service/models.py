"""
models.py — The transcript result handed back to callers.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class TranscriptResult:
    """
    A cleaned, paragraphed transcript for one video.

    Attributes:
        video_id:        The 11-character YouTube video identifier.
        title:           The video title ("Unknown Title" if the page had none).
        source_language: Language code of the chosen track, or "unknown".
        track_type:      "auto" for speech-recognition captions, else "manual".
        paragraphs:      Non-empty, trimmed paragraphs in order.
        full_text:       Paragraphs joined by blank lines.
        retrieved_at:    UTC time the pipeline finished.
    """
    video_id: str
    title: str
    source_language: str
    track_type: str
    paragraphs: tuple[str, ...]
    full_text: str
    retrieved_at: datetime

    def to_dict(self) -> dict:
        """JSON-serialisable representation used by the API and CLI."""
        return {
            "video_id": self.video_id,
            "title": self.title,
            "source_language": self.source_language,
            "track_type": self.track_type,
            "paragraphs": list(self.paragraphs),
            "full_text": self.full_text,
            "retrieved_at": self.retrieved_at.isoformat(),
        }
