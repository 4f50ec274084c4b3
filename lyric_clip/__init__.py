"""Checklist-style lyric clips rendered with ffmpeg filter graphs."""

from .errors import (
    EmptySelection,
    FilterGraphError,
    InvalidSelection,
    LyricClipError,
    MetadataUnavailable,
    RenderFailed,
    SourceUnavailable,
)
from .timeline import TimedLine, parse_lrc, parse_lrc_text
from .selection import Selection, select_range

__version__ = "0.3.0"

__all__ = [
    "EmptySelection",
    "FilterGraphError",
    "InvalidSelection",
    "LyricClipError",
    "MetadataUnavailable",
    "RenderFailed",
    "Selection",
    "SourceUnavailable",
    "TimedLine",
    "parse_lrc",
    "parse_lrc_text",
    "select_range",
]
