from __future__ import annotations

from typing import List, Optional


class LyricClipError(Exception):
    """Base class for every failure the pipeline reports to the operator."""


class SourceUnavailable(LyricClipError):
    """A lyric file or media file could not be read."""


class InvalidSelection(LyricClipError):
    """Line range is malformed or out of bounds."""


class EmptySelection(LyricClipError):
    pass


class MetadataUnavailable(LyricClipError):
    """ffprobe could not read tags. Recovered by using placeholder text."""


class FilterGraphError(LyricClipError, ValueError):
    """A filter graph node references a label it is not allowed to read."""


class RenderFailed(LyricClipError):
    """ffmpeg exited non-zero (or could not be started)."""

    def __init__(self, message: str, command: Optional[List[str]] = None,
                 returncode: Optional[int] = None, diagnostic: str = ""):
        super().__init__(message)
        self.command = list(command or [])
        self.returncode = returncode
        self.diagnostic = diagnostic

    def __str__(self) -> str:
        msg = super().__str__()
        if self.returncode is not None:
            msg = f"{msg} (exit code {self.returncode})"
        return msg
