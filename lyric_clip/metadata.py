"""Read artist/title tags with ffprobe and turn them into the clip's heading."""

from __future__ import annotations

import os
import sys
from typing import Tuple

import ffmpeg

from .errors import MetadataUnavailable

FFPROBE_ENV = "LYRIC_CLIP_FFPROBE"
PLACEHOLDER_TITLE = "《Unknown》"


def probe_tags(path: str) -> Tuple[str, str]:
    """Return ``(artist, title)``; missing tags come back as empty strings."""
    try:
        info = ffmpeg.probe(str(path), cmd=os.environ.get(FFPROBE_ENV, "ffprobe"))
    except ffmpeg.Error as e:
        detail = (e.stderr or b"").decode("utf-8", "replace").strip()
        raise MetadataUnavailable(f"ffprobe failed on {path}: {detail}") from e
    except OSError as e:
        raise MetadataUnavailable(f"ffprobe could not run: {e}") from e

    # tag keys are upper case in some containers (ID3 via ogg/flac)
    tags = {k.lower(): v for k, v in (info.get("format", {}).get("tags") or {}).items()}
    return tags.get("artist", "").strip(), tags.get("title", "").strip()


def format_title(artist: str, title: str) -> str:
    if artist and title:
        return f"《{artist} - {title}》"
    if title:
        return f"《{title}》"
    return PLACEHOLDER_TITLE


def describe_track(path: str) -> Tuple[str, str]:
    """Heading and artist for ``path``, degrading to placeholders if probing fails."""
    try:
        artist, title = probe_tags(path)
    except MetadataUnavailable as e:
        print(f"metadata unavailable, using placeholder: {e}", file=sys.stderr)
        return PLACEHOLDER_TITLE, ""
    return format_title(artist, title), artist
