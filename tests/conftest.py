from __future__ import annotations

import pytest

from lyric_clip.errors import RenderFailed
from lyric_clip.render import Renderer
from lyric_clip.selection import select_range
from lyric_clip.timeline import parse_lrc_text

SAMPLE_LRC = """[ti:Sample]
[ar:Someone]

[00:10.00]first line
[00:13.00]second line
[00:17.50]third, with: punctuation
[00:20.00]fourth
"""


class RecordingRenderer(Renderer):
    """Renderer that records command lines instead of running ffmpeg."""

    def __init__(self, fail_on: int | None = None, missing_filters=(), **kwargs):
        super().__init__(ffmpeg_bin="ffmpeg", **kwargs)
        self.commands = []
        self.fail_on = fail_on
        self.missing_filters = set(missing_filters)

    def has_encoder(self, name):
        return True

    def has_filter(self, name, binary=None):
        return name not in self.missing_filters

    def run(self, cmd):
        self.commands.append(cmd)
        if self.fail_on is not None and len(self.commands) == self.fail_on:
            raise RenderFailed("ffmpeg failed", command=cmd, returncode=1, diagnostic="boom")


@pytest.fixture
def timeline():
    return parse_lrc_text(SAMPLE_LRC)


@pytest.fixture
def selection(timeline):
    return select_range(timeline, 1, 4)


@pytest.fixture
def recorder():
    return RecordingRenderer()


@pytest.fixture
def make_recorder():
    return RecordingRenderer
