from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Optional, Tuple

from .overlay import Layout, StyleConfig
from .render import RenderSettings

# ---------- Config ----------
AUDIO_ORIGINAL = os.path.join("audio", "original.mp3")
AUDIO_BACKING = os.path.join("audio", "backing.mp3")
LYRICS_PATH = os.path.join("lyrics", "original.lrc")
FONT_PATH = os.environ.get("LYRIC_CLIP_FONT", os.path.join("fonts", "MiSans-Regular.ttf"))
WORK_DIR = "output"
OUTPUT_NAME = "result.mp4"

ORIGINAL_GAIN = 0.2   # vocal kept faintly under the backing track
BACKING_GAIN = 0.75


@dataclass
class ClipConfig:
    """Everything one run needs; the compilers only ever see pieces of it."""

    original: str = AUDIO_ORIGINAL
    backing: str = AUDIO_BACKING
    lyrics: str = LYRICS_PATH
    font: str = FONT_PATH
    work_dir: str = WORK_DIR
    output: Optional[str] = None
    icons: Optional[Tuple[str, str]] = None
    original_gain: float = ORIGINAL_GAIN
    backing_gain: float = BACKING_GAIN
    style: StyleConfig = field(default_factory=StyleConfig)
    layout: Layout = field(default_factory=Layout)
    render: RenderSettings = field(default_factory=RenderSettings)

    def artifact(self, name: str) -> str:
        return os.path.join(self.work_dir, name)

    @property
    def output_path(self) -> str:
        return self.output or self.artifact(OUTPUT_NAME)
