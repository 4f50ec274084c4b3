"""
Run one clip end to end:

  lyrics -> selection -> heading text -> offset/duration
         -> background -> mixed audio -> checklist video -> mux

Stages run strictly in order and the first failure stops the run. Only a
failed metadata probe is recovered from (placeholder heading).
"""

from __future__ import annotations

import os
from dataclasses import dataclass, replace
from typing import Callable, Optional, Tuple

from .audio_mix import compile_audio_graph, mix_audio
from .config import ClipConfig
from .errors import SourceUnavailable
from .filtergraph import FilterGraph
from .icons import ensure_icons
from .metadata import describe_track
from .overlay import StyleConfig, compile_overlay_graph, render_lyrics_video
from .render import Renderer
from .selection import Selection, prompt_selection, select_range
from .timeline import parse_lrc


@dataclass(frozen=True)
class ClipPlan:
    selection: Selection
    style: StyleConfig
    audio_graph: FilterGraph
    overlay_graph: FilterGraph

    @property
    def offset(self) -> float:
        return self.selection.offset

    @property
    def duration(self) -> float:
        return self.selection.duration


def ensure_dirs(config: ClipConfig) -> None:
    os.makedirs(config.work_dir, exist_ok=True)
    os.makedirs(os.path.dirname(config.output_path) or ".", exist_ok=True)


def check_sources(config: ClipConfig) -> None:
    paths = [config.original, config.backing] + list(config.icons or ())
    for path in paths:
        if not os.path.isfile(path):
            raise SourceUnavailable(f"media file not found: {path}")
    # drawtext falls back to fontconfig when no font file is given
    if config.font and not os.path.isfile(config.font):
        raise SourceUnavailable(f"font file not found: {config.font}")


def choose_lines(config: ClipConfig, line_range: Optional[Tuple[int, int]] = None,
                 ask: Callable[[str], str] = input) -> Selection:
    timeline = parse_lrc(config.lyrics)
    print(f"Parsed {len(timeline)} timed lines from {config.lyrics}")
    if line_range is not None:
        return select_range(timeline, *line_range)
    return prompt_selection(timeline, ask)


def plan_clip(config: ClipConfig, selection: Selection) -> ClipPlan:
    """Resolve heading text and compile both graphs without rendering anything."""
    title, artist = describe_track(config.original)
    style = replace(
        config.style,
        title=title,
        subtitle=artist,
        bullet=selection.lines[0].text,
        font_path=config.font,
    )
    audio_graph = compile_audio_graph(selection, config.original_gain, config.backing_gain)
    overlay_graph = compile_overlay_graph(selection, style, selection.offset, config.layout)
    return ClipPlan(selection=selection, style=style,
                    audio_graph=audio_graph, overlay_graph=overlay_graph)


def run_pipeline(config: ClipConfig, line_range: Optional[Tuple[int, int]] = None,
                 renderer: Optional[Renderer] = None,
                 ask: Callable[[str], str] = input) -> str:
    """Render the clip and return the final output path."""
    selection = choose_lines(config, line_range, ask)
    check_sources(config)
    ensure_dirs(config)

    plan = plan_clip(config, selection)
    print(f"Lines {selection.first}-{selection.last}: offset {plan.offset:.2f}s, "
          f"duration {plan.duration:.2f}s")

    renderer = renderer or Renderer(config.render)
    # fail before the first artifact is written if ffmpeg lacks a filter (drawtext)
    needed = sorted(set(plan.audio_graph.filter_names()) | set(plan.overlay_graph.filter_names()))
    renderer.require_filters(needed)
    icons = config.icons or ensure_icons(config.work_dir, plan.style)

    print("Rendering background ...")
    background = renderer.background(config.artifact("background.mp4"), plan.duration)

    mixed = mix_audio(renderer, config.original, config.backing, selection,
                      config.original_gain, config.backing_gain,
                      config.artifact("audio_mixed.mp3"))

    silent = render_lyrics_video(renderer, background, selection, plan.style, plan.offset,
                                 config.artifact("video_no_audio.mp4"), icons, config.layout)

    print("Muxing video and audio ...")
    output = renderer.mux(silent, mixed, config.output_path)
    print(f"Done: {output}")
    return output
