"""
Checklist overlay graph.

The clip shows a title, a dashed subtitle and a bulleted first lyric line.
Every later selected line becomes a checklist row: its box is unchecked
until the line starts and checked from then on, and its text moves through
pending, active and done colors. All gating is done with ``enable``
expressions on the background's own clock, in clip-relative seconds.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Optional, Sequence

from .filtergraph import Filter, FilterGraph, format_value
from .selection import Selection
from .timing import to_relative

BACKGROUND = "0:v"
UNCHECKED_ICON = "1:v"
CHECKED_ICON = "2:v"


@dataclass(frozen=True)
class StyleConfig:
    title: str = "《Unknown》"
    subtitle: str = ""
    bullet: str = ""
    title_color: str = "white"
    subtitle_color: str = "white"
    bullet_color: str = "white"
    normal_color: str = "gray"
    highlight_color: str = "yellow"
    finished_color: str = "white"
    checkbox_selected_color: str = "yellow"
    checkbox_unselected_color: str = "#8E8E93"
    font_path: str = ""


@dataclass(frozen=True)
class Layout:
    title_y: int = 100
    title_size: int = 42
    subtitle_y: int = 180
    subtitle_size: int = 36
    bullet_x: int = 60
    bullet_y: int = 260
    text_size: int = 36
    checklist_top: int = 340
    row_height: int = 72
    icon_x: int = 60
    icon_size: int = 40
    text_x: int = 120
    text_dy: int = 4

    def row_y(self, row: int) -> int:
        return self.checklist_top + row * self.row_height


@dataclass(frozen=True)
class Window:
    """A gating predicate on the playback clock ``t``.

    kinds: ``before`` (t < start), ``from`` (t >= start),
    ``within`` (start <= t <= end), ``after`` (t > end).
    Bounds are rounded the same way they are written into the graph, so
    ``contains`` answers exactly what ffmpeg will evaluate.
    """

    kind: str
    start: float
    end: Optional[float] = None

    def _bounds(self):
        s = round(self.start, 3)
        e = round(self.end, 3) if self.end is not None else None
        return s, e

    def expression(self) -> str:
        s = format_value(float(self.start))
        if self.kind == "before":
            return f"lt(t,{s})"
        if self.kind == "from":
            return f"gte(t,{s})"
        if self.kind == "within":
            return f"between(t,{s},{format_value(float(self.end))})"
        if self.kind == "after":
            return f"gt(t,{s})"
        raise ValueError(f"unknown window kind {self.kind!r}")

    def contains(self, t: float) -> bool:
        s, e = self._bounds()
        if self.kind == "before":
            return t < s
        if self.kind == "from":
            return t >= s
        if self.kind == "within":
            return s <= t <= e
        if self.kind == "after":
            return t > s
        raise ValueError(f"unknown window kind {self.kind!r}")


def line_windows(start: float, end: float, offset: float) -> Dict[str, Window]:
    """Gating windows for one checklist row, converted to clip-relative time."""
    s = to_relative(start, offset)
    e = to_relative(end, offset)
    return {
        "unchecked": Window("before", s),
        "checked": Window("from", s),
        "pending": Window("before", s),
        "active": Window("within", s, e),
        "done": Window("after", e),
    }


def drawtext(style: StyleConfig, text: str, size: int, color: str, x, y,
             window: Optional[Window] = None) -> Filter:
    kw = {}
    if style.font_path:
        kw["fontfile"] = style.font_path
    # drawtext refuses an empty string
    kw["text"] = text or " "
    kw["expansion"] = "none"
    kw["fontsize"] = size
    kw["fontcolor"] = color
    kw["x"] = x
    kw["y"] = y
    if window is not None:
        kw["enable"] = window.expression()
    return Filter.of("drawtext", **kw)


def compile_overlay_graph(selection: Selection, style: StyleConfig, offset: float,
                          layout: Layout = Layout()) -> FilterGraph:
    """Build the title + checklist graph.

    Input 0 is the background, input 1 the unchecked icon, input 2 the
    checked icon. The first selected line is only drawn as the bullet; the
    checklist starts with the second line. ``graph.output`` is the final
    video label.
    """
    graph = FilterGraph(inputs=(BACKGROUND, UNCHECKED_ICON, CHECKED_ICON))

    def draw(cursor: str, f: Filter) -> str:
        return graph.add([cursor], [f], prefix="v")

    cur = draw(BACKGROUND, drawtext(style, style.title, layout.title_size,
                                    style.title_color, "(w-text_w)/2", layout.title_y))
    cur = draw(cur, drawtext(style, f"-{style.subtitle}", layout.subtitle_size,
                             style.subtitle_color, "(w-text_w)/2", layout.subtitle_y))
    cur = draw(cur, drawtext(style, f"• {style.bullet}", layout.text_size,
                             style.bullet_color, layout.bullet_x, layout.bullet_y))

    icon_scale = Filter.of("scale", layout.icon_size, layout.icon_size)
    for row, ln in enumerate(selection.lines[1:]):
        y = layout.row_y(row)
        win = line_windows(ln.start, ln.end, offset)

        for icon, key, prefix in ((UNCHECKED_ICON, "unchecked", "box"), (CHECKED_ICON, "checked", "tick")):
            scaled = graph.add([icon], [icon_scale], prefix=prefix)
            cur = graph.add(
                [cur, scaled],
                [Filter.of("overlay", x=layout.icon_x, y=y, enable=win[key].expression())],
                prefix="v",
            )

        text_y = y + layout.text_dy
        for key, color in (("pending", style.normal_color),
                           ("active", style.highlight_color),
                           ("done", style.finished_color)):
            cur = draw(cur, drawtext(style, ln.text, layout.text_size, color,
                                     layout.text_x, text_y, win[key]))

    return graph


def render_lyrics_video(renderer, background: str, selection: Selection, style: StyleConfig,
                        offset: float, output: str, icons: Sequence[str],
                        layout: Layout = Layout()) -> str:
    """Render the overlay onto ``background``; ``icons`` is (unchecked, checked)."""
    unchecked, checked = icons
    graph = compile_overlay_graph(selection, style, offset, layout)
    print(f"Drawing {len(selection) - 1} checklist rows -> {output}")
    return renderer.video_graph([background, unchecked, checked], graph, output)
