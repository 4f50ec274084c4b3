"""
Audio segment graph.

The first selected line is the hook: it plays from the original track alone
at full volume. Every later line blends the backing track with a quieter
original. Segments are concatenated in selection order with no gaps.
"""

from __future__ import annotations

from typing import List

from .filtergraph import Filter, FilterGraph
from .selection import Selection

ORIGINAL = "0:a"
BACKING = "1:a"


def trim_chain(start: float, end: float, gain: float) -> List[Filter]:
    """Cut ``[start, end)`` out of a track, restart its clock at zero, apply gain."""
    return [
        Filter.of("atrim", start=start, end=end),
        Filter.of("asetpts", "PTS-STARTPTS"),
        Filter.of("volume", gain),
    ]


def compile_audio_graph(selection: Selection, original_gain: float,
                        backing_gain: float) -> FilterGraph:
    """Build the trim/gain/mix/concat graph for ``selection``.

    Input 0 is the original (vocal) track, input 1 the backing track.
    The result stream is labelled ``out``.
    """
    for name, gain in (("original_gain", original_gain), ("backing_gain", backing_gain)):
        if not 0.0 <= gain <= 1.0:
            raise ValueError(f"{name} must be within [0, 1], got {gain}")

    graph = FilterGraph(inputs=(ORIGINAL, BACKING))
    lines = selection.lines

    first = lines[0]
    segments = [graph.add([ORIGINAL], trim_chain(first.start, first.end, 1.0), output="first")]

    for ln in lines[1:]:
        back = graph.add([BACKING], trim_chain(ln.start, ln.end, backing_gain), prefix="back")
        orig = graph.add([ORIGINAL], trim_chain(ln.start, ln.end, original_gain), prefix="orig")
        # duration=first: the segment lasts as long as the backing trim
        segments.append(
            graph.add([back, orig], [Filter.of("amix", inputs=2, duration="first")], prefix="seg")
        )

    graph.add(segments, [Filter.of("concat", n=len(segments), v=0, a=1)], output="out")
    return graph


def mix_audio(renderer, original: str, backing: str, selection: Selection,
              original_gain: float, backing_gain: float, output: str) -> str:
    graph = compile_audio_graph(selection, original_gain, backing_gain)
    print(f"Mixing {len(selection)} audio segments -> {output}")
    return renderer.audio_graph([original, backing], graph, output)
