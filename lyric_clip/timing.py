"""
Timing rules shared by the parser, the selector and both graph compilers.

All values are seconds. Absolute times are positions in the source track;
clip-relative times are positions in the rendered clip, which starts at the
first selected line.
"""

from __future__ import annotations

from typing import List, Sequence

LAST_LINE_HOLD = 5.0  # the last lyric line has no successor to end it
TAIL_PAD = 2.0        # keep the final checklist state on screen a little longer


def infer_end_times(starts: Sequence[float]) -> List[float]:
    """End of line i is the start of line i+1; the last line holds for LAST_LINE_HOLD."""
    ends: List[float] = [0.0] * len(starts)
    nxt = None
    for i in range(len(starts) - 1, -1, -1):
        ends[i] = nxt if nxt is not None else starts[i] + LAST_LINE_HOLD
        nxt = starts[i]
    return ends


def clip_offset(lines) -> float:
    return lines[0].start


def clip_duration(lines) -> float:
    return lines[-1].end - clip_offset(lines) + TAIL_PAD


def to_relative(t: float, offset: float) -> float:
    return t - offset
