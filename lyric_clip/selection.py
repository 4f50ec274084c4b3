from __future__ import annotations

import sys
from dataclasses import dataclass
from typing import Callable, Sequence, Tuple

from .errors import EmptySelection, InvalidSelection
from .timeline import TimedLine
from .timing import clip_duration, clip_offset


@dataclass(frozen=True)
class Selection:
    """Contiguous run of timeline lines chosen for the clip.

    ``first`` and ``last`` are the 1-based inclusive line numbers in the full
    timeline; ``lines`` is never empty.
    """

    lines: Tuple[TimedLine, ...]
    first: int
    last: int

    def __len__(self) -> int:
        return len(self.lines)

    def __iter__(self):
        return iter(self.lines)

    @property
    def offset(self) -> float:
        return clip_offset(self.lines)

    @property
    def duration(self) -> float:
        return clip_duration(self.lines)

    @property
    def audio_length(self) -> float:
        """Length of the concatenated audio: the sum of every line's own span."""
        return sum(ln.length for ln in self.lines)


def select_range(timeline: Sequence[TimedLine], start: int, end: int) -> Selection:
    """Pick lines ``start``..``end`` (1-based, inclusive) out of the timeline."""
    n = len(timeline)
    if isinstance(start, bool) or isinstance(end, bool) or \
            not isinstance(start, int) or not isinstance(end, int):
        raise InvalidSelection(f"line numbers must be integers, got {start!r} {end!r}")
    if not (1 <= start <= end <= n):
        raise InvalidSelection(f"range {start}-{end} is outside 1-{n}")

    lines = tuple(timeline[start - 1:end])
    if not lines:
        raise EmptySelection(f"range {start}-{end} selected no lines")
    return Selection(lines=lines, first=start, last=end)


def parse_range(text: str) -> Tuple[int, int]:
    """Turn operator input like ``"5 12"`` into a pair of line numbers."""
    parts = text.split()
    if len(parts) != 2:
        raise InvalidSelection(f"expected two line numbers, got {text!r}")
    try:
        return int(parts[0]), int(parts[1])
    except ValueError as e:
        raise InvalidSelection(f"line numbers must be integers, got {text!r}") from e


def print_timeline(timeline: Sequence[TimedLine], out=None) -> None:
    out = out or sys.stdout
    for i, ln in enumerate(timeline, start=1):
        print(f"{i:2d}: [{ln.start:7.2f}] {ln.text}", file=out)


def prompt_selection(timeline: Sequence[TimedLine],
                     ask: Callable[[str], str] = input) -> Selection:
    print("Available lyrics:")
    print_timeline(timeline)
    answer = ask('Enter start and end line (inclusive), e.g. "5 12": ')
    start, end = parse_range(answer)
    return select_range(timeline, start, end)
