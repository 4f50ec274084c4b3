"""
Parse timed lyric (.lrc) files into TimedLine records.

Only lines of the form ``[mm:ss.xx]text`` are kept. Metadata tags such as
``[ar:Artist]``, blank lines and malformed stamps are skipped silently.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, List

import regex as rx

from .errors import SourceUnavailable
from .timing import infer_end_times

LRC_LINE_RX = rx.compile(r"\[(\d+):(\d+\.\d+)\](.*)")


@dataclass(frozen=True)
class TimedLine:
    start: float
    end: float
    text: str

    @property
    def length(self) -> float:
        return self.end - self.start


def parse_lrc_lines(raw_lines: Iterable[str]) -> List[TimedLine]:
    stamped = []
    for line in raw_lines:
        m = LRC_LINE_RX.search(line)
        if not m:
            continue
        start = int(m.group(1)) * 60 + float(m.group(2))
        stamped.append((start, m.group(3).strip()))

    ends = infer_end_times([start for start, _ in stamped])
    return [TimedLine(start=s, end=e, text=t) for (s, t), e in zip(stamped, ends)]


def parse_lrc_text(text: str) -> List[TimedLine]:
    return parse_lrc_lines(text.splitlines())


def parse_lrc(path: str) -> List[TimedLine]:
    """Read an .lrc file. Raises SourceUnavailable if it cannot be opened or decoded."""
    try:
        with open(path, "r", encoding="utf-8-sig") as f:
            raw = f.read()
    except (OSError, UnicodeDecodeError) as e:
        raise SourceUnavailable(f"cannot read lyrics {path}: {e}") from e
    return parse_lrc_text(raw)
