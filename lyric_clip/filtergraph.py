"""
In-memory ffmpeg filter graph.

Nodes are kept as records (input labels, filter chain, output label) and
only turned into ``-filter_complex`` text by ``serialize``. Labels come from
the graph's own allocator, so two nodes can never write the same stream and
a node can only read streams written before it.

Escaping follows ffmpeg-python: option values escape ``\\ ' = :`` and the
whole filter spec escapes ``\\ ' [ ] , ;``.

ffmpeg-python's own graph builder is not used because it names every
intermediate stream itself; the audio graph needs fixed names (``first``,
``seg1``, ``out``) and the renderer maps the final label explicitly.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Sequence, Set, Tuple

from .errors import FilterGraphError

OPTION_CHARS = "\\'=:"
GRAPH_CHARS = "\\'[],;"


def escape_chars(text, chars: str) -> str:
    """Backslash-escape every char of ``chars`` in ``text`` (backslash first)."""
    text = str(text)
    ordered = sorted(set(chars), key=lambda c: c != "\\")
    for ch in ordered:
        text = text.replace(ch, "\\" + ch)
    return text


def format_value(value) -> str:
    if isinstance(value, bool):
        return "1" if value else "0"
    if isinstance(value, float):
        return f"{value:.3f}"
    return str(value)


@dataclass(frozen=True)
class Filter:
    """One ffmpeg filter with positional and named options, e.g. ``atrim=start=1:end=2``."""

    name: str
    args: Tuple = ()
    kwargs: Tuple[Tuple[str, object], ...] = ()

    @classmethod
    def of(cls, name: str, *args, **kwargs) -> "Filter":
        return cls(name=name, args=tuple(args), kwargs=tuple(kwargs.items()))

    def option(self, key: str, default=None):
        for k, v in self.kwargs:
            if k == key:
                return v
        return default

    def spec(self) -> str:
        params = [escape_chars(format_value(a), OPTION_CHARS) for a in self.args]
        params += [
            "{}={}".format(escape_chars(k, OPTION_CHARS), escape_chars(format_value(v), OPTION_CHARS))
            for k, v in self.kwargs
        ]
        text = escape_chars(self.name, OPTION_CHARS)
        if params:
            text += "=" + ":".join(params)
        return escape_chars(text, GRAPH_CHARS)


@dataclass(frozen=True)
class FilterNode:
    inputs: Tuple[str, ...]
    filters: Tuple[Filter, ...]
    output: str

    def spec(self) -> str:
        ins = "".join(f"[{label}]" for label in self.inputs)
        chain = ",".join(f.spec() for f in self.filters)
        return f"{ins}{chain}[{self.output}]"


@dataclass
class FilterGraph:
    """Append-only filter graph over a fixed set of external input labels.

    External inputs (``0:a``, ``1:v`` ...) can be read any number of times.
    Intermediate labels are written once and read at most once.
    """

    inputs: Tuple[str, ...]
    nodes: List[FilterNode] = field(default_factory=list)
    _counters: Dict[str, int] = field(default_factory=dict, repr=False)
    _taken: Set[str] = field(default_factory=set, repr=False)
    _consumed: Set[str] = field(default_factory=set, repr=False)

    def __post_init__(self):
        self.inputs = tuple(self.inputs)
        self._taken.update(self.inputs)

    def label(self, prefix: str) -> str:
        """Allocate the next unused ``{prefix}{n}`` label, n counting from 1."""
        n = self._counters.get(prefix, 0)
        while True:
            n += 1
            name = f"{prefix}{n}"
            if name not in self._taken:
                break
        self._counters[prefix] = n
        self._taken.add(name)
        return name

    def reserve(self, name: str) -> str:
        if name in self._taken:
            raise FilterGraphError(f"label [{name}] is already in use")
        self._taken.add(name)
        return name

    def add(self, inputs: Sequence[str], filters: Iterable[Filter],
            output: Optional[str] = None, prefix: str = "s") -> str:
        """Append a node reading ``inputs`` and return its output label."""
        filters = tuple(filters)
        if not filters:
            raise FilterGraphError("a filter node needs at least one filter")
        produced = {node.output for node in self.nodes}
        for label in inputs:
            if label in self.inputs:
                continue
            if label not in produced:
                raise FilterGraphError(f"[{label}] is read before any node writes it")
            if label in self._consumed:
                raise FilterGraphError(f"[{label}] is already consumed by another node")
        out = self.reserve(output) if output is not None else self.label(prefix)
        self._consumed.update(lbl for lbl in inputs if lbl not in self.inputs)
        self.nodes.append(FilterNode(inputs=tuple(inputs), filters=filters, output=out))
        return out

    @property
    def output(self) -> str:
        if not self.nodes:
            raise FilterGraphError("empty filter graph has no output")
        return self.nodes[-1].output

    def node(self, label: str) -> FilterNode:
        for node in self.nodes:
            if node.output == label:
                return node
        raise KeyError(label)

    def filters_named(self, name: str) -> List[Filter]:
        return [f for node in self.nodes for f in node.filters if f.name == name]

    def filter_names(self) -> List[str]:
        return sorted({f.name for node in self.nodes for f in node.filters})

    def serialize(self) -> str:
        return ";".join(node.spec() for node in self.nodes)

    def __str__(self) -> str:
        return self.serialize()

    def __len__(self) -> int:
        return len(self.nodes)
