"""
Retained-mode scene for one chart.

Nodes are identified by a string key. ``Scene.join`` reconciles the nodes with
a new data list (enter / update / exit) and attribute changes can be applied
immediately or as timed transitions. A transition started on an attribute that
is already transitioning takes over from the current interpolated value, so
the latest request always wins.
"""

import time
from dataclasses import dataclass, field
from typing import Any, Callable, Optional

from heatmap.config import TRANSITION_MS


def now_ms() -> float:
    return time.monotonic() * 1000.0


def ease_cubic_in_out(t: float) -> float:
    t *= 2
    if t <= 1:
        return t * t * t / 2
    t -= 2
    return (t * t * t + 2) / 2


def interpolate(a, b, t: float):
    """Value between ``a`` and ``b`` at ``t`` in [0, 1].

    Numbers blend, equal-length sequences blend element-wise, anything else
    switches to ``b`` once ``t`` reaches 1.
    """
    if t >= 1:
        return b
    if t <= 0:
        return a
    if isinstance(a, bool) or isinstance(b, bool):
        return a
    if isinstance(a, (int, float)) and isinstance(b, (int, float)):
        return a + (b - a) * t
    if isinstance(a, (list, tuple)) and isinstance(b, (list, tuple)) and len(a) == len(b):
        return type(b)(interpolate(x, y, t) for x, y in zip(a, b))
    return a


@dataclass
class Transition:
    start: Any
    end: Any
    started_at: float
    duration_ms: float

    def progress(self, now: float) -> float:
        if self.duration_ms <= 0:
            return 1.0
        return min(1.0, max(0.0, (now - self.started_at) / self.duration_ms))

    def value(self, now: float):
        return interpolate(self.start, self.end, ease_cubic_in_out(self.progress(now)))

    def done(self, now: float) -> bool:
        return self.progress(now) >= 1.0


@dataclass
class Node:
    key: str
    datum: Any
    attrs: dict = field(default_factory=dict)
    transitions: dict = field(default_factory=dict)


@dataclass
class Join:
    enter: list
    update: list
    exit: list


class Scene:
    def __init__(self, name: str):
        self.name = name
        self.nodes: dict[str, Node] = {}

    def __contains__(self, key):
        return key in self.nodes

    def __len__(self):
        return len(self.nodes)

    def keys(self) -> list[str]:
        return list(self.nodes)

    def join(self, data, key: Callable[[Any], str]) -> Join:
        """Bind ``data`` to nodes by key: create missing nodes, drop stale ones."""
        seen = {}
        for datum in data:
            seen.setdefault(key(datum), datum)

        enter = [k for k in seen if k not in self.nodes]
        update = [k for k in seen if k in self.nodes]
        exit_ = [k for k in self.nodes if k not in seen]

        for k in exit_:
            del self.nodes[k]
        for k in update:
            self.nodes[k].datum = seen[k]
        for k in enter:
            self.nodes[k] = Node(k, seen[k])
        return Join(enter, update, exit_)

    def node(self, key: str) -> Node:
        return self.nodes[key]

    def set(self, key: str, attr: str, value) -> None:
        node = self.nodes[key]
        node.transitions.pop(attr, None)
        node.attrs[attr] = value

    def transition(self, key: str, attr: str, value, now: Optional[float] = None,
                   duration_ms: float = TRANSITION_MS) -> None:
        node = self.nodes[key]
        now = now_ms() if now is None else now
        if attr not in node.attrs and attr not in node.transitions:
            node.attrs[attr] = value
            return
        if attr not in node.transitions and node.attrs[attr] == value:
            return
        start = self.value(key, attr, now)
        node.attrs[attr] = value
        node.transitions[attr] = Transition(start, value, now, duration_ms)

    def value(self, key: str, attr: str, now: Optional[float] = None):
        node = self.nodes[key]
        tr = node.transitions.get(attr)
        if tr is None:
            return node.attrs.get(attr)
        return tr.value(now_ms() if now is None else now)

    def target(self, key: str, attr: str):
        """Value the attribute ends up at once transitions finish."""
        return self.nodes[key].attrs.get(attr)

    def in_flight(self, now: Optional[float] = None) -> bool:
        now = now_ms() if now is None else now
        return any(
            not tr.done(now)
            for node in self.nodes.values()
            for tr in node.transitions.values()
        )

    def settle(self, now: Optional[float] = None) -> None:
        """Forget transitions that have finished."""
        now = now_ms() if now is None else now
        for node in self.nodes.values():
            for attr in [a for a, tr in node.transitions.items() if tr.done(now)]:
                del node.transitions[attr]

    def snapshot(self, now: Optional[float] = None) -> list[dict]:
        """Current attribute values of every node, in insertion order."""
        now = now_ms() if now is None else now
        out = []
        for key, node in self.nodes.items():
            row = {"key": key, "datum": node.datum}
            for attr in node.attrs:
                row[attr] = self.value(key, attr, now)
            out.append(row)
        return out
