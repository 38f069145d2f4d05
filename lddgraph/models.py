"""Core data models shared across lddgraph components."""

from __future__ import annotations

import re
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Optional, Sequence, Tuple

PALETTE: Tuple[str, ...] = (
    "red",
    "blue",
    "green",
    "purple",
    "orange",
    "cyan",
    "pink",
    "yellow",
    "brown",
    "gray",
    "magenta",
    "lime",
    "teal",
    "indigo",
    "violet",
    "maroon",
)

UNGROUPED_COLOR = "white"

_NODE_NAME_PATTERN = re.compile(r"[^A-Za-z0-9.]")
_NUMERIC_PATTERN = re.compile(r"[0-9]+")


def sanitize_node_name(path: str | Path) -> str:
    """Return the DOT node identity for a library path.

    Only the base filename counts, so the same filename in two directories
    maps to the same node.
    """
    return _NODE_NAME_PATTERN.sub("_", Path(path).name)


@dataclass(frozen=True)
class Node:
    """A library declared in the graph."""

    name: str
    path: str
    exported: Optional[int]
    group: Optional[int]
    color: str

    @property
    def filename(self) -> str:
        return Path(self.path).name


@dataclass(frozen=True)
class Edge:
    """A traversed parent -> dependency pair."""

    parent: str
    child: str
    called: int
    same_group: bool


@dataclass(frozen=True)
class Group:
    substring: str
    color: str


@dataclass(frozen=True)
class GroupTable:
    """Ordered path-substring groups, each with its palette color."""

    groups: Tuple[Group, ...] = ()

    @classmethod
    def from_substrings(
        cls, substrings: Iterable[str], palette: Sequence[str] = PALETTE
    ) -> "GroupTable":
        colors = tuple(palette) or PALETTE
        groups = []
        for substring in substrings:
            if not is_valid_group(substring):
                continue
            groups.append(Group(substring=substring, color=colors[len(groups) % len(colors)]))
        return cls(groups=tuple(groups))

    def group_for(self, path: str | Path) -> Optional[int]:
        """Return the index of the first group whose substring occurs in ``path``."""
        text = str(path)
        for index, group in enumerate(self.groups):
            if group.substring in text:
                return index
        return None

    def color_for(self, index: Optional[int]) -> str:
        if index is None:
            return UNGROUPED_COLOR
        return self.groups[index].color

    def name_for(self, index: Optional[int]) -> str:
        if index is None:
            return "None"
        return self.groups[index].substring


def is_valid_group(value: str) -> bool:
    """Empty and purely numeric group values are ignored."""
    return bool(value) and _NUMERIC_PATTERN.fullmatch(value) is None


__all__ = [
    "Edge",
    "Group",
    "GroupTable",
    "Node",
    "PALETTE",
    "UNGROUPED_COLOR",
    "is_valid_group",
    "sanitize_node_name",
]
