"""Recursive traversal of NEEDED entries."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional, Set, Tuple

from .emitter import DotEmitter, same_group
from .locator import LibraryLocator
from .logging import get_logger
from .models import Edge, GroupTable, Node, sanitize_node_name
from .symbols import SymbolInspector

DEFAULT_MAX_DEPTH = 999

_LOGGER = get_logger("walker")


@dataclass
class WalkResult:
    """Nodes declared, edges emitted and sonames left unresolved during one walk."""

    nodes: Dict[str, Node] = field(default_factory=dict)
    edges: List[Edge] = field(default_factory=list)
    unresolved: List[Tuple[str, str]] = field(default_factory=list)


class DependencyWalker:
    """Depth-first, pre-order walk that emits DOT statements as it goes.

    A library reached along several paths is expanded once per path (the
    node itself is declared only once). A library already on the current
    ancestor chain is linked but not expanded again.
    """

    def __init__(
        self,
        inspector: SymbolInspector,
        locator: LibraryLocator,
        emitter: DotEmitter,
        groups: GroupTable,
    ) -> None:
        self._inspector = inspector
        self._locator = locator
        self._emitter = emitter
        self._groups = groups

    def walk(self, root: Path, max_depth: int = DEFAULT_MAX_DEPTH) -> WalkResult:
        result = WalkResult()
        self._visit(Path(root), max_depth, None, (), result)
        return result

    def _visit(
        self,
        path: Path,
        depth: int,
        parent: Optional[Path],
        ancestors: Tuple[Path, ...],
        result: WalkResult,
    ) -> None:
        if depth <= 0:
            return

        indent = "  " * len(ancestors)
        name = sanitize_node_name(path)
        group = self._groups.group_for(path)
        color = self._groups.color_for(group)
        exported = self._inspector.count_exported_functions(path)

        if name not in result.nodes:
            node = Node(name=name, path=str(path), exported=exported, group=group, color=color)
            self._emitter.node(node)
            result.nodes[name] = node
            if exported is None:
                _LOGGER.warning("Could not read the symbol table of %s", path.name)
            elif exported == 0:
                _LOGGER.warning("Could not count functions for %s", path.name)

        if parent is not None:
            called = self._inspector.count_called_functions(parent, path)
            edge = Edge(
                parent=sanitize_node_name(parent),
                child=name,
                called=called,
                same_group=same_group(self._groups.group_for(parent), group),
            )
            self._emitter.edge(edge)
            result.edges.append(edge)
            if called == 0:
                _LOGGER.warning("No called functions detected for %s from %s", path.name, parent)

        _LOGGER.info(
            "%s%s (bg_color: %s, group: %s, path: %s, functions: %s)",
            indent,
            path.name,
            color,
            self._groups.name_for(group),
            path,
            "unknown" if exported is None else exported,
        )

        if path in ancestors:
            _LOGGER.warning("Dependency cycle through %s; not expanding it again", path.name)
            return

        chain = ancestors + (path,)
        for soname in self._inspector.needed_libraries(path):
            dependency = self._locator.find(soname)
            if dependency is None:
                _LOGGER.warning("Path not found for %s (needed by %s)", soname, path.name)
                result.unresolved.append((str(path), soname))
                continue
            self._visit(dependency, depth - 1, path, chain, result)


__all__ = ["DEFAULT_MAX_DEPTH", "DependencyWalker", "WalkResult"]
