"""Graphviz DOT statement emission."""

from __future__ import annotations

from typing import Optional, TextIO

from .models import Edge, Node


def escape_label(text: str) -> str:
    return text.replace("\\", "\\\\").replace('"', '\\"')


def node_label(node: Node) -> str:
    if node.exported is None:
        summary = "Symbols unavailable"
    elif node.exported == 0:
        summary = "No functions found"
    else:
        summary = f"{node.exported} functions"
    return "\\n".join((escape_label(node.filename), escape_label(node.path), summary))


class DotEmitter:
    """Writes a left-to-right digraph one statement at a time.

    Statements reach the stream as soon as they are emitted, so a run that
    aborts midway leaves a document without its closing brace.
    """

    def __init__(self, stream: TextIO, *, graph_name: str = "G") -> None:
        self._stream = stream
        self._graph_name = graph_name

    def open(self) -> None:
        self._write(f"digraph {self._graph_name} {{")
        self._write("    rankdir=LR;")

    def node(self, node: Node) -> None:
        self._write(
            f'    "{node.name}" [label="{node_label(node)}", shape=box, '
            f'style="rounded,filled", fillcolor="{node.color}", color=black, '
            "fontcolor=black, penwidth=2, fontsize=8];"
        )

    def edge(self, edge: Edge) -> None:
        style = "dashed" if edge.called == 0 else "solid"
        color = "black" if edge.same_group else "darkgrey"
        width = "2" if edge.same_group else "1"
        self._write(
            f'    "{edge.parent}" -> "{edge.child}" [label="{edge.called} called", '
            f'style="{style}", color="{color}", penwidth="{width}", '
            f'fontcolor="{color}", fontsize=8];'
        )

    def close(self) -> None:
        self._write("}")
        self._stream.flush()

    def _write(self, line: str) -> None:
        self._stream.write(line + "\n")


def same_group(parent_group: Optional[int], child_group: Optional[int]) -> bool:
    """Both ends share a real group; two ungrouped ends do not count."""
    return child_group is not None and parent_group == child_group


__all__ = ["DotEmitter", "escape_label", "node_label", "same_group"]
