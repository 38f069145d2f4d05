"""Dependency walker behaviour tests."""

from __future__ import annotations

import io
import logging
from pathlib import Path

import pytest

from lddgraph.emitter import DotEmitter
from lddgraph.locator import LibraryLocator
from lddgraph.models import GroupTable
from lddgraph.symbols import SymbolInspector
from lddgraph.walker import DependencyWalker
from tests._fixtures.toolchain import FakeToolchain, parse_dot


def _walk(toolchain: FakeToolchain, root: Path, depth: int = 999, groups=()):  # type: ignore[no-untyped-def]
    stream = io.StringIO()
    emitter = DotEmitter(stream)
    emitter.open()
    locator = LibraryLocator(root.parent, runner=toolchain, environ={}, standard_dirs=[])
    walker = DependencyWalker(
        SymbolInspector(toolchain),
        locator,
        emitter,
        GroupTable.from_substrings(groups),
    )
    result = walker.walk(root, depth)
    emitter.close()
    return result, parse_dot(stream.getvalue())


def test_binary_without_dependencies_has_one_node(toolchain: FakeToolchain) -> None:
    app = toolchain.add("bin/app", exports=["main"])

    result, dot = _walk(toolchain, app)

    assert list(result.nodes) == ["app"]
    assert result.edges == []
    assert len(dot["nodes"]) == 1
    assert dot["edges"] == []


def test_called_count_on_edge(toolchain: FakeToolchain) -> None:
    toolchain.add("bin/libB.so", exports=["f", "g"])
    app = toolchain.add("bin/app", needed=["libB.so"], imports=["f", "puts"])

    result, dot = _walk(toolchain, app)

    assert result.nodes["libB.so"].exported == 2
    assert "2 functions" in dot["nodes"][1]
    assert len(result.edges) == 1
    edge = result.edges[0]
    assert (edge.parent, edge.child, edge.called) == ("app", "libB.so", 1)
    assert 'label="1 called", style="solid"' in dot["edges"][0]


def test_depth_one_emits_only_root(toolchain: FakeToolchain) -> None:
    toolchain.add("bin/libB.so", exports=["f"])
    app = toolchain.add("bin/app", needed=["libB.so"], imports=["f"])

    result, dot = _walk(toolchain, app, depth=1)

    assert list(result.nodes) == ["app"]
    assert dot["edges"] == []


def test_depth_zero_emits_nothing(toolchain: FakeToolchain) -> None:
    app = toolchain.add("bin/app")

    result, dot = _walk(toolchain, app, depth=0)

    assert result.nodes == {}
    assert dot["nodes"] == []


def test_unresolved_dependency_is_skipped(toolchain: FakeToolchain, caplog) -> None:  # type: ignore[no-untyped-def]
    toolchain.add("bin/libC.so", exports=["h"])
    app = toolchain.add("bin/app", needed=["libmissing.so", "libC.so"], imports=["h"])

    with caplog.at_level(logging.WARNING, logger="lddgraph"):
        result, dot = _walk(toolchain, app)

    assert set(result.nodes) == {"app", "libC.so"}
    assert [edge.child for edge in result.edges] == ["libC.so"]
    assert result.unresolved == [(str(app), "libmissing.so")]
    missing = [record for record in caplog.records if "libmissing.so" in record.getMessage()]
    assert len(missing) == 1


def test_diamond_declares_node_once_but_emits_each_edge(toolchain: FakeToolchain) -> None:
    toolchain.add("bin/libD.so", exports=["d"])
    toolchain.add("bin/libB.so", needed=["libD.so"], exports=["b"], imports=["d"])
    toolchain.add("bin/libC.so", needed=["libD.so"], exports=["c"], imports=["d"])
    app = toolchain.add("bin/app", needed=["libB.so", "libC.so"], imports=["b", "c"])

    result, dot = _walk(toolchain, app)

    assert len(dot["nodes"]) == 4
    assert [(edge.parent, edge.child) for edge in result.edges] == [
        ("app", "libB.so"),
        ("libB.so", "libD.so"),
        ("app", "libC.so"),
        ("libC.so", "libD.so"),
    ]


def test_cycle_is_linked_but_not_expanded_again(toolchain: FakeToolchain, caplog) -> None:  # type: ignore[no-untyped-def]
    toolchain.add("bin/libA.so", needed=["libB.so"], exports=["a"], imports=["b"])
    toolchain.add("bin/libB.so", needed=["libA.so"], exports=["b"], imports=["a"])
    app = toolchain.add("bin/app", needed=["libA.so"], imports=["a"])

    with caplog.at_level(logging.WARNING, logger="lddgraph"):
        result, _ = _walk(toolchain, app)

    assert [(edge.parent, edge.child) for edge in result.edges] == [
        ("app", "libA.so"),
        ("libA.so", "libB.so"),
        ("libB.so", "libA.so"),
    ]
    assert any("cycle" in record.getMessage() for record in caplog.records)


def test_same_filename_in_two_directories_is_one_node(toolchain: FakeToolchain) -> None:
    toolchain.add("vendor/libdup.so", exports=["x"], cached=True)
    root = toolchain.add("bin/libdup.so", needed=["libdup.so"], imports=["x"])

    result, dot = _walk(toolchain, root)

    assert list(result.nodes) == ["libdup.so"]
    assert result.nodes["libdup.so"].path == str(root)
    assert len(dot["nodes"]) == 1
    assert [(edge.parent, edge.child, edge.called) for edge in result.edges] == [
        ("libdup.so", "libdup.so", 1)
    ]


def test_same_group_edge_is_bold(toolchain: FakeToolchain) -> None:
    toolchain.add("usr/lib/libB.so", exports=["f"], cached=True)
    app = toolchain.add("usr/lib/app", needed=["libB.so"], imports=["f"])

    result, dot = _walk(toolchain, app, groups=("/usr/lib", "/lib"))

    assert {node.color for node in result.nodes.values()} == {"red"}
    assert result.edges[0].same_group is True
    assert 'color="black", penwidth="2"' in dot["edges"][0]


def test_zero_counts_produce_warnings(toolchain: FakeToolchain, caplog) -> None:  # type: ignore[no-untyped-def]
    toolchain.add("bin/libE.so")
    toolchain.add("bin/libbroken.so", broken=True)
    app = toolchain.add("bin/app", needed=["libE.so", "libbroken.so"], exports=["main"])

    with caplog.at_level(logging.WARNING, logger="lddgraph"):
        result, dot = _walk(toolchain, app)

    messages = [record.getMessage() for record in caplog.records]
    assert any("Could not count functions for libE.so" in message for message in messages)
    assert any("Could not read the symbol table of libbroken.so" in message for message in messages)
    assert sum("No called functions detected" in message for message in messages) == 2
    assert result.nodes["libbroken.so"].exported is None
    assert all('style="dashed"' in edge for edge in dot["edges"])


def test_symbols_are_read_again_for_every_edge(toolchain: FakeToolchain) -> None:
    lib = toolchain.add("bin/libB.so", exports=["f"])
    toolchain.add("bin/libX.so", needed=["libB.so"], imports=["f"])
    app = toolchain.add("bin/app", needed=["libB.so", "libX.so"], imports=["f"])

    _walk(toolchain, app)

    defined_reads = [call for call in toolchain.nm_calls(lib) if "--defined-only" in call]
    assert len(defined_reads) == 2


@pytest.mark.parametrize("depth", [2, 3])
def test_depth_limits_chain(toolchain: FakeToolchain, depth: int) -> None:
    toolchain.add("bin/lib3.so")
    toolchain.add("bin/lib2.so", needed=["lib3.so"])
    toolchain.add("bin/lib1.so", needed=["lib2.so"])
    app = toolchain.add("bin/app", needed=["lib1.so"])

    result, _ = _walk(toolchain, app, depth=depth)

    assert len(result.nodes) == depth
    assert len(result.edges) == depth - 1
