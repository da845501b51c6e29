from __future__ import annotations

from issuegraph.graph import build_graph
from issuegraph.model import DependencyKind, Status

from issue_helpers import make_issue


def test_build_graph_forward_and_reverse_adjacency() -> None:
    graph = build_graph(
        [
            make_issue("A"),
            make_issue("B", blocks=("A",)),
            make_issue("C", blocks=("A",), related=("B",)),
        ]
    )
    assert graph.forward["C"] == ("A", "B")
    assert graph.reverse["A"] == ("B", "C")
    assert graph.blocks_forward["C"] == ("A",)
    assert graph.blocks_reverse["B"] == ()
    assert graph.reverse["B"] == ("C",)


def test_dangling_edges_are_dropped_silently() -> None:
    graph = build_graph([make_issue("A", blocks=("missing",))])
    assert graph.forward["A"] == ()
    assert graph.edges == ()
    assert graph.dropped_edges == 1


def test_self_loops_are_kept_as_edges_but_not_adjacency() -> None:
    graph = build_graph([make_issue("A", blocks=("A",))])
    assert graph.edges == (("A", "A", DependencyKind.BLOCKS),)
    assert graph.forward["A"] == ()
    assert graph.self_loops == ("A",)


def test_duplicate_edges_are_collapsed() -> None:
    graph = build_graph(
        [make_issue("A"), make_issue("B", blocks=("A", "A"), related=("A",))]
    )
    assert graph.edges == (
        ("B", "A", DependencyKind.BLOCKS),
        ("B", "A", DependencyKind.RELATED),
    )
    assert graph.forward["B"] == ("A",)


def test_duplicate_ids_keep_first_occurrence() -> None:
    graph = build_graph(
        [make_issue("A", status=Status.OPEN), make_issue("A", status=Status.CLOSED)]
    )
    assert len(graph) == 1
    assert graph.get("A").status is Status.OPEN
    assert "A" in graph
    assert graph.get("Z") is None


def test_neighbours_ignore_direction() -> None:
    graph = build_graph([make_issue("A"), make_issue("B", related=("A",))])
    assert graph.neighbours("A") == ("B",)
    assert graph.neighbours("B") == ("A",)
