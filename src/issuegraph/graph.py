"""Read-only dependency graph derived from an issue snapshot."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable

from .model import DependencyKind, Issue

logger = logging.getLogger(__name__)

Edge = tuple[str, str, DependencyKind]


@dataclass(frozen=True)
class Graph:
    """Adjacency view over one snapshot.

    ``forward`` maps an issue to the issues it depends on, ``reverse`` to the
    issues that depend on it. Both hold distinct, non-self neighbours in
    first-seen order and ignore edges whose target is not in the snapshot.
    ``edges`` keeps one entry per ``(owner, target, kind)``, self loops included.
    """

    issues: tuple[Issue, ...]
    index: dict[str, int]
    edges: tuple[Edge, ...]
    forward: dict[str, tuple[str, ...]]
    reverse: dict[str, tuple[str, ...]]
    blocks_forward: dict[str, tuple[str, ...]]
    blocks_reverse: dict[str, tuple[str, ...]]
    self_loops: tuple[str, ...] = ()
    dropped_edges: int = 0

    def __len__(self) -> int:
        return len(self.issues)

    def __contains__(self, issue_id: object) -> bool:
        return issue_id in self.index

    @property
    def ids(self) -> tuple[str, ...]:
        return tuple(issue.id for issue in self.issues)

    def get(self, issue_id: str) -> Issue | None:
        idx = self.index.get(issue_id)
        if idx is None:
            return None
        return self.issues[idx]

    def neighbours(self, issue_id: str) -> tuple[str, ...]:
        """Undirected neighbours over both edge kinds, forward first."""
        seen: dict[str, None] = {}
        for other in self.forward.get(issue_id, ()):
            seen.setdefault(other, None)
        for other in self.reverse.get(issue_id, ()):
            seen.setdefault(other, None)
        return tuple(seen)


def build_graph(issues: Iterable[Issue]) -> Graph:
    unique: list[Issue] = []
    index: dict[str, int] = {}
    duplicates = 0
    for issue in issues:
        if issue.id in index:
            duplicates += 1
            continue
        index[issue.id] = len(unique)
        unique.append(issue)

    edges: list[Edge] = []
    seen_edges: set[Edge] = set()
    dropped = 0
    self_loops: list[str] = []

    # dicts used as ordered sets
    forward: dict[str, dict[str, None]] = {issue.id: {} for issue in unique}
    reverse: dict[str, dict[str, None]] = {issue.id: {} for issue in unique}
    blocks_forward: dict[str, dict[str, None]] = {issue.id: {} for issue in unique}
    blocks_reverse: dict[str, dict[str, None]] = {issue.id: {} for issue in unique}

    for issue in unique:
        for dep in issue.dependencies:
            if dep.target not in index:
                dropped += 1
                continue
            edge = (issue.id, dep.target, dep.kind)
            if edge in seen_edges:
                continue
            seen_edges.add(edge)
            edges.append(edge)
            if dep.target == issue.id:
                if issue.id not in self_loops:
                    self_loops.append(issue.id)
                continue
            forward[issue.id].setdefault(dep.target, None)
            reverse[dep.target].setdefault(issue.id, None)
            if dep.kind.orders_work:
                blocks_forward[issue.id].setdefault(dep.target, None)
                blocks_reverse[dep.target].setdefault(issue.id, None)

    if duplicates or dropped or self_loops:
        logger.debug(
            "sanitized snapshot: %d duplicate ids, %d dangling edges, %d self loops",
            duplicates,
            dropped,
            len(self_loops),
        )

    def _freeze(adj: dict[str, dict[str, None]]) -> dict[str, tuple[str, ...]]:
        return {key: tuple(value) for key, value in adj.items()}

    return Graph(
        issues=tuple(unique),
        index=index,
        edges=tuple(edges),
        forward=_freeze(forward),
        reverse=_freeze(reverse),
        blocks_forward=_freeze(blocks_forward),
        blocks_reverse=_freeze(blocks_reverse),
        self_loops=tuple(self_loops),
        dropped_edges=dropped,
    )
