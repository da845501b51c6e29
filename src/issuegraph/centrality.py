"""PageRank and betweenness over the issue dependency graph."""

from __future__ import annotations

import logging
from collections import deque
from dataclasses import dataclass, field
from typing import Any

from .graph import Graph

logger = logging.getLogger(__name__)

DEFAULT_DAMPING = 0.85
DEFAULT_TOLERANCE = 1e-6
DEFAULT_MAX_ITERATIONS = 100


@dataclass(frozen=True)
class CentralityResult:
    pagerank: dict[str, float] = field(default_factory=dict)
    betweenness: dict[str, float] = field(default_factory=dict)
    iterations: int = 0
    converged: bool = True

    def top(self, n: int | None = None) -> list[str]:
        """IDs by descending PageRank; ties keep snapshot order."""
        ordered = sorted(
            enumerate(self.pagerank.items()),
            key=lambda item: (-item[1][1], item[0]),
        )
        ids = [issue_id for _, (issue_id, _) in ordered]
        if n is None:
            return ids
        return ids[:n]

    def to_dict(self) -> dict[str, Any]:
        return {
            "pagerank": dict(self.pagerank),
            "betweenness": dict(self.betweenness),
            "iterations": self.iterations,
            "converged": self.converged,
        }


def pagerank(
    graph: Graph,
    *,
    damping: float = DEFAULT_DAMPING,
    tol: float = DEFAULT_TOLERANCE,
    max_iter: int = DEFAULT_MAX_ITERATIONS,
) -> tuple[dict[str, float], int, bool]:
    """Rank issues by how much dependent work flows into them.

    Rank moves from each issue to the issues it depends on, split evenly
    across its distinct targets. Issues with no targets spread their mass
    over every issue. Returns ``(ranks, iterations, converged)``.
    """
    ids = graph.ids
    n = len(ids)
    if n == 0:
        return {}, 0, True

    out_degree = [len(graph.forward[issue_id]) for issue_id in ids]
    incoming = [
        [graph.index[src] for src in graph.reverse[issue_id]] for issue_id in ids
    ]
    dangling = [i for i in range(n) if out_degree[i] == 0]

    ranks = [1.0 / n] * n
    base = (1.0 - damping) / n
    iterations = 0
    converged = False
    while iterations < max_iter:
        iterations += 1
        leaked = 0.0
        for i in dangling:
            leaked += ranks[i]
        spread = damping * leaked / n

        new = [0.0] * n
        delta = 0.0
        for v in range(n):
            flow = 0.0
            for u in incoming[v]:
                flow += ranks[u] / out_degree[u]
            value = base + spread + damping * flow
            new[v] = value
            change = abs(value - ranks[v])
            if change > delta:
                delta = change
        ranks = new
        if delta < tol:
            converged = True
            break

    total = sum(ranks)
    if total > 0:
        ranks = [value / total for value in ranks]
    logger.debug(
        "pagerank: %d issues, %d iterations, converged=%s", n, iterations, converged
    )
    return dict(zip(ids, ranks)), iterations, converged


def betweenness(graph: Graph) -> dict[str, float]:
    """Brandes betweenness on the directed, unweighted dependency graph.

    Scores are divided by ``(n - 1) * (n - 2)`` so they fall in ``[0, 1]``.
    """
    ids = graph.ids
    n = len(ids)
    scores = [0.0] * n
    if n == 0:
        return {}

    succ = [[graph.index[t] for t in graph.forward[issue_id]] for issue_id in ids]

    for s in range(n):
        stack: list[int] = []
        preds: list[list[int]] = [[] for _ in range(n)]
        sigma = [0.0] * n
        dist = [-1] * n
        sigma[s] = 1.0
        dist[s] = 0
        queue: deque[int] = deque([s])
        while queue:
            v = queue.popleft()
            stack.append(v)
            for w in succ[v]:
                if dist[w] < 0:
                    dist[w] = dist[v] + 1
                    queue.append(w)
                if dist[w] == dist[v] + 1:
                    sigma[w] += sigma[v]
                    preds[w].append(v)

        delta = [0.0] * n
        while stack:
            w = stack.pop()
            for v in preds[w]:
                delta[v] += (sigma[v] / sigma[w]) * (1.0 + delta[w])
            if w != s:
                scores[w] += delta[w]

    scale = 1.0 / ((n - 1) * (n - 2)) if n > 2 else 0.0
    return {issue_id: scores[i] * scale for i, issue_id in enumerate(ids)}


def compute_centrality(graph: Graph) -> CentralityResult:
    ranks, iterations, converged = pagerank(graph)
    return CentralityResult(
        pagerank=ranks,
        betweenness=betweenness(graph),
        iterations=iterations,
        converged=converged,
    )
