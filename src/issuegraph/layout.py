"""Force-directed layout of the dependency graph.

Fruchterman-Reingold style: every pair of nodes repels, every edge pulls its
endpoints together, and a geometrically cooling temperature caps how far a
node may move per iteration. Positions are seeded from an explicit
``random.Random`` so a fixed snapshot always lays out identically.
"""

from __future__ import annotations

import logging
import math
import random
import time
from dataclasses import dataclass, field, replace
from typing import Any, Sequence

from .centrality import CentralityResult, compute_centrality
from .config import ConfigValidationError
from .graph import Edge, build_graph
from .model import DependencyKind, Issue, Status

logger = logging.getLogger(__name__)

DEFAULT_ITERATIONS = 300
DEFAULT_REPEL_FORCE = 8000.0
DEFAULT_ATTRACT_FORCE = 0.015
DEFAULT_DAMPING = 0.85
DEFAULT_MIN_NODE_SIZE = 24.0
DEFAULT_MAX_NODE_SIZE = 60.0
DEFAULT_SEED = 42

MIN_CANVAS_SIZE = 800.0
CANVAS_SCALE = 200.0
SCATTER_FRACTION = 0.8
COOLING = 0.97
PADDING = 100.0
HEADER_HEIGHT = 100.0


@dataclass(frozen=True)
class ForceLayoutOptions:
    iterations: int = 0
    repel_force: float = 0.0
    attract_force: float = 0.0
    damping: float = 0.0
    min_node_size: float = 0.0
    max_node_size: float = 0.0
    seed: int = DEFAULT_SEED
    title: str = ""
    data_hash: str = ""

    def resolved(self) -> ForceLayoutOptions:
        """Fill zero fields with defaults; reject negative or inconsistent ones."""
        for name in (
            "iterations",
            "repel_force",
            "attract_force",
            "damping",
            "min_node_size",
            "max_node_size",
        ):
            value = getattr(self, name)
            if not math.isfinite(value):
                raise ConfigValidationError(f"{name} must be a finite number (got {value})")
            if value < 0:
                raise ConfigValidationError(f"{name} must be >= 0 (got {value})")

        opts = replace(
            self,
            iterations=self.iterations or DEFAULT_ITERATIONS,
            repel_force=self.repel_force or DEFAULT_REPEL_FORCE,
            attract_force=self.attract_force or DEFAULT_ATTRACT_FORCE,
            damping=self.damping or DEFAULT_DAMPING,
            min_node_size=self.min_node_size or DEFAULT_MIN_NODE_SIZE,
            max_node_size=self.max_node_size or DEFAULT_MAX_NODE_SIZE,
        )
        if opts.damping > 1:
            raise ConfigValidationError(f"damping must be <= 1 (got {opts.damping})")
        if opts.min_node_size > opts.max_node_size:
            raise ConfigValidationError(
                f"min_node_size ({opts.min_node_size}) exceeds "
                f"max_node_size ({opts.max_node_size})"
            )
        return opts


@dataclass(frozen=True)
class ForceNode:
    id: str
    title: str
    status: Status
    priority: int
    pagerank: float
    x: float
    y: float
    radius: float

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "status": self.status.value,
            "priority": self.priority,
            "pagerank": self.pagerank,
            "x": self.x,
            "y": self.y,
            "radius": self.radius,
        }


@dataclass(frozen=True)
class ForceEdge:
    source: str
    target: str
    kind: DependencyKind

    def to_dict(self) -> dict[str, Any]:
        return {"from": self.source, "to": self.target, "type": self.kind.value}


@dataclass(frozen=True)
class ForceLayout:
    nodes: tuple[ForceNode, ...] = ()
    edges: tuple[ForceEdge, ...] = ()
    width: float = MIN_CANVAS_SIZE
    height: float = MIN_CANVAS_SIZE
    title: str = ""
    data_hash: str = ""
    top_node: str = ""
    top_node_rank: float = 0.0
    _by_id: dict[str, int] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(
            self, "_by_id", {node.id: idx for idx, node in enumerate(self.nodes)}
        )

    @property
    def center_x(self) -> float:
        return self.width / 2

    @property
    def center_y(self) -> float:
        return self.height / 2

    @property
    def bounds(self) -> tuple[float, float, float, float]:
        """``(min_x, min_y, max_x, max_y)`` of the normalized canvas."""
        return (0.0, 0.0, self.width, self.height)

    def node(self, issue_id: str) -> ForceNode | None:
        idx = self._by_id.get(issue_id)
        if idx is None:
            return None
        return self.nodes[idx]

    def to_dict(self) -> dict[str, Any]:
        return {
            "nodes": [node.to_dict() for node in self.nodes],
            "edges": [edge.to_dict() for edge in self.edges],
            "width": self.width,
            "height": self.height,
            "title": self.title,
            "data_hash": self.data_hash,
            "top_node": self.top_node,
            "top_node_rank": self.top_node_rank,
        }


def canvas_size(node_count: int) -> float:
    return max(MIN_CANVAS_SIZE, math.sqrt(node_count) * CANVAS_SCALE)


def _simulate(
    xs: list[float],
    ys: list[float],
    springs: Sequence[tuple[int, int]],
    opts: ForceLayoutOptions,
    temperature: float,
) -> None:
    n = len(xs)
    for _ in range(opts.iterations):
        vx = [0.0] * n
        vy = [0.0] * n

        for i in range(n):
            xi = xs[i]
            yi = ys[i]
            for j in range(n):
                if i == j:
                    continue
                dx = xi - xs[j]
                dy = yi - ys[j]
                dist = math.sqrt(dx * dx + dy * dy)
                if dist < 1:
                    dist = 1.0
                force = opts.repel_force / (dist * dist)
                vx[i] += (dx / dist) * force
                vy[i] += (dy / dist) * force

        for a, b in springs:
            dx = xs[b] - xs[a]
            dy = ys[b] - ys[a]
            dist = math.sqrt(dx * dx + dy * dy)
            if dist < 1:
                dist = 1.0
            force = dist * opts.attract_force
            fx = (dx / dist) * force
            fy = (dy / dist) * force
            vx[a] += fx
            vy[a] += fy
            vx[b] -= fx
            vy[b] -= fy

        # forces are fully accumulated before any position moves
        for i in range(n):
            disp = math.sqrt(vx[i] * vx[i] + vy[i] * vy[i])
            if disp > temperature:
                vx[i] = (vx[i] / disp) * temperature
                vy[i] = (vy[i] / disp) * temperature
            xs[i] += vx[i] * opts.damping
            ys[i] += vy[i] * opts.damping

        temperature *= COOLING


def compute_force_layout(
    issues: Sequence[Issue],
    centrality: CentralityResult | None = None,
    options: ForceLayoutOptions | None = None,
) -> ForceLayout:
    opts = (options or ForceLayoutOptions()).resolved()
    graph = build_graph(issues)
    if centrality is None:
        centrality = compute_centrality(graph)

    edges = tuple(
        ForceEdge(source=src, target=dst, kind=kind) for src, dst, kind in graph.edges
    )
    n = len(graph)
    size = canvas_size(n)
    if n == 0:
        return ForceLayout(
            edges=edges,
            width=size,
            height=size,
            title=opts.title,
            data_hash=opts.data_hash,
        )

    ranks = centrality.pagerank
    between = centrality.betweenness
    max_rank = max((ranks.get(issue.id, 0.0) for issue in graph.issues), default=0.0)
    if max_rank == 0:
        max_rank = 1.0

    rng = random.Random(opts.seed)
    spread = size * SCATTER_FRACTION
    xs: list[float] = []
    ys: list[float] = []
    radii: list[float] = []
    top_node = ""
    top_rank = 0.0
    for issue in graph.issues:
        rank = ranks.get(issue.id, 0.0)
        if rank > top_rank:
            top_rank = rank
            top_node = issue.id
        importance = rank / max_rank * 0.7 + between.get(issue.id, 0.0) * 0.3
        radii.append(
            opts.min_node_size + importance * (opts.max_node_size - opts.min_node_size)
        )
        xs.append(size / 2 + (rng.random() - 0.5) * spread)
        ys.append(size / 2 + (rng.random() - 0.5) * spread)

    springs = _springs(graph.edges, graph.index)
    logger.debug(
        "force layout: %d nodes, %d springs, %d iterations, seed=%d",
        n,
        len(springs),
        opts.iterations,
        opts.seed,
    )
    started = time.perf_counter()
    _simulate(xs, ys, springs, opts, temperature=size / 2)
    logger.debug("force layout: simulated in %.3fs", time.perf_counter() - started)

    min_x = min(x - r for x, r in zip(xs, radii)) - PADDING
    min_y = min(y - r for y, r in zip(ys, radii)) - PADDING
    max_x = max(x + r for x, r in zip(xs, radii)) + PADDING
    max_y = max(y + r for y, r in zip(ys, radii)) + PADDING

    nodes = [
        ForceNode(
            id=issue.id,
            title=issue.title,
            status=issue.status,
            priority=issue.priority,
            pagerank=ranks.get(issue.id, 0.0),
            x=xs[i] - min_x,
            y=ys[i] - min_y + HEADER_HEIGHT,
            radius=radii[i],
        )
        for i, issue in enumerate(graph.issues)
    ]
    # low rank first so higher-ranked nodes draw on top
    nodes.sort(key=lambda node: node.pagerank)

    return ForceLayout(
        nodes=tuple(nodes),
        edges=edges,
        width=max_x - min_x,
        height=max_y - min_y + HEADER_HEIGHT,
        title=opts.title,
        data_hash=opts.data_hash,
        top_node=top_node,
        top_node_rank=top_rank,
    )


def _springs(edges: Sequence[Edge], index: dict[str, int]) -> list[tuple[int, int]]:
    return [(index[src], index[dst]) for src, dst, _ in edges if src != dst]
