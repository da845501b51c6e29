"""Execution plan: what can be worked on now, grouped into parallel tracks."""

from __future__ import annotations

import logging
from collections import deque
from dataclasses import dataclass, field
from typing import Any, Iterable

from .centrality import CentralityResult
from .graph import Graph, build_graph
from .model import Issue, Status

logger = logging.getLogger(__name__)

TRACK_PREFIX = "track-"


@dataclass(frozen=True)
class PlanItem:
    id: str
    priority: int
    title: str
    status: Status = Status.OPEN
    unblocks_ids: tuple[str, ...] = ()
    pagerank: float = 0.0

    @property
    def unblocks_count(self) -> int:
        return len(self.unblocks_ids)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "priority": self.priority,
            "title": self.title,
            "status": self.status.value,
            "unblocks": list(self.unblocks_ids),
            "pagerank": self.pagerank,
        }


@dataclass(frozen=True)
class Track:
    track_id: str
    reason: str
    items: tuple[PlanItem, ...] = ()

    @property
    def max_severity(self) -> int:
        """Most urgent priority in the track (lowest number)."""
        return min(item.priority for item in self.items)

    def to_dict(self) -> dict[str, Any]:
        return {
            "track_id": self.track_id,
            "reason": self.reason,
            "items": [item.to_dict() for item in self.items],
        }


@dataclass(frozen=True)
class PlanSummary:
    highest_impact: str = ""
    impact_reason: str = ""
    unblocks_count: int = 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "highest_impact": self.highest_impact,
            "impact_reason": self.impact_reason,
            "unblocks_count": self.unblocks_count,
        }


@dataclass(frozen=True)
class ExecutionPlan:
    tracks: tuple[Track, ...] = ()
    summary: PlanSummary = field(default_factory=PlanSummary)

    @property
    def item_count(self) -> int:
        return sum(len(track.items) for track in self.tracks)

    def find(self, issue_id: str) -> PlanItem | None:
        for track in self.tracks:
            for item in track.items:
                if item.id == issue_id:
                    return item
        return None

    def to_dict(self) -> dict[str, Any]:
        return {
            "tracks": [track.to_dict() for track in self.tracks],
            "summary": self.summary.to_dict(),
        }


def is_actionable(issue: Issue, graph: Graph) -> bool:
    if not issue.status.is_workable:
        return False
    for target in graph.blocks_forward.get(issue.id, ()):
        blocker = graph.get(target)
        if blocker is not None and not blocker.status.is_terminal:
            return False
    return True


def actionable_ids(graph: Graph) -> list[str]:
    return [issue.id for issue in graph.issues if is_actionable(issue, graph)]


def unblocks(graph: Graph, issue_id: str) -> tuple[str, ...]:
    """Non-closed issues transitively waiting on ``issue_id`` via blocks edges."""
    if issue_id not in graph:
        return ()
    found: set[str] = set()
    queue: deque[str] = deque([issue_id])
    while queue:
        current = queue.popleft()
        for dependent in graph.blocks_reverse.get(current, ()):
            if dependent == issue_id or dependent in found:
                continue
            issue = graph.get(dependent)
            if issue is None or issue.status.is_terminal:
                continue
            found.add(dependent)
            queue.append(dependent)
    return tuple(sorted(found))


def _components(graph: Graph) -> dict[str, int]:
    """Undirected connected components over every edge kind and status."""
    component: dict[str, int] = {}
    next_id = 0
    for issue in graph.issues:
        if issue.id in component:
            continue
        component[issue.id] = next_id
        queue: deque[str] = deque([issue.id])
        while queue:
            current = queue.popleft()
            for other in graph.neighbours(current):
                if other not in component:
                    component[other] = next_id
                    queue.append(other)
        next_id += 1
    return component


def _plural(count: int, noun: str) -> str:
    return f"{count} {noun}" if count == 1 else f"{count} {noun}s"


def _impact_reason(count: int) -> str:
    if count == 0:
        return "does not unblock other issues"
    return f"unblocks {_plural(count, 'dependent issue')}"


def _track_reason(items: list[PlanItem]) -> str:
    total = len({uid for item in items for uid in item.unblocks_ids})
    if len(items) == 1:
        if total == 0:
            return "Independent item"
        return f"Independent item, unblocks {_plural(total, 'issue')}"
    if total == 0:
        return _plural(len(items), "related item")
    return f"{_plural(len(items), 'related item')}, unblocks {_plural(total, 'issue')}"


def _item_sort_key(item: PlanItem, created: dict[str, Any]) -> tuple[Any, ...]:
    return (item.priority, -item.unblocks_count, created[item.id], item.id)


def build_execution_plan(
    issues: Iterable[Issue],
    centrality: CentralityResult | None = None,
) -> ExecutionPlan:
    graph = build_graph(issues)
    ready = actionable_ids(graph)
    if not ready:
        logger.debug("execution plan: no actionable issues in %d", len(graph))
        return ExecutionPlan()

    ranks = centrality.pagerank if centrality is not None else {}
    component = _components(graph)
    created = {issue.id: issue.created_at for issue in graph.issues}

    grouped: dict[int, list[PlanItem]] = {}
    for issue_id in ready:
        issue = graph.issues[graph.index[issue_id]]
        item = PlanItem(
            id=issue.id,
            priority=issue.priority,
            title=issue.title,
            status=issue.status,
            unblocks_ids=unblocks(graph, issue.id),
            pagerank=ranks.get(issue.id, 0.0),
        )
        grouped.setdefault(component[issue_id], []).append(item)

    every_item = [item for items in grouped.values() for item in items]
    best = min(
        every_item,
        key=lambda item: (-item.unblocks_count, item.priority, item.id),
    )

    numbered: list[tuple[int, Track]] = []
    for number, comp in enumerate(sorted(grouped), start=1):
        items = sorted(grouped[comp], key=lambda item: _item_sort_key(item, created))
        track = Track(
            track_id=f"{TRACK_PREFIX}{number}",
            reason=_track_reason(items),
            items=tuple(items),
        )
        numbered.append((number, track))

    numbered.sort(
        key=lambda pair: (
            0 if any(item.id == best.id for item in pair[1].items) else 1,
            pair[1].max_severity,
            pair[0],
        )
    )
    tracks = tuple(track for _, track in numbered)

    summary = PlanSummary(
        highest_impact=best.id,
        impact_reason=_impact_reason(best.unblocks_count),
        unblocks_count=best.unblocks_count,
    )
    logger.debug(
        "execution plan: %d actionable issues in %d tracks, highest impact %s",
        len(every_item),
        len(tracks),
        best.id,
    )
    return ExecutionPlan(tracks=tracks, summary=summary)
