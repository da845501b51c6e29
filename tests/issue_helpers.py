from __future__ import annotations

from datetime import datetime, timedelta, timezone

from issuegraph.model import Dependency, DependencyKind, Issue, Status

_BASE = datetime(2024, 1, 1, tzinfo=timezone.utc)


def make_issue(
    issue_id: str,
    *,
    status: Status = Status.OPEN,
    priority: int = 2,
    blocks: tuple[str, ...] = (),
    related: tuple[str, ...] = (),
    created_offset: int = 0,
    title: str | None = None,
) -> Issue:
    deps = tuple(Dependency(target, DependencyKind.BLOCKS) for target in blocks)
    deps += tuple(Dependency(target, DependencyKind.RELATED) for target in related)
    created = _BASE + timedelta(minutes=created_offset)
    return Issue(
        id=issue_id,
        title=title if title is not None else f"Issue {issue_id}",
        status=status,
        priority=priority,
        created_at=created,
        updated_at=created,
        dependencies=deps,
    )


