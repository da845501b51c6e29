from __future__ import annotations

from datetime import datetime, timezone

import pytest

from issuegraph.model import (
    Dependency,
    DependencyKind,
    Issue,
    Status,
    issues_from_rows,
    snapshot_hash,
)


def _row(**overrides: object) -> dict[str, object]:
    row: dict[str, object] = {
        "id": "ig-1",
        "title": "Write parser",
        "status": "open",
        "priority": 1,
        "created_at": 1_700_000_000_000,
        "updated_at": 1_700_000_060_000,
        "deps": [{"type": "blocks", "target": "ig-2"}],
    }
    row.update(overrides)
    return row


def test_from_dict_parses_tracker_row() -> None:
    issue = Issue.from_dict(_row())
    assert issue.id == "ig-1"
    assert issue.status is Status.OPEN
    assert issue.priority == 1
    assert issue.dependencies == (Dependency("ig-2", DependencyKind.BLOCKS),)
    assert issue.created_at == datetime.fromtimestamp(1_700_000_000, tz=timezone.utc)
    assert issue.updated_at > issue.created_at


def test_from_dict_accepts_iso_timestamps_and_mixed_case() -> None:
    issue = Issue.from_dict(
        _row(status="In_Progress", created_at="2024-03-01T10:00:00Z", updated_at=None)
    )
    assert issue.status is Status.IN_PROGRESS
    assert issue.created_at == datetime(2024, 3, 1, 10, tzinfo=timezone.utc)
    assert issue.updated_at == issue.created_at


def test_from_dict_rejects_unknown_status() -> None:
    with pytest.raises(ValueError, match="invalid status"):
        Issue.from_dict(_row(status="paused"))


def test_from_dict_rejects_unknown_dependency_type() -> None:
    with pytest.raises(ValueError, match="invalid dependency type"):
        Issue.from_dict(_row(deps=[{"type": "parent", "target": "ig-2"}]))


@pytest.mark.parametrize("priority", [-1, 5, True, "2"])
def test_from_dict_rejects_bad_priority(priority: object) -> None:
    with pytest.raises(ValueError, match="priority"):
        Issue.from_dict(_row(priority=priority))


def test_from_dict_requires_id() -> None:
    with pytest.raises(ValueError, match="id cannot be empty"):
        Issue.from_dict(_row(id="  "))


def test_to_dict_round_trips_through_from_dict() -> None:
    issue = Issue.from_dict(_row(deps=[{"type": "related", "target": "ig-9"}]))
    assert Issue.from_dict(issue.to_dict()) == issue


def test_status_predicates() -> None:
    assert [s for s in Status if s.is_workable] == [Status.OPEN, Status.IN_PROGRESS]
    assert [s for s in Status if s.is_terminal] == [Status.CLOSED]
    assert DependencyKind.BLOCKS.orders_work is True
    assert DependencyKind.RELATED.orders_work is False


def test_snapshot_hash_is_stable_and_order_sensitive() -> None:
    issues = issues_from_rows([_row(), _row(id="ig-2", deps=[])])
    assert snapshot_hash(issues) == snapshot_hash(list(issues))
    assert len(snapshot_hash(issues)) == 64
    assert snapshot_hash(issues) != snapshot_hash(list(reversed(issues)))


def test_naive_timestamps_are_treated_as_utc() -> None:
    issue = Issue(id="a", created_at=datetime(2024, 1, 1), updated_at=datetime(2024, 1, 2))
    assert issue.created_at == datetime(2024, 1, 1, tzinfo=timezone.utc)
    assert issue.updated_at.tzinfo is timezone.utc
    assert Issue(id="b").created_at < issue.created_at
