from __future__ import annotations

import hashlib
import json
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Iterable, Mapping

PRIORITY_MIN = 0
PRIORITY_MAX = 4

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


class Status(str, Enum):
    OPEN = "open"
    IN_PROGRESS = "in_progress"
    BLOCKED = "blocked"
    CLOSED = "closed"

    @classmethod
    def parse(cls, value: object) -> Status:
        if isinstance(value, Status):
            return value
        if not isinstance(value, str):
            raise ValueError("status must be a string")
        text = value.strip().lower()
        for status in cls:
            if status.value == text:
                return status
        expected = ", ".join(s.value for s in cls)
        raise ValueError(f"invalid status: {value!r}; expected one of: {expected}")

    @property
    def is_terminal(self) -> bool:
        match self:
            case Status.CLOSED:
                return True
            case Status.OPEN | Status.IN_PROGRESS | Status.BLOCKED:
                return False

    @property
    def is_workable(self) -> bool:
        match self:
            case Status.OPEN | Status.IN_PROGRESS:
                return True
            case Status.BLOCKED | Status.CLOSED:
                return False


class DependencyKind(str, Enum):
    BLOCKS = "blocks"
    RELATED = "related"

    @classmethod
    def parse(cls, value: object) -> DependencyKind:
        if isinstance(value, DependencyKind):
            return value
        if not isinstance(value, str):
            raise ValueError("dependency type must be a string")
        text = value.strip().lower()
        for kind in cls:
            if kind.value == text:
                return kind
        expected = ", ".join(k.value for k in cls)
        raise ValueError(
            f"invalid dependency type: {value!r}; expected one of: {expected}"
        )

    @property
    def orders_work(self) -> bool:
        match self:
            case DependencyKind.BLOCKS:
                return True
            case DependencyKind.RELATED:
                return False


@dataclass(frozen=True)
class Dependency:
    target: str
    kind: DependencyKind = DependencyKind.BLOCKS

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Dependency:
        target = _require_text(data.get("target"), "dependency target")
        return cls(target=target, kind=DependencyKind.parse(data.get("type", "blocks")))

    def to_dict(self) -> dict[str, Any]:
        return {"type": self.kind.value, "target": self.target}


@dataclass(frozen=True)
class Issue:
    id: str
    title: str = ""
    status: Status = Status.OPEN
    priority: int = 2
    created_at: datetime = _EPOCH
    updated_at: datetime = _EPOCH
    dependencies: tuple[Dependency, ...] = field(default=())

    def __post_init__(self) -> None:
        # naive timestamps are UTC, same rule as from_dict
        for name in ("created_at", "updated_at"):
            value = getattr(self, name)
            if isinstance(value, datetime) and value.tzinfo is None:
                object.__setattr__(self, name, value.replace(tzinfo=timezone.utc))

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Issue:
        """Build an issue from a tracker row.

        Rows use the store's JSON shape: ``deps`` holds ``{"type", "target"}``
        mappings and timestamps are epoch milliseconds or ISO-8601 text.
        """
        issue_id = _require_text(data.get("id"), "id")
        raw_deps = data.get("deps")
        if raw_deps is None:
            raw_deps = data.get("dependencies") or []
        if not isinstance(raw_deps, list):
            raise ValueError(f"deps for {issue_id} must be a list")
        deps: list[Dependency] = []
        for idx, dep in enumerate(raw_deps):
            if not isinstance(dep, Mapping):
                raise ValueError(f"deps[{idx}] for {issue_id} must be a mapping")
            deps.append(Dependency.from_dict(dep))

        created = _parse_timestamp(data.get("created_at"), "created_at")
        updated = _parse_timestamp(data.get("updated_at"), "updated_at")
        return cls(
            id=issue_id,
            title=str(data.get("title") or ""),
            status=Status.parse(data.get("status", "open")),
            priority=_normalize_priority(data.get("priority", 2)),
            created_at=created,
            updated_at=updated if data.get("updated_at") is not None else created,
            dependencies=tuple(deps),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "status": self.status.value,
            "priority": self.priority,
            "created_at": self.created_at.isoformat(),
            "updated_at": self.updated_at.isoformat(),
            "deps": [dep.to_dict() for dep in self.dependencies],
        }


def _require_text(value: object, field: str) -> str:
    if not isinstance(value, str):
        raise ValueError(f"{field} must be a string")
    text = value.strip()
    if not text:
        raise ValueError(f"{field} cannot be empty")
    return text


def _normalize_priority(value: object) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError("priority must be an integer")
    if value < PRIORITY_MIN or value > PRIORITY_MAX:
        raise ValueError(
            f"priority must be between {PRIORITY_MIN} and {PRIORITY_MAX}"
        )
    return value


def _parse_timestamp(value: object, field: str) -> datetime:
    if value is None:
        return _EPOCH
    if isinstance(value, datetime):
        dt = value
    elif isinstance(value, bool):
        raise ValueError(f"{field} must be a timestamp")
    elif isinstance(value, (int, float)):
        dt = datetime.fromtimestamp(value / 1000.0, tz=timezone.utc)
    elif isinstance(value, str):
        text = value.strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        try:
            dt = datetime.fromisoformat(text)
        except ValueError as exc:
            raise ValueError(f"{field} is not an ISO-8601 timestamp: {value!r}") from exc
    else:
        raise ValueError(f"{field} must be a timestamp")
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt


def issues_from_rows(rows: Iterable[Mapping[str, Any]]) -> list[Issue]:
    return [Issue.from_dict(row) for row in rows]


def snapshot_hash(issues: Iterable[Issue]) -> str:
    payload = [issue.to_dict() for issue in issues]
    blob = json.dumps(payload, separators=(",", ":"), sort_keys=True, ensure_ascii=False)
    return hashlib.sha256(blob.encode("utf-8")).hexdigest()
