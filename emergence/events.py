"""System events and the append-only JSON-lines log that carries them."""

from __future__ import annotations

import json
import re
import uuid
from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from pathlib import Path
from typing import Any

DEFAULT_EVENT_BUS_PATH = Path(".emergence/events/event_bus.jsonl")

_TIMESTAMP_RE = re.compile(
    r"^(?P<base>\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2})"
    r"(?:\.(?P<fraction>\d+))?"
    r"(?P<offset>Z|z|[+-]\d{2}:\d{2})?$"
)


class EventFormatError(ValueError):
    """Raised when a serialised event cannot be decoded."""


class EventPriority(Enum):
    """Priority of a system event, serialised by variant name."""

    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"
    CRITICAL = "Critical"


def format_timestamp(moment: datetime) -> str:
    """Render a datetime as an RFC 3339 UTC string ending in ``Z``."""
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    text = moment.astimezone(timezone.utc).isoformat()
    return text.replace("+00:00", "Z")


def parse_timestamp(text: str) -> datetime:
    """Parse an RFC 3339 timestamp, tolerating ``Z`` and nanosecond fractions."""
    match = _TIMESTAMP_RE.match(text.strip())
    if match is None:
        raise EventFormatError(f"invalid timestamp: {text!r}")
    fraction = (match["fraction"] or "")[:6].ljust(6, "0")
    offset = match["offset"]
    if offset is None or offset in ("Z", "z"):
        offset = "+00:00"
    try:
        moment = datetime.fromisoformat(f"{match['base']}.{fraction}{offset}")
    except ValueError as exc:
        raise EventFormatError(f"invalid timestamp: {text!r}") from exc
    return moment.astimezone(timezone.utc)


@dataclass
class SystemEvent:
    """An event that agents publish to and read from the bus."""

    event_type: str
    publisher_id: str
    description: str
    data: Any = field(default_factory=dict)
    emergence_potential: float = 0.0
    priority: EventPriority = EventPriority.MEDIUM
    target_agents: list[str] | None = None
    id: uuid.UUID = field(default_factory=uuid.uuid4)
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @classmethod
    def create(
        cls,
        event_type: str,
        publisher_id: str,
        description: str,
        data: Any = None,
        emergence_potential: float = 0.0,
        priority: EventPriority = EventPriority.MEDIUM,
        target_agents: list[str] | None = None,
    ) -> "SystemEvent":
        """Build an event with a fresh id and the current time."""
        return cls(
            event_type=event_type,
            publisher_id=publisher_id,
            description=description,
            data={} if data is None else data,
            emergence_potential=emergence_potential,
            priority=priority,
            target_agents=None if target_agents is None else list(target_agents),
        )

    def to_dict(self) -> dict[str, Any]:
        """Return the event as a JSON-ready dictionary."""
        return {
            "id": str(self.id),
            "timestamp": format_timestamp(self.timestamp),
            "event_type": self.event_type,
            "publisher_id": self.publisher_id,
            "description": self.description,
            "data": self.data,
            "emergence_potential": self.emergence_potential,
            "priority": self.priority.value,
            "target_agents": None if self.target_agents is None else list(self.target_agents),
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "SystemEvent":
        """Decode an event from a dictionary produced by :meth:`to_dict`."""
        if not isinstance(data, Mapping):
            raise EventFormatError("event must be a JSON object")
        try:
            targets = data.get("target_agents")
            if targets is not None and not isinstance(targets, list):
                raise EventFormatError("target_agents must be a list or null")
            return cls(
                id=uuid.UUID(str(data["id"])),
                timestamp=parse_timestamp(str(data["timestamp"])),
                event_type=str(data["event_type"]),
                publisher_id=str(data["publisher_id"]),
                description=str(data["description"]),
                data=data["data"],
                emergence_potential=float(data["emergence_potential"]),
                priority=EventPriority(data["priority"]),
                target_agents=None if targets is None else [str(t) for t in targets],
            )
        except KeyError as exc:
            raise EventFormatError(f"missing field: {exc.args[0]}") from exc
        except (TypeError, ValueError) as exc:
            if isinstance(exc, EventFormatError):
                raise
            raise EventFormatError(str(exc)) from exc

    def to_json(self) -> str:
        """Serialise the event as a single compact JSON line."""
        return json.dumps(self.to_dict(), separators=(",", ":"), ensure_ascii=False)

    @classmethod
    def from_json(cls, line: str) -> "SystemEvent":
        """Decode an event from one JSON line."""
        try:
            payload = json.loads(line)
        except json.JSONDecodeError as exc:
            raise EventFormatError(f"invalid JSON: {exc}") from exc
        return cls.from_dict(payload)


class EventLog:
    """Append-only JSON-lines file shared by agents as an event channel."""

    def __init__(self, path: str | Path = DEFAULT_EVENT_BUS_PATH) -> None:
        self.path = Path(path)

    def append(self, record: Any) -> None:
        """Append one record (an object with ``to_json`` or a mapping) as a line."""
        if hasattr(record, "to_json"):
            line = record.to_json()
        elif isinstance(record, Mapping):
            line = json.dumps(dict(record), separators=(",", ":"), ensure_ascii=False)
        else:
            raise TypeError("record must provide to_json() or be a mapping")
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with self.path.open("a", encoding="utf-8") as handle:
            handle.write(line + "\n")

    def read_since(self, offset: int = 0) -> tuple[list[str], int]:
        """Return complete lines written after byte ``offset`` and the new offset."""
        try:
            with self.path.open("rb") as handle:
                handle.seek(offset)
                chunk = handle.read()
        except FileNotFoundError:
            return [], offset
        end = chunk.rfind(b"\n")
        if end < 0:
            return [], offset
        complete = chunk[: end + 1]
        lines = [raw.decode("utf-8", errors="replace") for raw in complete.splitlines()]
        return lines, offset + len(complete)