from __future__ import annotations

from dataclasses import dataclass, fields
from datetime import datetime, timezone
from typing import Any, ClassVar, TypeVar
from uuid import UUID, uuid4

E = TypeVar("E", bound="Event")


@dataclass(frozen=True, slots=True)
class Event:
    """
    Base class for everything published on the EventBus.

    - event_type: routing key, one per subclass
    - sequence: monotonic per-publisher counter (ordering within a run)
    """

    event_type: ClassVar[str] = "event"

    event_id: UUID
    timestamp_utc: datetime
    sequence: int

    @classmethod
    def create(cls: type[E], *, sequence: int, **values: Any) -> E:
        if sequence <= 0:
            raise ValueError("sequence must be > 0")
        return cls(
            event_id=uuid4(),
            timestamp_utc=datetime.now(timezone.utc),
            sequence=sequence,
            **values,
        )

    def to_dict(self) -> dict[str, Any]:
        d: dict[str, Any] = {"event_type": self.event_type}
        for f in fields(self):
            d[f.name] = getattr(self, f.name)
        d["event_id"] = str(self.event_id)
        d["timestamp_utc"] = self.timestamp_utc.isoformat()
        return d
