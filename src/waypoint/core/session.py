"""Per-run session blackboard.

The session maps each type tag to the latest value of that type. A later
write of the same tag shadows the earlier one. Every completed action also
appends a SessionRecord, so the session doubles as an in-memory log of the
run for post-run inspection.
"""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Mapping, Optional

from waypoint.core.tags import TypeTag, type_tag


@dataclass(frozen=True)
class SessionRecord:
    """One completed action: what it saw and what it produced."""
    action: str
    inputs: Mapping[TypeTag, Any]
    output_type: TypeTag
    output: Any
    duration_ms: int = 0


@dataclass(frozen=True)
class UsageRecord:
    """One costed model call."""
    action: str
    model: str
    input_tokens: int
    output_tokens: int
    cost_usd: float


@dataclass
class Session:
    run_id: str = ""
    started_at: float = field(default_factory=time.time)
    _values: dict[TypeTag, Any] = field(default_factory=dict, repr=False)
    _records: list[SessionRecord] = field(default_factory=list, repr=False)
    _usage: list[UsageRecord] = field(default_factory=list, repr=False)

    def bind(self, tag: Any, value: Any) -> None:
        self._values[type_tag(tag)] = value

    def get(self, tag: Any, default: Any = None) -> Any:
        return self._values.get(type_tag(tag), default)

    def __getitem__(self, tag: Any) -> Any:
        return self._values[type_tag(tag)]

    def __contains__(self, tag: object) -> bool:
        return type_tag(tag) in self._values

    def view(self) -> Mapping[TypeTag, Any]:
        """Read-only live view of the current values."""
        return MappingProxyType(self._values)

    def record(self, record: SessionRecord) -> None:
        self._records.append(record)

    def record_usage(self, usage: UsageRecord) -> None:
        self._usage.append(usage)

    @property
    def records(self) -> tuple[SessionRecord, ...]:
        return tuple(self._records)

    @property
    def usage(self) -> tuple[UsageRecord, ...]:
        return tuple(self._usage)

    @property
    def cost_usd(self) -> float:
        return sum(u.cost_usd for u in self._usage)

    def last_result(self) -> Optional[Any]:
        """Output of the most recently completed action."""
        return self._records[-1].output if self._records else None
