"""Run options."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional

from waypoint.config.defaults import DEFAULT_CONCURRENCY_LIMIT, MAX_CONCURRENCY_LIMIT


@dataclass(frozen=True)
class Verbosity:
    """What the display surfaces while a run is in progress."""
    show_prompts: bool = False
    show_llm_responses: bool = False
    show_planning: bool = False
    debug: bool = False

    @property
    def is_quiet(self) -> bool:
        return not (self.show_prompts or self.show_llm_responses or self.show_planning or self.debug)

    @classmethod
    def from_dict(cls, data: dict) -> "Verbosity":
        return cls(**{k: bool(v) for k, v in data.items() if k in cls.__dataclass_fields__})


@dataclass(frozen=True)
class RunOptions:
    """Configuration bundle for one run.

    ``tool_permissions`` of ``None`` allows every tool group. ``goal`` picks a
    goal by name or output type when the agent has several. ``input_type``
    overrides the tag derived from the initial input.
    """
    verbosity: Verbosity = field(default_factory=Verbosity)
    concurrency_limit: int = DEFAULT_CONCURRENCY_LIMIT
    tool_permissions: Optional[frozenset[str]] = None
    goal: Optional[Any] = None
    input_type: Optional[Any] = None

    def __post_init__(self):
        if not 1 <= self.concurrency_limit <= MAX_CONCURRENCY_LIMIT:
            raise ValueError(
                f"concurrency_limit must be between 1 and {MAX_CONCURRENCY_LIMIT}, "
                f"got {self.concurrency_limit}"
            )
        if self.tool_permissions is not None and not isinstance(self.tool_permissions, frozenset):
            object.__setattr__(self, "tool_permissions", frozenset(self.tool_permissions))

    def permits(self, tool_group: str) -> bool:
        return self.tool_permissions is None or tool_group in self.tool_permissions

    @classmethod
    def from_dict(cls, data: dict) -> "RunOptions":
        """Build from the ``run`` section of the settings file."""
        kwargs: dict[str, Any] = {}
        if "verbosity" in data:
            kwargs["verbosity"] = Verbosity.from_dict(data["verbosity"] or {})
        if "concurrency_limit" in data:
            kwargs["concurrency_limit"] = int(data["concurrency_limit"])
        if data.get("tool_permissions") is not None:
            kwargs["tool_permissions"] = frozenset(data["tool_permissions"])
        for key in ("goal", "input_type"):
            if data.get(key) is not None:
                kwargs[key] = data[key]
        return cls(**kwargs)
