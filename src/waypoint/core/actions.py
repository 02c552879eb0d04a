"""Action descriptors and the store that holds them for one agent."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Iterable, Optional

from waypoint.core.tags import TypeTag, type_tag, type_tags
from waypoint.errors import DuplicateActionError

logger = logging.getLogger(__name__)

ActionBody = Callable[..., Any]


@dataclass(frozen=True)
class ActionDescriptor:
    """A typed transformation step.

    ``body`` is called as ``body(*inputs, context)`` with inputs in the order
    declared here, and returns one value of type ``output`` (or an awaitable
    producing it).
    """
    name: str
    inputs: tuple[TypeTag, ...]
    output: TypeTag
    body: ActionBody = field(compare=False, repr=False)
    achieves_goal: bool = False
    description: str = ""
    tool_groups: tuple[str, ...] = ()

    def __post_init__(self):
        if not self.name:
            raise ValueError("Action requires a name")
        object.__setattr__(self, "inputs", type_tags(self.inputs))
        object.__setattr__(self, "output", type_tag(self.output))
        object.__setattr__(self, "tool_groups", tuple(self.tool_groups))
        if len(set(self.inputs)) != len(self.inputs):
            raise ValueError(f"Action '{self.name}' declares a duplicate input type")


@dataclass(frozen=True)
class Goal:
    """A target output type plus a human-readable description."""
    name: str
    output: TypeTag
    description: str = ""

    def __post_init__(self):
        object.__setattr__(self, "output", type_tag(self.output))


class ActionDescriptorStore:
    """All actions declared for an agent, in declaration order."""

    def __init__(self, actions: Optional[Iterable[ActionDescriptor]] = None):
        self._actions: dict[str, ActionDescriptor] = {}
        for action in actions or ():
            self.register(action)

    def register(self, descriptor: ActionDescriptor) -> ActionDescriptor:
        if descriptor.name in self._actions:
            logger.error(f"Duplicate action registration: {descriptor.name}")
            raise DuplicateActionError(descriptor.name)
        self._actions[descriptor.name] = descriptor
        logger.debug(
            f"Registered action {descriptor.name}: "
            f"{list(descriptor.inputs)} -> {descriptor.output}"
        )
        return descriptor

    def all_actions(self) -> list[ActionDescriptor]:
        return list(self._actions.values())

    def actions_producing(self, tag: Any) -> list[ActionDescriptor]:
        tag = type_tag(tag)
        return [a for a in self._actions.values() if a.output == tag]

    def get(self, name: str) -> Optional[ActionDescriptor]:
        return self._actions.get(name)

    def index_of(self, name: str) -> int:
        """Declaration position of an action."""
        for i, existing in enumerate(self._actions):
            if existing == name:
                return i
        raise KeyError(name)

    def __len__(self) -> int:
        return len(self._actions)

    def __iter__(self):
        return iter(self._actions.values())

    def __contains__(self, name: object) -> bool:
        return name in self._actions
