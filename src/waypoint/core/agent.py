"""Agent definitions.

An agent is a named pool of actions plus the goals it can achieve. Actions
are registered by explicit calls, either with a descriptor or with the
decorator form:

    planner = Agent("TravelPlanner", "Make a detailed travel plan")

    @planner.action(inputs=[TravelBrief], output=ItineraryIdeas, tool_groups=["web"])
    async def find_points_of_interest(brief, context):
        ...

    @planner.goal(inputs=[TravelBrief, PointOfInterestFindings], output=TravelPlan,
                  description="Create a detailed travel plan")
    async def create_travel_plan(brief, findings, context):
        ...
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Iterable, Optional

from waypoint.core.actions import ActionBody, ActionDescriptor, ActionDescriptorStore, Goal
from waypoint.core.tags import type_tag

logger = logging.getLogger(__name__)


class Agent:
    def __init__(self, name: str, description: str = ""):
        if not name:
            raise ValueError("Agent requires a name")
        self.name = name
        self.description = description
        self.actions = ActionDescriptorStore()
        self._goals: list[Goal] = []

    @property
    def goals(self) -> list[Goal]:
        return list(self._goals)

    def register(self, descriptor: ActionDescriptor) -> ActionDescriptor:
        """Register a descriptor. Goal-achieving actions also declare a Goal."""
        self.actions.register(descriptor)
        if descriptor.achieves_goal:
            self._goals.append(
                Goal(
                    name=descriptor.name,
                    output=descriptor.output,
                    description=descriptor.description,
                )
            )
        return descriptor

    def action(
        self,
        *,
        inputs: Iterable[Any],
        output: Any,
        name: Optional[str] = None,
        description: str = "",
        tool_groups: Iterable[str] = (),
        achieves_goal: bool = False,
    ) -> Callable[[ActionBody], ActionBody]:
        """Decorator that registers the function as an action body."""

        def decorator(body: ActionBody) -> ActionBody:
            self.register(
                ActionDescriptor(
                    name=name or body.__name__,
                    inputs=tuple(inputs),
                    output=output,
                    body=body,
                    achieves_goal=achieves_goal,
                    description=description or (body.__doc__ or "").strip(),
                    tool_groups=tuple(tool_groups),
                )
            )
            return body

        return decorator

    def goal(
        self,
        *,
        inputs: Iterable[Any],
        output: Any,
        description: str,
        name: Optional[str] = None,
        tool_groups: Iterable[str] = (),
    ) -> Callable[[ActionBody], ActionBody]:
        """Decorator for an action that achieves a goal."""
        return self.action(
            inputs=inputs,
            output=output,
            name=name,
            description=description,
            tool_groups=tool_groups,
            achieves_goal=True,
        )

    def find_goal(self, key: Any) -> Optional[Goal]:
        """Look a goal up by name, then by output type tag."""
        if isinstance(key, Goal):
            return key
        for goal in self._goals:
            if goal.name == key:
                return goal
        tag = type_tag(key)
        for goal in self._goals:
            if goal.output == tag:
                return goal
        return None

    def __repr__(self) -> str:
        return f"Agent(name={self.name!r}, actions={len(self.actions)}, goals={len(self._goals)})"
