"""Goal-directed planner.

Backward chaining from the goal type over the actions of one agent:

1. The goal type always needs a goal-achieving action, even when the
   initial input has the same type: the single candidate marked
   ``achieves_goal``. Two or more such candidates, or none of them with
   several producers, is ambiguous and reported, never guessed.
2. Every other needed type is covered by the initial input or by the output
   of an action already chosen. The goal action does not cover its own
   inputs: a goal action that refines a value of the goal type needs another
   producer of that type before it.
3. An uncovered type tries its producers, most recently declared first. A
   producer whose inputs cannot all be made (or that closes a cycle) is
   dropped and the next one is tried.
4. Chosen actions are ordered producers-first (Kahn), ties by declaration
   order, with the goal action held back so the plan ends on it.

``plan()`` is a pure function of its arguments. The goal is unreachable only
when every combination of producers fails.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Iterator, Optional, Union

from waypoint.core.actions import ActionDescriptor, ActionDescriptorStore, Goal
from waypoint.core.tags import TypeTag, type_tag
from waypoint.errors import AmbiguousGoalError, UnreachableGoalError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Plan:
    """Ordered actions from the initial input type to the goal."""
    goal: Goal
    initial_input_type: TypeTag
    actions: tuple[ActionDescriptor, ...]

    @property
    def goal_action(self) -> ActionDescriptor:
        return self.actions[-1]

    def action_names(self) -> list[str]:
        return [a.name for a in self.actions]

    def describe(self) -> str:
        return " -> ".join([self.initial_input_type] + self.action_names())

    def __len__(self) -> int:
        return len(self.actions)

    def __iter__(self) -> Iterator[ActionDescriptor]:
        return iter(self.actions)


def _as_goal(goal: Union[Goal, Any]) -> Goal:
    if isinstance(goal, Goal):
        return goal
    tag = type_tag(goal)
    return Goal(name=tag, output=tag)


def _choose_goal_action(goal_type: TypeTag, candidates: list[ActionDescriptor]) -> ActionDescriptor:
    achievers = [a for a in candidates if a.achieves_goal]
    if len(achievers) == 1:
        return achievers[0]
    if len(achievers) > 1:
        raise AmbiguousGoalError(goal_type, [a.name for a in achievers])
    if len(candidates) == 1:
        return candidates[0]
    raise AmbiguousGoalError(goal_type, [a.name for a in candidates])


class _ProducerSearch:
    """Depth-first search over producer choices.

    ``producer_of`` maps each needed type to the action chosen to make it.
    The goal action is never in it, so edges into the goal action always
    come from an earlier producer.
    """

    def __init__(
        self,
        initial: TypeTag,
        goal_type: TypeTag,
        goal_action: ActionDescriptor,
        actions: ActionDescriptorStore,
    ):
        self.initial = initial
        self.goal_type = goal_type
        self.goal_action = goal_action
        self.actions = actions
        self.failures: list[UnreachableGoalError] = []

    def run(
        self,
        frontier: tuple[TypeTag, ...],
        selected: dict[str, ActionDescriptor],
        producer_of: dict[TypeTag, ActionDescriptor],
    ) -> Optional[list[ActionDescriptor]]:
        while frontier:
            needed, frontier = frontier[-1], frontier[:-1]
            if needed == self.initial or needed in producer_of:
                continue

            candidates = [a for a in self.actions.actions_producing(needed) if a.name not in selected]
            if not candidates:
                self.failures.append(UnreachableGoalError(self.goal_type, needed))
                return None

            for chosen in reversed(candidates):
                result = self.run(
                    frontier + tuple(reversed(chosen.inputs)),
                    {**selected, chosen.name: chosen},
                    {**producer_of, needed: chosen},
                )
                if result is not None:
                    return result
                logger.debug(f"Producer {chosen.name} of {needed} leads nowhere, backtracking")
            return None

        try:
            return _order(selected, producer_of, self.initial, self.goal_action, self.goal_type, self.actions)
        except UnreachableGoalError as e:
            self.failures.append(e)
            return None


def plan(initial_input_type: Any, goal: Union[Goal, Any], actions: ActionDescriptorStore) -> Plan:
    """Compute a plan, or raise a PlanningError."""
    initial = type_tag(initial_input_type)
    target = _as_goal(goal)
    goal_type = target.output

    producers = actions.actions_producing(goal_type)
    if not producers:
        logger.info(f"Goal {goal_type} unreachable from {initial}: nothing produces it")
        raise UnreachableGoalError(goal_type, goal_type)
    goal_action = _choose_goal_action(goal_type, producers)

    search = _ProducerSearch(initial, goal_type, goal_action, actions)
    ordered = search.run(tuple(reversed(goal_action.inputs)), {goal_action.name: goal_action}, {})
    if ordered is None:
        error = search.failures[0]
        logger.info(f"Goal {goal_type} unreachable from {initial}: {error}")
        raise error

    result = Plan(goal=target, initial_input_type=initial, actions=tuple(ordered))
    logger.info(f"Planned goal {goal_type}: {result.describe()}")
    return result


def _order(
    selected: dict[str, ActionDescriptor],
    producer_of: dict[TypeTag, ActionDescriptor],
    initial: TypeTag,
    goal_action: ActionDescriptor,
    goal_type: TypeTag,
    actions: ActionDescriptorStore,
) -> list[ActionDescriptor]:
    """Topological sort of the chosen actions (Kahn's algorithm)."""
    position = {name: actions.index_of(name) for name in selected}
    pending: dict[str, set[str]] = {
        name: {producer_of[tag].name for tag in action.inputs if tag != initial}
        for name, action in selected.items()
    }

    ordered: list[ActionDescriptor] = []
    while pending:
        ready = [
            name for name, deps in pending.items()
            if not deps and name != goal_action.name
        ]
        if not ready:
            if list(pending) == [goal_action.name] and not pending[goal_action.name]:
                ready = [goal_action.name]
            else:
                stuck = sorted(pending, key=position.get)
                raise UnreachableGoalError(
                    goal_type,
                    missing=stuck[0],
                    detail=f"actions {stuck} depend on each other's outputs",
                )
        name = min(ready, key=position.get)
        ordered.append(selected[name])
        del pending[name]
        for deps in pending.values():
            deps.discard(name)

    return ordered
