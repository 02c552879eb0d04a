"""Error taxonomy for waypoint.

Provides:
- WaypointError: Base class for everything raised by the package
- RunError: Errors that abort a run, tagged with the RunPhase that failed
- PlanningError / ModelResolutionError / ExecutionError: one branch per phase
- DuplicateActionError / DuplicateAgentError: definition-time mistakes

Provider registration failures are not raised: they are logged and
isolated per provider, never raised.
"""

from __future__ import annotations

from enum import Enum
from typing import Iterable, Optional


class RunPhase(Enum):
    PLANNING = "planning"
    PROVIDER_RESOLUTION = "provider_resolution"
    ACTION_EXECUTION = "action_execution"


class WaypointError(Exception):
    """Base class for all waypoint errors."""


# =============================================================================
# Definition-time errors
# =============================================================================

class DuplicateActionError(WaypointError):
    """Raised when an action name is registered twice for one agent."""

    def __init__(self, name: str):
        super().__init__(f"Action '{name}' is already registered")
        self.name = name


class DuplicateAgentError(WaypointError):
    """Raised when an agent name is deployed twice on one platform."""

    def __init__(self, name: str):
        super().__init__(f"Agent '{name}' is already deployed")
        self.name = name


# =============================================================================
# Run errors
# =============================================================================

class RunError(WaypointError):
    """An error that aborts a run. ``phase`` says where it happened."""

    phase: RunPhase = RunPhase.ACTION_EXECUTION


class PlanningError(RunError):
    """Raised before any action executes."""

    phase = RunPhase.PLANNING


class UnreachableGoalError(PlanningError):
    """No chain of actions connects the initial input to the goal."""

    def __init__(self, goal: str, missing: str, detail: str = ""):
        message = f"Goal '{goal}' is unreachable: nothing produces '{missing}'"
        if detail:
            message = f"Goal '{goal}' is unreachable: {detail}"
        super().__init__(message)
        self.goal = goal
        self.missing = missing


class AmbiguousGoalError(PlanningError):
    """More than one terminal action could achieve the goal."""

    def __init__(self, goal: str, candidates: Iterable[str]):
        self.goal = goal
        self.candidates = list(candidates)
        super().__init__(
            f"Goal '{goal}' is ambiguous: candidates {', '.join(self.candidates)}"
        )


class ToolPermissionError(PlanningError):
    """A planned action requests a tool group the run does not allow."""

    def __init__(self, action: str, denied: Iterable[str]):
        self.action = action
        self.denied = sorted(denied)
        super().__init__(
            f"Action '{action}' requires tool groups not permitted for this run: "
            f"{', '.join(self.denied)}"
        )


class UnknownAgentError(PlanningError):
    """Raised when run_agent names an agent that was never deployed."""

    def __init__(self, name: str, available: Iterable[str]):
        self.name = name
        self.available = list(available)
        super().__init__(
            f"Unknown agent '{name}'. Deployed agents: {self.available or 'none'}"
        )


class ModelResolutionError(RunError):
    """A selection criterion could not be resolved to a provider binding."""

    phase = RunPhase.PROVIDER_RESOLUTION


class NoMatchingProviderError(ModelResolutionError):
    """No registered, connected binding satisfies the criterion."""

    def __init__(self, criterion: str, available: Iterable[str], reason: Optional[str] = None):
        self.criterion = criterion
        self.available = list(available)
        message = f"No provider matches {criterion}. Available: {self.available or 'none'}"
        if reason:
            message = f"{message} ({reason})"
        super().__init__(message)


class NoProvidersRegisteredError(NoMatchingProviderError):
    """The registry is empty, so no criterion can match."""

    def __init__(self, criterion: str):
        super().__init__(criterion, [], reason="no providers registered")


class ExecutionError(RunError):
    """Raised while a plan is executing."""

    phase = RunPhase.ACTION_EXECUTION


class MissingInputError(ExecutionError):
    """An action's input is absent from the session.

    Always a bug in the planner/executor pairing; never recovered.
    """

    def __init__(self, action: str, type_tag: str):
        super().__init__(f"Action '{action}' is missing input of type '{type_tag}'")
        self.action = action
        self.type_tag = type_tag


class ActionInvocationError(ExecutionError):
    """Wraps any failure raised from an action body."""

    def __init__(self, action: str, message: str):
        super().__init__(f"Action '{action}' failed: {message}")
        self.action = action


class RunCancelledError(ExecutionError):
    """The run-level cancellation signal was raised."""
