"""waypoint - goal-directed action planning and execution for LLM agents.

Declare typed actions and goals on an Agent, deploy it on an AgentPlatform
with a ProviderRegistry, and run it: the platform plans a chain of actions
from the input type to the goal and executes it.
"""

from waypoint.core import (
    ActionDescriptor,
    ActionDescriptorStore,
    Agent,
    AgentPlatform,
    AgentProcess,
    CancellationSignal,
    ExecutionContext,
    Goal,
    Plan,
    ProcessExecutor,
    RunOptions,
    Session,
    Verbosity,
    parallel_map,
    plan,
    type_tag,
)
from waypoint.errors import (
    ActionInvocationError,
    AmbiguousGoalError,
    DuplicateActionError,
    DuplicateAgentError,
    ExecutionError,
    MissingInputError,
    ModelResolutionError,
    NoMatchingProviderError,
    NoProvidersRegisteredError,
    PlanningError,
    RunCancelledError,
    RunError,
    RunPhase,
    ToolPermissionError,
    UnknownAgentError,
    UnreachableGoalError,
    WaypointError,
)
from waypoint.llm import (
    ByCapability,
    ByName,
    DefaultModel,
    ModelResponse,
    ModelSelector,
    PerTokenPricingModel,
    ProviderBinding,
    ProviderRegistry,
    by_capability,
    by_name,
    default_model,
)

__version__ = "0.1.0"

__all__ = [
    "ActionDescriptor",
    "ActionDescriptorStore",
    "Agent",
    "AgentPlatform",
    "AgentProcess",
    "CancellationSignal",
    "ExecutionContext",
    "Goal",
    "Plan",
    "ProcessExecutor",
    "RunOptions",
    "Session",
    "Verbosity",
    "parallel_map",
    "plan",
    "type_tag",
    "ActionInvocationError",
    "AmbiguousGoalError",
    "DuplicateActionError",
    "DuplicateAgentError",
    "ExecutionError",
    "MissingInputError",
    "ModelResolutionError",
    "NoMatchingProviderError",
    "NoProvidersRegisteredError",
    "PlanningError",
    "RunCancelledError",
    "RunError",
    "RunPhase",
    "ToolPermissionError",
    "UnknownAgentError",
    "UnreachableGoalError",
    "WaypointError",
    "ByCapability",
    "ByName",
    "DefaultModel",
    "ModelResponse",
    "ModelSelector",
    "PerTokenPricingModel",
    "ProviderBinding",
    "ProviderRegistry",
    "by_capability",
    "by_name",
    "default_model",
]
