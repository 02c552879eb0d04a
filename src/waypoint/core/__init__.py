"""Core of waypoint: actions, planning and execution.

This module provides the goal-directed planner, the process executor that
runs its plans against a per-run session, and the parallel map combinator
available to action bodies.
"""

from .actions import (
    ActionDescriptor,
    ActionDescriptorStore,
    Goal,
)
from .agent import Agent
from .context import ExecutionContext
from .executor import ProcessExecutor
from .options import RunOptions, Verbosity
from .parallel import CancellationSignal, parallel_map
from .planner import Plan, plan
from .platform import AgentPlatform, AgentProcess
from .session import Session, SessionRecord, UsageRecord
from .tags import TypeTag, type_tag

__all__ = [
    # Actions
    "ActionDescriptor",
    "ActionDescriptorStore",
    "Goal",
    "Agent",
    # Planning
    "Plan",
    "plan",
    # Execution
    "ExecutionContext",
    "ProcessExecutor",
    "RunOptions",
    "Verbosity",
    "CancellationSignal",
    "parallel_map",
    "Session",
    "SessionRecord",
    "UsageRecord",
    # Platform
    "AgentPlatform",
    "AgentProcess",
    # Tags
    "TypeTag",
    "type_tag",
]
