"""Agent platform - the run entry point.

Owns the deployed agents, the provider registry (passed in, never global)
and the selector built over it. ``run_agent`` plans, checks tool
permissions, then executes:

    platform = AgentPlatform(registry, default_model="gpt-4.1-mini")
    platform.deploy(travel_planner)
    travel_plan = await platform.run_agent("TravelPlanner", brief, RunOptions(concurrency_limit=4))

Errors raised are RunError subclasses whose ``phase`` names the failing
stage: planning, provider resolution or action execution.
"""

from __future__ import annotations

import logging
import time
import uuid
from dataclasses import dataclass
from typing import Any, Mapping, Optional

from rich.console import Console

from waypoint.config.settings import Settings
from waypoint.core.agent import Agent
from waypoint.core.actions import Goal
from waypoint.core.executor import ProcessExecutor
from waypoint.core.options import RunOptions
from waypoint.core.parallel import CancellationSignal
from waypoint.core.planner import Plan, plan
from waypoint.core.session import Session
from waypoint.core.tags import type_tag
from waypoint.errors import (
    DuplicateAgentError,
    PlanningError,
    ToolPermissionError,
    UnknownAgentError,
    UnreachableGoalError,
)
from waypoint.llm.providers import ProviderRegistry
from waypoint.llm.providers.loader import Connector, load_providers
from waypoint.llm.select import ModelSelector
from waypoint.ui.display import RunDisplay

logger = logging.getLogger(__name__)


@dataclass
class AgentProcess:
    """A finished run: its plan, session log and final output."""
    run_id: str
    agent: str
    plan: Plan
    session: Session
    output: Any
    duration_ms: int = 0

    @property
    def cost_usd(self) -> float:
        return self.session.cost_usd

    def last_result(self) -> Any:
        return self.output


class AgentPlatform:
    def __init__(
        self,
        registry: ProviderRegistry,
        *,
        default_model: Optional[str] = None,
        default_options: Optional[RunOptions] = None,
        tool_handles: Optional[Mapping[str, Any]] = None,
        console: Optional[Console] = None,
    ):
        self.registry = registry
        self.selector = ModelSelector(registry, default_model=default_model)
        self.default_options = default_options or RunOptions()
        self.tool_handles = dict(tool_handles or {})
        self._console = console
        self._agents: dict[str, Agent] = {}

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        connectors: Mapping[str, Connector],
        **kwargs,
    ) -> "AgentPlatform":
        """Build a registry from settings and a platform over it.

        Providers that fail to connect are logged and left out.
        """
        registry = ProviderRegistry()
        load_providers(registry, settings, connectors)
        return cls(
            registry,
            default_model=settings.default_model,
            default_options=RunOptions.from_dict(settings.run),
            **kwargs,
        )

    # ------------------------------------------------------------------
    # Agents
    # ------------------------------------------------------------------

    def deploy(self, agent: Agent) -> Agent:
        if agent.name in self._agents:
            raise DuplicateAgentError(agent.name)
        self._agents[agent.name] = agent
        logger.info(
            f"Deployed agent {agent.name}: {len(agent.actions)} actions, "
            f"goals {[g.name for g in agent.goals]}"
        )
        return agent

    def agents(self) -> list[Agent]:
        return list(self._agents.values())

    def agent(self, name: str) -> Agent:
        try:
            return self._agents[name]
        except KeyError:
            raise UnknownAgentError(name, self._agents) from None

    # ------------------------------------------------------------------
    # Planning
    # ------------------------------------------------------------------

    def plan_for(self, agent: Agent, input_type: Any, options: Optional[RunOptions] = None) -> Plan:
        """Choose a goal and plan it, then check tool permissions.

        With ``options.goal`` set, only that goal is planned. Otherwise the
        agent's goals are tried in declaration order and the first reachable
        one wins; only UnreachableGoalError moves on to the next goal.
        """
        options = options or self.default_options
        if options.goal is not None:
            goal = agent.find_goal(options.goal) or Goal(name=type_tag(options.goal), output=options.goal)
            result = plan(input_type, goal, agent.actions)
        else:
            result = self._plan_any_goal(agent, input_type)
        self._check_tool_permissions(result, options)
        return result

    def _plan_any_goal(self, agent: Agent, input_type: Any) -> Plan:
        goals = agent.goals
        if not goals:
            raise PlanningError(f"Agent '{agent.name}' declares no goals")
        last_error: Optional[UnreachableGoalError] = None
        for goal in goals:
            try:
                return plan(input_type, goal, agent.actions)
            except UnreachableGoalError as e:
                logger.debug(f"Goal {goal.name} of {agent.name} unreachable: {e}")
                last_error = e
        raise last_error

    @staticmethod
    def _check_tool_permissions(result: Plan, options: RunOptions) -> None:
        for action in result.actions:
            denied = [g for g in action.tool_groups if not options.permits(g)]
            if denied:
                logger.error(f"Plan rejected: {action.name} requires denied tool groups {denied}")
                raise ToolPermissionError(action.name, denied)

    # ------------------------------------------------------------------
    # Running
    # ------------------------------------------------------------------

    async def run_process(
        self,
        agent_name: str,
        initial_input: Any,
        run_options: Optional[RunOptions] = None,
        *,
        cancellation: Optional[CancellationSignal] = None,
    ) -> AgentProcess:
        """Plan and execute, returning the whole process record."""
        options = run_options or self.default_options
        agent = self.agent(agent_name)
        if options.input_type is not None:
            input_type = type_tag(options.input_type)
        else:
            input_type = type_tag(type(initial_input))
        run_id = uuid.uuid4().hex[:12]

        display = RunDisplay(options.verbosity, console=self._console)
        result_plan = self.plan_for(agent, input_type, options)
        display.plan_formed(agent.name, result_plan)

        logger.info(f"Run {run_id}: {agent.name} {result_plan.describe()}")
        session = Session(run_id=run_id)
        executor = ProcessExecutor(
            self.selector,
            options=options,
            display=display,
            tool_handles=self.tool_handles,
        )
        start_time = time.time()
        output = await executor.run(result_plan, initial_input, session=session, cancellation=cancellation)
        duration_ms = int((time.time() - start_time) * 1000)
        logger.info(f"Run {run_id} completed in {duration_ms}ms (cost ${session.cost_usd:.6f})")

        return AgentProcess(
            run_id=run_id,
            agent=agent.name,
            plan=result_plan,
            session=session,
            output=output,
            duration_ms=duration_ms,
        )

    async def run_agent(
        self,
        agent_name: str,
        initial_input: Any,
        run_options: Optional[RunOptions] = None,
        *,
        cancellation: Optional[CancellationSignal] = None,
    ) -> Any:
        """Run an agent and return the goal value."""
        process = await self.run_process(
            agent_name, initial_input, run_options, cancellation=cancellation
        )
        return process.output
