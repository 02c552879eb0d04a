"""Process Executor - runs a plan against a per-run session."""

from __future__ import annotations

import inspect
import logging
import time
from types import MappingProxyType
from typing import Any, Mapping, Optional

from waypoint.core.actions import ActionDescriptor
from waypoint.core.context import ExecutionContext
from waypoint.core.options import RunOptions
from waypoint.core.parallel import CancellationSignal
from waypoint.core.planner import Plan
from waypoint.core.session import Session, SessionRecord
from waypoint.errors import ActionInvocationError, ExecutionError, MissingInputError, RunError
from waypoint.llm.select import ModelSelector
from waypoint.ui.display import RunDisplay

logger = logging.getLogger(__name__)


class ProcessExecutor:
    """Executes plans action by action, strictly in plan order.

    No retries and no replanning: the first failure ends the run.
    """

    def __init__(
        self,
        selector: ModelSelector,
        *,
        options: Optional[RunOptions] = None,
        display: Optional[RunDisplay] = None,
        tool_handles: Optional[Mapping[str, Any]] = None,
    ):
        self.selector = selector
        self.options = options or RunOptions()
        self.display = display or RunDisplay(self.options.verbosity)
        self.tool_handles = dict(tool_handles or {})

    async def run(
        self,
        plan: Plan,
        initial_input: Any,
        *,
        session: Optional[Session] = None,
        cancellation: Optional[CancellationSignal] = None,
    ) -> Any:
        """Run every action of ``plan`` and return the goal action's output."""
        if not plan.actions:
            raise ExecutionError(f"Plan for goal '{plan.goal.output}' has no actions")

        session = session if session is not None else Session()
        cancellation = cancellation or CancellationSignal()
        session.bind(plan.initial_input_type, initial_input)
        goal_action = plan.goal_action

        for action in plan.actions:
            cancellation.raise_if_cancelled()
            output = await self._run_action(action, session, cancellation)
            if action.name == goal_action.name:
                logger.info(f"Goal {plan.goal.output} achieved by {action.name}")
                return output

        raise ExecutionError(f"Plan ended without running goal action '{goal_action.name}'")

    def _gather_inputs(self, action: ActionDescriptor, session: Session) -> dict[str, Any]:
        inputs = {}
        for tag in action.inputs:
            if tag not in session:
                logger.error(f"Missing input {tag} for {action.name}: planner/executor mismatch")
                raise MissingInputError(action.name, tag)
            inputs[tag] = session[tag]
        return inputs

    async def _run_action(
        self,
        action: ActionDescriptor,
        session: Session,
        cancellation: CancellationSignal,
    ) -> Any:
        inputs = self._gather_inputs(action, session)
        context = ExecutionContext(
            action=action,
            session=session,
            selector=self.selector,
            options=self.options,
            cancellation=cancellation,
            display=self.display,
            tool_handles=self.tool_handles,
        )

        logger.debug(f"Running action {action.name}")
        self.display.action_started(action.name, inputs)
        start_time = time.time()
        try:
            output = action.body(*inputs.values(), context)
            if inspect.isawaitable(output):
                output = await output
        except RunError as e:
            logger.error(f"Action {action.name} failed ({e.phase.value}): {e}")
            self.display.action_failed(action.name, e)
            raise
        except Exception as e:
            logger.error(f"Action {action.name} failed: {e}")
            self.display.action_failed(action.name, e)
            raise ActionInvocationError(action.name, str(e) or type(e).__name__) from e

        if output is None:
            logger.error(f"Action {action.name} returned no value")
            raise ActionInvocationError(action.name, "returned no value")

        duration_ms = int((time.time() - start_time) * 1000)
        session.bind(action.output, output)
        session.record(
            SessionRecord(
                action=action.name,
                inputs=MappingProxyType(inputs),
                output_type=action.output,
                output=output,
                duration_ms=duration_ms,
            )
        )
        self.display.action_completed(action.name, output, duration_ms)
        return output
