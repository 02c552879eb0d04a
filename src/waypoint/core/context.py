"""Execution context handed to every action body."""

from __future__ import annotations

import inspect
import logging
from typing import Any, Awaitable, Callable, Mapping, Optional, Sequence, TypeVar, Union

from waypoint.core.actions import ActionDescriptor
from waypoint.core.options import RunOptions
from waypoint.core.parallel import CancellationSignal, parallel_map
from waypoint.core.session import Session, UsageRecord
from waypoint.core.tags import TypeTag
from waypoint.llm.providers import ProviderBinding
from waypoint.llm.select import ModelSelector, SelectionCriterion
from waypoint.ui.display import RunDisplay

logger = logging.getLogger(__name__)

T = TypeVar("T")
R = TypeVar("R")


class ExecutionContext:
    """What an action body can see and use.

    - ``session``: read-only view of the blackboard
    - ``select_model`` / ``call_model``: model resolution and invocation
    - ``parallel_map``: bounded fan-out, joined before the action returns
    - ``tool_groups`` / ``tool_handle``: the tool groups this action requested
    """

    def __init__(
        self,
        *,
        action: ActionDescriptor,
        session: Session,
        selector: ModelSelector,
        options: RunOptions,
        cancellation: CancellationSignal,
        display: RunDisplay,
        tool_handles: Optional[Mapping[str, Any]] = None,
    ):
        self.action = action
        self.selector = selector
        self.options = options
        self.cancellation = cancellation
        self._session = session
        self._display = display
        self._tool_handles = dict(tool_handles or {})

    @property
    def session(self) -> Mapping[TypeTag, Any]:
        return self._session.view()

    @property
    def tool_groups(self) -> frozenset[str]:
        return frozenset(self.action.tool_groups)

    def tool_handle(self, group: str) -> Any:
        """Opaque handle for a requested tool group."""
        if group not in self.action.tool_groups:
            raise KeyError(f"Action '{self.action.name}' did not request tool group '{group}'")
        if group not in self._tool_handles:
            raise KeyError(f"No handle provided for tool group '{group}'")
        return self._tool_handles[group]

    def select_model(self, criterion: SelectionCriterion) -> ProviderBinding:
        return self.selector.select(criterion)

    async def call_model(self, criterion: SelectionCriterion, *args, **kwargs) -> Any:
        """Resolve a binding and invoke its model handle.

        The handle may be sync or async. When its result carries
        ``input_tokens`` and ``output_tokens`` the call is costed and
        recorded in the session.
        """
        self.cancellation.raise_if_cancelled()
        binding = self.select_model(criterion)
        prompt = kwargs.get("prompt", args[0] if args else None)
        if prompt is not None:
            self._display.model_prompt(binding.name, prompt)

        response = binding.model(*args, **kwargs)
        if inspect.isawaitable(response):
            response = await response

        cost = 0.0
        input_tokens = getattr(response, "input_tokens", None)
        output_tokens = getattr(response, "output_tokens", None)
        if input_tokens is not None and output_tokens is not None:
            cost = self.record_usage(binding, input_tokens, output_tokens).cost_usd
        self._display.model_response(binding.name, getattr(response, "content", response), cost)
        return response

    def record_usage(self, binding: ProviderBinding, input_tokens: int, output_tokens: int) -> UsageRecord:
        usage = UsageRecord(
            action=self.action.name,
            model=binding.name,
            input_tokens=input_tokens,
            output_tokens=output_tokens,
            cost_usd=binding.pricing.cost_of(input_tokens, output_tokens),
        )
        self._session.record_usage(usage)
        logger.debug(
            f"{self.action.name} used {binding.name}: "
            f"{input_tokens} in / {output_tokens} out, ${usage.cost_usd:.6f}"
        )
        return usage

    async def parallel_map(
        self,
        items: Sequence[T],
        fn: Callable[[T], Union[R, Awaitable[R]]],
    ) -> list[R]:
        return await parallel_map(
            items,
            fn,
            max_concurrent=self.options.concurrency_limit,
            cancellation=self.cancellation,
        )
