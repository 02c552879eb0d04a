"""LLM Provider Registry - connected model bindings.

Provides:
- ProviderBinding: A connected model endpoint with identity, pricing and capabilities
- ModelResponse: Standardized result a model handle may return
- ProviderRegistry: Holds bindings for one platform, rejects duplicate names

There is no module-level registry instance. Create one, populate it during
setup (see ``waypoint.llm.providers.loader``) and pass it to whatever needs
it.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import Any, Callable, Optional

from waypoint.llm.pricing import ALL_YOU_CAN_EAT, PerTokenPricingModel

logger = logging.getLogger(__name__)

# =============================================================================
# Binding
# =============================================================================


class ConnectionStatus(Enum):
    CONNECTED = "connected"
    UNAVAILABLE = "unavailable"


@dataclass(frozen=True)
class ProviderBinding:
    """A connected, usable model endpoint.

    ``model`` is the opaque handle produced by the vendor connector. It is
    called (or awaited) by ``ExecutionContext.call_model``.
    """
    name: str
    model: Callable[..., Any] = field(compare=False, repr=False)
    provider: str = ""
    pricing: PerTokenPricingModel = ALL_YOU_CAN_EAT
    knowledge_cutoff: Optional[date] = None
    capabilities: frozenset[str] = frozenset()
    status: ConnectionStatus = ConnectionStatus.CONNECTED

    def __post_init__(self):
        if not self.name:
            raise ValueError("ProviderBinding requires a name")
        if not isinstance(self.capabilities, frozenset):
            object.__setattr__(self, "capabilities", frozenset(self.capabilities))

    @property
    def is_connected(self) -> bool:
        return self.status is ConnectionStatus.CONNECTED


# =============================================================================
# Model Response
# =============================================================================


@dataclass
class ModelResponse:
    """Standardized result from a model handle.

    Handles are free to return anything; when the result exposes
    ``input_tokens`` and ``output_tokens`` the call is costed.
    """
    content: Any
    input_tokens: int = 0
    output_tokens: int = 0


# =============================================================================
# Provider Registry
# =============================================================================


class ProviderRegistry:
    """Bindings keyed by unique name, in registration order.

    Read-mostly: registration happens during setup and is serialized by a
    lock; lookups may come from many concurrent runs.
    """

    def __init__(self):
        self._bindings: dict[str, ProviderBinding] = {}
        self._lock = threading.Lock()

    def register_provider(self, binding: ProviderBinding) -> bool:
        """Register a binding. Returns False if the name is taken.

        A duplicate is rejected and logged; it never raises, so one bad
        provider cannot stop the others from registering.
        """
        with self._lock:
            if binding.name in self._bindings:
                existing = self._bindings[binding.name]
                logger.error(
                    f"Rejected provider binding '{binding.name}' from "
                    f"'{binding.provider or 'unknown'}': name already registered by "
                    f"'{existing.provider or 'unknown'}'"
                )
                return False
            self._bindings[binding.name] = binding
        logger.info(f"Registered provider binding: {binding.name} ({binding.provider or 'unknown'})")
        return True

    def all_providers(self) -> list[ProviderBinding]:
        with self._lock:
            return list(self._bindings.values())

    def provider_by_name(self, name: str) -> Optional[ProviderBinding]:
        with self._lock:
            return self._bindings.get(name)

    def names(self) -> list[str]:
        with self._lock:
            return list(self._bindings.keys())

    def __len__(self) -> int:
        with self._lock:
            return len(self._bindings)

    def __contains__(self, name: object) -> bool:
        with self._lock:
            return name in self._bindings
