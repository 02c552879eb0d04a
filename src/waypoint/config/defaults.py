"""Default configuration values for waypoint.

This module centralizes the tunable numbers used across the package. Values
can be overridden from the environment (a ``.env`` file is honoured, see
``waypoint.config.settings``).

Usage:
    from waypoint.config.defaults import (
        DEFAULT_CONCURRENCY_LIMIT,
        CONFIG_ENV_VAR,
    )
"""

from __future__ import annotations

import os

# =============================================================================
# Environment Variables
# =============================================================================

CONFIG_ENV_VAR = "WAYPOINT_CONFIG"
PROFILES_ENV_VAR = "WAYPOINT_PROFILES"
DEFAULT_MODEL_ENV_VAR = "WAYPOINT_DEFAULT_MODEL"


# =============================================================================
# Execution Defaults
# =============================================================================

# Max in-flight calls inside parallel_map for one run
DEFAULT_CONCURRENCY_LIMIT = int(os.environ.get("WAYPOINT_CONCURRENCY_LIMIT", "8"))

# Hard cap applied to any configured limit
MAX_CONCURRENCY_LIMIT = 256


# =============================================================================
# Pricing Defaults
# =============================================================================

# Provider prices are quoted in USD per million tokens
TOKENS_PER_PRICING_UNIT = 1_000_000


# =============================================================================
# Display Defaults
# =============================================================================

# Longest value preview printed by the verbose display
DISPLAY_MAX_PREVIEW_CHARS = 240
