"""Console presentation for waypoint runs."""

from .display import RunDisplay

__all__ = ["RunDisplay"]
