"""Type tags.

Actions declare inputs and outputs as string tags, not Python types, so the
planner can search over plain identifiers. ``type_tag`` derives a tag:

- a string is already a tag;
- a class uses its ``__type_tag__`` attribute, else its ``__name__``;
- any other object uses the tag of its class.

Because ``__type_tag__`` is inherited, a base class can give a whole family
of concrete classes one shared tag:

    class TravelBrief:
        __type_tag__ = "TravelBrief"

    class JourneyTravelBrief(TravelBrief): ...

    type_tag(JourneyTravelBrief(...)) == "TravelBrief"
"""

from __future__ import annotations

from typing import Any, Iterable

TypeTag = str


def type_tag(value: Any) -> TypeTag:
    if isinstance(value, str):
        if not value:
            raise ValueError("Type tag cannot be empty")
        return value
    cls = value if isinstance(value, type) else type(value)
    tag = getattr(cls, "__type_tag__", None)
    return tag if tag else cls.__name__


def type_tags(values: Iterable[Any]) -> tuple[TypeTag, ...]:
    return tuple(type_tag(v) for v in values)
