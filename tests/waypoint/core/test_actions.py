"""Tests for action descriptors, the store, agents and type tags."""

import pytest

from waypoint.core.actions import ActionDescriptor, ActionDescriptorStore, Goal
from waypoint.core.agent import Agent
from waypoint.core.tags import type_tag
from waypoint.errors import DuplicateActionError


def _noop(*args):
    return "x"


class TravelBrief:
    __type_tag__ = "TravelBrief"


class JourneyTravelBrief(TravelBrief):
    pass


class ItineraryIdeas:
    pass


def test_type_tag_from_string_class_and_instance():
    assert type_tag("Input") == "Input"
    assert type_tag(ItineraryIdeas) == "ItineraryIdeas"
    assert type_tag(ItineraryIdeas()) == "ItineraryIdeas"


def test_type_tag_inherited_from_base():
    """Subclasses share the base class tag."""
    assert type_tag(JourneyTravelBrief) == "TravelBrief"
    assert type_tag(JourneyTravelBrief()) == "TravelBrief"


def test_type_tag_rejects_empty_string():
    with pytest.raises(ValueError):
        type_tag("")


def test_descriptor_normalizes_tags():
    action = ActionDescriptor(
        name="find",
        inputs=[TravelBrief],
        output=ItineraryIdeas,
        body=_noop,
        tool_groups=["web"],
    )
    assert action.inputs == ("TravelBrief",)
    assert action.output == "ItineraryIdeas"
    assert action.tool_groups == ("web",)


def test_descriptor_rejects_duplicate_inputs():
    with pytest.raises(ValueError):
        ActionDescriptor(name="bad", inputs=("X", "X"), output="Y", body=_noop)


def test_descriptor_is_immutable():
    action = ActionDescriptor(name="a", inputs=("X",), output="Y", body=_noop)
    with pytest.raises(AttributeError):
        action.name = "b"


def test_store_register_and_lookup():
    store = ActionDescriptorStore()
    a = store.register(ActionDescriptor(name="a", inputs=("Input",), output="X", body=_noop))
    b = store.register(ActionDescriptor(name="b", inputs=("X",), output="Y", body=_noop))
    c = store.register(ActionDescriptor(name="c", inputs=("Input",), output="X", body=_noop))

    assert store.all_actions() == [a, b, c]
    assert store.actions_producing("X") == [a, c]
    assert store.actions_producing("Nothing") == []
    assert store.index_of("c") == 2
    assert len(store) == 3
    assert "b" in store


def test_store_rejects_duplicate_name():
    store = ActionDescriptorStore()
    store.register(ActionDescriptor(name="a", inputs=("Input",), output="X", body=_noop))
    with pytest.raises(DuplicateActionError) as exc_info:
        store.register(ActionDescriptor(name="a", inputs=("X",), output="Y", body=_noop))
    assert exc_info.value.name == "a"
    assert len(store) == 1


def test_store_reads_do_not_mutate():
    store = ActionDescriptorStore([ActionDescriptor(name="a", inputs=("Input",), output="X", body=_noop)])
    listing = store.all_actions()
    listing.clear()
    assert len(store.all_actions()) == 1


def test_agent_decorators_register_actions_and_goals():
    agent = Agent("TravelPlanner", "Make a detailed travel plan")

    @agent.action(inputs=[TravelBrief], output=ItineraryIdeas, tool_groups=["web", "maps"])
    def find_points_of_interest(brief, context):
        """Find points of interest."""
        return ItineraryIdeas()

    @agent.goal(inputs=[TravelBrief, ItineraryIdeas], output="TravelPlan", description="Create a plan")
    def create_travel_plan(brief, ideas, context):
        return "plan"

    actions = agent.actions.all_actions()
    assert [a.name for a in actions] == ["find_points_of_interest", "create_travel_plan"]
    assert actions[0].description == "Find points of interest."
    assert actions[0].tool_groups == ("web", "maps")
    assert actions[1].achieves_goal is True
    assert agent.goals == [Goal(name="create_travel_plan", output="TravelPlan", description="Create a plan")]
    # Decorator returns the original function
    assert find_points_of_interest(None, None).__class__ is ItineraryIdeas


def test_agent_find_goal_by_name_and_type():
    agent = Agent("a")
    agent.register(ActionDescriptor(name="g", inputs=("Input",), output="Goal", body=_noop, achieves_goal=True))

    assert agent.find_goal("g").output == "Goal"
    assert agent.find_goal("Goal").name == "g"
    assert agent.find_goal("Other") is None


def test_agent_duplicate_goal_name():
    agent = Agent("a")
    agent.register(ActionDescriptor(name="g", inputs=("Input",), output="Goal", body=_noop, achieves_goal=True))
    with pytest.raises(DuplicateActionError):
        agent.register(ActionDescriptor(name="g", inputs=("X",), output="Goal", body=_noop, achieves_goal=True))
    assert len(agent.goals) == 1
