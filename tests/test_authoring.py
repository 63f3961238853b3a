"""Tests for the editor-style graph building helpers."""

import pytest
from canvasflow.workflow.authoring import add_trigger, append_action, generate_id, new_action, new_trigger
from canvasflow.workflow.engine import run_workflow
from canvasflow.workflow.models import Condition, Element, NodeGraph, RunStatus, TriggerNode


def test_generate_id_is_unique():
    ids = {generate_id() for _ in range(100)}
    assert len(ids) == 100


def test_new_trigger_uses_editor_default():
    trigger = new_trigger()

    assert trigger.label == "Trigger"
    assert trigger.condition == Condition.default()
    assert trigger.next == ()


def test_only_one_trigger_per_graph():
    graph = add_trigger(NodeGraph())

    with pytest.raises(ValueError, match="already has a trigger"):
        add_trigger(graph)


def test_actions_need_a_trigger():
    with pytest.raises(ValueError, match="Add a trigger"):
        append_action(NodeGraph())


def test_append_action_chains_linearly():
    trigger = new_trigger()
    first, second = new_action(), new_action()

    graph = add_trigger(NodeGraph(), trigger)
    graph = append_action(graph, first)
    graph = append_action(graph, second)

    assert [n.id for n in graph] == [trigger.id, first.id, second.id]
    assert graph.get(trigger.id).next == (first.id,)
    assert graph.get(first.id).next == (second.id,)
    assert graph.get(second.id).next == ()
    assert isinstance(graph.get(trigger.id), TriggerNode)


def test_authored_graph_runs():
    calls = []
    graph = add_trigger(NodeGraph())
    graph = append_action(graph, new_action(lambda context, inputs: calls.append(len(inputs))))
    graph = append_action(graph)

    result = run_workflow(graph, [Element("i", "image")])

    assert result.status is RunStatus.COMPLETED
    assert calls == [1]
    assert len(result.outcomes) == 2
