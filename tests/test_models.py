"""Tests for the node graph and result models."""

import pytest
from canvasflow.workflow.errors import DanglingReferenceError, NotFoundError
from canvasflow.workflow.models import (
    ActionNode,
    EngineOptions,
    NodeGraph,
    NodeOutcome,
    OutcomeStatus,
    Snapshot,
    TriggerNode,
)


def make_graph():
    return NodeGraph([
        TriggerNode("t1", next=["a1"]),
        ActionNode("a1", next=["a2", "a3"]),
        ActionNode("a2"),
        TriggerNode("t2", next=["a3"]),
        ActionNode("a3", next=["nowhere"]),
    ], name="demo")


def test_lookup_and_membership():
    graph = make_graph()

    assert graph.get("a1").next == ("a2", "a3")
    assert "a2" in graph
    assert "nowhere" not in graph
    assert len(graph) == 5


def test_triggers_in_authored_order():
    graph = make_graph()

    assert [t.id for t in graph.triggers()] == ["t1", "t2"]
    assert NodeGraph().triggers() == []


def test_successors_preserve_order():
    assert make_graph().successors("a1") == ("a2", "a3")


def test_dangling_references_allowed_until_lookup():
    graph = make_graph()

    with pytest.raises(NotFoundError, match="nowhere"):
        graph.get("nowhere")
    assert DanglingReferenceError is NotFoundError


def test_duplicate_ids_rejected():
    with pytest.raises(ValueError, match="Duplicate node id"):
        NodeGraph([ActionNode("a"), ActionNode("a")])


def test_node_kinds():
    assert TriggerNode("t").kind == "trigger"
    assert ActionNode("a").kind == "action"


def test_graph_is_immutable():
    graph = make_graph()
    grown = graph.with_node(ActionNode("a4"))
    swapped = graph.replace(ActionNode("a2", next=["a1"]))

    assert len(graph) == 5
    assert len(grown) == 6
    assert swapped.get("a2").next == ("a1",)
    assert graph.get("a2").next == ()
    with pytest.raises(AttributeError):
        graph.name = "other"
    with pytest.raises(NotFoundError):
        graph.replace(ActionNode("unknown"))


def test_next_lists_become_tuples():
    node = ActionNode("a", next=["b", "c"])
    assert node.next == ("b", "c")
    assert Snapshot([1, 2]).selection == (1, 2)
    assert Snapshot.of(None).selection == ()


def test_node_outcome_constructors():
    assert NodeOutcome.success().status is OutcomeStatus.SUCCESS
    assert NodeOutcome.failure("bad").failed
    assert str(NodeOutcome.skipped("halted")) == "skipped(halted)"
    assert str(NodeOutcome.success()) == "success"


def test_engine_options_from_mapping():
    assert EngineOptions.from_mapping(None) == EngineOptions()
    assert EngineOptions.from_mapping({"haltOnFailure": True}).halt_on_failure is True
    assert EngineOptions.from_mapping({"halt_on_failure": True, "dry_run": True}) == EngineOptions(True, True)
