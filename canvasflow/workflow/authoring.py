"""
Graph building helpers matching the editor's authoring flow: one trigger,
then actions chained one after another. These are editor conventions only;
the engine runs any graph.
"""
import uuid
from dataclasses import replace
from typing import Optional

from .models import ActionNode, Condition, NodeGraph, TriggerNode


def generate_id() -> str:
    return uuid.uuid4().hex[:12]


def new_trigger(condition: Optional[Condition] = None, label: str = "Trigger") -> TriggerNode:
    return TriggerNode(id=generate_id(), label=label, condition=condition or Condition.default())


def new_action(execute=None, label: str = "Action") -> ActionNode:
    return ActionNode(id=generate_id(), label=label, execute=execute, action="noop" if execute is None else "")


def add_trigger(graph: NodeGraph, trigger: Optional[TriggerNode] = None) -> NodeGraph:
    """ Append a trigger. The editor allows a single trigger per graph. """
    if graph.triggers():
        raise ValueError("Graph already has a trigger")
    return graph.with_node(trigger or new_trigger())


def append_action(graph: NodeGraph, action: Optional[ActionNode] = None) -> NodeGraph:
    """ Append an action and point the previously last node at it. """
    if not graph.triggers():
        raise ValueError("Add a trigger before adding actions")
    action = action or new_action()
    last = graph.nodes[-1]
    linked = replace(last, next=(action.id,))
    return graph.replace(linked).with_node(action)
