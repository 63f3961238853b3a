""" Factory for creating nodes and actions from validated node specs. """
from typing import Any, Callable, Dict, Optional, Type
from ..actions.base import BaseAction
from ..actions.noop import NoopAction
from ..actions.set_property import SetPropertyAction
from ..actions.notify import NotifyAction
from .models import ActionNode, Condition, Node, TriggerNode

_ACTION_MAP: Dict[str, Type[BaseAction]] = {
    "noop": NoopAction,
    "set_property": SetPropertyAction,
    "notify": NotifyAction,
}


def register_action(name: str):
    """ Register a BaseAction subclass under a catalogue name. """
    def _wrap(cls: Type[BaseAction]) -> Type[BaseAction]:
        _ACTION_MAP[name] = cls
        return cls
    return _wrap


def get_action_class(name: str) -> Type[BaseAction]:
    if name not in _ACTION_MAP:
        raise ValueError(f"Unsupported action: {name}")
    return _ACTION_MAP[name]


def make_action(node_id: str, name: str, params: Optional[Dict[str, Any]] = None) -> Callable[..., Any]:
    return get_action_class(name)(node_id, params)


def make_node(spec: Dict[str, Any]) -> Node:
    """ Build a Node from a validated node spec dict, dispatching on its type tag. """
    node_type = spec["type"]
    common = dict(id=spec["id"], label=spec.get("label") or node_type.title(), next=spec.get("next") or [])

    if node_type == "trigger":
        condition = spec.get("condition")
        if condition is None:
            return TriggerNode(**common)
        return TriggerNode(condition=Condition(**condition), **common)

    if node_type == "action":
        name = spec.get("action") or "noop"
        params = spec.get("params") or {}
        return ActionNode(execute=make_action(spec["id"], name, params), action=name, params=params, **common)

    raise ValueError(f"Unsupported node type: {node_type}")
