""" Load workflows from YAML. """

from logging import getLogger
from typing import Any, Dict, List, Tuple, Union

import yaml

from .factory import make_node
from .models import EngineOptions, NodeGraph, Workflow
from .schema import validate_workflow

logger = getLogger(__name__)


def load_workflow(source: Union[str, Dict[str, Any]]) -> Workflow:
    """
    Load a Workflow from a YAML string or an already parsed mapping.
    Dangling `next` references are allowed and only logged.
    """
    data = yaml.safe_load(source) if isinstance(source, str) else source
    if data is None:
        raise ValueError("Empty workflow document")

    _, spec = validate_workflow(data)

    graph = NodeGraph(
        nodes=tuple(make_node(node) for node in spec["nodes"]),
        name=spec["name"],
        description=spec.get("description") or "",
    )
    for src, missing in find_dangling_references(graph):
        logger.warning(f"Node {src} references unknown node: {missing}")

    return Workflow(graph=graph, options=EngineOptions.from_mapping(spec.get("options")))


def load_graph(source: Union[str, Dict[str, Any]]) -> NodeGraph:
    return load_workflow(source).graph


def find_dangling_references(graph: NodeGraph) -> List[Tuple[str, str]]:
    """ (source_id, missing_id) for every `next` id that does not resolve. """
    return [
        (node.id, next_id)
        for node in graph
        for next_id in node.next
        if next_id not in graph
    ]
