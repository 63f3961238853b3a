""" Data models for workflow graphs, snapshots and run results """

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, ClassVar, Dict, Iterable, Iterator, List, Mapping, Optional, Tuple

from .errors import NotFoundError


class When(str, Enum):
    SELECTED_ELEMENT = "selected_element"


class Conditional(str, Enum):
    IS = "is"
    IS_NOT = "is_not"
    CONTAINS = "contains"


class Target(str, Enum):
    IMAGE = "image"
    TEXT = "textbox"
    RECT = "rect"
    CIRCLE = "circle"
    GROUP = "group"


def _value(v: Any) -> Any:
    return v.value if isinstance(v, Enum) else v


@dataclass(frozen=True)
class Condition:
    when: str
    conditional: str
    target: str

    def __post_init__(self):
        # store plain strings so enum and string spellings compare equal
        object.__setattr__(self, "when", _value(self.when))
        object.__setattr__(self, "conditional", _value(self.conditional))
        object.__setattr__(self, "target", _value(self.target))

    @classmethod
    def default(cls) -> "Condition":
        return cls(When.SELECTED_ELEMENT, Conditional.IS, Target.IMAGE)

    def __str__(self) -> str:
        return f"({self.when}, {self.conditional}, {self.target})"


@dataclass(frozen=True)
class Node:
    id: str
    label: str = ""
    next: Tuple[str, ...] = ()

    kind: ClassVar[str] = "node"

    def __post_init__(self):
        object.__setattr__(self, "next", tuple(self.next))


@dataclass(frozen=True)
class TriggerNode(Node):
    condition: Condition = field(default_factory=Condition.default)

    kind: ClassVar[str] = "trigger"


@dataclass(frozen=True)
class ActionNode(Node):
    # execute(context, activation_inputs); sync or async. None is a no-op.
    execute: Optional[Callable[..., Any]] = field(default=None, compare=False)
    action: str = ""
    params: Mapping[str, Any] = field(default_factory=dict, compare=False)

    kind: ClassVar[str] = "action"


@dataclass(frozen=True)
class NodeGraph:
    """
    Ordered, immutable collection of nodes addressed by id.

    Insertion order is the authoring order. `next` ids are not checked here:
    a graph built one node at a time may hold dangling references.
    """
    nodes: Tuple[Node, ...] = ()
    name: str = ""
    description: str = ""
    _index: Dict[str, Node] = field(init=False, repr=False, compare=False, default_factory=dict)

    def __post_init__(self):
        object.__setattr__(self, "nodes", tuple(self.nodes))
        index: Dict[str, Node] = {}
        for node in self.nodes:
            if node.id in index:
                raise ValueError(f"Duplicate node id: {node.id}")
            index[node.id] = node
        object.__setattr__(self, "_index", index)

    def __contains__(self, node_id: str) -> bool:
        return node_id in self._index

    def __iter__(self) -> Iterator[Node]:
        return iter(self.nodes)

    def __len__(self) -> int:
        return len(self.nodes)

    def get(self, node_id: str) -> Node:
        try:
            return self._index[node_id]
        except KeyError:
            raise NotFoundError(node_id) from None

    def triggers(self) -> List[TriggerNode]:
        return [n for n in self.nodes if isinstance(n, TriggerNode)]

    def successors(self, node_id: str) -> Tuple[str, ...]:
        return self.get(node_id).next

    def with_node(self, node: Node) -> "NodeGraph":
        """ Return a new graph with `node` appended. """
        return NodeGraph(self.nodes + (node,), self.name, self.description)

    def replace(self, node: Node) -> "NodeGraph":
        """ Return a new graph with the node of the same id swapped for `node`. """
        self.get(node.id)
        nodes = tuple(node if n.id == node.id else n for n in self.nodes)
        return NodeGraph(nodes, self.name, self.description)


@dataclass(frozen=True)
class Element:
    """ A canvas element as seen by the engine. """
    id: str
    kind: str
    attrs: Mapping[str, Any] = field(default_factory=dict, compare=False)


def element_kind(element: Any) -> Optional[str]:
    """ Read the kind of a selected element: Element, mapping or host object. """
    if isinstance(element, Element):
        return element.kind
    if isinstance(element, Mapping):
        return element.get("kind", element.get("type"))
    return getattr(element, "kind", getattr(element, "type", None))


@dataclass(frozen=True)
class Snapshot:
    """ Read-only capture of the host state when a run starts. """
    selection: Tuple[Any, ...] = ()

    def __post_init__(self):
        object.__setattr__(self, "selection", tuple(self.selection))

    @classmethod
    def of(cls, elements: Optional[Iterable[Any]]) -> "Snapshot":
        return cls(tuple(elements or ()))


class OutcomeStatus(str, Enum):
    SUCCESS = "success"
    FAILURE = "failure"
    SKIPPED = "skipped"


# skip reasons
DANGLING_REFERENCE = "dangling-reference"
HALTED = "halted"
CANCELLED = "cancelled"
UNSUPPORTED_CONDITION = "unsupported-condition"
DRY_RUN = "dry-run"


@dataclass(frozen=True)
class NodeOutcome:
    status: OutcomeStatus
    reason: Optional[str] = None

    @classmethod
    def success(cls) -> "NodeOutcome":
        return cls(OutcomeStatus.SUCCESS)

    @classmethod
    def failure(cls, reason: str) -> "NodeOutcome":
        return cls(OutcomeStatus.FAILURE, reason)

    @classmethod
    def skipped(cls, reason: str) -> "NodeOutcome":
        return cls(OutcomeStatus.SKIPPED, reason)

    @property
    def failed(self) -> bool:
        return self.status is OutcomeStatus.FAILURE

    def __str__(self) -> str:
        if self.reason:
            return f"{self.status.value}({self.reason})"
        return self.status.value


class RunStatus(str, Enum):
    COMPLETED = "completed"
    COMPLETED_WITH_FAILURES = "completed-with-failures"
    NO_TRIGGER_FIRED = "no-trigger-fired"
    ABORTED = "aborted"


@dataclass
class RunResult:
    status: RunStatus
    outcomes: List[Tuple[str, NodeOutcome]] = field(default_factory=list)
    fired_triggers: List[str] = field(default_factory=list)

    def outcome_for(self, node_id: str) -> Optional[NodeOutcome]:
        for nid, outcome in self.outcomes:
            if nid == node_id:
                return outcome
        return None

    @property
    def failures(self) -> List[Tuple[str, NodeOutcome]]:
        return [(nid, o) for nid, o in self.outcomes if o.failed]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "status": self.status.value,
            "fired_triggers": list(self.fired_triggers),
            "outcomes": [
                {"node_id": nid, "status": o.status.value, "reason": o.reason}
                for nid, o in self.outcomes
            ],
        }


@dataclass
class EngineOptions:
    halt_on_failure: bool = False
    dry_run: bool = False

    @classmethod
    def from_mapping(cls, data: Optional[Mapping[str, Any]]) -> "EngineOptions":
        data = data or {}
        halt = data.get("halt_on_failure", data.get("haltOnFailure", False))
        dry_run = data.get("dry_run", data.get("dryRun", False))
        return cls(halt_on_failure=bool(halt), dry_run=bool(dry_run))


@dataclass
class Workflow:
    graph: NodeGraph
    options: EngineOptions = field(default_factory=EngineOptions)

    @property
    def name(self) -> str:
        return self.graph.name
