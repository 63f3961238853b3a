""" Execution context for a single workflow run. """
from dataclasses import dataclass, field
from typing import Any, List, Optional, Set, Tuple

from .models import NodeGraph, NodeOutcome, Snapshot


@dataclass
class ExecutionContext:
    graph: NodeGraph
    snapshot: Snapshot = field(default_factory=Snapshot)
    activation_inputs: Tuple[Any, ...] = ()
    # object exposing host mutators, e.g. set_property(element, name, value)
    host: Optional[Any] = None
    outcomes: List[Tuple[str, NodeOutcome]] = field(default_factory=list)
    _recorded: Set[str] = field(init=False, default_factory=set, repr=False)
    _cancelled: bool = field(init=False, default=False, repr=False)

    def record(self, node_id: str, outcome: NodeOutcome) -> None:
        if node_id in self._recorded:
            raise ValueError(f"Outcome already recorded for node {node_id}")
        self._recorded.add(node_id)
        self.outcomes.append((node_id, outcome))

    def has_recorded(self, node_id: str) -> bool:
        return node_id in self._recorded

    def cancel(self) -> None:
        self._cancelled = True

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    @property
    def selection(self) -> Tuple[Any, ...]:
        return self.snapshot.selection
