from abc import ABC, abstractmethod
from typing import Any, Dict, Optional, Tuple


class BaseAction(ABC):
    """ Abstract base class for catalogue actions. """

    def __init__(self, node_id: str, params: Optional[Dict[str, Any]] = None):
        self.node_id = node_id
        self.params = params or {}

    def __call__(self, context, activation_inputs: Tuple[Any, ...]):
        return self.execute(context, activation_inputs)

    @abstractmethod
    def execute(self, context, activation_inputs: Tuple[Any, ...]) -> Any:
        """
        Perform the effect. Must be implemented by subclasses.
        May be a coroutine; return False or a NodeOutcome to report failure.
        """
        pass

    def require(self, name: str) -> Any:
        if name not in self.params:
            raise ValueError(f"{type(self).__name__} {self.node_id} missing '{name}' parameter")
        return self.params[name]
