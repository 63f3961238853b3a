""" Error taxonomy for workflow runs. """
from typing import Any, Optional


class WorkflowError(Exception):
    """ Base class for all workflow engine errors. """


class UnsupportedConditionError(WorkflowError):
    """ The evaluator does not understand a (when, conditional, target) triple. """

    def __init__(self, condition: Any, message: Optional[str] = None):
        self.condition = condition
        super().__init__(message or f"Unsupported condition: {condition}")


class NotFoundError(WorkflowError):
    """ A node id does not resolve to a node in the graph. """

    def __init__(self, node_id: str, source_id: Optional[str] = None):
        self.node_id = node_id
        self.source_id = source_id
        if source_id:
            message = f"Node {source_id} references unknown node: {node_id}"
        else:
            message = f"Node not found: {node_id}"
        super().__init__(message)


# A dangling `next` id is a lookup miss at traversal time
DanglingReferenceError = NotFoundError


class ActionExecutionError(WorkflowError):
    """ An action's effect raised or resolved to failure. """

    def __init__(self, node_id: str, reason: str):
        self.node_id = node_id
        self.reason = reason
        super().__init__(f"Action {node_id} failed: {reason}")


class EvaluatorFatalError(WorkflowError):
    """
    A condition evaluator failed unexpectedly. Aborts the whole run.

    `result` holds the aborted RunResult recorded up to the failure.
    """

    def __init__(self, trigger_id: str, cause: BaseException, result: Any = None):
        self.trigger_id = trigger_id
        self.cause = cause
        self.result = result
        super().__init__(f"Condition evaluation failed for trigger {trigger_id}: {cause}")
