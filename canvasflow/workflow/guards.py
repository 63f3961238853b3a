"""
Trigger condition evaluation.

A condition is a (when, conditional, target) triple. Predicates are looked up
by (when, conditional) and called with the snapshot and the target; they
return whether the condition holds and the elements that satisfied it.
Predicates must be pure: the engine may evaluate a trigger more than once.
"""
from typing import Any, Callable, Dict, Iterable, Optional, Tuple

from .errors import UnsupportedConditionError
from .models import Condition, Conditional, Snapshot, Target, When, element_kind

Predicate = Callable[[Snapshot, str], Tuple[bool, Tuple[Any, ...]]]


class ConditionEvaluator:
    """ Registry of condition predicates keyed by (when, conditional). """

    def __init__(self, targets: Optional[Iterable[str]] = None):
        self._predicates: Dict[Tuple[str, str], Predicate] = {}
        # None accepts any target
        self._targets = set(targets) if targets is not None else None

    def register(self, when: str, conditional: str):
        def _wrap(fn: Predicate) -> Predicate:
            self._predicates[(_str(when), _str(conditional))] = fn
            return fn
        return _wrap

    def allow_targets(self, *targets: str) -> None:
        if self._targets is None:
            self._targets = set()
        self._targets.update(_str(t) for t in targets)

    def supports(self, condition: Condition) -> bool:
        if (condition.when, condition.conditional) not in self._predicates:
            return False
        return self._targets is None or condition.target in self._targets

    def evaluate(self, condition: Condition, snapshot: Snapshot) -> Tuple[bool, Tuple[Any, ...]]:
        """
        Evaluate a condition, returning (matched, activation_inputs).
        Raises UnsupportedConditionError for triples this evaluator does not know.
        """
        if not self.supports(condition):
            raise UnsupportedConditionError(condition)
        predicate = self._predicates[(condition.when, condition.conditional)]
        matched, inputs = predicate(snapshot, condition.target)
        return bool(matched), tuple(inputs) if matched else ()

    def matches(self, condition: Condition, snapshot: Snapshot) -> bool:
        return self.evaluate(condition, snapshot)[0]


def _str(v: Any) -> str:
    return getattr(v, "value", v)


# Default evaluator with the selection predicates offered by the editor
default_evaluator = ConditionEvaluator(targets=[t.value for t in Target])


def register_condition(when: str, conditional: str):
    return default_evaluator.register(when, conditional)


@register_condition(When.SELECTED_ELEMENT, Conditional.IS)
def selection_is(snapshot: Snapshot, target: str):
    selection = snapshot.selection
    ok = bool(selection) and all(element_kind(el) == target for el in selection)
    return ok, selection


@register_condition(When.SELECTED_ELEMENT, Conditional.IS_NOT)
def selection_is_not(snapshot: Snapshot, target: str):
    selection = snapshot.selection
    ok = bool(selection) and all(element_kind(el) != target for el in selection)
    return ok, selection


@register_condition(When.SELECTED_ELEMENT, Conditional.CONTAINS)
def selection_contains(snapshot: Snapshot, target: str):
    hits = tuple(el for el in snapshot.selection if element_kind(el) == target)
    return bool(hits), hits


def evaluate(condition: Condition, snapshot: Snapshot) -> Tuple[bool, Tuple[Any, ...]]:
    return default_evaluator.evaluate(condition, snapshot)


def matches(condition: Condition, snapshot: Snapshot) -> bool:
    """ Whether `condition` holds for `snapshot` under the default evaluator. """
    return default_evaluator.matches(condition, snapshot)
