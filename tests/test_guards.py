"""Tests for trigger condition evaluation."""

import pytest
from canvasflow.workflow.errors import UnsupportedConditionError
from canvasflow.workflow.guards import ConditionEvaluator, evaluate, matches
from canvasflow.workflow.models import Condition, Conditional, Element, Snapshot, Target, When


IMAGE = Element("i1", "image")
IMAGE_2 = Element("i2", "image")
TEXT = Element("t1", "textbox")


def cond(conditional, target="image"):
    return Condition(When.SELECTED_ELEMENT, conditional, target)


def test_selected_element_is():
    """Every selected element must be of the target kind."""
    assert matches(cond(Conditional.IS), Snapshot.of([IMAGE])) is True
    assert matches(cond(Conditional.IS), Snapshot.of([IMAGE, IMAGE_2])) is True
    assert matches(cond(Conditional.IS), Snapshot.of([IMAGE, TEXT])) is False
    assert matches(cond(Conditional.IS), Snapshot.of([])) is False


def test_selected_element_is_not():
    assert matches(cond(Conditional.IS_NOT), Snapshot.of([TEXT])) is True
    assert matches(cond(Conditional.IS_NOT), Snapshot.of([TEXT, IMAGE])) is False
    assert matches(cond(Conditional.IS_NOT), Snapshot.of([])) is False


def test_selected_element_contains():
    assert matches(cond(Conditional.CONTAINS), Snapshot.of([TEXT, IMAGE])) is True
    assert matches(cond(Conditional.CONTAINS), Snapshot.of([TEXT])) is False
    assert matches(cond(Conditional.CONTAINS, Target.TEXT), Snapshot.of([TEXT])) is True


def test_activation_inputs():
    """Contains passes only the matching elements; is/is_not pass the selection."""
    snapshot = Snapshot.of([TEXT, IMAGE, IMAGE_2])

    assert evaluate(cond(Conditional.CONTAINS), snapshot) == (True, (IMAGE, IMAGE_2))
    assert evaluate(cond(Conditional.IS_NOT, "rect"), snapshot) == (True, (TEXT, IMAGE, IMAGE_2))
    assert evaluate(cond(Conditional.IS), snapshot) == (False, ())


def test_element_kinds_from_mappings_and_objects():
    class FabricObject:
        type = "image"

    snapshot = Snapshot.of([{"type": "image"}, {"kind": "image"}, FabricObject()])

    assert matches(cond(Conditional.IS), snapshot) is True


def test_string_and_enum_conditions_are_equal():
    assert Condition("selected_element", "is", "image") == Condition.default()


@pytest.mark.parametrize("condition", [
    Condition("hovered_element", "is", "image"),
    Condition("selected_element", "resembles", "image"),
    Condition("selected_element", "is", "video"),
])
def test_unsupported_conditions_raise(condition):
    with pytest.raises(UnsupportedConditionError):
        matches(condition, Snapshot.of([IMAGE]))


def test_evaluation_is_idempotent():
    snapshot = Snapshot.of([IMAGE, TEXT])
    condition = cond(Conditional.CONTAINS)

    first = evaluate(condition, snapshot)
    second = evaluate(condition, snapshot)

    assert first == second
    assert snapshot.selection == (IMAGE, TEXT)


def test_custom_evaluator_registry():
    """A host evaluator can add its own predicates without touching the default one."""
    evaluator = ConditionEvaluator()

    @evaluator.register("selection_size", "at_least")
    def at_least(snapshot, target):
        return len(snapshot.selection) >= int(target), snapshot.selection

    condition = Condition("selection_size", "at_least", "2")
    assert evaluator.matches(condition, Snapshot.of([IMAGE, TEXT])) is True
    assert evaluator.matches(condition, Snapshot.of([IMAGE])) is False

    with pytest.raises(UnsupportedConditionError):
        matches(condition, Snapshot.of([IMAGE, TEXT]))


def test_custom_evaluator_target_allow_list():
    evaluator = ConditionEvaluator(targets=["image"])
    evaluator.register("selected_element", "is")(lambda s, t: (True, s.selection))

    assert evaluator.supports(Condition("selected_element", "is", "image"))
    assert not evaluator.supports(Condition("selected_element", "is", "video"))

    evaluator.allow_targets("video")
    assert evaluator.supports(Condition("selected_element", "is", "video"))
