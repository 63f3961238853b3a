"""
Workflow engine: evaluate triggers against a snapshot, then walk the action
graph from every firing trigger.

Traversal is depth-first in `next` order with one visited set per run, so
cyclic graphs terminate and a node reached by several paths runs once.
Actions are awaited one at a time; a run never executes two actions at once.
"""
import asyncio
import inspect
from dataclasses import replace
from logging import getLogger
from typing import Any, Iterable, List, Optional, Set, Tuple, Union

from .context import ExecutionContext
from .errors import ActionExecutionError, EvaluatorFatalError, NotFoundError, UnsupportedConditionError
from .guards import ConditionEvaluator, default_evaluator
from .models import (
    CANCELLED,
    DANGLING_REFERENCE,
    DRY_RUN,
    HALTED,
    UNSUPPORTED_CONDITION,
    ActionNode,
    EngineOptions,
    NodeGraph,
    NodeOutcome,
    RunResult,
    RunStatus,
    Snapshot,
    TriggerNode,
    Workflow,
)

logger = getLogger(__name__)


class WorkflowEngine:
    """
    Runs node graphs. Runs on one engine are serialized: a second `execute`
    waits for the current one, and each run gets its own ExecutionContext.

    Usage::

        engine = WorkflowEngine(EngineOptions(halt_on_failure=True), host=canvas)
        result = await engine.execute(graph, Snapshot.of(selected))
    """

    def __init__(
        self,
        options: Optional[EngineOptions] = None,
        evaluator: Optional[ConditionEvaluator] = None,
        host: Optional[Any] = None,
    ) -> None:
        self.options = options or EngineOptions()
        self.evaluator = evaluator or default_evaluator
        self.host = host
        self._lock = asyncio.Lock()
        self._context: Optional[ExecutionContext] = None

    @property
    def running(self) -> bool:
        return self._context is not None

    def cancel(self) -> None:
        """ Cooperatively cancel the run in progress, if any. """
        if self._context is not None:
            self._context.cancel()

    async def execute(
        self,
        graph: NodeGraph,
        snapshot: Snapshot,
        options: Optional[EngineOptions] = None,
        context: Optional[ExecutionContext] = None,
    ) -> RunResult:
        """
        Run `graph` against `snapshot`.

        A fresh `context` built for `graph` may be passed to keep a handle for
        cancellation; `snapshot` is bound onto it.
        Raises EvaluatorFatalError if a condition evaluator fails unexpectedly.
        """
        options = options or self.options
        if context is None:
            context = ExecutionContext(graph, snapshot, host=self.host)
        elif context.outcomes:
            raise ValueError("ExecutionContext belongs to another run")
        elif context.graph is not graph:
            raise ValueError("ExecutionContext was built for a different graph")
        else:
            context.snapshot = snapshot
            if context.host is None:
                context.host = self.host

        async with self._lock:
            self._context = context
            try:
                return await self._run(graph, context, options)
            finally:
                self._context = None

    async def _run(self, graph: NodeGraph, context: ExecutionContext, options: EngineOptions) -> RunResult:
        triggers = graph.triggers()
        logger.info(f"Run started: {graph.name or 'workflow'} with {len(triggers)} trigger(s)")

        fired = self._evaluate_triggers(triggers, context)
        fired_ids = [t.id for t, _ in fired]
        if not fired:
            logger.info("Run finished: no trigger fired")
            return RunResult(RunStatus.NO_TRIGGER_FIRED, list(context.outcomes), fired_ids)

        visited: Set[str] = set()
        stop_reason: Optional[str] = None
        for trigger, inputs in fired:
            context.activation_inputs = inputs
            stack: List[str] = list(reversed(trigger.next))
            while stack:
                node_id = stack.pop()
                if node_id in visited:
                    continue
                visited.add(node_id)

                try:
                    node = graph.get(node_id)
                except NotFoundError:
                    logger.warning(f"Skipping dangling reference: {node_id}")
                    context.record(node_id, NodeOutcome.skipped(DANGLING_REFERENCE))
                    continue

                if isinstance(node, TriggerNode):
                    # triggers gate runs; reaching one through an edge is not a step
                    continue

                if stop_reason is None and context.cancelled:
                    logger.info("Run cancelled")
                    stop_reason = CANCELLED

                if not isinstance(node, ActionNode):
                    if stop_reason is not None:
                        context.record(node_id, NodeOutcome.skipped(stop_reason))
                        continue
                    context.record(node_id, NodeOutcome.failure(f"unsupported node kind: {node.kind}"))
                    logger.warning(f"Node {node_id} has unsupported kind {node.kind!r}")
                    if options.halt_on_failure:
                        stop_reason = HALTED
                    continue

                if stop_reason is not None:
                    outcome = NodeOutcome.skipped(stop_reason)
                elif options.dry_run:
                    outcome = NodeOutcome.skipped(DRY_RUN)
                else:
                    outcome = await self._invoke(node, context, inputs)
                    if outcome.failed and options.halt_on_failure:
                        logger.info(f"Halting after failure of {node_id}")
                        stop_reason = HALTED

                context.record(node_id, outcome)
                logger.debug(f"{node_id}: {outcome}")
                stack.extend(reversed(node.next))

        if stop_reason == CANCELLED:
            status = RunStatus.ABORTED
        elif any(o.failed for _, o in context.outcomes):
            status = RunStatus.COMPLETED_WITH_FAILURES
        else:
            status = RunStatus.COMPLETED

        logger.info(f"Run finished: {status.value}")
        return RunResult(status, list(context.outcomes), fired_ids)

    def _evaluate_triggers(
        self, triggers: List[TriggerNode], context: ExecutionContext
    ) -> List[Tuple[TriggerNode, Tuple[Any, ...]]]:
        fired = []
        for trigger in triggers:
            try:
                matched, inputs = self.evaluator.evaluate(trigger.condition, context.snapshot)
            except UnsupportedConditionError as e:
                logger.warning(f"Trigger {trigger.id}: {e}")
                context.record(trigger.id, NodeOutcome.skipped(UNSUPPORTED_CONDITION))
                continue
            except Exception as e:
                logger.exception(f"Condition evaluation failed for trigger {trigger.id}")
                result = RunResult(RunStatus.ABORTED, list(context.outcomes), [t.id for t, _ in fired])
                raise EvaluatorFatalError(trigger.id, e, result) from e

            logger.debug(f"Trigger {trigger.id} {trigger.condition}: {'fired' if matched else 'not fired'}")
            if matched:
                fired.append((trigger, inputs))
        return fired

    async def _invoke(self, node: ActionNode, context: ExecutionContext, inputs: Tuple[Any, ...]) -> NodeOutcome:
        if node.execute is None:
            return NodeOutcome.success()
        try:
            result = node.execute(context, inputs)
            if inspect.isawaitable(result):
                result = await result
        except ActionExecutionError as e:
            logger.warning(str(e))
            return NodeOutcome.failure(e.reason)
        except Exception as e:
            error = ActionExecutionError(node.id, str(e) or type(e).__name__)
            logger.warning(str(error))
            return NodeOutcome.failure(error.reason)

        if isinstance(result, NodeOutcome):
            if result.failed:
                logger.warning(str(ActionExecutionError(node.id, result.reason or "failure")))
            return result
        if result is False:
            logger.warning(str(ActionExecutionError(node.id, "action reported failure")))
            return NodeOutcome.failure("action reported failure")
        return NodeOutcome.success()


def run_workflow(
    workflow: Union[Workflow, NodeGraph],
    snapshot: Union[Snapshot, Iterable[Any], None] = None,
    *,
    host: Optional[Any] = None,
    evaluator: Optional[ConditionEvaluator] = None,
    **options: Any,
) -> RunResult:
    """
    Synchronous entry point. Keyword options (halt_on_failure, dry_run)
    override the workflow's own options.
    """
    if isinstance(workflow, Workflow):
        graph, base = workflow.graph, workflow.options
    else:
        graph, base = workflow, EngineOptions()
    if not isinstance(snapshot, Snapshot):
        snapshot = Snapshot.of(snapshot)

    engine = WorkflowEngine(replace(base, **options), evaluator=evaluator, host=host)
    return asyncio.run(engine.execute(graph, snapshot))
