""" Host-side deadline wrapper for action effects. """
import asyncio
import inspect
from typing import Any, Callable

from ..workflow.models import NodeOutcome


def with_timeout(effect: Callable[..., Any], seconds: float) -> Callable[..., Any]:
    """
    Wrap an effect so it reports failure("timeout") instead of running past
    `seconds`. Only awaitable effects can be interrupted.
    """
    async def _run(context, activation_inputs):
        result = effect(context, activation_inputs)
        if not inspect.isawaitable(result):
            return result
        try:
            return await asyncio.wait_for(result, timeout=seconds)
        except asyncio.TimeoutError:
            return NodeOutcome.failure("timeout")

    return _run
