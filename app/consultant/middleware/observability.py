"""Observability middleware for agent execution.

Emits agent and tool events into the per-request event queue and the log.
"""

import json
import logging
import time
from typing import Any

from agent_framework import agent_middleware, function_middleware

from app.core.events import emit_event

logger = logging.getLogger(__name__)


def _extract_model_name(agent) -> str | None:
    """Extract model/deployment name from agent's chat client."""
    chat_client = getattr(agent, "chat_client", None)
    return getattr(chat_client, "deployment_name", None) or getattr(chat_client, "model_id", None)


def _extract_usage(result) -> dict | None:
    """Extract token usage from result's usage_details."""
    usage = getattr(result, "usage_details", None)
    if not usage:
        return None
    return {
        "input_tokens": getattr(usage, "input_token_count", None),
        "output_tokens": getattr(usage, "output_token_count", None),
        "total_tokens": getattr(usage, "total_token_count", None),
    }


@agent_middleware
async def observability_agent_middleware(context, next):  # type: ignore
    """Log agent invocation and completion with model, usage and timing."""
    agent_name = context.agent.name
    start_time = time.perf_counter()

    await emit_event({
        "type": "agent_invoked",
        "agent": agent_name,
    })

    await next(context)

    execution_time_ms = int((time.perf_counter() - start_time) * 1000)
    usage = _extract_usage(context.result)
    logger.debug(f"Agent {agent_name} finished in {execution_time_ms} ms")

    await emit_event({
        "type": "agent_finished",
        "agent": agent_name,
        "model": _extract_model_name(context.agent),
        "usage": usage,
        "execution_time_ms": execution_time_ms,
    })


def serialize_result(result: Any) -> Any:
    """Serialize function result to JSON-safe format."""
    if result is None:
        return None
    if isinstance(result, str):
        try:
            return json.loads(result)
        except json.JSONDecodeError:
            return result
    if hasattr(result, "model_dump"):  # Pydantic model
        return result.model_dump()
    if isinstance(result, (dict, list, int, float, bool)):
        return result
    return str(result)


@function_middleware
async def observability_function_middleware(context, next):  # type: ignore
    """Log action calls with input arguments and output results."""
    func_name = context.function.name
    start_time = time.perf_counter()

    await emit_event({
        "type": "function_start",
        "function": func_name,
        "arguments": context.arguments.model_dump(),
    })

    await next(context)

    execution_time_ms = int((time.perf_counter() - start_time) * 1000)
    logger.debug(f"Action {func_name} finished in {execution_time_ms} ms")

    await emit_event({
        "type": "function_end",
        "function": func_name,
        "result": serialize_result(context.result),
        "execution_time_ms": execution_time_ms,
    })
