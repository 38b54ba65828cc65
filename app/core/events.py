"""Per-request event streaming for SSE responses.

Middleware emits agent and action events through `emit_event`; when the
current async context carries a queue (set by the streaming route), the
event is formatted as an SSE frame and queued. Otherwise it is only logged.
"""

import asyncio
import json
import logging
from contextlib import contextmanager
from contextvars import ContextVar
from typing import Iterator, Optional

logger = logging.getLogger(__name__)

# Context variable for per-request event queue (async-safe)
_current_queue: ContextVar[Optional[asyncio.Queue]] = ContextVar(
    "current_queue", default=None
)

# Context variable for the chat the current request belongs to
_current_chat_id: ContextVar[Optional[str]] = ContextVar(
    "current_chat_id", default=None
)


def set_current_queue(queue: Optional[asyncio.Queue]) -> None:
    _current_queue.set(queue)


def get_current_queue() -> Optional[asyncio.Queue]:
    return _current_queue.get()


def set_current_chat_id(chat_id: Optional[str]) -> None:
    _current_chat_id.set(chat_id)


def get_current_chat_id() -> Optional[str]:
    return _current_chat_id.get()


@contextmanager
def event_context(queue: asyncio.Queue, chat_id: str) -> Iterator[asyncio.Queue]:
    """Route events emitted inside the block to `queue`."""
    queue_token = _current_queue.set(queue)
    chat_token = _current_chat_id.set(chat_id)
    try:
        yield queue
    finally:
        _current_queue.reset(queue_token)
        _current_chat_id.reset(chat_token)


def format_sse_event(event_type: str, data: dict) -> str:
    """Format data as an SSE event string.

    Args:
        event_type: The SSE event type (e.g., 'thinking', 'message', 'done')
        data: Dictionary to JSON serialize as event data

    Returns:
        Formatted SSE event string
    """
    return f"event: {event_type}\ndata: {json.dumps(data, ensure_ascii=False)}\n\n"


async def emit_event(event_data: dict) -> None:
    """Emit a thinking event to the current queue if available.

    Args:
        event_data: Dictionary containing event data (will be JSON serialized)
    """
    logger.debug(f"event {event_data.get('type')}: {event_data}")
    queue = get_current_queue()
    if queue is None:
        return
    chat_id = get_current_chat_id()
    if chat_id is not None:
        event_data["chat_id"] = chat_id
    await queue.put(format_sse_event("thinking", event_data))
