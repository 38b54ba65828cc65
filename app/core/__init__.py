"""Core building blocks and cross-cutting concerns."""

from .events import (
    emit_event,
    event_context,
    format_sse_event,
    get_current_chat_id,
    get_current_queue,
    set_current_chat_id,
    set_current_queue,
)

__all__ = [
    "emit_event",
    "event_context",
    "format_sse_event",
    "get_current_chat_id",
    "get_current_queue",
    "set_current_chat_id",
    "set_current_queue",
]
