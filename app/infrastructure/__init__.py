"""Infrastructure layer for external service integrations."""

from .redis import RedisSessionStore
from .session_store import InMemorySessionStore, SessionStore
from .tracing import configure_tracing

__all__ = [
    "InMemorySessionStore",
    "RedisSessionStore",
    "SessionStore",
    "configure_tracing",
]
