"""FastAPI route modules."""

from . import history, messages

__all__ = ["history", "messages"]
