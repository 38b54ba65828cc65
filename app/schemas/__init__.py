"""Pydantic schemas for API requests and responses."""

from .message import HistoryResponse, HistoryTurn, SendMessageRequest, SendMessageResponse

__all__ = [
    "HistoryResponse",
    "HistoryTurn",
    "SendMessageRequest",
    "SendMessageResponse",
]
