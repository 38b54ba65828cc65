"""Pydantic schemas for message-related API endpoints."""

from typing import Literal

from pydantic import BaseModel, Field, field_validator


class SendMessageRequest(BaseModel):
    """Schema for sending a message to a chat."""

    message: str = Field(..., min_length=1, description="User message content")
    client_id: str = Field("", description="Client identifier passed to human handoff")

    @field_validator("message", mode="before")
    @classmethod
    def strip_message(cls, v: str) -> str:
        """Strip whitespace before validation."""
        return v.strip() if isinstance(v, str) else v


class SendMessageResponse(BaseModel):
    """Reply to a chat message."""

    reply: str
    blocked: bool = False


class HistoryTurn(BaseModel):
    role: Literal["user", "assistant"]
    text: str


class HistoryResponse(BaseModel):
    """Stored turns of a chat, oldest first."""

    chat_id: str
    turns: list[HistoryTurn]
