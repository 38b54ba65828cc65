"""Chat history API routes."""

import logging

from fastapi import APIRouter, Response

from ..dependencies import SessionStoreDep
from ..schemas import HistoryResponse, HistoryTurn

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/chats/{chat_id}/history", response_model=HistoryResponse)
async def get_history(chat_id: str, store: SessionStoreDep) -> HistoryResponse:
    """Stored turns of a chat, oldest first."""
    turns = await store.load(chat_id)
    return HistoryResponse(
        chat_id=chat_id,
        turns=[HistoryTurn(role=turn.role, text=turn.text) for turn in turns],
    )


@router.delete("/chats/{chat_id}/history", status_code=204)
async def clear_history(chat_id: str, store: SessionStoreDep) -> Response:
    """Forget a chat's history."""
    await store.clear(chat_id)
    logger.info(f"Cleared history for chat {chat_id}")
    return Response(status_code=204)
