"""Message API routes: plain JSON replies and SSE streaming with thinking events."""

import asyncio
import logging
from typing import Optional

from fastapi import APIRouter
from fastapi.responses import StreamingResponse

from ..conversation import ChatReply, answer_message
from ..core.events import event_context, format_sse_event
from ..dependencies import ConsultantDep, SessionStoreDep, SettingsDep
from ..schemas import SendMessageRequest, SendMessageResponse

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/chats/{chat_id}/messages", response_model=SendMessageResponse)
async def send_message(
    chat_id: str,
    body: SendMessageRequest,
    consultant: ConsultantDep,
    store: SessionStoreDep,
    settings: SettingsDep,
) -> SendMessageResponse:
    """Answer a message.

    Invocation failures are reported as the apology reply with status 200.
    """
    reply = await answer_message(
        consultant,
        store,
        chat_id,
        body.message,
        client_id=body.client_id,
        timeout_seconds=settings.workflow_timeout_seconds,
    )
    return SendMessageResponse(reply=reply.text, blocked=reply.blocked)


@router.post("/chats/{chat_id}/messages/stream")
async def stream_message(
    chat_id: str,
    body: SendMessageRequest,
    consultant: ConsultantDep,
    store: SessionStoreDep,
    settings: SettingsDep,
):
    """Answer a message, streaming agent and action events via SSE.

    Events emitted:
    - thinking (agent_invoked/finished, function_start/end): From middleware
    - message: Final reply
    - done: Stream complete
    """

    async def event_generator():
        event_queue: asyncio.Queue[Optional[str]] = asyncio.Queue()
        reply: Optional[ChatReply] = None

        async def run_consultation():
            nonlocal reply
            try:
                with event_context(event_queue, chat_id):
                    reply = await answer_message(
                        consultant,
                        store,
                        chat_id,
                        body.message,
                        client_id=body.client_id,
                        timeout_seconds=settings.workflow_timeout_seconds,
                    )
            finally:
                await event_queue.put(None)

        task = asyncio.create_task(run_consultation())

        try:
            while True:
                event = await event_queue.get()
                if event is None:
                    break
                yield event
        except asyncio.CancelledError:
            task.cancel()
            raise

        await task

        yield format_sse_event("message", {
            "chat_id": chat_id,
            "reply": reply.text if reply else "",
            "blocked": reply.blocked if reply else False,
        })
        yield format_sse_event("done", {})

    return StreamingResponse(
        event_generator(),
        media_type="text/event-stream",
        headers={
            "Cache-Control": "no-cache, no-store, must-revalidate",
            "X-Accel-Buffering": "no",  # Nginx
            "Content-Type": "text/event-stream; charset=utf-8",
        },
    )
