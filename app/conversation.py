"""Transport-side handling of one chat message.

Loads the chat history, runs the consultant, maps the result to reply text
and records the exchange. Shared by the HTTP API and the Telegram bot.
"""

import asyncio
import logging
from dataclasses import dataclass
from typing import Optional

from .consultant.prompts.messages import BLOCKED_REPLY, EMPTY_REPLY, ERROR_REPLY
from .consultant.schemas.common import ConversationTurn
from .consultant.schemas.result import WorkflowResult
from .consultant.service import ConsultantService
from .infrastructure import InMemorySessionStore, RedisSessionStore, SessionStore

logger = logging.getLogger(__name__)


@dataclass
class ChatReply:
    """Text sent back to the user."""

    text: str
    blocked: bool = False
    failed: bool = False


def reply_text(result: WorkflowResult) -> str:
    """User-facing text for a workflow result."""
    if result.blocked:
        return BLOCKED_REPLY
    text = (result.output_text or "").strip()
    return text or EMPTY_REPLY


async def answer_message(
    service: ConsultantService,
    store: SessionStore,
    chat_id: str,
    message: str,
    client_id: str = "",
    timeout_seconds: Optional[float] = None,
) -> ChatReply:
    """Answer one message; never raises.

    The user turn and the reply are appended to the history only when the
    invocation finished. The user turn is stored in the masked form the
    workflow saw.
    """
    try:
        prior_turns = await store.load(chat_id)
        invocation = service.run(
            message,
            prior_turns,
            client_id=client_id or chat_id,
            chat_id=chat_id,
        )
        if timeout_seconds:
            result = await asyncio.wait_for(invocation, timeout=timeout_seconds)
        else:
            result = await invocation
    except asyncio.TimeoutError:
        logger.error(f"Invocation for chat {chat_id!r} timed out after {timeout_seconds}s")
        return ChatReply(ERROR_REPLY, failed=True)
    except Exception:
        logger.exception(f"Invocation for chat {chat_id!r} failed")
        return ChatReply(ERROR_REPLY, failed=True)

    text = reply_text(result)
    if result.blocked:
        stored_user_text = result.safe_text or message
    else:
        stored_user_text = result.user_text or message
    try:
        await store.append(
            chat_id,
            ConversationTurn.user(stored_user_text),
            ConversationTurn.assistant(text),
        )
    except Exception:
        logger.exception(f"Could not store history for chat {chat_id!r}")

    return ChatReply(text, blocked=result.blocked)


async def create_session_store(settings) -> SessionStore:
    """History store for the configured mode.

    Raises:
        RuntimeError: If the Redis server cannot be reached
    """
    if settings.history_mode == "redis":
        store = RedisSessionStore(
            max_turns=settings.history_max_turns,
            ttl_seconds=settings.redis_ttl_seconds,
        )
        await store.connect(
            redis_host=settings.redis_host,
            redis_password=settings.redis_password,
            redis_port=settings.redis_port,
            redis_ssl=settings.redis_ssl,
        )
        return store
    return InMemorySessionStore(
        max_turns=settings.history_max_turns,
        max_chats=settings.history_max_chats,
        ttl_seconds=settings.history_idle_seconds,
    )
