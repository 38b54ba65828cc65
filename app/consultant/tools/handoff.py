"""Human handoff action: queue a conversation for a human consultant."""

import logging
from typing import Annotated, Any, Protocol

from agent_framework import ai_function
from pydantic import Field

logger = logging.getLogger(__name__)

HANDOFF_TOOL_NAME = "invite_agent"


class HandoffClient(Protocol):
    """Ticketing/CRM integration receiving handoff requests."""

    async def invite(self, client_id: str, chat_id: str) -> dict[str, Any]: ...


class LoggingHandoffClient:
    """Default handoff client: records the request in the log and reports it queued."""

    async def invite(self, client_id: str, chat_id: str) -> dict[str, Any]:
        logger.info(f"Handoff queued for client {client_id!r} chat {chat_id!r}")
        return {"status": "queued", "client_id": client_id, "chat_id": chat_id}


async def request_handoff(client: HandoffClient, client_id: str, chat_id: str) -> dict[str, Any]:
    """Invoke the handoff action without letting its failure reach the reply.

    Returns the client's response, or a ``failed`` status when it raised.
    """
    try:
        return await client.invite(client_id, chat_id)
    except Exception as e:
        logger.error(f"Handoff failed for chat {chat_id!r}: {e}")
        return {"status": "failed", "client_id": client_id, "chat_id": chat_id}


def create_invite_agent_tool(client: HandoffClient, client_id: str, chat_id: str):
    """Build the `invite_agent` tool bound to one invocation's identifiers."""

    @ai_function(
        name=HANDOFF_TOOL_NAME,
        description=(
            "Send the client dialogue to human consultants when unable to answer "
            "a question or solve a problem."
        ),
    )
    async def invite_agent(
        reason: Annotated[str, Field(description="Short reason for the handoff")] = "",
    ) -> dict[str, Any]:
        if reason:
            logger.info(f"Handoff requested by agent: {reason}")
        return await request_handoff(client, client_id, chat_id)

    return invite_agent
