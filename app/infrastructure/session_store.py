"""Per-chat conversation history with a bounded number of turns."""

import asyncio
import logging
import time
from abc import ABC, abstractmethod
from collections import OrderedDict, deque
from typing import Callable, Optional

from ..consultant.schemas.common import ConversationTurn

logger = logging.getLogger(__name__)


class SessionStore(ABC):
    """History store used by the transports.

    The workflow only reads the history it is given; transports append the
    user turn and the reply once an invocation has returned.
    """

    @abstractmethod
    async def load(self, chat_id: str) -> list[ConversationTurn]:
        """Stored turns for a chat, oldest first."""

    @abstractmethod
    async def append(self, chat_id: str, *turns: ConversationTurn) -> None:
        """Append turns, evicting the oldest beyond the cap."""

    @abstractmethod
    async def clear(self, chat_id: str) -> None:
        """Forget a chat's history."""

    async def close(self) -> None:
        """Release backend connections."""


class InMemorySessionStore(SessionStore):
    """Process-local store; history is lost on restart.

    Chats idle longer than `ttl_seconds` are dropped, and beyond `max_chats`
    the least recently used chat is evicted.
    """

    def __init__(
        self,
        max_turns: int = 20,
        max_chats: int = 10000,
        ttl_seconds: Optional[float] = 86400,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._max_turns = max_turns
        self._max_chats = max_chats
        self._ttl_seconds = ttl_seconds
        self._clock = clock
        # chat_id -> (last activity, turns), least recently used first
        self._sessions: OrderedDict[str, tuple[float, deque[ConversationTurn]]] = OrderedDict()
        self._lock = asyncio.Lock()

    def __len__(self) -> int:
        return len(self._sessions)

    def _expire(self, now: float) -> None:
        if self._ttl_seconds is None:
            return
        while self._sessions:
            chat_id, (seen, _) = next(iter(self._sessions.items()))
            if now - seen < self._ttl_seconds:
                break
            del self._sessions[chat_id]
            logger.debug(f"Expired idle history for chat {chat_id}")

    async def load(self, chat_id: str) -> list[ConversationTurn]:
        async with self._lock:
            self._expire(self._clock())
            entry = self._sessions.get(chat_id)
            return list(entry[1]) if entry else []

    async def append(self, chat_id: str, *turns: ConversationTurn) -> None:
        async with self._lock:
            now = self._clock()
            self._expire(now)
            entry = self._sessions.pop(chat_id, None)
            session = entry[1] if entry else deque(maxlen=self._max_turns)
            session.extend(turns)
            self._sessions[chat_id] = (now, session)
            while len(self._sessions) > self._max_chats:
                evicted, _ = self._sessions.popitem(last=False)
                logger.debug(f"Evicted history for chat {evicted}")

    async def clear(self, chat_id: str) -> None:
        async with self._lock:
            self._sessions.pop(chat_id, None)
