"""Conversation turns, transcript and workflow input types."""

from typing import Any, Callable, Iterable, Literal, Optional, Union

from agent_framework import ChatMessage, Role
from pydantic import BaseModel, ConfigDict, Field


class TextPart(BaseModel):
    """Plain text content part."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["text"] = "text"
    text: str


class OpaquePart(BaseModel):
    """Any non-text content (tool calls, tool results, media) carried as-is."""

    model_config = ConfigDict(frozen=True)

    kind: str
    payload: Any = None


ContentPart = Union[TextPart, OpaquePart]


class ConversationTurn(BaseModel):
    """A single user or assistant turn."""

    model_config = ConfigDict(frozen=True)

    role: Literal["user", "assistant"]
    content: tuple[ContentPart, ...] = ()

    @classmethod
    def user(cls, text: str) -> "ConversationTurn":
        return cls(role="user", content=(TextPart(text=text),))

    @classmethod
    def assistant(cls, text: str) -> "ConversationTurn":
        return cls(role="assistant", content=(TextPart(text=text),))

    @property
    def text(self) -> str:
        """Concatenated text of all text parts."""
        return "".join(p.text for p in self.content if isinstance(p, TextPart))

    def to_chat_message(self) -> Optional[ChatMessage]:
        """Convert to a chat message, or None when the turn has no text."""
        text = self.text
        if not text:
            return None
        role = Role.USER if self.role == "user" else Role.ASSISTANT
        return ChatMessage(role, text=text)

    @classmethod
    def from_chat_message(cls, message: ChatMessage) -> "ConversationTurn":
        """Convert an agent-produced chat message into a turn.

        Tool calls and tool results are kept as opaque parts of an
        assistant turn.
        """
        role_value = getattr(message.role, "value", message.role)
        role = "user" if role_value == "user" else "assistant"
        parts: list[ContentPart] = []
        for item in message.contents or []:
            item_text = getattr(item, "text", None)
            if getattr(item, "type", None) == "text" and isinstance(item_text, str):
                parts.append(TextPart(text=item_text))
            else:
                parts.append(OpaquePart(kind=str(getattr(item, "type", "unknown")), payload=item))
        if not parts and message.text:
            parts.append(TextPart(text=message.text))
        return cls(role=role, content=tuple(parts))


class Transcript:
    """Append-only ordered sequence of turns owned by one invocation.

    Turns are never edited in place; the only rewrite is the PII scrub,
    which replaces text parts through `rewrite_text`.
    """

    def __init__(self, turns: Iterable[ConversationTurn] = ()) -> None:
        self._turns: list[ConversationTurn] = list(turns)

    def __len__(self) -> int:
        return len(self._turns)

    def __iter__(self):
        return iter(self._turns)

    @property
    def turns(self) -> tuple[ConversationTurn, ...]:
        return tuple(self._turns)

    def append(self, *turns: ConversationTurn) -> None:
        self._turns.extend(turns)

    def user_texts(self) -> list[str]:
        """Texts of user turns in temporal order."""
        return [t.text for t in self._turns if t.role == "user" and t.text]

    def latest_user_text(self) -> str:
        texts = self.user_texts()
        return texts[-1] if texts else ""

    def to_chat_messages(self, extra: Iterable[ConversationTurn] = ()) -> list[ChatMessage]:
        """Chat messages for an agent call; `extra` turns are sent but not stored."""
        messages = []
        for turn in [*self._turns, *extra]:
            message = turn.to_chat_message()
            if message is not None:
                messages.append(message)
        return messages

    async def rewrite_text(self, rewrite: Callable[[str], Any]) -> None:
        """Replace every text part with `await rewrite(text)`."""
        rewritten: list[ConversationTurn] = []
        for turn in self._turns:
            parts: list[ContentPart] = []
            for part in turn.content:
                if isinstance(part, TextPart):
                    parts.append(TextPart(text=await rewrite(part.text)))
                else:
                    parts.append(part)
            rewritten.append(turn.model_copy(update={"content": tuple(parts)}))
        self._turns = rewritten


class WorkflowInput(BaseModel):
    """Standard input for the consultation workflow."""

    message_text: str = Field(..., min_length=1)
    prior_turns: list[ConversationTurn] = []
    client_id: str = ""
    chat_id: str = ""

    def seed_transcript(self) -> Transcript:
        """Prior turns followed by the new user turn."""
        return Transcript([*self.prior_turns, ConversationTurn.user(self.message_text)])
