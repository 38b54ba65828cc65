import asyncio
from dataclasses import dataclass, field
from typing import Any, Optional

import pytest
from fastapi.testclient import TestClient

from app.consultant.prompts.messages import BLOCKED_REPLY, EMPTY_REPLY, ERROR_REPLY
from app.consultant.schemas import GuardrailFailOutput, WorkflowResult
from app.conversation import answer_message
from app.infrastructure import InMemorySessionStore
from app.main import create_app


@dataclass
class FakeConsultant:
    result: Optional[WorkflowResult] = None
    error: Optional[Exception] = None
    delay: float = 0.0
    calls: list[dict[str, Any]] = field(default_factory=list)

    async def run(self, message_text, prior_turns=(), client_id="", chat_id="") -> WorkflowResult:
        self.calls.append({
            "message": message_text,
            "prior": [t.text for t in prior_turns],
            "client_id": client_id,
            "chat_id": chat_id,
        })
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error is not None:
            raise self.error
        return self.result


def _client(consultant: FakeConsultant, store=None) -> TestClient:
    return TestClient(create_app(consultant=consultant, session_store=store or InMemorySessionStore()))


def test_reply_and_history_round_trip() -> None:
    consultant = FakeConsultant(result=WorkflowResult.reply("Добрый день!", "info_faq"))
    with _client(consultant) as client:
        first = client.post("/api/chats/42/messages", json={"message": "  Здравствуйте  "})
        client.post("/api/chats/42/messages", json={"message": "Еще вопрос", "client_id": "u7"})
        history = client.get("/api/chats/42/history")

    assert first.status_code == 200
    assert first.json() == {"reply": "Добрый день!", "blocked": False}
    assert consultant.calls[0]["message"] == "Здравствуйте"
    assert consultant.calls[0]["client_id"] == "42"
    assert consultant.calls[1]["prior"] == ["Здравствуйте", "Добрый день!"]
    assert consultant.calls[1]["client_id"] == "u7"
    assert [t["role"] for t in history.json()["turns"]] == ["user", "assistant", "user", "assistant"]


def test_blocked_result_gets_refusal_and_masked_history() -> None:
    consultant = FakeConsultant(
        result=WorkflowResult.blocked_by("почта <EMAIL_ADDRESS>", GuardrailFailOutput())
    )
    store = InMemorySessionStore()
    with _client(consultant, store) as client:
        response = client.post("/api/chats/1/messages", json={"message": "почта a@b.ru"})
        history = client.get("/api/chats/1/history").json()

    assert response.json() == {"reply": BLOCKED_REPLY, "blocked": True}
    assert history["turns"][0]["text"] == "почта <EMAIL_ADDRESS>"


def test_reply_history_keeps_masked_user_text() -> None:
    consultant = FakeConsultant(
        result=WorkflowResult.reply("Ответ", "contract_support", user_text="почта <EMAIL_ADDRESS>")
    )
    with _client(consultant) as client:
        client.post("/api/chats/1/messages", json={"message": "почта a@b.ru"})
        turns = client.get("/api/chats/1/history").json()["turns"]

    assert [t["text"] for t in turns] == ["почта <EMAIL_ADDRESS>", "Ответ"]


def test_empty_reply_gets_fallback_text() -> None:
    consultant = FakeConsultant(result=WorkflowResult.reply("   ", "clarifier"))
    with _client(consultant) as client:
        response = client.post("/api/chats/1/messages", json={"message": "Привет"})
    assert response.json()["reply"] == EMPTY_REPLY


def test_invocation_error_returns_apology_with_200() -> None:
    consultant = FakeConsultant(error=RuntimeError("model unavailable"))
    with _client(consultant) as client:
        response = client.post("/api/chats/1/messages", json={"message": "Привет"})
        history = client.get("/api/chats/1/history").json()

    assert response.status_code == 200
    assert response.json() == {"reply": ERROR_REPLY, "blocked": False}
    assert history["turns"] == []


def test_empty_message_is_rejected() -> None:
    with _client(FakeConsultant()) as client:
        response = client.post("/api/chats/1/messages", json={"message": "   "})
    assert response.status_code == 422


def test_clear_history() -> None:
    consultant = FakeConsultant(result=WorkflowResult.reply("Ответ", "info_faq"))
    with _client(consultant) as client:
        client.post("/api/chats/5/messages", json={"message": "Вопрос"})
        deleted = client.delete("/api/chats/5/history")
        history = client.get("/api/chats/5/history").json()

    assert deleted.status_code == 204
    assert history["turns"] == []


def test_stream_ends_with_reply_and_done() -> None:
    consultant = FakeConsultant(result=WorkflowResult.reply("Ответ", "info_faq"))
    with _client(consultant) as client:
        response = client.post("/api/chats/9/messages/stream", json={"message": "Вопрос"})

    assert response.status_code == 200
    body = response.text
    assert "event: message" in body
    assert '"reply": "Ответ"' in body
    assert body.rstrip().endswith("data: {}")


def test_health() -> None:
    with _client(FakeConsultant()) as client:
        assert client.get("/health").json() == {"status": "healthy"}


@pytest.mark.asyncio
async def test_timeout_returns_apology_and_keeps_history_clean() -> None:
    consultant = FakeConsultant(result=WorkflowResult.reply("Поздно", "info_faq"), delay=1.0)
    store = InMemorySessionStore()

    reply = await answer_message(consultant, store, "1", "Привет", timeout_seconds=0.01)  # type: ignore[arg-type]

    assert reply.text == ERROR_REPLY
    assert reply.failed
    assert await store.load("1") == []
