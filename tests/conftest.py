import json
import re
from dataclasses import dataclass, field
from pathlib import Path
from types import SimpleNamespace
from typing import Any, Optional

import pytest
from agent_framework import ChatMessage, Role

from app.consultant.knowledge import CourseCatalog, DialogExampleStore, TopicSectionStore
from app.consultant.resources import ConsultantResources
from app.consultant.safety import GuardrailClient, GuardrailContext, SafetyScreen
from app.consultant.tools import ContractDirectory
from app.consultant.workflows import ConsultantAgents

DATA_DIR = Path(__file__).resolve().parent.parent / "data"

DIALOG = """\
Вопрос: Как оплатить обучение?
Ответ: Оплатить обучение можно банковской картой на сайте или по квитанции.

Вопрос: Как проходит итоговая аттестация?
Ответ: Итоговая аттестация проходит дистанционно в форме тестирования.
"""

SECTIONS = """\
[about_institute]
ИППК ведет образовательную деятельность на основании лицензии.

[registration]
Нажмите «Личный кабинет» и укажите электронную почту.
"""

CONTRACTS = {
    "1234": {"payment_status": "оплачен", "documents_received": True, "track_number": "RA123456789RU"},
}


@dataclass
class FakeAgent:
    """Agent double returning queued replies and recording the messages it got."""

    replies: list[str] = field(default_factory=list)
    calls: list[list[ChatMessage]] = field(default_factory=list)

    async def run(self, messages: Any = None, **kwargs: Any) -> SimpleNamespace:
        self.calls.append(list(messages or []))
        text = self.replies.pop(0) if self.replies else ""
        reply_messages = [ChatMessage(Role.ASSISTANT, text=text)] if text else []
        return SimpleNamespace(text=text, messages=reply_messages)


@dataclass
class FakeHandoff:
    fail: bool = False
    invites: list[tuple[str, str]] = field(default_factory=list)

    async def invite(self, client_id: str, chat_id: str) -> dict[str, Any]:
        self.invites.append((client_id, chat_id))
        if self.fail:
            raise ConnectionError("ticketing system unavailable")
        return {"status": "queued"}


@dataclass
class FakeEmbedder:
    """Embeds texts onto topic axes so paraphrases land on the same vector."""

    axes: tuple[tuple[str, ...], ...] = (
        ("оплат", "заплат", "плат"),
        ("аттестац", "экзамен", "тестирован"),
    )
    calls: list[list[str]] = field(default_factory=list)

    async def __call__(self, texts: list[str]) -> list[list[float]]:
        self.calls.append(list(texts))
        return [
            [1.0 if any(word in text.lower() for word in axis) else 0.0 for axis in self.axes]
            for text in texts
        ]


EMAIL_RE = re.compile(r"[\w.+-]+@[\w-]+(?:\.[\w-]+)+")
PHONE_RE = re.compile(r"\+7[\s(-]*\d{3}[\s)-]*\d{3}[\s-]*\d{2}[\s-]*\d{2}")


@dataclass
class FakeGuardrails:
    """Loader and runner standing in for the openai-guardrails runtime.

    Configured guardrails are the bundle entries themselves. Jailbreak reports
    the given confidence; Contains PII masks e-mails and phone numbers.
    """

    jailbreak: bool = False
    confidence: float = 0.9
    error: Optional[Exception] = None
    texts: list[str] = field(default_factory=list)
    runs: list[dict[str, Any]] = field(default_factory=list)

    def load(self, bundle: dict[str, Any]) -> list[dict[str, Any]]:
        return list(bundle["guardrails"])

    async def run(self, ctx: Any, data: str, guardrails: list[dict[str, Any]], **kwargs: Any) -> list:
        self.texts.append(data)
        self.runs.append({"ctx": ctx, **kwargs})
        if self.error is not None:
            raise self.error
        return [self._result(g["name"], g["config"], data) for g in guardrails]

    def _result(self, name: str, config: dict[str, Any], text: str) -> SimpleNamespace:
        if name == "Contains PII":
            detected = {}
            masked = text
            for entity, pattern in (("EMAIL_ADDRESS", EMAIL_RE), ("PHONE_NUMBER", PHONE_RE)):
                found = pattern.findall(text)
                if found:
                    detected[entity] = found
                    masked = pattern.sub(f"<{entity}>", masked)
            return SimpleNamespace(
                tripwire_triggered=bool(detected) and config.get("block", False),
                info={"guardrail_name": name, "detected_entities": detected, "checked_text": masked},
            )
        threshold = config.get("confidence_threshold", 0.7)
        return SimpleNamespace(
            tripwire_triggered=self.jailbreak and self.confidence >= threshold,
            info={"guardrail_name": name, "flagged": self.jailbreak, "confidence": self.confidence},
        )

    def client(self) -> GuardrailClient:
        return GuardrailClient(
            context=GuardrailContext(guardrail_llm=SimpleNamespace()),
            loader=self.load,
            runner=self.run,
        )


def classification(
    category: str,
    confidence: float = 0.95,
    needs_clarification: bool = False,
    clarification_question: str = "",
    needs_contract_number: bool = False,
) -> str:
    return json.dumps({
        "category": category,
        "confidence": confidence,
        "needs_clarification": needs_clarification,
        "clarification_question": clarification_question,
        "needs_contract_number": needs_contract_number,
    })


def make_agents(classifier_reply: str, **handler_replies: list[str]) -> ConsultantAgents:
    return ConsultantAgents(
        intent_classifier=FakeAgent([classifier_reply]),
        clarifier=FakeAgent(list(handler_replies.get("clarifier", []))),
        info_faq=FakeAgent(list(handler_replies.get("info_faq", []))),
        course_selector=FakeAgent(list(handler_replies.get("course_selector", []))),
        contract_support=FakeAgent(list(handler_replies.get("contract_support", []))),
    )


def make_screen(flagged: bool = False, confidence: float = 0.9, policy=None) -> SafetyScreen:
    return SafetyScreen(FakeGuardrails(jailbreak=flagged, confidence=confidence).client(), policy)


@pytest.fixture
def handoff() -> FakeHandoff:
    return FakeHandoff()


@pytest.fixture
def resources(handoff: FakeHandoff) -> ConsultantResources:
    return ConsultantResources(
        dialog_examples=DialogExampleStore(DialogExampleStore.parse(DIALOG)),
        topic_sections=TopicSectionStore(TopicSectionStore.parse(SECTIONS)),
        catalog=CourseCatalog.from_files(DATA_DIR / "retraining.json", DATA_DIR / "upskilling.json"),
        contracts=ContractDirectory(json.dumps(CONTRACTS)),
        handoff=handoff,
    )
