"""Handler executors: classifier, clarifier and the three domain handlers.

Every executor appends the turns it produces to the invocation's transcript
before passing the request on or yielding the result.
"""

import json
import logging
import re
from dataclasses import dataclass
from typing import Any, Iterable, Optional

from agent_framework import Executor, FunctionCallContent, WorkflowContext, handler
from typing_extensions import Never

from ..errors import MissingOutputError
from ..knowledge import DialogExample, CourseRequestFacts, mentions_courses
from ..prompts.messages import (
    CONTRACT_NUMBER_REQUEST,
    DOCUMENTS_SUBMISSION_TEXT,
    ESCALATION_MESSAGE,
    FOCUS_QUESTION,
    LEARNING_MATERIALS_TEXT,
    INSTITUTION_QUESTION,
    PROGRAM_NOT_FOUND,
    TRACK_QUESTION,
    is_escalation,
    with_closing_line,
)
from ..resources import ConsultantResources
from ..safety.screen import ScreeningReport
from ..schemas.common import ConversationTurn, Transcript, WorkflowInput
from ..schemas.intent import IntentClassification
from ..schemas.result import WorkflowResult
from ..tools.handoff import HANDOFF_TOOL_NAME, request_handoff

logger = logging.getLogger(__name__)


# === Messages passed between executors ===
@dataclass
class ScreenedRequest:
    """Transcript and input after the safety screen."""

    transcript: Transcript
    workflow_input: WorkflowInput
    report: ScreeningReport


@dataclass
class ClassifiedRequest:
    """Transcript and input with the intent classification."""

    transcript: Transcript
    workflow_input: WorkflowInput
    classification: IntentClassification


# === Patterns ===
_CONTRACT_NUMBER_RE = re.compile(
    r"договор\w*\s*(?:№|номер|n|no\.?|#)?\s*(?:№\s*)?(\d{3,12})(?!\d)", re.IGNORECASE
)
_ANY_NUMBER_RE = re.compile(r"(?<![\d+])(\d{3,12})(?!\d)")

_CHANGE_VERB_RE = re.compile(r"(измен|поменя|исправ|сменит|замен|обнов)", re.IGNORECASE)
_PERSONAL_DATA_RE = re.compile(
    r"(фио|фамили|имя|имени|отчеств|телефон|номер телефона|адрес|почт|email|e-mail|реквизит|паспорт|данные)",
    re.IGNORECASE,
)

_SENT_DOCUMENTS_RE = re.compile(
    r"(отправил|прислал|выслал|загрузил|отправлял)\w*.*(документ|диплом|скан|копи)"
    r"|(документ|диплом)\w*.*(получили|дошл)",
    re.IGNORECASE,
)

_LEARNING_MATERIALS_RE = re.compile(
    r"учебн\w*\s+материал|материал\w*\s+(?:для|по|к)\s+(?:обучени|курс|учеб)"
    r"|доступ\w*\s+к\s+(?:материал|курс|обучени|учебн)",
    re.IGNORECASE,
)


def extract_contract_number(transcript: Transcript) -> Optional[int]:
    """Contract number from user turns, latest turn first.

    A number labelled as a contract number wins over the first bare 3-12
    digit run of the same turn.
    """
    for text in reversed(transcript.user_texts()):
        match = _CONTRACT_NUMBER_RE.search(text) or _ANY_NUMBER_RE.search(text)
        if match:
            return int(match.group(1))
    return None


def is_data_change_request(text: str) -> bool:
    return bool(_CHANGE_VERB_RE.search(text) and _PERSONAL_DATA_RE.search(text))


def says_documents_sent(text: str) -> bool:
    return bool(_SENT_DOCUMENTS_RE.search(text))


def asks_about_learning_materials(text: str) -> bool:
    return bool(_LEARNING_MATERIALS_RE.search(text))


def called_tool(response: Any, name: str) -> bool:
    """True when the agent response contains a call to tool `name`."""
    return any(
        isinstance(content, FunctionCallContent) and content.name == name
        for message in response.messages or []
        for content in message.contents or []
    )


def format_dialog_examples(examples: Iterable[DialogExample]) -> str:
    blocks = [f"Вопрос: {e.question}\nОтвет: {e.answer}" for e in examples]
    return "Примеры ответов:\n\n" + "\n\n".join(blocks)


# === Base ===
class HandlerExecutor(Executor):
    """Common agent-call and reply helpers for handler executors."""

    def __init__(self, agent: Any, id: str):
        super().__init__(id=id)
        self._agent = agent

    async def _invoke(
        self, transcript: Transcript, extra: Iterable[ConversationTurn] = ()
    ) -> tuple[Any, str]:
        """Run the agent on the full transcript and append its new turns.

        `extra` turns are sent with the call but not stored.

        Raises:
            MissingOutputError: If the agent produced no text
        """
        response = await self._agent.run(messages=transcript.to_chat_messages(extra))
        for message in response.messages or []:
            transcript.append(ConversationTurn.from_chat_message(message))
        text = (response.text or "").strip()
        if not text:
            raise MissingOutputError(self.id)
        return response, text

    async def _run_agent(
        self, transcript: Transcript, extra: Iterable[ConversationTurn] = ()
    ) -> str:
        _, text = await self._invoke(transcript, extra)
        return text

    @staticmethod
    def _reply(transcript: Transcript, text: str) -> str:
        """Append a fixed reply as this handler's turn."""
        transcript.append(ConversationTurn.assistant(text))
        return text


class DomainHandlerExecutor(HandlerExecutor):
    """Handler that may escalate to a human consultant."""

    def __init__(self, agent: Any, resources: ConsultantResources, id: str):
        super().__init__(agent, id=id)
        self._resources = resources

    async def _escalate(self, request: ClassifiedRequest) -> str:
        """Reply with the escalation message and queue a handoff."""
        text = self._reply(request.transcript, ESCALATION_MESSAGE)
        result = await request_handoff(
            self._resources.handoff,
            request.workflow_input.client_id,
            request.workflow_input.chat_id,
        )
        logger.info(f"{self.id} escalated, handoff status: {result.get('status')}")
        return text

    async def _compose(
        self, transcript: Transcript, extra: Iterable[ConversationTurn] = ()
    ) -> str:
        """Agent reply with the closing line; an agent escalation is returned as is."""
        response, text = await self._invoke(transcript, extra)
        if called_tool(response, HANDOFF_TOOL_NAME) or is_escalation(text):
            logger.info(f"{self.id} agent escalated")
            return text
        return with_closing_line(text)


# === Intent Classifier ===
class IntentClassifierExecutor(HandlerExecutor):
    """Classifies the transcript into one intent category."""

    def __init__(self, agent: Any, id: str = "intent_classifier"):
        super().__init__(agent, id=id)

    async def classify(self, transcript: Transcript) -> IntentClassification:
        text = await self._run_agent(transcript)
        classification = IntentClassification.model_validate_json(text)
        logger.info(
            f"Classified as {classification.category} "
            f"(confidence={classification.confidence}, "
            f"needs_clarification={classification.needs_clarification})"
        )
        return classification

    @handler
    async def handle(
        self, request: ScreenedRequest, ctx: WorkflowContext[ClassifiedRequest]
    ) -> None:
        classification = await self.classify(request.transcript)
        await ctx.send_message(
            ClassifiedRequest(
                transcript=request.transcript,
                workflow_input=request.workflow_input,
                classification=classification,
            )
        )


# === Clarifier ===
class ClarifierExecutor(HandlerExecutor):
    """Asks one clarifying question."""

    def __init__(self, agent: Any, id: str = "clarifier"):
        super().__init__(agent, id=id)

    async def respond(self, request: ClassifiedRequest) -> str:
        return await self._run_agent(request.transcript)

    @handler
    async def handle(
        self, request: ClassifiedRequest, ctx: WorkflowContext[Never, WorkflowResult]
    ) -> None:
        text = await self.respond(request)
        await ctx.yield_output(
            WorkflowResult.reply(text, self.id, user_text=request.workflow_input.message_text)
        )


# === Info / FAQ ===
class InfoFAQExecutor(DomainHandlerExecutor):
    """Answers from dialogue examples first, topic sections second."""

    def __init__(self, agent: Any, resources: ConsultantResources, id: str = "info_faq"):
        super().__init__(agent, resources, id=id)

    async def respond(self, request: ClassifiedRequest) -> str:
        transcript = request.transcript
        category = request.classification.category
        question = transcript.latest_user_text()

        if category == "documents_submission":
            return self._reply(transcript, DOCUMENTS_SUBMISSION_TEXT)
        if says_documents_sent(question):
            return self._reply(transcript, CONTRACT_NUMBER_REQUEST)
        if asks_about_learning_materials(question):
            return self._reply(transcript, with_closing_line(LEARNING_MATERIALS_TEXT))
        if category == "handoff":
            return await self._escalate(request)

        examples = await self._resources.dialog_examples.search(question)
        if examples:
            return await self._compose(
                transcript,
                extra=[
                    ConversationTurn.assistant(format_dialog_examples(examples)),
                    ConversationTurn.assistant(f"Категория: {category}"),
                ],
            )

        section = self._resources.topic_sections.get(category)
        if section:
            return self._reply(transcript, with_closing_line(section))

        return await self._escalate(request)

    @handler
    async def handle(
        self, request: ClassifiedRequest, ctx: WorkflowContext[Never, WorkflowResult]
    ) -> None:
        text = await self.respond(request)
        await ctx.yield_output(
            WorkflowResult.reply(text, self.id, user_text=request.workflow_input.message_text)
        )


# === Course Selector ===
MISSING_FACT_QUESTIONS = {
    "track": TRACK_QUESTION,
    "institution": INSTITUTION_QUESTION,
    "focus": FOCUS_QUESTION,
}


class CourseSelectorExecutor(DomainHandlerExecutor):
    """Recommends 1-3 catalog programs once track, institution and focus are known."""

    def __init__(self, agent: Any, resources: ConsultantResources, id: str = "course_selector"):
        super().__init__(agent, resources, id=id)

    async def respond(self, request: ClassifiedRequest) -> str:
        transcript = request.transcript
        texts = transcript.user_texts()
        if not mentions_courses(texts):
            return await self._escalate(request)

        facts = CourseRequestFacts.from_texts(texts, self._resources.catalog.vocabulary)
        if facts.missing:
            return self._reply(transcript, MISSING_FACT_QUESTIONS[facts.missing[0]])

        candidates = self._resources.catalog.search(facts)
        if not candidates:
            return self._reply(transcript, with_closing_line(PROGRAM_NOT_FOUND))

        records = "\n\n".join(entry.format_record() for entry in candidates)
        return await self._compose(
            transcript,
            extra=[ConversationTurn.assistant(f"Подходящие программы:\n\n{records}")],
        )

    @handler
    async def handle(
        self, request: ClassifiedRequest, ctx: WorkflowContext[Never, WorkflowResult]
    ) -> None:
        text = await self.respond(request)
        await ctx.yield_output(
            WorkflowResult.reply(text, self.id, user_text=request.workflow_input.message_text)
        )


# === Contract Support ===
class ContractSupportExecutor(DomainHandlerExecutor):
    """Reports contract status using only the lookup's fields."""

    def __init__(self, agent: Any, resources: ConsultantResources, id: str = "contract_support"):
        super().__init__(agent, resources, id=id)

    async def respond(self, request: ClassifiedRequest) -> str:
        transcript = request.transcript
        if is_data_change_request(transcript.latest_user_text()):
            return await self._escalate(request)

        number = extract_contract_number(transcript)
        if number is None:
            return self._reply(transcript, CONTRACT_NUMBER_REQUEST)

        record = await self._resources.contracts.lookup(number)
        logger.info(f"Contract {number} lookup found={record.get('found')}")
        if not record.get("found") or len(record) <= 1:
            return await self._escalate(request)

        contract_data = json.dumps({"contract_number": number, **record}, ensure_ascii=False)
        return await self._compose(
            transcript,
            extra=[ConversationTurn.assistant(f"Данные договора: {contract_data}")],
        )

    @handler
    async def handle(
        self, request: ClassifiedRequest, ctx: WorkflowContext[Never, WorkflowResult]
    ) -> None:
        text = await self.respond(request)
        await ctx.yield_output(
            WorkflowResult.reply(text, self.id, user_text=request.workflow_input.message_text)
        )
