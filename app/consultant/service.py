"""Invocation entry point: one message in, one WorkflowResult out."""

import logging
from typing import Callable, Iterable, Optional

from agent_framework._workflows._events import WorkflowOutputEvent

from ..config import Settings
from .errors import WorkflowError
from .model_registry import (
    AgentModelMapping,
    ModelName,
    ModelRegistry,
    create_openai_client,
)
from .knowledge import OpenAIEmbedder
from .resources import ConsultantResources
from .safety import GuardrailClient, GuardrailContext, SafetyScreen
from .schemas.common import ConversationTurn, WorkflowInput
from .schemas.result import WorkflowResult
from .tools import HandoffClient
from .workflows import ConsultantAgents, create_consultant_agents, create_consultation_workflow

logger = logging.getLogger(__name__)

# (client_id, chat_id) -> agents for one invocation
AgentsFactory = Callable[[str, str], ConsultantAgents]


class ConsultantService:
    """Runs the consultation workflow for one message at a time.

    Holds only read-only collaborators; every call builds a fresh workflow,
    so concurrent calls share no mutable state.
    """

    def __init__(
        self,
        screen: SafetyScreen,
        resources: ConsultantResources,
        model_registry: Optional[ModelRegistry] = None,
        workflow_model: Optional[ModelName] = None,
        agent_mapping: Optional[AgentModelMapping] = None,
        agents_factory: Optional[AgentsFactory] = None,
    ) -> None:
        self._screen = screen
        self._resources = resources
        self._model_registry = model_registry
        self._workflow_model = workflow_model
        self._agent_mapping = agent_mapping
        self._agents_factory = agents_factory

    @classmethod
    def from_settings(
        cls, settings: Settings, handoff: Optional[HandoffClient] = None
    ) -> "ConsultantService":
        """Build the service and its collaborators from settings.

        Raises:
            ConfigurationError: On missing credentials, an unsupported
                guardrail or an unreadable knowledge file
        """
        registry = ModelRegistry(settings.model_env()) if settings.workflow_model else None
        policy = settings.guardrail_policy()
        semantic = settings.dialog_search == "semantic"

        openai_client = None
        if semantic or GuardrailClient.requires_llm(policy):
            azure = settings.llm_provider == "azure"
            openai_client = create_openai_client(
                settings.llm_provider,
                settings.azure_openai_api_key if azure else settings.openai_api_key,
                endpoint=settings.azure_openai_endpoint,
                api_version=settings.azure_openai_api_version,
            )

        context = GuardrailContext()
        if GuardrailClient.requires_llm(policy):
            context.guardrail_llm = openai_client
        screen = SafetyScreen(GuardrailClient(context=context), policy)

        embedder = OpenAIEmbedder(openai_client, settings.embedding_model) if semantic else None
        resources = ConsultantResources.from_paths(
            dialog_path=settings.dialog_examples_path,
            sections_path=settings.topic_sections_path,
            retraining_path=settings.retraining_catalog_path,
            upskilling_path=settings.upskilling_catalog_path,
            contract_info_json=settings.contract_info_json,
            handoff=handoff,
            embedder=embedder,
            min_similarity=settings.dialog_min_similarity,
        )
        logger.info(
            f"Consultant ready: {len(resources.dialog_examples)} dialogue examples "
            f"({settings.dialog_search} search), "
            f"{len(resources.topic_sections.keys())} topic sections, "
            f"checks={[spec.name.value for spec in policy.guardrails]}"
        )
        return cls(
            screen,
            resources,
            model_registry=registry,
            workflow_model=settings.workflow_model,
            agent_mapping=settings.agent_models,
        )

    def _agents_for(self, client_id: str, chat_id: str) -> ConsultantAgents:
        if self._agents_factory is not None:
            return self._agents_factory(client_id, chat_id)
        return create_consultant_agents(
            self._resources,
            client_id,
            chat_id,
            self._model_registry,
            self._workflow_model,
            self._agent_mapping,
        )

    async def run(
        self,
        message_text: str,
        prior_turns: Iterable[ConversationTurn] = (),
        client_id: str = "",
        chat_id: str = "",
    ) -> WorkflowResult:
        """Process one incoming message.

        Args:
            message_text: The new user message
            prior_turns: Conversation history, oldest first
            client_id: Client identifier for the handoff action
            chat_id: Conversation identifier for the handoff action

        Returns:
            Blocked or normal WorkflowResult

        Raises:
            WorkflowError: If the run yielded no result
            MissingOutputError: If a handler returned nothing usable
        """
        workflow_input = WorkflowInput(
            message_text=message_text,
            prior_turns=list(prior_turns),
            client_id=client_id,
            chat_id=chat_id,
        )
        workflow = create_consultation_workflow(
            self._screen,
            self._resources,
            agents=self._agents_for(client_id, chat_id),
        )
        outputs: list[WorkflowResult] = []
        async for event in workflow.run_stream(workflow_input):
            if isinstance(event, WorkflowOutputEvent):
                outputs.append(event.data)
        if not outputs:
            raise WorkflowError(f"Workflow produced no output for chat {chat_id!r}")

        result: WorkflowResult = outputs[0]
        logger.info(
            f"Chat {chat_id!r} answered by {result.handler or 'safety_screen'} "
            f"(blocked={result.blocked})"
        )
        return result
