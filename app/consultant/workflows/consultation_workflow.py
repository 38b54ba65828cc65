"""Consultation workflow: safety screen, intent classification, routing.

Graph:
    safety_screen ─┬─> blocked
                   └─> intent_classifier ─┬─> clarifier
                                          ├─> contract_support
                                          ├─> course_selector
                                          └─> info_faq

Each workflow instance serves one invocation; build a fresh one per message.
"""

import logging
from dataclasses import dataclass
from typing import Any, Optional

from agent_framework import Executor, WorkflowBuilder, WorkflowContext, executor, handler
from typing_extensions import Never

from ..agents import (
    create_clarifier_agent,
    create_contract_support_agent,
    create_course_selector_agent,
    create_info_faq_agent,
    create_intent_classifier_agent,
)
from ..model_registry import (
    AgentModelMapping,
    ModelName,
    ModelRegistry,
    create_model_resolver,
)
from ..resources import ConsultantResources
from ..safety.screen import SafetyScreen
from ..schemas.common import WorkflowInput
from ..schemas.result import WorkflowResult
from ..tools import create_contract_info_tool, create_invite_agent_tool
from .handlers import (
    ClarifierExecutor,
    ClassifiedRequest,
    ContractSupportExecutor,
    CourseSelectorExecutor,
    InfoFAQExecutor,
    IntentClassifierExecutor,
    ScreenedRequest,
)

logger = logging.getLogger(__name__)


@dataclass
class ConsultantAgents:
    """Agents used by one workflow instance."""

    intent_classifier: Any
    clarifier: Any
    info_faq: Any
    course_selector: Any
    contract_support: Any


def create_consultant_agents(
    resources: ConsultantResources,
    client_id: str = "",
    chat_id: str = "",
    model_registry: Optional[ModelRegistry] = None,
    workflow_model: Optional[ModelName] = None,
    agent_mapping: Optional[AgentModelMapping] = None,
) -> ConsultantAgents:
    """Create the handler agents with actions bound to this conversation."""
    if model_registry is not None and workflow_model is None:
        raise ValueError("workflow_model required when model_registry provided")

    model_for = (
        create_model_resolver(workflow_model, agent_mapping)
        if workflow_model is not None
        else (lambda _key: None)
    )
    invite_agent = create_invite_agent_tool(resources.handoff, client_id, chat_id)
    contract_info = create_contract_info_tool(resources.contracts)

    return ConsultantAgents(
        intent_classifier=create_intent_classifier_agent(
            model_registry, model_for("intent_classifier")
        ),
        clarifier=create_clarifier_agent(model_registry, model_for("clarifier")),
        info_faq=create_info_faq_agent(
            model_registry, model_for("info_faq"), tools=[invite_agent]
        ),
        course_selector=create_course_selector_agent(
            model_registry, model_for("course_selector"), tools=[invite_agent]
        ),
        contract_support=create_contract_support_agent(
            model_registry, model_for("contract_support"), tools=[contract_info, invite_agent]
        ),
    )


# === Safety Screen ===
class SafetyScreenExecutor(Executor):
    """Screens the incoming message and seeds the transcript."""

    def __init__(self, screen: SafetyScreen, id: str = "safety_screen"):
        super().__init__(id=id)
        self._screen = screen

    @handler
    async def handle(self, input: WorkflowInput, ctx: WorkflowContext[ScreenedRequest]) -> None:
        # The invocation owns its copy; the caller's input is left untouched.
        workflow_input = input.model_copy(deep=True)
        transcript = workflow_input.seed_transcript()
        report = await self._screen.screen_and_apply(
            workflow_input.message_text, transcript, workflow_input
        )
        if report.has_tripwire:
            logger.warning(f"Message blocked by safety screen (chat={workflow_input.chat_id!r})")
        await ctx.send_message(
            ScreenedRequest(transcript=transcript, workflow_input=workflow_input, report=report)
        )


@executor(id="blocked")
async def blocked(request: ScreenedRequest, ctx: WorkflowContext[Never, WorkflowResult]) -> None:
    """Terminate with the masked text and the per-check breakdown."""
    await ctx.yield_output(
        WorkflowResult.blocked_by(request.report.safe_text, request.report.fail_output)
    )


# === Selection Functions ===
def select_after_screening(request: ScreenedRequest, target_ids: list[str]) -> list[str]:
    """target_ids order: [blocked, intent_classifier]"""
    blocked_id, classifier_id = target_ids
    if request.report.has_tripwire:
        return [blocked_id]
    return [classifier_id]


def select_handler(request: ClassifiedRequest, target_ids: list[str]) -> list[str]:
    """Pick exactly one handler for the classification.

    target_ids order: [clarifier, contract_support, course_selector, info_faq]
    """
    clarifier_id, contract_id, course_id, info_id = target_ids
    classification = request.classification
    if classification.requires_clarification:
        return [clarifier_id]
    if classification.category == "contract_support":
        return [contract_id]
    if classification.category == "course_selection":
        return [course_id]
    return [info_id]


# === Workflow Factory ===
def create_consultation_workflow(
    screen: SafetyScreen,
    resources: ConsultantResources,
    agents: Optional[ConsultantAgents] = None,
    client_id: str = "",
    chat_id: str = "",
    model_registry: Optional[ModelRegistry] = None,
    workflow_model: Optional[ModelName] = None,
    agent_mapping: Optional[AgentModelMapping] = None,
):
    """Create the consultation workflow for one invocation.

    Args:
        screen: Safety screen applied to the incoming message
        resources: Knowledge stores and action backends
        agents: Prebuilt agents; created from the model settings when omitted
        client_id: Client identifier passed to the handoff action
        chat_id: Conversation identifier passed to the handoff action
        model_registry: ModelRegistry for deployment mode, None for env settings
        workflow_model: Model for all agents (required if model_registry provided)
        agent_mapping: Per-handler model overrides

    Returns:
        Configured Workflow instance
    """
    if agents is None:
        agents = create_consultant_agents(
            resources, client_id, chat_id, model_registry, workflow_model, agent_mapping
        )

    safety_screen = SafetyScreenExecutor(screen)
    intent_classifier = IntentClassifierExecutor(agents.intent_classifier)
    clarifier = ClarifierExecutor(agents.clarifier)
    contract_support = ContractSupportExecutor(agents.contract_support, resources)
    course_selector = CourseSelectorExecutor(agents.course_selector, resources)
    info_faq = InfoFAQExecutor(agents.info_faq, resources)

    workflow = (
        WorkflowBuilder(
            name="Consultation Workflow",
            description="Screens, classifies and answers педработник.рф client messages",
        )
        .set_start_executor(safety_screen)
        .add_multi_selection_edge_group(
            safety_screen,
            [blocked, intent_classifier],
            selection_func=select_after_screening,
        )
        .add_multi_selection_edge_group(
            intent_classifier,
            [clarifier, contract_support, course_selector, info_faq],
            selection_func=select_handler,
        )
        .build()
    )

    return workflow
