"""Course selector agent recommending catalog programs."""

from typing import Optional

from agent_framework import ChatAgent

from ..factory import create_agent
from ..model_registry import ModelName, ModelRegistry
from ..prompts.course_selector import COURSE_SELECTOR


def create_course_selector_agent(
    registry: Optional[ModelRegistry] = None,
    model_name: Optional[ModelName] = None,
    tools: Optional[list] = None,
) -> ChatAgent:
    """Create the course selector agent.

    Args:
        registry: ModelRegistry for deployment mode, None for env settings
        model_name: Model to use (required when registry provided)
        tools: Actions the agent may call

    Returns:
        Configured ChatAgent instance
    """
    return create_agent(
        name=COURSE_SELECTOR.name,
        description=COURSE_SELECTOR.description,
        instructions=COURSE_SELECTOR.instructions,
        registry=registry,
        model_name=model_name,
        tools=tools,
    )
