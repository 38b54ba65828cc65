"""Information consultant agent answering from curated dialogue examples."""

from typing import Optional

from agent_framework import ChatAgent

from ..factory import create_agent
from ..model_registry import ModelName, ModelRegistry
from ..prompts.info_faq import INFO_FAQ


def create_info_faq_agent(
    registry: Optional[ModelRegistry] = None,
    model_name: Optional[ModelName] = None,
    tools: Optional[list] = None,
) -> ChatAgent:
    """Create the information consultant agent.

    Args:
        registry: ModelRegistry for deployment mode, None for env settings
        model_name: Model to use (required when registry provided)
        tools: Actions the agent may call

    Returns:
        Configured ChatAgent instance
    """
    return create_agent(
        name=INFO_FAQ.name,
        description=INFO_FAQ.description,
        instructions=INFO_FAQ.instructions,
        registry=registry,
        model_name=model_name,
        tools=tools,
    )
