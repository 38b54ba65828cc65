"""Clarifier agent asking a single clarifying question."""

from typing import Optional

from agent_framework import ChatAgent

from ..factory import create_agent
from ..model_registry import ModelName, ModelRegistry
from ..prompts.clarifier import CLARIFIER


def create_clarifier_agent(
    registry: Optional[ModelRegistry] = None,
    model_name: Optional[ModelName] = None,
) -> ChatAgent:
    """Create the clarifier agent.

    Args:
        registry: ModelRegistry for deployment mode, None for env settings
        model_name: Model to use (required when registry provided)

    Returns:
        Configured ChatAgent instance
    """
    return create_agent(
        name=CLARIFIER.name,
        description=CLARIFIER.description,
        instructions=CLARIFIER.instructions,
        registry=registry,
        model_name=model_name,
    )
