"""Contract support agent reporting contract status from lookup data."""

from typing import Optional

from agent_framework import ChatAgent

from ..factory import create_agent
from ..model_registry import ModelName, ModelRegistry
from ..prompts.contract_support import CONTRACT_SUPPORT


def create_contract_support_agent(
    registry: Optional[ModelRegistry] = None,
    model_name: Optional[ModelName] = None,
    tools: Optional[list] = None,
) -> ChatAgent:
    """Create the contract support agent.

    Args:
        registry: ModelRegistry for deployment mode, None for env settings
        model_name: Model to use (required when registry provided)
        tools: Actions the agent may call

    Returns:
        Configured ChatAgent instance
    """
    return create_agent(
        name=CONTRACT_SUPPORT.name,
        description=CONTRACT_SUPPORT.description,
        instructions=CONTRACT_SUPPORT.instructions,
        registry=registry,
        model_name=model_name,
        tools=tools,
    )
