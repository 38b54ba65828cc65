"""Intent classifier agent producing structured IntentClassification output."""

from typing import Optional

from agent_framework import ChatAgent

from ..factory import create_agent
from ..model_registry import ModelName, ModelRegistry
from ..prompts.intent_classifier import INTENT_CLASSIFIER
from ..schemas.intent import IntentClassification


def create_intent_classifier_agent(
    registry: Optional[ModelRegistry] = None,
    model_name: Optional[ModelName] = None,
) -> ChatAgent:
    """Create the intent classifier agent.

    Args:
        registry: ModelRegistry for deployment mode, None for env settings
        model_name: Model to use (required when registry provided)

    Returns:
        Configured ChatAgent instance
    """
    return create_agent(
        name=INTENT_CLASSIFIER.name,
        description=INTENT_CLASSIFIER.description,
        instructions=INTENT_CLASSIFIER.instructions,
        registry=registry,
        model_name=model_name,
        response_format=IntentClassification,
    )
