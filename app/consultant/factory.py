"""Agent factory supporting both env settings and registry modes.

Mode 1 (registry=None): Use env settings (ChatModelEnvSettings) for local dev
Mode 2/3 (registry provided): Use ModelRegistry for deployment
"""

from typing import Any, List, Optional, Type

from agent_framework import ChatAgent
from agent_framework.azure import AzureOpenAIChatClient
from agent_framework.openai import OpenAIChatClient

from .errors import ConfigurationError
from .middleware.observability import (
    observability_agent_middleware,
    observability_function_middleware,
)
from .model_registry import (
    ChatModelEnvSettings,
    ModelName,
    ModelRegistry,
    ResolvedModelConfig,
)


def _resolve_from_env() -> ResolvedModelConfig:
    env = ChatModelEnvSettings()
    if env.llm_provider == "openai":
        resolved = ResolvedModelConfig(
            provider="openai",
            deployment_name=env.openai_model,
            api_key=env.openai_api_key,
        )
    else:
        resolved = ResolvedModelConfig(
            provider="azure",
            deployment_name=env.azure_openai_deployment_name,
            api_key=env.azure_openai_api_key,
            endpoint=env.azure_openai_endpoint,
        )
    if not resolved.api_key:
        raise ConfigurationError(f"API key for provider '{resolved.provider}' is not set")
    return resolved


def create_chat_client(resolved: ResolvedModelConfig):
    """Create the chat client for a resolved model."""
    if resolved.provider == "openai":
        return OpenAIChatClient(model_id=resolved.deployment_name, api_key=resolved.api_key)
    return AzureOpenAIChatClient(
        api_key=resolved.api_key,
        endpoint=resolved.endpoint,
        deployment_name=resolved.deployment_name,
    )


def create_agent(
    name: str,
    description: str,
    instructions: str,
    registry: Optional[ModelRegistry] = None,
    model_name: Optional[ModelName] = None,
    response_format: Optional[Type] = None,
    tools: Optional[List] = None,
) -> ChatAgent:
    """Create ChatAgent with model configuration.

    Args:
        name: Agent name
        description: Agent description
        instructions: System prompt
        registry: ModelRegistry for deployment mode, None for env settings
        model_name: Model to use (required when registry provided)
        response_format: Optional Pydantic output schema
        tools: Optional list of tool functions

    Returns:
        Configured ChatAgent instance

    Raises:
        ValueError: If registry is provided but model_name is None
        ConfigurationError: If the provider has no credentials
    """
    if registry is None:
        resolved = _resolve_from_env()
    else:
        if model_name is None:
            raise ValueError("model_name is required when registry is provided")
        resolved = registry.get(model_name)

    middleware: List[Any] = [observability_agent_middleware]
    if tools:
        middleware.append(observability_function_middleware)

    return ChatAgent(
        name=name,
        description=description,
        instructions=instructions,
        chat_client=create_chat_client(resolved),
        response_format=response_format,
        tools=tools or [],
        middleware=middleware,
    )
