"""Model registry with centralized, typed model definitions.

This module provides:
- ChatModelEnvSettings: Environment-based settings for Mode 1 (local dev)
- ModelDefinition: Immutable model configuration dataclass
- ModelRegistry: Resolves model configurations with credentials
- AgentModelMapping: Per-handler model override with Pydantic validation
- create_openai_client: Raw OpenAI client for guardrails and embeddings
"""

from dataclasses import dataclass
from typing import Callable, Literal, Optional, Union

from dotenv import load_dotenv
from openai import AsyncAzureOpenAI, AsyncOpenAI
from pydantic import BaseModel
from pydantic_settings import BaseSettings, SettingsConfigDict

from .errors import ConfigurationError

load_dotenv()

Provider = Literal["azure", "openai"]


# --- Env Settings (Mode 1: Local Dev) ---
class ChatModelEnvSettings(BaseSettings):
    """Chat model configuration from environment variables.

    Used in Mode 1 (local dev) when no ModelRegistry is provided.
    """

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    llm_provider: Provider = "azure"
    azure_openai_api_key: str = ""
    azure_openai_endpoint: str = ""
    azure_openai_deployment_name: str = ""
    openai_api_key: str = ""
    openai_model: str = "gpt-5.1-chat-latest"


# --- Model Definition ---
@dataclass(frozen=True)
class ModelDefinition:
    """Immutable model configuration."""

    name: str
    display_name: str
    provider: Provider
    deployment_name: str


# --- Available Models ---
GPT51_CHAT = ModelDefinition(
    name="gpt-5.1-chat-latest",
    display_name="GPT 5.1 Chat",
    provider="openai",
    deployment_name="gpt-5.1-chat-latest",
)

GPT5_NANO = ModelDefinition(
    name="gpt-5-nano",
    display_name="GPT 5 Nano",
    provider="openai",
    deployment_name="gpt-5-nano",
)

GPT41 = ModelDefinition(
    name="gpt-4.1",
    display_name="GPT 4.1",
    provider="azure",
    deployment_name="gpt-4.1",
)

GPT41_MINI = ModelDefinition(
    name="gpt-4.1-mini",
    display_name="GPT 4.1 Mini",
    provider="azure",
    deployment_name="gpt-4.1-mini",
)

AVAILABLE_MODELS: list[ModelDefinition] = [GPT51_CHAT, GPT5_NANO, GPT41, GPT41_MINI]

# Literal type for Pydantic validation
ModelName = Literal["gpt-5.1-chat-latest", "gpt-5-nano", "gpt-4.1", "gpt-4.1-mini"]


# --- Resolved Config (with credentials) ---
@dataclass(frozen=True)
class ResolvedModelConfig:
    """Resolved model configuration with API credentials."""

    provider: Provider
    deployment_name: str
    api_key: str
    endpoint: str = ""


# --- Agent-Model Mapping ---
class AgentModelMapping(BaseModel):
    """Optional per-handler model override.

    Each field validates against ModelName Literal type.
    None = use workflow_model.
    """

    intent_classifier: Optional[ModelName] = None
    clarifier: Optional[ModelName] = None
    info_faq: Optional[ModelName] = None
    course_selector: Optional[ModelName] = None
    contract_support: Optional[ModelName] = None

    def get(self, agent_key: str) -> Optional[str]:
        """Get model name for handler, None if not specified."""
        return getattr(self, agent_key, None)


# --- Model Resolver Factory ---
def create_model_resolver(
    workflow_model: ModelName,
    agent_mapping: Optional[AgentModelMapping] = None,
) -> Callable[[str], ModelName]:
    """Create a resolver that returns model for agent_key.

    Usage:
        model_for = create_model_resolver(workflow_model, agent_mapping)
        classifier = create_intent_classifier_agent(registry, model_for("intent_classifier"))
    """
    def resolve(agent_key: str) -> ModelName:
        if agent_mapping and (model := agent_mapping.get(agent_key)):
            return model  # type: ignore[return-value]
        return workflow_model
    return resolve


# --- Model Registry ---
class ModelRegistry:
    """Registry that resolves model configurations against loaded credentials.

    Initialize once in app lifespan and store in app.state.
    """

    def __init__(self, env: Optional[ChatModelEnvSettings] = None):
        """Initialize registry and check provider credentials.

        Args:
            env: Credential settings; loaded from environment when omitted

        Raises:
            ConfigurationError: If no provider has an API key
        """
        self._env = env or ChatModelEnvSettings()
        if not (self._env.openai_api_key or self._env.azure_openai_api_key):
            raise ConfigurationError(
                "OPENAI_API_KEY or AZURE_OPENAI_API_KEY must be set"
            )
        self._models = {m.name: m for m in AVAILABLE_MODELS}

    def get(self, model_name: ModelName) -> ResolvedModelConfig:
        """Get resolved model config by name.

        Args:
            model_name: Name of the model (validated by Literal type)

        Returns:
            ResolvedModelConfig with provider, deployment_name, api_key, endpoint

        Raises:
            ConfigurationError: If the model's provider has no API key
        """
        model = self._models[model_name]
        if model.provider == "openai":
            api_key, endpoint = self._env.openai_api_key, ""
        else:
            api_key, endpoint = self._env.azure_openai_api_key, self._env.azure_openai_endpoint
        if not api_key:
            raise ConfigurationError(f"No API key configured for provider '{model.provider}'")
        return ResolvedModelConfig(
            provider=model.provider,
            deployment_name=model.deployment_name,
            api_key=api_key,
            endpoint=endpoint,
        )


# --- Raw OpenAI client (guardrails, embeddings) ---
def create_openai_client(
    provider: Provider,
    api_key: str,
    endpoint: str = "",
    api_version: str = "",
) -> Union[AsyncOpenAI, AsyncAzureOpenAI]:
    """OpenAI SDK client for calls made outside the chat agents."""
    if provider == "openai":
        return AsyncOpenAI(api_key=api_key)
    return AsyncAzureOpenAI(api_key=api_key, azure_endpoint=endpoint, api_version=api_version)
