"""Application configuration using Pydantic Settings."""

from functools import lru_cache
from pathlib import Path
from typing import Literal, Optional

from pydantic_settings import BaseSettings, SettingsConfigDict

from app.consultant.errors import ConfigurationError
from app.consultant.model_registry import (
    AgentModelMapping,
    ChatModelEnvSettings,
    ModelName,
    Provider,
)
from app.consultant.schemas.safety import CheckName, GuardrailPolicy, GuardrailSpec


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Model provider credentials
    llm_provider: Provider = "azure"
    azure_openai_api_key: str = ""
    azure_openai_endpoint: str = ""
    azure_openai_deployment_name: str = ""
    azure_openai_api_version: str = "2024-10-21"
    openai_api_key: str = ""
    openai_model: str = "gpt-5.1-chat-latest"

    # Registry mode: when workflow_model is set, agents resolve through ModelRegistry
    workflow_model: Optional[ModelName] = None
    agent_models: AgentModelMapping = AgentModelMapping()

    # Safety screen (openai-guardrails)
    guardrail_model: str = "gpt-5-nano"
    jailbreak_confidence_threshold: float = 0.7
    pii_masking: bool = False
    pii_entities: list[str] = ["EMAIL_ADDRESS", "PHONE_NUMBER", "CREDIT_CARD"]
    # Full policy override as JSON in the openai-guardrails bundle format
    guardrail_policy_json: str = ""

    # Knowledge files
    dialog_examples_path: Path = Path("data/dialog_pedrabotnik.txt")
    topic_sections_path: Path = Path("data/main_information.txt")
    retraining_catalog_path: Path = Path("data/retraining.json")
    upskilling_catalog_path: Path = Path("data/upskilling.json")
    contract_info_json: str = ""

    # Dialogue example search: "semantic" embeds questions with OpenAI, "keyword" uses stem overlap
    dialog_search: Literal["semantic", "keyword"] = "semantic"
    embedding_model: str = "text-embedding-3-small"
    dialog_min_similarity: float = 0.6

    # Chat history
    history_mode: Literal["memory", "redis"] = "memory"
    history_max_turns: int = 20
    history_max_chats: int = 10000  # memory mode only
    history_idle_seconds: int = 86400  # memory mode only
    redis_host: str = "localhost"
    redis_port: int = 6379
    redis_password: str = ""
    redis_ssl: bool = False
    redis_ttl_seconds: int = 86400

    # Transports
    telegram_bot_token: str = ""
    workflow_timeout_seconds: Optional[float] = None

    # Observability settings
    tracing_backend: str = "disabled"  # "disabled", "local", "appinsights"
    local_otlp_endpoint: str = "http://localhost:4317"
    appinsights_connection_string: str = ""
    enable_sensitive_data: bool = False

    def model_env(self) -> ChatModelEnvSettings:
        """Credential settings handed to the model registry."""
        return ChatModelEnvSettings(
            llm_provider=self.llm_provider,
            azure_openai_api_key=self.azure_openai_api_key,
            azure_openai_endpoint=self.azure_openai_endpoint,
            azure_openai_deployment_name=self.azure_openai_deployment_name,
            openai_api_key=self.openai_api_key,
            openai_model=self.openai_model,
        )

    def guardrail_policy(self) -> GuardrailPolicy:
        """Safety policy: the JSON override, or Jailbreak plus optional PII masking."""
        if self.guardrail_policy_json:
            return GuardrailPolicy.model_validate_json(self.guardrail_policy_json)
        guardrails = [
            GuardrailSpec(
                name=CheckName.JAILBREAK,
                config={
                    "model": self.guardrail_model,
                    "confidence_threshold": self.jailbreak_confidence_threshold,
                },
            )
        ]
        if self.pii_masking:
            guardrails.append(GuardrailSpec(
                name=CheckName.PII,
                config={"entities": list(self.pii_entities), "block": False},
            ))
        return GuardrailPolicy(guardrails=guardrails)

    def validate_credentials(self, telegram: bool = False) -> None:
        """Fail fast on missing secrets.

        Args:
            telegram: Also require the Telegram bot token

        Raises:
            ConfigurationError: If the selected provider or Telegram lacks a key
        """
        if self.llm_provider == "openai" and not self.openai_api_key:
            raise ConfigurationError("OPENAI_API_KEY is required for provider 'openai'")
        if self.llm_provider == "azure" and not self.azure_openai_api_key:
            raise ConfigurationError("AZURE_OPENAI_API_KEY is required for provider 'azure'")
        if telegram and not self.telegram_bot_token:
            raise ConfigurationError("TELEGRAM_BOT_TOKEN is required for the Telegram bot")


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
