"""Guardrail client: runs a policy through the openai-guardrails runtime.

The library owns every check (PII, jailbreak, moderation, URL filter, ...).
This module builds the config bundle from a GuardrailPolicy, runs it with
the shared guardrail LLM client and turns library results into
SafetyVerdicts.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Union

from guardrails.runtime import instantiate_guardrails, load_config_bundle, run_guardrails
from openai import AsyncAzureOpenAI, AsyncOpenAI

from ..errors import ConfigurationError
from ..schemas.safety import CheckName, GuardrailPolicy, SafetyVerdict, VerdictInfo

logger = logging.getLogger(__name__)

GuardrailRunner = Callable[..., Awaitable[list[Any]]]
GuardrailLoader = Callable[[dict[str, Any]], list[Any]]


@dataclass
class GuardrailContext:
    """Context object handed to guardrail checks; LLM-based checks use `guardrail_llm`."""

    guardrail_llm: Union[AsyncOpenAI, AsyncAzureOpenAI, None] = None


def to_bundle(policy: GuardrailPolicy) -> dict[str, Any]:
    """Config bundle in the openai-guardrails format."""
    return {
        "version": 1,
        "guardrails": [
            {"name": spec.name.value, "config": dict(spec.config)} for spec in policy.guardrails
        ],
    }


def load_guardrails(bundle: dict[str, Any]) -> list[Any]:
    """Instantiate library guardrails from a config bundle."""
    return list(instantiate_guardrails(load_config_bundle(bundle)))


def to_verdict(result: Any, fallback: CheckName) -> SafetyVerdict:
    """SafetyVerdict from one library GuardrailResult."""
    info = dict(result.info or {})
    name = info.get("guardrail_name") or fallback.value
    info["guardrail_name"] = name
    return SafetyVerdict(
        check=CheckName(name),
        triggered=bool(result.tripwire_triggered),
        info=VerdictInfo.model_validate(info),
    )


@dataclass
class GuardrailClient:
    """Runs guardrail policies through openai-guardrails.

    Args:
        context: Carries the guardrail LLM client for model-based checks
        loader: Builds configured guardrails from a bundle
        runner: Runs configured guardrails against a text
    """

    context: GuardrailContext = field(default_factory=GuardrailContext)
    loader: GuardrailLoader = load_guardrails
    runner: GuardrailRunner = run_guardrails

    def instantiate(self, policy: GuardrailPolicy) -> list[Any]:
        """Configured library guardrails for `policy`.

        Raises:
            ConfigurationError: If the library rejects a check name or config
        """
        try:
            return self.loader(to_bundle(policy))
        except Exception as e:
            raise ConfigurationError(f"Invalid guardrail policy: {e}") from e

    def validate(self, policy: GuardrailPolicy) -> None:
        """Reject policies the library cannot run, or LLM checks without a client.

        Raises:
            ConfigurationError: For invalid configs or a missing guardrail LLM
        """
        self.instantiate(policy)
        if self.context.guardrail_llm is None and self.requires_llm(policy):
            raise ConfigurationError("LLM-based guardrails need a guardrail LLM client")

    @staticmethod
    def requires_llm(policy: GuardrailPolicy) -> bool:
        """True when any check of `policy` calls a model."""
        local = (CheckName.PII, CheckName.URL_FILTER)
        return any(spec.name not in local for spec in policy.guardrails)

    async def run_checks(
        self, text: str, policy: GuardrailPolicy, strict: bool = True
    ) -> list[SafetyVerdict]:
        """Run every check of `policy` against `text`.

        With ``strict=True`` check errors propagate; otherwise the library
        reports a failed check as not triggered.
        """
        results = await self.runner(
            ctx=self.context,
            data=text,
            media_type="text/plain",
            guardrails=self.instantiate(policy),
            suppress_tripwire=True,
            raise_guardrail_errors=strict,
        )
        verdicts = [
            to_verdict(result, spec.name) for result, spec in zip(results, policy.guardrails)
        ]
        for verdict in verdicts:
            if verdict.triggered:
                logger.info(f"Guardrail {verdict.check.value} triggered")
        return verdicts
