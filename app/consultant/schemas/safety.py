"""Safety screen policy, verdict and blocked-payload schemas."""

from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field


class CheckName(str, Enum):
    """Guardrail checks known to the safety screen."""

    PII = "Contains PII"
    MODERATION = "Moderation"
    JAILBREAK = "Jailbreak"
    HALLUCINATION = "Hallucination Detection"
    NSFW = "NSFW Text"
    URL_FILTER = "URL Filter"
    CUSTOM_PROMPT_CHECK = "Custom Prompt Check"
    PROMPT_INJECTION = "Prompt Injection Detection"


class GuardrailSpec(BaseModel):
    """One configured check with its engine-specific config."""

    name: CheckName
    config: dict[str, Any] = {}


class GuardrailPolicy(BaseModel):
    """Ordered list of checks to run against a text."""

    guardrails: list[GuardrailSpec] = []

    def pii_masking_spec(self) -> Optional[GuardrailSpec]:
        """The PII check configured as mask-only (block=false), if any."""
        for spec in self.guardrails:
            if spec.name == CheckName.PII and spec.config.get("block") is False:
                return spec
        return None

    def only(self, spec: GuardrailSpec) -> "GuardrailPolicy":
        return GuardrailPolicy(guardrails=[spec])


class VerdictInfo(BaseModel):
    """Detail reported by a check; unknown engine fields are preserved."""

    model_config = ConfigDict(extra="allow")

    guardrail_name: str
    checked_text: Optional[str] = None
    anonymized_text: Optional[str] = None
    detected_entities: dict[str, list[str]] = {}
    flagged_categories: list[str] = []
    confidence: Optional[float] = None
    reasoning: Optional[str] = None
    hallucination_type: Optional[str] = None
    hallucinated_statements: Optional[list[str]] = None
    verified_statements: Optional[list[str]] = None


class SafetyVerdict(BaseModel):
    """Tripwire outcome of one check."""

    model_config = ConfigDict(frozen=True)

    check: CheckName
    triggered: bool
    info: VerdictInfo


class CheckFailure(BaseModel):
    failed: bool = False


class PIIFailure(CheckFailure):
    detected_counts: list[str] = []


class ModerationFailure(CheckFailure):
    flagged_categories: Optional[list[str]] = None


class HallucinationFailure(CheckFailure):
    reasoning: Optional[str] = None
    hallucination_type: Optional[str] = None
    hallucinated_statements: Optional[list[str]] = None
    verified_statements: Optional[list[str]] = None


class GuardrailFailOutput(BaseModel):
    """Per-check breakdown returned when the screen blocks a message."""

    pii: PIIFailure = Field(default_factory=PIIFailure)
    moderation: ModerationFailure = Field(default_factory=ModerationFailure)
    jailbreak: CheckFailure = Field(default_factory=CheckFailure)
    hallucination: HallucinationFailure = Field(default_factory=HallucinationFailure)
    nsfw: CheckFailure = Field(default_factory=CheckFailure)
    url_filter: CheckFailure = Field(default_factory=CheckFailure)
    custom_prompt_check: CheckFailure = Field(default_factory=CheckFailure)
    prompt_injection: CheckFailure = Field(default_factory=CheckFailure)

