"""Safety screen: tripwire detection, masked-text extraction and PII scrubbing."""

import logging
from dataclasses import dataclass, field
from typing import Iterable, Optional

from ..schemas.common import Transcript, WorkflowInput
from ..schemas.safety import (
    CheckName,
    GuardrailFailOutput,
    GuardrailPolicy,
    GuardrailSpec,
    SafetyVerdict,
)
from .guardrails import GuardrailClient

logger = logging.getLogger(__name__)

JAILBREAK_POLICY = GuardrailPolicy(
    guardrails=[
        GuardrailSpec(
            name=CheckName.JAILBREAK,
            config={"model": "gpt-5-nano", "confidence_threshold": 0.7},
        )
    ]
)

# Input record fields rewritten by the PII scrub.
SCRUBBED_INPUT_FIELDS = ("message_text",)


def has_tripwire(verdicts: Iterable[SafetyVerdict]) -> bool:
    return any(v.triggered for v in verdicts)


def extract_masked_text(verdicts: Iterable[SafetyVerdict], fallback: str) -> str:
    """Masked form of the screened text, or `fallback` when no check produced one.

    Checks reporting a sanitized ``checked_text`` take precedence over
    anonymization-only checks.
    """
    verdicts = list(verdicts)
    for verdict in verdicts:
        if verdict.info.checked_text is not None:
            return verdict.info.checked_text
    for verdict in verdicts:
        if verdict.info.anonymized_text is not None:
            return verdict.info.anonymized_text
    return fallback


def build_fail_output(verdicts: Iterable[SafetyVerdict]) -> GuardrailFailOutput:
    """Per-check breakdown for the blocked payload."""
    by_check = {v.check: v for v in verdicts}

    def failed(check: CheckName) -> bool:
        verdict = by_check.get(check)
        return verdict is not None and verdict.triggered

    output = GuardrailFailOutput()

    pii = by_check.get(CheckName.PII)
    if pii is not None:
        counts = [f"{k}:{len(v)}" for k, v in pii.info.detected_entities.items()]
        output.pii.failed = bool(counts) or pii.triggered
        output.pii.detected_counts = counts

    moderation = by_check.get(CheckName.MODERATION)
    if moderation is not None:
        output.moderation.failed = moderation.triggered or bool(moderation.info.flagged_categories)
        output.moderation.flagged_categories = moderation.info.flagged_categories

    hallucination = by_check.get(CheckName.HALLUCINATION)
    if hallucination is not None:
        output.hallucination.failed = hallucination.triggered
        output.hallucination.reasoning = hallucination.info.reasoning
        output.hallucination.hallucination_type = hallucination.info.hallucination_type
        output.hallucination.hallucinated_statements = hallucination.info.hallucinated_statements
        output.hallucination.verified_statements = hallucination.info.verified_statements

    output.jailbreak.failed = failed(CheckName.JAILBREAK)
    output.nsfw.failed = failed(CheckName.NSFW)
    output.url_filter.failed = failed(CheckName.URL_FILTER)
    output.custom_prompt_check.failed = failed(CheckName.CUSTOM_PROMPT_CHECK)
    output.prompt_injection.failed = failed(CheckName.PROMPT_INJECTION)
    return output


@dataclass
class ScreeningReport:
    """Outcome of screening one incoming message."""

    verdicts: list[SafetyVerdict]
    has_tripwire: bool
    safe_text: str
    fail_output: GuardrailFailOutput = field(default_factory=GuardrailFailOutput)


class SafetyScreen:
    """Screens incoming text against a policy and scrubs PII when configured."""

    def __init__(self, client: GuardrailClient, policy: Optional[GuardrailPolicy] = None) -> None:
        self._client = client
        self._policy = policy or JAILBREAK_POLICY
        client.validate(self._policy)

    @property
    def policy(self) -> GuardrailPolicy:
        return self._policy

    async def screen(self, text: str, policy: Optional[GuardrailPolicy] = None) -> list[SafetyVerdict]:
        return await self._client.run_checks(text, policy or self._policy, strict=True)

    async def mask(self, text: str, pii_policy: GuardrailPolicy) -> str:
        """PII-masked form of `text` under a mask-only policy."""
        verdicts = await self._client.run_checks(text, pii_policy, strict=True)
        return extract_masked_text(verdicts, text)

    async def scrub(self, transcript: Transcript, workflow_input: WorkflowInput, pii_policy: GuardrailPolicy) -> None:
        """Rewrite transcript text parts and input fields with their masked form."""
        await transcript.rewrite_text(lambda text: self.mask(text, pii_policy))
        for name in SCRUBBED_INPUT_FIELDS:
            value = getattr(workflow_input, name, None)
            if isinstance(value, str) and value:
                setattr(workflow_input, name, await self.mask(value, pii_policy))

    async def screen_and_apply(
        self, text: str, transcript: Transcript, workflow_input: WorkflowInput
    ) -> ScreeningReport:
        """Screen `text`, scrub PII when the policy masks it, and report.

        The scrub runs whether or not a check triggered.
        """
        verdicts = await self.screen(text)

        pii_spec = self._policy.pii_masking_spec()
        if pii_spec is not None:
            await self.scrub(transcript, workflow_input, self._policy.only(pii_spec))

        tripwire = has_tripwire(verdicts)
        return ScreeningReport(
            verdicts=verdicts,
            has_tripwire=tripwire,
            safe_text=extract_masked_text(verdicts, text),
            fail_output=build_fail_output(verdicts),
        )
