"""Content-safety screening."""

from .guardrails import (
    GuardrailClient,
    GuardrailContext,
    load_guardrails,
    to_bundle,
    to_verdict,
)
from .screen import (
    JAILBREAK_POLICY,
    SafetyScreen,
    ScreeningReport,
    build_fail_output,
    extract_masked_text,
    has_tripwire,
)

__all__ = [
    "GuardrailClient",
    "GuardrailContext",
    "JAILBREAK_POLICY",
    "SafetyScreen",
    "ScreeningReport",
    "build_fail_output",
    "extract_masked_text",
    "has_tripwire",
    "load_guardrails",
    "to_bundle",
    "to_verdict",
]
