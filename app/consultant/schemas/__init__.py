"""Typed schemas shared by the consultant workflow."""

from .common import (
    ContentPart,
    ConversationTurn,
    OpaquePart,
    TextPart,
    Transcript,
    WorkflowInput,
)
from .intent import (
    CLARIFICATION_CONFIDENCE_THRESHOLD,
    INFO_TOPICS,
    IntentCategory,
    IntentClassification,
)
from .result import WorkflowResult
from .safety import (
    CheckName,
    GuardrailFailOutput,
    GuardrailPolicy,
    GuardrailSpec,
    SafetyVerdict,
    VerdictInfo,
)

__all__ = [
    "CLARIFICATION_CONFIDENCE_THRESHOLD",
    "CheckName",
    "ContentPart",
    "ConversationTurn",
    "GuardrailFailOutput",
    "GuardrailPolicy",
    "GuardrailSpec",
    "INFO_TOPICS",
    "IntentCategory",
    "IntentClassification",
    "OpaquePart",
    "SafetyVerdict",
    "TextPart",
    "Transcript",
    "VerdictInfo",
    "WorkflowInput",
    "WorkflowResult",
]
