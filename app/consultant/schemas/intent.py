"""Intent classifier output schema."""

from typing import Literal

from pydantic import BaseModel, Field, model_validator

IntentCategory = Literal[
    "about_institute",
    "program_choice",
    "documents_for_study",
    "registration",
    "application_submission",
    "payment",
    "learning_process",
    "attestation",
    "documents_submission",
    "other_question",
    "course_selection",
    "contract_support",
    "handoff",
]

# Topics answered from the information file sections.
INFO_TOPICS: tuple[str, ...] = (
    "about_institute",
    "program_choice",
    "documents_for_study",
    "registration",
    "application_submission",
    "payment",
    "learning_process",
    "attestation",
    "documents_submission",
)

# Below this confidence the request goes to the clarifier. Exactly 0.6 passes.
CLARIFICATION_CONFIDENCE_THRESHOLD = 0.6


class IntentClassification(BaseModel):
    """Structured output from the intent classifier."""

    category: IntentCategory
    confidence: float = Field(ge=0.0, le=1.0)
    needs_clarification: bool
    clarification_question: str = ""
    needs_contract_number: bool

    @model_validator(mode="after")
    def _apply_category_rules(self) -> "IntentClassification":
        if self.category == "contract_support":
            self.needs_contract_number = True
        elif self.category == "documents_submission":
            self.needs_contract_number = False
        if self.category == "other_question":
            self.needs_clarification = True
        if not self.needs_clarification:
            self.clarification_question = ""
        return self

    @property
    def requires_clarification(self) -> bool:
        return (
            self.confidence < CLARIFICATION_CONFIDENCE_THRESHOLD
            or self.needs_clarification
        )
