"""Workflow result schema."""

from typing import Optional

from pydantic import BaseModel, model_validator

from .safety import GuardrailFailOutput


class WorkflowResult(BaseModel):
    """Single output of an invocation: either blocked or a reply."""

    blocked: bool = False
    output_text: Optional[str] = None
    safe_text: Optional[str] = None
    verdict_detail: Optional[GuardrailFailOutput] = None
    handler: Optional[str] = None
    # Incoming message as the handlers saw it, PII-masked when masking is on
    user_text: Optional[str] = None

    @model_validator(mode="after")
    def _one_shape(self) -> "WorkflowResult":
        if self.blocked and self.output_text is not None:
            raise ValueError("blocked result cannot carry output_text")
        if not self.blocked and self.output_text is None:
            raise ValueError("reply result requires output_text")
        return self

    @classmethod
    def reply(cls, text: str, handler: str, user_text: Optional[str] = None) -> "WorkflowResult":
        return cls(output_text=text, handler=handler, user_text=user_text)

    @classmethod
    def blocked_by(cls, safe_text: str, detail: GuardrailFailOutput) -> "WorkflowResult":
        return cls(blocked=True, safe_text=safe_text, verdict_detail=detail)
