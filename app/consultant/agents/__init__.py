"""Agent factories for the consultant handlers."""

from .clarifier_agent import create_clarifier_agent
from .contract_support_agent import create_contract_support_agent
from .course_selector_agent import create_course_selector_agent
from .info_faq_agent import create_info_faq_agent
from .intent_classifier_agent import create_intent_classifier_agent

__all__ = [
    "create_clarifier_agent",
    "create_contract_support_agent",
    "create_course_selector_agent",
    "create_info_faq_agent",
    "create_intent_classifier_agent",
]
