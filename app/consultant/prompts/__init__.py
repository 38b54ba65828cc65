"""Handler persona configurations as Python dataclasses."""

from .clarifier import CLARIFIER
from .contract_support import CONTRACT_SUPPORT
from .course_selector import COURSE_SELECTOR
from .info_faq import INFO_FAQ
from .intent_classifier import INTENT_CLASSIFIER

__all__ = [
    "CLARIFIER",
    "CONTRACT_SUPPORT",
    "COURSE_SELECTOR",
    "INFO_FAQ",
    "INTENT_CLASSIFIER",
]
