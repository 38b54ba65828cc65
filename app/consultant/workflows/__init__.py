"""Consultation workflow and its executors."""

from .consultation_workflow import (
    ConsultantAgents,
    create_consultant_agents,
    create_consultation_workflow,
    select_after_screening,
    select_handler,
)
from .handlers import ClassifiedRequest, ScreenedRequest

__all__ = [
    "ClassifiedRequest",
    "ConsultantAgents",
    "ScreenedRequest",
    "create_consultant_agents",
    "create_consultation_workflow",
    "select_after_screening",
    "select_handler",
]
