"""Side-effect actions available to handlers."""

from .contract_info import ContractDirectory, create_contract_info_tool
from .handoff import (
    HandoffClient,
    LoggingHandoffClient,
    create_invite_agent_tool,
    request_handoff,
)

__all__ = [
    "ContractDirectory",
    "HandoffClient",
    "LoggingHandoffClient",
    "create_contract_info_tool",
    "create_invite_agent_tool",
    "request_handoff",
]
