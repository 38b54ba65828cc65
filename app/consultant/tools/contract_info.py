"""Contract lookup action backed by a JSON map of contract records."""

import json
import logging
from typing import Annotated, Any, Optional

from agent_framework import ai_function
from pydantic import Field

logger = logging.getLogger(__name__)


class ContractDirectory:
    """Keyed lookup of contract records.

    The source is a JSON object keyed by contract number, e.g.
    ``{"1234": {"payment_status": "оплачен", "track_number": "RA123"}}``.
    A missing key or unreadable source yields ``{"found": False}``.
    """

    def __init__(self, raw_json: str = "") -> None:
        self._records = self._parse(raw_json)

    @staticmethod
    def _parse(raw_json: str) -> Optional[dict[str, Any]]:
        if not raw_json:
            return None
        try:
            data = json.loads(raw_json)
        except json.JSONDecodeError as e:
            logger.warning(f"CONTRACT_INFO_JSON is not valid JSON: {e}")
            return None
        if not isinstance(data, dict):
            logger.warning("CONTRACT_INFO_JSON must be a JSON object")
            return None
        return data

    async def lookup(self, contract_number: int) -> dict[str, Any]:
        """Return ``{"found": True, **fields}`` or ``{"found": False}``."""
        if self._records is None:
            return {"found": False}
        record = self._records.get(str(contract_number))
        if not record or not isinstance(record, dict):
            return {"found": False}
        return {"found": True, **record}


def create_contract_info_tool(directory: ContractDirectory):
    """Build the `get_contract_info` tool over a contract directory."""

    @ai_function(
        name="get_contract_info",
        description="Returns contract information (payment, documents, certificate, tracking) as JSON.",
    )
    async def get_contract_info(
        contract_number: Annotated[int, Field(description="Contract number")],
    ) -> dict[str, Any]:
        return await directory.lookup(contract_number)

    return get_contract_info
