"""
Mock phone widget state.

In production, the softphone widget owns this state and the script page
only reads it. The mock lets the console demo and tests connect, transfer
and end calls between renders.
"""

import logging
from typing import Any, Optional

from call_scripts.schemas.call_schema import CallContext

logger = logging.getLogger(__name__)


class PhoneWidget:
    """Holds the raw context dict exactly as the widget exposes it."""

    def __init__(self) -> None:
        self._context: dict[str, Any] = {}

    def connect(
        self,
        number: str,
        name: str = "",
        company: str = "",
        contact_id: Optional[str] = None,
        account_id: Optional[str] = None,
    ) -> None:
        self._context = {
            "name": name,
            "company": company,
            "number": number,
            "isActive": True,
            "contactId": contact_id,
            "accountId": account_id,
        }
        logger.info("Call connected: %s", number)

    def transfer(self, name: str = "", contact_id: Optional[str] = None) -> None:
        """Another person picks up on the same line."""
        if not self._context:
            return
        self._context = {**self._context, "name": name, "contactId": contact_id}
        logger.info("Call transferred")

    def hang_up(self) -> None:
        if self._context:
            self._context = {**self._context, "isActive": False}
        logger.info("Call ended")

    def get_context(self) -> CallContext:
        """Fresh snapshot; the widget may change between any two renders."""
        return CallContext.from_widget(self._context)
