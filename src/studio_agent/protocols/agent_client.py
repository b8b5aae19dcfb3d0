"""Protocol definitions for agent service clients - no more Any types!

Defines the interface the orchestrator dispatches through.
"""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable

from studio_agent.chat.response_models import AgentOutcome
from studio_agent.constants import Decision


@runtime_checkable
class AgentDispatcher(Protocol):
    """Protocol for the two requests the confirmation protocol makes.

    Implementations never raise for transport or protocol problems; they
    return a ``Failed`` outcome instead.
    """

    async def send_message(self, text: str) -> AgentOutcome:
        """Send a free-text user message (POST /ask).

        Args:
            text: Non-empty user message

        Returns:
            Completed, ConfirmationRequired or Failed
        """
        ...

    async def send_decision(
        self,
        conversation_id: str,
        tool_id: str,
        decision: Decision,
        parameters: dict[str, Any] | None = None,
    ) -> AgentOutcome:
        """Send a human decision on a proposed tool call (POST /tool_confirm).

        Args:
            conversation_id: Correlation id of the active session
            tool_id: Id of the proposal being decided
            decision: APPROVED, REJECTED or MODIFIED
            parameters: Replacement parameters, required for MODIFIED

        Returns:
            Completed, ConfirmationRequired or Failed
        """
        ...
