"""Chat-specific Pydantic models for the confirmation protocol."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

from pydantic import BaseModel, Field

from studio_agent.constants import Decision, TurnRole


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class ToolCallProposal(BaseModel):
    """A side-effecting action proposed by the agent, awaiting approval.

    Immutable: recording a decision produces a new instance via
    :meth:`with_decision`.
    """

    id: str = Field(min_length=1, description="Identifier, unique within its batch")
    tool_name: str = Field(description="Name of the proposed action")
    parameters: dict[str, Any] = Field(
        default_factory=dict, description="Tool arguments (schema opaque)"
    )
    decision: Decision = Field(
        default=Decision.PENDING, description="Human decision on this proposal"
    )

    model_config = {"frozen": True}

    def with_decision(
        self, decision: Decision, parameters: dict[str, Any] | None = None
    ) -> ToolCallProposal:
        """Return a copy carrying ``decision`` (and replacement parameters)."""
        update: dict[str, Any] = {"decision": decision}
        if parameters is not None:
            update["parameters"] = dict(parameters)
        return self.model_copy(update=update)

    def to_dict(self) -> dict[str, Any]:
        return self.model_dump(mode="json")


class Turn(BaseModel):
    """One entry in the message timeline.

    ``pending`` marks the placeholder assistant turn shown while a response
    is outstanding; only such a turn, in last position, is ever replaced.
    ``conversation_id`` is a lookup key for the session the turn belongs
    to, not ownership of it.
    """

    role: TurnRole
    text: str = ""
    created_at: datetime = Field(default_factory=_utcnow)
    proposed_tools: tuple[ToolCallProposal, ...] = ()
    conversation_id: str | None = None
    tool_name: str | None = Field(
        default=None, description="Set for relayed tool-result messages"
    )
    pending: bool = False
    episode: int = 0

    model_config = {"frozen": True}

    @property
    def is_confirmation_prompt(self) -> bool:
        return bool(self.proposed_tools)

    def to_dict(self) -> dict[str, Any]:
        return self.model_dump(mode="json", exclude_none=True)


class ConversationSession(BaseModel):
    """Correlation context of an in-progress approval chain."""

    conversation_id: str = Field(min_length=1)
    active_proposal: ToolCallProposal | None = None

    model_config = {"frozen": False}
