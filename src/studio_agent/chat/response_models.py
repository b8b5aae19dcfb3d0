"""Clean Pydantic models for agent service responses - no dictionary goop!

The service answers /ask and /tool_confirm with differently shaped JSON
depending on ``status``. ``AgentReply`` accepts every shape seen on the
wire; ``AgentReply.to_outcome`` folds it into the ``AgentOutcome`` tagged
variant the orchestrator works with.
"""

from __future__ import annotations

from typing import Annotated, Any, Literal, Union

from pydantic import AliasChoices, BaseModel, Field, ValidationError

from studio_agent.chat.models import ToolCallProposal
from studio_agent.config.defaults import CANCELLED_TEXT
from studio_agent.constants import FailureKind, ResponseStatus

__all__ = [
    "AgentOutcome",
    "AgentReply",
    "Completed",
    "ConfirmationRequired",
    "Failed",
    "RelayedMessage",
    "ToolCallPayload",
    "parse_reply",
]


# ================================================================
# Wire Models
# ================================================================


class ToolCallPayload(BaseModel):
    """A tool call as the agent service serializes it."""

    id: str = Field(min_length=1)
    tool_name: str = Field(validation_alias=AliasChoices("tool_name", "name"))
    parameters: dict[str, Any] = Field(
        default_factory=dict,
        validation_alias=AliasChoices("parameters", "args", "arguments"),
    )

    def to_proposal(self) -> ToolCallProposal:
        return ToolCallProposal(
            id=self.id, tool_name=self.tool_name, parameters=self.parameters
        )


class RelayedMessage(BaseModel):
    """Intermediate agent output returned alongside a status."""

    type: str = "ai"
    content: str | None = ""
    name: str | None = None

    model_config = {"frozen": True}

    @property
    def is_tool_result(self) -> bool:
        return self.type == "tool"

    @property
    def is_agent_output(self) -> bool:
        return self.type in ("ai", "tool")


class AgentReply(BaseModel):
    """Union of every field either endpoint may return."""

    status: ResponseStatus
    response: str | None = None
    final_response: str | None = None
    conversation_id: str | None = Field(
        default=None,
        validation_alias=AliasChoices("conversation_id", "session_id"),
    )
    tool_calls: list[ToolCallPayload] = Field(default_factory=list)
    next_tool: ToolCallPayload | None = None
    interrupt_message: str | None = None
    messages: list[RelayedMessage] = Field(default_factory=list)

    def to_outcome(
        self, completed_fallback: str, require_conversation_id: bool = True
    ) -> AgentOutcome:
        """Fold the reply into an outcome.

        Args:
            completed_fallback: Final text when the reply carries none
            require_conversation_id: Whether a confirmation must name its
                conversation (true for /ask, where the session starts)

        Returns:
            Completed, ConfirmationRequired or Failed(PROTOCOL_ERROR)
        """
        relayed = tuple(m for m in self.messages if m.is_agent_output and m.content)

        if self.status is ResponseStatus.CANCELLED:
            return Completed(final_text=CANCELLED_TEXT, cancelled=True, relayed=relayed)

        if self.status.is_completed:
            text = self.final_response or self.response
            # Relayed messages already carry the answer; the text is only
            # shown when nothing was relayed
            return Completed(
                final_text=text or completed_fallback,
                relayed=relayed,
                from_relayed=bool(relayed),
            )

        payloads = list(self.tool_calls)
        if self.next_tool is not None:
            payloads.insert(0, self.next_tool)
        if not payloads:
            return Failed(
                cause=FailureKind.PROTOCOL_ERROR,
                detail="confirmation requested without any tool calls",
            )
        ids = [p.id for p in payloads]
        if len(set(ids)) != len(ids):
            return Failed(
                cause=FailureKind.PROTOCOL_ERROR,
                detail=f"duplicate tool call ids in batch: {ids}",
            )
        if require_conversation_id and not self.conversation_id:
            return Failed(
                cause=FailureKind.PROTOCOL_ERROR,
                detail="confirmation requested without a conversation id",
            )
        return ConfirmationRequired(
            conversation_id=self.conversation_id or None,
            proposals=tuple(p.to_proposal() for p in payloads),
            prompt=self.interrupt_message or None,
            relayed=relayed,
        )


# ================================================================
# Outcome Variant
# ================================================================


class Completed(BaseModel):
    """The agent finished the episode."""

    kind: Literal["completed"] = "completed"
    final_text: str
    cancelled: bool = False
    relayed: tuple[RelayedMessage, ...] = ()
    # True when relayed messages carry the answer and final_text is not shown
    from_relayed: bool = False

    model_config = {"frozen": True}


class ConfirmationRequired(BaseModel):
    """The agent wants a human decision before running a tool."""

    kind: Literal["confirmation_required"] = "confirmation_required"
    conversation_id: str | None = None
    proposals: tuple[ToolCallProposal, ...] = Field(min_length=1)
    prompt: str | None = None
    relayed: tuple[RelayedMessage, ...] = ()

    model_config = {"frozen": True}


class Failed(BaseModel):
    """The exchange did not produce a usable response."""

    kind: Literal["failed"] = "failed"
    cause: FailureKind
    detail: str = ""

    model_config = {"frozen": True}


AgentOutcome = Annotated[
    Union[Completed, ConfirmationRequired, Failed], Field(discriminator="kind")
]


def parse_reply(
    payload: Any, completed_fallback: str, require_conversation_id: bool = True
) -> AgentOutcome:
    """Validate a decoded JSON body and convert it to an outcome.

    Anything that does not match a known shape becomes
    ``Failed(PROTOCOL_ERROR)``.
    """
    if not isinstance(payload, dict):
        return Failed(
            cause=FailureKind.PROTOCOL_ERROR,
            detail=f"expected a JSON object, got {type(payload).__name__}",
        )
    try:
        reply = AgentReply.model_validate(payload)
    except ValidationError as exc:
        return Failed(cause=FailureKind.PROTOCOL_ERROR, detail=str(exc))
    return reply.to_outcome(completed_fallback, require_conversation_id)
