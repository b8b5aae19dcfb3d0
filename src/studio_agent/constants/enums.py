"""Protocol enums - no more magic strings!"""

from enum import Enum


class TurnRole(str, Enum):
    """Who authored a timeline turn."""

    USER = "user"
    ASSISTANT = "assistant"


class Decision(str, Enum):
    """Human decision recorded on a tool-call proposal.

    ``QUEUED`` marks proposals of a batch that are waiting behind the
    active one; only the active proposal is ever ``PENDING``.
    """

    QUEUED = "queued"
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"
    MODIFIED = "modified"

    @property
    def is_resolved(self) -> bool:
        return self in (Decision.APPROVED, Decision.REJECTED, Decision.MODIFIED)


class ConfirmAction(str, Enum):
    """Values of the ``action`` field sent to /tool_confirm."""

    YES = "yes"
    NO = "no"
    MODIFY = "modify"

    @classmethod
    def from_decision(cls, decision: Decision) -> "ConfirmAction":
        try:
            return _DECISION_ACTIONS[decision]
        except KeyError:
            raise ValueError(f"Decision {decision.value!r} cannot be sent to the agent")


_DECISION_ACTIONS = {
    Decision.APPROVED: ConfirmAction.YES,
    Decision.REJECTED: ConfirmAction.NO,
    Decision.MODIFIED: ConfirmAction.MODIFY,
}


class ResponseStatus(str, Enum):
    """``status`` values returned by the agent service."""

    COMPLETED = "completed"
    COMPLETE = "complete"
    CONFIRMATION_REQUIRED = "confirmation_required"
    AWAITING_CONFIRMATION = "awaiting_confirmation"
    CANCELLED = "cancelled"

    @property
    def is_completed(self) -> bool:
        return self in (ResponseStatus.COMPLETED, ResponseStatus.COMPLETE)

    @property
    def needs_confirmation(self) -> bool:
        return self in (
            ResponseStatus.CONFIRMATION_REQUIRED,
            ResponseStatus.AWAITING_CONFIRMATION,
        )


class FailureKind(str, Enum):
    """Why a dispatch did not produce a usable agent response."""

    NETWORK_ERROR = "network_error"
    SERVER_ERROR = "server_error"
    PROTOCOL_ERROR = "protocol_error"


class OrchestrationState(str, Enum):
    """States of the tool-confirmation state machine."""

    IDLE = "idle"
    AWAITING_AGENT_RESPONSE = "awaiting_agent_response"
    AWAITING_HUMAN_DECISION = "awaiting_human_decision"
    AWAITING_DECISION_RESPONSE = "awaiting_decision_response"

    @property
    def has_session(self) -> bool:
        return self in (
            OrchestrationState.AWAITING_HUMAN_DECISION,
            OrchestrationState.AWAITING_DECISION_RESPONSE,
        )


class ExportFormat(str, Enum):
    """Timeline export formats."""

    MARKDOWN = "md"
    JSON = "json"
