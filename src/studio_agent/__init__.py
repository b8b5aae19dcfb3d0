"""studio-agent: human-in-the-loop tool confirmation client for agent services."""

from studio_agent.chat import (
    AgentOutcome,
    Completed,
    ConfirmationOrchestrator,
    ConfirmationRequired,
    ConversationSession,
    Failed,
    HttpAgentDispatcher,
    MessageTimeline,
    OrchestrationStateError,
    ToolCallProposal,
    ToolCallQueue,
    Turn,
)
from studio_agent.config import ClientSettings
from studio_agent.constants import APP_VERSION as __version__

__all__ = [
    "AgentOutcome",
    "ClientSettings",
    "Completed",
    "ConfirmationOrchestrator",
    "ConfirmationRequired",
    "ConversationSession",
    "Failed",
    "HttpAgentDispatcher",
    "MessageTimeline",
    "OrchestrationStateError",
    "ToolCallProposal",
    "ToolCallQueue",
    "Turn",
    "__version__",
]
