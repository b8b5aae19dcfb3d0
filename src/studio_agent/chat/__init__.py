# studio_agent/chat/__init__.py
"""Agent chat: timeline, tool-call queue, dispatcher and orchestration."""

from studio_agent.chat.dispatcher import HttpAgentDispatcher
from studio_agent.chat.models import ConversationSession, ToolCallProposal, Turn
from studio_agent.chat.orchestrator import (
    ConfirmationOrchestrator,
    OrchestrationStateError,
)
from studio_agent.chat.response_models import (
    AgentOutcome,
    Completed,
    ConfirmationRequired,
    Failed,
)
from studio_agent.chat.timeline import MessageTimeline
from studio_agent.chat.tool_queue import ToolCallQueue

__all__ = [
    "AgentOutcome",
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
]
