"""Protocol definitions for type safety."""

from studio_agent.protocols.agent_client import AgentDispatcher

__all__ = [
    "AgentDispatcher",
]
