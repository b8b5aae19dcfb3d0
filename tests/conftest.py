"""Common test fixtures and utilities for studio-agent tests."""

from __future__ import annotations

import asyncio
from typing import Any

import pytest

from studio_agent.chat.orchestrator import ConfirmationOrchestrator
from studio_agent.chat.response_models import AgentOutcome, parse_reply
from studio_agent.config.defaults import ASK_COMPLETED_TEXT, CONFIRM_COMPLETED_TEXT
from studio_agent.constants import Decision


class ScriptedDispatcher:
    """Dispatcher double that replays scripted outcomes in order.

    A script entry may be an outcome, a decoded JSON reply body, an
    exception to raise, or an ``asyncio.Future`` that the test resolves
    later to hold the request in flight. Reply bodies are converted the
    way the HTTP dispatcher converts them for the endpoint that was hit.
    """

    def __init__(self, *script: Any) -> None:
        self.script = list(script)
        self.calls: list[tuple] = []
        self.in_flight = 0
        self.max_in_flight = 0

    async def send_message(self, text: str) -> AgentOutcome:
        self.calls.append(("message", text))
        return await self._next(ASK_COMPLETED_TEXT, require_conversation_id=True)

    async def send_decision(
        self,
        conversation_id: str,
        tool_id: str,
        decision: Decision,
        parameters: dict[str, Any] | None = None,
    ) -> AgentOutcome:
        self.calls.append(("decision", conversation_id, tool_id, decision, parameters))
        return await self._next(CONFIRM_COMPLETED_TEXT, require_conversation_id=False)

    async def _next(
        self, completed_fallback: str, require_conversation_id: bool
    ) -> AgentOutcome:
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            item = self.script.pop(0)
            if isinstance(item, asyncio.Future):
                item = await item
            if isinstance(item, BaseException):
                raise item
            if isinstance(item, dict):
                return parse_reply(item, completed_fallback, require_conversation_id)
            return item
        finally:
            self.in_flight -= 1


@pytest.fixture
def make_orchestrator():
    """Build an orchestrator over a scripted dispatcher."""

    def _make(*script: Any, **kwargs: Any):
        dispatcher = ScriptedDispatcher(*script)
        return ConfirmationOrchestrator(dispatcher, **kwargs), dispatcher

    return _make
