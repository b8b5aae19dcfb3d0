# studio_agent/chat/dispatcher.py
"""
HTTP request dispatcher for the agent service.

Sends exactly two kinds of requests (new message, confirmation decision)
and classifies every response into an ``AgentOutcome``. No retries are
performed; transport and protocol problems come back as ``Failed``.
"""

from __future__ import annotations

import logging
from typing import Any

import httpx

from studio_agent.chat.response_models import AgentOutcome, Failed, parse_reply
from studio_agent.config.defaults import ASK_COMPLETED_TEXT, CONFIRM_COMPLETED_TEXT
from studio_agent.config.models import ClientSettings
from studio_agent.constants import (
    APP_NAME,
    APP_VERSION,
    ASK_ENDPOINT,
    TOOL_CONFIRM_ENDPOINT,
    ConfirmAction,
    Decision,
    FailureKind,
)

logger = logging.getLogger(__name__)

# How much of an error body to keep in failure details
_ERROR_BODY_PREVIEW = 200


class HttpAgentDispatcher:
    """Talks to the agent service over HTTP using ``httpx``."""

    def __init__(
        self,
        settings: ClientSettings | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.settings = settings or ClientSettings()

        headers = {
            "Content-Type": "application/json",
            "User-Agent": f"{APP_NAME}/{APP_VERSION}",
        }
        if self.settings.auth_token:
            headers["Authorization"] = f"Bearer {self.settings.auth_token}"

        self._client = httpx.AsyncClient(
            base_url=self.settings.api_url,
            headers=headers,
            timeout=httpx.Timeout(
                self.settings.request_timeout,
                connect=self.settings.connect_timeout,
            ),
            transport=transport,
        )

    async def __aenter__(self) -> HttpAgentDispatcher:
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    # ------------------------------------------------------------------ #
    #  Public API                                                         #
    # ------------------------------------------------------------------ #

    async def send_message(self, text: str) -> AgentOutcome:
        """POST the user's message to /ask."""
        if not text or not text.strip():
            raise ValueError("Message text must not be empty")
        return await self._post(
            ASK_ENDPOINT,
            {"query": text},
            completed_fallback=ASK_COMPLETED_TEXT,
            require_conversation_id=True,
        )

    async def send_decision(
        self,
        conversation_id: str,
        tool_id: str,
        decision: Decision,
        parameters: dict[str, Any] | None = None,
    ) -> AgentOutcome:
        """POST a human decision to /tool_confirm."""
        action = ConfirmAction.from_decision(decision)
        if action is ConfirmAction.MODIFY and parameters is None:
            raise ValueError("A modify decision needs replacement parameters")

        body: dict[str, Any] = {
            "conversation_id": conversation_id,
            "tool_id": tool_id,
            "action": action.value,
        }
        if action is ConfirmAction.MODIFY:
            body["parameters"] = parameters
        # The chained reply may omit the id; the session already holds it
        return await self._post(
            TOOL_CONFIRM_ENDPOINT,
            body,
            completed_fallback=CONFIRM_COMPLETED_TEXT,
            require_conversation_id=False,
        )

    # ------------------------------------------------------------------ #
    #  Internals                                                          #
    # ------------------------------------------------------------------ #

    async def _post(
        self,
        endpoint: str,
        body: dict[str, Any],
        completed_fallback: str,
        require_conversation_id: bool,
    ) -> AgentOutcome:
        logger.debug(f"POST {endpoint}")
        try:
            response = await self._client.post(endpoint, json=body)
        except httpx.HTTPError as exc:
            logger.warning(f"Request to {endpoint} failed: {exc!r}")
            return Failed(cause=FailureKind.NETWORK_ERROR, detail=repr(exc))

        if not response.is_success:
            preview = response.text[:_ERROR_BODY_PREVIEW]
            logger.warning(
                f"{endpoint} returned {response.status_code} "
                f"{response.reason_phrase}: {preview}"
            )
            return Failed(
                cause=FailureKind.SERVER_ERROR,
                detail=f"{response.status_code} {response.reason_phrase}: {preview}",
            )

        try:
            payload = response.json()
        except ValueError as exc:
            logger.warning(f"{endpoint} returned a body that is not JSON: {exc}")
            return Failed(cause=FailureKind.PROTOCOL_ERROR, detail=str(exc))

        outcome = parse_reply(payload, completed_fallback, require_conversation_id)
        if isinstance(outcome, Failed):
            logger.warning(f"Unexpected response shape from {endpoint}: {outcome.detail}")
        else:
            logger.debug(f"{endpoint} -> {outcome.kind}")
        return outcome
