# studio_agent/chat/ui_manager.py
"""
Terminal presentation for the agent chat.

- User input with prompt_toolkit
- Turn display and tool-call decisions with chuk-term
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from chuk_term.ui import output, prompts
from prompt_toolkit import PromptSession
from prompt_toolkit.history import FileHistory, InMemoryHistory

from studio_agent.chat.models import ToolCallProposal, Turn
from studio_agent.constants import Decision, TurnRole

logger = logging.getLogger(__name__)

HISTORY_FILE = "~/.studio-agent/history"


class ChatUIManager:
    """Reads user input and renders timeline turns."""

    def __init__(self, history_file: str | None = HISTORY_FILE) -> None:
        if history_file:
            path = Path(history_file).expanduser()
            path.parent.mkdir(parents=True, exist_ok=True)
            history = FileHistory(str(path))
        else:
            history = InMemoryHistory()
        self.session: PromptSession[str] = PromptSession(
            message="> ", history=history
        )

    # ─── Input ───────────────────────────────────────────────────────────

    async def get_user_input(self) -> str:
        """Get user input using prompt_toolkit."""
        msg = await self.session.prompt_async()
        return msg.strip()

    # ─── Turn Display ────────────────────────────────────────────────────

    def render_turn(self, turn: Turn) -> None:
        if turn.role is TurnRole.USER:
            output.user_message(turn.text or "[No Message]")
            return
        if turn.tool_name:
            output.info(f"{turn.tool_name}: {turn.text}")
            return

        output.assistant_message(turn.text or "[No Response]")
        for proposal in turn.proposed_tools:
            self.print_proposal(proposal)

    def print_proposal(self, proposal: ToolCallProposal) -> None:
        output.tool_call(proposal.tool_name, proposal.parameters)
        if proposal.decision is Decision.QUEUED:
            output.hint("queued behind the current tool call")

    # ─── Tool Decision ───────────────────────────────────────────────────

    def ask_decision(
        self, proposal: ToolCallProposal
    ) -> tuple[Decision, dict[str, Any] | None]:
        """Ask the human what to do with ``proposal``.

        Returns:
            The decision and, for MODIFIED, the replacement parameters
        """
        output.print(f"Run {proposal.tool_name}?")
        output.hint("y=yes, n=no, m=modify parameters")
        while True:
            response = prompts.ask("", default="y").strip().lower()
            if response in ("y", "yes", ""):
                return Decision.APPROVED, None
            if response in ("n", "no"):
                return Decision.REJECTED, None
            if response in ("m", "modify"):
                parameters = self._ask_parameters(proposal)
                if parameters is not None:
                    return Decision.MODIFIED, parameters
                continue
            output.warning(f"Unrecognized answer: {response!r}")

    def _ask_parameters(self, proposal: ToolCallProposal) -> dict[str, Any] | None:
        current = json.dumps(proposal.parameters)
        raw = prompts.ask("Parameters (JSON)", default=current)
        try:
            parameters = json.loads(raw)
        except json.JSONDecodeError as exc:
            output.error(f"Invalid JSON: {exc}")
            return None
        if not isinstance(parameters, dict):
            output.error("Parameters must be a JSON object")
            return None
        return parameters

    # ─── Notices ─────────────────────────────────────────────────────────

    def notice(self, message: str) -> None:
        output.info(message)

    def success(self, message: str) -> None:
        output.success(message)

    def error(self, message: str) -> None:
        output.error(message)
