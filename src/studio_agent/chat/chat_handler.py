# studio_agent/chat/chat_handler.py
"""Interactive chat loop wiring the terminal UI to the orchestrator."""

from __future__ import annotations

import logging
from typing import Any

from studio_agent.chat.exporters import export_timeline
from studio_agent.chat.orchestrator import (
    ConfirmationOrchestrator,
    OrchestrationStateError,
)
from studio_agent.chat.ui_manager import ChatUIManager
from studio_agent.constants import ExportFormat, OrchestrationState, TurnRole

logger = logging.getLogger(__name__)

HELP_TEXT = """Commands:
  /export md|json PATH  Write the conversation to a file
  /reset                Abandon the current approval chain
  /help                 Show this help
  /exit                 Quit"""


class ChatHandler:
    """Drives episodes from user input until the human quits."""

    def __init__(
        self,
        orchestrator: ConfirmationOrchestrator,
        ui: ChatUIManager,
        metadata: dict[str, Any] | None = None,
    ) -> None:
        self.orchestrator = orchestrator
        self.ui = ui
        self.metadata = metadata or {}
        self._cursor = 0

    async def run(self) -> None:
        self.ui.notice("Type a message, or /help for commands.")
        while True:
            try:
                text = await self.ui.get_user_input()
            except (KeyboardInterrupt, EOFError):
                break
            if not text:
                continue
            if text.startswith("/"):
                if not self.handle_command(text):
                    break
                continue
            await self.handle_message(text)

    async def handle_message(self, text: str) -> None:
        """Run one episode: send ``text`` and walk any confirmation chain."""
        await self.orchestrator.submit_message(text)
        self._render_new_turns()

        while self.orchestrator.state is OrchestrationState.AWAITING_HUMAN_DECISION:
            proposal = self.orchestrator.active_proposal
            if proposal is None:
                raise OrchestrationStateError(
                    "Awaiting a decision with no active proposal"
                )
            try:
                decision, parameters = self.ui.ask_decision(proposal)
            except KeyboardInterrupt:
                self.orchestrator.reset()
                self.ui.notice("Approval chain abandoned")
                break
            await self.orchestrator.resolve_active(decision, parameters)
            self._render_new_turns()

    def handle_command(self, text: str) -> bool:
        """Handle a slash command. Returns False when the loop should end."""
        parts = text.split()
        command, args = parts[0].lower(), parts[1:]

        if command in ("/exit", "/quit"):
            return False
        if command == "/help":
            self.ui.notice(HELP_TEXT)
        elif command == "/reset":
            self.orchestrator.reset()
            self._render_new_turns()
            self.ui.notice("Conversation state reset")
        elif command == "/export":
            self._export(args)
        else:
            self.ui.error(f"Unknown command: {command}")
        return True

    def _export(self, args: list[str]) -> None:
        if len(args) != 2:
            self.ui.error("Usage: /export md|json PATH")
            return
        try:
            fmt = ExportFormat(args[0].lower())
        except ValueError:
            self.ui.error(f"Unknown export format: {args[0]}")
            return
        try:
            path = export_timeline(
                self.orchestrator.timeline, args[1], fmt, self.metadata
            )
        except OSError as exc:
            logger.error(f"Export failed: {exc}")
            self.ui.error(f"Export failed: {exc}")
            return
        self.ui.success(f"Exported conversation to {path}")

    def _render_new_turns(self) -> None:
        turns = self.orchestrator.timeline.turns
        while self._cursor < len(turns) and not turns[self._cursor].pending:
            turn = turns[self._cursor]
            # The prompt already echoed what the user typed
            if turn.role is not TurnRole.USER:
                self.ui.render_turn(turn)
            self._cursor += 1
