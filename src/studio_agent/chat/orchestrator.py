# studio_agent/chat/orchestrator.py
"""
Tool-confirmation orchestration.

Drives one conversation through the handshake with the agent service:

    send message -> (completed | confirmation required)
      -> [human decision -> send decision -> (completed | next tool)]*
      -> completed

Only one request is in flight at a time. The session, queue and timeline
are owned here; the presentation layer reads them and calls back with
user events.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable, Coroutine
from typing import TYPE_CHECKING, Any

from studio_agent.chat.models import ConversationSession, ToolCallProposal, Turn
from studio_agent.chat.response_models import (
    AgentOutcome,
    Completed,
    ConfirmationRequired,
    Failed,
)
from studio_agent.chat.timeline import MessageTimeline
from studio_agent.chat.tool_queue import ToolCallQueue
from studio_agent.config.defaults import (
    CANCELLED_TEXT,
    CHAINED_CONFIRMATION_PROMPT_TEXT,
    CONFIRM_FAILED_TEXT,
    CONFIRMATION_PROMPT_TEXT,
    DEFAULT_STRICT_CORRELATION,
    PLACEHOLDER_TEXT,
    SEND_FAILED_TEXT,
)
from studio_agent.constants import (
    Decision,
    FailureKind,
    OrchestrationState,
    TurnRole,
)

if TYPE_CHECKING:
    from studio_agent.config.models import ClientSettings
    from studio_agent.protocols import AgentDispatcher

logger = logging.getLogger(__name__)

StateListener = Callable[["ConfirmationOrchestrator"], None]


class OrchestrationStateError(RuntimeError):
    """An event arrived in a state that does not accept it."""


class ConfirmationOrchestrator:
    """State machine for approving agent tool calls one at a time."""

    def __init__(
        self,
        dispatcher: AgentDispatcher,
        strict_correlation: bool = DEFAULT_STRICT_CORRELATION,
        response_timeout: float | None = None,
    ) -> None:
        self._dispatcher = dispatcher
        self.strict_correlation = strict_correlation
        self.response_timeout = response_timeout

        self._timeline = MessageTimeline()
        self._queue = ToolCallQueue()
        self._session: ConversationSession | None = None
        self._state = OrchestrationState.IDLE

        self._episode = 0
        # Bumped on reset so responses to abandoned requests are dropped
        self._generation = 0
        self._listeners: list[StateListener] = []
        self._in_flight: asyncio.Task[AgentOutcome] | None = None

    @classmethod
    def from_settings(
        cls, dispatcher: AgentDispatcher, settings: ClientSettings
    ) -> ConfirmationOrchestrator:
        return cls(
            dispatcher,
            strict_correlation=settings.strict_correlation,
            response_timeout=settings.response_timeout,
        )

    # ------------------------------------------------------------------ #
    #  Read-only view                                                     #
    # ------------------------------------------------------------------ #

    @property
    def state(self) -> OrchestrationState:
        return self._state

    @property
    def timeline(self) -> MessageTimeline:
        return self._timeline

    @property
    def queue(self) -> ToolCallQueue:
        return self._queue

    @property
    def session(self) -> ConversationSession | None:
        """A copy of the active session, or None between approval chains."""
        return self._session.model_copy() if self._session else None

    @property
    def active_proposal(self) -> ToolCallProposal | None:
        return self._queue.active

    @property
    def is_busy(self) -> bool:
        return self._state in (
            OrchestrationState.AWAITING_AGENT_RESPONSE,
            OrchestrationState.AWAITING_DECISION_RESPONSE,
        )

    def add_listener(self, listener: StateListener) -> None:
        """Call ``listener(self)`` after every state change."""
        self._listeners.append(listener)

    def remove_listener(self, listener: StateListener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    # ------------------------------------------------------------------ #
    #  User events                                                        #
    # ------------------------------------------------------------------ #

    async def submit_message(self, text: str) -> AgentOutcome | None:
        """Start an episode with a free-text user message.

        Returns:
            The outcome that was applied, or None if the episode was
            abandoned (see :meth:`reset`) before the response arrived.

        Raises:
            ValueError: If ``text`` is empty
            OrchestrationStateError: If an episode is already in progress
        """
        if not text or not text.strip():
            raise ValueError("Message text must not be empty")
        self._require_state(OrchestrationState.IDLE, "submit a message")

        self._episode += 1
        episode = self._episode
        self._timeline.append(Turn(role=TurnRole.USER, text=text, episode=episode))
        self._timeline.append(self._placeholder(episode))
        self._set_state(OrchestrationState.AWAITING_AGENT_RESPONSE)

        logger.info(f"Episode {episode}: sending message")
        outcome = await self._dispatch(
            self._dispatcher.send_message(text), SEND_FAILED_TEXT
        )
        return self._apply_if_current(outcome, episode, SEND_FAILED_TEXT, chained=False)

    async def resolve_active(
        self, decision: Decision, parameters: dict[str, Any] | None = None
    ) -> AgentOutcome | None:
        """Apply the human decision on the active proposal and forward it.

        Rejections are forwarded exactly like approvals; the agent decides
        what follows.

        Raises:
            ValueError: For a non-decision, or parameters that do not
                match the decision (required for MODIFIED only)
            OrchestrationStateError: If no proposal awaits a decision
        """
        if not decision.is_resolved:
            raise ValueError(f"{decision.value!r} is not a human decision")
        if decision is Decision.MODIFIED and parameters is None:
            raise ValueError("A modify decision needs replacement parameters")
        if decision is not Decision.MODIFIED and parameters is not None:
            raise ValueError("Parameters are only sent with a modify decision")
        self._require_state(
            OrchestrationState.AWAITING_HUMAN_DECISION, "resolve a tool call"
        )
        if self._session is None:
            raise OrchestrationStateError("No conversation session to resolve against")

        episode = self._episode
        proposal = self._queue.resolve_active(decision, parameters)
        self._session.active_proposal = None
        self._record_decision(episode)
        self._timeline.append(self._placeholder(episode))
        self._set_state(OrchestrationState.AWAITING_DECISION_RESPONSE)

        logger.info(
            f"Episode {episode}: {decision.value} {proposal.tool_name} ({proposal.id})"
        )
        outcome = await self._dispatch(
            self._dispatcher.send_decision(
                self._session.conversation_id,
                proposal.id,
                decision,
                proposal.parameters if decision is Decision.MODIFIED else None,
            ),
            CONFIRM_FAILED_TEXT,
        )
        return self._apply_if_current(outcome, episode, CONFIRM_FAILED_TEXT, chained=True)

    async def approve(self) -> AgentOutcome | None:
        return await self.resolve_active(Decision.APPROVED)

    async def reject(self) -> AgentOutcome | None:
        return await self.resolve_active(Decision.REJECTED)

    async def modify(self, parameters: dict[str, Any]) -> AgentOutcome | None:
        return await self.resolve_active(Decision.MODIFIED, parameters)

    def reset(self) -> None:
        """Abandon the current episode and return to idle.

        A request still in flight is cancelled; the next dispatch waits
        for it to settle so at most one request is ever outstanding.
        """
        if self._state is OrchestrationState.IDLE:
            return
        logger.info(f"Episode {self._episode}: abandoned in state {self._state.value}")
        self._generation += 1
        if self._in_flight is not None and not self._in_flight.done():
            self._in_flight.cancel()
        last = self._timeline.last
        if last is not None and last.pending:
            self._timeline.append_or_replace_last(
                Turn(role=TurnRole.ASSISTANT, text=CANCELLED_TEXT, episode=self._episode)
            )
        self._end_episode()

    # ------------------------------------------------------------------ #
    #  Internals                                                          #
    # ------------------------------------------------------------------ #

    async def _dispatch(
        self, request: Coroutine[Any, Any, AgentOutcome], failure_text: str
    ) -> AgentOutcome:
        generation = self._generation
        stale = self._in_flight
        if stale is not None and not stale.done():
            logger.debug("Waiting for an abandoned request to settle")
            try:
                await asyncio.wait({stale})
            except BaseException:
                request.close()
                raise
        if generation != self._generation:
            request.close()
            return self._abandoned()

        task = asyncio.ensure_future(request)
        self._in_flight = task
        try:
            if self.response_timeout is None:
                return await task
            return await asyncio.wait_for(task, self.response_timeout)
        except asyncio.TimeoutError:
            return Failed(
                cause=FailureKind.NETWORK_ERROR,
                detail=f"no response within {self.response_timeout}s",
            )
        except asyncio.CancelledError:
            if task.cancelled() and generation != self._generation:
                # Cancelled by reset(), not by our caller
                return self._abandoned()
            self._abort(generation, failure_text)
            raise
        except BaseException:
            self._abort(generation, failure_text)
            raise
        finally:
            if self._in_flight is task:
                self._in_flight = None

    def _abort(self, generation: int, failure_text: str) -> None:
        """Leave the machine usable before an exception propagates."""
        if generation == self._generation and self._state is not OrchestrationState.IDLE:
            self._timeline.append_or_replace_last(self._failure_turn(failure_text))
            self._end_episode()

    @staticmethod
    def _abandoned() -> Failed:
        return Failed(cause=FailureKind.NETWORK_ERROR, detail="request abandoned by reset")

    def _apply_if_current(
        self,
        outcome: AgentOutcome,
        episode: int,
        failure_text: str,
        chained: bool,
    ) -> AgentOutcome | None:
        if episode != self._episode or not self.is_busy:
            logger.info(f"Discarding {outcome.kind} response for abandoned episode {episode}")
            return None
        return self._apply(outcome, failure_text, chained)

    def _apply(
        self, outcome: AgentOutcome, failure_text: str, chained: bool
    ) -> AgentOutcome:
        """Apply ``outcome`` and return it as it was acted on."""
        episode = self._episode

        if isinstance(outcome, ConfirmationRequired) and chained:
            if self._session is None:
                raise OrchestrationStateError("Chained confirmation without a session")
            incoming = outcome.conversation_id
            if incoming and incoming != self._session.conversation_id:
                if self.strict_correlation:
                    outcome = Failed(
                        cause=FailureKind.PROTOCOL_ERROR,
                        detail=(
                            f"conversation id {incoming!r} does not match "
                            f"session {self._session.conversation_id!r}"
                        ),
                    )
                else:
                    logger.warning(
                        f"Chained confirmation names conversation {incoming!r}; "
                        f"keeping {self._session.conversation_id!r}"
                    )
        elif isinstance(outcome, ConfirmationRequired) and not outcome.conversation_id:
            outcome = Failed(
                cause=FailureKind.PROTOCOL_ERROR,
                detail="confirmation requested without a conversation id",
            )

        if not isinstance(outcome, Failed):
            for message in outcome.relayed:
                self._timeline.append_or_replace_last(
                    Turn(
                        role=TurnRole.ASSISTANT,
                        text=message.content or "",
                        tool_name=message.name if message.is_tool_result else None,
                        episode=episode,
                    )
                )

        if isinstance(outcome, Completed):
            if not outcome.from_relayed:
                self._timeline.append_or_replace_last(
                    Turn(role=TurnRole.ASSISTANT, text=outcome.final_text, episode=episode)
                )
            logger.info(f"Episode {episode}: completed")
            self._end_episode()
        elif isinstance(outcome, ConfirmationRequired):
            self._enter_confirmation(outcome, chained)
        elif isinstance(outcome, Failed):
            logger.warning(
                f"Episode {episode}: {outcome.cause.value} - {outcome.detail}"
            )
            self._timeline.append_or_replace_last(self._failure_turn(failure_text))
            self._end_episode()
        else:
            raise TypeError(f"Unhandled outcome: {outcome!r}")
        return outcome

    def _enter_confirmation(self, outcome: ConfirmationRequired, chained: bool) -> None:
        if chained and self._session is not None:
            if len(outcome.proposals) == 1:
                active = self._queue.advance_to(outcome.proposals[0])
            else:
                active = self._queue.load(outcome.proposals)
            default_prompt = CHAINED_CONFIRMATION_PROMPT_TEXT
        else:
            if not outcome.conversation_id:
                raise OrchestrationStateError(
                    "Cannot start a session without a conversation id"
                )
            self._session = ConversationSession(conversation_id=outcome.conversation_id)
            active = self._queue.load(outcome.proposals)
            default_prompt = CONFIRMATION_PROMPT_TEXT

        self._session.active_proposal = active
        self._timeline.append_or_replace_last(
            Turn(
                role=TurnRole.ASSISTANT,
                text=outcome.prompt or default_prompt,
                proposed_tools=self._queue.proposals,
                conversation_id=self._session.conversation_id,
                episode=self._episode,
            )
        )
        logger.info(
            f"Episode {self._episode}: awaiting decision on "
            f"{active.tool_name} ({active.id})"
        )
        self._set_state(OrchestrationState.AWAITING_HUMAN_DECISION)

    def _record_decision(self, episode: int) -> None:
        """Rewrite the confirmation prompt so it shows the decided proposals.

        The prompt is still the last turn here, so this stays within the
        only-the-last-turn-may-change rule of the timeline.
        """
        prompt = self._timeline.last
        if prompt is None or not prompt.is_confirmation_prompt or prompt.episode != episode:
            logger.debug("No confirmation prompt to record the decision on")
            return
        self._timeline.replace_last(
            prompt.model_copy(update={"proposed_tools": self._queue.proposals})
        )

    def _end_episode(self) -> None:
        self._session = None
        self._queue.clear()
        self._set_state(OrchestrationState.IDLE)

    def _placeholder(self, episode: int) -> Turn:
        return Turn(
            role=TurnRole.ASSISTANT,
            text=PLACEHOLDER_TEXT,
            pending=True,
            episode=episode,
        )

    def _failure_turn(self, text: str) -> Turn:
        return Turn(role=TurnRole.ASSISTANT, text=text, episode=self._episode)

    def _require_state(self, expected: OrchestrationState, action: str) -> None:
        if self._state is not expected:
            raise OrchestrationStateError(
                f"Cannot {action} while {self._state.value}"
            )

    def _set_state(self, state: OrchestrationState) -> None:
        self._state = state
        for listener in list(self._listeners):
            listener(self)
