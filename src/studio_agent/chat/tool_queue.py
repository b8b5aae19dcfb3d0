# studio_agent/chat/tool_queue.py
"""Tool-call queue for the current confirmation round.

Proposals are resolved one at a time, in the order the agent returned
them. At most one entry is ``PENDING``; the rest of a batch waits as
``QUEUED`` until the agent chains to it.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Any

from studio_agent.chat.models import ToolCallProposal
from studio_agent.constants import Decision

logger = logging.getLogger(__name__)


class ToolCallQueue:
    """Ordered proposals of one confirmation round with one active entry."""

    def __init__(self) -> None:
        self._proposals: list[ToolCallProposal] = []
        self._active_index: int | None = None

    # ------------------------------------------------------------------ #
    #  Read-only view                                                     #
    # ------------------------------------------------------------------ #

    @property
    def proposals(self) -> tuple[ToolCallProposal, ...]:
        return tuple(self._proposals)

    @property
    def active(self) -> ToolCallProposal | None:
        """The proposal currently awaiting a human decision, if any."""
        if self._active_index is None:
            return None
        proposal = self._proposals[self._active_index]
        return proposal if proposal.decision is Decision.PENDING else None

    @property
    def pending_count(self) -> int:
        return sum(1 for p in self._proposals if p.decision is Decision.PENDING)

    def __len__(self) -> int:
        return len(self._proposals)

    def __bool__(self) -> bool:
        return bool(self._proposals)

    # ------------------------------------------------------------------ #
    #  Mutation (owned by the orchestrator)                               #
    # ------------------------------------------------------------------ #

    def load(self, proposals: Sequence[ToolCallProposal]) -> ToolCallProposal:
        """Replace the batch; the first proposal becomes active."""
        if not proposals:
            raise ValueError("A confirmation round needs at least one proposal")
        self._proposals = [
            p.with_decision(Decision.PENDING if i == 0 else Decision.QUEUED)
            for i, p in enumerate(proposals)
        ]
        self._active_index = 0
        return self._proposals[0]

    def resolve_active(
        self, decision: Decision, parameters: dict[str, Any] | None = None
    ) -> ToolCallProposal:
        """Record the human decision on the active proposal."""
        if not decision.is_resolved:
            raise ValueError(f"{decision.value!r} is not a human decision")
        active = self.active
        if active is None or self._active_index is None:
            raise RuntimeError("No proposal is awaiting a decision")
        resolved = active.with_decision(decision, parameters)
        self._proposals[self._active_index] = resolved
        return resolved

    def advance_to(self, proposal: ToolCallProposal) -> ToolCallProposal:
        """Make the agent's next proposal active.

        A proposal already waiting in the batch is activated in place,
        taking the agent's latest parameters. Anything else starts a new
        single-entry round.
        """
        for index, queued in enumerate(self._proposals):
            if queued.id == proposal.id and queued.decision is Decision.QUEUED:
                activated = proposal.with_decision(Decision.PENDING)
                self._proposals[index] = activated
                self._active_index = index
                return activated
        logger.debug("Proposal %s not in current batch; starting new round", proposal.id)
        return self.load([proposal])

    def clear(self) -> None:
        self._proposals = []
        self._active_index = None
