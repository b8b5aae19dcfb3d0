# studio_agent/chat/timeline.py
"""Append-only message timeline.

Turns are kept in the order their exchanges were initiated. Earlier
turns never change after append. The last turn may be swapped for a
turn of the same episode, either resolving its placeholder or recording
a decision on its confirmation prompt.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator

from studio_agent.chat.models import Turn

logger = logging.getLogger(__name__)


class MessageTimeline:
    """Ordered log of conversation turns."""

    def __init__(self) -> None:
        self._turns: list[Turn] = []

    # ------------------------------------------------------------------ #
    #  Read-only view                                                     #
    # ------------------------------------------------------------------ #

    @property
    def turns(self) -> tuple[Turn, ...]:
        return tuple(self._turns)

    @property
    def last(self) -> Turn | None:
        return self._turns[-1] if self._turns else None

    def __len__(self) -> int:
        return len(self._turns)

    def __iter__(self) -> Iterator[Turn]:
        return iter(tuple(self._turns))

    def __getitem__(self, index: int) -> Turn:
        return self._turns[index]

    # ------------------------------------------------------------------ #
    #  Mutation (owned by the orchestrator)                               #
    # ------------------------------------------------------------------ #

    def append(self, turn: Turn) -> Turn:
        self._turns.append(turn)
        return turn

    def append_or_replace_last(self, turn: Turn) -> Turn:
        """Replace a same-episode placeholder in last position, else append."""
        last = self.last
        if last is not None and last.pending and last.episode == turn.episode:
            logger.debug("Resolving placeholder turn of episode %d", turn.episode)
            self._turns[-1] = turn
        else:
            self._turns.append(turn)
        return turn

    def replace_last(self, turn: Turn) -> Turn:
        """Swap the last turn for an updated copy from the same episode."""
        last = self.last
        if last is None:
            raise IndexError("Timeline is empty")
        if last.episode != turn.episode:
            raise ValueError(
                f"Cannot replace a turn of episode {last.episode} "
                f"with one of episode {turn.episode}"
            )
        self._turns[-1] = turn
        return turn

    def to_dicts(self) -> list[dict]:
        return [turn.to_dict() for turn in self._turns]
