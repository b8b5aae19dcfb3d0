# tests/chat/test_timeline.py
"""Tests for the append-only message timeline."""

import pytest

from studio_agent.chat.models import Turn
from studio_agent.chat.timeline import MessageTimeline
from studio_agent.constants import TurnRole


def _assistant(text: str, pending: bool = False, episode: int = 1) -> Turn:
    return Turn(role=TurnRole.ASSISTANT, text=text, pending=pending, episode=episode)


class TestAppend:
    def test_empty(self):
        timeline = MessageTimeline()
        assert len(timeline) == 0
        assert timeline.last is None
        assert timeline.turns == ()

    def test_order_preserved(self):
        timeline = MessageTimeline()
        first = timeline.append(Turn(role=TurnRole.USER, text="one"))
        second = timeline.append(_assistant("two"))

        assert timeline.turns == (first, second)
        assert timeline[0] is first
        assert timeline.last is second
        assert [t.text for t in timeline] == ["one", "two"]

    def test_turns_is_a_snapshot(self):
        timeline = MessageTimeline()
        timeline.append(Turn(role=TurnRole.USER, text="one"))
        snapshot = timeline.turns
        timeline.append(_assistant("two"))

        assert len(snapshot) == 1
        assert len(timeline) == 2


class TestAppendOrReplaceLast:
    def test_replaces_placeholder_of_same_episode(self):
        timeline = MessageTimeline()
        timeline.append(Turn(role=TurnRole.USER, text="hi", episode=1))
        timeline.append(_assistant("...", pending=True, episode=1))

        final = timeline.append_or_replace_last(_assistant("done", episode=1))

        assert len(timeline) == 2
        assert timeline.last is final

    def test_appends_when_last_is_not_placeholder(self):
        timeline = MessageTimeline()
        timeline.append(_assistant("earlier", episode=1))

        timeline.append_or_replace_last(_assistant("later", episode=1))

        assert [t.text for t in timeline] == ["earlier", "later"]

    def test_keeps_placeholder_of_other_episode(self):
        timeline = MessageTimeline()
        timeline.append(_assistant("...", pending=True, episode=1))

        timeline.append_or_replace_last(_assistant("late", episode=2))

        assert [t.text for t in timeline] == ["...", "late"]

    def test_earlier_turns_untouched(self):
        timeline = MessageTimeline()
        user = timeline.append(Turn(role=TurnRole.USER, text="hi", episode=1))
        timeline.append(_assistant("...", pending=True, episode=1))

        timeline.append_or_replace_last(_assistant("done", episode=1))

        assert timeline[0] is user


class TestReplaceLast:
    def test_swaps_last_turn(self):
        timeline = MessageTimeline()
        user = timeline.append(Turn(role=TurnRole.USER, text="hi", episode=1))
        timeline.append(_assistant("Approve?", episode=1))

        updated = timeline.replace_last(_assistant("Approve? (done)", episode=1))

        assert timeline.turns == (user, updated)

    def test_empty_timeline(self):
        with pytest.raises(IndexError):
            MessageTimeline().replace_last(_assistant("x"))

    def test_other_episode_refused(self):
        timeline = MessageTimeline()
        original = timeline.append(_assistant("Approve?", episode=1))

        with pytest.raises(ValueError, match="episode"):
            timeline.replace_last(_assistant("Approve?", episode=2))
        assert timeline.last is original


def test_to_dicts():
    timeline = MessageTimeline()
    timeline.append(Turn(role=TurnRole.USER, text="hi"))
    timeline.append(_assistant("hello"))

    data = timeline.to_dicts()
    assert [d["role"] for d in data] == ["user", "assistant"]
    assert [d["text"] for d in data] == ["hi", "hello"]
