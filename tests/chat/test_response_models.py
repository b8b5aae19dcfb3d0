# tests/chat/test_response_models.py
"""Tests for agent response models and reply classification."""

import pytest
from pydantic import TypeAdapter

from studio_agent.chat.response_models import (
    AgentOutcome,
    AgentReply,
    Completed,
    ConfirmationRequired,
    Failed,
    RelayedMessage,
    ToolCallPayload,
    parse_reply,
)
from studio_agent.config.defaults import CANCELLED_TEXT
from studio_agent.constants import Decision, FailureKind

FALLBACK = "Request completed."


class TestToolCallPayload:
    def test_canonical_fields(self):
        payload = ToolCallPayload.model_validate(
            {"id": "t1", "tool_name": "render", "parameters": {"q": 1}}
        )
        assert payload.tool_name == "render"
        assert payload.parameters == {"q": 1}

    @pytest.mark.parametrize("params_key", ["args", "arguments"])
    def test_alternate_field_names(self, params_key):
        payload = ToolCallPayload.model_validate(
            {"id": "t1", "name": "render", params_key: {"q": 1}}
        )
        assert payload.tool_name == "render"
        assert payload.parameters == {"q": 1}

    def test_to_proposal_is_pending(self):
        proposal = ToolCallPayload(id="t1", tool_name="render").to_proposal()
        assert proposal.decision is Decision.PENDING
        assert proposal.parameters == {}


class TestRelayedMessage:
    def test_kinds(self):
        assert RelayedMessage(type="tool", content="x").is_tool_result
        assert RelayedMessage(type="ai", content="x").is_agent_output
        assert not RelayedMessage(type="human", content="x").is_agent_output


class TestCompleted:
    def test_final_response_preferred(self):
        outcome = parse_reply(
            {"status": "completed", "response": "r", "final_response": "f"}, FALLBACK
        )
        assert outcome == Completed(final_text="f")

    def test_response_used(self):
        outcome = parse_reply({"status": "completed", "response": "r"}, FALLBACK)
        assert outcome.final_text == "r"

    def test_fallback_text(self):
        outcome = parse_reply({"status": "completed"}, FALLBACK)
        assert outcome.final_text == FALLBACK
        assert outcome.from_relayed is False

    def test_complete_alias(self):
        outcome = parse_reply({"status": "complete", "response": "ok"}, FALLBACK)
        assert isinstance(outcome, Completed)

    def test_relayed_messages_kept(self):
        outcome = parse_reply(
            {
                "status": "completed",
                "messages": [
                    {"type": "human", "content": "build X"},
                    {"type": "ai", "content": "Working on it"},
                    {"type": "tool", "content": "asset-42", "name": "create_asset"},
                    {"type": "ai", "content": ""},
                ],
            },
            FALLBACK,
        )
        assert [m.content for m in outcome.relayed] == ["Working on it", "asset-42"]
        assert outcome.from_relayed is True

    def test_relayed_answer_wins_over_response(self):
        outcome = parse_reply(
            {
                "status": "complete",
                "response": "hi",
                "messages": [{"type": "ai", "content": "hi"}],
            },
            FALLBACK,
        )
        assert outcome.final_text == "hi"
        assert outcome.from_relayed is True

    def test_human_messages_do_not_count_as_relayed(self):
        outcome = parse_reply(
            {
                "status": "completed",
                "response": "hi",
                "messages": [{"type": "human", "content": "hello"}],
            },
            FALLBACK,
        )
        assert outcome.relayed == ()
        assert outcome.from_relayed is False

    def test_cancelled(self):
        outcome = parse_reply({"status": "cancelled"}, FALLBACK)
        assert isinstance(outcome, Completed)
        assert outcome.cancelled is True
        assert outcome.final_text == CANCELLED_TEXT


class TestConfirmationRequired:
    def test_tool_calls_batch(self):
        outcome = parse_reply(
            {
                "status": "confirmation_required",
                "conversation_id": "c1",
                "tool_calls": [
                    {"id": "t1", "tool_name": "a"},
                    {"id": "t2", "tool_name": "b"},
                ],
            },
            FALLBACK,
        )
        assert isinstance(outcome, ConfirmationRequired)
        assert [p.id for p in outcome.proposals] == ["t1", "t2"]
        assert outcome.prompt is None

    def test_session_id_and_interrupt_message(self):
        outcome = parse_reply(
            {
                "status": "awaiting_confirmation",
                "session_id": "c9",
                "interrupt_message": "Create a tree?",
                "tool_calls": [{"id": "t1", "name": "create_asset", "args": {}}],
            },
            FALLBACK,
        )
        assert outcome.conversation_id == "c9"
        assert outcome.prompt == "Create a tree?"

    def test_next_tool_comes_first(self):
        outcome = parse_reply(
            {
                "status": "confirmation_required",
                "next_tool": {"id": "t2", "tool_name": "b"},
                "tool_calls": [{"id": "t3", "tool_name": "c"}],
            },
            FALLBACK,
            require_conversation_id=False,
        )
        assert [p.id for p in outcome.proposals] == ["t2", "t3"]

    def test_without_tools_is_protocol_error(self):
        outcome = parse_reply(
            {"status": "confirmation_required", "conversation_id": "c1"}, FALLBACK
        )
        assert isinstance(outcome, Failed)
        assert outcome.cause is FailureKind.PROTOCOL_ERROR

    def test_duplicate_ids_is_protocol_error(self):
        outcome = parse_reply(
            {
                "status": "confirmation_required",
                "conversation_id": "c1",
                "tool_calls": [
                    {"id": "t1", "tool_name": "a"},
                    {"id": "t1", "tool_name": "b"},
                ],
            },
            FALLBACK,
        )
        assert outcome.cause is FailureKind.PROTOCOL_ERROR

    def test_missing_conversation_id_allowed_when_chained(self):
        reply = AgentReply.model_validate(
            {"status": "confirmation_required", "tool_calls": [{"id": "t1", "tool_name": "a"}]}
        )
        outcome = reply.to_outcome(FALLBACK, require_conversation_id=False)
        assert isinstance(outcome, ConfirmationRequired)
        assert outcome.conversation_id is None


class TestMalformed:
    @pytest.mark.parametrize(
        "payload",
        [
            [],
            "completed",
            None,
            {},
            {"status": "thinking"},
            {"status": "confirmation_required", "conversation_id": "c1",
             "tool_calls": [{"tool_name": "a"}]},
        ],
    )
    def test_protocol_error(self, payload):
        outcome = parse_reply(payload, FALLBACK)
        assert isinstance(outcome, Failed)
        assert outcome.cause is FailureKind.PROTOCOL_ERROR


def test_outcome_discriminator():
    adapter = TypeAdapter(AgentOutcome)
    outcome = adapter.validate_python({"kind": "failed", "cause": "network_error"})
    assert isinstance(outcome, Failed)
    assert outcome.cause is FailureKind.NETWORK_ERROR
