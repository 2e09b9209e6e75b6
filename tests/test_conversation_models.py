import json

import pytest

from dermadvisor.domain.errors import InputValidationError
from dermadvisor.domain.models.conversation import (
    AssistantMessage,
    ConversationThread,
    SystemMessage,
    ToolCallRequest,
    ToolResultMessage,
    UserMessage,
    UserProfile,
    dump_messages,
    load_messages,
)


class TestConversationThread:
    """Append-only message log"""

    def test_append_assigns_sequence_numbers(self):
        thread = ConversationThread(thread_id="t1")
        first = thread.append(SystemMessage(content="seed"))
        second = thread.append(UserMessage(content="hi"))

        assert (first.seq, second.seq) == (0, 1)
        assert thread.last() is second
        assert len(thread) == 2

    def test_append_does_not_mutate_the_caller_message(self):
        thread = ConversationThread(thread_id="t1")
        message = UserMessage(content="hi")
        thread.append(message)

        assert message.seq is None

    def test_extend_restamps_loaded_history_by_position(self):
        thread = ConversationThread(thread_id="t1")
        thread.extend([UserMessage(content="a", seq=7), UserMessage(content="b", seq=3)])

        assert [m.seq for m in thread.messages] == [0, 1]
        assert [m.content for m in thread.messages] == ["a", "b"]

    def test_last_on_empty_thread(self):
        assert ConversationThread(thread_id="t1").last() is None


def test_messages_survive_serialization_with_their_types():
    messages = [
        SystemMessage(content="seed", seq=0),
        UserMessage(content="hello", seq=1),
        AssistantMessage(
            content="",
            tool_calls=[ToolCallRequest(id="call_1", name="product_lookup", arguments={"query": "serum"})],
            seq=2
        ),
        ToolResultMessage(tool_call_id="call_1", name="product_lookup", content="[]", seq=3),
    ]

    data = dump_messages(messages)
    json.dumps(data)

    restored = load_messages(data)
    assert restored == messages
    assert isinstance(restored[2], AssistantMessage)
    assert restored[2].tool_calls[0].arguments == {"query": "serum"}
    assert isinstance(restored[3], ToolResultMessage)


class TestUserProfile:
    """Questionnaire validation"""

    def test_serializes_answers_as_indented_json(self):
        profile = UserProfile.from_answers({"skinType": "oily", "mainConcerns": "acne"})

        assert json.loads(profile.to_json()) == {"skinType": "oily", "mainConcerns": "acne"}
        assert '\n  "skinType": "oily"' in profile.to_json()

    def test_accepts_free_form_fields(self):
        profile = UserProfile.from_answers({"ageRange": 30, "allergies": ["fragrance"], "pregnant": False})

        assert profile.answers["allergies"] == ["fragrance"]

    @pytest.mark.parametrize("answers", [{}, {"  ": "oily"}, {"skinType": {"nested": "x"}}, "oily", None])
    def test_malformed_answers_raise_input_validation_error(self, answers):
        with pytest.raises(InputValidationError):
            UserProfile.from_answers(answers)
