import base64

import pytest
from langchain_core.messages import AIMessage, HumanMessage, SystemMessage, ToolMessage

from conftest import JPEG_BYTES
from dermadvisor.domain.errors import ModelInvocationError
from dermadvisor.domain.models.conversation import (
    AssistantMessage,
    SystemMessage as SeedSystemMessage,
    ToolCallRequest,
    ToolResultMessage,
    UserMessage,
)
from dermadvisor.infrastructure.llm.chat_model import LangChainChatModel
from dermadvisor.infrastructure.llm.message_codec import (
    content_text, from_langchain_message, to_langchain_messages
)
from dermadvisor.infrastructure.llm.vision_model import LangChainVisionModel


class StubLLM:
    """Stands in for a LangChain chat model: records bound tools and inputs"""

    def __init__(self, reply=None, error=None):
        self.reply = reply
        self.error = error
        self.bound_tools = None
        self.inputs = []

    def bind_tools(self, tools):
        self.bound_tools = tools
        return self

    async def ainvoke(self, messages):
        self.inputs.append(messages)
        if self.error:
            raise self.error
        return self.reply


def test_history_maps_onto_langchain_message_types():
    history = [
        SeedSystemMessage(content="seed"),
        UserMessage(content="hi"),
        AssistantMessage(tool_calls=[ToolCallRequest(id="c1", name="product_lookup", arguments={"query": "spf"})]),
        ToolResultMessage(tool_call_id="c1", name="product_lookup", content="[]", is_error=True),
    ]

    system, human, ai, tool = to_langchain_messages(history)

    assert isinstance(system, SystemMessage) and system.content == "seed"
    assert isinstance(human, HumanMessage) and human.content == "hi"
    assert isinstance(ai, AIMessage)
    assert ai.tool_calls[0]["id"] == "c1"
    assert ai.tool_calls[0]["args"] == {"query": "spf"}
    assert isinstance(tool, ToolMessage)
    assert tool.tool_call_id == "c1"
    assert tool.status == "error"


def test_reply_tool_calls_are_converted():
    reply = AIMessage(content="", tool_calls=[{"name": "product_lookup", "args": {"query": "toner"}, "id": "call_9"}])

    message = from_langchain_message(reply)

    assert message.tool_calls == [ToolCallRequest(id="call_9", name="product_lookup", arguments={"query": "toner"})]


def test_malformed_tool_arguments_are_kept_for_validation():
    reply = AIMessage(
        content="",
        invalid_tool_calls=[{"name": "product_lookup", "args": '{"query": ', "id": "call_1", "error": "bad json"}]
    )

    message = from_langchain_message(reply)

    assert message.tool_calls[0].arguments == '{"query": '


def test_content_blocks_are_flattened():
    assert content_text([{"type": "text", "text": "a"}, {"type": "tool_use", "id": "x"}, "b"]) == "ab"
    assert content_text(None) == ""


async def test_chat_model_binds_declared_tools(toolset):
    llm = StubLLM(reply=AIMessage(content="Use sunscreen."))

    reply = await LangChainChatModel(llm).invoke([UserMessage(content="hi")], toolset.get_available_tools())

    assert reply.content == "Use sunscreen."
    assert llm.bound_tools == toolset.to_function_schemas()
    assert isinstance(llm.inputs[0][0], HumanMessage)


async def test_chat_model_failure_becomes_model_invocation_error(toolset):
    llm = StubLLM(error=TimeoutError("read timed out"))

    with pytest.raises(ModelInvocationError):
        await LangChainChatModel(llm).invoke([UserMessage(content="hi")], toolset.get_available_tools())


async def test_vision_model_sends_image_as_data_uri():
    llm = StubLLM(reply=AIMessage(content=[{"type": "text", "text": "oily T-zone"}]))

    analysis = await LangChainVisionModel(llm).invoke("system", "analyze", JPEG_BYTES, "image/jpeg")

    assert analysis == "oily T-zone"
    system, human = llm.inputs[0]
    assert system.content == "system"
    image_block = human.content[1]
    assert image_block["image_url"]["url"] == "data:image/jpeg;base64," + base64.b64encode(JPEG_BYTES).decode()


async def test_vision_failure_becomes_model_invocation_error():
    llm = StubLLM(error=RuntimeError("overloaded"))

    with pytest.raises(ModelInvocationError):
        await LangChainVisionModel(llm).invoke("system", "analyze", JPEG_BYTES, "image/jpeg")
