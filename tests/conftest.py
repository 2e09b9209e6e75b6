"""
Shared fixtures: scripted fakes for the chat model, vision model and
catalog retriever, plus an in-memory checkpoint store.
"""

import asyncio
from typing import Any, Dict, List, Optional, Sequence, Tuple, Union

import pytest

from dermadvisor.domain.context.context_assembler import ContextAssembler
from dermadvisor.domain.context.memory.checkpoint_store import InMemoryCheckpointStore
from dermadvisor.domain.models.conversation import AssistantMessage, ToolCallRequest
from dermadvisor.domain.models.model_clients import ChatModel, VisionModel
from dermadvisor.domain.orchestration.conversation_service import ConversationService
from dermadvisor.domain.orchestration.core.turn_executor import TurnExecutor
from dermadvisor.domain.tool.product_lookup import ProductRetriever, build_product_lookup_tool
from dermadvisor.domain.tool.tool_registry import ToolSet

JPEG_BYTES = b"\xff\xd8\xff\xe0\x00\x10JFIF\x00" + b"\x00" * 32

CATALOG = [
    ("Salicylic acid serum for acne-prone skin", 0.93),
    ("Niacinamide 10% blemish serum", 0.91),
    ("Oil-free gel moisturizer", 0.87),
    ("Clay mask for oily skin", 0.85),
    ("Benzoyl peroxide spot treatment", 0.84),
    ("Gentle foaming cleanser", 0.80),
]


def lookup_call(call_id: str = "call_1", **arguments: Any) -> ToolCallRequest:
    arguments = arguments or {"query": "acne serum"}
    return ToolCallRequest(id=call_id, name="product_lookup", arguments=arguments)


def tool_reply(*calls: ToolCallRequest, content: str = "") -> AssistantMessage:
    return AssistantMessage(content=content, tool_calls=list(calls))


def answer(text: str) -> AssistantMessage:
    return AssistantMessage(content=text)


class ScriptedChatModel(ChatModel):
    """Returns (or raises) scripted replies in order and records every call"""

    def __init__(self, replies: Sequence[Union[AssistantMessage, Exception]]):
        self.replies = list(replies)
        self.calls: List[Dict[str, Any]] = []

    async def invoke(self, history, tools) -> AssistantMessage:
        self.calls.append({"history": list(history), "tools": [tool.name for tool in tools]})
        if not self.replies:
            raise AssertionError("chat model called more times than scripted")
        reply = self.replies.pop(0)
        if isinstance(reply, Exception):
            raise reply
        return reply


class LoopingChatModel(ChatModel):
    """Always asks for another product lookup"""

    def __init__(self):
        self.invocations = 0

    async def invoke(self, history, tools) -> AssistantMessage:
        self.invocations += 1
        return tool_reply(lookup_call(f"call_{self.invocations}"))


class FakeVisionModel(VisionModel):
    def __init__(self, analysis: str = '{"skin_analysis": {"skin_type": "oily"}}', error: Optional[Exception] = None):
        self.analysis = analysis
        self.error = error
        self.calls: List[Dict[str, Any]] = []

    async def invoke(self, system_message: str, instruction: str, image: bytes, media_type: str) -> str:
        self.calls.append({"system_message": system_message, "image": image, "media_type": media_type})
        if self.error is not None:
            raise self.error
        return self.analysis


class FakeRetriever(ProductRetriever):
    def __init__(self, catalog: Sequence[Tuple[str, float]] = CATALOG, error: Optional[Exception] = None, delay: float = 0.0):
        self.catalog = list(catalog)
        self.error = error
        self.delay = delay
        self.calls: List[Tuple[str, int]] = []

    async def search(self, query: str, k: int) -> List[Tuple[str, float]]:
        self.calls.append((query, k))
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error is not None:
            raise self.error
        return self.catalog[:k]


@pytest.fixture
def checkpoint_store() -> InMemoryCheckpointStore:
    return InMemoryCheckpointStore()


@pytest.fixture
def retriever() -> FakeRetriever:
    return FakeRetriever()


@pytest.fixture
def toolset(retriever) -> ToolSet:
    return ToolSet([build_product_lookup_tool(retriever)])


@pytest.fixture
def make_executor(toolset, checkpoint_store):
    def factory(chat_model: ChatModel, **kwargs) -> TurnExecutor:
        return TurnExecutor(chat_model, toolset, checkpoint_store, **kwargs)
    return factory


@pytest.fixture
def make_service(make_executor, toolset):
    def factory(chat_model: ChatModel, vision_model: Optional[VisionModel] = None, **kwargs) -> ConversationService:
        assembler = ContextAssembler(toolset.names, vision_model=vision_model)
        return ConversationService(make_executor(chat_model, **kwargs), assembler)
    return factory
