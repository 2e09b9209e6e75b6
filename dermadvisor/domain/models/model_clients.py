from abc import ABC, abstractmethod
from typing import Sequence

from dermadvisor.domain.models.conversation import AssistantMessage, BaseConversationMessage
from dermadvisor.domain.tool.tool_registry import ToolDeclaration


class ChatModel(ABC):
    """Conversational model able to request tool calls"""

    @abstractmethod
    async def invoke(
        self,
        history: Sequence[BaseConversationMessage],
        tools: Sequence[ToolDeclaration]
    ) -> AssistantMessage:
        """Produce the next assistant message for the given history"""
        pass


class VisionModel(ABC):
    """Vision-capable model used once per conversation for image analysis"""

    @abstractmethod
    async def invoke(self, system_message: str, instruction: str, image: bytes, media_type: str) -> str:
        """Return the free-text analysis of the image"""
        pass
