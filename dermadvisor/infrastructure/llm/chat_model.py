from typing import Sequence

import structlog
from langchain_core.language_models import BaseChatModel
from langchain_openai import ChatOpenAI

from dermadvisor.domain.errors import ModelInvocationError
from dermadvisor.domain.models.conversation import AssistantMessage, BaseConversationMessage
from dermadvisor.domain.models.model_clients import ChatModel
from dermadvisor.domain.tool.tool_registry import ToolDeclaration
from dermadvisor.infrastructure.config.settings import Settings
from .message_codec import from_langchain_message, to_langchain_messages

logger = structlog.get_logger(__name__)


class LangChainChatModel(ChatModel):
    """Conversational model backed by any LangChain chat model that supports tool binding"""

    def __init__(self, llm: BaseChatModel):
        self.llm = llm

    @classmethod
    def from_settings(cls, settings: Settings) -> "LangChainChatModel":
        return cls(ChatOpenAI(model=settings.chat_model, temperature=settings.chat_temperature))

    async def invoke(
        self,
        history: Sequence[BaseConversationMessage],
        tools: Sequence[ToolDeclaration]
    ) -> AssistantMessage:
        runnable = self.llm.bind_tools([tool.to_function_schema() for tool in tools]) if tools else self.llm
        
        try:
            result = await runnable.ainvoke(to_langchain_messages(history))
        except Exception as e:
            logger.error("Chat model invocation failed", error=str(e), history_length=len(history))
            raise ModelInvocationError(f"Chat model invocation failed: {e}") from e
            
        reply = from_langchain_message(result)
        logger.debug("Chat model replied", tool_calls=[call.name for call in reply.tool_calls])
        return reply
