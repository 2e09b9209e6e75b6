"""
Translation between conversation messages and LangChain chat messages
"""

from typing import Any, List, Sequence
import uuid

from langchain_core.messages import (
    AIMessage,
    BaseMessage,
    HumanMessage,
    SystemMessage as LCSystemMessage,
    ToolMessage,
)

from dermadvisor.domain.models.conversation import (
    AssistantMessage,
    BaseConversationMessage,
    MessageRole,
    ToolCallRequest,
)


def content_text(content: Any) -> str:
    """Flatten provider content (string or list of blocks) into text"""

    if isinstance(content, str):
        return content
    if isinstance(content, list):
        parts = []
        for block in content:
            if isinstance(block, str):
                parts.append(block)
            elif isinstance(block, dict) and block.get("type") == "text":
                parts.append(block.get("text", ""))
        return "".join(parts)
    return "" if content is None else str(content)


def to_langchain_messages(messages: Sequence[BaseConversationMessage]) -> List[BaseMessage]:
    converted: List[BaseMessage] = []
    for message in messages:
        if message.role == MessageRole.SYSTEM:
            converted.append(LCSystemMessage(content=message.content))
        elif message.role == MessageRole.USER:
            converted.append(HumanMessage(content=message.content))
        elif message.role == MessageRole.ASSISTANT:
            converted.append(AIMessage(
                content=message.content,
                tool_calls=[
                    {
                        "name": call.name,
                        "args": call.arguments if isinstance(call.arguments, dict) else {},
                        "id": call.id,
                        "type": "tool_call",
                    }
                    for call in message.tool_calls
                ]
            ))
        elif message.role == MessageRole.TOOL:
            converted.append(ToolMessage(
                content=message.content,
                tool_call_id=message.tool_call_id,
                name=message.name,
                status="error" if message.is_error else "success"
            ))
        else:
            raise ValueError(f"Unsupported message role: {message.role}")
    return converted


def from_langchain_message(message: BaseMessage) -> AssistantMessage:
    """Convert a model reply, keeping malformed tool calls so validation rejects them"""

    tool_calls = [
        ToolCallRequest(
            id=call.get("id") or f"call_{uuid.uuid4().hex}",
            name=call["name"],
            arguments=call.get("args") or {}
        )
        for call in getattr(message, "tool_calls", None) or []
    ]
    tool_calls.extend(
        ToolCallRequest(
            id=call.get("id") or f"call_{uuid.uuid4().hex}",
            name=call.get("name") or "",
            arguments=call.get("args") or ""
        )
        for call in getattr(message, "invalid_tool_calls", None) or []
    )
    return AssistantMessage(content=content_text(message.content), tool_calls=tool_calls)
