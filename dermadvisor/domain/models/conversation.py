from typing import Dict, Any, List, Optional, Union, Literal, Mapping, Iterable, Annotated
from pydantic import BaseModel, Field, TypeAdapter, ValidationError, field_validator
from datetime import datetime
from enum import Enum
import json

from dermadvisor.domain.errors import InputValidationError


class MessageRole(str, Enum):
    """Message author roles"""
    SYSTEM = "system"
    USER = "user"
    ASSISTANT = "assistant"
    TOOL = "tool"


class ToolCallRequest(BaseModel):
    """A tool invocation requested by the conversational model"""
    id: str = Field(description="Request identifier correlating the call with its result")
    name: str = Field(description="Name of the requested tool")
    arguments: Union[Dict[str, Any], str] = Field(
        default_factory=dict,
        description="Argument payload; a raw string when the model emitted unparseable arguments"
    )


class BaseConversationMessage(BaseModel):
    """Fields shared by every message in a thread"""
    role: str
    content: str = ""
    seq: Optional[int] = Field(None, description="Position in the thread, assigned on append")


class SystemMessage(BaseConversationMessage):
    role: Literal["system"] = MessageRole.SYSTEM.value


class UserMessage(BaseConversationMessage):
    role: Literal["user"] = MessageRole.USER.value


class AssistantMessage(BaseConversationMessage):
    role: Literal["assistant"] = MessageRole.ASSISTANT.value
    tool_calls: List[ToolCallRequest] = Field(default_factory=list)


class ToolResultMessage(BaseConversationMessage):
    """Result of one tool call, consumed by the next agent turn"""
    role: Literal["tool"] = MessageRole.TOOL.value
    tool_call_id: str = Field(description="Identifier of the answered ToolCallRequest")
    name: str = Field(description="Name of the tool that produced the result")
    is_error: bool = False


Message = Annotated[
    Union[SystemMessage, UserMessage, AssistantMessage, ToolResultMessage],
    Field(discriminator="role")
]

_message_list = TypeAdapter(List[Message])


def dump_messages(messages: Iterable[BaseConversationMessage]) -> List[Dict[str, Any]]:
    """Serialize messages into plain JSON-compatible dicts"""
    return _message_list.dump_python(list(messages), mode="json")


def load_messages(data: List[Dict[str, Any]]) -> List[Message]:
    """Rebuild messages from their serialized form"""
    return _message_list.validate_python(data)


class ConversationThread(BaseModel):
    """Append-only message log of one conversation"""
    thread_id: str
    messages: List[Message] = Field(default_factory=list)

    def append(self, message: BaseConversationMessage) -> Message:
        """Append a message, stamping its sequence number"""
        entry = message.model_copy(update={"seq": len(self.messages)})
        self.messages.append(entry)
        return entry

    def extend(self, messages: Iterable[BaseConversationMessage]) -> List[Message]:
        return [self.append(message) for message in messages]

    def last(self) -> Optional[Message]:
        return self.messages[-1] if self.messages else None

    def __len__(self) -> int:
        return len(self.messages)


class Checkpoint(BaseModel):
    """Durable snapshot of a thread at a safe replay point"""
    thread_id: str
    messages: List[Message] = Field(default_factory=list)
    steps: int = Field(default=0, description="Step counter of the request that wrote the checkpoint")
    updated_at: datetime = Field(default_factory=datetime.utcnow)


ProfileValue = Union[str, int, float, bool, None, List[str]]


class UserProfile(BaseModel):
    """Questionnaire answers supplied when a conversation starts"""
    answers: Dict[str, ProfileValue]

    @field_validator("answers")
    @classmethod
    def check_answers(cls, answers: Dict[str, ProfileValue]) -> Dict[str, ProfileValue]:
        if not answers:
            raise ValueError("at least one questionnaire answer is required")
        if any(not key.strip() for key in answers):
            raise ValueError("questionnaire field names must not be blank")
        return answers

    @classmethod
    def from_answers(cls, answers: Any) -> "UserProfile":
        """Build a profile from raw answers, raising InputValidationError on bad input"""

        if not isinstance(answers, Mapping):
            raise InputValidationError("Questionnaire answers must be an object")
        try:
            return cls(answers=dict(answers))
        except ValidationError as exc:
            raise InputValidationError(f"Invalid questionnaire answers: {exc.errors()[0]['msg']}") from exc

    def to_json(self) -> str:
        return json.dumps(self.answers, indent=2)
