from pydantic import BaseModel, ConfigDict, Field


class ContinueConversationRequest(BaseModel):
    """Follow-up message in an existing thread"""
    message: str = Field(description="User message text")


class StartConversationResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    thread_id: str = Field(alias="threadId", description="Identifier to continue the conversation with")
    response: str


class ContinueConversationResponse(BaseModel):
    response: str


class ErrorResponse(BaseModel):
    error: str
