from typing import Any, Dict, Optional

import structlog
from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse
from pydantic import ValidationError
from starlette.datastructures import UploadFile

from dermadvisor.application.api.schema import (
    ContinueConversationRequest,
    ContinueConversationResponse,
    ErrorResponse,
    StartConversationResponse,
)
from dermadvisor.domain.errors import InputValidationError
from dermadvisor.domain.orchestration.conversation_service import ConversationService

logger = structlog.get_logger(__name__)

router = APIRouter()


def get_conversation_service(request: Request) -> ConversationService:
    return request.app.state.conversation_service


def _failure(error: Exception) -> JSONResponse:
    if isinstance(error, InputValidationError):
        return JSONResponse(status_code=400, content=ErrorResponse(error="Invalid request").model_dump())
    return JSONResponse(status_code=500, content=ErrorResponse(error="Internal server error").model_dump())


async def _read_questionnaire(request: Request):
    """Questionnaire answers and optional image from a multipart form or a JSON body"""
    
    content_type = request.headers.get("content-type", "")
    if content_type.startswith("application/json"):
        try:
            return await request.json(), None
        except ValueError as e:
            raise InputValidationError("Request body is not valid JSON") from e
            
    form = await request.form()
    answers: Dict[str, Any] = {}
    image: Optional[bytes] = None
    for key, value in form.multi_items():
        if key == "image":
            if isinstance(value, UploadFile):
                content = await value.read()
                # A form submitted with no file chosen still sends an empty, unnamed part
                if content or value.filename:
                    image = content
        elif isinstance(value, str):
            answers[key] = value
    return answers, image


async def _read_message(request: Request) -> ContinueConversationRequest:
    try:
        return ContinueConversationRequest.model_validate(await request.json())
    except (ValidationError, ValueError) as e:
        raise InputValidationError("Request body must carry a message") from e


@router.get("/")
async def root() -> str:
    return "Skincare Advisor Agent Server"


@router.post("/chat", response_model=StartConversationResponse, responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}})
async def start_conversation(request: Request, service: ConversationService = Depends(get_conversation_service)):
    """Start a new conversation from questionnaire answers and an optional image"""
    
    try:
        answers, image = await _read_questionnaire(request)
        result = await service.start_conversation(answers, image)
    except Exception as e:
        logger.error("Error starting conversation", error=str(e), error_type=type(e).__name__)
        return _failure(e)
        
    return StartConversationResponse(thread_id=result.thread_id, response=result.response).model_dump(by_alias=True)


@router.post("/chat/{thread_id}", response_model=ContinueConversationResponse, responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}})
async def continue_conversation(
    thread_id: str,
    request: Request,
    service: ConversationService = Depends(get_conversation_service)
):
    """Send a message in an existing conversation"""
    
    try:
        body = await _read_message(request)
        result = await service.continue_conversation(thread_id, body.message)
    except Exception as e:
        logger.error("Error in chat", thread_id=thread_id, error=str(e), error_type=type(e).__name__)
        return _failure(e)
        
    return ContinueConversationResponse(response=result.response)
