from typing import Any, Callable, Optional
import uuid

import structlog
from pydantic import BaseModel

from dermadvisor.domain.context.context_assembler import ContextAssembler
from dermadvisor.domain.errors import InputValidationError
from dermadvisor.domain.models.conversation import UserMessage, UserProfile
from dermadvisor.domain.orchestration.core.turn_executor import TurnExecutor
from dermadvisor.infrastructure.observability.logging import agent_logger


def new_thread_id() -> str:
    return str(uuid.uuid4())


class StartConversationResult(BaseModel):
    thread_id: str
    response: str


class ContinueConversationResult(BaseModel):
    response: str


class ConversationService:
    """Entry points for starting and continuing conversations"""
    
    def __init__(
        self,
        executor: TurnExecutor,
        assembler: ContextAssembler,
        thread_id_factory: Callable[[], str] = new_thread_id
    ):
        self.executor = executor
        self.assembler = assembler
        self.thread_id_factory = thread_id_factory
        
    async def start_conversation(self, answers: Any, image: Optional[bytes] = None) -> StartConversationResult:
        """Open a new thread from questionnaire answers and an optional image"""
        
        profile = UserProfile.from_answers(answers)
        thread_id = self.thread_id_factory()
        
        with structlog.contextvars.bound_contextvars(thread_id=thread_id):
            seed = await self.assembler.assemble(profile, image)
            agent_logger.log_context_update(
                thread_id=thread_id,
                context_type="seed",
                action="assembled",
                details={"fields": sorted(profile.answers), "has_image_analysis": seed.image_analysis is not None}
            )
            outcome = await self.executor.run(thread_id, seed.messages)
                
        return StartConversationResult(thread_id=thread_id, response=outcome.response)
        
    async def continue_conversation(self, thread_id: str, message: str) -> ContinueConversationResult:
        """Append a user message to an existing (or unknown) thread and run it"""
        
        if not isinstance(thread_id, str) or not thread_id.strip():
            raise InputValidationError("Thread identifier must be a non-empty string")
        if not isinstance(message, str) or not message.strip():
            raise InputValidationError("Message must be a non-empty string")
            
        with structlog.contextvars.bound_contextvars(thread_id=thread_id):
            outcome = await self.executor.run(thread_id, [UserMessage(content=message)])
                
        return ContinueConversationResult(response=outcome.response)
