from typing import List, Optional, Sequence
from enum import Enum
import time

import structlog
from pydantic import BaseModel, Field

from dermadvisor.domain.context.memory.checkpoint_store import CheckpointStore
from dermadvisor.domain.errors import RecursionLimitExceeded
from dermadvisor.domain.models.conversation import (
    AssistantMessage, BaseConversationMessage, ConversationThread, Message
)
from dermadvisor.domain.models.model_clients import ChatModel
from dermadvisor.domain.tool.tool_executor import ToolExecutor
from dermadvisor.domain.tool.tool_registry import ToolSet
from dermadvisor.infrastructure.observability.logging import agent_logger, metrics

logger = structlog.get_logger(__name__)

DEFAULT_RECURSION_LIMIT = 15


class TurnState(str, Enum):
    """Turn executor states"""
    AGENT = "agent"
    TOOLS = "tools"
    END = "end"


class TurnOutcome(BaseModel):
    """Result of driving one request to END"""
    thread_id: str
    response: str = Field(description="Content of the final assistant message")
    steps: int = Field(description="Completed tool turns")
    messages: List[Message] = Field(default_factory=list, description="Full history as committed")


class TurnExecutor:
    """Drives the AGENT/TOOLS loop for one thread and commits the result
    
    Each AGENT turn sends the whole history to the chat model. A reply with
    tool calls moves to TOOLS, which answers every call in request order and
    returns to AGENT; a reply without tool calls ends the request. The
    checkpoint is only written at END, so a failed request leaves the previous
    checkpoint untouched.
    """
    
    def __init__(
        self,
        chat_model: ChatModel,
        toolset: ToolSet,
        checkpoint_store: CheckpointStore,
        max_steps: int = DEFAULT_RECURSION_LIMIT,
        recover_tool_errors: bool = False
    ):
        if max_steps < 1:
            raise ValueError("max_steps must be at least 1")
            
        self.chat_model = chat_model
        self.toolset = toolset
        self.checkpoint_store = checkpoint_store
        self.max_steps = max_steps
        self.tool_executor = ToolExecutor(toolset, recover_errors=recover_tool_errors)
        
    async def run(self, thread_id: str, new_messages: Sequence[BaseConversationMessage]) -> TurnOutcome:
        """Load the thread, append the new messages and run until END"""
        
        thread = ConversationThread(thread_id=thread_id)
        prior = await self.checkpoint_store.get(thread_id)
        if not prior:
            logger.info("Starting fresh thread history", thread_id=thread_id)
        thread.extend(prior)
        thread.extend(new_messages)
        
        state = TurnState.AGENT
        steps = 0
        reply: Optional[AssistantMessage] = None
        
        while state is not TurnState.END:
            if state is TurnState.AGENT:
                reply = await self.agent_turn(thread)
                next_state = TurnState.TOOLS if reply.tool_calls else TurnState.END
            else:
                steps = await self.tools_turn(thread, reply, steps)
                next_state = TurnState.AGENT
                
            agent_logger.log_workflow_transition(
                thread_id=thread_id,
                from_node=state.value,
                to_node=next_state.value,
                state_summary={"steps": steps, "messages": len(thread)}
            )
            state = next_state
            
        await self.checkpoint_store.put(thread_id, thread.messages, steps=steps)
        
        return TurnOutcome(
            thread_id=thread_id,
            response=reply.content,
            steps=steps,
            messages=list(thread.messages)
        )
        
    async def agent_turn(self, thread: ConversationThread) -> AssistantMessage:
        """Invoke the chat model on the full history and append its reply"""
        
        started = time.perf_counter()
        reply = await self.chat_model.invoke(thread.messages, self.toolset.get_available_tools())
        metrics.record_latency("agent_turn", (time.perf_counter() - started) * 1000)
        
        return thread.append(reply)
        
    async def tools_turn(self, thread: ConversationThread, reply: AssistantMessage, steps: int) -> int:
        """Answer every tool call of the latest reply; return the new step count"""
        
        if steps + 1 >= self.max_steps:
            logger.error(
                "Recursion limit reached",
                thread_id=thread.thread_id,
                max_steps=self.max_steps,
                pending_tools=[call.name for call in reply.tool_calls]
            )
            raise RecursionLimitExceeded(self.max_steps)
            
        results = await self.tool_executor.execute_all(reply.tool_calls, thread.thread_id)
        thread.extend(results)
        
        return steps + 1
