# Validated execution with concurrent fan-out
from typing import List, Sequence
import asyncio
import time

import structlog

from dermadvisor.domain.errors import ToolExecutionError, ToolValidationError
from dermadvisor.domain.models.conversation import ToolCallRequest, ToolResultMessage
from dermadvisor.domain.tool.tool_registry import ToolSet
from dermadvisor.domain.tool.tool_validator import ToolParameterValidator
from dermadvisor.infrastructure.observability.logging import agent_logger, metrics

logger = structlog.get_logger(__name__)


class ToolExecutor:
    """Validates and runs tool-call requests against a ToolSet"""

    def __init__(self, toolset: ToolSet, recover_errors: bool = False):
        self.toolset = toolset
        # When set, failures become error results the model can see instead of aborting
        self.recover_errors = recover_errors
    
    async def execute_tool(self, request: ToolCallRequest, thread_id: str) -> ToolResultMessage:
        started = time.perf_counter()
        try:
            content = await self._run(request)
        except ToolExecutionError as e:
            duration_ms = (time.perf_counter() - started) * 1000
            agent_logger.log_tool_execution(
                tool_name=request.name,
                thread_id=thread_id,
                tool_call_id=request.id,
                input_data=request.arguments,
                duration_ms=duration_ms,
                success=False,
                error=str(e)
            )
            metrics.increment_counter("tool.failures", tags={"tool": request.name})
            if not self.recover_errors:
                raise
            return ToolResultMessage(
                tool_call_id=request.id,
                name=request.name,
                content=f"Error: {e}",
                is_error=True
            )
            
        duration_ms = (time.perf_counter() - started) * 1000
        agent_logger.log_tool_execution(
            tool_name=request.name,
            thread_id=thread_id,
            tool_call_id=request.id,
            input_data=request.arguments,
            duration_ms=duration_ms
        )
        metrics.record_latency("tool_execution", duration_ms, tags={"tool": request.name})
        
        return ToolResultMessage(tool_call_id=request.id, name=request.name, content=content)

    async def execute_all(self, requests: Sequence[ToolCallRequest], thread_id: str) -> List[ToolResultMessage]:
        """Run every request concurrently; results come back in request order"""

        outcomes = await asyncio.gather(
            *(self.execute_tool(request, thread_id) for request in requests),
            return_exceptions=True
        )
        
        # All calls have joined; surface the first failure in request order
        for outcome in outcomes:
            if isinstance(outcome, BaseException):
                raise outcome
                
        return list(outcomes)

    async def _run(self, request: ToolCallRequest) -> str:
        tool = self.toolset.get_tool(request.name)
        if tool is None:
            raise ToolValidationError(f"Unknown tool: {request.name}", tool_name=request.name)
            
        validation = ToolParameterValidator.validate_tool_call(tool, request.arguments)
        if not validation.is_valid:
            raise ToolValidationError(
                f"Invalid arguments for {request.name}: {'; '.join(validation.errors)}",
                tool_name=request.name,
                errors=validation.errors
            )
            
        try:
            output = await tool.handler(validation.arguments)
        except ToolExecutionError:
            raise
        except Exception as e:
            logger.error("Tool handler failed", tool_name=request.name, error=str(e))
            raise ToolExecutionError(f"Tool {request.name} failed: {e}", tool_name=request.name) from e
            
        if not isinstance(output, str):
            raise ToolExecutionError(
                f"Tool {request.name} returned {type(output).__name__}, expected str",
                tool_name=request.name
            )
        return output
