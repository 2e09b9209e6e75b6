from typing import List, Optional


class AdvisorError(Exception):
    """Base class for every failure that aborts a conversation request"""


class InputValidationError(AdvisorError):
    """Malformed questionnaire, message or image payload"""


class ModelInvocationError(AdvisorError):
    """Conversational or vision model call failed"""


class ToolExecutionError(AdvisorError):
    """A tool handler failed, including retriever failures"""

    def __init__(self, message: str, tool_name: Optional[str] = None):
        super().__init__(message)
        self.tool_name = tool_name


class ToolValidationError(ToolExecutionError):
    """Tool-call arguments failed the tool's schema check"""

    def __init__(self, message: str, tool_name: Optional[str] = None, errors: Optional[List[str]] = None):
        super().__init__(message, tool_name=tool_name)
        self.errors = errors or []


class RecursionLimitExceeded(AdvisorError):
    """The step bound was reached before the agent produced a final answer"""

    def __init__(self, limit: int):
        super().__init__(f"Recursion limit of {limit} reached without a final answer")
        self.limit = limit


class PersistenceError(AdvisorError):
    """Checkpoint store read or write failed"""
