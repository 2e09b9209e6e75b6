# Parameter validation
from typing import Any, List, Mapping, NamedTuple, Optional
from pydantic import BaseModel, ValidationError

from dermadvisor.domain.tool.tool_registry import ToolDeclaration


class ValidationResult(NamedTuple):
    is_valid: bool
    errors: List[str]
    arguments: Optional[BaseModel] = None


def _format_error(error: Mapping[str, Any]) -> str:
    location = ".".join(str(part) for part in error.get("loc", ())) or "arguments"
    return f"{location}: {error.get('msg', 'invalid value')}"


class ToolParameterValidator:
    @staticmethod
    def validate_tool_call(tool: ToolDeclaration, parameters: Any) -> ValidationResult:
        if not isinstance(parameters, Mapping):
            return ValidationResult(False, ["Tool arguments must be a JSON object"])
        
        try:
            arguments = tool.args_schema.model_validate(dict(parameters))
        except ValidationError as e:
            return ValidationResult(
                False,
                [f"Schema validation failed: {_format_error(error)}" for error in e.errors()]
            )
            
        return ValidationResult(True, [], arguments)
