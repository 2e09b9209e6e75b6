from typing import Dict, List, Any, Optional, Iterable, Type, Callable, Awaitable
from pydantic import BaseModel, ConfigDict, Field


ToolHandler = Callable[[Any], Awaitable[str]]


class ToolDeclaration(BaseModel):
    """A tool the conversational model may call"""

    model_config = ConfigDict(arbitrary_types_allowed=True, frozen=True)

    name: str = Field(description="Tool name the model uses to select it")
    description: str = Field(description="Natural-language description surfaced to the model")
    args_schema: Type[BaseModel] = Field(description="Typed argument model validated before execution")
    handler: ToolHandler = Field(description="Coroutine receiving validated arguments, returning serialized output")

    def to_function_schema(self) -> Dict[str, Any]:
        """Render the declaration in the function-tool format models expect"""

        return {
            "type": "function",
            "function": {
                "name": self.name,
                "description": self.description,
                "parameters": self.args_schema.model_json_schema()
            }
        }


class ToolSet:
    """Registry of the tools available to one executor"""
    
    def __init__(self, tools: Optional[Iterable[ToolDeclaration]] = None):
        self.tools: Dict[str, ToolDeclaration] = {}
        for tool in tools or []:
            self.register_tool(tool)
            
    def register_tool(self, tool: ToolDeclaration):
        """Register a new tool"""
        
        if tool.name in self.tools:
            raise ValueError(f"Tool already registered: {tool.name}")
        self.tools[tool.name] = tool
        
    def get_tool(self, name: str) -> Optional[ToolDeclaration]:
        """Get a tool by name"""
        
        return self.tools.get(name)
        
    def get_available_tools(self) -> List[ToolDeclaration]:
        """Get all available tools in registration order"""
        
        return list(self.tools.values())

    @property
    def names(self) -> List[str]:
        return list(self.tools.keys())

    def to_function_schemas(self) -> List[Dict[str, Any]]:
        return [tool.to_function_schema() for tool in self.tools.values()]

    def __contains__(self, name: str) -> bool:
        return name in self.tools

    def __len__(self) -> int:
        return len(self.tools)
