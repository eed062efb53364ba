"""Tool registry: decorator-based tool registration and lookup."""
import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Sequence, Type

from pydantic import BaseModel

logger = logging.getLogger(__name__)


@dataclass
class ToolParam:
    name: str
    type: str = "string"
    description: str = ""
    required: bool = True
    enum: Optional[Sequence[str]] = None


@dataclass
class ToolResult:
    success: bool
    message: str = ""
    data: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        out = {"success": self.success, "message": self.message}
        out.update(self.data)
        return out


@dataclass
class ToolDef:
    name: str
    description: str
    params: List[ToolParam]
    handler: Callable[..., ToolResult]
    args_model: Type[BaseModel]


_tools: Dict[str, ToolDef] = {}


def register_tool(
    name: str,
    args_model: Type[BaseModel],
    description: str = "",
    params: Optional[List[ToolParam]] = None,
):
    """Decorator to register a tool function."""
    def decorator(func):
        tool = ToolDef(
            name=name,
            description=description or func.__doc__ or "",
            params=params or [],
            handler=func,
            args_model=args_model,
        )
        _tools[name] = tool
        logger.debug(f"Registered tool: {name}")
        return func
    return decorator


def get_tool(name: str) -> Optional[ToolDef]:
    return _tools.get(name)


def all_tools() -> Dict[str, ToolDef]:
    return dict(_tools)


def tool_schemas() -> List[Dict[str, Any]]:
    """Generate the tool catalog sent with completion requests, in registration order."""
    schemas = []
    for tool in _tools.values():
        properties = {}
        for p in tool.params:
            prop: Dict[str, Any] = {"type": p.type, "description": p.description}
            if p.enum:
                prop["enum"] = list(p.enum)
            properties[p.name] = prop
        schemas.append({
            "name": tool.name,
            "description": tool.description,
            "parameters": {
                "type": "object",
                "properties": properties,
                "required": [p.name for p in tool.params if p.required],
            },
        })
    return schemas
