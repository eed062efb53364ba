"""Tool system: registry, executor and the builtin todo tools."""
from .registry import register_tool, get_tool, all_tools, tool_schemas, ToolResult, ToolParam, ToolDef
from .executor import execute_tool

# Import builtin tools to trigger @register_tool decorators
from .builtin import *  # noqa
