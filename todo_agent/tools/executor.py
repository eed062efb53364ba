"""Tool executor: validates arguments and dispatches tool calls against the store."""
import logging
import time

from pydantic import ValidationError

from .registry import get_tool, ToolResult

logger = logging.getLogger(__name__)


def _describe_errors(e: ValidationError) -> str:
    parts = []
    for err in e.errors():
        loc = ".".join(str(x) for x in err.get("loc", ())) or "arguments"
        parts.append(f"{loc}: {err.get('msg', 'invalid')}")
    return "; ".join(parts)


def execute_tool(tool_name, args, store) -> ToolResult:
    """Execute a registered tool by name.

    Unknown tools, invalid arguments and handler failures all come back as
    unsuccessful results rather than exceptions.
    """
    tool = get_tool(tool_name)
    if not tool:
        logger.warning(f"Unknown tool: {tool_name}")
        return ToolResult(success=False, message=f"Unknown tool: {tool_name}")

    if args is None:
        args = {}
    if not isinstance(args, dict):
        return ToolResult(success=False, message=f"Invalid arguments for {tool_name}: expected an object")

    try:
        parsed = tool.args_model.model_validate(args)
    except ValidationError as e:
        logger.warning(f"Tool {tool_name} rejected arguments {args!r}: {e.error_count()} error(s)")
        return ToolResult(success=False, message=f"Invalid arguments for {tool_name}: {_describe_errors(e)}")

    arg_str = ", ".join(f"{k}={v!r}" for k, v in args.items())
    logger.info(f"Executing tool: {tool_name}({arg_str})")
    t0 = time.monotonic()

    try:
        result = tool.handler(parsed, store)
    except Exception as e:
        logger.error(f"Tool {tool_name} failed: {e}", exc_info=True)
        result = ToolResult(success=False, message=f"Tool {tool_name} failed: {e}")

    elapsed = time.monotonic() - t0
    logger.info(f"Tool {tool_name}: {elapsed * 1000:.1f}ms -> success={result.success}")
    return result
