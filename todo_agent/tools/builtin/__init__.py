"""Import builtin tool modules to trigger @register_tool decorators."""
from . import todos
