"""Todo tools: create, list, complete, update and delete todos by id or title."""
import logging
from typing import Optional

from pydantic import BaseModel, ConfigDict, ValidationInfo, field_validator

from ...models import Priority, PRIORITIES, TodoFilter, TodoUpdate
from ..registry import register_tool, ToolResult, ToolParam

logger = logging.getLogger(__name__)


class _Args(BaseModel):
    model_config = ConfigDict(extra="forbid")

    @field_validator("*", mode="before")
    @classmethod
    def blank_is_absent(cls, value, info: ValidationInfo):
        # "" stands for an omitted optional argument
        if value == "" and not cls.model_fields[info.field_name].is_required():
            return None
        return value


class CreateTodoArgs(_Args):
    title: str
    dueDate: Optional[str] = None
    priority: Optional[Priority] = None


class ListTodosArgs(_Args):
    completed: Optional[bool] = None
    date: Optional[str] = None
    priority: Optional[Priority] = None


class TargetArgs(_Args):
    id: Optional[int] = None
    title: Optional[str] = None


class UpdateTodoArgs(TargetArgs):
    newTitle: Optional[str] = None
    dueDate: Optional[str] = None
    priority: Optional[Priority] = None


_ID_PARAM = ToolParam("id", type="number", description="The ID of the todo", required=False)
_TITLE_PARAM = ToolParam("title", description="Search for todo by title if ID is not known", required=False)


class _Unresolved(Exception):
    def __init__(self, result: ToolResult):
        self.result = result


def _resolve_id(args: TargetArgs, store, with_suggestions: bool = False) -> int:
    """Pick the target id: explicit id wins, otherwise look the title up."""
    if args.id:
        return args.id
    if args.title and args.title.strip():
        found = store.find_by_title(args.title)
        if found:
            return found.id
        not_found = f'Could not find todo with title: "{args.title}"'
        if with_suggestions:
            suggestions = store.suggest(args.title, store.tuning.max_suggestions)
            if suggestions:
                raise _Unresolved(ToolResult(
                    success=False,
                    message=f"{not_found}. Did you mean one of these?",
                    data={"suggestions": [{"id": t.id, "title": t.title} for t in suggestions]},
                ))
        raise _Unresolved(ToolResult(success=False, message=not_found))
    raise _Unresolved(ToolResult(success=False, message="Please provide either id or title"))


@register_tool(
    "createTodo",
    args_model=CreateTodoArgs,
    description="Create a new todo item with a title and optional due date and priority",
    params=[
        ToolParam("title", description="The title or description of the todo"),
        ToolParam("dueDate", description="The due date in YYYY-MM-DD format (optional)", required=False),
        ToolParam("priority", description="The priority level (optional)", required=False, enum=PRIORITIES),
    ],
)
def create_todo(args: CreateTodoArgs, store) -> ToolResult:
    if not args.title.strip():
        return ToolResult(success=False, message="Please provide a title for the todo")
    todo = store.create(args.title, due_date=args.dueDate, priority=args.priority)
    return ToolResult(success=True, message=f'Created todo: "{todo.title}"', data={"todo": todo.to_dict()})


@register_tool(
    "listTodos",
    args_model=ListTodosArgs,
    description=("List all todos. Can optionally filter by completion status, date, or priority. "
                 "Call with no parameters to list all todos."),
    params=[
        ToolParam("completed", type="boolean", description="Filter by completion status (optional)",
                  required=False),
        ToolParam("date", description="Filter by due date in YYYY-MM-DD format (optional)", required=False),
        ToolParam("priority", description="Filter by priority (optional)", required=False, enum=PRIORITIES),
    ],
)
def list_todos(args: ListTodosArgs, store) -> ToolResult:
    todos = store.list(TodoFilter(completed=args.completed, date=args.date, priority=args.priority))
    return ToolResult(
        success=True,
        message=f"Found {len(todos)} todo(s)",
        data={"count": len(todos), "todos": [t.to_dict() for t in todos]},
    )


@register_tool(
    "completeTodo",
    args_model=TargetArgs,
    description="Mark a todo as completed by its ID or title",
    params=[_ID_PARAM, _TITLE_PARAM],
)
def complete_todo(args: TargetArgs, store) -> ToolResult:
    try:
        todo_id = _resolve_id(args, store)
    except _Unresolved as e:
        return e.result

    if store.complete(todo_id):
        return ToolResult(success=True, message="Marked todo as completed")
    return ToolResult(success=False, message=f"Could not find todo with ID {todo_id}")


@register_tool(
    "updateTodo",
    args_model=UpdateTodoArgs,
    description="Update a todo by its ID or title with new fields",
    params=[
        _ID_PARAM,
        _TITLE_PARAM,
        ToolParam("newTitle", description="New title for the todo", required=False),
        ToolParam("dueDate", description="New due date in YYYY-MM-DD format", required=False),
        ToolParam("priority", description="New priority level", required=False, enum=PRIORITIES),
    ],
)
def update_todo(args: UpdateTodoArgs, store) -> ToolResult:
    try:
        todo_id = _resolve_id(args, store, with_suggestions=True)
    except _Unresolved as e:
        return e.result

    changes = {}
    if args.newTitle and args.newTitle.strip():
        changes["title"] = args.newTitle.strip()
    if args.dueDate:
        changes["dueDate"] = args.dueDate
    if args.priority:
        changes["priority"] = args.priority

    logger.info(f"Updating todo {todo_id} with {changes}")
    if not store.update(todo_id, TodoUpdate(**changes)):
        return ToolResult(success=False, message=f"Could not find todo with ID {todo_id}")
    return ToolResult(
        success=True,
        message="Updated todo successfully",
        data={"updatedTodo": store.get(todo_id).to_dict()},
    )


@register_tool(
    "deleteTodo",
    args_model=TargetArgs,
    description="Delete a todo by its ID or title",
    params=[_ID_PARAM, _TITLE_PARAM],
)
def delete_todo(args: TargetArgs, store) -> ToolResult:
    try:
        todo_id = _resolve_id(args, store)
    except _Unresolved as e:
        return e.result

    if store.delete(todo_id):
        return ToolResult(success=True, message="Deleted todo")
    return ToolResult(success=False, message=f"Could not find todo with ID {todo_id}")
