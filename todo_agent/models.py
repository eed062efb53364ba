"""Pydantic models for todo items, list filters and partial updates."""
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

Priority = Literal["low", "medium", "high"]
PRIORITIES = ("low", "medium", "high")


class Todo(BaseModel):
    """A single todo item. Serializes with camelCase keys (persisted shape)."""

    model_config = ConfigDict(populate_by_name=True)

    id: int
    title: str
    completed: bool = False
    created_at: str = Field(alias="createdAt")
    due_date: Optional[str] = Field(default=None, alias="dueDate")
    priority: Optional[Priority] = None

    def to_dict(self) -> dict:
        return self.model_dump(by_alias=True, exclude_none=True)


class TodoFilter(BaseModel):
    """Conjunctive list filter. Unset fields don't constrain the result."""

    completed: Optional[bool] = None
    date: Optional[str] = None
    priority: Optional[Priority] = None

    def matches(self, todo: Todo) -> bool:
        if self.completed is not None and todo.completed != self.completed:
            return False
        if self.date and todo.due_date != self.date:
            return False
        if self.priority and todo.priority != self.priority:
            return False
        return True


class TodoUpdate(BaseModel):
    """Partial update; only fields explicitly set are merged."""

    model_config = ConfigDict(populate_by_name=True)

    title: Optional[str] = None
    completed: Optional[bool] = None
    due_date: Optional[str] = Field(default=None, alias="dueDate")
    priority: Optional[Priority] = None

    def changes(self) -> dict:
        return self.model_dump(include=self.model_fields_set)
