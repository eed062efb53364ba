"""Todo record store: in-memory list with explicit load/save and title matching."""
import logging
import time
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Dict, List, Optional, Union

from pydantic import ValidationError

from .models import Todo, TodoFilter, TodoUpdate

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MatchTuning:
    """Thresholds for title resolution and suggestion ranking."""
    fuzzy_threshold: float = 0.7
    fuzzy_min_length: int = 3
    suggestion_min_score: int = 2
    starts_with_bonus: int = 2
    max_suggestions: int = 3

    @classmethod
    def from_settings(cls, settings) -> "MatchTuning":
        return cls(
            fuzzy_threshold=settings.fuzzy_threshold,
            fuzzy_min_length=settings.fuzzy_min_length,
            suggestion_min_score=settings.suggestion_min_score,
            starts_with_bonus=settings.starts_with_bonus,
            max_suggestions=settings.max_suggestions,
        )


def _char_hits(term: str, title: str) -> int:
    """Count characters of term present anywhere in title (repeats count each time)."""
    return sum(1 for ch in term if ch in title)


class TodoStore:
    """Owns the todo list. Mutations are persisted through the storage collaborator."""

    def __init__(self, storage=None, tuning: Optional[MatchTuning] = None):
        self.storage = storage
        self.tuning = tuning or MatchTuning()
        self._todos: List[Todo] = []
        self._loaded = False

    # ── Persistence ────────────────────────────────────────────

    def load(self):
        """Replace contents with whatever the storage slot holds."""
        items = None
        if self.storage is not None:
            try:
                items = self.storage.load()
            except Exception as e:
                logger.error(f"Failed to load todos from storage: {e}")
                items = None

        todos = []
        for raw in items or []:
            try:
                todos.append(Todo.model_validate(raw))
            except ValidationError as e:
                logger.warning(f"Skipping malformed stored todo {raw!r}: {e}")
        self._todos = todos
        self._loaded = True
        logger.info(f"Loaded {len(self._todos)} todos")

    def save(self):
        """Write the whole list to storage. Failures are logged by the backend."""
        if self.storage is None or not self._loaded:
            return
        self.storage.save([t.to_dict() for t in self._todos])

    # ── CRUD ───────────────────────────────────────────────────

    def _next_id(self) -> int:
        candidate = int(time.time() * 1000)
        if self._todos:
            candidate = max(candidate, max(t.id for t in self._todos) + 1)
        return candidate

    def create(self, title: str, due_date: Optional[str] = None, priority: Optional[str] = None) -> Todo:
        todo = Todo(
            id=self._next_id(),
            title=title.strip(),
            completed=False,
            created_at=datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z"),
            due_date=due_date,
            priority=priority,
        )
        self._todos.append(todo)
        self.save()
        return todo

    def get(self, todo_id: int) -> Optional[Todo]:
        for todo in self._todos:
            if todo.id == todo_id:
                return todo
        return None

    def list(self, filter: Optional[TodoFilter] = None) -> List[Todo]:
        if filter is None:
            return list(self._todos)
        return [t for t in self._todos if filter.matches(t)]

    def complete(self, todo_id: int) -> bool:
        return self._set_completed(todo_id, True)

    def uncomplete(self, todo_id: int) -> bool:
        return self._set_completed(todo_id, False)

    def _set_completed(self, todo_id: int, completed: bool) -> bool:
        todo = self.get(todo_id)
        if todo is None:
            return False
        todo.completed = completed
        self.save()
        return True

    def update(self, todo_id: int, fields: Union[TodoUpdate, Dict]) -> bool:
        """Merge only the supplied fields into the matching todo."""
        if not isinstance(fields, TodoUpdate):
            fields = TodoUpdate.model_validate(fields)
        todo = self.get(todo_id)
        if todo is None:
            return False
        for name, value in fields.changes().items():
            setattr(todo, name, value)
        self.save()
        return True

    def delete(self, todo_id: int) -> bool:
        for i, todo in enumerate(self._todos):
            if todo.id == todo_id:
                del self._todos[i]
                self.save()
                return True
        return False

    # ── Title resolution ───────────────────────────────────────

    def find_by_title(self, title: str) -> Optional[Todo]:
        """Resolve an approximate title: substring first, then character overlap."""
        term = (title or "").lower().strip()
        if not term:
            return None

        for todo in self._todos:
            if term in todo.title.lower():
                return todo

        if len(term) > self.tuning.fuzzy_min_length:
            for todo in self._todos:
                if _char_hits(term, todo.title.lower()) / len(term) > self.tuning.fuzzy_threshold:
                    return todo
        return None

    def suggest(self, title: str, max_results: int = 3) -> List[Todo]:
        """Rank todos whose titles share characters with title."""
        if not title:
            return []
        term = title.lower().strip()
        if not term:
            return []

        scored = []
        for todo in self._todos:
            todo_title = todo.title.lower()
            score = _char_hits(term, todo_title)
            if todo_title.startswith(term[0]):
                score += self.tuning.starts_with_bonus
            if score > self.tuning.suggestion_min_score:
                scored.append((score, todo))

        # sorted() is stable, so ties keep store order
        scored = sorted(scored, key=lambda item: item[0], reverse=True)
        return [todo for _, todo in scored[:max_results]]

    def __len__(self) -> int:
        return len(self._todos)
