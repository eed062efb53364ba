"""REST API routes: agent submit/state and direct todo CRUD."""
import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Request, Response, status
from pydantic import BaseModel, ConfigDict, Field

from .agent import TodoAgent
from .models import Priority, TodoFilter, TodoUpdate
from .store import TodoStore

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api")


# ── Pydantic schemas ──────────────────────────────────────────

class AgentRequest(BaseModel):
    text: str

class AgentReply(BaseModel):
    reply: str
    loading: bool

class AgentState(BaseModel):
    reply: str
    loading: bool
    state: str

class TodoCreate(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    title: str
    due_date: Optional[str] = Field(default=None, alias="dueDate")
    priority: Optional[Priority] = None

class TodoOut(BaseModel):
    id: int
    title: str
    completed: bool
    createdAt: str
    dueDate: Optional[str] = None
    priority: Optional[Priority] = None


# ── Dependencies ──────────────────────────────────────────────

def get_store(request: Request) -> TodoStore:
    return request.app.state.store


def get_agent(request: Request) -> TodoAgent:
    return request.app.state.agent


def _out(todo) -> TodoOut:
    return TodoOut(**todo.model_dump(by_alias=True))


def _require(store: TodoStore, todo_id: int):
    todo = store.get(todo_id)
    if todo is None:
        raise HTTPException(status_code=404, detail=f"Todo {todo_id} not found")
    return todo


# ── Agent ─────────────────────────────────────────────────────

@router.post("/agent", response_model=AgentReply)
async def submit(req: AgentRequest, agent: TodoAgent = Depends(get_agent)):
    reply = await agent.submit(req.text)
    return AgentReply(reply=reply, loading=agent.loading)


@router.get("/agent", response_model=AgentState)
async def agent_state(agent: TodoAgent = Depends(get_agent)):
    return AgentState(reply=agent.reply, loading=agent.loading, state=agent.state)


# ── Todos ─────────────────────────────────────────────────────

@router.get("/todos", response_model=List[TodoOut])
async def list_todos(
    completed: Optional[bool] = None,
    date: Optional[str] = None,
    priority: Optional[Priority] = None,
    store: TodoStore = Depends(get_store),
):
    todos = store.list(TodoFilter(completed=completed, date=date, priority=priority))
    return [_out(t) for t in todos]


@router.post("/todos", response_model=TodoOut, status_code=status.HTTP_201_CREATED)
async def create_todo(req: TodoCreate, store: TodoStore = Depends(get_store)):
    if not req.title.strip():
        raise HTTPException(status_code=422, detail="Title must not be empty")
    todo = store.create(req.title, due_date=req.due_date, priority=req.priority)
    logger.info(f"Created todo {todo.id} via API")
    return _out(todo)


@router.patch("/todos/{todo_id}", response_model=TodoOut)
async def update_todo(todo_id: int, req: TodoUpdate, store: TodoStore = Depends(get_store)):
    if "title" in req.model_fields_set:
        if not (req.title or "").strip():
            raise HTTPException(status_code=422, detail="Title must not be empty")
        req.title = req.title.strip()
    if "completed" in req.model_fields_set and req.completed is None:
        raise HTTPException(status_code=422, detail="completed must be true or false")
    if not store.update(todo_id, req):
        raise HTTPException(status_code=404, detail=f"Todo {todo_id} not found")
    return _out(store.get(todo_id))


@router.post("/todos/{todo_id}/complete", response_model=TodoOut)
async def complete_todo(todo_id: int, store: TodoStore = Depends(get_store)):
    if not store.complete(todo_id):
        raise HTTPException(status_code=404, detail=f"Todo {todo_id} not found")
    return _out(_require(store, todo_id))


@router.post("/todos/{todo_id}/uncomplete", response_model=TodoOut)
async def uncomplete_todo(todo_id: int, store: TodoStore = Depends(get_store)):
    if not store.uncomplete(todo_id):
        raise HTTPException(status_code=404, detail=f"Todo {todo_id} not found")
    return _out(_require(store, todo_id))


@router.delete("/todos/{todo_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_todo(todo_id: int, store: TodoStore = Depends(get_store)):
    if not store.delete(todo_id):
        raise HTTPException(status_code=404, detail=f"Todo {todo_id} not found")
    return Response(status_code=status.HTTP_204_NO_CONTENT)
