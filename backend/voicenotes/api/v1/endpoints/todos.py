from __future__ import annotations

from uuid import UUID  # noqa: TCH003

from fastapi import APIRouter, Depends, HTTPException, status

from voicenotes.api.v1.schemas.todo import TodoCreate, TodoRead, TodoUpdate
from voicenotes.core.models.todo import Priority  # noqa: TCH001
from voicenotes.core.schemas.auth import AuthUser  # noqa: TCH001
from voicenotes.core.services.filtering import TodoFilter, TodoSortKey
from voicenotes.core.services.todo_service import TodoService  # noqa: TCH001
from voicenotes.dependencies import get_current_user, get_todo_service

router = APIRouter()


@router.post("/", response_model=TodoRead, status_code=status.HTTP_201_CREATED)
async def create_todo(
    payload: TodoCreate,
    current_user: AuthUser = Depends(get_current_user),
    service: TodoService = Depends(get_todo_service),
):
    try:
        todo = await service.create_todo(payload, user_id=current_user.id)
    except ValueError as err:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(err)) from err
    return TodoRead.model_validate(todo)


@router.get("/", response_model=list[TodoRead])
async def list_todos(
    completed: bool | None = None,
    priority: Priority | None = None,
    search: str | None = None,
    sort: TodoSortKey = TodoSortKey.DUE_DATE,
    current_user: AuthUser = Depends(get_current_user),
    service: TodoService = Depends(get_todo_service),
):
    """List the user's todos matching every given filter.

    `sort=priority` orders high > medium > low; `sort=due_date` (default)
    orders by due date with undated todos last.
    """
    criteria = TodoFilter(is_completed=completed, priority=priority, search=search)
    todos = await service.list_todos(user_id=current_user.id, criteria=criteria, sort=sort)
    return [TodoRead.model_validate(t) for t in todos]


@router.get("/{todo_id}", response_model=TodoRead)
async def get_todo(
    todo_id: UUID,
    current_user: AuthUser = Depends(get_current_user),
    service: TodoService = Depends(get_todo_service),
):
    todo = await service.get_todo(todo_id, user_id=current_user.id)
    if not todo:
        raise HTTPException(status_code=404, detail="Todo not found")
    return TodoRead.model_validate(todo)


@router.patch("/{todo_id}", response_model=TodoRead)
async def update_todo(
    todo_id: UUID,
    payload: TodoUpdate,
    current_user: AuthUser = Depends(get_current_user),
    service: TodoService = Depends(get_todo_service),
):
    try:
        todo = await service.update_todo(todo_id, payload, user_id=current_user.id)
    except ValueError as err:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(err)) from err
    if not todo:
        raise HTTPException(status_code=404, detail="Todo not found")
    return TodoRead.model_validate(todo)


@router.post("/{todo_id}/toggle", response_model=TodoRead)
async def toggle_todo_completed(
    todo_id: UUID,
    current_user: AuthUser = Depends(get_current_user),
    service: TodoService = Depends(get_todo_service),
):
    todo = await service.toggle_completed(todo_id, user_id=current_user.id)
    if not todo:
        raise HTTPException(status_code=404, detail="Todo not found")
    return TodoRead.model_validate(todo)


@router.delete("/{todo_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_todo(
    todo_id: UUID,
    current_user: AuthUser = Depends(get_current_user),
    service: TodoService = Depends(get_todo_service),
):
    deleted = await service.delete_todo(todo_id, user_id=current_user.id)
    if not deleted:
        raise HTTPException(status_code=404, detail="Todo not found")
    return None
