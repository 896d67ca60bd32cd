from __future__ import annotations

from fastapi import APIRouter

from .endpoints import capture, health, metadata, notes, reminders, todos

api_router = APIRouter()

api_router.include_router(health.router, prefix="/health", tags=["health"])
api_router.include_router(notes.router, prefix="/notes", tags=["notes"])
api_router.include_router(todos.router, prefix="/todos", tags=["todos"])
api_router.include_router(reminders.router, prefix="/reminders", tags=["reminders"])
api_router.include_router(capture.router, prefix="/capture", tags=["capture"])
api_router.include_router(metadata.router, prefix="/metadata", tags=["metadata"])
