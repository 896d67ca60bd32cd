from __future__ import annotations

import asyncio
import secrets
from datetime import timedelta

from fastapi import Depends, Header, HTTPException, Request, Security, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from supabase import Client  # noqa: TCH002

from voicenotes.config import settings
from voicenotes.core.repositories.implementations.supabase.note_repository import (
    SupabaseNoteRepository,
)
from voicenotes.core.repositories.implementations.supabase.reminder_repository import (
    SupabaseReminderRepository,
)
from voicenotes.core.repositories.implementations.supabase.todo_repository import (
    SupabaseTodoRepository,
)
from voicenotes.core.repositories.note_repository import NoteRepository  # noqa: TCH001
from voicenotes.core.repositories.reminder_repository import ReminderRepository  # noqa: TCH001
from voicenotes.core.repositories.todo_repository import TodoRepository  # noqa: TCH001
from voicenotes.core.schemas.auth import AuthUser
from voicenotes.core.services.note_service import NoteService
from voicenotes.core.services.reminder_service import ReminderDispatcher
from voicenotes.core.services.todo_service import TodoService
from voicenotes.db.base import create_request_supabase_client, get_supabase_admin_client
from voicenotes.utils.logging import get_logger

logger = get_logger(__name__)

# Use auto_error=False to handle missing tokens gracefully
http_bearer = HTTPBearer(auto_error=False)


def get_request_supabase_client(request: Request) -> Client:
    """Create a request-scoped Supabase client and set PostgREST bearer.

    Extracts the Authorization: Bearer <jwt> header if present and configures
    PostgREST to enforce RLS for the user.
    """
    auth_header = request.headers.get("authorization") or request.headers.get("Authorization")
    jwt: str | None = None
    if auth_header and auth_header.lower().startswith("bearer "):
        jwt = auth_header.split(" ", 1)[1].strip()
    return create_request_supabase_client(jwt)


def get_note_repository(client: Client = Depends(get_request_supabase_client)) -> NoteRepository:
    """Get a request-scoped note repository instance using request client."""
    return SupabaseNoteRepository(client)


def get_todo_repository(client: Client = Depends(get_request_supabase_client)) -> TodoRepository:
    """Get a request-scoped todo repository instance using request client."""
    return SupabaseTodoRepository(client)


def get_reminder_repository() -> ReminderRepository:
    """Reminder storage runs with the service role client (all users' todos)."""
    return SupabaseReminderRepository(get_supabase_admin_client())


def get_note_service(repo: NoteRepository = Depends(get_note_repository)) -> NoteService:
    return NoteService(repo)


def get_todo_service(repo: TodoRepository = Depends(get_todo_repository)) -> TodoService:
    return TodoService(repo)


def get_reminder_dispatcher(
    repo: ReminderRepository = Depends(get_reminder_repository),
) -> ReminderDispatcher:
    return ReminderDispatcher(repo, window=timedelta(minutes=settings.reminder_window_minutes))


def verify_dispatch_secret(
    x_dispatch_secret: str | None = Header(default=None),
) -> None:
    """Require the shared trigger secret when one is configured."""
    expected = settings.dispatch_secret
    if not expected:
        return
    if not x_dispatch_secret or not secrets.compare_digest(x_dispatch_secret, expected):
        logger.warning("Reminder dispatch rejected: bad or missing secret")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid dispatch secret",
        )


async def get_current_user(
    credentials: HTTPAuthorizationCredentials | None = Security(http_bearer),
) -> AuthUser:
    """Validate JWT via Supabase and return authenticated user."""
    if not credentials:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Authentication required",
            headers={"WWW-Authenticate": "Bearer"},
        )
    jwt = credentials.credentials
    if not jwt or len(jwt.split(".")) != 3:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid token format",
            headers={"WWW-Authenticate": "Bearer"},
        )
    supabase = create_request_supabase_client(jwt)
    try:
        resp = await asyncio.to_thread(lambda: supabase.auth.get_user(jwt))
    except Exception as err:
        error_msg = str(err).lower()
        logger.warning(
            "JWT validation failed",
            extra={
                "error_type": type(err).__name__,
                "error_summary": error_msg[:100] if error_msg else "Unknown error",
            }
        )
        detail = "Token is invalid or expired" if ("invalid" in error_msg or "expired" in error_msg) else "Authentication failed"
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=detail,
            headers={"WWW-Authenticate": "Bearer"},
        ) from err
    user = getattr(resp, "user", None)
    user_id = getattr(user, "id", None) if user else None
    if not user_id:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid user data",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return AuthUser(
        id=user_id,
        email=getattr(user, "email", None) or "",
        role=getattr(user, "role", None),
    )
