"""FastAPI dependency injection functions."""

from typing import Annotated

from fastapi import Depends, Request

from .config import Settings, get_settings
from .consultant.service import ConsultantService
from .infrastructure import SessionStore


async def get_consultant(request: Request) -> ConsultantService:
    """Get the ConsultantService built at startup."""
    return request.app.state.consultant


async def get_session_store(request: Request) -> SessionStore:
    """Get the chat history store from app state."""
    return request.app.state.session_store


# Type aliases for dependency injection
ConsultantDep = Annotated[ConsultantService, Depends(get_consultant)]
SessionStoreDep = Annotated[SessionStore, Depends(get_session_store)]
SettingsDep = Annotated[Settings, Depends(get_settings)]
