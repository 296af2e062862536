from typing import Optional

from fastapi import Header, Request

from files_manager.core.exceptions import Unauthorized
from files_manager.models.user import User


async def get_current_user(request: Request, x_token: Optional[str] = Header(None)) -> User:
    return await request.app.state.session_manager.resolve_session(x_token)


async def get_optional_user(request: Request, x_token: Optional[str] = Header(None)) -> Optional[User]:
    if not x_token:
        return None
    try:
        return await request.app.state.session_manager.resolve_session(x_token)
    except Unauthorized:
        return None
