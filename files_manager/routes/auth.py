from typing import Optional

from fastapi import APIRouter, Depends, Header, Response, status

from files_manager.core.security import extract_basic_credential
from files_manager.dependencies.services import get_session_manager
from files_manager.schemas.user import Token
from files_manager.services.session_manager import SessionManager

router = APIRouter(tags=["Auth"])


@router.get("/connect", response_model=Token)
async def connect(
    authorization: Optional[str] = Header(None),
    sessions: SessionManager = Depends(get_session_manager),
):
    token = await sessions.issue_session(extract_basic_credential(authorization))
    return Token(token=token)


@router.get("/disconnect", status_code=status.HTTP_204_NO_CONTENT)
async def disconnect(
    x_token: Optional[str] = Header(None),
    sessions: SessionManager = Depends(get_session_manager),
):
    await sessions.end_session(x_token)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
