from fastapi import APIRouter, Depends

from files_manager.dependencies.auth import get_current_user
from files_manager.models.user import User
from files_manager.schemas.user import UserResponse

router = APIRouter(
    prefix="/users",
    tags=["Users"]
)


@router.get("/me", response_model=UserResponse)
async def read_users_me(current_user: User = Depends(get_current_user)):
    return current_user
