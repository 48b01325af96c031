"""Profile router exposing the authenticated user's own record."""

from fastapi import APIRouter, Depends

from api.dependencies import get_current_user_id, get_user_store
from api.errors import NotFoundError
from models.user import ProfileResponse, UserResponse
from services.auth_service import UserStore


router = APIRouter(
    prefix="/api/profile",
    tags=["Profile"],
    dependencies=[Depends(get_current_user_id)]
)


@router.get("", response_model=ProfileResponse)
async def get_profile(
    user_id: str = Depends(get_current_user_id),
    users: UserStore = Depends(get_user_store)
):
    """Get the authenticated user's profile without the password hash."""
    user = await users.get_by_id(user_id)
    if user is None:
        raise NotFoundError("User")
    return ProfileResponse(user=UserResponse.from_document(user))
