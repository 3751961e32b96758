"""Current shopper profile."""

from fastapi import APIRouter, Depends
from libs.auth.dependencies import get_current_user
from libs.auth.models import AuthUser
from libs.db.session import get_async_db
from services.storefront_service.models import User
from services.storefront_service.schemas import UserResponse
from sqlalchemy.ext.asyncio import AsyncSession

router = APIRouter(tags=["account"])

PROFILE_CLAIMS = ("email", "first_name", "last_name", "profile_image_url")


@router.get("/auth/user", response_model=UserResponse)
async def get_auth_user(
    current_user: AuthUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_db),
):
    """Return the shopper's profile, syncing it from the token claims."""
    user = await db.get(User, current_user.user_id)
    if user is None:
        user = User(id=current_user.user_id)
        db.add(user)

    for field in PROFILE_CLAIMS:
        value = getattr(current_user, field)
        if value is not None:
            setattr(user, field, value)

    await db.commit()
    await db.refresh(user)
    return user
