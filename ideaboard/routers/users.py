"""Users router – own account, public profiles, profile edits."""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from ideaboard.database import get_db
from ideaboard.errors import Forbidden
from ideaboard.routers.auth import require_user
from ideaboard.schemas.user import UserOut, UserProfile, UserUpdate
from ideaboard.services import accounts
from ideaboard.services.permissions import Principal

router = APIRouter(prefix="/users", tags=["users"])


@router.get("/me", response_model=UserOut)
async def read_me(
    principal: Principal = Depends(require_user),
    db: AsyncSession = Depends(get_db),
):
    """Return the authenticated user's account."""
    return await accounts.get_user(db, principal.id)


@router.get("/{user_id}", response_model=UserProfile)
async def read_profile(user_id: int, db: AsyncSession = Depends(get_db)):
    """Public profile with the user's ideas and their vote / comment counts."""
    return await accounts.build_profile(db, user_id)


@router.patch("/{user_id}", response_model=UserOut)
async def update_profile(
    user_id: int,
    payload: UserUpdate,
    principal: Principal = Depends(require_user),
    db: AsyncSession = Depends(get_db),
):
    """Update name, email or password. Only the account owner may do this."""
    if principal.id != user_id:
        raise Forbidden("You can only edit your own profile")

    user = await accounts.get_user(db, user_id)
    return await accounts.update_user(
        db,
        user,
        name=payload.name,
        email=payload.email,
        password=payload.password,
    )
