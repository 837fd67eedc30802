"""User Pydantic schemas — registration, login, profile output."""

from datetime import datetime
from typing import List, Optional

from pydantic import EmailStr, Field

from ideaboard.models.idea import IdeaStatus
from ideaboard.models.user import Role
from ideaboard.schemas.common import ApiModel


class UserRegister(ApiModel):
    """Fields submitted on the sign-up form."""
    name: Optional[str] = None
    email: EmailStr
    password: str = Field(min_length=1)


class UserLogin(ApiModel):
    email: EmailStr
    password: str


class UserUpdate(ApiModel):
    """Partial profile update; omitted fields stay untouched."""
    name: Optional[str] = None
    email: Optional[EmailStr] = None
    password: Optional[str] = Field(default=None, min_length=1)


class UserOut(ApiModel):
    """Public user representation returned by the API."""
    id: int
    name: Optional[str] = None
    email: str
    role: Role
    created_at: Optional[datetime] = None


class ProfileIdea(ApiModel):
    id: int
    title: str
    status: IdeaStatus
    created_at: Optional[datetime] = None
    vote_count: int = 0
    comment_count: int = 0


class UserProfile(UserOut):
    ideas: List[ProfileIdea] = []
    idea_count: int = 0
    vote_count: int = 0
