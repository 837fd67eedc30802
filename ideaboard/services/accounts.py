"""User accounts: creation, profile edits and the public profile view."""

import logging
from typing import Optional

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from ideaboard.config import settings
from ideaboard.errors import Conflict, NotFound, ValidationFailed
from ideaboard.models.comment import Comment
from ideaboard.models.idea import Idea
from ideaboard.models.user import Role, User
from ideaboard.models.vote import Vote
from ideaboard.schemas.user import ProfileIdea, UserProfile
from ideaboard.services.passwords import hash_password, verify_password

logger = logging.getLogger(__name__)


async def find_user_by_email(db: AsyncSession, email: str) -> Optional[User]:
    result = await db.execute(select(User).where(User.email == email))
    return result.scalar_one_or_none()


async def get_user(db: AsyncSession, user_id: int) -> User:
    user = await db.get(User, user_id)
    if not user:
        raise NotFound("User not found")
    return user


async def _ensure_email_free(db: AsyncSession, email: str, user_id: Optional[int] = None) -> None:
    # The sentinel is only ever created by the deletion service.
    if email.lower() == settings.ANONYMOUS_EMAIL.lower():
        raise Conflict("Email is reserved")
    existing = await find_user_by_email(db, email)
    if existing and existing.id != user_id:
        raise Conflict("Email already in use")


async def _commit_account(db: AsyncSession) -> None:
    try:
        await db.commit()
    except IntegrityError:
        await db.rollback()
        logger.warning("Email collision while saving an account")
        raise Conflict("Email already in use")


async def create_user(
    db: AsyncSession,
    email: str,
    password: str,
    name: Optional[str] = None,
    role: Role = Role.USER,
) -> User:
    """
    Create and commit a user.

    The unique index on ``email`` is the real guard; the lookup only gives a
    friendlier message in the common case.
    """
    await _ensure_email_free(db, email)
    user = User(email=email, name=name, password_hash=hash_password(password), role=role)
    db.add(user)
    await _commit_account(db)
    await db.refresh(user)
    logger.info("Created user %s (%s)", user.id, user.role.value)
    return user


async def update_user(
    db: AsyncSession,
    user: User,
    name: Optional[str] = None,
    email: Optional[str] = None,
    password: Optional[str] = None,
    role: Optional[Role] = None,
) -> User:
    """Apply the given changes; ``None`` means "leave as is"."""
    if user.email == settings.ANONYMOUS_EMAIL:
        raise ValidationFailed("The anonymous user cannot be edited")
    if email is not None and email != user.email:
        await _ensure_email_free(db, email, user.id)
        user.email = email
    if name is not None:
        user.name = name
    if password is not None:
        user.password_hash = hash_password(password)
    if role is not None:
        user.role = role
    await _commit_account(db)
    await db.refresh(user)
    return user


async def authenticate(db: AsyncSession, email: str, password: str) -> Optional[User]:
    """Return the user when the credentials match, else ``None``."""
    user = await find_user_by_email(db, email)
    if not user or not verify_password(password, user.password_hash):
        return None
    return user


async def build_profile(db: AsyncSession, user_id: int) -> UserProfile:
    """Public profile: the user plus their ideas with vote / comment counts."""
    user = await get_user(db, user_id)

    vote_counts = (
        select(Vote.idea_id, func.count(Vote.id).label("n"))
        .group_by(Vote.idea_id)
        .subquery()
    )
    comment_counts = (
        select(Comment.idea_id, func.count(Comment.id).label("n"))
        .group_by(Comment.idea_id)
        .subquery()
    )
    rows = await db.execute(
        select(
            Idea.id,
            Idea.title,
            Idea.status,
            Idea.created_at,
            func.coalesce(vote_counts.c.n, 0),
            func.coalesce(comment_counts.c.n, 0),
        )
        .outerjoin(vote_counts, vote_counts.c.idea_id == Idea.id)
        .outerjoin(comment_counts, comment_counts.c.idea_id == Idea.id)
        .where(Idea.author_id == user_id)
        .order_by(Idea.created_at.desc(), Idea.id.desc())
    )
    ideas = [
        ProfileIdea(
            id=idea_id,
            title=title,
            status=status,
            created_at=created_at,
            vote_count=votes,
            comment_count=comments,
        )
        for idea_id, title, status, created_at, votes, comments in rows.all()
    ]

    votes_cast = (
        await db.execute(select(func.count(Vote.id)).where(Vote.user_id == user_id))
    ).scalar() or 0

    return UserProfile(
        id=user.id,
        name=user.name,
        email=user.email,
        role=user.role,
        created_at=user.created_at,
        ideas=ideas,
        idea_count=len(ideas),
        vote_count=votes_cast,
    )
