"""
Cascading deletes for ideas and users.

The schema has no ON DELETE CASCADE, so dependent rows are removed here in a
fixed order inside one transaction. Any failure rolls the whole thing back:
nobody ever sees the votes of an idea gone while the idea itself survives.

Ideas outlive their authors. Deleting a user hands their ideas (and the
categories they own) to a shared "anonymous" sentinel account.
"""

import logging
import secrets
from dataclasses import dataclass
from typing import Optional

from sqlalchemy import delete, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from ideaboard.config import settings
from ideaboard.errors import NotFound, ValidationFailed
from ideaboard.models.category import Category
from ideaboard.models.comment import Comment
from ideaboard.models.idea import Idea
from ideaboard.models.user import Role, User
from ideaboard.models.vote import Vote
from ideaboard.services.passwords import hash_password

logger = logging.getLogger(__name__)


@dataclass
class IdeaDeletion:
    idea_id: int
    votes: int
    comments: int


@dataclass
class UserDeletion:
    user_id: int
    votes: int
    comments: int
    reassigned_ideas: int
    anonymous_user_id: int


async def _delete_votes(db: AsyncSession, *criteria) -> int:
    result = await db.execute(delete(Vote).where(*criteria))
    return result.rowcount or 0


async def _delete_comments(db: AsyncSession, *criteria) -> int:
    result = await db.execute(delete(Comment).where(*criteria))
    return result.rowcount or 0


async def _find_anonymous_user(db: AsyncSession) -> Optional[User]:
    result = await db.execute(select(User).where(User.email == settings.ANONYMOUS_EMAIL))
    return result.scalar_one_or_none()


async def get_or_create_anonymous_user(db: AsyncSession) -> User:
    """
    Return the sentinel account, creating it on first use.

    The insert runs in a SAVEPOINT. If a concurrent request created the
    sentinel first, the email index rejects ours, only the savepoint is
    rolled back and the winner's row is fetched instead.
    """
    sentinel = await _find_anonymous_user(db)
    if sentinel:
        return sentinel

    try:
        async with db.begin_nested():
            sentinel = User(
                email=settings.ANONYMOUS_EMAIL,
                name=settings.ANONYMOUS_NAME,
                password_hash=hash_password(secrets.token_urlsafe(32)),
                role=Role.USER,
            )
            db.add(sentinel)
    except IntegrityError:
        logger.info("Anonymous user was created concurrently; re-fetching")
        sentinel = await _find_anonymous_user(db)
        if sentinel is None:
            raise
        return sentinel

    logger.info("Created anonymous sentinel user %s", sentinel.id)
    return sentinel


async def delete_idea(db: AsyncSession, idea_id: int) -> IdeaDeletion:
    """Votes, then comments, then the idea; all or nothing."""
    if not await db.get(Idea, idea_id):
        raise NotFound("Idea not found")

    try:
        votes = await _delete_votes(db, Vote.idea_id == idea_id)
        comments = await _delete_comments(db, Comment.idea_id == idea_id)
        await db.execute(delete(Idea).where(Idea.id == idea_id))
        await db.commit()
    except Exception:
        await db.rollback()
        logger.exception("Deleting idea %s failed; rolled back", idea_id)
        raise

    logger.info("Deleted idea %s with %s vote(s) and %s comment(s)", idea_id, votes, comments)
    return IdeaDeletion(idea_id=idea_id, votes=votes, comments=comments)


async def delete_user(db: AsyncSession, user_id: int) -> UserDeletion:
    """
    Remove a user without losing their ideas.

    Order: the user's votes, the user's comments, find-or-create the
    sentinel, re-point the user's ideas and categories at it, delete the
    user row. One transaction.
    """
    user = await db.get(User, user_id)
    if not user:
        raise NotFound("User not found")
    if user.email == settings.ANONYMOUS_EMAIL:
        raise ValidationFailed("The anonymous user cannot be deleted")

    try:
        votes = await _delete_votes(db, Vote.user_id == user_id)
        comments = await _delete_comments(db, Comment.user_id == user_id)
        sentinel = await get_or_create_anonymous_user(db)
        sentinel_id = sentinel.id
        reassigned = await db.execute(
            update(Idea).where(Idea.author_id == user_id).values(author_id=sentinel_id)
        )
        await db.execute(
            update(Category).where(Category.user_id == user_id).values(user_id=sentinel_id)
        )
        await db.execute(delete(User).where(User.id == user_id))
        await db.commit()
    except Exception:
        await db.rollback()
        logger.exception("Deleting user %s failed; rolled back", user_id)
        raise

    outcome = UserDeletion(
        user_id=user_id,
        votes=votes,
        comments=comments,
        reassigned_ideas=reassigned.rowcount or 0,
        anonymous_user_id=sentinel_id,
    )
    logger.info(
        "Deleted user %s: %s vote(s), %s comment(s), %s idea(s) moved to user %s",
        user_id, outcome.votes, outcome.comments, outcome.reassigned_ideas, sentinel_id,
    )
    return outcome
