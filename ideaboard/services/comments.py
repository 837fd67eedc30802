"""Comments on ideas."""

import logging
from typing import List

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from ideaboard.errors import NotFound
from ideaboard.models.comment import Comment
from ideaboard.models.idea import Idea

logger = logging.getLogger(__name__)


async def add_comment(db: AsyncSession, user_id: int, idea_id: int, content: str) -> Comment:
    if not await db.get(Idea, idea_id):
        raise NotFound("Idea not found")

    comment = Comment(content=content, user_id=user_id, idea_id=idea_id)
    db.add(comment)
    await db.commit()
    await db.refresh(comment)
    logger.info("User %s commented on idea %s", user_id, idea_id)
    return comment


async def list_comments(db: AsyncSession, idea_id: int) -> List[Comment]:
    """Comments of one idea, newest first."""
    result = await db.execute(
        select(Comment)
        .where(Comment.idea_id == idea_id)
        .order_by(Comment.created_at.desc(), Comment.id.desc())
    )
    return list(result.scalars().all())


async def delete_comment(db: AsyncSession, comment_id: int) -> None:
    comment = await db.get(Comment, comment_id)
    if not comment:
        raise NotFound("Comment not found")
    await db.delete(comment)
    await db.commit()
    logger.info("Deleted comment %s", comment_id)
