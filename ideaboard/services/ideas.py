"""Idea queries and single-row mutations (creation, status, admin edits)."""

import logging
from collections import defaultdict
from typing import Dict, List, Optional

from sqlalchemy import exists, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from ideaboard.errors import NotFound, ValidationFailed
from ideaboard.models.category import Category
from ideaboard.models.comment import Comment
from ideaboard.models.idea import Idea, IdeaStatus
from ideaboard.models.vote import Vote
from ideaboard.schemas.comment import CommentOut
from ideaboard.schemas.common import NameRef
from ideaboard.schemas.idea import IdeaDetail, IdeaOut

logger = logging.getLogger(__name__)

SORT_NEWEST = "newest"
SORT_MOST_VOTES = "mostVotes"
SORT_ORDERS = (SORT_NEWEST, SORT_MOST_VOTES)


def _count_subqueries():
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
    return vote_counts, comment_counts


def to_idea_out(idea: Idea, vote_count: int = 0, comment_count: int = 0) -> IdeaOut:
    return IdeaOut(
        id=idea.id,
        title=idea.title,
        description=idea.description,
        status=idea.status,
        author_id=idea.author_id,
        category_id=idea.category_id,
        created_at=idea.created_at,
        updated_at=idea.updated_at,
        author=NameRef(name=idea.author.name if idea.author else None),
        category=NameRef(name=idea.category.name if idea.category else None),
        vote_count=vote_count,
        comment_count=comment_count,
    )


async def list_ideas(
    db: AsyncSession,
    status: Optional[IdeaStatus] = None,
    category_id: Optional[int] = None,
    author_id: Optional[int] = None,
    voted_by: Optional[int] = None,
    sort: str = SORT_NEWEST,
    idea_id: Optional[int] = None,
) -> List[IdeaOut]:
    """
    Ideas with author / category names and vote / comment counts.

    ``voted_by`` keeps only ideas that user has a vote row for. Newest first
    unless ``sort`` is ``mostVotes``.
    """
    if sort not in SORT_ORDERS:
        raise ValidationFailed(f"Invalid sort: expected one of {', '.join(SORT_ORDERS)}")

    vote_counts, comment_counts = _count_subqueries()
    votes = func.coalesce(vote_counts.c.n, 0)
    comments = func.coalesce(comment_counts.c.n, 0)

    stmt = (
        select(Idea, votes, comments)
        .outerjoin(vote_counts, vote_counts.c.idea_id == Idea.id)
        .outerjoin(comment_counts, comment_counts.c.idea_id == Idea.id)
    )
    # Rows committed earlier in this session must be re-read, server defaults included.
    stmt = stmt.execution_options(populate_existing=True)
    if idea_id is not None:
        stmt = stmt.where(Idea.id == idea_id)
    if status is not None:
        stmt = stmt.where(Idea.status == status)
    if category_id is not None:
        stmt = stmt.where(Idea.category_id == category_id)
    if author_id is not None:
        stmt = stmt.where(Idea.author_id == author_id)
    if voted_by is not None:
        stmt = stmt.where(
            exists().where(Vote.idea_id == Idea.id, Vote.user_id == voted_by)
        )

    if sort == SORT_MOST_VOTES:
        stmt = stmt.order_by(votes.desc(), Idea.created_at.desc(), Idea.id.desc())
    else:
        stmt = stmt.order_by(Idea.created_at.desc(), Idea.id.desc())

    result = await db.execute(stmt)
    return [to_idea_out(idea, v, c) for idea, v, c in result.all()]


async def get_idea(db: AsyncSession, idea_id: int) -> Idea:
    idea = await db.get(Idea, idea_id)
    if not idea:
        raise NotFound("Idea not found")
    return idea


async def load_idea_out(db: AsyncSession, idea_id: int) -> IdeaOut:
    ideas = await list_ideas(db, idea_id=idea_id)
    if not ideas:
        raise NotFound("Idea not found")
    return ideas[0]


async def load_idea_detail(db: AsyncSession, idea_id: int) -> IdeaDetail:
    idea = await load_idea_out(db, idea_id)
    result = await db.execute(
        select(Comment)
        .where(Comment.idea_id == idea_id)
        .order_by(Comment.created_at.desc(), Comment.id.desc())
    )
    comments = [CommentOut.model_validate(c) for c in result.scalars().all()]
    return IdeaDetail(**idea.model_dump(), comments=comments)


async def list_idea_details(db: AsyncSession) -> List[IdeaDetail]:
    """Every idea, newest first, each with its comments (newest first)."""
    ideas = await list_ideas(db)
    result = await db.execute(
        select(Comment).order_by(Comment.created_at.desc(), Comment.id.desc())
    )
    by_idea: Dict[int, List[CommentOut]] = defaultdict(list)
    for comment in result.scalars().all():
        by_idea[comment.idea_id].append(CommentOut.model_validate(comment))
    return [IdeaDetail(**idea.model_dump(), comments=by_idea[idea.id]) for idea in ideas]


async def create_idea(
    db: AsyncSession, author_id: int, title: str, description: str, category_id: int
) -> IdeaOut:
    category = await db.get(Category, category_id)
    if not category:
        raise NotFound("Category not found")

    idea = Idea(
        title=title,
        description=description,
        author_id=author_id,
        category_id=category_id,
        status=IdeaStatus.pending,
    )
    db.add(idea)
    await db.commit()
    logger.info("User %s submitted idea %s in category %s", author_id, idea.id, category_id)
    return await load_idea_out(db, idea.id)


async def set_status(db: AsyncSession, idea_id: int, status: IdeaStatus) -> IdeaOut:
    """Move an idea to any status; re-applying the current one is harmless."""
    idea = await get_idea(db, idea_id)
    previous = idea.status
    idea.status = status
    await db.commit()
    logger.info("Idea %s status %s -> %s", idea_id, previous.value, status.value)
    return await load_idea_out(db, idea_id)


async def update_idea(
    db: AsyncSession,
    idea_id: int,
    status: Optional[IdeaStatus] = None,
    title: Optional[str] = None,
    description: Optional[str] = None,
) -> IdeaOut:
    idea = await get_idea(db, idea_id)
    if status is not None:
        idea.status = status
    if title is not None:
        idea.title = title
    if description is not None:
        idea.description = description
    await db.commit()
    return await load_idea_out(db, idea_id)

