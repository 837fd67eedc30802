"""
Vote toggle.

A (user, idea) pair has either zero or one vote row; toggling flips that.
The application-level lookup only decides which way to flip. The unique
constraint on ``votes (user_id, idea_id)`` is what keeps two racing inserts
from producing a double vote: the loser's insert fails, is rolled back and
reported as a conflict.
"""

import logging
from dataclasses import dataclass
from typing import List, Optional

from sqlalchemy import delete, func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from ideaboard.errors import Conflict, NotFound
from ideaboard.models.idea import Idea
from ideaboard.models.vote import Vote

logger = logging.getLogger(__name__)

ADDED = "added"
REMOVED = "removed"


@dataclass
class ToggleOutcome:
    action: str
    idea_id: int
    vote_count: int

    @property
    def voted(self) -> bool:
        return self.action == ADDED


async def _find_vote(db: AsyncSession, user_id: int, idea_id: int) -> Optional[Vote]:
    result = await db.execute(
        select(Vote).where(Vote.user_id == user_id, Vote.idea_id == idea_id)
    )
    return result.scalar_one_or_none()


async def count_votes(db: AsyncSession, idea_id: int) -> int:
    result = await db.execute(select(func.count(Vote.id)).where(Vote.idea_id == idea_id))
    return result.scalar() or 0


async def voted_idea_ids(db: AsyncSession, user_id: int) -> List[int]:
    """Ideas the user currently has a vote on; the authoritative record."""
    result = await db.execute(
        select(Vote.idea_id).where(Vote.user_id == user_id).order_by(Vote.idea_id)
    )
    return list(result.scalars().all())


async def toggle_vote(db: AsyncSession, user_id: int, idea_id: int) -> ToggleOutcome:
    if not await db.get(Idea, idea_id):
        raise NotFound("Idea not found")

    existing = await _find_vote(db, user_id, idea_id)
    if existing:
        # Keyed on the pair, so a concurrent removal just deletes nothing.
        await db.execute(
            delete(Vote).where(Vote.user_id == user_id, Vote.idea_id == idea_id)
        )
        action = REMOVED
    else:
        db.add(Vote(user_id=user_id, idea_id=idea_id))
        action = ADDED

    try:
        await db.commit()
    except IntegrityError:
        await db.rollback()
        logger.warning("Duplicate vote rejected for user %s on idea %s", user_id, idea_id)
        raise Conflict("Vote already recorded")

    vote_count = await count_votes(db, idea_id)
    logger.info("Vote %s: user %s idea %s (now %s)", action, user_id, idea_id, vote_count)
    return ToggleOutcome(action=action, idea_id=idea_id, vote_count=vote_count)
