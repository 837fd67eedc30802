"""
Admin dashboard statistics.

A handful of independent count / group-by queries shaped into one JSON
document. Averages and rates are 0 when their denominator is 0.
"""

from datetime import datetime, timedelta, timezone
from typing import Dict, List, Optional

from sqlalchemy import DateTime, func, literal, select
from sqlalchemy.ext.asyncio import AsyncSession

from ideaboard.models.category import Category
from ideaboard.models.comment import Comment
from ideaboard.models.idea import Idea, IdeaStatus
from ideaboard.models.user import User
from ideaboard.models.vote import Vote

TOP_N = 5
WEEKS_OF_HISTORY = 4

TRACKED = (
    ("ideas", Idea),
    ("users", User),
    ("comments", Comment),
    ("votes", Vote),
)


async def _count(db: AsyncSession, model, *criteria) -> int:
    stmt = select(func.count(model.id))
    if criteria:
        stmt = stmt.where(*criteria)
    return (await db.execute(stmt)).scalar() or 0


def _ratio(numerator: float, denominator: float) -> float:
    return numerator / denominator if denominator else 0.0


def _timeline(db: AsyncSession, column, bound: datetime):
    """Column and bound in a form that compares chronologically on this dialect."""
    value = literal(bound, DateTime())
    if db.get_bind().dialect.name == "sqlite":
        # SQLite keeps timestamps as text, with or without fractional seconds.
        return func.julianday(column), func.julianday(value)
    return column, value


async def _created_between(db: AsyncSession, start: datetime, end: Optional[datetime] = None) -> Dict[str, int]:
    counts = {}
    for key, model in TRACKED:
        created, lower = _timeline(db, model.created_at, start)
        criteria = [created >= lower]
        if end is not None:
            created, upper = _timeline(db, model.created_at, end)
            criteria.append(created < upper)
        counts[key] = await _count(db, model, *criteria)
    return counts


async def _status_counts(db: AsyncSession) -> Dict[str, int]:
    counts = {status.value: 0 for status in IdeaStatus}
    rows = await db.execute(select(Idea.status, func.count(Idea.id)).group_by(Idea.status))
    for status, n in rows.all():
        counts[getattr(status, "value", status)] = n
    return counts


async def _top_categories(db: AsyncSession) -> List[dict]:
    n = func.count(Idea.id).label("n")
    rows = await db.execute(
        select(Category.name, n)
        .outerjoin(Idea, Idea.category_id == Category.id)
        .group_by(Category.id, Category.name)
        .order_by(n.desc(), Category.id)
        .limit(TOP_N)
    )
    return [{"name": name, "count": count} for name, count in rows.all()]


async def _top_users_by_ideas(db: AsyncSession) -> List[dict]:
    n = func.count(Idea.id).label("n")
    rows = await db.execute(
        select(User.id, User.name, n)
        .outerjoin(Idea, Idea.author_id == User.id)
        .group_by(User.id, User.name)
        .order_by(n.desc(), User.id)
        .limit(TOP_N)
    )
    return [{"id": uid, "name": name, "ideaCount": count} for uid, name, count in rows.all()]


async def _top_ideas_by_votes(db: AsyncSession) -> List[dict]:
    n = func.count(Vote.id).label("n")
    rows = await db.execute(
        select(Idea.id, Idea.title, n)
        .outerjoin(Vote, Vote.idea_id == Idea.id)
        .group_by(Idea.id, Idea.title)
        .order_by(n.desc(), Idea.id)
        .limit(TOP_N)
    )
    return [{"id": iid, "title": title, "voteCount": count} for iid, title, count in rows.all()]


async def build_dashboard(db: AsyncSession, now: Optional[datetime] = None) -> dict:
    now = now or datetime.now(timezone.utc)

    total_ideas = await _count(db, Idea)
    total_users = await _count(db, User)
    total_comments = await _count(db, Comment)
    total_votes = await _count(db, Vote)

    last_week = await _created_between(db, now - timedelta(days=7))

    weekly = []
    for i in range(WEEKS_OF_HISTORY):
        start = now - timedelta(days=7 * (i + 1))
        end = now - timedelta(days=7 * i)
        bucket = await _created_between(db, start, end)
        weekly.append({"week": start.date().isoformat(), **bucket})

    approved = await _count(db, Idea, Idea.status == IdeaStatus.approved)

    return {
        "totalIdeas": total_ideas,
        "totalUsers": total_users,
        "totalComments": total_comments,
        "totalVotes": total_votes,
        "ideaStatusCounts": await _status_counts(db),
        "topCategories": await _top_categories(db),
        "recentTrends": {
            "newIdeasLastWeek": last_week["ideas"],
            "newUsersLastWeek": last_week["users"],
            "newCommentsLastWeek": last_week["comments"],
            "newVotesLastWeek": last_week["votes"],
        },
        "weeklyData": weekly,
        "topUsersByIdeas": await _top_users_by_ideas(db),
        "topIdeasByVotes": await _top_ideas_by_votes(db),
        "userEngagement": {
            "averageIdeasPerUser": _ratio(total_ideas, total_users),
            "averageCommentsPerUser": _ratio(total_comments, total_users),
            "averageVotesPerUser": _ratio(total_votes, total_users),
        },
        "ideaSuccessRate": _ratio(approved, total_ideas) * 100,
    }
