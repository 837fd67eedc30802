"""
Vote router.

Endpoints:
    POST /vote  → toggle the caller's vote on ``ideaId``
    GET  /vote  → ids of the ideas the caller has voted on

The toggle response carries the fresh vote count so clients can replace any
optimistic value with the server's.
"""

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from ideaboard.database import get_db
from ideaboard.routers.auth import require_user
from ideaboard.schemas.vote import VotedIdeas, VoteResult, VoteToggle
from ideaboard.services import voting
from ideaboard.services.permissions import Principal

router = APIRouter(prefix="/vote", tags=["votes"])


@router.post("", response_model=VoteResult)
async def toggle_vote(
    payload: VoteToggle,
    response: Response,
    principal: Principal = Depends(require_user),
    db: AsyncSession = Depends(get_db),
):
    outcome = await voting.toggle_vote(db, principal.id, payload.idea_id)
    if outcome.voted:
        response.status_code = status.HTTP_201_CREATED
        message = "Vote added"
    else:
        message = "Vote removed"
    return VoteResult(
        message=message,
        action=outcome.action,
        voted=outcome.voted,
        idea_id=outcome.idea_id,
        vote_count=outcome.vote_count,
    )


@router.get("", response_model=VotedIdeas)
async def my_votes(
    principal: Principal = Depends(require_user),
    db: AsyncSession = Depends(get_db),
):
    return VotedIdeas(idea_ids=await voting.voted_idea_ids(db, principal.id))
