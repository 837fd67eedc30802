"""Comments router – list and add comments by idea id."""

from typing import List

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from ideaboard.database import get_db
from ideaboard.routers.auth import require_user
from ideaboard.schemas.comment import CommentCreate, CommentOut
from ideaboard.services import comments as comment_service
from ideaboard.services.permissions import Principal

router = APIRouter(prefix="/comments", tags=["comments"])


@router.get("", response_model=List[CommentOut])
async def list_comments(
    idea_id: int = Query(..., alias="ideaId"),
    db: AsyncSession = Depends(get_db),
):
    """Comments of one idea, newest first."""
    return await comment_service.list_comments(db, idea_id)


@router.post("", response_model=CommentOut, status_code=status.HTTP_201_CREATED)
async def add_comment(
    payload: CommentCreate,
    principal: Principal = Depends(require_user),
    db: AsyncSession = Depends(get_db),
):
    return await comment_service.add_comment(db, principal.id, payload.idea_id, payload.content)
