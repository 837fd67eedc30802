"""
Ideas router — browse, submit, moderate, delete, comment.

Endpoints:
    GET    /ideas                 → list ideas (filters + sort)
    POST   /ideas                 → submit an idea (session)
    GET    /ideas/{id}            → idea detail with comments
    PATCH  /ideas/{id}            → change status (admin)
    DELETE /ideas/{id}            → delete idea with its votes / comments (owner or admin)
    POST   /ideas/{id}/comments   → comment on an idea (session)
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from ideaboard.database import get_db
from ideaboard.models.idea import IdeaStatus
from ideaboard.routers.auth import get_principal, require_admin, require_user
from ideaboard.schemas.comment import CommentBody, IdeaCommentOut
from ideaboard.schemas.common import NameRef
from ideaboard.schemas.idea import IdeaCreate, IdeaDetail, IdeaOut, IdeaStatusUpdate
from ideaboard.services import comments as comment_service
from ideaboard.services import ideas as idea_service
from ideaboard.services.deletion import delete_idea
from ideaboard.services.permissions import Principal, ensure_authenticated, ensure_owner_or_admin

router = APIRouter(prefix="/ideas", tags=["ideas"])


# ═══════════════════════════════════════════════════════════════
#  GET /ideas → list
# ═══════════════════════════════════════════════════════════════

@router.get("", response_model=List[IdeaOut])
async def list_ideas(
    status_filter: Optional[IdeaStatus] = Query(None, alias="status"),
    category_id: Optional[int] = Query(None, alias="categoryId"),
    mine: bool = False,
    voted: bool = False,
    sort: str = idea_service.SORT_NEWEST,
    principal: Optional[Principal] = Depends(get_principal),
    db: AsyncSession = Depends(get_db),
):
    """All ideas, newest first. ``mine`` / ``voted`` need a session."""
    author_id = None
    voted_by = None
    if mine or voted:
        principal = ensure_authenticated(principal, "Sign in to filter your own ideas or votes")
        author_id = principal.id if mine else None
        voted_by = principal.id if voted else None

    return await idea_service.list_ideas(
        db,
        status=status_filter,
        category_id=category_id,
        author_id=author_id,
        voted_by=voted_by,
        sort=sort,
    )


@router.post("", response_model=IdeaOut, status_code=status.HTTP_201_CREATED)
async def create_idea(
    payload: IdeaCreate,
    principal: Principal = Depends(require_user),
    db: AsyncSession = Depends(get_db),
):
    """Submit a new idea; it starts out ``pending``."""
    return await idea_service.create_idea(
        db,
        author_id=principal.id,
        title=payload.title,
        description=payload.description,
        category_id=payload.category_id,
    )


# ═══════════════════════════════════════════════════════════════
#  /ideas/{id}
# ═══════════════════════════════════════════════════════════════

@router.get("/{idea_id}", response_model=IdeaDetail)
async def read_idea(idea_id: int, db: AsyncSession = Depends(get_db)):
    return await idea_service.load_idea_detail(db, idea_id)


@router.patch("/{idea_id}", response_model=IdeaOut)
async def change_status(
    idea_id: int,
    payload: IdeaStatusUpdate,
    principal: Principal = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    """Moderation: move an idea to any of pending / approved / rejected."""
    return await idea_service.set_status(db, idea_id, payload.status)


@router.delete("/{idea_id}")
async def remove_idea(
    idea_id: int,
    principal: Principal = Depends(require_user),
    db: AsyncSession = Depends(get_db),
):
    """The author or an admin deletes an idea together with its votes and comments."""
    idea = await idea_service.get_idea(db, idea_id)
    ensure_owner_or_admin(principal, idea.author_id, "Not authorized to delete this idea")

    outcome = await delete_idea(db, idea_id)
    return {
        "message": "Idea and associated votes and comments deleted successfully",
        "ideaId": outcome.idea_id,
        "deletedVotes": outcome.votes,
        "deletedComments": outcome.comments,
    }


@router.post(
    "/{idea_id}/comments",
    response_model=IdeaCommentOut,
    status_code=status.HTTP_201_CREATED,
)
async def comment_on_idea(
    idea_id: int,
    payload: CommentBody,
    principal: Principal = Depends(require_user),
    db: AsyncSession = Depends(get_db),
):
    comment = await comment_service.add_comment(db, principal.id, idea_id, payload.content)
    return IdeaCommentOut(
        id=comment.id,
        content=comment.content,
        created_at=comment.created_at,
        author=NameRef(name=comment.user.name),
    )
