"""
Admin back-office router.

Endpoints (admin only):
    GET    /admin?type=...   → list categories / users / ideas / comments, or the dashboard
    POST   /admin            → create a category or user
    PUT    /admin            → update a category, user or idea
    DELETE /admin            → delete a category, user, idea or comment

Mutations carry a ``type`` tag; the body is parsed into the matching
command variant and handed to that variant's handler.
"""

import logging
from typing import Awaitable, Callable, Dict, Type

from fastapi import APIRouter, Depends, Query, status
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from ideaboard.database import get_db
from ideaboard.errors import ValidationFailed
from ideaboard.models.comment import Comment
from ideaboard.models.user import User
from ideaboard.routers.auth import require_admin
from ideaboard.schemas import admin as cmd
from ideaboard.schemas.category import CategoryOut
from ideaboard.schemas.comment import CommentOut
from ideaboard.schemas.user import UserOut
from ideaboard.services import accounts, categories, comments, dashboard, deletion, ideas
from ideaboard.services.permissions import Principal

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/admin", tags=["admin"])


def _json(payload, status_code: int = status.HTTP_200_OK) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=jsonable_encoder(payload, by_alias=True))


# ═══════════════════════════════════════════════════════════════
#  GET /admin?type=...
# ═══════════════════════════════════════════════════════════════

async def _list_categories(db: AsyncSession):
    return [CategoryOut.model_validate(c) for c in await categories.list_categories(db)]


async def _list_users(db: AsyncSession):
    result = await db.execute(select(User).order_by(User.id))
    return [UserOut.model_validate(u) for u in result.scalars().all()]


async def _list_ideas(db: AsyncSession):
    return await ideas.list_idea_details(db)


async def _list_comments(db: AsyncSession):
    result = await db.execute(select(Comment).order_by(Comment.created_at.desc(), Comment.id.desc()))
    return [CommentOut.model_validate(c) for c in result.scalars().all()]


LISTINGS: Dict[cmd.AdminResource, Callable[[AsyncSession], Awaitable[object]]] = {
    cmd.AdminResource.category: _list_categories,
    cmd.AdminResource.user: _list_users,
    cmd.AdminResource.idea: _list_ideas,
    cmd.AdminResource.comment: _list_comments,
    cmd.AdminResource.dashboard: dashboard.build_dashboard,
}


@router.get("")
async def admin_read(
    resource: str = Query(..., alias="type"),
    principal: Principal = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    parsed = cmd.parse_resource(resource)
    if parsed is None:
        raise ValidationFailed("Invalid type")
    return _json(await LISTINGS[parsed](db))


# ═══════════════════════════════════════════════════════════════
#  POST /admin
# ═══════════════════════════════════════════════════════════════

async def _create_category(db: AsyncSession, principal: Principal, command: cmd.CreateCategory):
    category = await categories.create_category(
        db, command.data.name, command.data.description, owner_id=principal.id
    )
    return CategoryOut.model_validate(category)


async def _create_user(db: AsyncSession, principal: Principal, command: cmd.CreateUser):
    user = await accounts.create_user(
        db,
        email=command.data.email,
        password=command.data.password,
        name=command.data.name,
        role=command.data.role,
    )
    return UserOut.model_validate(user)


CREATORS: Dict[Type, Callable] = {
    cmd.CreateCategory: _create_category,
    cmd.CreateUser: _create_user,
}


@router.post("")
async def admin_create(
    command: cmd.CreateCommand,
    principal: Principal = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    variant = command.root
    created = await CREATORS[type(variant)](db, principal, variant)
    logger.info("Admin %s created %s", principal.id, variant.type)
    return _json(created, status.HTTP_201_CREATED)


# ═══════════════════════════════════════════════════════════════
#  PUT /admin
# ═══════════════════════════════════════════════════════════════

async def _update_category(db: AsyncSession, command: cmd.UpdateCategory):
    category = await categories.update_category(
        db, command.id, name=command.data.name, description=command.data.description
    )
    return CategoryOut.model_validate(category)


async def _update_user(db: AsyncSession, command: cmd.UpdateUser):
    user = await accounts.get_user(db, command.id)
    user = await accounts.update_user(
        db,
        user,
        name=command.data.name,
        email=command.data.email,
        password=command.data.password,
        role=command.data.role,
    )
    return UserOut.model_validate(user)


async def _update_idea(db: AsyncSession, command: cmd.UpdateIdea):
    return await ideas.update_idea(
        db,
        command.id,
        status=command.data.status,
        title=command.data.title,
        description=command.data.description,
    )


UPDATERS: Dict[Type, Callable] = {
    cmd.UpdateCategory: _update_category,
    cmd.UpdateUser: _update_user,
    cmd.UpdateIdea: _update_idea,
}


@router.put("")
async def admin_update(
    command: cmd.UpdateCommand,
    principal: Principal = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    variant = command.root
    updated = await UPDATERS[type(variant)](db, variant)
    logger.info("Admin %s updated %s %s", principal.id, variant.type, variant.id)
    return _json(updated)


# ═══════════════════════════════════════════════════════════════
#  DELETE /admin
# ═══════════════════════════════════════════════════════════════

async def _delete_category(db: AsyncSession, command: cmd.DeleteCategory):
    await categories.delete_category(db, command.id)
    return {"message": "Category deleted"}


async def _delete_user(db: AsyncSession, command: cmd.DeleteUser):
    outcome = await deletion.delete_user(db, command.id)
    return {
        "message": "User deleted and associated data anonymized",
        "reassignedIdeas": outcome.reassigned_ideas,
        "anonymousUserId": outcome.anonymous_user_id,
    }


async def _delete_idea(db: AsyncSession, command: cmd.DeleteIdea):
    outcome = await deletion.delete_idea(db, command.id)
    return {
        "message": "Idea and associated data deleted",
        "ideaId": outcome.idea_id,
        "deletedVotes": outcome.votes,
        "deletedComments": outcome.comments,
    }


async def _delete_comment(db: AsyncSession, command: cmd.DeleteComment):
    await comments.delete_comment(db, command.target_id)
    return {"message": "Comment deleted"}


DELETERS: Dict[Type, Callable] = {
    cmd.DeleteCategory: _delete_category,
    cmd.DeleteUser: _delete_user,
    cmd.DeleteIdea: _delete_idea,
    cmd.DeleteComment: _delete_comment,
}


@router.delete("")
async def admin_delete(
    command: cmd.DeleteCommand,
    principal: Principal = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    variant = command.root
    result = await DELETERS[type(variant)](db, variant)
    logger.info("Admin %s deleted %s", principal.id, variant.type)
    return _json(result)
