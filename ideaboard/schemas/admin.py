"""
Admin back-office commands.

Each mutating request to ``/admin`` is one variant of a tagged union keyed
by ``type``. Pydantic rejects unknown tags before a handler ever runs, and
the router maps every variant to exactly one handler.
"""

import enum
from typing import Annotated, Literal, Optional, Union

from pydantic import EmailStr, Field, RootModel, model_validator

from ideaboard.models.user import Role
from ideaboard.schemas.category import CategoryCreate, CategoryUpdate
from ideaboard.schemas.common import ApiModel
from ideaboard.schemas.idea import IdeaUpdate


class AdminResource(str, enum.Enum):
    category = "category"
    user = "user"
    idea = "idea"
    comment = "comment"
    dashboard = "dashboard"


# Listings also accept the plural resource names.
RESOURCE_ALIASES = {
    "categories": AdminResource.category,
    "users": AdminResource.user,
    "ideas": AdminResource.idea,
    "comments": AdminResource.comment,
}


def parse_resource(value: str) -> Optional[AdminResource]:
    if value in RESOURCE_ALIASES:
        return RESOURCE_ALIASES[value]
    try:
        return AdminResource(value)
    except ValueError:
        return None


# ── Payloads ──

class AdminUserCreate(ApiModel):
    email: EmailStr
    name: Optional[str] = None
    password: str = Field(min_length=1)
    role: Role = Role.USER


class AdminUserUpdate(ApiModel):
    email: Optional[EmailStr] = None
    name: Optional[str] = None
    password: Optional[str] = Field(default=None, min_length=1)
    role: Optional[Role] = None


# ── POST /admin ──

class CreateCategory(ApiModel):
    type: Literal["category"]
    data: CategoryCreate


class CreateUser(ApiModel):
    type: Literal["user"]
    data: AdminUserCreate


class CreateCommand(RootModel):
    root: Annotated[Union[CreateCategory, CreateUser], Field(discriminator="type")]


# ── PUT /admin ──

class UpdateCategory(ApiModel):
    type: Literal["category"]
    id: int
    data: CategoryUpdate


class UpdateUser(ApiModel):
    type: Literal["user"]
    id: int
    data: AdminUserUpdate


class UpdateIdea(ApiModel):
    type: Literal["idea"]
    id: int
    data: IdeaUpdate


class UpdateCommand(RootModel):
    root: Annotated[Union[UpdateCategory, UpdateUser, UpdateIdea], Field(discriminator="type")]


# ── DELETE /admin ──

class DeleteCategory(ApiModel):
    type: Literal["category"]
    id: int


class DeleteUser(ApiModel):
    type: Literal["user"]
    id: int


class DeleteIdea(ApiModel):
    type: Literal["idea"]
    id: int


class DeleteComment(ApiModel):
    type: Literal["comment"]
    id: Optional[int] = None
    comment_id: Optional[int] = None

    @model_validator(mode="after")
    def _require_target(self):
        if self.id is None and self.comment_id is None:
            raise ValueError("id or commentId is required")
        return self

    @property
    def target_id(self) -> int:
        return self.comment_id if self.comment_id is not None else self.id


class DeleteCommand(RootModel):
    root: Annotated[
        Union[DeleteCategory, DeleteUser, DeleteIdea, DeleteComment],
        Field(discriminator="type"),
    ]
