"""
Authorization predicate shared by every mutating endpoint.

A ``Principal`` is resolved once per request from the session cookie and
then passed explicitly to whatever needs to know who is calling.
"""

from dataclasses import dataclass
from typing import Optional

from ideaboard.errors import Forbidden, NotAuthenticated
from ideaboard.models.user import Role, User


@dataclass(frozen=True)
class Principal:
    id: int
    role: Role
    email: str
    name: Optional[str] = None

    @classmethod
    def from_user(cls, user: User) -> "Principal":
        return cls(id=user.id, role=user.role, email=user.email, name=user.name)

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN


def ensure_authenticated(principal: Optional[Principal], message: str = "Not authenticated") -> Principal:
    if principal is None:
        raise NotAuthenticated(message)
    return principal


def ensure_admin(principal: Optional[Principal]) -> Principal:
    principal = ensure_authenticated(principal)
    if not principal.is_admin:
        raise Forbidden("Admin privileges required")
    return principal


def ensure_owner_or_admin(
    principal: Optional[Principal],
    owner_id: int,
    message: str = "Not authorized to modify this resource",
) -> Principal:
    """Allow the resource owner or any admin; everyone else gets a 403."""
    principal = ensure_authenticated(principal)
    if principal.id != owner_id and not principal.is_admin:
        raise Forbidden(message)
    return principal
