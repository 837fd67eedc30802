"""
Authentication router — credentials sign-up / sign-in + JWT cookie.

Endpoints:
    POST /auth/register  → create an account
    POST /auth/login     → check credentials, set the session cookie
    POST /auth/logout    → clear the session cookie

Also home to the principal dependencies every other router uses:
``get_principal`` (optional), ``require_user`` and ``require_admin``.
"""

from datetime import datetime, timedelta, timezone
from typing import Optional

from fastapi import APIRouter, Depends, Request, Response, status
from jose import JWTError, jwt
from sqlalchemy.ext.asyncio import AsyncSession

from ideaboard.config import settings
from ideaboard.database import get_db
from ideaboard.errors import NotAuthenticated
from ideaboard.models.user import User
from ideaboard.schemas.common import Message
from ideaboard.schemas.user import UserLogin, UserOut, UserRegister
from ideaboard.services import accounts
from ideaboard.services.permissions import Principal, ensure_admin, ensure_authenticated

router = APIRouter(prefix="/auth", tags=["auth"])

COOKIE_KEY = "access_token"


# ═══════════════════════════════════════════════════════════════
#  Helpers
# ═══════════════════════════════════════════════════════════════

def create_access_token(data: dict) -> str:
    """Create a signed JWT with an expiry claim."""
    to_encode = data.copy()
    expire = datetime.now(timezone.utc) + timedelta(
        minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES
    )
    to_encode.update({"exp": expire})
    return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def _set_auth_cookie(response: Response, user_id: int) -> Response:
    """Attach the JWT cookie to a response."""
    token = create_access_token({"sub": str(user_id)})
    response.set_cookie(
        key=COOKIE_KEY,
        value=token,
        httponly=True,
        max_age=settings.ACCESS_TOKEN_EXPIRE_MINUTES * 60,
        samesite="lax",
        secure=settings.COOKIE_SECURE,
    )
    return response


def _user_id_from_token(token: str) -> Optional[int]:
    try:
        payload = jwt.decode(
            token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM]
        )
        user_id = int(payload.get("sub", 0))
    except (JWTError, ValueError, TypeError):
        return None
    return user_id or None


# ═══════════════════════════════════════════════════════════════
#  Principal dependencies
# ═══════════════════════════════════════════════════════════════

async def get_principal(
    request: Request,
    db: AsyncSession = Depends(get_db),
) -> Optional[Principal]:
    """
    Extract the JWT from the cookie, decode it, and load the caller.
    Returns None when no valid token is present (allows public endpoints).

    The role comes from the user row, never from the token or the client.
    """
    token = request.cookies.get(COOKIE_KEY)
    if not token:
        return None
    user_id = _user_id_from_token(token)
    if not user_id:
        return None

    user = await db.get(User, user_id)
    if not user:
        return None
    return Principal.from_user(user)


async def require_user(
    principal: Optional[Principal] = Depends(get_principal),
) -> Principal:
    return ensure_authenticated(principal)


async def require_admin(
    principal: Optional[Principal] = Depends(get_principal),
) -> Principal:
    return ensure_admin(principal)


# ═══════════════════════════════════════════════════════════════
#  Credentials flow
# ═══════════════════════════════════════════════════════════════

@router.post("/register", response_model=UserOut, status_code=status.HTTP_201_CREATED)
async def register(payload: UserRegister, db: AsyncSession = Depends(get_db)):
    """Register a new account with the default ``USER`` role."""
    return await accounts.create_user(
        db, email=payload.email, password=payload.password, name=payload.name
    )


@router.post("/login", response_model=UserOut)
async def login(
    credentials: UserLogin,
    response: Response,
    db: AsyncSession = Depends(get_db),
):
    """Check credentials and issue the session cookie."""
    user = await accounts.authenticate(db, credentials.email, credentials.password)
    if not user:
        raise NotAuthenticated("Invalid email or password")
    _set_auth_cookie(response, user.id)
    return user


@router.post("/logout", response_model=Message)
async def logout(response: Response):
    """Clear the auth cookie."""
    response.delete_cookie(key=COOKIE_KEY)
    return {"message": "Logged out"}
