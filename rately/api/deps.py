"""Authentication gate and per-route role policies as FastAPI dependencies."""

from collections.abc import Callable
from typing import Annotated

import jwt
from fastapi import Depends, HTTPException, Query, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from rately.core.config import settings
from rately.core.database import get_db
from rately.core.roles import POLICIES, is_allowed
from rately.core.security import decode_access_token
from rately.models import User
from rately.schemas.auth import CurrentUser
from rately.services.listing import PageRequest

security = HTTPBearer(auto_error=False)


def _forbidden(detail: str) -> HTTPException:
    return HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=detail)


def get_current_user(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
    db: Annotated[Session, Depends(get_db)],
) -> CurrentUser:
    """
    Require a valid Bearer JWT whose subject still exists.

    Missing token or deleted subject -> 401; bad signature or expiry -> 403.
    """
    if credentials is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Access token required",
            headers={"WWW-Authenticate": "Bearer"},
        )
    try:
        payload = decode_access_token(credentials.credentials)
    except jwt.ExpiredSignatureError:
        raise _forbidden("Token expired")
    except jwt.PyJWTError:
        raise _forbidden("Invalid token")
    try:
        user_id = int(payload.get("sub"))
    except (TypeError, ValueError):
        raise _forbidden("Invalid token")
    user = db.get(User, user_id)
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="User not found",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return CurrentUser(id=user.id, email=user.email, role=user.role)


def require_policy(policy: str) -> Callable[..., CurrentUser]:
    """Build a dependency that lets through only roles listed under POLICIES[policy]."""
    if policy not in POLICIES:
        raise KeyError(f"Unknown role policy: {policy}")

    def dependency(
        current_user: Annotated[CurrentUser, Depends(get_current_user)],
    ) -> CurrentUser:
        if not is_allowed(policy, current_user.role):
            raise _forbidden("Insufficient permissions")
        return current_user

    dependency.__name__ = f"require_{policy}"
    return dependency


AuthenticatedUser = Annotated[CurrentUser, Depends(get_current_user)]
AdminUser = Annotated[CurrentUser, Depends(require_policy("admin"))]
NormalUser = Annotated[CurrentUser, Depends(require_policy("normal_user"))]
StoreOwner = Annotated[CurrentUser, Depends(require_policy("store_owner"))]
DbSession = Annotated[Session, Depends(get_db)]


def page_params(
    page: Annotated[int, Query(ge=1)] = 1,
    limit: Annotated[int, Query(ge=1, le=settings.MAX_PAGE_SIZE)] = settings.DEFAULT_PAGE_SIZE,
) -> PageRequest:
    return PageRequest(page=page, limit=limit)


Page = Annotated[PageRequest, Depends(page_params)]
