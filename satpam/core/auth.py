"""
Bearer-token auth dependencies and role checks.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from fastapi import Depends, Header, HTTPException

from .config import auth_disabled
from .security import ROLE_ADMIN, ROLE_GUARD, ROLE_SUPERVISOR, ROLES, InvalidTokenError, decode_access_token

REVIEWER_ROLES = {ROLE_ADMIN, ROLE_SUPERVISOR}


@dataclass
class UserContext:
    role: str
    user_id: Optional[str] = None
    username: Optional[str] = None

    @property
    def is_admin(self) -> bool:
        return self.role.upper() == ROLE_ADMIN

    @property
    def can_review(self) -> bool:
        return self.role.upper() in REVIEWER_ROLES


def _extract_bearer_token(authorization: Optional[str]) -> Optional[str]:
    if not authorization:
        return None
    if not authorization.lower().startswith("bearer "):
        return None
    token = authorization.split(" ", 1)[1].strip()
    return token or None


def _dev_context(x_user_id: Optional[str], x_user_role: Optional[str], x_user_name: Optional[str]) -> UserContext:
    role = (x_user_role or ROLE_ADMIN).strip().upper()
    if role not in ROLES:
        role = ROLE_ADMIN
    return UserContext(role=role, user_id=x_user_id or None, username=x_user_name)


def get_current_user(
    authorization: Optional[str] = Header(None),
    x_user_id: Optional[str] = Header(None, alias="X-User-Id"),
    x_user_role: Optional[str] = Header(None, alias="X-User-Role"),
    x_user_name: Optional[str] = Header(None, alias="X-User-Name"),
) -> UserContext:
    if auth_disabled():
        return _dev_context(x_user_id, x_user_role, x_user_name)
    token = _extract_bearer_token(authorization)
    if not token:
        raise HTTPException(status_code=401, detail="Missing bearer token")
    try:
        claims = decode_access_token(token)
    except InvalidTokenError:
        raise HTTPException(status_code=401, detail="Invalid token")
    return UserContext(role=claims.role, user_id=claims.user_id, username=claims.username)


def get_optional_user(
    authorization: Optional[str] = Header(None),
    x_user_id: Optional[str] = Header(None, alias="X-User-Id"),
    x_user_role: Optional[str] = Header(None, alias="X-User-Role"),
    x_user_name: Optional[str] = Header(None, alias="X-User-Name"),
) -> Optional[UserContext]:
    if auth_disabled():
        return _dev_context(x_user_id, x_user_role, x_user_name)
    if not authorization:
        return None
    return get_current_user(
        authorization=authorization,
        x_user_id=x_user_id,
        x_user_role=x_user_role,
        x_user_name=x_user_name,
    )


def require_roles(*roles: str):
    def _dep(user: UserContext = Depends(get_current_user)):
        allowed = {r.strip().upper() for r in roles if r and r.strip()}
        if allowed and user.role.upper() not in allowed:
            raise HTTPException(status_code=403, detail="Forbidden")
        return user

    return _dep


def require_identity(user: UserContext = Depends(get_current_user)) -> UserContext:
    """Guard-facing endpoints need a concrete person id, even in dev mode."""
    if not user.user_id:
        raise HTTPException(status_code=401, detail="User identity required")
    return user
