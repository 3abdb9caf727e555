"""Caller identity taken from request headers.

Authentication happens upstream; the gateway in front of this service
forwards the authenticated user id and role.
"""

from fastapi import Depends, Header

from app.core.exceptions import unauthorized_exception

KNOWN_ROLES = frozenset({"developer", "organization", "admin"})


async def get_optional_user_id(
    x_user_id: str | None = Header(default=None),
) -> str | None:
    """User id of the caller, if any."""
    if x_user_id is None or not x_user_id.strip():
        return None
    return x_user_id.strip()


async def get_current_user_id(
    user_id: str | None = Depends(get_optional_user_id),
) -> str:
    """User id of the caller; 401 for anonymous requests."""
    if user_id is None:
        raise unauthorized_exception()
    return user_id


async def get_viewer_role(x_user_role: str | None = Header(default=None)) -> str:
    """Role of the caller, ``anonymous`` when missing or unknown."""
    role = (x_user_role or "").strip().lower()
    return role if role in KNOWN_ROLES else "anonymous"
