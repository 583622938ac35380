"""
Authentication and role checks for the admin API.

Identity and roles live in Supabase: sessions are Supabase JWTs, and admin
rights come from rows in the ``user_roles`` table (``role = 'admin'``).

- get_current_user verifies the Bearer JWT locally with python-jose when
  SUPABASE_JWT_SECRET is set, otherwise through the Supabase Auth API.
- require_admin layers the role lookup on top; every dashboard endpoint
  depends on it.
"""

import logging
import os
from typing import List, Optional

from fastapi import Depends, Header, HTTPException

from app.db import USER_ROLES_TABLE, supabase, supabase_admin

logger = logging.getLogger(__name__)

# Set SUPABASE_JWT_SECRET (Project Settings > API > JWT Secret) to skip the
# network round-trip to the Supabase Auth API on every request.
SUPABASE_JWT_SECRET: Optional[str] = os.environ.get("SUPABASE_JWT_SECRET") or None

ADMIN_ROLE = "admin"


def bearer_token(authorization: Optional[str]) -> str:
    """Return the token from a "Bearer <token>" header value, or raise 401."""
    if not authorization:
        raise HTTPException(status_code=401, detail="Not authenticated")

    parts = authorization.split(" ")
    if len(parts) != 2 or parts[0] != "Bearer":
        raise HTTPException(status_code=401, detail="Invalid authentication credentials")

    return parts[1]


async def get_current_user(authorization: Optional[str] = Header(None)) -> str:
    """
    Extract and verify the JWT from the Authorization header.

    Args:
        authorization: Authorization header with format "Bearer <token>"

    Returns:
        user_id: Authenticated user's ID (the JWT ``sub`` claim)

    Raises:
        HTTPException: 401 if token is missing, invalid, or expired
    """
    token = bearer_token(authorization)

    if SUPABASE_JWT_SECRET:
        return _verify_jwt_locally(token)

    return await _verify_jwt_remotely(token)


def _verify_jwt_locally(token: str) -> str:
    """
    Verify a Supabase HS256 JWT with python-jose and return the user ID.

    Raises:
        HTTPException 401 on any verification failure.
    """
    from jose import ExpiredSignatureError, JWTError, jwt

    try:
        payload = jwt.decode(
            token,
            SUPABASE_JWT_SECRET,
            algorithms=["HS256"],
            options={"verify_aud": False},  # Supabase sets aud="authenticated"
        )
    except ExpiredSignatureError:
        raise HTTPException(status_code=401, detail="Token expired")
    except JWTError:
        raise HTTPException(status_code=401, detail="Invalid token")

    user_id: Optional[str] = payload.get("sub")
    if not user_id:
        raise HTTPException(status_code=401, detail="Invalid token")

    return user_id


async def _verify_jwt_remotely(token: str) -> str:
    """
    Verify a JWT via the Supabase Auth API (used when no JWT secret is set).

    Raises:
        HTTPException 401 on any verification failure.
    """
    try:
        response = supabase.auth.get_user(token)
    except Exception as e:
        if "expired" in str(e).lower():
            raise HTTPException(status_code=401, detail="Token expired")
        raise HTTPException(status_code=401, detail="Invalid token")

    if not response or not response.user:
        raise HTTPException(status_code=401, detail="Invalid token")

    return response.user.id


def get_user_roles(user_id: str) -> List[str]:
    """Return the role names granted to a user in ``user_roles``."""
    result = supabase_admin.table(USER_ROLES_TABLE).select("role").eq("user_id", user_id).execute()
    return [row.get("role") for row in (result.data or []) if row.get("role")]


async def require_admin(user_id: str = Depends(get_current_user)) -> str:
    """
    Dependency for dashboard endpoints: the caller must hold the admin role.

    Returns:
        The authenticated admin's user ID.

    Raises:
        HTTPException: 403 if the user is not an admin, 500 if roles cannot be read
    """
    try:
        roles = get_user_roles(user_id)
    except Exception as e:
        logger.error(f"Error checking roles for user {user_id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to verify role")

    if ADMIN_ROLE not in roles:
        logger.warning(f"Non-admin user {user_id} attempted to access the dashboard")
        raise HTTPException(status_code=403, detail="Admin access required")

    return user_id
