"""
Admin login, session and logout endpoints.

Endpoints:
  POST /login    - password sign-in; only users with the admin role get a session
  GET  /session  - current admin's user ID and roles (auth: JWT + admin role)
  POST /logout   - revoke the caller's session (auth: JWT + admin role)
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Header, HTTPException

from app.auth import ADMIN_ROLE, bearer_token, get_user_roles, require_admin
from app.db import supabase, supabase_admin
from app.models.admin_auth import LoginRequest, LoginResponse, LogoutResponse, SessionInfo

logger = logging.getLogger(__name__)

router = APIRouter()


def _sign_out_quietly() -> None:
    try:
        supabase.auth.sign_out()
    except Exception as e:
        logger.warning(f"Sign-out after rejected login failed: {e}")


@router.post("/login", response_model=LoginResponse)
async def login(credentials: LoginRequest):
    """
    Sign in with email and password and confirm the admin role.

    401 for wrong credentials, 403 (and the fresh session is signed out) when
    the account is not an admin, 500 when roles cannot be verified.
    """
    try:
        auth_response = supabase.auth.sign_in_with_password(
            {"email": credentials.email, "password": credentials.password}
        )
    except Exception as e:
        logger.info(f"Admin login failed for {credentials.email}: {e}")
        raise HTTPException(status_code=401, detail="Invalid email or password")

    session = getattr(auth_response, "session", None)
    user = getattr(auth_response, "user", None)
    if not session or not user:
        raise HTTPException(status_code=401, detail="Could not create session")

    try:
        roles = get_user_roles(user.id)
    except Exception as e:
        logger.error(f"Error checking roles during login for {user.id}: {e}")
        _sign_out_quietly()
        raise HTTPException(status_code=500, detail="Failed to verify role")

    if ADMIN_ROLE not in roles:
        logger.warning(f"Login rejected for non-admin user {user.id}")
        _sign_out_quietly()
        raise HTTPException(status_code=403, detail="Admin access required")

    logger.info(f"Admin {user.id} signed in")
    return LoginResponse(
        access_token=session.access_token,
        refresh_token=session.refresh_token,
        expires_at=session.expires_at,
        user_id=user.id,
    )


@router.get("/session", response_model=SessionInfo)
async def get_session(user_id: str = Depends(require_admin)):
    return SessionInfo(user_id=user_id, roles=get_user_roles(user_id))


@router.post("/logout", response_model=LogoutResponse)
async def logout(
    authorization: Optional[str] = Header(None),
    user_id: str = Depends(require_admin),
):
    """
    Revoke the session behind the caller's access token.

    The dashboard drops its tokens whatever the outcome, so a failed
    revocation is logged and reported as ``session_revoked: false``.
    """
    token = bearer_token(authorization)
    try:
        supabase_admin.auth.admin.sign_out(token, "local")
    except Exception as e:
        logger.warning(f"Could not revoke session for admin {user_id}: {e}")
        return LogoutResponse(message="Signed out", session_revoked=False)

    logger.info(f"Admin {user_id} signed out")
    return LogoutResponse(message="Signed out", session_revoked=True)
