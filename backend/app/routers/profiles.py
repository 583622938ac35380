"""
Registered user profile management API endpoints (admin dashboard).

Endpoints:
  GET    /              - list profiles, newest first (?search=)
  PATCH  /{profile_id}  - edit full name, phone or company
  DELETE /{profile_id}  - delete a profile
"""

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from app.auth import require_admin
from app.db import PROFILES_TABLE, supabase_admin
from app.models.profile import ProfileUpdate, UserProfile

logger = logging.getLogger(__name__)

router = APIRouter()


def _matches_search(row: dict, term: str) -> bool:
    term = term.lower()
    return any(term in (row.get(field) or "").lower() for field in ("full_name", "company", "phone"))


@router.get("/", response_model=List[UserProfile])
async def list_profiles(
    search: Optional[str] = Query(None, description="Filter by full name, company or phone"),
    user_id: str = Depends(require_admin),
):
    result = supabase_admin.table(PROFILES_TABLE).select("*").order("created_at", desc=True).execute()

    rows = result.data or []
    if search:
        rows = [row for row in rows if _matches_search(row, search)]

    return [UserProfile(**row) for row in rows]


@router.patch("/{profile_id}", response_model=UserProfile)
async def update_profile(
    profile_id: str,
    update: ProfileUpdate,
    user_id: str = Depends(require_admin),
):
    changes = update.model_dump(exclude_unset=True, exclude_none=True)
    if not changes:
        raise HTTPException(status_code=400, detail="No fields to update")

    result = supabase_admin.table(PROFILES_TABLE).update(changes).eq("id", profile_id).execute()
    if not result.data:
        raise HTTPException(status_code=404, detail="Profile not found")

    logger.info(f"Admin {user_id} updated profile {profile_id}")
    return UserProfile(**result.data[0])


@router.delete("/{profile_id}")
async def delete_profile(
    profile_id: str,
    user_id: str = Depends(require_admin),
):
    result = supabase_admin.table(PROFILES_TABLE).delete().eq("id", profile_id).execute()
    if not result.data:
        raise HTTPException(status_code=404, detail="Profile not found")

    logger.info(f"Admin {user_id} deleted profile {profile_id}")
    return {"message": "Profile deleted"}
