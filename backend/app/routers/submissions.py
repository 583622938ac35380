"""
Form submission management API endpoints (admin dashboard).

All endpoints require an authenticated admin.

Endpoints:
  GET    /                 - list submissions, newest first (?search=, ?status=)
  GET    /stats            - per-status counts
  PATCH  /{submission_id}  - edit submission fields
  PATCH  /{submission_id}/status - change status and notify the customer
  DELETE /{submission_id}  - delete a submission
"""

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from app.auth import require_admin
from app.db import SUBMISSIONS_TABLE, supabase_admin
from app.models.notification import StatusUpdateRequest
from app.models.submission import (
    FormSubmission,
    StatusChangeRequest,
    StatusChangeResponse,
    SubmissionStats,
    SubmissionStatus,
    SubmissionUpdate,
)
from app.services.dispatcher import NotificationDispatcher, get_dispatcher

logger = logging.getLogger(__name__)

router = APIRouter()


def _matches_search(row: dict, term: str) -> bool:
    """Case-insensitive substring match over name, email and company."""
    term = term.lower()
    return any(term in (row.get(field) or "").lower() for field in ("name", "email", "company"))


def _fetch_submission(submission_id: str) -> dict:
    result = supabase_admin.table(SUBMISSIONS_TABLE).select("*").eq("id", submission_id).execute()
    if not result.data:
        raise HTTPException(status_code=404, detail="Submission not found")
    return result.data[0]


@router.get("/", response_model=List[FormSubmission])
async def list_submissions(
    search: Optional[str] = Query(None, description="Filter by name, email or company"),
    status: Optional[SubmissionStatus] = Query(None),
    user_id: str = Depends(require_admin),
):
    query = supabase_admin.table(SUBMISSIONS_TABLE).select("*")
    if status is not None:
        query = query.eq("status", status.value)
    result = query.order("created_at", desc=True).execute()

    rows = result.data or []
    if search:
        rows = [row for row in rows if _matches_search(row, search)]

    return [FormSubmission(**row) for row in rows]


@router.get("/stats", response_model=SubmissionStats)
async def get_submission_stats(user_id: str = Depends(require_admin)):
    result = supabase_admin.table(SUBMISSIONS_TABLE).select("status").execute()
    rows = result.data or []

    counts = {status.value: 0 for status in SubmissionStatus}
    for row in rows:
        status = row.get("status")
        if status in counts:
            counts[status] += 1

    return SubmissionStats(total=len(rows), **counts)


@router.patch("/{submission_id}", response_model=FormSubmission)
async def update_submission(
    submission_id: str,
    update: SubmissionUpdate,
    user_id: str = Depends(require_admin),
):
    """Apply the fields present in the request body; absent fields are unchanged."""
    changes = update.model_dump(mode="json", exclude_unset=True, exclude_none=True)
    if not changes:
        raise HTTPException(status_code=400, detail="No fields to update")

    result = supabase_admin.table(SUBMISSIONS_TABLE).update(changes).eq("id", submission_id).execute()
    if not result.data:
        raise HTTPException(status_code=404, detail="Submission not found")

    logger.info(f"Admin {user_id} updated submission {submission_id}: {sorted(changes)}")
    return FormSubmission(**result.data[0])


@router.patch("/{submission_id}/status", response_model=StatusChangeResponse)
async def change_submission_status(
    submission_id: str,
    change: StatusChangeRequest,
    user_id: str = Depends(require_admin),
    dispatcher: NotificationDispatcher = Depends(get_dispatcher),
):
    """
    Move a submission to a new status.

    When ``notify`` is true and the status actually changed, the customer is
    emailed a status-update notice. The email is best-effort: a failure is
    logged and reported as ``notification_sent: false`` without undoing the
    status change.
    """
    existing = _fetch_submission(submission_id)
    old_status = existing.get("status")
    new_status = change.status.value

    result = (
        supabase_admin.table(SUBMISSIONS_TABLE)
        .update({"status": new_status})
        .eq("id", submission_id)
        .execute()
    )
    if not result.data:
        raise HTTPException(status_code=404, detail="Submission not found")

    submission = FormSubmission(**result.data[0])
    logger.info(f"Admin {user_id} changed submission {submission_id} status {old_status} -> {new_status}")

    notification_sent = False
    if change.notify and old_status != new_status:
        notification = StatusUpdateRequest(
            name=submission.name,
            email=submission.email,
            service=submission.service,
            old_status=old_status,
            new_status=new_status,
        )
        try:
            await dispatcher.dispatch(notification)
            notification_sent = True
        except Exception as e:
            logger.error(f"Failed to send status update email for submission {submission_id}: {e}")

    return StatusChangeResponse(submission=submission, notification_sent=notification_sent)


@router.delete("/{submission_id}")
async def delete_submission(
    submission_id: str,
    user_id: str = Depends(require_admin),
):
    result = supabase_admin.table(SUBMISSIONS_TABLE).delete().eq("id", submission_id).execute()
    if not result.data:
        raise HTTPException(status_code=404, detail="Submission not found")

    logger.info(f"Admin {user_id} deleted submission {submission_id}")
    return {"message": "Submission deleted"}
