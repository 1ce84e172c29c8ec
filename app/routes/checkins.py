"""
Check-in endpoint - record a safety check-in and optionally text it.
"""

from fastapi import APIRouter, Depends, status

from app.dependencies import require_subject
from app.models.checkin import CheckinCreate, CheckinResponse
from app.services.checkin_service import CheckinNotifier, get_checkin_notifier

router = APIRouter(prefix="/api/checkins", tags=["Check-ins"])


@router.post("", response_model=CheckinResponse, status_code=status.HTTP_201_CREATED)
def submit_checkin(
    checkin: CheckinCreate,
    subject: str = Depends(require_subject),
    notifier: CheckinNotifier = Depends(get_checkin_notifier),
):
    """
    Store a check-in, then send an SMS if a gateway is configured.

    `notification` reports the SMS outcome: sent, skipped (no gateway) or
    failed. A failed SMS still returns 201 because the check-in was stored.
    """
    result = notifier.submit(message=checkin.message, phone=checkin.phone)
    return CheckinResponse(**result.record, notification=result.notification)
