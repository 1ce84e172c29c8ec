"""
Check-in Notifier - persist a safety check-in, then optionally text it.

Flow:
1. Store the check-in record (MUST succeed; a store failure aborts here)
2. If an SMS gateway is configured, send the fixed-template message
3. Report the notification outcome alongside the stored record

A failed SMS never rolls back the stored record. It is reported as
NotificationStatus.FAILED so the caller can tell a partial success from a
full failure.
"""

from app.config.firebase import get_db
from app.core.errors import NotificationFailed
from app.models.checkin import NotificationStatus
from app.services.sms_gateway import SmsGateway, get_sms_gateway
from app.utils.firestore_helpers import store_errors
from app.utils.security import mask_phone_number
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Dict, Optional
import logging

logger = logging.getLogger(__name__)

CHECKINS_COLLECTION = "checkins"
SMS_TEMPLATE = "Safe Bharat Check-In: {message}"


@dataclass(frozen=True)
class CheckinResult:
    record: Dict
    notification: NotificationStatus


class CheckinNotifier:
    def __init__(self, sms_gateway: Optional[SmsGateway] = None, db=None):
        self.sms_gateway = sms_gateway
        self._db = db

    @property
    def db(self):
        return self._db if self._db is not None else get_db()

    def submit(self, message: str, phone: str) -> CheckinResult:
        record = self._persist(message, phone)
        notification = self._notify(record)
        return CheckinResult(record=record, notification=notification)

    def _persist(self, message: str, phone: str) -> Dict:
        doc_ref = self.db.collection(CHECKINS_COLLECTION).document()
        record = {
            "message": message,
            "phone": phone,
            "created_at": datetime.now(timezone.utc),
        }
        with store_errors("save check-in"):
            doc_ref.set(record)

        logger.info(f"Check-in saved: {doc_ref.id} ({mask_phone_number(phone)})")
        record["id"] = doc_ref.id
        return record

    def _notify(self, record: Dict) -> NotificationStatus:
        if self.sms_gateway is None:
            return NotificationStatus.SKIPPED

        body = SMS_TEMPLATE.format(message=record["message"])
        try:
            self.sms_gateway.send(to=record["phone"], body=body)
        except NotificationFailed as e:
            logger.warning(f"Check-in {record['id']} stored but SMS failed: {e}")
            return NotificationStatus.FAILED

        return NotificationStatus.SENT


def get_checkin_notifier() -> CheckinNotifier:
    return CheckinNotifier(sms_gateway=get_sms_gateway())
