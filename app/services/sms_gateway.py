"""
SMS gateway - outbound text messages for check-in notifications.

The production gateway talks to the Twilio REST API directly with
`requests`. No gateway is built unless TWILIO_SID, TWILIO_AUTH_TOKEN and
TWILIO_PHONE are all configured; callers treat a missing gateway as
"notification disabled", not as an error.
"""

from abc import ABC, abstractmethod
from typing import Dict, Optional
import logging

import requests

from app.core.errors import NotificationFailed
from app.core.settings import settings
from app.utils.security import mask_phone_number

logger = logging.getLogger(__name__)


class SmsGateway(ABC):
    """
    Contract:
    - send() returns a provider message identifier on success.
    - Raises NotificationFailed on any dispatch failure.
    """

    @abstractmethod
    def send(self, to: str, body: str) -> str:
        raise NotImplementedError


class TwilioSmsGateway(SmsGateway):
    BASE_URL = "https://api.twilio.com/2010-04-01/Accounts/{sid}/Messages.json"

    def __init__(self, account_sid: str, auth_token: str, from_number: str, timeout: float = 5.0):
        self.account_sid = account_sid
        self.auth_token = auth_token
        self.from_number = from_number
        self.timeout = timeout

    def send(self, to: str, body: str) -> str:
        url = self.BASE_URL.format(sid=self.account_sid)
        data = {
            "To": to,
            "From": self.from_number,
            "Body": body,
        }
        try:
            resp = requests.post(url, data=data, auth=(self.account_sid, self.auth_token), timeout=self.timeout)
        except requests.RequestException as e:
            logger.warning(f"Twilio request to {mask_phone_number(to)} failed: {e}")
            raise NotificationFailed(f"SMS gateway unreachable: {e}") from e

        if resp.status_code not in (200, 201):
            logger.warning(f"Twilio rejected message to {mask_phone_number(to)} with status {resp.status_code}")
            raise NotificationFailed(f"SMS gateway returned status {resp.status_code}")

        try:
            payload: Dict = resp.json()
        except ValueError:
            payload = {}
        message_sid = payload.get("sid", "")
        logger.info(f"SMS sent to {mask_phone_number(to)} ({message_sid})")
        return message_sid


_sms_gateway: Optional[SmsGateway] = None


def get_sms_gateway() -> Optional[SmsGateway]:
    """
    Configured SMS gateway, or None when SMS credentials are not set.
    """
    global _sms_gateway
    if _sms_gateway is None and settings.TWILIO_SID and settings.TWILIO_AUTH_TOKEN and settings.TWILIO_PHONE:
        _sms_gateway = TwilioSmsGateway(
            account_sid=settings.TWILIO_SID,
            auth_token=settings.TWILIO_AUTH_TOKEN,
            from_number=settings.TWILIO_PHONE,
            timeout=settings.SMS_TIMEOUT_SECONDS,
        )
        logger.info("SMS gateway initialized: twilio")
    return _sms_gateway
