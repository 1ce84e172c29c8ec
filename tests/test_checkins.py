"""Tests for the check-in notifier, SMS gateway and check-in route."""

from unittest.mock import MagicMock, patch

import pytest
import requests
from google.api_core.exceptions import ServiceUnavailable

from app.core.errors import NotificationFailed, StoreUnavailable
from app.main import app
from app.models.checkin import NotificationStatus
from app.services.checkin_service import CheckinNotifier, get_checkin_notifier
from app.services.sms_gateway import SmsGateway, TwilioSmsGateway

PHONE = "+919876543210"


class RecordingGateway(SmsGateway):
    def __init__(self, fail=False):
        self.fail = fail
        self.sent = []

    def send(self, to, body):
        if self.fail:
            raise NotificationFailed("gateway down")
        self.sent.append((to, body))
        return "SM123"


class TestCheckinNotifier:
    def test_no_gateway_persists_and_skips_notification(self, db):
        result = CheckinNotifier(sms_gateway=None, db=db).submit("Safe at home", PHONE)

        assert result.notification == NotificationStatus.SKIPPED
        stored = db.collection("checkins").document(result.record["id"]).get().to_dict()
        assert stored["message"] == "Safe at home"
        assert stored["phone"] == PHONE

    def test_gateway_sends_fixed_template(self, db):
        gateway = RecordingGateway()

        result = CheckinNotifier(sms_gateway=gateway, db=db).submit("Safe at home", PHONE)

        assert result.notification == NotificationStatus.SENT
        assert gateway.sent == [(PHONE, "Safe Bharat Check-In: Safe at home")]

    def test_sms_failure_keeps_record(self, db):
        result = CheckinNotifier(sms_gateway=RecordingGateway(fail=True), db=db).submit("Safe", PHONE)

        assert result.notification == NotificationStatus.FAILED
        assert db.collection("checkins").document(result.record["id"]).get().exists

    def test_store_failure_skips_sms(self):
        broken_db = MagicMock()
        broken_db.collection.return_value.document.return_value.set.side_effect = ServiceUnavailable("down")
        gateway = RecordingGateway()

        with pytest.raises(StoreUnavailable):
            CheckinNotifier(sms_gateway=gateway, db=broken_db).submit("Safe", PHONE)
        assert gateway.sent == []


class TestTwilioSmsGateway:
    def gateway(self):
        return TwilioSmsGateway(account_sid="AC123", auth_token="token", from_number="+15005550006", timeout=2.0)

    def test_posts_message(self):
        response = MagicMock(status_code=201, content=b'{"sid": "SM1"}')
        response.json.return_value = {"sid": "SM1"}

        with patch("app.services.sms_gateway.requests.post", return_value=response) as post:
            assert self.gateway().send(PHONE, "hello") == "SM1"

        args, kwargs = post.call_args
        assert args[0] == "https://api.twilio.com/2010-04-01/Accounts/AC123/Messages.json"
        assert kwargs["data"] == {"To": PHONE, "From": "+15005550006", "Body": "hello"}
        assert kwargs["auth"] == ("AC123", "token")
        assert kwargs["timeout"] == 2.0

    def test_rejected_message_raises_notification_failed(self):
        with patch("app.services.sms_gateway.requests.post", return_value=MagicMock(status_code=400)):
            with pytest.raises(NotificationFailed):
                self.gateway().send(PHONE, "hello")

    def test_network_error_raises_notification_failed(self):
        with patch("app.services.sms_gateway.requests.post", side_effect=requests.ConnectionError("no route")):
            with pytest.raises(NotificationFailed):
                self.gateway().send(PHONE, "hello")


class TestCheckinRoute:
    def test_checkin_without_gateway(self, client, auth_headers, db):
        resp = client.post("/api/checkins", json={"message": "All safe", "phone": PHONE}, headers=auth_headers)

        assert resp.status_code == 201
        body = resp.json()
        assert body["message"] == "All safe"
        assert body["phone"] == PHONE
        assert body["notification"] == "skipped"
        assert db.collection("checkins").document(body["id"]).get().exists

    def test_sms_failure_is_partial_success(self, client, auth_headers, db):
        app.dependency_overrides[get_checkin_notifier] = lambda: CheckinNotifier(
            sms_gateway=RecordingGateway(fail=True), db=db
        )

        resp = client.post("/api/checkins", json={"message": "All safe", "phone": PHONE}, headers=auth_headers)

        assert resp.status_code == 201
        assert resp.json()["notification"] == "failed"
        assert len(list(db.collection("checkins").stream())) == 1

    @pytest.mark.parametrize("phone", ["12345", "not-a-phone", "+91 98765 43210"])
    def test_invalid_phone_rejected(self, client, auth_headers, db, phone):
        resp = client.post("/api/checkins", json={"message": "All safe", "phone": phone}, headers=auth_headers)

        assert resp.status_code == 422
        assert list(db.collection("checkins").stream()) == []

    def test_checkin_requires_token(self, client):
        resp = client.post("/api/checkins", json={"message": "All safe", "phone": PHONE})

        assert resp.status_code == 401
