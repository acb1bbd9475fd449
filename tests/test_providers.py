from types import SimpleNamespace

import pytest
import requests
from sqlalchemy import select
from twilio.base.exceptions import TwilioRestException

from field_service.db.models import SmsNotification
from field_service.services import email_client, twilio_client
from field_service.services.email_client import EmailSendError
from field_service.services.twilio_client import SmsProviderError
from tests.factories import make_customer


class FakeMessages:
    def __init__(self, outcome):
        self.outcome = outcome
        self.created = []

    def create(self, **kwargs):
        self.created.append(kwargs)
        if isinstance(self.outcome, Exception):
            raise self.outcome
        return self.outcome


@pytest.fixture
def fake_twilio(monkeypatch):
    def install(outcome):
        messages = FakeMessages(outcome)
        monkeypatch.setattr(twilio_client, "client", SimpleNamespace(messages=messages))
        monkeypatch.setattr(twilio_client, "TWILIO_SMS_FROM", "+61400999999")
        return messages

    return install


def test_accepted_sms(fake_twilio):
    messages = fake_twilio(SimpleNamespace(sid="SM1", status="queued", error_message=None))

    result = twilio_client.send_sms("+61 400 000 001", "Hello")

    assert result.success is True
    assert result.sid == "SM1"
    assert messages.created[0] == {"from_": "+61400999999", "to": "+61400000001", "body": "Hello"}


def test_rejected_sms_is_a_provider_outcome(fake_twilio):
    fake_twilio(TwilioRestException(400, "/Messages", msg="Invalid 'To' Phone Number"))

    result = twilio_client.send_sms("+61400000001", "Hello")

    assert result.success is False
    assert result.error == "Invalid 'To' Phone Number"


def test_failed_status_is_a_provider_outcome(fake_twilio):
    fake_twilio(SimpleNamespace(sid="SM2", status="failed", error_message="Carrier violation"))

    result = twilio_client.send_sms("+61400000001", "Hello")

    assert (result.success, result.status, result.error) == (False, "failed", "Carrier violation")


def test_bad_credentials_never_reach_provider(fake_twilio):
    fake_twilio(TwilioRestException(401, "/Messages", msg="Authenticate"))

    with pytest.raises(SmsProviderError):
        twilio_client.send_sms("+61400000001", "Hello")


def test_transport_error_never_reaches_provider(fake_twilio):
    fake_twilio(requests.ConnectionError("connection refused"))

    with pytest.raises(SmsProviderError):
        twilio_client.send_sms("+61400000001", "Hello")


def test_local_number_is_left_for_twilio_to_judge(client, db, fake_twilio):
    messages = fake_twilio(TwilioRestException(400, "/Messages", msg="Invalid 'To' Phone Number"))
    customer = make_customer(db, phone="0412 345 678")

    resp = client.post(f"/customers/{customer.id}/sms", json={"message": "Running late"})

    assert resp.status_code == 200
    assert messages.created[0]["to"] == "0412345678"
    notification = db.scalars(select(SmsNotification)).one()
    assert notification.status == "failed"
    assert notification.phone_number == "0412 345 678"


def test_unconfigured_client(monkeypatch):
    monkeypatch.setattr(twilio_client, "client", None)

    with pytest.raises(SmsProviderError):
        twilio_client.send_sms("+61400000001", "Hello")


class FakeResponse:
    def __init__(self, status_code, body):
        self.status_code = status_code
        self._body = body
        self.text = str(body)

    def json(self):
        return self._body


def test_email_success_returns_provider_id(monkeypatch):
    captured = {}

    def fake_post(url, headers, json, timeout):
        captured.update(url=url, headers=headers, json=json)
        return FakeResponse(200, {"id": "re_123"})

    monkeypatch.setattr(email_client, "RESEND_API_KEY", "re_test")
    monkeypatch.setattr(email_client.requests, "post", fake_post)

    email_id = email_client.send_html_email(["ops@example.com"], "Subject", "<p>hi</p>")

    assert email_id == "re_123"
    assert captured["headers"]["Authorization"] == "Bearer re_test"
    assert captured["json"]["to"] == ["ops@example.com"]
    assert captured["json"]["html"] == "<p>hi</p>"


def test_email_success_without_json_body(monkeypatch):
    class PlainResponse:
        status_code = 200
        text = "OK"

        def json(self):
            raise ValueError("not json")

    monkeypatch.setattr(email_client, "RESEND_API_KEY", "re_test")
    monkeypatch.setattr(email_client.requests, "post", lambda url, headers, json, timeout: PlainResponse())

    assert email_client.send_html_email(["ops@example.com"], "Subject", "<p>hi</p>") is None


def test_email_provider_error_message(monkeypatch):
    monkeypatch.setattr(email_client, "RESEND_API_KEY", "re_test")
    monkeypatch.setattr(
        email_client.requests,
        "post",
        lambda url, headers, json, timeout: FakeResponse(422, {"message": "Invalid `from` field"}),
    )

    with pytest.raises(EmailSendError, match="Invalid `from` field"):
        email_client.send_html_email(["ops@example.com"], "Subject", "<p>hi</p>")


def test_email_without_api_key(monkeypatch):
    monkeypatch.setattr(email_client, "RESEND_API_KEY", None)

    with pytest.raises(EmailSendError):
        email_client.send_html_email(["ops@example.com"], "Subject", "<p>hi</p>")
