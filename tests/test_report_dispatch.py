from datetime import date

import pytest
from sqlalchemy import func, select
from sqlalchemy.exc import OperationalError

from field_service.db.models import ServiceReport, SmsNotification
from field_service.services import email_client, report_dispatch, report_service
from field_service.services.email_client import EmailSendError
from tests.factories import add_photo, make_customer, make_report


@pytest.fixture
def sent_emails(monkeypatch):
    sent = []

    def fake_send(to, subject, html):
        sent.append({"to": to, "subject": subject, "html": html})
        return "email-123"

    monkeypatch.setattr(report_dispatch, "send_html_email", fake_send)
    return sent


@pytest.fixture
def failing_email(monkeypatch):
    def fake_send(to, subject, html):
        raise EmailSendError("domain not verified")

    monkeypatch.setattr(report_dispatch, "send_html_email", fake_send)


def test_send_report_emails_operator_and_completes_draft(client, db, sent_emails):
    customer = make_customer(db, name="Jane <Citizen>", address="1 Main St")
    report = make_report(
        db,
        customer,
        equipment_model="DV-300",
        findings="Worn belt",
        service_date=date(2026, 10, 1),
    )
    add_photo(db, report, "http://x/second.jpg", 1)
    add_photo(db, report, "http://x/first.jpg", 0)

    resp = client.post("/functions/generate-and-send-report", json={"reportId": report.id})

    assert resp.status_code == 200
    assert resp.json() == {
        "success": True,
        "message": "Report generated and sent successfully to admin",
        "emailId": "email-123",
    }
    assert len(sent_emails) == 1
    email = sent_emails[0]
    assert email["to"] == ["info@australianvacuumservices.com"]
    assert email["subject"] == "Service Report - Jane <Citizen> - Ducted vacuum (01/10/2026)"
    assert "Jane &lt;Citizen&gt;" in email["html"]
    assert "Worn belt" in email["html"]
    assert "1 Main St" in email["html"]
    assert email["html"].index("http://x/first.jpg") < email["html"].index("http://x/second.jpg")

    db.expire_all()
    assert db.get(ServiceReport, report.id).status == "completed"


def test_send_report_failure_leaves_status_unchanged(client, db, failing_email):
    report = make_report(db, make_customer(db))

    resp = client.post(f"/reports/{report.id}/send")

    assert resp.status_code == 500
    assert resp.json() == {"success": False, "error": "Email sending failed: domain not verified"}
    db.expire_all()
    assert db.get(ServiceReport, report.id).status == "draft"
    assert db.scalar(select(func.count(SmsNotification.id))) == 0


def test_send_report_accepts_provider_reply_without_json(db, monkeypatch):
    class PlainResponse:
        status_code = 202
        text = "Accepted"

        def json(self):
            raise ValueError("not json")

    monkeypatch.setattr(email_client, "RESEND_API_KEY", "re_test")
    monkeypatch.setattr(email_client.requests, "post", lambda url, headers, json, timeout: PlainResponse())
    report = make_report(db, make_customer(db))

    result = report_dispatch.send_report_email(db, report.id)

    assert result.success is True
    assert result.email_id is None
    db.expire_all()
    assert db.get(ServiceReport, report.id).status == "completed"


def test_send_report_requires_report_id(client, sent_emails):
    resp = client.post("/functions/generate-and-send-report", json={})

    assert resp.status_code == 500
    assert resp.json()["error"] == "Report ID is required"
    assert sent_emails == []


def test_send_report_unknown_report(client, sent_emails):
    resp = client.post("/functions/generate-and-send-report", json={"reportId": "missing"})

    assert resp.status_code == 500
    assert resp.json()["error"] == "Report not found"
    assert sent_emails == []


def test_send_report_only_flips_drafts(db, sent_emails):
    report = make_report(db, make_customer(db))
    report_service.transition_report(db, report.id, "in-progress")

    result = report_dispatch.send_report_email(db, report.id)

    assert result.success is True
    assert len(sent_emails) == 1
    assert db.get(ServiceReport, report.id).status == "in-progress"


def test_status_update_failure_does_not_fail_the_send(db, sent_emails, monkeypatch):
    report = make_report(db, make_customer(db))

    def broken_update(db, report):
        raise OperationalError("UPDATE service_reports", {}, Exception("database is locked"))

    monkeypatch.setattr(report_dispatch, "mark_sent_report_completed", broken_update)

    result = report_dispatch.send_report_email(db, report.id)

    assert result.success is True
    assert result.email_id == "email-123"
    assert db.get(ServiceReport, report.id).status == "draft"
