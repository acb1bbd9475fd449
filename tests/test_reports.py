import pytest
from sqlalchemy import event, func, select, update

from field_service.core.domain_exceptions import DomainException
from field_service.db.models import ReportPhoto, ServiceReport, SmsNotification
from field_service.services import report_service
from tests.factories import add_photo, make_customer, make_report


REPORT_BODY = {
    "equipment_type": "Ducted vacuum",
    "equipment_model": "DV-300",
    "service_description": "Replaced filter",
    "technician_name": "Sam",
    "service_date": "2026-10-01",
    "completion_date": "",
}


def test_create_report_starts_as_draft_with_ordered_photos(client, db):
    customer = make_customer(db)

    resp = client.post(
        "/reports/",
        json={
            **REPORT_BODY,
            "customer_id": customer.id,
            "status": "completed",
            "photo_urls": ["http://x/a.jpg", "http://x/b.jpg"],
        },
    )

    assert resp.status_code == 201
    report_id = resp.json()["data"]["id"]
    assert resp.json()["data"]["status"] == "draft"
    assert resp.json()["data"]["completion_date"] is None

    detail = client.get(f"/reports/{report_id}").json()["data"]
    assert [photo["photo_url"] for photo in detail["photos"]] == ["http://x/a.jpg", "http://x/b.jpg"]
    assert [photo["order_index"] for photo in detail["photos"]] == [0, 1]
    assert detail["customer"]["id"] == customer.id


def test_create_report_for_unknown_customer_is_rejected(client, db):
    resp = client.post("/reports/", json={**REPORT_BODY, "customer_id": "missing"})

    assert resp.status_code == 404
    assert resp.json()["error"]["code"] == "CUSTOMER_NOT_FOUND"
    assert db.scalar(select(func.count(ServiceReport.id))) == 0


def test_create_report_requires_service_date(client, db):
    customer = make_customer(db)
    body = {key: value for key, value in REPORT_BODY.items() if key != "service_date"}

    resp = client.post("/reports/", json={**body, "customer_id": customer.id})

    assert resp.status_code == 422
    assert "service_date" in resp.json()["error"]["fields"]


def test_list_reports_newest_first(client, db):
    customer = make_customer(db)
    first = make_report(db, customer)
    second = make_report(db, customer)

    data = client.get("/reports/").json()["data"]

    assert [row["id"] for row in data] == [second.id, first.id]
    assert data[0]["customer"]["name"] == customer.name


def test_finalize_moves_draft_to_completed(client, db):
    report = make_report(db, make_customer(db))

    resp = client.post(f"/reports/{report.id}/finalize")

    assert resp.status_code == 200
    assert resp.json()["data"]["status"] == "completed"


def test_finalize_completed_report_is_noop(db):
    report = make_report(db, make_customer(db))
    report_service.finalize_report(db, report.id)
    updated_at = db.get(ServiceReport, report.id).updated_at

    again = report_service.finalize_report(db, report.id)

    assert again.status == "completed"
    assert again.updated_at == updated_at


def test_in_progress_report_can_be_finalized(db):
    report = make_report(db, make_customer(db))
    report_service.transition_report(db, report.id, "in-progress")

    assert report_service.finalize_report(db, report.id).status == "completed"


def test_sent_report_flip_loses_to_a_concurrent_change(db):
    report = make_report(db, make_customer(db))
    db.execute(
        update(ServiceReport)
        .where(ServiceReport.id == report.id)
        .values(status="in-progress")
        .execution_options(synchronize_session=False)
    )
    assert report.status == "draft"

    assert report_service.mark_sent_report_completed(db, report) is False
    assert report.status == "in-progress"


def test_completed_report_never_moves_backward(db):
    report = make_report(db, make_customer(db))
    report_service.finalize_report(db, report.id)

    for status in ("draft", "in-progress"):
        with pytest.raises(DomainException) as exc_info:
            report_service.transition_report(db, report.id, status)
        assert exc_info.value.code == "INVALID_STATUS"

    assert db.get(ServiceReport, report.id).status == "completed"


def test_update_report_keeps_status(client, db):
    customer = make_customer(db)
    report = make_report(db, customer)
    report_service.finalize_report(db, report.id)

    resp = client.put(
        f"/reports/{report.id}",
        json={**REPORT_BODY, "customer_id": customer.id, "findings": "Worn belt", "status": "draft"},
    )

    assert resp.status_code == 200
    data = resp.json()["data"]
    assert data["findings"] == "Worn belt"
    assert data["equipment_model"] == "DV-300"
    assert data["status"] == "completed"


def test_finalize_unknown_report_is_404(client):
    resp = client.post("/reports/nope/finalize")

    assert resp.status_code == 404
    assert resp.json()["error"]["code"] == "REPORT_NOT_FOUND"


def test_delete_report_removes_photos_before_report(client, db, engine):
    customer = make_customer(db)
    report = make_report(db, customer)
    add_photo(db, report, "http://x/1.jpg", 0)
    add_photo(db, report, "http://x/2.jpg", 1)
    db.add(SmsNotification(
        customer_id=customer.id,
        service_report_id=report.id,
        phone_number="+61400000001",
        message="reminder",
        status="sent",
    ))
    db.commit()

    deletes: list[str] = []

    def capture(conn, cursor, statement, parameters, context, executemany):
        if statement.lstrip().upper().startswith("DELETE"):
            deletes.append(statement)

    event.listen(engine, "before_cursor_execute", capture)
    try:
        resp = client.delete(f"/reports/{report.id}")
    finally:
        event.remove(engine, "before_cursor_execute", capture)

    assert resp.status_code == 200
    tables = [
        "service_report_photos" if "service_report_photos" in statement else "service_reports"
        for statement in deletes
    ]
    assert tables == ["service_report_photos", "service_reports"]
    assert db.scalar(select(func.count(ReportPhoto.id))) == 0
    assert db.get(ServiceReport, report.id) is None
    notification = db.scalars(select(SmsNotification)).one()
    assert notification.service_report_id is None


def test_remove_photo(client, db):
    report = make_report(db, make_customer(db))
    photo = add_photo(db, report, "http://x/1.jpg", 0)

    resp = client.delete(f"/reports/{report.id}/photos/{photo.id}")

    assert resp.status_code == 200
    assert db.scalar(select(func.count(ReportPhoto.id))) == 0


def test_routes_require_a_session(anon_client):
    resp = anon_client.get("/reports/")

    assert resp.status_code == 401
    assert resp.json()["error"]["code"] == "AUTH_REQUIRED"
