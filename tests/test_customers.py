from sqlalchemy import func, select

from field_service.db.models import Customer, SmsNotification
from tests.factories import make_customer, make_report


def test_create_customer_sets_equal_timestamps(client):
    resp = client.post("/customers/", json={"name": "  Acme Pty  ", "email": ""})

    assert resp.status_code == 201
    data = resp.json()["data"]
    assert data["name"] == "Acme Pty"
    assert data["email"] is None
    assert data["created_at"] == data["updated_at"]


def test_create_customer_requires_name(client, db):
    resp = client.post("/customers/", json={"name": "   "})

    assert resp.status_code == 422
    body = resp.json()
    assert body["success"] is False
    assert body["error"]["code"] == "VALIDATION_ERROR"
    assert "name" in body["error"]["fields"]
    assert db.scalar(select(func.count(Customer.id))) == 0


def test_list_customers_ordered_by_name(client, db):
    make_customer(db, name="Zed")
    make_customer(db, name="Amy")

    resp = client.get("/customers/")

    assert [row["name"] for row in resp.json()["data"]] == ["Amy", "Zed"]


def test_update_customer_replaces_record_and_bumps_updated_at(client, db):
    customer = make_customer(db, name="Old", address="1 Main St")

    resp = client.put(
        f"/customers/{customer.id}",
        json={"name": "New", "mobile_phone": "+61400000009"},
    )

    assert resp.status_code == 200
    data = resp.json()["data"]
    assert data["name"] == "New"
    assert data["address"] is None
    assert data["mobile_phone"] == "+61400000009"
    assert data["updated_at"] != data["created_at"]


def test_get_unknown_customer_is_404(client):
    resp = client.get("/customers/does-not-exist")

    assert resp.status_code == 404
    assert resp.json()["error"]["code"] == "CUSTOMER_NOT_FOUND"


def test_delete_customer_with_reports_is_rejected(client, db):
    customer = make_customer(db)
    make_report(db, customer)

    resp = client.delete(f"/customers/{customer.id}")

    assert resp.status_code == 409
    assert resp.json()["error"]["code"] == "CUSTOMER_HAS_REPORTS"
    assert db.get(Customer, customer.id) is not None


def test_delete_customer_without_reports_removes_sms_history(client, db):
    customer = make_customer(db)
    db.add(SmsNotification(customer_id=customer.id, phone_number="+61400000001", message="hi", status="sent"))
    db.commit()

    resp = client.delete(f"/customers/{customer.id}")

    assert resp.status_code == 200
    db.expire_all()
    assert db.get(Customer, customer.id) is None
    assert db.scalar(select(func.count(SmsNotification.id))) == 0
