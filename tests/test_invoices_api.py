from datetime import timedelta
from decimal import Decimal

import pytest
from fastapi.testclient import TestClient

from backend.app.core.time import as_utc, utc_now
from backend.app.db.base import Base
from backend.app.db.session import SessionLocal, engine
from backend.app.main import app
from backend.app.models.invoice import Invoice
from backend.app.models.line_item import LineItem
from backend.app.services import invoices as invoice_service


@pytest.fixture(autouse=True)
def setup_db():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


def register(email: str, address: str | None = "10 Freelancer Way") -> TestClient:
    client = TestClient(app)
    payload = {"email": email, "password": "secret"}
    if address is not None:
        payload["address"] = address
    resp = client.post("/auth/register", json=payload)
    assert resp.status_code == 200
    return client


def invoice_payload(**overrides):
    payload = {
        "client_name": "Client Ltd",
        "client_address": "5 Client Street",
        "currency": "EUR",
        "date": "2030-01-15",
        "items": [
            {"description": "Design work", "quantity": 2, "unit_price": 50, "use_quantity": True},
            {"description": "Setup fee", "quantity": 1, "unit_price": 30, "use_quantity": False},
        ],
    }
    payload.update(overrides)
    return payload


def create_invoice(client: TestClient, **overrides):
    resp = client.post("/invoices", json=invoice_payload(**overrides))
    assert resp.status_code == 201, resp.text
    return resp.json()


def test_invoices_require_auth():
    client = TestClient(app)
    assert client.get("/invoices").status_code == 401
    assert client.post("/invoices", json=invoice_payload()).status_code == 401


def test_create_invoice_computes_totals():
    client = register("inv1@example.com")
    data = create_invoice(client)
    assert data["total_amount"] == "130.00"
    assert [item["line_total"] for item in data["items"]] == ["100.00", "30.00"]
    assert [item["position"] for item in data["items"]] == [0, 1]
    assert data["invoice_number"] == "IN-00001"
    assert data["user_address"] == "10 Freelancer Way"
    assert data["client_name"] == "Client Ltd"


def test_flat_amount_line_ignores_quantity():
    client = register("inv2@example.com")
    data = create_invoice(
        client,
        items=[{"description": "Retainer", "quantity": 9, "unit_price": 250, "use_quantity": False}],
    )
    assert data["items"][0]["line_total"] == "250.00"
    assert data["total_amount"] == "250.00"


def test_use_quantity_defaults_to_true():
    client = register("inv3@example.com")
    data = create_invoice(client, items=[{"description": "Hours", "quantity": 3, "unit_price": 40}])
    assert data["items"][0]["use_quantity"] is True
    assert data["total_amount"] == "120.00"


def test_stored_total_matches_sum_of_line_totals():
    client = register("inv4@example.com")
    data = create_invoice(
        client,
        items=[
            {"description": "a", "quantity": "1.5", "unit_price": "33.33"},
            {"description": "b", "quantity": 4, "unit_price": "12.50"},
            {"description": "c", "quantity": 2, "unit_price": "19.99", "use_quantity": False},
        ],
    )
    with SessionLocal() as db:
        invoice = db.query(Invoice).filter(Invoice.id == data["id"]).first()
        line_sum = sum((item.line_total for item in invoice.items), Decimal("0.00"))
        assert invoice.total_amount == line_sum
        assert invoice.total_amount == Decimal("119.99")


def test_zero_line_items_rejected():
    client = register("inv5@example.com")
    resp = client.post("/invoices", json=invoice_payload(items=[]))
    assert resp.status_code == 400
    assert resp.json()["detail"] == "At least one line item is required"
    with SessionLocal() as db:
        assert db.query(Invoice).count() == 0


def test_user_address_required():
    client = register("inv6@example.com", address=None)
    resp = client.post("/invoices", json=invoice_payload())
    assert resp.status_code == 400
    assert resp.json()["detail"] == "User address is required"


def test_client_name_required_without_company():
    client = register("inv7@example.com")
    resp = client.post("/invoices", json=invoice_payload(client_name="  "))
    assert resp.status_code == 400
    assert resp.json()["detail"] == "Client name is required"


def test_currency_is_normalized_and_validated():
    client = register("inv8@example.com")
    data = create_invoice(client, currency="usd")
    assert data["currency"] == "USD"
    resp = client.post("/invoices", json=invoice_payload(currency="EURO"))
    assert resp.status_code == 422


def test_company_fields_are_snapshotted():
    freelancer = register("inv9a@example.com")
    client_company_owner = register("inv9b@example.com")
    company = client_company_owner.post(
        "/company",
        json={"name": "Big Client", "address": "99 Corporate Blvd", "registration_number": "BC-9"},
    ).json()

    data = create_invoice(freelancer, company_id=company["id"], client_name=None, client_address=None)
    assert data["company_id"] == company["id"]
    assert data["client_name"] == "Big Client"
    assert data["client_address"] == "99 Corporate Blvd"

    client_company_owner.patch("/company", json={"name": "Renamed Client", "address": "1 Elsewhere"})
    fetched = freelancer.get(f"/invoices/{data['id']}").json()
    assert fetched["client_name"] == "Big Client"
    assert fetched["client_address"] == "99 Corporate Blvd"


def test_user_address_snapshot_survives_profile_change():
    client = register("inv10@example.com")
    data = create_invoice(client)
    client.patch("/auth/profile", json={"address": "New Office 2"})
    fetched = client.get(f"/invoices/{data['id']}").json()
    assert fetched["user_address"] == "10 Freelancer Way"


def test_unknown_company_returns_404():
    client = register("inv11@example.com")
    resp = client.post("/invoices", json=invoice_payload(company_id=9999))
    assert resp.status_code == 404
    assert resp.json()["detail"] == "Company not found"


def test_foreign_template_returns_404():
    owner = register("inv12a@example.com")
    other = register("inv12b@example.com")
    template_id = owner.post("/invoice-templates", json={"name": "Mine"}).json()["id"]
    resp = other.post("/invoices", json=invoice_payload(template_id=template_id))
    assert resp.status_code == 404
    assert resp.json()["detail"] == "Invoice template not found"


def test_get_unknown_invoice_returns_404():
    client = register("inv13@example.com")
    resp = client.get("/invoices/424242")
    assert resp.status_code == 404
    assert resp.json()["detail"] == "Invoice not found"


def test_invoices_are_owner_isolated():
    client_a = register("inv14a@example.com")
    client_b = register("inv14b@example.com")
    data = create_invoice(client_a)

    assert client_b.get(f"/invoices/{data['id']}").status_code == 404
    assert client_b.patch(f"/invoices/{data['id']}", json={"currency": "USD"}).status_code == 404
    assert client_b.get("/invoices").json() == []
    assert len(client_a.get("/invoices").json()) == 1


def test_invoice_numbers_are_sequential_per_owner():
    client_a = register("inv15a@example.com")
    client_b = register("inv15b@example.com")
    assert create_invoice(client_a)["invoice_number"] == "IN-00001"
    assert create_invoice(client_a)["invoice_number"] == "IN-00002"
    assert create_invoice(client_b)["invoice_number"] == "IN-00001"


def test_update_replaces_items_and_recomputes_total():
    client = register("inv16@example.com")
    data = create_invoice(client)
    resp = client.patch(
        f"/invoices/{data['id']}",
        json={"items": [{"description": "Only line", "quantity": 5, "unit_price": 10}]},
    )
    assert resp.status_code == 200
    updated = resp.json()
    assert updated["total_amount"] == "50.00"
    assert len(updated["items"]) == 1
    assert updated["items"][0]["description"] == "Only line"
    assert updated["client_name"] == "Client Ltd"

    with SessionLocal() as db:
        assert db.query(LineItem).filter(LineItem.invoice_id == data["id"]).count() == 1


def test_update_with_empty_items_rejected_and_nothing_changes():
    client = register("inv17@example.com")
    data = create_invoice(client)
    resp = client.patch(f"/invoices/{data['id']}", json={"items": [], "currency": "GBP"})
    assert resp.status_code == 400
    fetched = client.get(f"/invoices/{data['id']}").json()
    assert fetched["total_amount"] == "130.00"
    assert fetched["currency"] == "EUR"
    assert len(fetched["items"]) == 2


def test_update_scalar_fields_keeps_items():
    client = register("inv18@example.com")
    data = create_invoice(client)
    resp = client.patch(
        f"/invoices/{data['id']}",
        json={"client_name": "Renamed Co", "date": "2030-02-01", "currency": "gbp"},
    )
    assert resp.status_code == 200
    updated = resp.json()
    assert updated["client_name"] == "Renamed Co"
    assert updated["date"] == "2030-02-01"
    assert updated["currency"] == "GBP"
    assert updated["total_amount"] == "130.00"
    assert len(updated["items"]) == 2


def test_update_company_resnapshots_client():
    freelancer = register("inv19a@example.com")
    other = register("inv19b@example.com")
    company = other.post(
        "/company",
        json={"name": "Switch Co", "address": "7 Switch Rd", "registration_number": "SW-7"},
    ).json()
    data = create_invoice(freelancer)
    resp = freelancer.patch(f"/invoices/{data['id']}", json={"company_id": company["id"]})
    assert resp.status_code == 200
    updated = resp.json()
    assert updated["company_id"] == company["id"]
    assert updated["client_name"] == "Switch Co"
    assert updated["client_address"] == "7 Switch Rd"


def test_list_invoices_sorting_and_filters():
    client = register("inv20@example.com")
    create_invoice(client, date="2030-01-01", items=[{"description": "x", "quantity": 1, "unit_price": 10}])
    create_invoice(client, date="2030-03-01", currency="USD", items=[{"description": "y", "quantity": 1, "unit_price": 30}])
    create_invoice(client, date="2030-02-01", items=[{"description": "z", "quantity": 1, "unit_price": 20}])

    by_date = client.get("/invoices").json()
    assert [inv["date"] for inv in by_date] == ["2030-03-01", "2030-02-01", "2030-01-01"]

    by_total = client.get("/invoices", params={"sort_by": "total_amount", "sort_order": "asc"}).json()
    assert [inv["total_amount"] for inv in by_total] == ["10.00", "20.00", "30.00"]

    usd_only = client.get("/invoices", params={"currency": "usd"}).json()
    assert len(usd_only) == 1

    assert client.get("/invoices", params={"sort_by": "nope"}).status_code == 400
    assert client.get("/invoices", params={"sort_order": "sideways"}).status_code == 400


def test_negative_amounts_are_accepted():
    client = register("inv21@example.com")
    data = create_invoice(
        client,
        items=[
            {"description": "Work", "quantity": 1, "unit_price": 100},
            {"description": "Discount", "quantity": 1, "unit_price": -15, "use_quantity": False},
        ],
    )
    assert data["total_amount"] == "85.00"


def test_quantity_and_price_are_rounded_before_totalling():
    client = register("inv22@example.com")
    data = create_invoice(
        client,
        items=[
            {"description": "Partial hours", "quantity": "1.333", "unit_price": "3", "use_quantity": True},
            {"description": "Odd price", "quantity": 1, "unit_price": "10.005"},
        ],
    )
    first, second = data["items"]
    assert first["quantity"] == "1.33"
    assert first["unit_price"] == "3.00"
    assert first["line_total"] == "3.99"
    assert second["unit_price"] == "10.01"
    assert second["line_total"] == "10.01"
    assert data["total_amount"] == "14.00"

    fetched = client.get(f"/invoices/{data['id']}").json()
    for item in fetched["items"]:
        assert Decimal(item["line_total"]) == Decimal(item["quantity"]) * Decimal(item["unit_price"])

    echoed = [
        {key: item[key] for key in ("description", "quantity", "unit_price", "use_quantity")}
        for item in fetched["items"]
    ]
    resent = client.patch(f"/invoices/{data['id']}", json={"items": echoed}).json()
    assert resent["total_amount"] == "14.00"


def test_taken_invoice_number_is_retried(monkeypatch):
    client = register("inv23@example.com")
    create_invoice(client)

    real_next_number = invoice_service.next_invoice_number
    calls = []

    def stale_then_fresh(db, owner_id):
        calls.append(owner_id)
        if len(calls) == 1:
            return "IN-00001"
        return real_next_number(db, owner_id)

    monkeypatch.setattr(invoice_service, "next_invoice_number", stale_then_fresh)
    data = create_invoice(client)
    assert data["invoice_number"] == "IN-00002"
    assert len(calls) == 2


def test_invoice_number_conflict_gives_up_with_409(monkeypatch):
    client = register("inv24@example.com")
    create_invoice(client)

    monkeypatch.setattr(invoice_service, "next_invoice_number", lambda db, owner_id: "IN-00001")
    resp = client.post("/invoices", json=invoice_payload())
    assert resp.status_code == 409
    with SessionLocal() as db:
        assert db.query(Invoice).count() == 1
        assert db.query(LineItem).count() == 2


def test_invoice_timestamps_are_utc_and_bumped_on_update():
    client = register("inv25@example.com")
    data = create_invoice(client)
    with SessionLocal() as db:
        invoice = db.get(Invoice, data["id"])
        created = as_utc(invoice.created_at)
        first_updated = as_utc(invoice.updated_at)
    assert abs(utc_now() - created) < timedelta(minutes=1)

    client.patch(f"/invoices/{data['id']}", json={"client_name": "Later Co"})
    with SessionLocal() as db:
        invoice = db.get(Invoice, data["id"])
        assert as_utc(invoice.created_at) == created
        assert as_utc(invoice.updated_at) >= first_updated
