import pytest
from fastapi.testclient import TestClient

from backend.app.db.base import Base
from backend.app.db.session import engine
from backend.app.main import app


@pytest.fixture(autouse=True)
def setup_db():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


def register(email: str) -> TestClient:
    client = TestClient(app)
    resp = client.post("/auth/register", json={"email": email, "password": "secret", "address": "1 Main St"})
    assert resp.status_code == 200
    return client


def test_create_template():
    client = register("tmpl1@example.com")
    resp = client.post(
        "/invoice-templates",
        json={"name": "Standard", "html": "<h1>Invoice {{ invoice_number }}</h1>"},
    )
    assert resp.status_code == 201
    data = resp.json()
    assert data["name"] == "Standard"
    assert data["html"] == "<h1>Invoice {{ invoice_number }}</h1>"
    assert isinstance(data["owner_id"], int)


def test_template_with_bad_syntax_rejected():
    client = register("tmpl-bad@example.com")
    resp = client.post("/invoice-templates", json={"name": "Broken", "html": "{% for item in items %}"})
    assert resp.status_code == 400
    assert "Invalid template syntax" in resp.json()["detail"]


def test_blank_name_rejected():
    client = register("tmpl-blank@example.com")
    resp = client.post("/invoice-templates", json={"name": " ", "html": ""})
    assert resp.status_code == 400


def test_list_templates_owner_isolated():
    client_a = register("tmpl2a@example.com")
    client_b = register("tmpl2b@example.com")

    client_a.post("/invoice-templates", json={"name": "A1"})
    client_a.post("/invoice-templates", json={"name": "A2"})
    client_b.post("/invoice-templates", json={"name": "B1"})

    resp_a = client_a.get("/invoice-templates")
    resp_b = client_b.get("/invoice-templates")
    assert len(resp_a.json()) == 2
    assert len(resp_b.json()) == 1


def test_cannot_read_other_users_template():
    client_a = register("tmpl3a@example.com")
    client_b = register("tmpl3b@example.com")
    template_id = client_a.post("/invoice-templates", json={"name": "Private"}).json()["id"]

    assert client_a.get(f"/invoice-templates/{template_id}").status_code == 200
    assert client_b.get(f"/invoice-templates/{template_id}").status_code == 404
    assert client_b.put(f"/invoice-templates/{template_id}", json={"name": "Hijack"}).status_code == 404
    assert client_b.delete(f"/invoice-templates/{template_id}").status_code == 404


def test_update_template():
    client = register("tmpl4@example.com")
    template_id = client.post("/invoice-templates", json={"name": "Old", "html": "<p>old</p>"}).json()["id"]

    update_resp = client.put(f"/invoice-templates/{template_id}", json={"name": "New"})
    assert update_resp.status_code == 200
    data = update_resp.json()
    assert data["name"] == "New"
    assert data["html"] == "<p>old</p>"


def test_delete_template():
    client = register("tmpl5@example.com")
    template_id = client.post("/invoice-templates", json={"name": "ToDelete"}).json()["id"]

    del_resp = client.delete(f"/invoice-templates/{template_id}")
    assert del_resp.status_code == 200
    assert del_resp.json()["name"] == "ToDelete"
    list_resp = client.get("/invoice-templates")
    assert list_resp.json() == []
