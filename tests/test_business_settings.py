import json
from decimal import Decimal

import pytest
from fastapi.testclient import TestClient

from backend.app.core.errors import SettingsImportError
from backend.app.db.base import Base
from backend.app.db.session import engine
from backend.app.main import app
from backend.app.services.business_settings import parse_settings_document


@pytest.fixture(autouse=True)
def setup_db():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


def register_and_login(client: TestClient, email: str, password: str = "secret") -> str:
    client.post("/auth/register", json={"email": email, "password": password})
    resp = client.post("/auth/login", json={"email": email, "password": password})
    assert resp.status_code == 200
    return resp.json()["access_token"]


def auth(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


def test_get_settings_creates_defaults():
    client = TestClient(app)
    token = register_and_login(client, "set1@example.com")
    resp = client.get("/settings", headers=auth(token))
    assert resp.status_code == 200
    data = resp.json()
    assert Decimal(data["rate_per_minute"]) == Decimal("16.666")
    assert data["business_name"] == "Tubewell Water Supply"
    assert data["business_contact"] == "0300-0000000"
    assert data["business_address"] == "Your Area, Your City"


def test_update_settings_is_partial():
    client = TestClient(app)
    token = register_and_login(client, "set2@example.com")
    resp = client.put(
        "/settings",
        json={"rate_per_minute": "18.5", "business_contact": "0311-5555555"},
        headers=auth(token),
    )
    assert resp.status_code == 200
    data = resp.json()
    assert Decimal(data["rate_per_minute"]) == Decimal("18.5")
    assert data["business_contact"] == "0311-5555555"
    assert data["business_name"] == "Tubewell Water Supply"


@pytest.mark.parametrize("rate", ["0", "-3", "1e26"])
def test_update_settings_rejects_out_of_range_rate(rate):
    client = TestClient(app)
    token = register_and_login(client, "set3@example.com")
    resp = client.put("/settings", json={"rate_per_minute": rate}, headers=auth(token))
    assert resp.status_code == 422
    current = client.get("/settings", headers=auth(token)).json()
    assert Decimal(current["rate_per_minute"]) == Decimal("16.666")


def test_settings_are_per_owner():
    client = TestClient(app)
    token_a = register_and_login(client, "seta@example.com")
    token_b = register_and_login(client, "setb@example.com")
    client.put("/settings", json={"business_name": "A Tankers"}, headers=auth(token_a))
    assert client.get("/settings", headers=auth(token_b)).json()["business_name"] == "Tubewell Water Supply"


def test_export_settings_file():
    client = TestClient(app)
    token = register_and_login(client, "set4@example.com")
    resp = client.get("/settings/export", headers=auth(token))
    assert resp.status_code == 200
    assert 'filename="aquabill-settings.json"' in resp.headers["content-disposition"]
    assert json.loads(resp.content) == {
        "ratePerMinute": 16.666,
        "businessName": "Tubewell Water Supply",
        "businessContact": "0300-0000000",
        "businessAddress": "Your Area, Your City",
    }


def test_import_merges_onto_existing_settings():
    client = TestClient(app)
    token = register_and_login(client, "set5@example.com")
    client.put(
        "/settings",
        json={"business_name": "Nadeem Tankers", "business_contact": "0345", "business_address": "Block 7"},
        headers=auth(token),
    )
    resp = client.post(
        "/settings/import",
        content=json.dumps({"ratePerMinute": 20, "theme": "dark"}),
        headers={**auth(token), "Content-Type": "application/json"},
    )
    assert resp.status_code == 200
    data = resp.json()
    assert Decimal(data["rate_per_minute"]) == Decimal("20")
    assert data["business_name"] == "Nadeem Tankers"
    assert data["business_contact"] == "0345"
    assert data["business_address"] == "Block 7"


def test_export_then_import_round_trip_keeps_values():
    client = TestClient(app)
    token = register_and_login(client, "set6@example.com")
    client.put("/settings", json={"rate_per_minute": "12.345", "business_name": "Round Trip"}, headers=auth(token))
    exported = client.get("/settings/export", headers=auth(token)).content
    client.put("/settings", json={"rate_per_minute": "99", "business_name": "Changed"}, headers=auth(token))

    data = client.post("/settings/import", content=exported, headers=auth(token)).json()
    assert Decimal(data["rate_per_minute"]) == Decimal("12.345")
    assert data["business_name"] == "Round Trip"


@pytest.mark.parametrize(
    "body",
    [
        "{not json",
        "[1, 2, 3]",
        json.dumps({"ratePerMinute": "abc", "businessName": "Half Applied"}),
        json.dumps({"ratePerMinute": 0, "businessName": "Half Applied"}),
        json.dumps({"ratePerMinute": "1e26", "businessName": "Half Applied"}),
        json.dumps({"businessName": 42}),
    ],
)
def test_invalid_import_applies_nothing(body):
    client = TestClient(app)
    token = register_and_login(client, "set7@example.com")
    resp = client.post("/settings/import", content=body, headers=auth(token))
    assert resp.status_code == 400
    assert resp.json()["detail"].startswith("Invalid settings file")
    current = client.get("/settings", headers=auth(token)).json()
    assert current["business_name"] == "Tubewell Water Supply"
    assert Decimal(current["rate_per_minute"]) == Decimal("16.666")


def test_parse_settings_document_returns_only_present_keys():
    changes = parse_settings_document(b'{"businessAddress": "Street 9", "unknown": true}')
    assert changes == {"business_address": "Street 9"}


def test_parse_settings_document_rejects_empty_body():
    with pytest.raises(SettingsImportError):
        parse_settings_document(b"")
