from datetime import datetime

import pytest
from fastapi.testclient import TestClient

from doubleminer.api.main import create_app
from doubleminer.config import settings
from doubleminer.db.base import make_engine
from doubleminer.db.store import SQLStore
from doubleminer.services import Engine
from doubleminer.sources import SimulatedSource, TipMinerSource
from test_sources import ROWS, FakeHTTP, FakeResponse


@pytest.fixture
def client():
    store = SQLStore(make_engine("sqlite://"))
    store.init()
    engine = Engine(store=store, source=SimulatedSource(seed=9, clock=lambda: datetime(2024, 1, 1)))
    with TestClient(create_app(engine=engine, seed_history=60)) as c:
        yield c


def test_home_and_signal(client):
    assert client.get("/").json()["ok"] is True
    sig = client.get("/signal").json()
    assert sig["action"] in ("BET", "WAIT")
    assert sig["rounds_to_wait"] in (0, 1, 2)

def test_ingest_outcome(client):
    r = client.post("/outcomes", json={"color": "red", "number": 4, "timestamp": "2024-01-02T00:00:00"})
    assert r.status_code == 200
    body = r.json()
    assert body["stored"]["color"] == "red"
    assert body["signal"]["strategy"]
    assert client.get("/outcomes", params={"limit": 1}).json()[0]["number"] == 4

def test_ingest_rejects_malformed(client):
    assert client.post("/outcomes", json={"color": "red", "number": 12}).status_code == 400
    assert client.post("/outcomes", json={"color": "green", "number": 1}).status_code == 422
    assert len(client.get("/outcomes", params={"limit": 500}).json()) == 61

def test_simulate_updates_stats(client):
    before = client.get("/stats").json()["total_predictions"]
    sig = client.get("/signal").json()
    body = client.post("/simulate").json()
    scored = sig["action"] == "BET"
    assert (body["settlement"] is not None) == scored
    assert body["stats"]["total_predictions"] == before + (1 if scored else 0)

def test_read_endpoints(client):
    assert isinstance(client.get("/patterns").json(), list)
    assert isinstance(client.get("/predictions").json(), list)
    assert isinstance(client.get("/settlements").json(), list)
    assert "has_anomalies" in client.get("/anomalies").json()
    assert client.get("/summary").json()["total"] == 61
    assert client.get("/summary").json()["performance"]["total_results"] == 61
    assert client.get("/source").json() == {"source": "simulated", "online": True}

def test_export_import_and_clear(client):
    dump = client.get("/export").text
    assert client.delete("/data").json() == {"success": True}
    assert client.get("/outcomes").json() == []
    r = client.post("/import", content=dump, headers={"Content-Type": "text/plain"})
    assert r.status_code == 200 and r.json()["outcomes"] == 61
    assert client.post("/import", content="nope").status_code == 400

def test_sync(client):
    assert client.post("/sync", params={"limit": 20}).json() == {"success": True, "new_results": 21}
    assert client.get("/summary").json()["total"] == 21

def test_api_key_gate(client, monkeypatch):
    monkeypatch.setattr(settings, "api_key", "secret")
    body = {"color": "black", "number": 9, "timestamp": "2024-01-02T00:00:00"}
    assert client.post("/outcomes", json=body).status_code == 401
    assert client.post("/outcomes", json=body, headers={"X-API-Key": "wrong"}).status_code == 401
    assert client.post("/outcomes", json=body, headers={"X-API-Key": "secret"}).status_code == 200
    assert client.get("/stats").status_code == 200

def test_ingest_rejects_repeated_and_older_rounds(client):
    body = {"id": 500, "color": "red", "number": 4, "timestamp": "2024-01-02T00:00:00"}
    assert client.post("/outcomes", json=body).status_code == 200
    assert client.post("/outcomes", json=body).status_code == 409
    older = {"color": "black", "number": 9, "timestamp": "2024-01-01T23:59:00"}
    assert client.post("/outcomes", json=older).status_code == 400
    assert len(client.get("/outcomes", params={"limit": 500}).json()) == 62

def test_simulate_without_new_round():
    source = TipMinerSource("http://tipminer.test/history", session=FakeHTTP(FakeResponse(ROWS)))
    with TestClient(create_app(engine=Engine(source=source), seed_history=0)) as c:
        assert c.post("/simulate").json()["stored"]["id"] == 3
        again = c.post("/simulate")
        assert again.status_code == 200 and again.json()["stored"] is None
        assert [o["id"] for o in c.get("/outcomes").json()] == [3]
    with TestClient(create_app(engine=Engine(), seed_history=0)) as c:
        assert c.post("/simulate").status_code == 503
