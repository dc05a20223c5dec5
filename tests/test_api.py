# tests/test_api.py

from pathlib import Path

import pytest
from fastapi.testclient import TestClient

import api.main as main

CONFIG_PATH = str(Path(__file__).resolve().parents[1] / "configs" / "spotter.yaml")


@pytest.fixture
def client(monkeypatch):
    monkeypatch.setattr(main, "CONFIG_PATH", CONFIG_PATH)
    return TestClient(main.app)


def test_annotate_endpoint(client):
    resp = client.post("/annotate", json={"text": "Paris is 99% sunny"})
    assert resp.status_code == 200
    spans = resp.json()["spans"]
    assert [(s["text"], s["classification"][0]["collection"]) for s in spans] == [
        ("Paris", "place"),
        ("99%", "Percentage"),
    ]
    assert spans[1]["classification"][0]["numeric_value"] == 99


def test_classify_endpoint(client):
    resp = client.post("/classify", json={"text": "pay 3.50 now", "start": 4, "end": 8})
    assert resp.status_code == 200
    classification = resp.json()["classification"]
    assert classification["collection"] == "Number"
    assert classification["numeric_double_value"] == pytest.approx(3.5)


def test_classify_endpoint_no_match(client):
    resp = client.post("/classify", json={"text": "pay 3.50 now", "start": 0, "end": 8})
    assert resp.json()["classification"] is None


def test_classify_rejects_bad_selection(client):
    resp = client.post("/classify", json={"text": "abc", "start": 2, "end": 9})
    assert resp.status_code == 422


def test_unknown_usecase(client):
    resp = client.post("/annotate", json={"text": "1", "usecase": "BATCH"})
    assert resp.status_code == 422


def test_health(client):
    assert client.get("/health").json() == {"status": "ok"}
