"""Tests for the HTTP surface that serves the dashboard document."""

import json

import pytest
from fastapi.testclient import TestClient

from catalog_intel import config
from catalog_intel.main import app


@pytest.fixture
def client(tmp_path, monkeypatch, market_state):
    src = tmp_path / "state.json"
    src.write_text(json.dumps(market_state), encoding="utf-8")
    monkeypatch.setattr(config, "STATE_SOURCE", str(src))
    monkeypatch.setattr(config, "OUTPUT_PATH", tmp_path / "out" / "products.json")
    monkeypatch.setattr(config, "FOCUS_BRAND", "vuori")
    monkeypatch.setattr(config, "RIVAL_BRANDS", ["lululemon", "alo"])
    return TestClient(app)


class TestPrepare:

    def test_prepare_writes_and_returns_document(self, client):
        r = client.post("/prepare")
        assert r.status_code == 200
        assert r.json()["totals"]["products"] == 590
        assert config.OUTPUT_PATH.exists()

    def test_prepare_with_focus_override(self, client):
        r = client.post("/prepare", json={"focus": "alo", "rivals": ["vuori"]})
        assert r.json()["scorecard"]["focusBrand"] == "alo"
        assert list(r.json()["scorecard"]["headToHead"]) == ["vuori"]

    @pytest.mark.parametrize("payload", [
        {"rivals": "alo"},
        {"rivals": ["alo", 3]},
        {"focus": ["vuori"]},
    ])
    def test_rejects_malformed_payload(self, client, payload):
        r = client.post("/prepare", json=payload)
        assert r.status_code == 422
        assert not config.OUTPUT_PATH.exists()

    def test_invalid_feed(self, client, tmp_path, monkeypatch):
        bad = tmp_path / "bad.json"
        bad.write_text(json.dumps({"products": []}), encoding="utf-8")
        monkeypatch.setattr(config, "STATE_SOURCE", str(bad))

        r = client.post("/prepare")
        assert r.status_code == 422
        assert "sitemap_products" in r.json()["detail"]


class TestRead:

    def test_health(self, client):
        assert client.get("/health").json() == {"ok": True, "document": False}

    def test_data_before_prepare(self, client):
        assert client.get("/data").status_code == 404

    def test_data_after_prepare(self, client):
        client.post("/prepare")
        r = client.get("/data")
        assert r.status_code == 200
        assert r.json()["scorecard"]["focusBrand"] == "vuori"

    def test_brand(self, client):
        client.post("/prepare")
        r = client.get("/brands/vuori")
        assert r.status_code == 200
        body = r.json()
        assert body["total"] == 150
        assert body["profile"]["rank"] == 2
        assert body["launches"]["initialLoad"] == "2025-01-01"
        assert body["velocity"] == {"2025-01-01": 110, "2025-02-10": 40}

    def test_brand_listing_order(self, client):
        client.post("/prepare")
        r = client.get("/brands")
        assert r.status_code == 200
        assert [b["slug"] for b in r.json()] == ["alo", "vuori", "lululemon"]
        assert r.json()[1] == {"slug": "vuori", "name": "Vuori", "total": 150}

    def test_unknown_brand(self, client):
        client.post("/prepare")
        assert client.get("/brands/nobody").status_code == 404
