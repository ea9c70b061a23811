"""Tests for application-level routes and error handling."""

from __future__ import annotations

from datetime import datetime


class TestHealth:

    def test_health(self, client):
        resp = client.get("/api/health")

        assert resp.status_code == 200
        body = resp.json()
        assert body["status"] == "ok"
        assert datetime.fromisoformat(body["timestamp"])

    def test_root(self, client):
        resp = client.get("/")

        assert resp.status_code == 200
        assert "NOC Registration API" in resp.text


class TestErrors:

    def test_unknown_route_uses_message_body(self, client):
        resp = client.get("/api/nope")

        assert resp.status_code == 404
        assert "message" in resp.json()

    def test_cors_allows_any_origin(self, client):
        resp = client.get("/api/health", headers={"Origin": "https://frontend.example.org"})

        assert resp.headers.get("access-control-allow-origin") in ("*", "https://frontend.example.org")
