"""
Service Tests
=============

The FastAPI surface driven through its lifespan with a directory of
generated GIF frames.
"""

import time

import pytest
from fastapi.testclient import TestClient


@pytest.fixture
def client(monkeypatch, frame_dir):
    from scrollscrub import main

    assets = main.settings.assets
    monkeypatch.setattr(assets, "backend", "directory")
    monkeypatch.setattr(assets, "root_dir", frame_dir(24, missing=[20], size=(40, 20)))
    monkeypatch.setattr(assets, "frame_count", 24)
    monkeypatch.setattr(assets, "priority_count", 4)
    monkeypatch.setattr(main.settings.viewport, "width", 1000)
    monkeypatch.setattr(main.settings.viewport, "height", 500)
    monkeypatch.setattr(main.settings.viewport, "scroll_track_viewports", 5.0)

    with TestClient(main.app) as test_client:
        deadline = time.time() + 10.0
        while time.time() < deadline:
            if test_client.get("/ready").status_code == 200:
                break
            time.sleep(0.02)
        yield test_client


def _wait_for(client, predicate, timeout=5.0):
    deadline = time.time() + timeout
    while time.time() < deadline:
        state = client.get("/state").json()
        if predicate(state):
            return state
        time.sleep(0.02)
    return client.get("/state").json()


class TestServiceEndpoints:
    """Tests for the HTTP surface."""

    def test_info_and_health(self, client):
        info = client.get("/").json()
        assert info["service"] == "ScrollScrub"
        assert info["frame_count"] == 24

        health = client.get("/health")
        assert health.status_code == 200
        assert health.json()["status"] == "healthy"

    def test_ready(self, client):
        response = client.get("/ready")

        assert response.status_code == 200
        assert response.json()["images_ready"] is True

    def test_state_after_load(self, client):
        state = _wait_for(client, lambda s: s["loading_progress"] == 100)

        assert state["images_ready"] is True
        assert state["frame"]["resolved_frames"] == 23
        assert state["frame"]["last_drawn"] == 0
        assert state["active_section"] == 0

    def test_frame_png(self, client):
        response = client.get("/frame.png")

        assert response.status_code == 200
        assert response.headers["content-type"] == "image/png"
        assert response.content.startswith(b"\x89PNG")

    def test_scroll_moves_to_last_section(self, client):
        response = client.post("/scroll", json={"scroll_y": 2000})

        assert response.status_code == 200
        assert response.json()["max_scroll"] == 2000

        state = _wait_for(client, lambda s: s["cta"]["visible"])
        assert state["active_section"] == 5
        assert state["progress_dots"] == [False] * 5

    def test_resize(self, client):
        response = client.post("/resize", json={"width": 800, "height": 600, "device_pixel_ratio": 2.0})

        assert response.status_code == 200
        body = response.json()
        assert body["surface"] == {"width": 660, "height": 660}
        assert body["viewport"]["document_height"] == 3000

    def test_frame_png_unavailable_for_empty_surface(self, client):
        """A sub-pixel surface has no backing buffer to encode."""
        assert client.get("/frame.png").status_code == 200

        response = client.post("/resize", json={"width": 1, "height": 1, "device_pixel_ratio": 1.0})
        assert response.json()["surface"] == {"width": 0, "height": 0}

        response = client.get("/frame.png")
        assert response.status_code == 503
        assert response.json() == {"error": "No frame painted yet"}

    def test_invalid_events(self, client):
        assert client.post("/scroll", json={}).status_code == 422
        assert client.post("/resize", json={"width": -1, "height": 10}).status_code == 422

    def test_metrics(self, client):
        metrics = client.get("/metrics").json()

        assert metrics["attached"] is True
        assert "controller" in metrics
        assert metrics["loader"]["total"] == 24

    def test_state_websocket(self, client):
        with client.websocket_connect("/ws/state") as websocket:
            snapshot = websocket.receive_json()

        assert "scroll_progress" in snapshot
        assert len(snapshot["sections"]) == 5
