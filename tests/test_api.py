"""
Tests for the REST API: trails, recording, playback, and their mutual exclusion.
"""

import pytest
from fastapi.testclient import TestClient

from trailtrack.api.app import app
from trailtrack.api.state import AppState, get_state
from trailtrack.core.player import TrailPlayer
from trailtrack.core.trail_store import add_trail

from conftest import BASE_LAT, BASE_LNG, DEG_PER_M


def fix(meters, timestamp):
    return {"lat": BASE_LAT + meters * DEG_PER_M, "lng": BASE_LNG, "timestamp": timestamp}


@pytest.fixture
def state(store, journal):
    return AppState(store=store, journal=journal, player=TrailPlayer(use_timer=False))


@pytest.fixture
def client(state):
    app.dependency_overrides[get_state] = lambda: state
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def seeded(state, ten_point_trail):
    add_trail(state.store, ten_point_trail)
    return ten_point_trail


class TestTrails:

    def test_list_and_get(self, client, seeded):
        r = client.get("/api/trails/")
        assert r.status_code == 200
        body = r.json()
        assert len(body) == 1
        assert body[0]["id"] == seeded.id
        assert body[0]["points"] == 10
        assert body[0]["duration_label"] == "0m 9s"
        assert body[0]["distance_label"] == "180 m"
        assert "path" not in body[0]

        r = client.get(f"/api/trails/{seeded.id}")
        assert r.status_code == 200
        assert len(r.json()["path"]) == 10

    def test_unknown_trail(self, client):
        assert client.get("/api/trails/nope").status_code == 404
        assert client.delete("/api/trails/nope").status_code == 404

    def test_delete_unloads_player(self, client, seeded):
        client.post("/api/playback/load", json={"trail_id": seeded.id})
        assert client.delete(f"/api/trails/{seeded.id}").status_code == 204
        assert client.get("/api/trails/").json() == []
        assert client.get("/api/playback").json()["trail_id"] is None


class TestRecording:

    def test_session_saves_trail(self, client):
        r = client.post("/api/recording/start", json=fix(0, 0))
        assert r.status_code == 200
        assert r.json()["status"] == "recording"

        assert client.post("/api/recording/fix", json=fix(0, 1000)).json()["accepted"] is False
        assert client.post("/api/recording/fix", json=fix(5, 3000)).json()["accepted"] is False
        assert client.post("/api/recording/fix", json=fix(15, 3000)).json()["accepted"] is True

        status = client.get("/api/recording").json()
        assert status["points"] == 2
        assert status["center"] == [status["current_position"]["lat"], status["current_position"]["lng"]]

        r = client.post("/api/recording/stop")
        body = r.json()
        assert body["saved"] is True
        assert body["message"].startswith("Trail saved: Trail - ")
        assert body["trail"]["points"] == 2
        assert len(client.get("/api/trails/").json()) == 1

    def test_single_fix_session_not_saved(self, client):
        client.post("/api/recording/start", json=fix(0, 0))
        body = client.post("/api/recording/stop").json()
        assert body == {"saved": False, "message": "No significant path recorded.", "trail": None}
        assert client.get("/api/trails/").json() == []

    def test_wrong_state(self, client):
        assert client.post("/api/recording/fix", json=fix(0, 0)).status_code == 409
        assert client.post("/api/recording/stop").status_code == 409
        client.post("/api/recording/start", json=fix(0, 0))
        assert client.post("/api/recording/start", json=fix(0, 0)).status_code == 409

    def test_out_of_range_fix(self, client):
        r = client.post("/api/recording/start", json={"lat": 91.0, "lng": 0.0})
        assert r.status_code == 422

    def test_error_aborts_session(self, client):
        client.post("/api/recording/start", json=fix(0, 0))
        client.post("/api/recording/fix", json=fix(20, 3000))
        body = client.post("/api/recording/error", json={"reason": "Permission denied"}).json()
        assert body["status"] == "aborted"
        assert body["abort_reason"] == "Permission denied"
        assert body["points"] == 2
        assert client.post("/api/recording/fix", json=fix(40, 6000)).status_code == 409
        assert client.post("/api/recording/stop").json()["saved"] is True

    def test_discard(self, client):
        client.post("/api/recording/start", json=fix(0, 0))
        client.post("/api/recording/fix", json=fix(20, 3000))
        assert client.post("/api/recording/discard").json()["status"] == "idle"
        assert client.get("/api/trails/").json() == []


class TestPlayback:

    def test_load_seek_speed(self, client, seeded):
        r = client.post("/api/playback/load", json={"trail_id": seeded.id})
        assert r.status_code == 200
        body = r.json()
        assert body["status"] == "idle"
        assert body["marker"] == seeded.path[0].to_dict()

        body = client.post("/api/playback/seek", json={"fraction": 0.5}).json()
        assert body["index"] == 4
        assert body["progress_fraction"] == pytest.approx(4 / 9)

        assert client.post("/api/playback/speed", json={"multiplier": 0}).status_code == 422
        assert client.post("/api/playback/speed", json={"multiplier": 5}).json()["speed"] == 5

        assert client.post("/api/playback/play").json()["status"] == "playing"
        assert client.post("/api/playback/pause").json()["status"] == "paused"

    def test_load_unknown(self, client):
        assert client.post("/api/playback/load", json={"trail_id": "nope"}).status_code == 404

    def test_controls_without_trail(self, client):
        assert client.post("/api/playback/play").status_code == 400
        assert client.post("/api/playback/seek", json={"fraction": 0.1}).status_code == 400
        assert client.get("/api/playback").json()["marker"] is None


class TestMutualExclusion:

    def test_loading_trail_stops_recording(self, client, seeded):
        client.post("/api/recording/start", json=fix(0, 0))
        client.post("/api/recording/fix", json=fix(20, 3000))
        client.post("/api/playback/load", json={"trail_id": seeded.id})
        assert client.get("/api/recording").json()["status"] == "idle"
        assert len(client.get("/api/trails/").json()) == 2

    def test_recording_closes_player(self, client, seeded):
        client.post("/api/playback/load", json={"trail_id": seeded.id})
        client.post("/api/playback/play")
        client.post("/api/recording/start", json=fix(0, 0))
        assert client.get("/api/playback").json()["trail_id"] is None


class TestSpeedValidation:

    @pytest.mark.parametrize("raw", [b'{"multiplier": Infinity}', b'{"multiplier": NaN}'])
    def test_non_finite_multiplier_rejected(self, client, seeded, raw):
        client.post("/api/playback/load", json={"trail_id": seeded.id})
        r = client.post(
            "/api/playback/speed",
            content=raw,
            headers={"Content-Type": "application/json"},
        )
        assert r.status_code == 422
        assert client.get("/api/playback").json()["speed"] == 1.0

    def test_playback_view_is_consistent(self, client, seeded):
        client.post("/api/playback/load", json={"trail_id": seeded.id})
        body = client.post("/api/playback/seek", json={"fraction": 1.0}).json()
        assert body["index"] == 9
        assert body["marker"] == seeded.path[9].to_dict()
        assert body["center"] == [seeded.path[9].lat, seeded.path[9].lng]
