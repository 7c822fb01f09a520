"""Tests for movement API routes."""

import pytest
from fastapi.testclient import TestClient
from src.api.main import app
from src.api.schemas.common import CoordSchema
from src.api.schemas.movement import CreateSessionRequest
from src.api.services.session_service import MovementSessionService

client = TestClient(app)


def create_session(**overrides):
    """Create a session on the default 5x5 grid at (0, 0)."""
    body = {"start": {"q": 0, "r": 0}}
    body.update(overrides)
    response = client.post("/api/sessions", json=body)
    assert response.status_code == 200
    return response.json()


class TestRootEndpoints:
    """Tests for root endpoints."""

    def test_root(self):
        """Test root endpoint."""
        response = client.get("/")
        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "ok"
        assert data["name"] == "Hex Movement API"

    def test_health(self):
        """Test health check endpoint."""
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json()["status"] == "healthy"


class TestPathRoutes:
    """Tests for stateless path routes."""

    def test_find_path(self):
        """Test straight path."""
        response = client.post(
            "/api/paths/find",
            json={"grid": {"width": 5, "height": 5}, "start": {"q": 0, "r": 0}, "goal": {"q": 3, "r": 0}},
        )
        assert response.status_code == 200
        data = response.json()
        assert data["cost"] == 3
        assert [c["q"] for c in data["cells"]] == [0, 1, 2, 3]
        assert len(data["curve"]) == 4
        assert data["curve_length"] > 0

    def test_find_path_around_obstacles(self):
        """Test path with disabled cells."""
        response = client.post(
            "/api/paths/find",
            json={
                "grid": {"disabled": [{"q": 1, "r": 0}, {"q": 2, "r": 0}]},
                "start": {"q": 0, "r": 0},
                "goal": {"q": 3, "r": 0},
                "curve_method": "chaikin",
            },
        )
        assert response.status_code == 200
        data = response.json()
        assert data["cost"] == 4
        assert data["curve"][0] == pytest.approx([0.0, 0.0])

    def test_find_path_to_range(self):
        """Test range search."""
        response = client.post(
            "/api/paths/find",
            json={"grid": {}, "start": {"q": 0, "r": 0}, "goal": {"q": 4, "r": 4}, "radius": 1},
        )
        assert response.status_code == 200
        assert response.json()["cost"] == 7

    def test_no_path(self):
        """Test disabled goal."""
        response = client.post(
            "/api/paths/find",
            json={"grid": {"disabled": [{"q": 3, "r": 0}]}, "start": {"q": 0, "r": 0}, "goal": {"q": 3, "r": 0}},
        )
        assert response.status_code == 404

    def test_hexagon_grid(self):
        """Test hexagon grid shape."""
        response = client.post(
            "/api/paths/find",
            json={
                "grid": {"shape": "hexagon", "radius": 2, "orientation": "flat"},
                "start": {"q": -2, "r": 0},
                "goal": {"q": 2, "r": 0},
            },
        )
        assert response.status_code == 200
        assert response.json()["cost"] == 4

    def test_boundary(self):
        """Test boundary trace."""
        response = client.post(
            "/api/paths/boundary",
            json={"grid": {"shape": "hexagon", "radius": 1}, "iterations": 2},
        )
        assert response.status_code == 200
        data = response.json()
        assert len(data["boundary"]) == 6
        assert data["boundary"][0] == {"q": 0, "r": -1}
        assert len(data["contour"]) == 25
        assert data["contour"][0] == data["contour"][-1]


class TestSessionRoutes:
    """Tests for movement session routes."""

    def test_create_session(self):
        """Test session creation."""
        data = create_session()
        assert data["state"] == "IDLE"
        assert data["turn_number"] == 1
        assert data["cell"] == {"q": 0, "r": 0}
        assert data["remaining_budget"] == 5.0

    def test_create_session_invalid_start(self):
        """Test start cell off the grid."""
        response = client.post("/api/sessions", json={"start": {"q": 9, "r": 9}})
        assert response.status_code == 400

    def test_settings_override(self):
        """Test per-session settings."""
        data = create_session(settings={"max_movement_per_turn": 2})
        assert data["max_movement_per_turn"] == 2.0

    def test_get_and_delete_session(self):
        """Test session retrieval and deletion."""
        session_id = create_session()["session_id"]
        assert client.get(f"/api/sessions/{session_id}").status_code == 200
        assert client.delete(f"/api/sessions/{session_id}").status_code == 200
        assert client.get(f"/api/sessions/{session_id}").status_code == 404

    def test_nonexistent_session(self):
        """Test unknown session."""
        assert client.get("/api/sessions/nonexistent").status_code == 404
        response = client.post("/api/sessions/nonexistent/move", json={"destination": {"q": 1, "r": 0}})
        assert response.status_code == 404

    def test_full_move(self):
        """Test plan, confirm and execute."""
        session_id = create_session()["session_id"]

        response = client.post(
            f"/api/sessions/{session_id}/move", json={"destination": {"q": 3, "r": 0}}
        )
        assert response.status_code == 200
        data = response.json()
        assert data["state"] == "AWAITING_CONFIRMATION"
        assert len(data["path"]) == 4

        response = client.post(f"/api/sessions/{session_id}/confirm")
        assert response.status_code == 200
        assert response.json()["state"] == "EXECUTING"

        response = client.post(f"/api/sessions/{session_id}/tick", json={"steps": 500})
        assert response.status_code == 200
        data = response.json()
        assert data["state"] == "IDLE"
        assert data["cell"] == {"q": 3, "r": 0}
        assert data["used_this_turn"] == 3.0

    def test_cancel(self):
        """Test cancelling a planned move."""
        session_id = create_session()["session_id"]
        client.post(f"/api/sessions/{session_id}/move", json={"destination": {"q": 2, "r": 1}})
        response = client.post(f"/api/sessions/{session_id}/cancel")
        assert response.status_code == 200
        assert response.json()["state"] == "IDLE"
        assert response.json()["path"] == []

    def test_rejected_move(self):
        """Test moving to the current cell."""
        session_id = create_session()["session_id"]
        response = client.post(
            f"/api/sessions/{session_id}/move", json={"destination": {"q": 0, "r": 0}}
        )
        assert response.status_code == 400
        assert response.json()["detail"] == "already_there"

    def test_confirm_without_plan(self):
        """Test confirming with nothing planned."""
        session_id = create_session()["session_id"]
        response = client.post(f"/api/sessions/{session_id}/confirm")
        assert response.status_code == 400
        assert response.json()["detail"] == "wrong_state"

    def test_toggle_cell(self):
        """Test disabling a destination."""
        session_id = create_session()["session_id"]
        response = client.post(
            f"/api/sessions/{session_id}/cells/toggle", json={"cell": {"q": 2, "r": 0}}
        )
        assert response.status_code == 200

        response = client.post(
            f"/api/sessions/{session_id}/move", json={"destination": {"q": 2, "r": 0}}
        )
        assert response.status_code == 400
        assert response.json()["detail"] == "invalid_destination"

    def test_toggle_off_grid(self):
        """Test toggling a missing cell."""
        session_id = create_session()["session_id"]
        response = client.post(
            f"/api/sessions/{session_id}/cells/toggle", json={"cell": {"q": 40, "r": 0}}
        )
        assert response.status_code == 400

    def test_range(self):
        """Test movement range."""
        session_id = create_session()["session_id"]
        response = client.get(f"/api/sessions/{session_id}/range")
        assert response.status_code == 200
        assert len(response.json()["cells"]) == 19

    def test_events(self):
        """Test event log."""
        session_id = create_session()["session_id"]
        client.post(f"/api/sessions/{session_id}/move", json={"destination": {"q": 1, "r": 1}})

        response = client.get(f"/api/sessions/{session_id}/events")
        assert response.status_code == 200
        events = response.json()["events"]
        assert events[0]["event"] == "TURN_STARTED"
        calculated = [e for e in events if e["event"] == "PATH_CALCULATED"]
        assert len(calculated) == 1
        assert calculated[0]["payload"]["total_distance"] == 2
        assert calculated[0]["payload"]["path"][-1] == {"q": 1, "r": 1}

    def test_turns(self):
        """Test ending and starting turns."""
        session_id = create_session()["session_id"]
        response = client.post(f"/api/sessions/{session_id}/turn/end")
        assert response.status_code == 200
        response = client.post(f"/api/sessions/{session_id}/turn/start")
        assert response.status_code == 200
        assert response.json()["turn_number"] == 2


class TestMovementSessionService:
    """Tests for MovementSessionService class."""

    def test_event_log_keeps_most_recent(self):
        """Older notifications drop off once the log is full."""
        service = MovementSessionService(max_events=3)
        session_id = service.create_session(
            CreateSessionRequest(start=CoordSchema(q=0, r=0))
        ).session_id
        service.request_move(session_id, CoordSchema(q=2, r=0))
        service.cancel(session_id)

        events = service.events(session_id)
        assert len(events) == 3
        assert events[-1].event == "PATH_CANCELLED"
        assert "TURN_STARTED" not in [e.event for e in events]
