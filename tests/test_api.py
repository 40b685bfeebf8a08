"""REST API endpoint tests."""

from __future__ import annotations

import pytest
from httpx import ASGITransport, AsyncClient

from snake_assist.advice import LOCAL_TIPS

BASE = "http://test"


@pytest.fixture()
async def client(app):
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url=BASE) as c:
        yield c
    await app.state.session_manager.cleanup()


async def _create(client, **body) -> str:
    # Slow ticks keep the board still while a test inspects it.
    body.setdefault("tick_rate_ms", 2000)
    resp = await client.post("/sessions", json=body)
    assert resp.status_code == 201
    return resp.json()["session_id"]


class TestCreateSession:
    @pytest.mark.asyncio
    async def test_create_default(self, client):
        resp = await client.post("/sessions", json={})
        assert resp.status_code == 201
        data = resp.json()
        assert data["state"] == "ready"
        assert data["score"] == 0
        assert data["tick_interval_ms"] == 200
        assert (data["grid_width"], data["grid_height"]) == (12, 8)

    @pytest.mark.asyncio
    async def test_create_custom(self, client):
        resp = await client.post("/sessions", json={
            "grid_width": 25, "grid_height": 15, "tick_rate_ms": 100, "seed": 3,
        })
        assert resp.status_code == 201
        data = resp.json()
        assert data["grid_width"] == 25
        assert data["tick_interval_ms"] == 100

    @pytest.mark.asyncio
    async def test_create_invalid_tick_rate(self, client):
        resp = await client.post("/sessions", json={"tick_rate_ms": 10})
        assert resp.status_code == 422

    @pytest.mark.asyncio
    async def test_create_invalid_grid(self, client):
        resp = await client.post("/sessions", json={"grid_width": 1})
        assert resp.status_code == 422


class TestListAndGet:
    @pytest.mark.asyncio
    async def test_list(self, client):
        resp = await client.get("/sessions")
        assert resp.json() == []
        await _create(client)
        resp = await client.get("/sessions")
        assert len(resp.json()) == 1

    @pytest.mark.asyncio
    async def test_get_snapshot(self, client):
        session_id = await _create(client, seed=1)
        resp = await client.get(f"/sessions/{session_id}")
        assert resp.status_code == 200
        data = resp.json()
        assert data["session_id"] == session_id
        assert data["state"] == "ready"
        snap = data["snapshot"]
        assert snap["head"] == [6, 4]
        assert snap["body"] == [[6, 4]]
        assert snap["direction"] == "right"
        assert snap["food"] not in snap["body"]

    @pytest.mark.asyncio
    async def test_get_not_found(self, client):
        resp = await client.get("/sessions/nonexistent")
        assert resp.status_code == 404


class TestControl:
    @pytest.mark.asyncio
    async def test_start_pause_restart(self, client):
        session_id = await _create(client)
        resp = await client.post(f"/sessions/{session_id}/start")
        assert resp.json()["state"] == "playing"
        resp = await client.post(f"/sessions/{session_id}/pause")
        assert resp.json()["state"] == "paused"
        resp = await client.post(f"/sessions/{session_id}/restart")
        assert resp.json()["state"] == "playing"

    @pytest.mark.asyncio
    async def test_pause_twice(self, client):
        session_id = await _create(client)
        await client.post(f"/sessions/{session_id}/start")
        await client.post(f"/sessions/{session_id}/pause")
        resp = await client.post(f"/sessions/{session_id}/pause")
        assert resp.status_code == 200
        assert resp.json()["state"] == "paused"

    @pytest.mark.asyncio
    async def test_pause_before_start_is_noop(self, client):
        session_id = await _create(client)
        resp = await client.post(f"/sessions/{session_id}/pause")
        assert resp.json()["state"] == "ready"

    @pytest.mark.asyncio
    async def test_control_unknown_session(self, client):
        resp = await client.post("/sessions/nope/start")
        assert resp.status_code == 404

    @pytest.mark.asyncio
    async def test_set_direction(self, client, app):
        session_id = await _create(client)
        await client.post(f"/sessions/{session_id}/start")
        resp = await client.post(
            f"/sessions/{session_id}/direction", json={"direction": "up"},
        )
        assert resp.status_code == 202
        engine = app.state.session_manager.get_session(session_id).engine
        assert engine.snake.next_direction.name == "UP"

    @pytest.mark.asyncio
    async def test_set_invalid_direction(self, client):
        session_id = await _create(client)
        resp = await client.post(
            f"/sessions/{session_id}/direction", json={"direction": "sideways"},
        )
        assert resp.status_code == 422


class TestAdvice:
    @pytest.mark.asyncio
    async def test_suggestion(self, client, app):
        session_id = await _create(client)
        engine = app.state.session_manager.get_session(session_id).engine
        engine.food.position = engine.snake.head.step(engine.snake.current_direction)
        resp = await client.get(f"/sessions/{session_id}/suggestion")
        assert resp.status_code == 200
        assert resp.json() == {"direction": "right", "source": "local", "error": None}

    @pytest.mark.asyncio
    async def test_text_advice_falls_back_to_local(self, client, app):
        session_id = await _create(client)
        resp = await client.get(f"/sessions/{session_id}/advice")
        assert resp.status_code == 200
        data = resp.json()
        assert data["source"] == "local"
        assert data["text"]
        assert app.state.session_manager.stats.advice_used == 1

    @pytest.mark.asyncio
    async def test_move_advice(self, client):
        session_id = await _create(client)
        resp = await client.get(f"/sessions/{session_id}/move-advice")
        assert resp.status_code == 200
        assert resp.json()["direction"] in {"up", "down", "left", "right"}

    @pytest.mark.asyncio
    async def test_advice_unknown_session(self, client):
        resp = await client.get("/sessions/nope/advice")
        assert resp.status_code == 404

    @pytest.mark.asyncio
    async def test_tips(self, client):
        resp = await client.get("/sessions/tips")
        assert resp.status_code == 200
        data = resp.json()
        assert data["source"] == "local"
        assert data["text"] in LOCAL_TIPS

    @pytest.mark.asyncio
    async def test_performance_uses_recent_scores(self, client, app):
        session_id = await _create(client)
        manager = app.state.session_manager
        manager.recent_scores.extend([10, 20])
        manager.get_session(session_id).engine.score = 50
        resp = await client.get(f"/sessions/{session_id}/performance")
        assert resp.status_code == 200
        data = resp.json()
        assert data["source"] == "local"
        assert "50" in data["text"]
        assert "15.0" in data["text"]

    @pytest.mark.asyncio
    async def test_performance_without_history(self, client):
        session_id = await _create(client)
        resp = await client.get(f"/sessions/{session_id}/performance")
        assert resp.status_code == 200
        assert "0" in resp.json()["text"]

    @pytest.mark.asyncio
    async def test_performance_unknown_session(self, client):
        resp = await client.get("/sessions/nope/performance")
        assert resp.status_code == 404
