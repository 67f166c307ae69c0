"""Tests for the solver endpoints."""

import asyncio

import pytest
from httpx import AsyncClient


class TestStepEndpoint:
    """Tests for POST /v1/solver/{agent_id}/step."""

    @pytest.mark.asyncio
    async def test_first_step_computes_plan(self, client: AsyncClient, key_payload):
        response = await client.post("/v1/solver/agent-1/step", json=key_payload)

        assert response.status_code == 200
        data = response.json()
        assert data["dx"] == 0
        assert data["dy"] == 1
        assert data["cached"] is False
        assert data["floor"] == 0
        assert data["remaining"] == 6

    @pytest.mark.asyncio
    async def test_second_step_is_cached(self, client: AsyncClient, key_payload):
        await client.post("/v1/solver/agent-1/step", json=key_payload)
        response = await client.post("/v1/solver/agent-1/step", json=key_payload)

        data = response.json()
        assert data["dx"] == 0
        assert data["dy"] == 1
        assert data["cached"] is True
        assert data["remaining"] == 5

    @pytest.mark.asyncio
    async def test_agents_have_separate_plans(self, client: AsyncClient, key_payload, registry):
        await client.post("/v1/solver/agent-1/step", json=key_payload)
        response = await client.post("/v1/solver/agent-2/step", json=key_payload)

        assert response.json()["cached"] is False
        assert len(registry) == 2

    @pytest.mark.asyncio
    async def test_overlapping_steps_share_one_plan(self, client: AsyncClient, key_payload, registry):
        responses = await asyncio.gather(
            client.post("/v1/solver/agent-1/step", json=key_payload),
            client.post("/v1/solver/agent-1/step", json=key_payload),
        )

        data = [response.json() for response in responses]
        assert sorted(item["cached"] for item in data) == [False, True]
        assert sorted(item["remaining"] for item in data) == [5, 6]
        assert registry.get("agent-1").recompute_count == 1

    @pytest.mark.asyncio
    async def test_unreachable_exit_returns_zero_step(self, client: AsyncClient, walled_payload):
        response = await client.post("/v1/solver/agent-1/step", json=walled_payload)

        assert response.status_code == 200
        data = response.json()
        assert data["dx"] == 0
        assert data["dy"] == 0
        assert data["remaining"] == 0

    @pytest.mark.asyncio
    async def test_missing_exit_is_rejected(self, client: AsyncClient, key_payload):
        key_payload["floors"][0]["grid"][1][5] = 0

        response = await client.post("/v1/solver/agent-1/step", json=key_payload)

        assert response.status_code == 422
        assert "no exit" in response.json()["detail"]

    @pytest.mark.asyncio
    async def test_agent_out_of_bounds_is_rejected(self, client: AsyncClient, key_payload):
        key_payload["agent"]["x"] = 9

        response = await client.post("/v1/solver/agent-1/step", json=key_payload)

        assert response.status_code == 422
        assert "outside" in response.json()["detail"]

    @pytest.mark.asyncio
    async def test_empty_floor_list_is_rejected(self, client: AsyncClient, key_payload):
        key_payload["floors"] = []

        response = await client.post("/v1/solver/agent-1/step", json=key_payload)

        assert response.status_code == 422


class TestOverrideEndpoint:
    """Tests for POST /v1/solver/{agent_id}/override."""

    @pytest.mark.asyncio
    async def test_override_invalidates_plan(self, client: AsyncClient, key_payload):
        await client.post("/v1/solver/agent-1/step", json=key_payload)

        response = await client.post("/v1/solver/agent-1/override")

        assert response.status_code == 200
        assert response.json() == {"agent_id": "agent-1", "invalidated": True}

        next_response = await client.post("/v1/solver/agent-1/step", json=key_payload)
        assert next_response.json()["cached"] is False

    @pytest.mark.asyncio
    async def test_override_unknown_agent(self, client: AsyncClient):
        response = await client.post("/v1/solver/nobody/override")

        assert response.status_code == 200
        assert response.json()["invalidated"] is False


class TestEndSessionEndpoint:
    """Tests for DELETE /v1/solver/{agent_id}."""

    @pytest.mark.asyncio
    async def test_delete_session(self, client: AsyncClient, key_payload, registry):
        await client.post("/v1/solver/agent-1/step", json=key_payload)

        response = await client.delete("/v1/solver/agent-1")
        assert response.status_code == 204
        assert "agent-1" not in registry

        response = await client.delete("/v1/solver/agent-1")
        assert response.status_code == 404


class TestAnalyzeEndpoint:
    """Tests for POST /v1/solver/analyze."""

    @pytest.mark.asyncio
    async def test_analyze_key_maze(self, client: AsyncClient, key_payload):
        response = await client.post("/v1/solver/analyze", json=key_payload)

        assert response.status_code == 200
        data = response.json()
        assert data["reachable"] is True
        assert data["distance"] == 2
        assert data["required_keys"] == {"A": 1}
        assert data["missing_keys"] == {"A": 1}
        assert data["keys_to_fetch"] == [{"color": "A", "x": 0, "y": 2}]
        assert data["next_step"] is None

    @pytest.mark.asyncio
    async def test_analyze_with_carried_key(self, client: AsyncClient, key_payload):
        key_payload["agent"]["consumable_items"] = {"key_a": 1}

        response = await client.post("/v1/solver/analyze", json=key_payload)

        data = response.json()
        assert data["missing_keys"] == {}
        assert data["next_step"] == {"dx": 1, "dy": 0}

    @pytest.mark.asyncio
    async def test_analyze_unreachable(self, client: AsyncClient, walled_payload):
        response = await client.post("/v1/solver/analyze", json=walled_payload)

        data = response.json()
        assert data["reachable"] is False
        assert data["distance"] is None

    @pytest.mark.asyncio
    async def test_analyze_malformed(self, client: AsyncClient, key_payload):
        key_payload["floors"][0]["grid"][1][5] = 0

        response = await client.post("/v1/solver/analyze", json=key_payload)

        assert response.status_code == 422
