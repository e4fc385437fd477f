"""Tests for API endpoints."""

import asyncio

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport

from api.main import app
from api.session import TableRegistry, get_registry
from config import AppConfig, TableConfig, TimingConfig


@pytest.fixture
def registry():
    """A registry dealing from single-deck shoes with no pauses."""
    return TableRegistry(
        AppConfig(timing=TimingConfig.instant(), table=TableConfig(num_decks=1))
    )


@pytest_asyncio.fixture
async def client(registry):
    """Create test client."""
    app.dependency_overrides[get_registry] = lambda: registry
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
    app.dependency_overrides.clear()


async def _new_table(client) -> tuple[str, dict]:
    response = await client.post("/api/table/new")
    assert response.status_code == 200
    data = response.json()
    return data["table"]["table_id"], data


async def _play_out(client, table_id: str) -> dict:
    """Stand (if still allowed) and return the table state."""
    response = await client.post("/api/table/stand", headers={"X-Table-ID": table_id})
    assert response.status_code == 200
    return response.json()["table"]


@pytest.mark.asyncio
async def test_health_check(client):
    """Test health check endpoint."""
    response = await client.get("/api/health")
    assert response.status_code == 200
    assert response.json() == {"status": "healthy"}


@pytest.mark.asyncio
async def test_new_table(client, registry):
    """Test opening a table deals the first round."""
    table_id, data = await _new_table(client)

    assert data["accepted"] is True
    assert len(registry) == 1
    table = data["table"]
    assert table["round_number"] == 1
    assert table["state"] in ["PLAYER_TURN", "RESOLVED"]
    assert len(table["player_hand"]["cards"]) == 2
    event_types = [e["type"] for e in data["events"]]
    assert event_types[0] == "SHOE_SHUFFLED"
    assert "ROUND_STARTED" in event_types


@pytest.mark.asyncio
async def test_hole_card_hidden_in_state(client, registry):
    """Test the dealer's face-down card is not serialised."""
    table_id, data = await _new_table(client)
    if data["table"]["state"] != "PLAYER_TURN":
        pytest.skip("player was dealt 21")

    response = await client.get("/api/table/state", headers={"X-Table-ID": table_id})
    dealer = response.json()["dealer_hand"]

    assert dealer["cards"][1] is None
    table = registry.get(table_id)
    assert dealer["score"] == table.dealer_hand.cards[0].value


@pytest.mark.asyncio
async def test_stand_resolves_round(client):
    """Test standing finishes the round with an outcome."""
    table_id, data = await _new_table(client)
    table = await _play_out(client, table_id)

    assert table["state"] == "RESOLVED"
    assert table["outcome"]["message"]
    assert table["can_play_again"] is True
    assert None not in table["dealer_hand"]["cards"]
    assert sum(table["scores"].values()) <= 1


@pytest.mark.asyncio
async def test_rejected_action_is_not_an_error(client):
    """Test an action outside the player's turn is reported, not raised."""
    table_id, _ = await _new_table(client)
    await _play_out(client, table_id)

    response = await client.post("/api/table/hit", headers={"X-Table-ID": table_id})

    assert response.status_code == 200
    data = response.json()
    assert data["accepted"] is False
    assert data["events"][0]["type"] == "INVALID_ACTION"


@pytest.mark.asyncio
async def test_play_again(client):
    """Test a second round keeps the session counters."""
    table_id, _ = await _new_table(client)
    first = await _play_out(client, table_id)

    response = await client.post("/api/table/play-again", headers={"X-Table-ID": table_id})

    assert response.status_code == 200
    table = response.json()["table"]
    assert table["round_number"] == 2
    assert sum(table["scores"].values()) >= sum(first["scores"].values())


@pytest.mark.asyncio
async def test_unknown_table(client):
    """Test requests for an unknown table id return 404."""
    response = await client.get("/api/table/state", headers={"X-Table-ID": "missing"})
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_missing_table_header(client):
    """Test the table id header is required."""
    response = await client.post("/api/table/hit")
    assert response.status_code == 422


@pytest.mark.asyncio
async def test_leave_table(client, registry):
    """Test leaving the table removes it."""
    table_id, _ = await _new_table(client)

    response = await client.post("/api/table/leave", headers={"X-Table-ID": table_id})

    assert response.status_code == 200
    assert len(registry) == 0


@pytest.mark.asyncio
async def test_concurrent_actions_keep_their_own_events(client):
    """Test each response carries only the events its own action raised."""
    table_id, data = await _new_table(client)
    if data["table"]["state"] != "PLAYER_TURN":
        pytest.skip("player was dealt 21")

    headers = {"X-Table-ID": table_id}
    responses = await asyncio.gather(
        client.post("/api/table/hit", headers=headers),
        client.post("/api/table/hit", headers=headers),
    )

    for response in responses:
        assert response.status_code == 200
        data = response.json()
        event_types = [e["type"] for e in data["events"]]
        if data["accepted"]:
            assert "INVALID_ACTION" not in event_types
            assert "PLAYER_HIT" in event_types
        else:
            assert event_types == ["INVALID_ACTION"]

