"""
Test the WebSocket transport: rooms, match start and intent relay.
"""

import orjson
import pytest
from fastapi.testclient import TestClient

from switch_engine.ws.events import (
    ActionEvent, CreateRoomEvent, JoinEvent, LeaveEvent, StartEvent, parse_inbound_event
)
from switch_engine.ws.server import GameWebSocketManager, create_app


class FakeWebSocket:
    """Collects every message sent to one player."""

    def __init__(self):
        self.messages = []

    async def send_text(self, text):
        self.messages.append(orjson.loads(text))

    def of_type(self, event_type):
        return [m for m in self.messages if m["type"] == event_type]


@pytest.fixture
def manager():
    manager = GameWebSocketManager()
    for pid in ("alice", "bob"):
        manager.connections[pid] = FakeWebSocket()
    return manager


async def open_room(manager):
    await manager.create_room("alice", CreateRoomEvent(name="Alice"))
    code = manager.connections["alice"].of_type("joined")[0]["room_id"]
    await manager.join_room("bob", JoinEvent(room_id=code.lower(), name="Bob"))
    return code


@pytest.mark.asyncio
async def test_create_and_join_room(manager):
    code = await open_room(manager)
    alice, bob = manager.connections["alice"], manager.connections["bob"]

    assert alice.of_type("joined")[0]["seat"] == 0
    assert bob.of_type("joined")[0]["seat"] == 1
    room = alice.of_type("room_info")[-1]["room"]
    assert room["code"] == code
    assert room["host"] == "alice"
    assert [p["id"] for p in room["players"]] == ["alice", "bob"]


@pytest.mark.asyncio
async def test_join_unknown_room(manager):
    await manager.join_room("bob", JoinEvent(room_id="ZZZZ", name="Bob"))
    assert manager.connections["bob"].of_type("error")[0]["code"] == "ROOM_NOT_FOUND"


@pytest.mark.asyncio
async def test_joining_own_room_keeps_it(manager):
    """A lone host re-sending join for their own room stays seated and the room survives."""
    await manager.create_room("alice", CreateRoomEvent(name="Alice"))
    alice = manager.connections["alice"]
    code = alice.of_type("joined")[0]["room_id"]

    await manager.join_room("alice", JoinEvent(room_id=code, name="Alice"))
    assert code in manager.rooms
    assert manager.player_rooms["alice"] == code
    assert alice.of_type("joined")[-1]["seat"] == 0

    await manager.join_room("bob", JoinEvent(room_id=code, name="Bob"))
    assert not manager.connections["bob"].of_type("error")
    assert manager.rooms[code].seated_ids() == ["alice", "bob"]


@pytest.mark.asyncio
async def test_only_host_starts(manager):
    await open_room(manager)

    await manager.start_match("bob", StartEvent())
    assert manager.connections["bob"].of_type("error")[-1]["code"] == "NOT_HOST"

    await manager.leave_room("bob")
    await manager.start_match("alice", StartEvent())
    assert manager.connections["alice"].of_type("error")[-1]["code"] == "NOT_ENOUGH_PLAYERS"


@pytest.mark.asyncio
async def test_start_and_play(manager):
    await open_room(manager)
    await manager.start_match("alice", StartEvent(seed=3))
    alice, bob = manager.connections["alice"], manager.connections["bob"]

    alice_view = alice.of_type("state")[-1]["state"]
    bob_view = bob.of_type("state")[-1]["state"]
    assert alice_view["turn"] == "alice"
    assert len(alice_view["hand"]) == 7
    assert len(bob_view["hand"]) == 7
    assert {c["id"] for c in alice_view["hand"]}.isdisjoint(c["id"] for c in bob_view["hand"])

    # out of turn: only the sender hears about it
    await manager.apply_action("bob", ActionEvent(action={"type": "draw"}))
    assert bob.of_type("error")[-1]["code"] == "NOT_YOUR_TURN"
    assert not alice.of_type("error")

    await manager.apply_action("alice", ActionEvent(action={"type": "draw"}))
    feed = bob.of_type("feed")[-1]["events"]
    assert {"type": "cards_drawn", "player_id": "alice", "count": 1} in feed
    assert bob.of_type("state")[-1]["state"]["turn"] == "bob"
    assert len(alice.of_type("state")[-1]["state"]["hand"]) == 8


@pytest.mark.asyncio
async def test_leaving_running_match_abandons_it(manager):
    await open_room(manager)
    await manager.start_match("alice", StartEvent(seed=5))

    await manager.handle_event("alice", LeaveEvent())
    bob = manager.connections["bob"]

    assert {"type": "match_abandoned", "player_id": "alice"} in bob.of_type("feed")[-1]["events"]
    view = bob.of_type("state")[-1]["state"]
    assert view["phase"] == "ended"
    assert view["abandoned"]
    assert view["winner"] is None
    # host passes to the remaining player
    assert bob.of_type("room_info")[-1]["room"]["host"] == "bob"


@pytest.mark.asyncio
async def test_empty_room_is_closed(manager):
    code = await open_room(manager)
    await manager.start_match("alice", StartEvent(seed=1))

    await manager.leave_room("alice")
    await manager.leave_room("bob")
    assert code not in manager.rooms
    assert len(manager.repository) == 0


def test_parse_inbound_event():
    event = parse_inbound_event({"type": "action", "action": {"type": "choose_suit", "suit": "♦"}})
    assert isinstance(event, ActionEvent)
    assert event.action.suit == "D"

    with pytest.raises(ValueError):
        parse_inbound_event({"type": "action", "action": {"type": "cheat"}})
    with pytest.raises(ValueError):
        parse_inbound_event({"type": "teleport"})
    with pytest.raises(ValueError):
        parse_inbound_event(["not", "an", "object"])


def test_health_and_websocket_endpoint():
    client = TestClient(create_app())

    response = client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "healthy"

    with client.websocket_connect("/ws") as websocket:
        websocket.send_text(orjson.dumps({"type": "create_room", "name": "Alice"}).decode())
        joined = websocket.receive_json()
        assert joined["type"] == "joined"
        assert joined["seat"] == 0
        assert websocket.receive_json()["type"] == "room_info"

        websocket.send_text("not json")
        assert websocket.receive_json()["code"] == "INVALID_EVENT"

        websocket.send_text(orjson.dumps({"type": "request_state"}).decode())
        assert websocket.receive_json()["code"] == "NO_MATCH"



def test_match_listing():
    manager = GameWebSocketManager()
    manager.repository.create(
        [{"id": "alice", "name": "Alice"}, {"id": "bob", "name": "Bob"}], seed=2, match_id="m1"
    )
    client = TestClient(create_app(manager))

    listing = client.get("/matches").json()
    assert [m["id"] for m in listing] == ["m1"]
    assert listing[0]["phase"] == "playing"
    assert listing[0]["player_count"] == 2
    assert "hand" not in listing[0]["players"][0]
