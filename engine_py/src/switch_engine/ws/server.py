"""
FastAPI WebSocket server for the Switch card game.

The server only does room bookkeeping and fan-out; every game decision is
made by the engine through the match repository.
"""

import logging
import random
import uuid
from dataclasses import dataclass, field
from typing import Dict, List, Optional

import orjson
from fastapi import FastAPI, WebSocket, WebSocketDisconnect
from fastapi.middleware.cors import CORSMiddleware

from ..constants import PHASE_PLAYING
from ..errors import GameError
from ..repository import MatchRepository
from ..rules import RuleConfig, default_rules
from ..serialization import get_public_match_info, project_view
from .events import (
    ActionEvent, CreateRoomEvent, ErrorCode, JoinEvent, LeaveEvent, OutboundEvent,
    RequestStateEvent, StartEvent, create_error_event, create_feed_event, create_joined_event,
    create_room_info_event, create_state_full_event, parse_inbound_event
)

logger = logging.getLogger(__name__)

ROOM_CODE_CHARS = "ABCDEFGHJKMNPQRSTUVWXYZ23456789"


@dataclass
class Room:
    """Lobby bookkeeping for one table."""
    code: str
    host_id: str
    seats: Dict[int, str] = field(default_factory=dict)  # seat -> player id
    names: Dict[str, str] = field(default_factory=dict)
    match_id: Optional[str] = None

    def seated_ids(self) -> List[str]:
        return [self.seats[seat] for seat in sorted(self.seats)]

    def seat_of(self, player_id: str) -> Optional[int]:
        return next((seat for seat, pid in self.seats.items() if pid == player_id), None)

    def info(self) -> Dict:
        return {
            "code": self.code,
            "host": self.host_id,
            "players": [
                {"id": pid, "name": self.names.get(pid, "Player"), "seat": seat}
                for seat, pid in sorted(self.seats.items())
            ],
            "match_id": self.match_id
        }


class GameWebSocketManager:
    """Manages WebSocket connections, rooms and broadcasting."""

    def __init__(self, repository: Optional[MatchRepository] = None, rules: Optional[RuleConfig] = None):
        self.repository = repository or MatchRepository()
        self.rules = rules or default_rules
        self.rooms: Dict[str, Room] = {}
        self.connections: Dict[str, WebSocket] = {}
        self.player_rooms: Dict[str, str] = {}

    def make_code(self, length: int = 6) -> str:
        while True:
            code = "".join(random.choice(ROOM_CODE_CHARS) for _ in range(length))
            if code not in self.rooms:
                return code

    async def handle_websocket(self, websocket: WebSocket):
        """Serve one connection until it closes."""
        await websocket.accept()
        player_id = str(uuid.uuid4())[:8]
        self.connections[player_id] = websocket
        logger.info(f"Player {player_id} connected")

        try:
            while True:
                raw_data = await websocket.receive_text()

                try:
                    event = parse_inbound_event(orjson.loads(raw_data))
                    await self.handle_event(player_id, event)
                except GameError as e:
                    await self.send_error(player_id, e.code, e.message)
                except ValueError as e:
                    await self.send_error(player_id, ErrorCode.INVALID_EVENT.value, str(e))
                except Exception as e:
                    logger.error(f"Error handling event from {player_id}: {e}")
                    await self.send_error(player_id, ErrorCode.INTERNAL.value, "Internal server error")

        except WebSocketDisconnect:
            logger.info(f"Player {player_id} disconnected")
        finally:
            self.connections.pop(player_id, None)
            await self.leave_room(player_id)

    async def handle_event(self, player_id: str, event) -> None:
        """Dispatch an inbound event."""
        if isinstance(event, CreateRoomEvent):
            await self.create_room(player_id, event)
        elif isinstance(event, JoinEvent):
            await self.join_room(player_id, event)
        elif isinstance(event, LeaveEvent):
            await self.leave_room(player_id)
        elif isinstance(event, StartEvent):
            await self.start_match(player_id, event)
        elif isinstance(event, ActionEvent):
            await self.apply_action(player_id, event)
        elif isinstance(event, RequestStateEvent):
            await self.send_state(player_id)
        else:
            raise ValueError(f"Unhandled event type: {type(event)}")

    async def create_room(self, player_id: str, event: CreateRoomEvent):
        await self.leave_room(player_id)

        room = Room(code=self.make_code(), host_id=player_id)
        room.seats[0] = player_id
        room.names[player_id] = event.name
        self.rooms[room.code] = room
        self.player_rooms[player_id] = room.code
        logger.info(f"Room {room.code} created by {player_id}")

        await self.send(player_id, create_joined_event(player_id, room.code, 0))
        await self.broadcast_room_info(room)

    async def join_room(self, player_id: str, event: JoinEvent):
        code = event.room_id.strip().upper()
        room = self.rooms.get(code)
        if room is None:
            await self.send_error(player_id, ErrorCode.ROOM_NOT_FOUND.value, "Room not found")
            return

        if self.player_rooms.get(player_id) == room.code:
            await self.send(player_id, create_joined_event(player_id, room.code, room.seat_of(player_id)))
            return

        if self._match_running(room):
            await self.send_error(player_id, ErrorCode.ALREADY_STARTED.value, "Match already in progress")
            return

        free = [seat for seat in range(self.rules.max_players) if seat not in room.seats]
        if not free:
            await self.send_error(
                player_id, ErrorCode.ROOM_FULL.value, f"Room full (max {self.rules.max_players})"
            )
            return

        await self.leave_room(player_id)
        room.seats[free[0]] = player_id
        room.names[player_id] = event.name
        self.player_rooms[player_id] = room.code
        logger.info(f"Player {player_id} joined room {room.code} at seat {free[0]}")

        await self.send(player_id, create_joined_event(player_id, room.code, free[0]))
        await self.broadcast_room_info(room)

    async def leave_room(self, player_id: str):
        """Free the seat; leaving a running match abandons it."""
        code = self.player_rooms.pop(player_id, None)
        room = self.rooms.get(code) if code else None
        if room is None:
            return

        seat = room.seat_of(player_id)
        if seat is not None:
            del room.seats[seat]
        room.names.pop(player_id, None)
        logger.info(f"Player {player_id} left room {room.code}")

        if room.match_id and self._match_running(room):
            result = self.repository.player_left(room.match_id, player_id)
            if result.success:
                await self.broadcast(room, create_feed_event(result.events))
                await self.broadcast_state(room)

        if not room.seats:
            if room.match_id:
                self.repository.remove(room.match_id)
            del self.rooms[room.code]
            logger.info(f"Room {room.code} closed")
            return

        if room.host_id == player_id:
            room.host_id = room.seats[min(room.seats)]
            logger.info(f"Room {room.code}: host passed to {room.host_id}")

        await self.broadcast_room_info(room)

    async def start_match(self, player_id: str, event: StartEvent):
        room = self._room_for(player_id)
        if room is None:
            await self.send_error(player_id, ErrorCode.NOT_IN_ROOM.value, "Not in a room")
            return

        if room.host_id != player_id:
            await self.send_error(player_id, ErrorCode.NOT_HOST.value, "Only the host can start")
            return

        if self._match_running(room):
            await self.send_error(player_id, ErrorCode.ALREADY_STARTED.value, "Match already in progress")
            return

        if len(room.seats) < self.rules.min_players:
            await self.send_error(
                player_id, ErrorCode.NOT_ENOUGH_PLAYERS.value,
                f"Waiting for players ({len(room.seats)}/{self.rules.min_players})"
            )
            return

        if room.match_id:
            self.repository.remove(room.match_id)

        roster = [{"id": pid, "name": room.names.get(pid)} for pid in room.seated_ids()]
        state = self.repository.create(roster, rules=self.rules, seed=event.seed)
        room.match_id = state.id

        await self.broadcast(room, create_feed_event([{"type": "match_started", "match_id": state.id}]))
        await self.broadcast_room_info(room)
        await self.broadcast_state(room)

    async def apply_action(self, player_id: str, event: ActionEvent):
        room = self._room_for(player_id)
        if room is None or room.match_id is None:
            await self.send_error(player_id, ErrorCode.NO_MATCH.value, "No match in progress")
            return

        result = self.repository.apply(room.match_id, player_id, event.action)
        if not result.success:
            await self.send_error(player_id, result.error_code.value, result.error_message)
            return

        await self.broadcast(room, create_feed_event(result.events))
        await self.broadcast_state(room)

    async def send_state(self, player_id: str):
        room = self._room_for(player_id)
        if room is None or room.match_id is None:
            await self.send_error(player_id, ErrorCode.NO_MATCH.value, "No match in progress")
            return

        state = self.repository.get(room.match_id)
        await self.send(player_id, create_state_full_event(project_view(state, player_id)))

    async def broadcast_state(self, room: Room):
        """Send every seated player their own view of the table."""
        state = self.repository.get(room.match_id) if room.match_id else None
        if state is None:
            return
        for pid in room.seated_ids():
            await self.send(pid, create_state_full_event(project_view(state, pid)))

    async def broadcast_room_info(self, room: Room):
        await self.broadcast(room, create_room_info_event(room.info()))

    async def broadcast(self, room: Room, event: OutboundEvent):
        for pid in room.seated_ids():
            await self.send(pid, event)

    async def send(self, player_id: str, event: OutboundEvent):
        websocket = self.connections.get(player_id)
        if websocket is None:
            return
        try:
            await websocket.send_text(event.model_dump_json())
        except Exception as e:
            logger.error(f"Error sending to player {player_id}: {e}")
            self.connections.pop(player_id, None)

    async def send_error(self, player_id: str, code: str, message: str):
        await self.send(player_id, create_error_event(code, message))

    def _room_for(self, player_id: str) -> Optional[Room]:
        code = self.player_rooms.get(player_id)
        return self.rooms.get(code) if code else None

    def _match_running(self, room: Room) -> bool:
        state = self.repository.get(room.match_id) if room.match_id else None
        return state is not None and state.phase == PHASE_PLAYING


def create_app(manager: Optional[GameWebSocketManager] = None) -> FastAPI:
    """Build the FastAPI application around one connection manager."""
    manager = manager or GameWebSocketManager()

    app = FastAPI(title="Switch Card Game Engine", version="1.0.0")
    app.state.manager = manager

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.get("/health")
    async def health_check():
        """Health check endpoint."""
        return {
            "status": "healthy",
            "rooms": len(manager.rooms),
            "matches": len(manager.repository),
            "connections": len(manager.connections)
        }

    @app.get("/matches")
    async def list_matches():
        """Public summary of every match the repository holds."""
        repository = manager.repository
        return [get_public_match_info(repository.get(match_id)) for match_id in repository.list_ids()]

    @app.websocket("/ws")
    async def websocket_endpoint(websocket: WebSocket):
        await manager.handle_websocket(websocket)

    return app
