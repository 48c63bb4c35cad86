"""
WebSocket event models and validation.
"""

import time
from enum import Enum
from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, Field

from ..intents import Intent


class EventType(str, Enum):
    """Inbound event types."""
    CREATE_ROOM = "create_room"
    JOIN_ROOM = "join_room"
    LEAVE_ROOM = "leave_room"
    START = "start"
    ACTION = "action"
    REQUEST_STATE = "request_state"


class OutboundEventType(str, Enum):
    """Outbound event types."""
    JOINED = "joined"
    ROOM_INFO = "room_info"
    STATE = "state"
    FEED = "feed"
    ERROR = "error"


class ErrorCode(str, Enum):
    """Transport-level error codes. Rejected intents carry the engine's own code."""
    INVALID_EVENT = "INVALID_EVENT"
    ROOM_NOT_FOUND = "ROOM_NOT_FOUND"
    ROOM_FULL = "ROOM_FULL"
    NOT_IN_ROOM = "NOT_IN_ROOM"
    NOT_HOST = "NOT_HOST"
    NOT_ENOUGH_PLAYERS = "NOT_ENOUGH_PLAYERS"
    ALREADY_STARTED = "ALREADY_STARTED"
    NO_MATCH = "NO_MATCH"
    INTERNAL = "INTERNAL"


# Inbound event models
class BaseEvent(BaseModel):
    """Base event model."""
    type: EventType


class CreateRoomEvent(BaseEvent):
    """Create a room and take seat 0 as host."""
    type: EventType = EventType.CREATE_ROOM
    name: str = Field(default="Host", min_length=1, max_length=16)


class JoinEvent(BaseEvent):
    """Join room event."""
    type: EventType = EventType.JOIN_ROOM
    room_id: str = Field(..., min_length=4, max_length=8)
    name: str = Field(default="Player", min_length=1, max_length=16)


class LeaveEvent(BaseEvent):
    """Leave room event."""
    type: EventType = EventType.LEAVE_ROOM


class StartEvent(BaseEvent):
    """Start match event."""
    type: EventType = EventType.START
    seed: Optional[int] = None


class ActionEvent(BaseEvent):
    """Wraps one player intent."""
    type: EventType = EventType.ACTION
    action: Intent


class RequestStateEvent(BaseEvent):
    """Request full state event."""
    type: EventType = EventType.REQUEST_STATE


# Union type for all inbound events
InboundEvent = Union[
    CreateRoomEvent,
    JoinEvent,
    LeaveEvent,
    StartEvent,
    ActionEvent,
    RequestStateEvent
]


# Outbound event models
class JoinedEvent(BaseModel):
    """Seat confirmation event."""
    type: OutboundEventType = OutboundEventType.JOINED
    player_id: str
    room_id: str
    seat: int
    timestamp: float


class RoomInfoEvent(BaseModel):
    """Room roster event."""
    type: OutboundEventType = OutboundEventType.ROOM_INFO
    room: Dict[str, Any]
    timestamp: float


class StateFullEvent(BaseModel):
    """Full per-player view of the table."""
    type: OutboundEventType = OutboundEventType.STATE
    state: Dict[str, Any]
    timestamp: float


class FeedEvent(BaseModel):
    """Events produced by the last accepted intent."""
    type: OutboundEventType = OutboundEventType.FEED
    events: List[Dict[str, Any]]
    timestamp: float


class ErrorEvent(BaseModel):
    """Error event."""
    type: OutboundEventType = OutboundEventType.ERROR
    code: str
    message: str
    timestamp: float


OutboundEvent = Union[
    JoinedEvent,
    RoomInfoEvent,
    StateFullEvent,
    FeedEvent,
    ErrorEvent
]


def parse_inbound_event(data: Dict[str, Any]) -> InboundEvent:
    """
    Parse raw event data into appropriate event model.

    Args:
        data: Raw event data from WebSocket

    Returns:
        Parsed event model

    Raises:
        ValueError: If event type is invalid or data is malformed
    """
    if not isinstance(data, dict):
        raise ValueError("Event must be a JSON object")

    event_type = data.get("type")

    if not event_type:
        raise ValueError("Missing event type")

    try:
        event_type = EventType(event_type)
    except ValueError:
        raise ValueError(f"Invalid event type: {event_type}")

    event_map = {
        EventType.CREATE_ROOM: CreateRoomEvent,
        EventType.JOIN_ROOM: JoinEvent,
        EventType.LEAVE_ROOM: LeaveEvent,
        EventType.START: StartEvent,
        EventType.ACTION: ActionEvent,
        EventType.REQUEST_STATE: RequestStateEvent,
    }

    event_class = event_map[event_type]

    try:
        return event_class(**data)
    except Exception as e:
        raise ValueError(f"Invalid event data: {str(e)}")


def create_error_event(code: str, message: str) -> ErrorEvent:
    """Create an error event."""
    return ErrorEvent(
        code=code,
        message=message,
        timestamp=time.time()
    )


def create_joined_event(player_id: str, room_id: str, seat: int) -> JoinedEvent:
    """Create a seat confirmation event."""
    return JoinedEvent(
        player_id=player_id,
        room_id=room_id,
        seat=seat,
        timestamp=time.time()
    )


def create_room_info_event(room: Dict[str, Any]) -> RoomInfoEvent:
    """Create a room roster event."""
    return RoomInfoEvent(
        room=room,
        timestamp=time.time()
    )


def create_state_full_event(state: Dict[str, Any]) -> StateFullEvent:
    """Create a full state event."""
    return StateFullEvent(
        state=state,
        timestamp=time.time()
    )


def create_feed_event(events: List[Dict[str, Any]]) -> FeedEvent:
    """Create a feed event."""
    return FeedEvent(
        events=events,
        timestamp=time.time()
    )
