"""
WebSocket server and event handling for the Switch card game.
"""

from .events import *
from .server import GameWebSocketManager, create_app

__all__ = ["GameWebSocketManager", "create_app"]
