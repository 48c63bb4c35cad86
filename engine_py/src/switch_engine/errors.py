# engine_py/src/switch_engine/errors.py

from enum import Enum


class ErrorCode(str, Enum):
    """Rejection reasons returned by the action processor."""
    NOT_YOUR_TURN = "NOT_YOUR_TURN"
    CARDS_NOT_IN_HAND = "CARDS_NOT_IN_HAND"
    ILLEGAL_PLAY = "ILLEGAL_PLAY"
    INVALID_SUIT_CHOICE = "INVALID_SUIT_CHOICE"
    AWAITING_SUIT_CHOICE = "AWAITING_SUIT_CHOICE"
    MATCH_ENDED = "MATCH_ENDED"
    UNKNOWN_PLAYER = "UNKNOWN_PLAYER"


class GameError(Exception):
    """Base exception for game-related errors."""
    def __init__(self, code: str, message: str):
        self.code = code
        self.message = message
        super().__init__(f"[{code}] {message}")

# Setup error codes
INVALID_PLAYER_COUNT = "INVALID_PLAYER_COUNT"
DUPLICATE_PLAYER = "DUPLICATE_PLAYER"
MATCH_NOT_FOUND = "MATCH_NOT_FOUND"
MATCH_EXISTS = "MATCH_EXISTS"

# Helper function to raise common errors
def raise_error(code: str, message: str):
    raise GameError(code, message)
