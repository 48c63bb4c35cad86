"""
Turn order: direction, extra turns and forced passes.
"""

from typing import Dict, List

from .constants import EVENT_TURN_SKIPPED
from .models import TableState


def next_seat(state: TableState) -> int:
    """Get the seat after the current one in the direction of play."""
    n = len(state.players)
    return (state.turn_index + state.direction + n) % n


def _move_to(state: TableState, seat: int) -> None:
    state.turn_index = seat
    # LAST only counts when declared during the turn it is used
    state.players[seat].last_called = False


def advance_turn(state: TableState, events: List[Dict]) -> None:
    """
    Hand the turn to the next player.

    A granted extra turn is consumed instead of moving. After moving, a
    player facing a pending skip with no 8 to answer it loses the turn
    automatically; this repeats at most once per seat.

    Args:
        state: Table to advance (mutated)
        events: Event list that receives forced-pass notifications
    """
    if state.extra_turn_granted:
        state.extra_turn_granted = False
        return

    _move_to(state, next_seat(state))

    for _ in range(len(state.players)):
        player = state.current_player
        if state.pending_skip <= 0 or player.has_rank('8'):
            break
        state.pending_skip -= 1
        events.append({'type': EVENT_TURN_SKIPPED, 'player_id': player.id, 'forced': True})
        state.log(f"{player.name} is skipped!")
        _move_to(state, next_seat(state))
