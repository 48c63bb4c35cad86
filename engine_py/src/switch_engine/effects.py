"""
Power card effects implementation.

Effects mutate the table in place; the engine always hands them a working
copy, so a rejected play never leaves a trace.
"""

from typing import Dict, List, Optional

from .constants import (
    BLACK_JACK_AMOUNT, CLOCKWISE, COUNTER_CLOCKWISE, DRAW_TWO_AMOUNT, EVENT_ATTACK_BLOCKED,
    EVENT_AWAITING_SUIT, EVENT_DIRECTION_REVERSED, EVENT_DRAW_STACK, EVENT_EXTRA_TURN,
    EVENT_SKIP_STACK, EVENT_SUIT_CHOSEN, SUIT_SYMBOLS, is_power_rank, is_red
)
from .models import Card, TableState


def apply_ace(
    state: TableState,
    player_id: str,
    suit_choice: Optional[str],
    events: List[Dict]
) -> None:
    """
    Apply Ace effect - the player names the new active suit.

    Without a suit given up front, the table waits for a choose-suit intent.
    """
    if suit_choice is not None:
        state.active_suit = suit_choice
        events.append({'type': EVENT_SUIT_CHOSEN, 'player_id': player_id, 'suit': suit_choice})
        state.log(f"Suit changed to {SUIT_SYMBOLS[suit_choice]}")
    else:
        state.awaiting_suit_choice_by = player_id
        events.append({'type': EVENT_AWAITING_SUIT, 'player_id': player_id})


def apply_draw_two(state: TableState, events: List[Dict]) -> None:
    """Apply Two effect - the next player stacks a 2 or draws the total."""
    state.pending_draw2 += DRAW_TWO_AMOUNT
    events.append({'type': EVENT_DRAW_STACK, 'rank': '2', 'total': state.pending_draw2})


def apply_skip(state: TableState, events: List[Dict]) -> None:
    """Apply Eight effect - the next player stacks an 8 or forfeits a turn."""
    state.pending_skip += 1
    events.append({'type': EVENT_SKIP_STACK, 'total': state.pending_skip})


def apply_reverse(state: TableState, events: List[Dict]) -> None:
    """Apply Queen effect - reverse the order of play."""
    state.direction = COUNTER_CLOCKWISE if state.direction == CLOCKWISE else CLOCKWISE
    events.append({'type': EVENT_DIRECTION_REVERSED, 'direction': state.direction})
    state.log("Direction: Clockwise" if state.direction == CLOCKWISE else "Direction: Reversed!")


def apply_extra_turn(state: TableState, events: List[Dict]) -> None:
    """Apply King effect - the acting player goes again. Does not stack."""
    if not state.extra_turn_granted:
        events.append({'type': EVENT_EXTRA_TURN})
    state.extra_turn_granted = True


def apply_jack(state: TableState, card: Card, events: List[Dict]) -> None:
    """
    Apply Jack effect.

    A red Jack blocks any pending Jack attack; a black Jack adds five to it.
    """
    if is_red(card.suit):
        state.pending_draw_j = 0
        events.append({'type': EVENT_ATTACK_BLOCKED, 'suit': card.suit})
        state.log("Attack Blocked!")
    else:
        state.pending_draw_j += BLACK_JACK_AMOUNT
        events.append({'type': EVENT_DRAW_STACK, 'rank': 'J', 'total': state.pending_draw_j})


def triggers_effect(card: Card, is_terminal: bool, is_set: bool) -> bool:
    """
    Check if a played card resolves its power.

    Only the last card of a play, or every card of a same-rank set, counts.
    Aces resolve once, on the last card.
    """
    if not is_power_rank(card.rank):
        return False
    if card.rank == 'A':
        return is_terminal
    return is_terminal or is_set


def process_effect(
    state: TableState,
    card: Card,
    player_id: str,
    events: List[Dict],
    suit_choice: Optional[str] = None
) -> None:
    """
    Process the effect of a single power card.

    Args:
        state: Table being played on (mutated)
        card: The power card that resolved
        player_id: Player who played it
        events: Event list to append to
        suit_choice: Suit named for an Ace, if any
    """
    if card.rank == 'A':
        apply_ace(state, player_id, suit_choice, events)
    elif card.rank == '2':
        apply_draw_two(state, events)
    elif card.rank == '8':
        apply_skip(state, events)
    elif card.rank == 'Q':
        apply_reverse(state, events)
    elif card.rank == 'K':
        apply_extra_turn(state, events)
    elif card.rank == 'J':
        apply_jack(state, card, events)


def has_pending_effects(state: TableState) -> bool:
    """
    Check if there are any pending obligations for the next player.

    Args:
        state: Current table state

    Returns:
        True if an attack or suit choice is unresolved
    """
    return (
        state.pending_draw2 > 0
        or state.pending_draw_j > 0
        or state.pending_skip > 0
        or state.awaiting_suit_choice_by is not None
    )
