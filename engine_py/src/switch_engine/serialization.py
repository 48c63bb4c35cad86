"""
State serialization and per-player view projection.
"""

from typing import Any, Dict, Optional

from .constants import GAME_LOG_LIMIT, PHASE_PLAYING
from .effects import has_pending_effects
from .models import Card, TableState
from .validate import playable_cards


def serialize_card(card: Card) -> Dict[str, str]:
    """Serialize a card, identity included."""
    return {
        "id": card.id,
        "rank": card.rank,
        "suit": card.suit
    }


def project_view(state: TableState, viewer_id: Optional[str] = None) -> Dict[str, Any]:
    """
    Derive the view of the table one participant is allowed to see.

    Args:
        state: Table state to project
        viewer_id: ID of the player viewing the state (to show their cards)

    Returns:
        JSON-safe dictionary; only the viewer's own hand is listed, every
        other hand is reduced to a count
    """
    current = state.current_player
    view = {
        "id": state.id,
        "version": state.version,
        "phase": state.phase,
        "viewer": viewer_id,
        "turn": current.id if current else None,
        "turn_index": state.turn_index,
        "direction": state.direction,
        "top_card": serialize_card(state.top_card) if state.top_card else None,
        "active_suit": state.active_suit,
        "pending_draw2": state.pending_draw2,
        "pending_draw_j": state.pending_draw_j,
        "pending_skip": state.pending_skip,
        "extra_turn_granted": state.extra_turn_granted,
        "awaiting_suit_choice_by": state.awaiting_suit_choice_by,
        "winner": state.winner,
        "abandoned": state.abandoned,
        "deck_count": len(state.deck),
        "discard_count": len(state.discard),
        "players": [],
        "hand": None,
        "playable": [],
        "log": state.game_log[-GAME_LOG_LIMIT:]
    }

    for player in state.players:
        view["players"].append({
            "id": player.id,
            "name": player.name,
            "seat": player.seat,
            "count": len(player.hand),
            "last_called": player.last_called,
            "connected": player.connected
        })

        # Show full hand only to the viewer
        if player.id == viewer_id:
            view["hand"] = [serialize_card(card) for card in player.hand]
            if state.phase == PHASE_PLAYING and current is player and state.awaiting_suit_choice_by is None:
                view["playable"] = [card.id for card in playable_cards(state, player)]

    return view


def get_public_match_info(state: TableState) -> Dict[str, Any]:
    """Get public information about a match for listings."""
    return {
        "id": state.id,
        "phase": state.phase,
        "player_count": len(state.players),
        "players": [
            {"id": player.id, "name": player.name, "seat": player.seat}
            for player in state.players
        ],
        "winner": state.winner,
        "abandoned": state.abandoned,
        "has_pending_effects": has_pending_effects(state)
    }
