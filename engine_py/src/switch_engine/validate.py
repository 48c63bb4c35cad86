"""
Intent validation against the current table.
"""

from typing import Dict, List, Optional

from .comparator import can_start, chain_is_valid, is_same_rank_set
from .constants import PHASE_ENDED, PHASE_PLAYING, SUITS
from .errors import ErrorCode
from .models import Card, Player, TableState


class ValidationResult:
    """Result of intent validation."""

    def __init__(
        self,
        valid: bool,
        error_code: Optional[ErrorCode] = None,
        error_message: Optional[str] = None,
        pattern: Optional[Dict] = None
    ):
        self.valid = valid
        self.error_code = error_code
        self.error_message = error_message
        self.pattern = pattern

    @classmethod
    def success(cls, pattern: Optional[Dict] = None) -> 'ValidationResult':
        """Create a successful validation result."""
        return cls(valid=True, pattern=pattern or {})

    @classmethod
    def error(cls, error_code: ErrorCode, error_message: str) -> 'ValidationResult':
        """Create an error validation result."""
        return cls(valid=False, error_code=error_code, error_message=error_message)


def required_rank(state: TableState) -> Optional[str]:
    """
    Get the rank a player must open with to answer a pending attack.

    Returns:
        '2', 'J' or '8' while the matching obligation is pending, else None
    """
    if state.pending_draw2 > 0:
        return '2'
    if state.pending_draw_j > 0:
        return 'J'
    if state.pending_skip > 0:
        return '8'
    return None


def can_open(state: TableState, card: Card) -> bool:
    """
    Check if a card may be the first card of a play.

    A pending attack replaces the normal matching rule: only the answering
    rank may be played, whatever the top card is.
    """
    needed = required_rank(state)
    if needed is not None:
        return card.rank == needed
    return can_start(card, state.top_card, state.active_suit)


def playable_cards(state: TableState, player: Player) -> List[Card]:
    """Get the cards in a player's hand that could open a play right now."""
    return [card for card in player.hand if can_open(state, card)]


def validate_turn(state: TableState, player_id: str, allow_awaiting: bool = False) -> ValidationResult:
    """
    Check that the match is running and it is this player's move.

    Args:
        state: Current table state
        player_id: ID of player attempting to act
        allow_awaiting: Whether the action may resolve this player's pending suit choice

    Returns:
        ValidationResult with validation outcome
    """
    if state.phase == PHASE_ENDED:
        return ValidationResult.error(ErrorCode.MATCH_ENDED, "The match is over")

    if state.phase != PHASE_PLAYING:
        return ValidationResult.error(
            ErrorCode.NOT_YOUR_TURN,
            f"Match is not in play (current: {state.phase})"
        )

    if state.get_player(player_id) is None:
        return ValidationResult.error(ErrorCode.UNKNOWN_PLAYER, "Player is not seated at this table")

    awaiting = state.awaiting_suit_choice_by
    if awaiting is not None and awaiting != player_id:
        return ValidationResult.error(
            ErrorCode.AWAITING_SUIT_CHOICE,
            "Waiting for another player to choose a suit"
        )

    if state.current_player.id != player_id:
        return ValidationResult.error(
            ErrorCode.NOT_YOUR_TURN,
            f"It's not your turn (current turn: {state.current_player.id})"
        )

    if awaiting == player_id and not allow_awaiting:
        return ValidationResult.error(
            ErrorCode.AWAITING_SUIT_CHOICE,
            "Choose a suit before doing anything else"
        )

    return ValidationResult.success()


def validate_play(
    state: TableState,
    player_id: str,
    card_ids: List[str],
    suit_choice: Optional[str] = None
) -> ValidationResult:
    """
    Validate a card play attempt.

    Args:
        state: Current table state
        player_id: ID of player attempting the play
        card_ids: Card identities in the order they are played
        suit_choice: Suit named up front for a terminal Ace

    Returns:
        ValidationResult whose pattern carries the resolved cards
    """
    turn_check = validate_turn(state, player_id)
    if not turn_check.valid:
        return turn_check

    if not card_ids:
        return ValidationResult.error(ErrorCode.ILLEGAL_PLAY, "No cards selected")

    player = state.get_player(player_id)

    if len(set(card_ids)) != len(card_ids):
        return ValidationResult.error(
            ErrorCode.CARDS_NOT_IN_HAND,
            "The same card cannot be played twice"
        )

    cards = [player.find_card(card_id) for card_id in card_ids]
    if any(card is None for card in cards):
        return ValidationResult.error(
            ErrorCode.CARDS_NOT_IN_HAND,
            "Player does not own all specified cards"
        )

    if suit_choice is not None and suit_choice not in SUITS:
        return ValidationResult.error(
            ErrorCode.INVALID_SUIT_CHOICE,
            f"Unknown suit: {suit_choice}"
        )

    needed = required_rank(state)
    if needed is not None and cards[0].rank != needed:
        return ValidationResult.error(
            ErrorCode.ILLEGAL_PLAY,
            f"Must play a {needed} or draw"
        )

    if not can_open(state, cards[0]):
        return ValidationResult.error(
            ErrorCode.ILLEGAL_PLAY,
            f"{cards[0]} does not match {state.top_card}"
        )

    if not chain_is_valid(cards):
        return ValidationResult.error(
            ErrorCode.ILLEGAL_PLAY,
            "Cards must share a rank or run in one suit"
        )

    return ValidationResult.success({
        'cards': cards,
        'is_set': is_same_rank_set(cards)
    })


def validate_suit_choice(state: TableState, player_id: str, suit: str) -> ValidationResult:
    """
    Validate a suit choice after a terminal Ace.

    Args:
        state: Current table state
        player_id: Player naming the suit
        suit: Suit being named

    Returns:
        ValidationResult with validation outcome
    """
    if state.awaiting_suit_choice_by is None:
        turn_check = validate_turn(state, player_id)
        if not turn_check.valid:
            return turn_check
        return ValidationResult.error(ErrorCode.ILLEGAL_PLAY, "No suit choice is pending")

    turn_check = validate_turn(state, player_id, allow_awaiting=True)
    if not turn_check.valid:
        return turn_check

    if suit not in SUITS:
        return ValidationResult.error(ErrorCode.INVALID_SUIT_CHOICE, f"Unknown suit: {suit}")

    return ValidationResult.success({'suit': suit})
