"""Game constants and utilities"""

from typing import Optional, Tuple

RANKS = ['A', '2', '3', '4', '5', '6', '7', '8', '9', '10', 'J', 'Q', 'K']
SUITS = ['S', 'H', 'D', 'C']
RED_SUITS = {'H', 'D'}
SUIT_SYMBOLS = {'S': '♠', 'H': '♥', 'D': '♦', 'C': '♣'}

POWER_RANKS = {'A', '2', '8', 'J', 'Q', 'K'}

DECK_SIZE = len(RANKS) * len(SUITS)

# Attack sizes
DRAW_TWO_AMOUNT = 2
BLACK_JACK_AMOUNT = 5

# Phases
PHASE_LOBBY = 'lobby'
PHASE_PLAYING = 'playing'
PHASE_ENDED = 'ended'

CLOCKWISE = 1
COUNTER_CLOCKWISE = -1

# Event types
EVENT_CARDS_PLAYED = 'cards_played'
EVENT_CARDS_DRAWN = 'cards_drawn'
EVENT_TURN_SKIPPED = 'turn_skipped'
EVENT_LAST_DECLARED = 'last_declared'
EVENT_SUIT_CHOSEN = 'suit_chosen'
EVENT_AWAITING_SUIT = 'awaiting_suit_choice'
EVENT_DIRECTION_REVERSED = 'direction_reversed'
EVENT_EXTRA_TURN = 'extra_turn'
EVENT_ATTACK_BLOCKED = 'attack_blocked'
EVENT_DRAW_STACK = 'draw_stack'
EVENT_SKIP_STACK = 'skip_stack'
EVENT_DECK_RESHUFFLED = 'deck_reshuffled'
EVENT_DECK_REPLENISHED = 'deck_replenished'
EVENT_DIRTY_FINISH = 'dirty_finish'
EVENT_POWER_FINISH = 'power_finish'
EVENT_MATCH_WON = 'match_won'
EVENT_MATCH_ABANDONED = 'match_abandoned'

GAME_LOG_LIMIT = 50


def rank_value(rank: str) -> int:
    """Numeric value used for run adjacency (A=1, J=11, Q=12, K=13)."""
    return RANKS.index(rank) + 1


def is_power_rank(rank: str) -> bool:
    return rank in POWER_RANKS


def is_red(suit: str) -> bool:
    return suit in RED_SUITS


def parse_card_code(code: str) -> Tuple[str, str]:
    """Split a card code like "10H" or "QS" into (rank, suit)."""
    rank, suit = code[:-1].upper(), code[-1].upper()
    if rank not in RANKS or suit not in SUITS:
        raise ValueError(f"Invalid card code: {code}")
    return rank, suit


def format_card(rank: str, suit: Optional[str]) -> str:
    return f"{rank}{SUIT_SYMBOLS.get(suit, '')}"
