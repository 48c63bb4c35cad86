"""
Shared fixtures: deterministic tables built from card codes.
"""

import random

import pytest

from switch_engine.constants import DECK_SIZE, PHASE_PLAYING, parse_card_code
from switch_engine.models import Player, TableState
from switch_engine.shuffle import create_deck


def build_table(hands, top, active_suit=None, deck_top=None, **fields):
    """
    Build a playing table where every one of the 52 cards is placed.

    Args:
        hands: Ordered mapping of player id -> card codes such as "5H" or "10S"
        top: Code of the discard pile's top card
        active_suit: Defaults to the top card's suit
        deck_top: Codes drawn first from the deck, in draw order
        **fields: Any other TableState attributes to override
    """
    remaining = {card.code: card for card in create_deck()}

    def take(code):
        rank, suit = parse_card_code(code)
        return remaining.pop(f"{rank}{suit}")

    players = [
        Player(id=pid, name=pid.title(), seat=seat, hand=[take(code) for code in codes])
        for seat, (pid, codes) in enumerate(hands.items())
    ]
    top_card = take(top)
    front = [take(code) for code in (deck_top or [])]

    state = TableState(
        id="test",
        phase=PHASE_PLAYING,
        players=players,
        discard=[top_card],
        deck=list(remaining.values()) + list(reversed(front)),
        active_suit=active_suit or top_card.suit,
        cards_minted=DECK_SIZE,
        rng=random.Random(7)
    )
    for name, value in fields.items():
        setattr(state, name, value)
    return state


def ids_for(state, player_id, *codes):
    """Look up the identities of cards in a player's hand by code."""
    by_code = {card.code: card.id for card in state.get_player(player_id).hand}
    return [by_code[code] for code in codes]


@pytest.fixture
def make_table():
    return build_table


@pytest.fixture
def ids():
    return ids_for
