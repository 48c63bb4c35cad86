"""
Card shuffling, drawing and dealing utilities.
"""

import logging
import random
from typing import Dict, List, Optional

from .constants import (
    EVENT_DECK_REPLENISHED, EVENT_DECK_RESHUFFLED, RANKS, SUITS,
    is_power_rank
)
from .models import Card, TableState

logger = logging.getLogger(__name__)


def create_deck(start_serial: int = 0) -> List[Card]:
    """Create one card of every rank and suit, each with a fresh identity."""
    deck = []
    serial = start_serial
    for suit in SUITS:
        for rank in RANKS:
            deck.append(Card(rank=rank, suit=suit, id=f"c{serial}"))
            serial += 1
    return deck


def shuffle_deck(deck: List[Card], rng: Optional[random.Random] = None) -> List[Card]:
    """
    Shuffle a copy of the deck.

    random.shuffle is an in-place Fisher-Yates shuffle, so every ordering
    is equally likely.

    Args:
        deck: Cards to shuffle
        rng: Optional random source for deterministic shuffling

    Returns:
        Shuffled copy of the deck
    """
    deck_copy = deck.copy()
    (rng or random).shuffle(deck_copy)
    return deck_copy


def new_shuffled_deck(state: TableState) -> List[Card]:
    """Mint a full 52-card deck for this table and shuffle it."""
    deck = create_deck(state.cards_minted)
    state.cards_minted += len(deck)
    return shuffle_deck(deck, state.rng)


def replenish_deck(state: TableState, events: List[Dict]) -> None:
    """
    Refill an exhausted deck.

    The discard pile minus its top card is shuffled into the new deck. With
    nothing to fold back in, a fresh deck is minted instead.
    """
    if len(state.discard) > 1:
        top = state.discard.pop()
        state.deck = shuffle_deck(state.discard, state.rng) + state.deck
        state.discard = [top]
        events.append({'type': EVENT_DECK_RESHUFFLED, 'deck_count': len(state.deck)})
        state.log("Reshuffled the discard pile into the deck")
    else:
        logger.warning(f"Table {state.id}: discard pile too small to reshuffle, minting a fresh deck")
        state.deck = new_shuffled_deck(state) + state.deck
        events.append({'type': EVENT_DECK_REPLENISHED, 'deck_count': len(state.deck)})
        state.log("New cards added to the deck")


def draw_cards(state: TableState, count: int, events: List[Dict]) -> List[Card]:
    """
    Remove up to ``count`` cards from the top of the deck.

    Args:
        state: Table being drawn from (mutated)
        count: Number of cards wanted
        events: Event list that receives reshuffle notifications

    Returns:
        The drawn cards; fewer than ``count`` only if no recovery could supply them
    """
    drawn = []
    for _ in range(count):
        if not state.deck:
            replenish_deck(state, events)
        if not state.deck:
            break
        drawn.append(state.deck.pop())
    return drawn


def deal_cards(state: TableState, events: List[Dict]) -> None:
    """Deal ``hand_size`` cards to every seated player, round-robin."""
    for _ in range(state.rule_config.hand_size):
        for player in state.players:
            player.hand.extend(draw_cards(state, 1, events))


def reveal_starting_card(state: TableState) -> Optional[Card]:
    """
    Turn over the first non-power card as the opening discard.

    Power cards are put back at the bottom of the deck. Returns None when the
    deck holds no non-power card at all.
    """
    for _ in range(len(state.deck)):
        card = state.deck.pop()
        if not is_power_rank(card.rank):
            state.discard.append(card)
            return card
        state.deck.insert(0, card)
    return None


def validate_deck_integrity(state: TableState) -> bool:
    """
    Validate that all cards are accounted for and no identity is duplicated.

    Args:
        state: Table state to validate

    Returns:
        True if every card is in exactly one place and the total is a full deck
    """
    all_cards = list(state.deck) + list(state.discard)
    for player in state.players:
        all_cards.extend(player.hand)

    ids = [card.id for card in all_cards]
    return len(ids) == len(set(ids)) and len(ids) == state.rule_config.get_deck_size()
