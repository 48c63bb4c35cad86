"""
Card matching logic: single-card playability and combo links.
"""

from typing import Optional, Sequence

from .constants import rank_value
from .models import Card


def can_start(card: Card, top: Optional[Card], active_suit: Optional[str]) -> bool:
    """
    Check if a card may be played on its own against the current top card.

    Aces are wild on entry; otherwise the card must follow the active suit
    or match the top card's rank.
    """
    if top is None:
        return True
    if card.rank == 'A':
        return True
    if card.suit == active_suit:
        return True
    return card.rank == top.rank


def is_adjacent_rank(rank_a: str, rank_b: str) -> bool:
    """Check if two ranks are one step apart (A=1 ... K=13, no wrap-around)."""
    return abs(rank_value(rank_a) - rank_value(rank_b)) == 1


def links(previous: Card, following: Card) -> bool:
    """
    Check if ``following`` may come straight after ``previous`` in one play.

    Cards link when they share a rank, or share a suit with adjacent ranks.
    """
    if previous.rank == following.rank:
        return True
    return previous.suit == following.suit and is_adjacent_rank(previous.rank, following.rank)


def chain_is_valid(cards: Sequence[Card]) -> bool:
    """Check that every consecutive pair in a multi-card play links."""
    return all(links(a, b) for a, b in zip(cards, cards[1:]))


def is_same_rank_set(cards: Sequence[Card]) -> bool:
    """Check if a play of two or more cards is all one rank."""
    return len(cards) > 1 and all(c.rank == cards[0].rank for c in cards)

