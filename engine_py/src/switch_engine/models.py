"""Game models and data structures"""

import random
from dataclasses import dataclass, field
from typing import List, Optional

from .constants import CLOCKWISE, PHASE_LOBBY, format_card
from .rules import RuleConfig, default_rules


@dataclass(frozen=True)
class Card:
    rank: str
    suit: str
    id: str  # unique for the lifetime of the match

    @property
    def code(self) -> str:
        return f"{self.rank}{self.suit}"

    def __str__(self) -> str:
        return format_card(self.rank, self.suit)


@dataclass
class Player:
    id: str
    name: str
    seat: int
    hand: List[Card] = field(default_factory=list)
    last_called: bool = False
    connected: bool = True

    def find_card(self, card_id: str) -> Optional[Card]:
        return next((c for c in self.hand if c.id == card_id), None)

    def has_rank(self, rank: str) -> bool:
        return any(c.rank == rank for c in self.hand)


@dataclass
class TableState:
    id: str
    version: int = 0
    phase: str = PHASE_LOBBY  # lobby|playing|ended
    players: List[Player] = field(default_factory=list)  # seating order
    turn_index: int = 0
    direction: int = CLOCKWISE
    active_suit: Optional[str] = None
    pending_draw2: int = 0
    pending_draw_j: int = 0
    pending_skip: int = 0
    extra_turn_granted: bool = False
    awaiting_suit_choice_by: Optional[str] = None
    winner: Optional[str] = None
    abandoned: bool = False
    abandoned_by: Optional[str] = None
    deck: List[Card] = field(default_factory=list)  # top of deck is the last element
    discard: List[Card] = field(default_factory=list)  # top card is the last element
    cards_minted: int = 0
    game_log: List[str] = field(default_factory=list)
    rule_config: RuleConfig = field(default_factory=lambda: default_rules)
    rng: random.Random = field(default_factory=random.Random, repr=False)

    @property
    def top_card(self) -> Optional[Card]:
        return self.discard[-1] if self.discard else None

    @property
    def current_player(self) -> Optional[Player]:
        if not self.players:
            return None
        return self.players[self.turn_index]

    def get_player(self, player_id: str) -> Optional[Player]:
        return next((p for p in self.players if p.id == player_id), None)

    def card_count(self) -> int:
        return sum(len(p.hand) for p in self.players) + len(self.deck) + len(self.discard)

    def log(self, message: str):
        self.game_log.append(message)

    def increment_version(self):
        self.version += 1
