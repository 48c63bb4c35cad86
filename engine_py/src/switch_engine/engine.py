"""Action processor: match setup and every player intent"""

import copy
import logging
import random
import uuid
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence

from .constants import (
    EVENT_CARDS_DRAWN, EVENT_CARDS_PLAYED, EVENT_DIRTY_FINISH, EVENT_LAST_DECLARED,
    EVENT_MATCH_ABANDONED, EVENT_MATCH_WON, EVENT_POWER_FINISH, EVENT_SUIT_CHOSEN,
    EVENT_TURN_SKIPPED, PHASE_ENDED, PHASE_PLAYING, SUIT_SYMBOLS, is_power_rank
)
from .effects import process_effect, triggers_effect
from .errors import DUPLICATE_PLAYER, INVALID_PLAYER_COUNT, ErrorCode, raise_error
from .intents import ChooseSuitIntent, DeclareLastIntent, DrawIntent, Intent, PlayIntent
from .models import Card, Player, TableState
from .rules import RuleConfig, default_rules
from .serialization import serialize_card
from .shuffle import deal_cards, draw_cards, new_shuffled_deck, reveal_starting_card
from .turns import advance_turn
from .validate import ValidationResult, validate_play, validate_suit_choice, validate_turn

logger = logging.getLogger(__name__)


@dataclass
class ActionResult:
    """Outcome of one intent: the accepted state and its events, or a rejection."""
    success: bool
    state: TableState
    events: List[Dict] = field(default_factory=list)
    error_code: Optional[ErrorCode] = None
    error_message: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.success

    @property
    def rejection_reason(self) -> Optional[ErrorCode]:
        return self.error_code

    @classmethod
    def accepted(cls, state: TableState, events: List[Dict]) -> 'ActionResult':
        state.increment_version()
        return cls(success=True, state=state, events=events)

    @classmethod
    def rejected(cls, state: TableState, error_code: ErrorCode, error_message: str) -> 'ActionResult':
        logger.debug(f"Table {state.id}: rejected [{error_code.value}] {error_message}")
        return cls(success=False, state=state, error_code=error_code, error_message=error_message)

    @classmethod
    def from_validation(cls, state: TableState, validation: ValidationResult) -> 'ActionResult':
        return cls.rejected(state, validation.error_code, validation.error_message)


def create_match(
    players: Sequence[Dict[str, str]],
    rules: Optional[RuleConfig] = None,
    seed: Optional[int] = None,
    match_id: Optional[str] = None
) -> TableState:
    """
    Seat the roster, deal and turn over a non-power starting card.

    Args:
        players: Ordered roster of {"id": ..., "name": ...}; the first seat acts first
        rules: Rule configuration, defaults to the standard rules
        seed: Optional seed for deterministic shuffling
        match_id: Optional table id

    Returns:
        A table in the playing phase

    Raises:
        GameError: If the roster size is not allowed or player ids repeat
    """
    rules = rules or default_rules

    if not rules.validate_player_count(len(players)):
        raise_error(
            INVALID_PLAYER_COUNT,
            f"Need {rules.min_players}-{rules.max_players} players (got {len(players)})"
        )

    player_ids = [p['id'] for p in players]
    if len(set(player_ids)) != len(player_ids):
        raise_error(DUPLICATE_PLAYER, "Player ids must be unique")

    state = TableState(
        id=match_id or str(uuid.uuid4())[:8],
        rule_config=rules,
        rng=random.Random(seed)
    )
    state.players = [
        Player(id=p['id'], name=p.get('name') or f"Player {seat + 1}", seat=seat)
        for seat, p in enumerate(players)
    ]

    events: List[Dict] = []
    while True:
        state.cards_minted = 0
        state.deck = new_shuffled_deck(state)
        state.discard = []
        for player in state.players:
            player.hand = []
        deal_cards(state, events)
        first = reveal_starting_card(state)
        if first is not None:
            break
        # Only power cards left after the deal; deal again
        logger.warning(f"Table {state.id}: no non-power starting card, redealing")

    state.active_suit = first.suit
    state.turn_index = 0
    state.phase = PHASE_PLAYING
    state.log(f"Top card is {first}")

    logger.info(
        f"Table {state.id}: match started with {len(state.players)} players, "
        f"top card {first}"
    )
    return state


def apply_intent(state: TableState, player_id: str, intent: Intent) -> ActionResult:
    """
    Apply one player intent.

    Every intent is all-or-nothing: on rejection the returned result carries
    the original, untouched state.

    Args:
        state: Current table state
        player_id: Player the intent came from
        intent: Parsed intent model

    Returns:
        ActionResult with the new state and events, or a rejection reason
    """
    if isinstance(intent, PlayIntent):
        return play_cards(state, player_id, intent.card_ids, intent.suit_choice)
    elif isinstance(intent, DrawIntent):
        return draw_card(state, player_id)
    elif isinstance(intent, DeclareLastIntent):
        return declare_last(state, player_id)
    elif isinstance(intent, ChooseSuitIntent):
        return choose_suit(state, player_id, intent.suit)
    else:
        raise ValueError(f"Unhandled intent type: {type(intent)}")


def play_cards(
    state: TableState,
    player_id: str,
    card_ids: List[str],
    suit_choice: Optional[str] = None
) -> ActionResult:
    """Play one or more cards from a player's hand, in the given order."""
    validation = validate_play(state, player_id, card_ids, suit_choice)
    if not validation.valid:
        return ActionResult.from_validation(state, validation)

    new_state = copy.deepcopy(state)
    events: List[Dict] = []
    player = new_state.get_player(player_id)
    cards = [player.find_card(card_id) for card_id in card_ids]
    is_set = validation.pattern['is_set']

    for card in cards:
        player.hand.remove(card)

    events.append({
        'type': EVENT_CARDS_PLAYED,
        'player_id': player_id,
        'cards': [serialize_card(card) for card in cards]
    })

    for i, card in enumerate(cards):
        new_state.discard.append(card)
        if triggers_effect(card, i == len(cards) - 1, is_set):
            process_effect(new_state, card, player_id, events, suit_choice)

    terminal = cards[-1]
    if terminal.rank != 'A':
        new_state.active_suit = terminal.suit

    if new_state.pending_draw2 > 0 and new_state.pending_draw_j > 0:
        return ActionResult.rejected(
            state,
            ErrorCode.ILLEGAL_PLAY,
            "A play cannot start a second kind of draw attack"
        )

    new_state.log(f"{player.name} played {', '.join(str(card) for card in cards)}")

    if not player.hand:
        _resolve_finish(new_state, player, terminal, events)
    elif new_state.awaiting_suit_choice_by is None:
        advance_turn(new_state, events)

    logger.info(f"Table {state.id}: {player.name} played {[c.code for c in cards]}")
    return ActionResult.accepted(new_state, events)


def _resolve_finish(state: TableState, player: Player, terminal: Card, events: List[Dict]) -> None:
    """Apply the finish rule to a player who just emptied their hand."""
    if not player.last_called:
        reason = EVENT_DIRTY_FINISH
        state.log(f"{player.name} forgot LAST! Draw {state.rule_config.finish_penalty}")
    elif is_power_rank(terminal.rank):
        reason = EVENT_POWER_FINISH
        state.log(f"Can't end on a power card! {player.name} picks up {state.rule_config.finish_penalty}")
    else:
        state.phase = PHASE_ENDED
        state.winner = player.id
        events.append({'type': EVENT_MATCH_WON, 'player_id': player.id})
        state.log(f"{player.name} wins!")
        logger.info(f"Table {state.id}: {player.name} won")
        return

    drawn = draw_cards(state, state.rule_config.finish_penalty, events)
    player.hand.extend(drawn)
    player.last_called = False
    state.extra_turn_granted = False

    # A penalised Ace keeps its own suit instead of waiting for a choice
    if state.awaiting_suit_choice_by == player.id:
        state.awaiting_suit_choice_by = None
        state.active_suit = terminal.suit

    events.append({'type': reason, 'player_id': player.id, 'penalty': len(drawn)})
    events.append({'type': EVENT_CARDS_DRAWN, 'player_id': player.id, 'count': len(drawn)})
    advance_turn(state, events)


def draw_card(state: TableState, player_id: str) -> ActionResult:
    """
    Draw for the turn.

    A pending skip is absorbed by forfeiting the turn, a pending draw
    attack by drawing its total, otherwise one card is drawn.
    """
    validation = validate_turn(state, player_id)
    if not validation.valid:
        return ActionResult.from_validation(state, validation)

    new_state = copy.deepcopy(state)
    events: List[Dict] = []
    player = new_state.get_player(player_id)

    if new_state.pending_skip > 0:
        new_state.pending_skip -= 1
        events.append({'type': EVENT_TURN_SKIPPED, 'player_id': player_id, 'forced': False})
        new_state.log(f"{player.name} is skipped!")
    else:
        if new_state.pending_draw2 > 0:
            count = new_state.pending_draw2
            new_state.pending_draw2 = 0
            new_state.log(f"{player.name} draws {count} (2 stack)")
        elif new_state.pending_draw_j > 0:
            count = new_state.pending_draw_j
            new_state.pending_draw_j = 0
            new_state.log(f"{player.name} draws {count} (Jack stack)")
        else:
            count = 1
            new_state.log(f"{player.name} draws 1")

        drawn = draw_cards(new_state, count, events)
        player.hand.extend(drawn)
        events.append({'type': EVENT_CARDS_DRAWN, 'player_id': player_id, 'count': len(drawn)})

    player.last_called = False
    advance_turn(new_state, events)
    return ActionResult.accepted(new_state, events)


def declare_last(state: TableState, player_id: str) -> ActionResult:
    """Declare LAST. Does not use up the turn."""
    validation = validate_turn(state, player_id)
    if not validation.valid:
        return ActionResult.from_validation(state, validation)

    new_state = copy.deepcopy(state)
    player = new_state.get_player(player_id)
    player.last_called = True
    new_state.log(f"{player.name} shouts LAST!")
    return ActionResult.accepted(new_state, [{'type': EVENT_LAST_DECLARED, 'player_id': player_id}])


def choose_suit(state: TableState, player_id: str, suit: str) -> ActionResult:
    """Name the active suit after a terminal Ace, then pass the turn."""
    validation = validate_suit_choice(state, player_id, suit)
    if not validation.valid:
        return ActionResult.from_validation(state, validation)

    new_state = copy.deepcopy(state)
    events: List[Dict] = [{'type': EVENT_SUIT_CHOSEN, 'player_id': player_id, 'suit': suit}]
    new_state.active_suit = suit
    new_state.awaiting_suit_choice_by = None
    new_state.log(f"Suit changed to {SUIT_SYMBOLS[suit]}")
    advance_turn(new_state, events)
    return ActionResult.accepted(new_state, events)


def remove_player(state: TableState, player_id: str) -> ActionResult:
    """
    Abandon the match because a seated player left for good.

    The match ends with no winner; play never continues with fewer seats.
    """
    if state.phase == PHASE_ENDED:
        return ActionResult.rejected(state, ErrorCode.MATCH_ENDED, "The match is over")

    if state.get_player(player_id) is None:
        return ActionResult.rejected(state, ErrorCode.UNKNOWN_PLAYER, "Player is not seated at this table")

    new_state = copy.deepcopy(state)
    player = new_state.get_player(player_id)
    player.connected = False
    new_state.phase = PHASE_ENDED
    new_state.winner = None
    new_state.abandoned = True
    new_state.abandoned_by = player_id
    new_state.awaiting_suit_choice_by = None
    new_state.log(f"{player.name} left. Game ended.")

    logger.info(f"Table {state.id}: abandoned by {player.name}")
    return ActionResult.accepted(
        new_state,
        [{'type': EVENT_MATCH_ABANDONED, 'player_id': player_id}]
    )
