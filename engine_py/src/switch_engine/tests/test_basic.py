"""
Basic tests for the Switch game engine.
"""

import random

import pytest
from pydantic import ValidationError

from switch_engine.constants import DECK_SIZE, PHASE_PLAYING, RANKS, SUITS, is_power_rank
from switch_engine.engine import create_match, draw_card
from switch_engine.errors import INVALID_PLAYER_COUNT, DUPLICATE_PLAYER, GameError
from switch_engine.intents import ChooseSuitIntent, DrawIntent, PlayIntent, parse_intent
from switch_engine.rules import create_rules, default_rules
from switch_engine.serialization import project_view
from switch_engine.shuffle import create_deck, shuffle_deck, validate_deck_integrity

ROSTER = [{"id": "alice", "name": "Alice"}, {"id": "bob", "name": "Bob"}, {"id": "carol", "name": "Carol"}]


def test_deck_creation():
    """Every rank and suit appears once, each with its own identity."""
    deck = create_deck()
    assert len(deck) == DECK_SIZE
    assert len({card.id for card in deck}) == DECK_SIZE
    assert {(card.rank, card.suit) for card in deck} == {(r, s) for r in RANKS for s in SUITS}


def test_shuffle_is_seeded_and_copies():
    """Shuffling with the same seed gives the same order and leaves the input alone."""
    deck = create_deck()
    first = shuffle_deck(deck, random.Random(42))
    second = shuffle_deck(deck, random.Random(42))

    assert [c.id for c in first] == [c.id for c in second]
    assert [c.id for c in deck] == [f"c{i}" for i in range(DECK_SIZE)]
    assert sorted(c.id for c in first) == sorted(c.id for c in deck)


def test_create_match():
    """Dealing gives seven cards each and a non-power starting card."""
    state = create_match(ROSTER, seed=1)

    assert state.phase == PHASE_PLAYING
    assert state.turn_index == 0
    assert state.direction == 1
    assert [p.id for p in state.players] == ["alice", "bob", "carol"]
    for player in state.players:
        assert len(player.hand) == default_rules.hand_size
        assert not player.last_called

    assert len(state.discard) == 1
    assert not is_power_rank(state.top_card.rank)
    assert state.active_suit == state.top_card.suit
    assert state.card_count() == DECK_SIZE
    assert validate_deck_integrity(state)


def test_create_match_is_deterministic_with_seed():
    """The same seed deals the same hands."""
    a = create_match(ROSTER, seed=99)
    b = create_match(ROSTER, seed=99)
    assert [c.id for c in a.players[0].hand] == [c.id for c in b.players[0].hand]
    assert a.top_card == b.top_card


@pytest.mark.parametrize("count", [1, 5])
def test_create_match_player_count(count):
    """Two to four players only."""
    roster = [{"id": f"p{i}", "name": f"P{i}"} for i in range(count)]
    with pytest.raises(GameError) as exc:
        create_match(roster)
    assert exc.value.code == INVALID_PLAYER_COUNT


def test_create_match_duplicate_player():
    with pytest.raises(GameError) as exc:
        create_match([{"id": "x", "name": "A"}, {"id": "x", "name": "B"}])
    assert exc.value.code == DUPLICATE_PLAYER


def test_custom_hand_size():
    rules = create_rules(hand_size=5)
    state = create_match(ROSTER[:2], rules=rules, seed=3)
    assert all(len(p.hand) == 5 for p in state.players)
    assert state.card_count() == DECK_SIZE


def test_rule_config_validation():
    """max_players may not drop below min_players."""
    with pytest.raises(ValidationError):
        create_rules(min_players=4, max_players=3)
    with pytest.raises(ValidationError):
        create_rules(finish_penalty=3)


def test_project_view_hides_other_hands():
    """Viewers see their own cards and only counts for everyone else."""
    state = create_match(ROSTER, seed=5)

    view = project_view(state, "alice")
    assert [c["id"] for c in view["hand"]] == [c.id for c in state.players[0].hand]
    assert view["turn"] == "alice"
    assert view["top_card"]["id"] == state.top_card.id
    assert view["deck_count"] == len(state.deck)
    for entry in view["players"]:
        assert "hand" not in entry
        assert entry["count"] == 7

    bob_view = project_view(state, "bob")
    assert [c["id"] for c in bob_view["hand"]] == [c.id for c in state.players[1].hand]
    assert bob_view["playable"] == []  # not bob's turn

    spectator = project_view(state)
    assert spectator["hand"] is None


def test_project_view_after_draw():
    """Counts follow the hands; nobody else sees the drawn card."""
    state = create_match(ROSTER[:2], seed=11)
    result = draw_card(state, "alice")
    assert result.success

    view = project_view(result.state, "bob")
    counts = {p["id"]: p["count"] for p in view["players"]}
    assert counts == {"alice": 8, "bob": 7}
    assert all("id" not in event for event in result.events if event["type"] == "cards_drawn")


def test_parse_intent():
    """Intents are a closed set, validated before reaching the engine."""
    play = parse_intent({"type": "play", "card_ids": ["c1", "c2"], "suit_choice": "♥"})
    assert isinstance(play, PlayIntent)
    assert play.card_ids == ["c1", "c2"]
    assert play.suit_choice == "H"

    assert isinstance(parse_intent({"type": "draw"}), DrawIntent)
    assert parse_intent({"type": "choose_suit", "suit": "s"}) == ChooseSuitIntent(suit="S")

    with pytest.raises(ValueError):
        parse_intent({"type": "shuffle"})
    with pytest.raises(ValueError):
        parse_intent({"type": "play", "card_ids": []})
    with pytest.raises(ValueError):
        parse_intent({})


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
