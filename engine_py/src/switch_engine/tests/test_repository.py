"""
Test the match repository.
"""

import pytest

from switch_engine.errors import MATCH_EXISTS, MATCH_NOT_FOUND, ErrorCode, GameError
from switch_engine.intents import DeclareLastIntent, DrawIntent
from switch_engine.repository import MatchRepository

ROSTER = [{"id": "alice", "name": "Alice"}, {"id": "bob", "name": "Bob"}]


@pytest.fixture
def repository():
    return MatchRepository()


def test_create_and_get(repository):
    state = repository.create(ROSTER, seed=1, match_id="m1")

    assert "m1" in repository
    assert len(repository) == 1
    assert repository.get("m1") is state
    assert repository.list_ids() == ["m1"]

    with pytest.raises(GameError) as exc:
        repository.create(ROSTER, match_id="m1")
    assert exc.value.code == MATCH_EXISTS


def test_remove(repository):
    repository.create(ROSTER, match_id="m1")
    assert repository.remove("m1") is not None
    assert repository.get("m1") is None
    assert repository.remove("m1") is None


def test_unknown_match(repository):
    with pytest.raises(GameError) as exc:
        repository.apply("missing", "alice", DrawIntent())
    assert exc.value.code == MATCH_NOT_FOUND


def test_apply_stores_accepted_state(repository):
    before = repository.create(ROSTER, seed=2, match_id="m1")

    result = repository.apply("m1", "alice", DrawIntent())
    assert result.success
    assert repository.get("m1") is result.state
    assert repository.get("m1").version == before.version + 1
    assert repository.get("m1").current_player.id == "bob"
    # the stored state is a new object; the previous one is untouched
    assert len(before.get_player("alice").hand) == 7


def test_rejected_intent_keeps_state(repository):
    before = repository.create(ROSTER, seed=2, match_id="m1")

    result = repository.apply("m1", "bob", DeclareLastIntent())
    assert not result.success
    assert result.error_code == ErrorCode.NOT_YOUR_TURN
    assert repository.get("m1") is before


def test_matches_are_independent(repository):
    repository.create(ROSTER, seed=3, match_id="m1")
    other = repository.create(ROSTER, seed=3, match_id="m2")

    repository.apply("m1", "alice", DrawIntent())
    assert repository.get("m2") is other
    assert repository.get("m2").version == 0


def test_player_left(repository):
    repository.create(ROSTER, seed=4, match_id="m1")

    result = repository.player_left("m1", "bob")
    assert result.success
    stored = repository.get("m1")
    assert stored.abandoned
    assert stored.winner is None

    again = repository.player_left("m1", "alice")
    assert again.error_code == ErrorCode.MATCH_ENDED


def test_unknown_match_leaves_no_lock(repository):
    for i in range(10):
        with pytest.raises(GameError):
            repository.apply(f"missing{i}", "alice", DrawIntent())
        with pytest.raises(GameError):
            repository.player_left(f"missing{i}", "alice")
    assert len(repository.match_locks) == 0
