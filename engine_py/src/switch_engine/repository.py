"""Registry of live matches"""

import logging
import threading
from collections import defaultdict
from typing import Dict, List, Optional, Sequence

from .engine import ActionResult, apply_intent, create_match, remove_player
from .errors import MATCH_EXISTS, MATCH_NOT_FOUND, raise_error
from .intents import Intent
from .models import TableState
from .rules import RuleConfig

logger = logging.getLogger(__name__)


class MatchRepository:
    """
    Owns every running table, keyed by match id.

    Intents for one match are applied strictly one at a time; different
    matches share nothing and may be driven in parallel.
    """

    def __init__(self):
        self.matches: Dict[str, TableState] = {}
        self.match_locks = defaultdict(threading.Lock)

    def create(
        self,
        players: Sequence[Dict[str, str]],
        rules: Optional[RuleConfig] = None,
        seed: Optional[int] = None,
        match_id: Optional[str] = None
    ) -> TableState:
        if match_id is not None and match_id in self.matches:
            raise_error(MATCH_EXISTS, f"Match {match_id} already exists")

        state = create_match(players, rules=rules, seed=seed, match_id=match_id)
        with self.match_locks[state.id]:
            if state.id in self.matches:
                raise_error(MATCH_EXISTS, f"Match {state.id} already exists")
            self.matches[state.id] = state
        return state

    def get(self, match_id: str) -> Optional[TableState]:
        return self.matches.get(match_id)

    def remove(self, match_id: str) -> Optional[TableState]:
        with self.match_locks[match_id]:
            state = self.matches.pop(match_id, None)
        self.match_locks.pop(match_id, None)
        if state:
            logger.info(f"Match {match_id} removed")
        return state

    def list_ids(self) -> List[str]:
        return list(self.matches.keys())

    def __len__(self) -> int:
        return len(self.matches)

    def __contains__(self, match_id: str) -> bool:
        return match_id in self.matches

    def apply(self, match_id: str, player_id: str, intent: Intent) -> ActionResult:
        """Apply one intent and store the new state if it was accepted."""
        self._require(match_id)
        with self.match_locks[match_id]:
            state = self._require(match_id)
            result = apply_intent(state, player_id, intent)
            if result.success:
                self.matches[match_id] = result.state
            return result

    def player_left(self, match_id: str, player_id: str) -> ActionResult:
        """Abandonment hook for a player who left a running match for good."""
        self._require(match_id)
        with self.match_locks[match_id]:
            state = self._require(match_id)
            result = remove_player(state, player_id)
            if result.success:
                self.matches[match_id] = result.state
            return result

    def _require(self, match_id: str) -> TableState:
        state = self.matches.get(match_id)
        if state is None:
            raise_error(MATCH_NOT_FOUND, f"Match {match_id} not found")
        return state
