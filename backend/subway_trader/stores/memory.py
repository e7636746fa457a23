"""In-memory store. State lives for the life of the process."""

import copy
import threading

from subway_trader.errors import NotFound, ValidationError
from subway_trader.stores.base import PlayerRecord, RankingStore


class MemoryStore(RankingStore):
    def __init__(self):
        self._lock = threading.Lock()
        self._players: dict[str, PlayerRecord] = {}
        self._snapshots = {}

    def _entries(self):
        return [p.score_entry() for p in self._players.values()]

    def top_one(self):
        top = self.top(1)
        return top[0] if top else None

    def top(self, limit):
        with self._lock:
            vals = self._entries()
        vals.sort(key=lambda e: (-e.high_score, e.username))
        return vals[: int(limit)]

    def above(self, target, limit):
        with self._lock:
            vals = [e for e in self._entries() if e.high_score > target]
        vals.sort(key=lambda e: (e.high_score, e.username))
        return vals[: int(limit)]

    def below(self, target, limit):
        with self._lock:
            vals = [e for e in self._entries() if e.high_score < target]
        vals.sort(key=lambda e: (-e.high_score, e.username))
        return vals[: int(limit)]

    def get_player(self, username):
        with self._lock:
            player = self._players.get(username)
            return copy.copy(player) if player else None

    def create_player(self, username, password_hash):
        with self._lock:
            if username in self._players:
                raise ValidationError(f'Username already exists: {username}', error='Username already exists')
            player = PlayerRecord(username=username, password_hash=password_hash, high_score=0)
            self._players[username] = player
            return copy.copy(player)

    def update_high_score(self, username, candidate):
        with self._lock:
            player = self._players.get(username)
            if player is None or candidate <= player.high_score:
                return False
            player.high_score = int(candidate)
            return True

    def save_economy_snapshot(self, username, snapshot):
        with self._lock:
            if username not in self._players:
                raise NotFound(f'Unknown player: {username}')
            self._snapshots[username] = copy.deepcopy(snapshot)

    def load_economy_snapshot(self, username):
        with self._lock:
            snapshot = self._snapshots.get(username)
            return copy.deepcopy(snapshot) if snapshot else None

    def reset(self):
        with self._lock:
            self._players.clear()
            self._snapshots.clear()
