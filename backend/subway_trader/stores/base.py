"""Store contract shared by every persistence backend.

A store answers the ranking queries the leaderboard needs and persists
players and their economy snapshots. Absence is returned as ``None``; driver
failures are raised as :class:`~subway_trader.errors.StoreUnavailable`.

Ordering rules every backend follows:

- ``top_one``/``top``: highest score first, ties by ascending username
- ``above``: ascending score, ties by ascending username
- ``below``: descending score, ties by ascending username
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import List, Optional

from flask_login import UserMixin

from subway_trader.services.economy import EconomySnapshot


@dataclass(frozen=True)
class ScoreEntry:
    username: str
    high_score: int

    def to_dict(self):
        return {'username': self.username, 'highScore': self.high_score}


@dataclass
class PlayerRecord(UserMixin):
    username: str
    password_hash: str
    high_score: int = 0

    def get_id(self):
        return self.username

    def score_entry(self) -> ScoreEntry:
        return ScoreEntry(self.username, self.high_score)

    def to_dict(self):
        return {'username': self.username, 'highScore': self.high_score}


class RankingStore(ABC):

    # ---- ranking queries ----

    @abstractmethod
    def top_one(self) -> Optional[ScoreEntry]:
        ...

    @abstractmethod
    def top(self, limit: int) -> List[ScoreEntry]:
        ...

    @abstractmethod
    def above(self, target: int, limit: int) -> List[ScoreEntry]:
        """Entries scoring strictly more than ``target``, closest first."""

    @abstractmethod
    def below(self, target: int, limit: int) -> List[ScoreEntry]:
        """Entries scoring strictly less than ``target``, closest first."""

    def by_username(self, name: str) -> Optional[ScoreEntry]:
        player = self.get_player(name)
        return player.score_entry() if player else None

    # ---- persistence gateway ----

    @abstractmethod
    def get_player(self, username: str) -> Optional[PlayerRecord]:
        ...

    @abstractmethod
    def create_player(self, username: str, password_hash: str) -> PlayerRecord:
        ...

    @abstractmethod
    def update_high_score(self, username: str, candidate: int) -> bool:
        """Raise the stored high score to ``candidate`` if strictly greater.

        The comparison and the write are atomic. Returns True when the score
        changed.
        """

    @abstractmethod
    def save_economy_snapshot(self, username: str, snapshot: EconomySnapshot) -> None:
        ...

    @abstractmethod
    def load_economy_snapshot(self, username: str) -> Optional[EconomySnapshot]:
        ...

    @abstractmethod
    def reset(self) -> None:
        """Drop every player and snapshot."""
