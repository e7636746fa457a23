"""Leaderboard window around a target score.

A window is the global top entry plus the players closest to a target score:
up to ``window`` entries above it, up to ``window`` below it, and the
requesting player wherever they rank. The store is queried with bounded
range reads, so the response size does not grow with the leaderboard.
"""

import re
from dataclasses import dataclass, field
from typing import Any, List, Optional, Sequence

from subway_trader.errors import ValidationError
from subway_trader.stores.base import RankingStore, ScoreEntry

DEFAULT_WINDOW = 5
# Largest integer JSON clients read exactly; fits a BIGINT column
MAX_SCORE = 2 ** 53 - 1

_INTEGER_RE = re.compile(r"[+-]?[0-9]+")


@dataclass
class RankingWindow:
    top_score: Optional[ScoreEntry] = None
    surrounding: List[ScoreEntry] = field(default_factory=list)

    def to_dict(self):
        return {
            'topScore': self.top_score.to_dict() if self.top_score else None,
            'surrounding': [e.to_dict() for e in self.surrounding],
        }


def _integer(raw: Any) -> Optional[int]:
    if isinstance(raw, bool):
        return None
    if isinstance(raw, int):
        return raw
    if isinstance(raw, str) and _INTEGER_RE.fullmatch(raw.strip()):
        return int(raw.strip())
    return None


def parse_target_score(raw: Any) -> Optional[int]:
    """Return ``raw`` as an int, or None when it is missing or not an integer.

    Targets outside the storable range are pulled to just past it, which
    keeps the same entries above and below.
    """
    value = _integer(raw)
    if value is None:
        return None
    return max(-(MAX_SCORE + 1), min(value, MAX_SCORE + 1))


def parse_submitted_score(raw: Any) -> int:
    """Validate a score submission; unlike a target score, it is required."""
    value = _integer(raw)
    if value is None or value < 0:
        raise ValidationError('score must be a non-negative integer')
    if value > MAX_SCORE:
        raise ValidationError(f'score must not exceed {MAX_SCORE}')
    return value


def build_window(
    top_score: Optional[ScoreEntry],
    above: Sequence[ScoreEntry],
    self_entry: Optional[ScoreEntry],
    below: Sequence[ScoreEntry],
) -> RankingWindow:
    """Merge the above/self/below reads into one ranked window.

    ``above`` arrives ascending (closest to the target first) and ``below``
    descending. Usernames keep their first occurrence in the merge order
    above -> self -> below, then the result is stably sorted by descending
    score.
    """
    candidates = list(reversed(above))
    if self_entry is not None:
        candidates.append(self_entry)
    candidates.extend(below)

    seen = set()
    unique = []
    for entry in candidates:
        if entry.username in seen:
            continue
        seen.add(entry.username)
        unique.append(entry)

    unique.sort(key=lambda e: e.high_score, reverse=True)
    return RankingWindow(top_score=top_score, surrounding=unique)


def resolve(
    store: RankingStore,
    target_score: Any = None,
    requesting_username: Optional[str] = None,
    window: int = DEFAULT_WINDOW,
) -> RankingWindow:
    """Compute the ranking window for ``target_score``.

    Store failures propagate as StoreUnavailable; nothing is retried and no
    partial window is returned.
    """
    top_score = store.top_one()
    target = parse_target_score(target_score)
    if target is None:
        return RankingWindow(top_score=top_score, surrounding=[])

    above = store.above(target, window)
    below = store.below(target, window)
    self_entry = store.by_username(requesting_username) if requesting_username else None
    return build_window(top_score, above, self_entry, below)
