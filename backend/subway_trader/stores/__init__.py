"""Persistence backends behind the :class:`RankingStore` contract.

One backend is chosen per deployment via ``STORE_BACKEND`` and kept on
``app.extensions['ranking_store']``.
"""

from flask import current_app

from .base import PlayerRecord, RankingStore, ScoreEntry


def build_store(backend: str) -> RankingStore:
    if backend == 'memory':
        from .memory import MemoryStore
        return MemoryStore()
    if backend == 'sql':
        from .sql import SqlStore
        return SqlStore()
    raise ValueError(f'Unknown STORE_BACKEND: {backend!r}')


def get_store() -> RankingStore:
    return current_app.extensions['ranking_store']


__all__ = ['PlayerRecord', 'RankingStore', 'ScoreEntry', 'build_store', 'get_store']
