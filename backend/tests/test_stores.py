import logging
import threading
from datetime import datetime

import pytest
from sqlalchemy.exc import OperationalError

from conftest import TestConfig
from subway_trader import create_app, db
from subway_trader.errors import NotFound, StoreUnavailable, ValidationError
from subway_trader.services.economy import EconomySnapshot
from subway_trader.stores import build_store
from subway_trader.stores.base import RankingStore, ScoreEntry
from subway_trader.stores.memory import MemoryStore
from subway_trader.stores.sql import SqlStore


@pytest.fixture(params=['memory', 'sql'])
def any_store(request):
    app = request.getfixturevalue('memory_app' if request.param == 'memory' else 'flask_app')
    with app.app_context():
        yield app.extensions['ranking_store']


def seed(store, scores):
    for name, score in scores.items():
        store.create_player(name, 'hash')
        store.update_high_score(name, score)


def test_build_store_selects_backend():
    assert isinstance(build_store('memory'), MemoryStore)
    assert isinstance(build_store('sql'), SqlStore)
    with pytest.raises(ValueError):
        build_store('mongo')


def test_new_player_starts_at_zero(any_store):
    player = any_store.create_player('alice', 'hash')
    assert player.username == 'alice'
    assert player.high_score == 0
    assert any_store.get_player('alice').password_hash == 'hash'
    assert any_store.get_player('Alice') is None


def test_duplicate_username_rejected(any_store):
    any_store.create_player('alice', 'hash')
    with pytest.raises(ValidationError):
        any_store.create_player('alice', 'other')


def test_high_score_only_increases(any_store):
    any_store.create_player('alice', 'hash')
    assert any_store.update_high_score('alice', 60) is True
    assert any_store.update_high_score('alice', 50) is False
    assert any_store.update_high_score('alice', 60) is False
    assert any_store.get_player('alice').high_score == 60
    assert any_store.update_high_score('nobody', 10) is False


def test_range_queries(any_store):
    seed(any_store, {'a': 10, 'b': 20, 'c': 20, 'd': 30, 'e': 40})
    assert any_store.top_one() == ScoreEntry('e', 40)
    assert any_store.top(3) == [ScoreEntry('e', 40), ScoreEntry('d', 30), ScoreEntry('b', 20)]
    assert any_store.above(15, 3) == [ScoreEntry('b', 20), ScoreEntry('c', 20), ScoreEntry('d', 30)]
    assert any_store.below(30, 5) == [ScoreEntry('b', 20), ScoreEntry('c', 20), ScoreEntry('a', 10)]
    assert any_store.above(40, 5) == []
    assert any_store.by_username('c') == ScoreEntry('c', 20)
    assert any_store.by_username('zz') is None


def test_empty_store_has_no_top(any_store):
    assert any_store.top_one() is None
    assert any_store.top(10) == []


def test_snapshot_round_trip(any_store):
    any_store.create_player('alice', 'hash')
    assert any_store.load_economy_snapshot('alice') is None
    snapshot = EconomySnapshot(
        money=742.5,
        inventory={'coffee': 3},
        item_costs={'coffee': 4.25},
        last_visited_station='Union',
        current_time=datetime(2026, 10, 1, 23, 15),
    )
    any_store.save_economy_snapshot('alice', snapshot)
    assert any_store.load_economy_snapshot('alice') == snapshot

    snapshot.money = 10
    any_store.save_economy_snapshot('alice', snapshot)
    assert any_store.load_economy_snapshot('alice').money == 10


def test_snapshot_for_unknown_player(any_store):
    with pytest.raises(NotFound):
        any_store.save_economy_snapshot('ghost', EconomySnapshot(money=1))


def _race(store, username, scores, app=None):
    """Submit ``scores`` for ``username`` from parallel threads."""
    barrier = threading.Barrier(len(scores))
    errors = []

    def submit(score):
        try:
            if app is None:
                barrier.wait()
                store.update_high_score(username, score)
                return
            with app.app_context():
                barrier.wait()
                store.update_high_score(username, score)
        except Exception as exc:
            errors.append(exc)

    threads = [threading.Thread(target=submit, args=(s,)) for s in scores]
    for t in threads:
        t.start()
    for t in threads:
        t.join()
    assert errors == []


def test_concurrent_submissions_keep_greatest():
    for _ in range(20):
        store = MemoryStore()
        store.create_player('new', 'hash')
        _race(store, 'new', (60, 50))
        assert store.get_player('new').high_score == 60


def test_sql_concurrent_submissions_keep_greatest(tmp_path):
    # A file database so each thread gets its own connection
    config = type('FileConfig', (TestConfig,), {
        'SQLALCHEMY_DATABASE_URI': f"sqlite:///{tmp_path / 'race.db'}",
        'SQLALCHEMY_ENGINE_OPTIONS': {'connect_args': {'check_same_thread': False, 'timeout': 30}},
    })
    app = create_app(config)
    store = app.extensions['ranking_store']
    with app.app_context():
        db.create_all()
    try:
        for i in range(10):
            name = f'new{i}'
            with app.app_context():
                store.create_player(name, 'hash')
            _race(store, name, (50, 60) if i % 2 else (60, 50), app=app)
            with app.app_context():
                assert store.get_player(name).high_score == 60
    finally:
        with app.app_context():
            db.session.remove()
            db.drop_all()
            db.engine.dispose()


def test_sql_errors_become_store_unavailable(flask_app, store, monkeypatch, caplog):
    store.create_player('alice', 'hash')

    def boom(*args, **kwargs):
        raise OperationalError('UPDATE player', {}, Exception('database is locked'))

    monkeypatch.setattr(type(db.session), 'execute', boom)
    with caplog.at_level(logging.ERROR), pytest.raises(StoreUnavailable):
        store.update_high_score('alice', 10)
    assert '[store-error] op=update_high_score OperationalError' in caplog.text


def test_store_without_reset_cannot_be_built():
    methods = {
        name: (lambda self, *args: None)
        for name in ('top_one', 'top', 'above', 'below', 'get_player', 'create_player',
                     'update_high_score', 'save_economy_snapshot', 'load_economy_snapshot')
    }
    Partial = type('Partial', (RankingStore,), methods)
    with pytest.raises(TypeError, match='reset'):
        Partial()
