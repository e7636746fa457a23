"""SQLAlchemy persistence for players, scores and game state."""

import functools
import json

from flask import current_app
from sqlalchemy import update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from subway_trader import db
from subway_trader.errors import NotFound, StoreUnavailable, ValidationError
from subway_trader.models import GameState, Player
from subway_trader.services.economy import EconomySnapshot
from subway_trader.stores.base import PlayerRecord, RankingStore, ScoreEntry


def _guarded(fn):
    """Roll back and re-raise driver errors as StoreUnavailable."""
    @functools.wraps(fn)
    def wrapper(*args, **kwargs):
        try:
            return fn(*args, **kwargs)
        except SQLAlchemyError as exc:
            db.session.rollback()
            current_app.logger.error(f"[store-error] op={fn.__name__} {exc.__class__.__name__}: {exc}")
            raise StoreUnavailable(f'{fn.__name__} failed: {exc.__class__.__name__}') from exc
    return wrapper


def _entry(player: Player) -> ScoreEntry:
    return ScoreEntry(player.username, player.high_score)


def _record(player: Player) -> PlayerRecord:
    return PlayerRecord(username=player.username, password_hash=player.password_hash, high_score=player.high_score)


class SqlStore(RankingStore):

    @_guarded
    def top_one(self):
        player = Player.query.order_by(Player.high_score.desc(), Player.username.asc()).first()
        return _entry(player) if player else None

    @_guarded
    def top(self, limit):
        rows = Player.query.order_by(Player.high_score.desc(), Player.username.asc()).limit(int(limit)).all()
        return [_entry(p) for p in rows]

    @_guarded
    def above(self, target, limit):
        rows = (
            Player.query.filter(Player.high_score > target)
            .order_by(Player.high_score.asc(), Player.username.asc())
            .limit(int(limit))
            .all()
        )
        return [_entry(p) for p in rows]

    @_guarded
    def below(self, target, limit):
        rows = (
            Player.query.filter(Player.high_score < target)
            .order_by(Player.high_score.desc(), Player.username.asc())
            .limit(int(limit))
            .all()
        )
        return [_entry(p) for p in rows]

    @_guarded
    def by_username(self, name):
        player = Player.query.filter_by(username=name).first()
        return _entry(player) if player else None

    @_guarded
    def get_player(self, username):
        player = Player.query.filter_by(username=username).first()
        return _record(player) if player else None

    @_guarded
    def create_player(self, username, password_hash):
        player = Player(username=username, password_hash=password_hash, high_score=0)
        db.session.add(player)
        try:
            db.session.commit()
        except IntegrityError:
            db.session.rollback()
            raise ValidationError(f'Username already exists: {username}', error='Username already exists')
        return _record(player)

    @_guarded
    def update_high_score(self, username, candidate):
        # Single conditional UPDATE so concurrent submissions cannot lower the score
        result = db.session.execute(
            update(Player)
            .where(Player.username == username, Player.high_score < int(candidate))
            .values(high_score=int(candidate))
        )
        db.session.commit()
        return result.rowcount > 0

    @_guarded
    def save_economy_snapshot(self, username, snapshot):
        player = Player.query.filter_by(username=username).first()
        if not player:
            raise NotFound(f'Unknown player: {username}')
        state = GameState.query.filter_by(player_id=player.id).first()
        if state is None:
            state = GameState(player_id=player.id)
        state.money = snapshot.money
        state.inventory = json.dumps(snapshot.inventory)
        state.item_costs = json.dumps(snapshot.item_costs)
        state.last_visited_station = snapshot.last_visited_station
        state.game_clock = snapshot.current_time
        db.session.add(state)
        db.session.commit()

    @_guarded
    def load_economy_snapshot(self, username):
        state = GameState.query.join(Player).filter(Player.username == username).first()
        if state is None:
            return None
        return EconomySnapshot(
            money=state.money,
            inventory=json.loads(state.inventory or '{}'),
            item_costs=json.loads(state.item_costs or '{}'),
            last_visited_station=state.last_visited_station,
            current_time=state.game_clock,
        )

    @_guarded
    def reset(self):
        db.drop_all()
        db.create_all()
