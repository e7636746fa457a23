from flask import Blueprint, current_app, jsonify, request
from flask_login import current_user, login_required

from subway_trader import socketio
from subway_trader.errors import NotFound
from subway_trader.services.economy import EconomySnapshot
from subway_trader.services.leaderboard import parse_submitted_score
from subway_trader.stores import get_store

game = Blueprint('game', __name__)


@game.route('/gamestate', methods=['POST'])
@login_required
def save_game_state():
    snapshot = EconomySnapshot.from_payload(
        request.get_json(silent=True),
        default_station=current_app.config.get('STARTING_STATION', 'Kipling'),
    )
    get_store().save_economy_snapshot(current_user.username, snapshot)
    current_app.logger.info(
        f"[gamestate-save] username={current_user.username} station={snapshot.last_visited_station} money={snapshot.money}"
    )
    return jsonify({"success": True, "gameState": snapshot.to_dict()})


@game.route('/gamestate', methods=['GET'])
@login_required
def load_game_state():
    snapshot = get_store().load_economy_snapshot(current_user.username)
    if snapshot is None:
        raise NotFound(f'No saved game state for {current_user.username}', error='No saved game state')
    return jsonify({"success": True, "gameState": snapshot.to_dict()})


@game.route('/gamestate/default', methods=['GET'])
@login_required
def default_game_state():
    cfg = current_app.config
    snapshot = EconomySnapshot.starting(
        money=cfg.get('STARTING_MONEY', 1000),
        station=cfg.get('STARTING_STATION', 'Kipling'),
    )
    return jsonify({"success": True, "gameState": snapshot.to_dict()})


@game.route('/highscore', methods=['POST'])
@login_required
def submit_high_score():
    data = request.get_json(silent=True) or {}
    score = parse_submitted_score(data.get('score'))
    store = get_store()
    updated = store.update_high_score(current_user.username, score)
    player = store.get_player(current_user.username)
    high_score = player.high_score if player else score
    current_app.logger.info(
        f"[highscore] username={current_user.username} submitted={score} stored={high_score} updated={updated}"
    )
    if updated:
        socketio.emit(
            'leaderboard_update',
            {'username': current_user.username, 'highScore': high_score},
            to='leaderboard',
            namespace='/ws',
        )
    return jsonify({"success": True, "updated": updated, "highScore": high_score})
