from flask import Blueprint, current_app, jsonify, request
from flask_login import current_user

from subway_trader.services.leaderboard import resolve
from subway_trader.stores import get_store

leaderboard = Blueprint('leaderboard', __name__)

MAX_HIGHSCORES_LIMIT = 100


@leaderboard.route('/leaderboard', methods=['GET'])
def surrounding_scores():
    """Top score plus the players ranked just above and below ``score``."""
    username = request.args.get('username') or None
    if username is None and current_user.is_authenticated:
        username = current_user.username
    window = resolve(
        get_store(),
        target_score=request.args.get('score'),
        requesting_username=username,
        window=int(current_app.config.get('LEADERBOARD_WINDOW', 5)),
    )
    payload = window.to_dict()
    payload['success'] = True
    return jsonify(payload)


@leaderboard.route('/highscores', methods=['GET'])
def high_scores():
    default = int(current_app.config.get('HIGHSCORES_LIMIT', 10))
    limit = request.args.get('limit', default, type=int)
    limit = max(1, min(limit, MAX_HIGHSCORES_LIMIT))
    entries = get_store().top(limit)
    return jsonify({"success": True, "scores": [e.to_dict() for e in entries]})
