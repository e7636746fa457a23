from flask import Blueprint, current_app, jsonify, request
from flask_login import current_user, login_required

from subway_trader.errors import AuthenticationError
from subway_trader.services.auth import check_password, create_token, hash_password, validate_credentials
from subway_trader.stores import get_store

auth = Blueprint('auth', __name__)


@auth.route('/register', methods=['POST'])
def register():
    username, password = validate_credentials(request.get_json(silent=True))
    player = get_store().create_player(username, hash_password(password))
    current_app.logger.info(f"[register] username={player.username}")
    return jsonify({"success": True, "token": create_token(player.username), "user": player.to_dict()}), 201


@auth.route('/login', methods=['POST'])
def login():
    data = request.get_json(silent=True) or {}
    username = data.get('username')
    password = data.get('password')
    if not isinstance(username, str) or not isinstance(password, str):
        raise AuthenticationError('Invalid username or password')
    player = get_store().get_player(username.strip())
    if not player or not check_password(player.password_hash, password):
        current_app.logger.info(f"[login-fail] username={username.strip()}")
        raise AuthenticationError('Invalid username or password')
    current_app.logger.info(f"[login] username={player.username}")
    return jsonify({"success": True, "token": create_token(player.username), "user": player.to_dict()})


@auth.route('/verify', methods=['GET'])
@login_required
def verify():
    return jsonify({"success": True, "user": current_user.to_dict()})
