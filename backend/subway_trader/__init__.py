from flask import Flask, jsonify, request
from flask_sqlalchemy import SQLAlchemy
from flask_bcrypt import Bcrypt
from flask_login import LoginManager
from flask_cors import CORS
from flask_migrate import Migrate
from flask_socketio import SocketIO
from werkzeug.exceptions import HTTPException
import click
from subway_trader.config import Config

db = SQLAlchemy()
bcrypt = Bcrypt()
login_manager = LoginManager()
migrate = Migrate()
socketio = SocketIO(async_mode=None)

SECURITY_HEADERS = {
    'X-Content-Type-Options': 'nosniff',
    'X-Frame-Options': 'DENY',
    'X-XSS-Protection': '1; mode=block',
}


def create_app(config_class=Config):
    flask_app = Flask(__name__)
    flask_app.config.from_object(config_class)
    allowed_origins = flask_app.config.get('CORS_ORIGINS') or []

    db.init_app(flask_app)
    bcrypt.init_app(flask_app)
    login_manager.init_app(flask_app)
    migrate.init_app(flask_app, db)
    CORS(flask_app, origins=allowed_origins, allow_headers=['Content-Type', 'Authorization'])

    socketio.init_app(flask_app, cors_allowed_origins=allowed_origins)

    # One persistence backend per deployment
    from subway_trader.stores import build_store
    flask_app.extensions['ranking_store'] = build_store(flask_app.config.get('STORE_BACKEND', 'sql'))

    from subway_trader.main import main
    flask_app.register_blueprint(main)

    from subway_trader.api.auth import auth
    from subway_trader.api.game import game
    from subway_trader.api.leaderboard import leaderboard
    flask_app.register_blueprint(auth, url_prefix='/api')
    flask_app.register_blueprint(game, url_prefix='/api')
    flask_app.register_blueprint(leaderboard, url_prefix='/api')

    from subway_trader.socketio_events import register_socketio_handlers
    register_socketio_handlers()

    _register_auth(flask_app)
    _register_error_handlers(flask_app)
    _register_request_hooks(flask_app)

    @click.command('db-reset')
    def db_reset_command():
        """Drops, recreates, and seeds the player store."""
        from subway_trader.services.auth import hash_password
        from subway_trader.stores import get_store
        with flask_app.app_context():
            db.drop_all()
            db.create_all()
            store = get_store()
            if flask_app.config.get('STORE_BACKEND') == 'memory':
                store.reset()

            # Seed players
            for u in ['testuser1', 'testuser2', 'testuser3']:
                store.create_player(u, hash_password('password'))

            print('Database has been reset and seeded!')

    flask_app.cli.add_command(db_reset_command)

    return flask_app


def _register_auth(flask_app):
    from subway_trader.services.auth import bearer_token, decode_token
    from subway_trader.stores import get_store

    @login_manager.user_loader
    def load_user(username):
        return get_store().get_player(username)

    # Stateless: every protected request carries its own bearer token
    @login_manager.request_loader
    def load_user_from_request(req):
        token = bearer_token(req)
        if not token:
            return None
        username = decode_token(token)
        if not username:
            return None
        return get_store().get_player(username)

    @login_manager.unauthorized_handler
    def unauthorized():
        return jsonify({'error': 'Unauthorized', 'details': 'A valid bearer token is required', 'success': False}), 401


def _register_error_handlers(flask_app):
    from subway_trader.errors import TraderError

    @flask_app.errorhandler(TraderError)
    def handle_trader_error(exc):
        if exc.status_code >= 500:
            flask_app.logger.error(f"[error] {request.method} {request.path} {exc.error}: {exc}")
        return jsonify(exc.to_dict()), exc.status_code

    @flask_app.errorhandler(HTTPException)
    def handle_http_error(exc):
        # Routing redirects pass through untouched
        if exc.code is None or exc.code < 400:
            return exc
        return jsonify({'error': exc.name, 'details': exc.description, 'success': False}), exc.code

    @flask_app.errorhandler(Exception)
    def handle_unexpected(exc):
        flask_app.logger.exception(f"[unhandled] {request.method} {request.path}")
        return jsonify({'error': 'Internal server error', 'details': 'The server could not complete the request', 'success': False}), 500


def _register_request_hooks(flask_app):
    @flask_app.before_request
    def log_request():
        if flask_app.config.get('LOG_REQUESTS'):
            flask_app.logger.info(f"{request.method} {request.path}")

    @flask_app.after_request
    def add_security_headers(response):
        for k, v in SECURITY_HEADERS.items():
            response.headers.setdefault(k, v)
        return response
