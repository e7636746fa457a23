import os
import sys
import pytest

# Ensure the backend root (containing the `subway_trader` package) is on sys.path
CURRENT_DIR = os.path.dirname(__file__)
BACKEND_ROOT = os.path.abspath(os.path.join(CURRENT_DIR, '..'))
if BACKEND_ROOT not in sys.path:
    sys.path.insert(0, BACKEND_ROOT)

from subway_trader import create_app, db, socketio


class TestConfig:
    __test__ = False
    TESTING = True
    SECRET_KEY = os.environ.get('SECRET_KEY', 'test-secret')
    SQLALCHEMY_DATABASE_URI = 'sqlite://'
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    STORE_BACKEND = 'sql'
    JWT_SECRET_KEY = 'test-jwt-secret'
    JWT_EXP_SECONDS = 3600
    BCRYPT_LOG_ROUNDS = 4
    CORS_ORIGINS = ['http://localhost:5173']
    LEADERBOARD_WINDOW = 5
    HIGHSCORES_LIMIT = 10
    STARTING_MONEY = 1000
    STARTING_STATION = 'Kipling'
    LOG_REQUESTS = False


class MemoryTestConfig(TestConfig):
    STORE_BACKEND = 'memory'


@pytest.fixture()
def flask_app():
    application = create_app(TestConfig)
    with application.app_context():
        # Ensure models are imported so tables are created
        import subway_trader.models  # noqa: F401
        db.create_all()
    # Yield outside the app context: each test request must get its own `g`,
    # or Flask-Login keeps serving the first request's user
    yield application
    with application.app_context():
        db.session.remove()
        db.drop_all()


@pytest.fixture()
def memory_app():
    return create_app(MemoryTestConfig)


@pytest.fixture()
def client(flask_app):
    return flask_app.test_client()


@pytest.fixture()
def store(flask_app):
    with flask_app.app_context():
        yield flask_app.extensions['ranking_store']


@pytest.fixture()
def sio_client(flask_app):
    test_client = socketio.test_client(
        flask_app,
        flask_test_client=flask_app.test_client(),
        namespace='/ws'
    )
    yield test_client
    try:
        test_client.disconnect(namespace='/ws')
    except Exception:
        pass


def register(client, username, password='password'):
    res = client.post('/api/register', json={'username': username, 'password': password})
    assert res.status_code == 201, res.get_json()
    return res.get_json()['token']


def auth_header(token):
    return {'Authorization': f'Bearer {token}'}
