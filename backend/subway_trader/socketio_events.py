from flask_socketio import join_room, leave_room, emit
from subway_trader import socketio

LEADERBOARD_ROOM = 'leaderboard'


def handle_connect():
    emit('connected', {'message': 'Connected to /ws'})


def handle_join_leaderboard(data=None):
    join_room(LEADERBOARD_ROOM)
    emit('joined', {'room': LEADERBOARD_ROOM})


def handle_leave_leaderboard(data=None):
    leave_room(LEADERBOARD_ROOM)
    emit('left', {'room': LEADERBOARD_ROOM})


def handle_ping(data):
    emit('pong', data or {})


def register_socketio_handlers() -> None:
    """Register Socket.IO event handlers on namespace '/ws'.

    Clients in the leaderboard room receive ``leaderboard_update`` whenever a
    stored high score is raised.
    """
    socketio.on_event('connect', handle_connect, namespace='/ws')
    socketio.on_event('join_leaderboard', handle_join_leaderboard, namespace='/ws')
    socketio.on_event('leave_leaderboard', handle_leave_leaderboard, namespace='/ws')
    socketio.on_event('ping', handle_ping, namespace='/ws')
