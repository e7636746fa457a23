from flask import Blueprint, jsonify

main = Blueprint('main', __name__)


@main.route('/')
def index():
    return jsonify({
        'message': 'Welcome to the Subway Trader game server!',
        'endpoints': {
            'register': '/api/register',
            'login': '/api/login',
            'verify': '/api/verify',
            'gamestate': '/api/gamestate',
            'highscore': '/api/highscore',
            'highscores': '/api/highscores',
            'leaderboard': '/api/leaderboard',
            'ws': '/socket.io (namespace /ws)',
        },
    })
