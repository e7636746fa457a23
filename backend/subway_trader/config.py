import os


def _origins(raw):
    return [o.strip() for o in raw.split(',') if o.strip()]


class Config:
    SECRET_KEY = os.environ.get('SECRET_KEY') or 'you-will-never-guess'
    SQLALCHEMY_DATABASE_URI = os.environ.get('DATABASE_URL') or 'sqlite:///subway_trader.db'
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    # 'sql' or 'memory'
    STORE_BACKEND = os.environ.get('STORE_BACKEND', 'sql')
    # Bearer tokens; falls back to SECRET_KEY when unset
    JWT_SECRET_KEY = os.environ.get('JWT_SECRET_KEY')
    JWT_EXP_SECONDS = int(os.environ.get('JWT_EXP_SECONDS', '86400'))
    BCRYPT_LOG_ROUNDS = int(os.environ.get('BCRYPT_LOG_ROUNDS', '10'))
    CORS_ORIGINS = _origins(os.environ.get('ALLOWED_ORIGINS', '')) or [
        "http://localhost:5173",
        "http://127.0.0.1:5173",
        "http://localhost:8080",
        "http://127.0.0.1:8080",
    ]
    # Entries fetched on each side of the target score
    LEADERBOARD_WINDOW = int(os.environ.get('LEADERBOARD_WINDOW', '5'))
    HIGHSCORES_LIMIT = int(os.environ.get('HIGHSCORES_LIMIT', '10'))
    # New game defaults
    STARTING_MONEY = float(os.environ.get('STARTING_MONEY', '1000'))
    STARTING_STATION = os.environ.get('STARTING_STATION', 'Kipling')
    LOG_REQUESTS = os.environ.get('LOG_REQUESTS', '1') not in ('0', 'false', 'False')
