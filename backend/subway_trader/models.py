from subway_trader import db
from datetime import datetime


class Player(db.Model):
    __tablename__ = 'player'
    id = db.Column(db.Integer, primary_key=True)
    username = db.Column(db.String(64), unique=True, nullable=False, index=True)
    password_hash = db.Column(db.String(256), nullable=False)
    high_score = db.Column(db.BigInteger, default=0, nullable=False, index=True)
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)
    game_state = db.relationship('GameState', back_populates='player', uselist=False)


class GameState(db.Model):
    __tablename__ = 'game_state'
    id = db.Column(db.Integer, primary_key=True)
    player_id = db.Column(db.Integer, db.ForeignKey('player.id'), unique=True, nullable=False, index=True)
    money = db.Column(db.Float, nullable=False, default=1000)
    inventory = db.Column(db.Text, nullable=False, default='{}')  # JSON-encoded item -> count
    item_costs = db.Column(db.Text, nullable=False, default='{}')  # JSON-encoded item -> cost
    last_visited_station = db.Column(db.String(128), nullable=False, default='Kipling')
    game_clock = db.Column(db.DateTime, nullable=False)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)
    player = db.relationship('Player', back_populates='game_state')
