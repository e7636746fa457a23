"""Password hashing and bearer tokens."""

from datetime import datetime, timezone

import jwt
from flask import current_app

from subway_trader import bcrypt
from subway_trader.errors import ValidationError

JWT_ALGO = 'HS256'
MIN_USERNAME_LENGTH = 3
MIN_PASSWORD_LENGTH = 6


def validate_credentials(data):
    """Return the trimmed (username, password) pair from a request body."""
    if not isinstance(data, dict):
        raise ValidationError('Missing username or password')
    username = data.get('username')
    password = data.get('password')
    if not isinstance(username, str) or not isinstance(password, str):
        raise ValidationError('Missing username or password')
    username = username.strip()
    if len(username) < MIN_USERNAME_LENGTH:
        raise ValidationError(f'Username must be at least {MIN_USERNAME_LENGTH} characters')
    if len(password) < MIN_PASSWORD_LENGTH:
        raise ValidationError(f'Password must be at least {MIN_PASSWORD_LENGTH} characters')
    return username, password


def hash_password(password: str) -> str:
    return bcrypt.generate_password_hash(password).decode('utf-8')


def check_password(password_hash: str, password: str) -> bool:
    return bcrypt.check_password_hash(password_hash, password)


def _secret():
    cfg = current_app.config
    return cfg.get('JWT_SECRET_KEY') or cfg['SECRET_KEY']


def create_token(username: str) -> str:
    now = int(datetime.now(timezone.utc).timestamp())
    payload = {
        'sub': username,
        'iat': now,
        'exp': now + int(current_app.config.get('JWT_EXP_SECONDS', 86400)),
    }
    return jwt.encode(payload, _secret(), algorithm=JWT_ALGO)


def decode_token(token: str):
    """Return the username a token was issued to, or None if it is invalid."""
    try:
        payload = jwt.decode(token, _secret(), algorithms=[JWT_ALGO])
    except jwt.PyJWTError as exc:
        current_app.logger.info(f"[token-reject] {exc.__class__.__name__}")
        return None
    return payload.get('sub')


def bearer_token(request):
    header = request.headers.get('Authorization', '')
    if not header.startswith('Bearer '):
        return None
    return header.split(' ', 1)[1].strip() or None
