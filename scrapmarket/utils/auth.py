"""Shared authentication utilities.

Tokens are issued by the external auth service; this module only
verifies them. The user id from the token is passed explicitly into
every route handler, and from there into the services.
"""

from datetime import timedelta
from functools import wraps
from flask import request, jsonify, current_app
import jwt

from scrapmarket.utils.clock import utcnow


def _get_secret_key():
    """Get JWT secret from Flask app config (single source of truth)."""
    return current_app.config['JWT_SECRET_KEY']


def decode_token(token):
    """Return the user id carried by a token.

    Accepts both "Bearer <token>" and raw token formats. Raises
    jwt.InvalidTokenError (or a subclass) for bad tokens.
    """
    if token and ' ' in token:
        token = token.split(' ')[1]
    payload = jwt.decode(token, _get_secret_key(), algorithms=['HS256'])
    return payload['user_id']


def create_token(user_id, expires_in=None):
    """Sign a token for a user. Used by the dev CLI and tests."""
    seconds = expires_in or current_app.config['JWT_ACCESS_TOKEN_EXPIRES']
    payload = {
        'user_id': user_id,
        'exp': utcnow() + timedelta(seconds=seconds)
    }
    return jwt.encode(payload, _get_secret_key(), algorithm='HS256')


def token_required(f):
    """
    Decorator to require valid JWT token.

    Extracts user_id from JWT token and passes it as the first argument
    to the decorated function.

    Usage:
        @bp.route('/protected')
        @token_required
        def protected_route(current_user_id):
            return jsonify({'user_id': current_user_id})
    """
    @wraps(f)
    def decorated(*args, **kwargs):
        auth_header = request.headers.get('Authorization')

        if not auth_header:
            return jsonify({'error': 'Token is missing'}), 401

        try:
            current_user_id = decode_token(auth_header)
        except jwt.ExpiredSignatureError:
            return jsonify({'error': 'Token has expired'}), 401
        except (jwt.InvalidTokenError, KeyError):
            return jsonify({'error': 'Token is invalid'}), 401

        return f(current_user_id, *args, **kwargs)
    return decorated


def admin_required(f):
    """Decorator that combines token_required + admin role check."""
    @wraps(f)
    @token_required
    def decorated(current_user_id, *args, **kwargs):
        # Import here to avoid circular imports
        from scrapmarket import db
        from scrapmarket.models import User

        user = db.session.get(User, current_user_id)
        if not user or not user.is_admin:
            return jsonify({'error': 'Admin access required'}), 403
        return f(current_user_id, *args, **kwargs)
    return decorated
