"""Socket.IO events: clients join their own room to receive marketplace events."""

from flask_socketio import emit, join_room, leave_room
from flask import request
import jwt
import logging

from scrapmarket.services.notifications import user_room
from scrapmarket.utils import decode_token

logger = logging.getLogger(__name__)

# sid -> user_id, for logging disconnects
connected_users = {}


def get_user_from_token(token):
    """Extract user ID from JWT token, or None if it is invalid."""
    try:
        return decode_token(token)
    except (jwt.InvalidTokenError, KeyError) as e:
        logger.warning(f"Token decode error: {e}")
        return None


def register_socket_events(socketio):
    """Register all Socket.IO event handlers."""

    @socketio.on('connect')
    def handle_connect(auth=None):
        """Authenticate the client and join its user room."""
        token = None
        if auth and isinstance(auth, dict):
            token = auth.get('token')
        elif request.args.get('token'):
            token = request.args.get('token')

        if not token:
            logger.warning('Socket connection without token')
            return False

        user_id = get_user_from_token(token)
        if not user_id:
            logger.warning('Socket connection with invalid token')
            return False

        join_room(user_room(user_id))
        connected_users[request.sid] = user_id
        logger.info(f'User {user_id} connected: {request.sid}')

        emit('connected', {'user_id': user_id})
        return True

    @socketio.on('disconnect')
    def handle_disconnect(*args):
        """Leave the user room on disconnect."""
        user_id = connected_users.pop(request.sid, None)
        if user_id:
            leave_room(user_room(user_id))
            logger.info(f'User {user_id} disconnected: {request.sid}')
