# Socket.IO event handlers
# Authenticated sockets join a personal room that friend notifications target

import logging
from flask_socketio import join_room, leave_room, emit
from flask_login import current_user
from vinnu.extensions import socketio

logger = logging.getLogger(__name__)


def user_room(user_id):
    return f"user_{user_id}"


@socketio.on('connect')
def on_connect():
    # Reject anonymous sockets, put the rest in their notification room
    if not current_user.is_authenticated:
        logger.info("[SOCKET CONNECT] rejected anonymous connection")
        return False
    join_room(user_room(current_user.id))
    logger.info(f"[SOCKET CONNECT] {current_user.username} joined {user_room(current_user.id)}")
    emit('connected', {'username': current_user.username})


@socketio.on('disconnect')
def on_disconnect(*args):
    if current_user.is_authenticated:
        leave_room(user_room(current_user.id))
        logger.info(f"[SOCKET DISCONNECT] {current_user.username}")
