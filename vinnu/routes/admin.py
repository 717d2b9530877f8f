# Admin console routes: user moderation, role changes, playlist removal

import logging
from datetime import datetime
from flask import Blueprint, jsonify, current_app
from flask_login import current_user
from vinnu.extensions import db
from vinnu.errors import NotFound, ValidationError, Forbidden, InvalidOperation
from vinnu.models import User, Playlist, PlaylistLike, STAFF_ROLES
from vinnu.functions import playlists as playlist_ops
from vinnu.functions.files import remove_uploaded_file
from vinnu.functions.relationships import purge_relationships
from vinnu.functions.serializers import user_admin, playlist_dict
from vinnu.routes.helpers import json_body, str_field, admin_required, superadmin_required

logger = logging.getLogger(__name__)

admin_bp = Blueprint('admin', __name__)

PROMOTABLE_ROLES = ('admin', 'moderator')


def _user_or_404(user_id):
    user = db.session.get(User, user_id)
    if user is None:
        raise NotFound('User not found')
    return user


@admin_bp.route('/users')
@admin_required
def list_users():
    users = User.query.order_by(User.created_at.desc(), User.id.desc()).all()
    return jsonify([user_admin(u) for u in users])


@admin_bp.route('/playlists')
@admin_required
def list_playlists():
    playlists = Playlist.query.order_by(Playlist.created_at.desc(), Playlist.id.desc()).all()
    return jsonify([playlist_dict(p) for p in playlists])


@admin_bp.route('/stats')
@admin_required
def stats():
    return jsonify({
        'totalUsers': User.query.count(),
        'totalPlaylists': Playlist.query.count(),
        'bannedUsers': User.query.filter_by(is_banned=True).count(),
        'admins': User.query.filter(User.role.in_(STAFF_ROLES)).count()
    })


@admin_bp.route('/users/<int:user_id>/promote', methods=['POST'])
@superadmin_required
def promote_user(user_id):
    role = json_body().get('role')
    if role not in PROMOTABLE_ROLES:
        raise ValidationError('Invalid role', field='role')

    user = _user_or_404(user_id)
    if user.is_superadmin:
        raise Forbidden('Cannot change a superadmin role')
    user.role = role
    db.session.commit()
    logger.info(f"[ADMIN] {current_user.username} promoted {user.username} to {role}")
    return jsonify(user_admin(user))


@admin_bp.route('/users/<int:user_id>/demote', methods=['POST'])
@superadmin_required
def demote_user(user_id):
    user = _user_or_404(user_id)
    if user.is_superadmin:
        raise Forbidden('Cannot change a superadmin role')
    user.role = 'user'
    db.session.commit()
    logger.info(f"[ADMIN] {current_user.username} demoted {user.username}")
    return jsonify(user_admin(user))


@admin_bp.route('/users/<int:user_id>/ban', methods=['POST'])
@admin_required
def ban_user(user_id):
    reason = str_field(json_body(), 'reason') or 'Terms violation'
    user = _user_or_404(user_id)
    if user.id == current_user.id:
        raise InvalidOperation('Cannot ban yourself')
    if user.is_admin and not current_user.is_superadmin:
        raise Forbidden('Only a superadmin can ban an admin')

    user.is_banned = True
    user.ban_reason = reason
    user.banned_at = datetime.utcnow()
    db.session.commit()
    logger.info(f"[ADMIN] {current_user.username} banned {user.username}: {reason}")
    return jsonify(user_admin(user))


@admin_bp.route('/users/<int:user_id>/unban', methods=['POST'])
@admin_required
def unban_user(user_id):
    user = _user_or_404(user_id)
    user.is_banned = False
    user.ban_reason = None
    user.banned_at = None
    db.session.commit()
    logger.info(f"[ADMIN] {current_user.username} unbanned {user.username}")
    return jsonify(user_admin(user))


@admin_bp.route('/users/<int:user_id>', methods=['DELETE'])
@superadmin_required
def delete_user(user_id):
    # Permanently delete an account and everything that references it
    if user_id == current_user.id:
        raise InvalidOperation('Cannot delete yourself')

    user = _user_or_404(user_id)
    if user.is_superadmin:
        raise Forbidden('Cannot delete superadmin accounts')

    username = user.username
    avatar_url = user.avatar_url
    try:
        PlaylistLike.query.filter_by(user_id=user.id).delete(synchronize_session=False)
        purge_relationships(user.id)
        # Owned playlists (and their likes) go through the ORM cascade
        db.session.delete(user)
        db.session.commit()
    except Exception:
        db.session.rollback()
        raise

    remove_uploaded_file(avatar_url, current_app.config['UPLOAD_FOLDER'])
    logger.info(f"[ADMIN] {current_user.username} deleted account {username}")
    return jsonify({'message': 'User and all associated data deleted successfully'})


@admin_bp.route('/playlists/<int:playlist_id>', methods=['DELETE'])
@admin_required
def delete_playlist(playlist_id):
    playlist = playlist_ops.get_playlist(playlist_id)
    playlist_ops.delete_playlist(playlist, current_user._get_current_object(), as_admin=True)
    return jsonify({'message': 'Playlist deleted'})
