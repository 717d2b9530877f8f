# Profile, user directory and social graph routes

import logging
from flask import Blueprint, jsonify, request, current_app
from flask_login import login_required, current_user
from vinnu.extensions import db
from vinnu.errors import ValidationError, Conflict
from vinnu.models import User, Playlist, SOCIAL_PROFILE_KEYS
from vinnu.functions import relationships
from vinnu.functions.files import save_uploaded_image, remove_uploaded_file
from vinnu.functions.serializers import (
    user_public, user_private, users_by_ids, friend_summary, playlist_dict
)
from vinnu.functions.validation import validate_username, validate_name, validate_bio
from vinnu.routes.helpers import json_body, str_field, user_or_404, notifier

logger = logging.getLogger(__name__)

users_bp = Blueprint('users', __name__)


def _me():
    return current_user._get_current_object()


# --- PROFILE ---

@users_bp.route('/profile', methods=['GET'])
@login_required
def get_profile():
    return jsonify(user_private(_me()))


@users_bp.route('/profile', methods=['PATCH'])
@login_required
def update_profile():
    user = _me()
    data = json_body()

    for field, attr, label in (('firstName', 'first_name', 'first name'), ('lastName', 'last_name', 'last name')):
        if field in data:
            is_valid, msg = validate_name(data[field], label)
            if not is_valid:
                raise ValidationError(msg, field=field)
            setattr(user, attr, data[field].strip())

    if 'username' in data:
        username = str_field(data, 'username')
        is_valid, msg = validate_username(username)
        if not is_valid:
            raise ValidationError(msg, field='username')
        username = username.lower()
        taken = User.query.filter(User.username == username, User.id != user.id).first()
        if taken:
            raise Conflict('username already in use', field='username')
        user.username = username

    if 'bio' in data:
        is_valid, msg = validate_bio(data['bio'])
        if not is_valid:
            raise ValidationError(msg, field='bio')
        user.bio = data['bio'].strip()

    db.session.commit()
    logger.info(f"[PROFILE] {user.username} updated profile")
    return jsonify(user_private(user))


@users_bp.route('/profile/socials', methods=['PATCH'])
@login_required
def update_socials():
    user = _me()
    data = json_body()
    profiles = {}
    for key in SOCIAL_PROFILE_KEYS:
        value = data.get(key) or ''
        if not isinstance(value, str):
            raise ValidationError(f'{key} must be a string', field=key)
        profiles[key] = value.strip()
    user.social_profiles = profiles
    db.session.commit()
    return jsonify(user_private(user))


@users_bp.route('/profile/avatar', methods=['POST'])
@login_required
def upload_avatar():
    user = _me()
    file = request.files.get('avatar')
    if not file or not file.filename:
        raise ValidationError('No file uploaded', field='avatar')

    cfg = current_app.config
    url = save_uploaded_image(
        file, cfg['UPLOAD_SUBDIRS']['avatars'], cfg['UPLOAD_FOLDER'],
        cfg['IMAGE_EXTENSIONS'], cfg['IMAGE_MAX_SIZE']
    )
    if not url:
        raise ValidationError('Only image files are allowed!', field='avatar')

    remove_uploaded_file(user.avatar_url, cfg['UPLOAD_FOLDER'])
    user.avatar_url = url
    db.session.commit()
    logger.info(f"[PROFILE] {user.username} changed avatar")
    return jsonify(user_private(user))


# --- USER DIRECTORY ---

@users_bp.route('/users')
def list_users():
    users = User.query.filter_by(is_banned=False).order_by(User.username).all()
    return jsonify([{'id': u.id, 'username': u.username, 'avatarUrl': u.avatar_url or ''} for u in users])


@users_bp.route('/users/<username>')
def get_user(username):
    user = user_or_404(username)
    viewer = _me() if current_user.is_authenticated else None
    return jsonify(user_public(user, show_socials=relationships.can_see_socials(viewer, user)))


@users_bp.route('/users/<username>/playlists')
def get_user_playlists(username):
    user = user_or_404(username)
    playlists = Playlist.query.filter_by(owner_id=user.id).order_by(Playlist.created_at.desc(), Playlist.id.desc()).all()
    return jsonify([playlist_dict(p) for p in playlists])


# --- FOLLOW ---

@users_bp.route('/users/<username>/follow', methods=['POST'])
@login_required
def toggle_follow(username):
    result = relationships.toggle_follow(_me(), User.by_username(username))
    return jsonify({
        'isFollowing': result.is_following,
        'followersCount': result.target_followers_count,
        'followingCount': result.viewer_following_count
    })


@users_bp.route('/users/<username>/following-status')
@login_required
def following_status(username):
    return jsonify({'isFollowing': relationships.is_following(_me(), User.by_username(username))})


# --- FRIENDS ---

@users_bp.route('/users/<username>/friend-request', methods=['POST'])
@login_required
def send_friend_request(username):
    status = relationships.send_friend_request(_me(), User.by_username(username), notifier())
    if status is relationships.FriendStatus.FRIENDS:
        return jsonify({'message': 'Friend request accepted!', 'status': 'friends'})
    return jsonify({'message': 'Friend request sent', 'status': 'pending'})


@users_bp.route('/users/<username>/accept-friend', methods=['POST'])
@login_required
def accept_friend(username):
    user = _me()
    relationships.accept_friend_request(user, User.by_username(username), notifier())
    return jsonify({
        'message': 'Friend request accepted',
        'status': 'friends',
        'friendsCount': len(user.friends)
    })


@users_bp.route('/users/<username>/reject-friend', methods=['POST'])
@login_required
def reject_friend(username):
    status = relationships.reject_friend_request(_me(), User.by_username(username))
    if status is not relationships.FriendStatus.NONE:
        return jsonify({'message': 'No friend request from this user', 'status': status.value})
    return jsonify({'message': 'Friend request rejected', 'status': status.value})


@users_bp.route('/users/<username>/cancel-friend-request', methods=['POST'])
@login_required
def cancel_friend_request(username):
    status = relationships.cancel_friend_request(_me(), User.by_username(username))
    if status is not relationships.FriendStatus.NONE:
        return jsonify({'message': 'No friend request to this user', 'status': status.value})
    return jsonify({'message': 'Friend request cancelled', 'status': status.value})


@users_bp.route('/users/<username>/remove-friend', methods=['POST'])
@login_required
def remove_friend(username):
    status = relationships.remove_friend(_me(), User.by_username(username))
    return jsonify({'message': 'Friend removed', 'status': status.value})


@users_bp.route('/users/<username>/friend-status')
@login_required
def friend_status(username):
    view = relationships.get_friend_status(_me(), User.by_username(username))
    return jsonify({'status': view.status.value, 'canSeeSocials': view.can_see_socials})


@users_bp.route('/friend-requests')
@login_required
def list_friend_requests():
    return jsonify(users_by_ids(_me().friend_requests_received))


@users_bp.route('/friend-requests/sent')
@login_required
def list_sent_friend_requests():
    return jsonify(users_by_ids(_me().friend_requests_sent))


@users_bp.route('/friends')
@login_required
def list_friends():
    friend_ids = _me().friends
    if not friend_ids:
        return jsonify([])
    friends = User.query.filter(User.id.in_(list(friend_ids))).order_by(User.username).all()
    return jsonify([friend_summary(f) for f in friends])
