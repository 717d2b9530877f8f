# Playlist routes: CRUD, likes, counters and search

from flask import Blueprint, jsonify, request, current_app
from flask_login import login_required, current_user
from vinnu.errors import ValidationError
from vinnu.models import Playlist
from vinnu.functions import playlists as playlist_ops
from vinnu.functions.files import save_uploaded_image
from vinnu.functions.search import search_playlists
from vinnu.functions.serializers import playlist_dict
from vinnu.routes.helpers import json_body

playlists_bp = Blueprint('playlists', __name__)


def _newest_first():
    return Playlist.query.order_by(Playlist.created_at.desc(), Playlist.id.desc())


@playlists_bp.route('', methods=['GET'])
def list_playlists():
    return jsonify([playlist_dict(p) for p in _newest_first().all()])


@playlists_bp.route('/mine')
@login_required
def my_playlists():
    playlists = _newest_first().filter(Playlist.owner_id == current_user.id).all()
    return jsonify([playlist_dict(p) for p in playlists])


@playlists_bp.route('/search')
def search():
    # Unknown sortBy values fall back to newest first
    sort_by = request.args.get('sortBy') or None
    # Storage order in, so equal sort keys keep it
    playlists = Playlist.query.order_by(Playlist.id).all()
    results = search_playlists(
        playlists,
        query=request.args.get('query'),
        genre=request.args.get('genre'),
        provider=request.args.get('provider'),
        sort_by=sort_by
    )
    return jsonify([playlist_dict(p) for p in results])


@playlists_bp.route('/cover-upload', methods=['POST'])
@login_required
def upload_cover():
    file = request.files.get('cover')
    if not file or not file.filename:
        raise ValidationError('No file uploaded.', field='cover')

    cfg = current_app.config
    url = save_uploaded_image(
        file, cfg['UPLOAD_SUBDIRS']['covers'], cfg['UPLOAD_FOLDER'],
        cfg['IMAGE_EXTENSIONS'], cfg['IMAGE_MAX_SIZE']
    )
    if not url:
        raise ValidationError('Only image files are allowed!', field='cover')
    return jsonify({'url': url}), 201


@playlists_bp.route('/create', methods=['POST'])
@login_required
def create_playlist():
    playlist = playlist_ops.create_playlist(current_user._get_current_object(), json_body())
    return jsonify(playlist_dict(playlist)), 201


@playlists_bp.route('/<int:playlist_id>', methods=['GET'])
def get_playlist(playlist_id):
    return jsonify(playlist_dict(playlist_ops.get_playlist(playlist_id)))


@playlists_bp.route('/<int:playlist_id>', methods=['PATCH'])
@login_required
def update_playlist(playlist_id):
    playlist = playlist_ops.get_playlist(playlist_id)
    playlist_ops.update_playlist(playlist, current_user._get_current_object(), json_body())
    return jsonify(playlist_dict(playlist))


@playlists_bp.route('/<int:playlist_id>', methods=['DELETE'])
@login_required
def delete_playlist(playlist_id):
    playlist = playlist_ops.get_playlist(playlist_id)
    playlist_ops.delete_playlist(playlist, current_user._get_current_object())
    return '', 204


@playlists_bp.route('/<int:playlist_id>/like', methods=['POST'])
@login_required
def like_playlist(playlist_id):
    playlist = playlist_ops.get_playlist(playlist_id)
    liked = playlist_ops.toggle_like(playlist, current_user._get_current_object())
    data = playlist_dict(playlist)
    data['liked'] = liked
    return jsonify(data)


# Counters are open to anonymous visitors

@playlists_bp.route('/<int:playlist_id>/view', methods=['POST'])
def view_playlist(playlist_id):
    playlist = playlist_ops.record_view(playlist_id)
    return jsonify({'views': playlist.views, 'clicks': playlist.clicks})


@playlists_bp.route('/<int:playlist_id>/click', methods=['POST'])
def click_playlist(playlist_id):
    playlist = playlist_ops.record_click(playlist_id)
    return jsonify({'views': playlist.views, 'clicks': playlist.clicks})
