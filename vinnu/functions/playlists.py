# Playlist CRUD, likes and analytics counters

import logging
from vinnu.extensions import db
from vinnu.errors import NotFound, Forbidden, ValidationError
from vinnu.models import Playlist, PlaylistLike
from vinnu.functions.transaction import run_in_transaction
from vinnu.functions.validation import validate_url, normalize_genres, normalize_tags

logger = logging.getLogger(__name__)

EDITABLE_FIELDS = ('title', 'url', 'provider', 'coverUrl', 'genre', 'tags')
COUNTERS = {
    'views': Playlist.views,
    'clicks': Playlist.clicks,
}


def _clean_fields(data, partial=False):
    # Validate request fields and map them onto model attribute names
    cleaned = {}

    for field in ('title', 'provider', 'coverUrl'):
        if partial and field not in data:
            continue
        value = data.get(field)
        if not isinstance(value, str) or not value.strip():
            raise ValidationError(f'{field} is required', field=field)
        cleaned[field] = value.strip()

    if not partial or 'url' in data:
        is_valid, msg = validate_url(data.get('url'))
        if not is_valid:
            raise ValidationError(msg, field='url')
        cleaned['url'] = data['url'].strip()

    for field, normalize in (('genre', normalize_genres), ('tags', normalize_tags)):
        if partial and field not in data:
            continue
        try:
            cleaned[field] = normalize(data.get(field))
        except ValueError as e:
            raise ValidationError(str(e), field=field)

    if 'title' in cleaned and len(cleaned['title']) > 200:
        raise ValidationError('title is too long', field='title')

    return {
        {'coverUrl': 'cover_url', 'genre': 'genres'}.get(key, key): value
        for key, value in cleaned.items()
    }


def get_playlist(playlist_id):
    playlist = db.session.get(Playlist, playlist_id)
    if playlist is None:
        raise NotFound('Playlist not found')
    return playlist


def _check_owner(playlist, caller):
    if playlist.owner_id != caller.id:
        raise Forbidden('Only the owner can change this playlist')


def create_playlist(owner, data):
    fields = _clean_fields(data or {})
    playlist = Playlist(owner_id=owner.id, views=0, clicks=0, **fields)
    db.session.add(playlist)
    db.session.commit()
    logger.info(f"[PLAYLIST] {owner.username} created playlist {playlist.id}")
    return playlist


def update_playlist(playlist, caller, data):
    _check_owner(playlist, caller)
    fields = _clean_fields(data or {}, partial=True)
    for key, value in fields.items():
        setattr(playlist, key, value)
    db.session.commit()
    logger.info(f"[PLAYLIST] {caller.username} updated playlist {playlist.id}")
    return playlist


def delete_playlist(playlist, caller, as_admin=False):
    if not as_admin:
        _check_owner(playlist, caller)
    playlist_id = playlist.id
    db.session.delete(playlist)
    db.session.commit()
    logger.info(f"[PLAYLIST] {caller.username} deleted playlist {playlist_id}{' (admin)' if as_admin else ''}")


def _toggle_like(playlist, user):
    like = PlaylistLike.query.filter_by(playlist_id=playlist.id, user_id=user.id).first()
    if like:
        playlist.likes.remove(like)
        liked = False
    else:
        playlist.likes.append(PlaylistLike(user_id=user.id))
        liked = True
    db.session.flush()
    return liked


def toggle_like(playlist, user):
    # Same toggle semantics as follow: a second call undoes the first
    liked = run_in_transaction(_toggle_like, playlist, user)
    logger.info(f"[LIKE] {user.username} {'liked' if liked else 'unliked'} playlist {playlist.id}")
    return liked


def increment_counter(playlist_id, counter):
    # Atomic in-database increment; never loses concurrent updates
    column = COUNTERS[counter]
    updated = Playlist.query.filter_by(id=playlist_id).update(
        {column: column + 1}, synchronize_session=False
    )
    if not updated:
        db.session.rollback()
        raise NotFound('Playlist not found')
    db.session.commit()
    playlist = db.session.get(Playlist, playlist_id)
    db.session.refresh(playlist)
    return playlist


def record_view(playlist_id):
    return increment_counter(playlist_id, 'views')


def record_click(playlist_id):
    return increment_counter(playlist_id, 'clicks')
