import pytest
from vinnu.extensions import db
from vinnu.functions import playlists as playlist_ops
from vinnu.models import Playlist


@pytest.fixture
def owner(make_user, client_for):
    make_user('alice')
    return client_for('alice')


@pytest.fixture
def other(make_user, client_for):
    make_user('bob')
    return client_for('bob')


@pytest.fixture
def playlist_id(owner, playlist_payload):
    resp = owner.post('/api/playlists/create', json=playlist_payload())
    assert resp.status_code == 201
    return resp.get_json()['id']


def test_create_playlist(owner, playlist_payload):
    resp = owner.post('/api/playlists/create', json=playlist_payload(
        tags=[{'text': 'Chill', 'color': '#3b82f6'}, 'Focus', {'text': 'chill'}]
    ))
    assert resp.status_code == 201
    body = resp.get_json()
    assert body['title'] == 'Late Night Chill'
    assert body['owner']['username'] == 'alice'
    assert body['views'] == 0
    assert body['clicks'] == 0
    assert body['likes'] == []
    assert body['genre'] == ['Indie', 'Electronic']
    assert body['tags'] == [
        {'text': 'Chill', 'color': '#3b82f6'},
        {'text': 'Focus', 'color': '#e0e7ff'},
    ]


@pytest.mark.parametrize('override,field', [
    ({'title': '  '}, 'title'),
    ({'url': 'not a link'}, 'url'),
    ({'url': 'ftp://example.com/list'}, 'url'),
    ({'provider': ''}, 'provider'),
    ({'coverUrl': None}, 'coverUrl'),
    ({'genre': 'Pop'}, 'genre'),
    ({'tags': [{'text': 'Loud', 'color': 'red'}]}, 'tags'),
])
def test_create_playlist_validation(owner, playlist_payload, override, field):
    resp = owner.post('/api/playlists/create', json=playlist_payload(**override))
    assert resp.status_code == 400
    assert resp.get_json()['field'] == field


def test_create_requires_login(client, playlist_payload):
    assert client.post('/api/playlists/create', json=playlist_payload()).status_code == 401


def test_owner_updates_playlist(owner, playlist_id):
    resp = owner.patch(f'/api/playlists/{playlist_id}', json={'title': 'Sunrise', 'genre': ['Jazz']})
    assert resp.status_code == 200
    body = resp.get_json()
    assert body['title'] == 'Sunrise'
    assert body['genre'] == ['Jazz']
    assert body['provider'] == 'Spotify'


def test_non_owner_cannot_update_or_delete(other, playlist_id):
    resp = other.patch(f'/api/playlists/{playlist_id}', json={'title': 'Mine now'})
    assert resp.status_code == 403
    assert other.delete(f'/api/playlists/{playlist_id}').status_code == 403


def test_update_cannot_reassign_owner(owner, playlist_id, app):
    owner.patch(f'/api/playlists/{playlist_id}', json={'ownerId': 999, 'title': 'Still mine'})
    with app.app_context():
        playlist = db.session.get(Playlist, playlist_id)
        assert playlist.title == 'Still mine'
        with pytest.raises(ValueError):
            playlist.owner_id = playlist.owner_id + 1


def test_owner_deletes_playlist(owner, client, playlist_id):
    assert owner.delete(f'/api/playlists/{playlist_id}').status_code == 204
    assert client.get(f'/api/playlists/{playlist_id}').status_code == 404
    assert owner.delete(f'/api/playlists/{playlist_id}').status_code == 404


def test_like_toggle(owner, other, playlist_id):
    resp = other.post(f'/api/playlists/{playlist_id}/like')
    assert resp.status_code == 200
    body = resp.get_json()
    assert body['liked'] is True
    assert body['likesCount'] == 1

    owner.post(f'/api/playlists/{playlist_id}/like')
    body = other.post(f'/api/playlists/{playlist_id}/like').get_json()
    assert body['liked'] is False
    assert body['likesCount'] == 1
    assert len(body['likes']) == len(set(body['likes']))


def test_like_requires_login_and_existing_playlist(client, other):
    assert client.post('/api/playlists/1/like').status_code == 401
    assert other.post('/api/playlists/999/like').status_code == 404


def test_view_and_click_counters(client, playlist_id):
    for _ in range(3):
        resp = client.post(f'/api/playlists/{playlist_id}/view')
        assert resp.status_code == 200
    assert resp.get_json() == {'views': 3, 'clicks': 0}

    resp = client.post(f'/api/playlists/{playlist_id}/click')
    assert resp.get_json() == {'views': 3, 'clicks': 1}

    assert client.post('/api/playlists/999/view').status_code == 404
    assert client.post('/api/playlists/999/click').status_code == 404


def test_increment_does_not_lose_updates_from_stale_copies(app, playlist_id):
    with app.app_context():
        stale = db.session.get(Playlist, playlist_id)
        assert stale.views == 0
        for _ in range(5):
            playlist_ops.record_view(playlist_id)
        # a stale in-memory copy being saved must not reset the counter
        db.session.commit()
        assert db.session.get(Playlist, playlist_id).views == 5


def test_listing_routes(owner, other, client, playlist_payload):
    owner.post('/api/playlists/create', json=playlist_payload(title='First'))
    other.post('/api/playlists/create', json=playlist_payload(title='Second'))

    titles = [p['title'] for p in client.get('/api/playlists').get_json()]
    assert titles == ['Second', 'First']

    assert [p['title'] for p in owner.get('/api/playlists/mine').get_json()] == ['First']
    assert [p['title'] for p in client.get('/api/users/bob/playlists').get_json()] == ['Second']
    assert client.get('/api/users/ghost/playlists').status_code == 404
