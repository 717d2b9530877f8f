import pytest
from vinnu.extensions import db
from vinnu.models import User, Playlist, PlaylistLike, Follow, Friendship


@pytest.fixture
def staff(make_user, client_for):
    ids = {
        'root': make_user('root', role='superadmin'),
        'boss': make_user('boss', role='admin'),
        'alice': make_user('alice'),
        'bob': make_user('bob'),
    }
    clients = {name: client_for(name) for name in ('root', 'boss', 'alice', 'bob')}
    return ids, clients


def test_admin_routes_require_admin_role(staff, client):
    ids, clients = staff
    assert client.get('/api/admin/users').status_code == 401
    resp = clients['alice'].get('/api/admin/users')
    assert resp.status_code == 403
    assert resp.get_json()['error'] == 'Access denied. Insufficient role.'
    assert clients['alice'].post(f"/api/admin/users/{ids['bob']}/ban").status_code == 403


def test_list_users_and_stats(staff):
    _, clients = staff
    users = clients['boss'].get('/api/admin/users').get_json()
    assert {u['username'] for u in users} == {'root', 'boss', 'alice', 'bob'}
    assert all('email' in u and 'isBanned' in u for u in users)

    stats = clients['boss'].get('/api/admin/stats').get_json()
    assert stats == {'totalUsers': 4, 'totalPlaylists': 0, 'bannedUsers': 0, 'admins': 2}


def test_ban_and_unban(staff, client):
    ids, clients = staff
    bob = clients['bob']
    assert bob.get('/api/auth/me').status_code == 200

    resp = clients['boss'].post(f"/api/admin/users/{ids['bob']}/ban", json={'reason': 'Spam links'})
    assert resp.status_code == 200
    assert resp.get_json()['isBanned'] is True
    assert resp.get_json()['bannedReason'] == 'Spam links'

    # existing session stops working and new logins are refused
    assert bob.get('/api/auth/me').status_code == 401
    resp = client.post('/api/auth/login', json={'email': 'bob', 'password': 'Password123'})
    assert resp.status_code == 403

    assert clients['boss'].get('/api/admin/stats').get_json()['bannedUsers'] == 1

    resp = clients['boss'].post(f"/api/admin/users/{ids['bob']}/unban")
    assert resp.get_json()['isBanned'] is False
    assert client.post('/api/auth/login', json={'email': 'bob', 'password': 'Password123'}).status_code == 200


def test_ban_defaults_and_limits(staff):
    ids, clients = staff
    resp = clients['boss'].post(f"/api/admin/users/{ids['alice']}/ban")
    assert resp.get_json()['bannedReason'] == 'Terms violation'

    assert clients['boss'].post(f"/api/admin/users/{ids['boss']}/ban").status_code == 400
    assert clients['boss'].post(f"/api/admin/users/{ids['root']}/ban").status_code == 403
    assert clients['boss'].post('/api/admin/users/999/ban').status_code == 404


def test_promote_and_demote(staff):
    ids, clients = staff
    path = f"/api/admin/users/{ids['alice']}"

    assert clients['boss'].post(f'{path}/promote', json={'role': 'admin'}).status_code == 403

    resp = clients['root'].post(f'{path}/promote', json={'role': 'moderator'})
    assert resp.status_code == 200
    assert resp.get_json()['role'] == 'moderator'

    resp = clients['root'].post(f'{path}/promote', json={'role': 'superadmin'})
    assert resp.status_code == 400
    assert resp.get_json()['field'] == 'role'

    assert clients['root'].post(f'{path}/demote').get_json()['role'] == 'user'
    assert clients['root'].post(f"/api/admin/users/{ids['root']}/demote").status_code == 403


def test_delete_user_removes_everything(staff, app, playlist_payload):
    ids, clients = staff
    alice, bob = clients['alice'], clients['bob']

    bob_playlist = bob.post('/api/playlists/create', json=playlist_payload(title='Bob mix')).get_json()['id']
    alice_playlist = alice.post('/api/playlists/create', json=playlist_payload()).get_json()['id']
    alice.post(f'/api/playlists/{bob_playlist}/like')
    bob.post(f'/api/playlists/{alice_playlist}/like')
    alice.post('/api/users/bob/follow')
    bob.post('/api/users/alice/follow')
    alice.post('/api/users/bob/friend-request')

    resp = clients['root'].delete(f"/api/admin/users/{ids['alice']}")
    assert resp.status_code == 200

    with app.app_context():
        assert db.session.get(User, ids['alice']) is None
        assert db.session.get(Playlist, alice_playlist) is None
        assert db.session.get(Playlist, bob_playlist).likes_count == 0
        assert PlaylistLike.query.count() == 0
        assert Follow.query.count() == 0
        assert Friendship.query.count() == 0
        assert db.session.get(User, ids['bob']).followers == frozenset()


def test_delete_user_limits(staff):
    ids, clients = staff
    assert clients['boss'].delete(f"/api/admin/users/{ids['alice']}").status_code == 403
    assert clients['root'].delete(f"/api/admin/users/{ids['root']}").status_code == 400
    assert clients['root'].delete('/api/admin/users/999').status_code == 404


def test_delete_superadmin_is_forbidden(make_user, client_for):
    make_user('root', role='superadmin')
    other_id = make_user('root2', role='superadmin')
    resp = client_for('root').delete(f'/api/admin/users/{other_id}')
    assert resp.status_code == 403


def test_admin_deletes_any_playlist(staff, playlist_payload):
    _, clients = staff
    pid = clients['alice'].post('/api/playlists/create', json=playlist_payload()).get_json()['id']

    listed = clients['boss'].get('/api/admin/playlists').get_json()
    assert [p['id'] for p in listed] == [pid]

    resp = clients['boss'].delete(f'/api/admin/playlists/{pid}')
    assert resp.get_json() == {'message': 'Playlist deleted'}
    assert clients['boss'].delete(f'/api/admin/playlists/{pid}').status_code == 404
    assert clients['alice'].get('/api/playlists/mine').get_json() == []


def test_ban_reason_must_be_a_string(staff):
    ids, clients = staff
    resp = clients['boss'].post(f"/api/admin/users/{ids['bob']}/ban", json={'reason': ['spam']})
    assert resp.status_code == 400
    assert resp.get_json()['field'] == 'reason'
