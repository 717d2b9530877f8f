import io
import os
import pytest
from PIL import Image


def png_bytes(size=(64, 64), color=(20, 184, 166)):
    buf = io.BytesIO()
    Image.new('RGB', size, color).save(buf, format='PNG')
    buf.seek(0)
    return buf


@pytest.fixture
def alice(make_user, client_for):
    make_user('alice')
    return client_for('alice')


def saved_path(app, url):
    assert url.startswith('/uploads/')
    return os.path.join(app.config['UPLOAD_FOLDER'], *url[len('/uploads/'):].split('/'))


def test_avatar_upload(alice, app):
    resp = alice.post('/api/profile/avatar', data={'avatar': (png_bytes(), 'me.png')},
                      content_type='multipart/form-data')
    assert resp.status_code == 200
    url = resp.get_json()['avatarUrl']
    assert url.startswith('/uploads/avatars/')
    assert url.endswith('_me.png')
    assert os.path.exists(saved_path(app, url))

    # replacing the avatar removes the previous file
    resp = alice.post('/api/profile/avatar', data={'avatar': (png_bytes(), 'new.png')},
                      content_type='multipart/form-data')
    assert not os.path.exists(saved_path(app, url))
    assert alice.get(resp.get_json()['avatarUrl']).status_code == 200


def test_large_cover_is_scaled_down(alice, app):
    resp = alice.post('/api/playlists/cover-upload', data={'cover': (png_bytes((3000, 1200)), 'wide cover.png')},
                      content_type='multipart/form-data')
    assert resp.status_code == 201
    url = resp.get_json()['url']
    assert url.startswith('/uploads/covers/')
    assert ' ' not in url

    with Image.open(saved_path(app, url)) as img:
        assert img.size == (1500, 600)


def test_non_images_are_rejected(alice, app):
    resp = alice.post('/api/playlists/cover-upload', data={'cover': (io.BytesIO(b'%PDF-1.4'), 'doc.pdf')},
                      content_type='multipart/form-data')
    assert resp.status_code == 400
    assert resp.get_json()['field'] == 'cover'

    # right extension, wrong content
    resp = alice.post('/api/profile/avatar', data={'avatar': (io.BytesIO(b'not really a png'), 'fake.png')},
                      content_type='multipart/form-data')
    assert resp.status_code == 400
    assert os.listdir(os.path.join(app.config['UPLOAD_FOLDER'], 'avatars')) == []


def test_upload_requires_file_and_login(alice, client):
    resp = alice.post('/api/profile/avatar', data={}, content_type='multipart/form-data')
    assert resp.status_code == 400
    assert client.post('/api/playlists/cover-upload', data={}, content_type='multipart/form-data').status_code == 401
