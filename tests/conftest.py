import pytest
from werkzeug.security import generate_password_hash
from vinnu import create_app
from vinnu.extensions import db
from vinnu.models import User

PASSWORD = 'Password123'


class RecordingMailer:
    def __init__(self):
        self.sent = []

    def send(self, to, subject, text, html=None):
        self.sent.append({'to': to, 'subject': subject, 'text': text, 'html': html})


class FailingMailer:
    def send(self, to, subject, text, html=None):
        raise ConnectionError('smtp server unreachable')


def add_user(username, role='user', password=PASSWORD, **fields):
    # Adds an account inside the active app context and commits it
    user = User(
        username=username,
        email=f'{username}@example.com',
        password=generate_password_hash(password, method='pbkdf2:sha256:1000'),
        first_name=fields.pop('first_name', username.title()),
        last_name=fields.pop('last_name', 'Tester'),
        role=role,
        social_profiles=fields.pop('social_profiles', {}),
        **fields
    )
    db.session.add(user)
    db.session.commit()
    return user


def build_app(tmp_path, mailer, **overrides):
    class TestConfig:
        TESTING = True
        SQLALCHEMY_DATABASE_URI = 'sqlite:///:memory:'
        SECRET_KEY = 'test-secret'
        UPLOAD_FOLDER = str(tmp_path / 'uploads')
        SOCKETIO_ASYNC_MODE = 'threading'
        LOG_LEVEL = 'DEBUG'
        CORS_ALLOWED_ORIGINS = ['http://localhost:5173']

    for key, value in overrides.items():
        setattr(TestConfig, key, value)
    return create_app(TestConfig, mailer=mailer)


@pytest.fixture
def mailer():
    return RecordingMailer()


@pytest.fixture
def app(tmp_path, mailer):
    flask_app = build_app(tmp_path, mailer)
    yield flask_app
    with flask_app.app_context():
        db.session.remove()
        db.drop_all()


@pytest.fixture
def ctx(app):
    # For tests that call the engine directly, without HTTP requests
    with app.app_context():
        yield


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def make_user(app):
    def _make(username, role='user', **fields):
        with app.app_context():
            return add_user(username, role=role, **fields).id
    return _make


@pytest.fixture
def client_for(app):
    # A separate test client (own cookie jar) logged in as the given account
    def _client(username, password=PASSWORD):
        c = app.test_client()
        resp = c.post('/api/auth/login', json={'email': username, 'password': password})
        assert resp.status_code == 200, resp.get_json()
        return c
    return _client


@pytest.fixture
def playlist_payload():
    def _payload(**overrides):
        data = {
            'title': 'Late Night Chill',
            'url': 'https://open.spotify.com/playlist/37i9dQZF1DX4WYpdgoIcn6',
            'provider': 'Spotify',
            'coverUrl': 'https://img.example.com/cover.jpg',
            'genre': ['Indie', 'Electronic'],
            'tags': [{'text': 'Focus', 'color': '#14b8a6'}]
        }
        data.update(overrides)
        return data
    return _payload
