import config
from conftest import build_app
from vinnu.extensions import db, socketio


def test_env_overrides_are_coerced(monkeypatch):
    monkeypatch.setenv('VINNU_MAIL_USE_TLS', 'no')
    monkeypatch.setenv('VINNU_MAIL_PORT', '2525')
    monkeypatch.setenv('VINNU_CORS_ALLOWED_ORIGINS', '["https://vinnu.app"]')
    monkeypatch.setenv('VINNU_FRONTEND_URL', 'https://vinnu.app')

    assert config._from_env('MAIL_USE_TLS', True) is False
    assert config._from_env('MAIL_PORT', 587) == 2525
    assert config._from_env('CORS_ALLOWED_ORIGINS', []) == ['https://vinnu.app']
    assert config._from_env('FRONTEND_URL', 'http://localhost:5173') == 'https://vinnu.app'
    assert config._from_env('LOG_LEVEL', 'INFO') == 'INFO'


def test_cors_echoes_allowed_origin_only(client):
    resp = client.get('/api/health', headers={'Origin': 'http://localhost:5173'})
    assert resp.headers['Access-Control-Allow-Origin'] == 'http://localhost:5173'
    assert resp.headers['Access-Control-Allow-Credentials'] == 'true'

    resp = client.get('/api/health', headers={'Origin': 'https://evil.example'})
    assert 'Access-Control-Allow-Origin' not in resp.headers


def test_unknown_route_is_json_404(client):
    resp = client.get('/api/nothing-here')
    assert resp.status_code == 404
    assert 'error' in resp.get_json()


def test_unexpected_error_is_json_500(app):
    @app.route('/boom')
    def boom():
        raise RuntimeError('kaboom')

    app.config['PROPAGATE_EXCEPTIONS'] = False
    resp = app.test_client().get('/boom')
    assert resp.status_code == 500
    assert resp.get_json() == {'error': 'Internal server error'}


def test_socket_ping_settings_come_from_config(tmp_path, mailer):
    flask_app = build_app(tmp_path, mailer, SOCKETIO_PING_TIMEOUT=30, SOCKETIO_PING_INTERVAL=10)
    assert socketio.server.eio.ping_timeout == 30
    assert socketio.server.eio.ping_interval == 10
    with flask_app.app_context():
        db.drop_all()
