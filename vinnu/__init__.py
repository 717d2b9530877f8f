# Flask application factory

import logging
from flask import Flask, jsonify, request
from werkzeug.exceptions import HTTPException
from vinnu.extensions import db, socketio, login_manager
from vinnu.errors import VinnuError

logger = logging.getLogger(__name__)


def create_app(config=None, mailer=None):
    # Create and configure Flask application
    # config: object whose upper-case attributes override the defaults in config.py
    # mailer: outbound mail collaborator, built from MAIL_* settings when omitted
    flask_app = Flask(__name__)

    # Load config: defaults first, then the caller's overrides
    flask_app.config.from_object('config')
    if config:
        flask_app.config.from_object(config)

    _setup_logging(flask_app)

    # Initialize extensions
    db.init_app(flask_app)

    # Import socket handlers before init_app so every app gets them
    import vinnu.sockets  # noqa

    socketio.init_app(
        flask_app,
        async_mode=flask_app.config['SOCKETIO_ASYNC_MODE'],
        cors_allowed_origins=flask_app.config['CORS_ALLOWED_ORIGINS'],
        ping_timeout=flask_app.config['SOCKETIO_PING_TIMEOUT'],
        ping_interval=flask_app.config['SOCKETIO_PING_INTERVAL']
    )
    login_manager.init_app(flask_app)
    _setup_login(flask_app)

    # Notification sender, injected rather than module-level
    from vinnu.functions import FriendNotifier, build_mailer
    flask_app.extensions['vinnu_notifier'] = FriendNotifier(
        mailer if mailer is not None else build_mailer(flask_app.config),
        socketio=socketio,
        frontend_url=flask_app.config.get('FRONTEND_URL')
    )

    # Create upload folders
    from config import init_upload_folders
    init_upload_folders(flask_app.config['UPLOAD_FOLDER'], flask_app.config['UPLOAD_SUBDIRS'])

    # Register blueprints
    from vinnu.routes import auth_bp, main_bp, users_bp, playlists_bp, admin_bp
    flask_app.register_blueprint(main_bp)
    flask_app.register_blueprint(auth_bp, url_prefix='/api/auth')
    flask_app.register_blueprint(users_bp, url_prefix='/api')
    flask_app.register_blueprint(playlists_bp, url_prefix='/api/playlists')
    flask_app.register_blueprint(admin_bp, url_prefix='/api/admin')

    from vinnu.commands import register_commands
    register_commands(flask_app)

    _register_error_handlers(flask_app)
    _register_cors(flask_app)

    # Create database tables
    with flask_app.app_context():
        db.create_all()

    return flask_app


def get_notifier(flask_app):
    return flask_app.extensions.get('vinnu_notifier')


def _setup_logging(flask_app):
    level = getattr(logging, str(flask_app.config.get('LOG_LEVEL', 'INFO')).upper(), logging.INFO)
    logging.basicConfig(format='%(asctime)s %(levelname)s %(name)s: %(message)s')
    logging.getLogger('vinnu').setLevel(level)


def _setup_login(flask_app):
    from vinnu.models import User
    from vinnu.functions.tokens import read_token, token_from_header

    def _active_user(user_id):
        try:
            user = db.session.get(User, int(user_id))
        except (TypeError, ValueError):
            return None
        if user is None or user.is_banned:
            return None
        return user

    # Session cookie
    @login_manager.user_loader
    def load_user(user_id):
        return _active_user(user_id)

    # Authorization: Bearer <token>
    @login_manager.request_loader
    def load_user_from_request(req):
        token = token_from_header(req.headers.get('Authorization'))
        user_id = read_token(token)
        if user_id is None:
            return None
        return _active_user(user_id)

    # API clients always get JSON 401
    @login_manager.unauthorized_handler
    def _unauthorized():
        return jsonify({'error': 'Unauthorized'}), 401


def _register_error_handlers(flask_app):

    @flask_app.errorhandler(VinnuError)
    def _vinnu_error(e):
        return jsonify(e.to_dict()), e.status_code

    @flask_app.errorhandler(HTTPException)
    def _http_error(e):
        return jsonify({'error': e.description or e.name}), e.code

    @flask_app.errorhandler(Exception)
    def _server_error(e):
        db.session.rollback()
        logger.error(f"[SERVER ERROR] {request.method} {request.path}: {e}", exc_info=True)
        return jsonify({'error': 'Internal server error'}), 500


def _register_cors(flask_app):
    # Echo the Origin back only when it is on the configured allowlist
    @flask_app.after_request
    def _cors(response):
        origin = request.headers.get('Origin')
        allowed = flask_app.config.get('CORS_ALLOWED_ORIGINS') or []
        if origin and origin.rstrip('/') in [o.rstrip('/') for o in allowed]:
            response.headers['Access-Control-Allow-Origin'] = origin
            response.headers['Access-Control-Allow-Credentials'] = 'true'
            response.headers['Access-Control-Allow-Headers'] = 'Authorization, Content-Type'
            response.headers['Access-Control-Allow-Methods'] = 'GET, POST, PATCH, DELETE, OPTIONS'
            response.headers['Vary'] = 'Origin'
        return response
