# Configuration file for the Vinnu backend

import json
import os

# Load configuration from `config.json` located next to this file.
# Environment variables named VINNU_<KEY> win over the file, the file wins over the defaults.
_BASE_DIR = os.path.dirname(os.path.abspath(__file__))
_JSON_PATH = os.path.join(_BASE_DIR, 'config.json')

# Defaults
_defaults = {
    'SQLALCHEMY_DATABASE_URI': 'sqlite:///vinnu.db',
    'SQLALCHEMY_TRACK_MODIFICATIONS': False,
    'SECRET_KEY': 'dev_secret_change_me',
    'TOKEN_MAX_AGE': 7 * 24 * 60 * 60,
    'UPLOAD_FOLDER': os.path.join(_BASE_DIR, 'uploads'),
    'MAX_CONTENT_LENGTH': 10 * 1024 * 1024,
    'IMAGE_EXTENSIONS': ['png', 'jpg', 'jpeg', 'gif', 'webp'],
    'IMAGE_MAX_SIZE': [1500, 1500],
    'UPLOAD_SUBDIRS': {
        'avatars': 'avatars',
        'covers': 'covers'
    },
    'CORS_ALLOWED_ORIGINS': [
        'http://localhost:5173',
        'http://localhost:4173',
        'http://127.0.0.1:5173',
        'http://127.0.0.1:4173'
    ],
    'FRONTEND_URL': 'http://localhost:5173',
    'MAIL_SERVER': '',
    'MAIL_PORT': 587,
    'MAIL_USERNAME': '',
    'MAIL_PASSWORD': '',
    'MAIL_USE_TLS': True,
    'MAIL_SENDER': 'Vinnu <no-reply@vinnu.app>',
    'LOG_LEVEL': 'INFO',
    'SOCKETIO_ASYNC_MODE': 'eventlet',
    'SOCKETIO_PING_TIMEOUT': 60,
    'SOCKETIO_PING_INTERVAL': 25,
    'KNOWN_PROVIDERS': [
        'Spotify', 'Apple Music', 'YouTube Music', 'SoundCloud',
        'Deezer', 'Tidal', 'Amazon Music'
    ],
    'KNOWN_GENRES': [
        'Pop', 'Rock', 'Hip-Hop', 'R&B', 'Indie',
        'Electronic', 'Jazz', 'Folk', 'Metal', 'Classical'
    ]
}

_cfg = {}
try:
    with open(_JSON_PATH, 'r', encoding='utf-8') as f:
        _cfg = json.load(f) or {}
except FileNotFoundError:
    # No config.json present, defaults only
    _cfg = {}
except (OSError, ValueError):
    # Unreadable or malformed file: keep going on defaults
    _cfg = {}


def _from_env(key, default):
    # Environment override, coerced to the type of the default
    raw = os.environ.get(f'VINNU_{key}')
    if raw is None:
        return default
    if isinstance(default, bool):
        return raw.strip().lower() in ('1', 'true', 'yes', 'on')
    if isinstance(default, int):
        return int(raw)
    if isinstance(default, (list, dict)):
        return json.loads(raw)
    return raw


# Helper to get value from env, JSON or defaults
def _get(key):
    return _from_env(key, _cfg.get(key, _defaults.get(key)))


# Database
SQLALCHEMY_DATABASE_URI = _get('SQLALCHEMY_DATABASE_URI')
SQLALCHEMY_TRACK_MODIFICATIONS = _get('SQLALCHEMY_TRACK_MODIFICATIONS')

# Security
SECRET_KEY = _get('SECRET_KEY')
TOKEN_MAX_AGE = int(_get('TOKEN_MAX_AGE'))
CORS_ALLOWED_ORIGINS = list(_get('CORS_ALLOWED_ORIGINS') or [])

# File uploads
UPLOAD_FOLDER = _get('UPLOAD_FOLDER')
MAX_CONTENT_LENGTH = int(_get('MAX_CONTENT_LENGTH'))
IMAGE_EXTENSIONS = set(_get('IMAGE_EXTENSIONS') or [])
IMAGE_MAX_SIZE = tuple(_get('IMAGE_MAX_SIZE') or (1500, 1500))
UPLOAD_SUBDIRS = dict(_get('UPLOAD_SUBDIRS') or {})

# Outbound mail (empty MAIL_SERVER means log-only)
FRONTEND_URL = _get('FRONTEND_URL')
MAIL_SERVER = _get('MAIL_SERVER')
MAIL_PORT = int(_get('MAIL_PORT'))
MAIL_USERNAME = _get('MAIL_USERNAME')
MAIL_PASSWORD = _get('MAIL_PASSWORD')
MAIL_USE_TLS = bool(_get('MAIL_USE_TLS'))
MAIL_SENDER = _get('MAIL_SENDER')

# Runtime
LOG_LEVEL = _get('LOG_LEVEL')
SOCKETIO_ASYNC_MODE = _get('SOCKETIO_ASYNC_MODE')
SOCKETIO_PING_TIMEOUT = int(_get('SOCKETIO_PING_TIMEOUT'))
SOCKETIO_PING_INTERVAL = int(_get('SOCKETIO_PING_INTERVAL'))

# Catalog hints for the frontend, providers stay free-form
KNOWN_PROVIDERS = list(_get('KNOWN_PROVIDERS') or [])
KNOWN_GENRES = list(_get('KNOWN_GENRES') or [])


def init_upload_folders(base=None, subdirs=None):
    # Create upload directories if they don't exist
    base = base or UPLOAD_FOLDER
    os.makedirs(base, exist_ok=True)
    for subdir in (subdirs or UPLOAD_SUBDIRS).values():
        path = os.path.join(base, subdir)
        os.makedirs(path, exist_ok=True)
