# Routes package

from vinnu.routes.auth import auth_bp
from vinnu.routes.main import main_bp
from vinnu.routes.users import users_bp
from vinnu.routes.playlists import playlists_bp
from vinnu.routes.admin import admin_bp

__all__ = ['auth_bp', 'main_bp', 'users_bp', 'playlists_bp', 'admin_bp']
