# Flask extensions initialization
# Helps avoid circular imports by initializing extensions without app context
# Socket.IO server options come from config in create_app

from flask_sqlalchemy import SQLAlchemy
from flask_socketio import SocketIO
from flask_login import LoginManager

db = SQLAlchemy()
socketio = SocketIO(path='socket.io')
login_manager = LoginManager()
