# Entry point for the Vinnu backend

import os
from vinnu import create_app
from vinnu.extensions import socketio

app = create_app()

if __name__ == '__main__':
    host = os.environ.get('HOST', '0.0.0.0')
    port = int(os.environ.get('PORT', 5000))
    app.logger.info(f"[SERVER STARTUP] Vinnu API on {host}:{port}")
    socketio.run(app, host=host, port=port, debug=False)
