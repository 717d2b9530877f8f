# Main routes (service index, health, uploaded files)

from flask import Blueprint, jsonify, send_from_directory, current_app

main_bp = Blueprint('main', __name__)


@main_bp.route('/')
def index():
    return jsonify({
        'message': 'Vinnu API Server',
        'status': 'running',
        'endpoints': {
            'health': '/api/health',
            'auth': '/api/auth/*',
            'playlists': '/api/playlists',
            'users': '/api/users',
            'profile': '/api/profile'
        }
    })


@main_bp.route('/api/health')
def health():
    return jsonify({'status': 'ok'})


@main_bp.route('/api/catalog')
def catalog():
    # Known providers and genres for the create-playlist form
    return jsonify({
        'providers': current_app.config.get('KNOWN_PROVIDERS', []),
        'genres': current_app.config.get('KNOWN_GENRES', [])
    })


@main_bp.route('/uploads/<path:filename>')
def uploaded_file(filename):
    # Serve uploaded file
    return send_from_directory(current_app.config['UPLOAD_FOLDER'], filename)
