"""Service index and codex health routes."""

from flask import Blueprint, jsonify, current_app

health_bp = Blueprint('health', __name__)


@health_bp.route('/', methods=['GET'])
def index():
    return jsonify({
        'ok': True,
        'service': 'openai-auth-translate-bridge',
        'endpoints': ['GET /health', 'POST /translate-batch'],
    }), 200


@health_bp.route('/health', methods=['GET'])
def health():
    """Check codex right now (bypasses the snapshot TTL).

    Returns 200 when codex is installed and logged in, 503 otherwise.
    """
    service = current_app.extensions['translation_service']
    snapshot = service.health_monitor.snapshot(force=True)
    return jsonify(snapshot.to_dict()), 200 if snapshot.ok else 503
