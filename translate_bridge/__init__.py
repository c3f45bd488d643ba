from flask import Flask, jsonify
from flask_cors import CORS
from werkzeug.exceptions import HTTPException, RequestEntityTooLarge
import logging
import os
import re
from dotenv import load_dotenv

load_dotenv()

logger = logging.getLogger(__name__)

# Extension pages and local tools only
ALLOWED_ORIGINS = [
    re.compile(r'^chrome-extension://.+$'),
    re.compile(r'^http://127\.0\.0\.1(:\d+)?$'),
    re.compile(r'^http://localhost(:\d+)?$'),
]


def create_app(config_name='development', runner=None):
    app = Flask(__name__)

    # Config
    app.config['TESTING'] = config_name == 'testing'
    app.config['CODEX_BIN'] = os.getenv('CODEX_BIN', 'codex')
    app.config['REQUEST_TIMEOUT_SECONDS'] = float(os.getenv('REQUEST_TIMEOUT_SECONDS', 120))
    app.config['MAX_CONTENT_LENGTH'] = int(os.getenv('BODY_LIMIT_BYTES', 2_000_000))
    app.config['HEALTH_TTL_SECONDS'] = float(os.getenv('HEALTH_TTL_SECONDS', 10))
    app.config['CACHE_MAX_ENTRIES'] = int(os.getenv('CACHE_MAX_ENTRIES', 3000))

    CORS(
        app,
        origins=ALLOWED_ORIGINS,
        methods=['GET', 'POST', 'OPTIONS'],
        allow_headers=['Content-Type'],
        supports_credentials=True,
    )

    # Shared state lives for the lifetime of the app
    from translate_bridge.services import build_translation_service
    app.extensions['translation_service'] = build_translation_service(app.config, runner=runner)

    register_error_handlers(app)

    from translate_bridge.routes import register_routes
    register_routes(app)

    return app


def register_error_handlers(app):
    from translate_bridge.utils.errors import BridgeError

    @app.errorhandler(BridgeError)
    def handle_bridge_error(error):
        level = logging.ERROR if error.status_code >= 500 else logging.WARNING
        logger.log(level, f"[bridge-error] {error.kind}: {error.message}")
        return jsonify(error.to_dict()), error.status_code

    @app.errorhandler(RequestEntityTooLarge)
    def handle_too_large(error):
        return jsonify({
            'ok': False,
            'error': 'Request body too large',
            'kind': 'payload-too-large',
        }), 413

    @app.errorhandler(HTTPException)
    def handle_http_error(error):
        if error.code == 404:
            return jsonify({'ok': False, 'error': 'Not Found'}), 404
        return jsonify({'ok': False, 'error': error.description}), error.code

    @app.errorhandler(Exception)
    def handle_unexpected(error):
        logger.exception(f"[bridge-error] {error}")
        return jsonify({'ok': False, 'error': 'Internal server error'}), 500
