import logging
import os
from translate_bridge import create_app

logging.basicConfig(
    level=os.getenv('LOG_LEVEL', 'INFO').upper(),
    format='%(asctime)s %(levelname)s %(name)s: %(message)s',
)

config_name = os.getenv('FLASK_ENV', 'development')
app = create_app(config_name)

if __name__ == '__main__':
    host = os.getenv('HOST', '127.0.0.1')
    port = int(os.getenv('PORT', 8787))

    # Debug server only for local development
    debug_mode = os.getenv('FLASK_DEBUG', 'False').lower() in ('true', '1', 'yes')

    logging.getLogger(__name__).info(
        f"Bridge running at http://{host}:{port} using codex binary: {app.config['CODEX_BIN']}"
    )
    # Threaded so a long codex run does not block /health
    app.run(host=host, port=port, debug=debug_mode, threaded=True)
