"""Routes package for the translation bridge."""


def register_routes(app):
    """Register all route blueprints with the application."""
    from .health import health_bp
    from .translate import translate_bp

    app.register_blueprint(health_bp)
    app.register_blueprint(translate_bp)
