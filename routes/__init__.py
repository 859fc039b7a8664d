# routes/__init__.py
from .api.generate import api_generate_bp
from .api.health import api_health_bp
from .api.usage import api_usage_bp


def register_routes(app):
    app.register_blueprint(api_generate_bp)
    app.register_blueprint(api_usage_bp)
    app.register_blueprint(api_health_bp)

    if app.config.get("DEBUG_ENDPOINTS_ENABLED"):
        from .api.debug import api_debug_bp

        app.register_blueprint(api_debug_bp)
