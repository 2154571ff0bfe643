"""
Flask Application Factory

Routes are not listed here: they are assembled from route modules
(routes.ROUTE_MODULES, or files on disk with ROUTE_DISCOVERY=glob) and
mounted under ROUTES_URL_PREFIX. A route module that fails to load aborts
startup with a RouteLoadError naming the file.
"""

from flask import Flask
from flask_cors import CORS

from config import Config


def create_app(config=None):
    """
    Build the Flask app.

    Args:
        config: optional mapping of config overrides (applied after Config)

    Raises:
        RouteLoadError: if any route module fails to load or register
    """
    app = Flask(__name__)
    app.config.from_object(Config)
    if config:
        app.config.update(config)

    prefix = app.config.get('ROUTES_URL_PREFIX') or ''

    CORS(app,
         resources={rf"{prefix}/*": {"origins": app.config.get('CORS_ORIGINS', '*')}},
         methods=["GET", "POST", "OPTIONS", "PUT", "PATCH", "DELETE"],
         allow_headers=["Content-Type", "Authorization", "X-Request-ID"],
         expose_headers=["X-Request-ID"],
         supports_credentials=False)

    # === API MIDDLEWARE ===
    # Request ID injection for request correlation and debugging
    from api.middleware import setup_request_id_middleware
    setup_request_id_middleware(app)

    # Request usage logging (sampling + watchlist)
    from api.middleware import setup_request_logging_middleware
    setup_request_logging_middleware(app, prefix=prefix)

    # Standard error envelope for HTTP errors and unhandled exceptions
    from api.middleware import setup_error_handlers
    setup_error_handlers(app)

    # === ROUTES ===
    # RouteLoadError propagates: never serve an incomplete router
    from api.route_loader import load_app_routes
    router = load_app_routes(app.config)
    app.register_blueprint(router, url_prefix=prefix or None)

    rule_count = sum(1 for rule in app.url_map.iter_rules() if rule.endpoint != 'static')
    print(f"   ✓ Routes loaded ({app.config.get('ROUTE_DISCOVERY')}): {rule_count} rule(s) under '{prefix or '/'}'")

    return app


def run_app():
    """Main entry point for local development - starts server with Flask's dev server."""
    print("=" * 60)
    print("Starting Flask API")
    print("=" * 60)

    app = create_app()
    app.run(debug=app.config.get('DEBUG', False), host="0.0.0.0", port=5000)


if __name__ == "__main__":
    run_app()
