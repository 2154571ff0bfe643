import os
from dotenv import load_dotenv

load_dotenv()


DEVELOPMENT_ENVS = {"development", "dev", "local", "test", "testing"}


def _get_env_name():
    """Current deployment environment name (lowercased, may be empty)."""
    return (
        os.environ.get("ENV")
        or os.environ.get("FLASK_ENV")
        or os.environ.get("APP_ENV")
        or ""
    ).lower()


def is_development_env():
    """Development-like environments load route modules from source."""
    return _get_env_name() in DEVELOPMENT_ENVS


def _get_bool(name, default):
    return os.getenv(name, default).lower() == 'true'


class Config:
    SECRET_KEY = os.getenv('SECRET_KEY', 'dev-secret-key')
    DEBUG = _get_bool('FLASK_DEBUG', 'False')

    # Mount point of the assembled router
    ROUTES_URL_PREFIX = os.getenv('ROUTES_URL_PREFIX', '/api')

    # How route modules are found:
    #   registry - the explicit ROUTE_MODULES mapping in routes/__init__.py
    #   glob     - file discovery (see api.route_loader)
    ROUTE_DISCOVERY = os.getenv('ROUTE_DISCOVERY', 'registry').lower()

    # File discovery settings (glob only)
    # ROUTES_MODE: "source" or "compiled"; empty means derive from ENV
    ROUTES_MODE = os.getenv('ROUTES_MODE', '').lower() or None
    ROUTES_GLOB = os.getenv('ROUTES_GLOB') or None
    # Empty discovery is logged only, unless this is set
    ROUTES_REQUIRE_MATCH = _get_bool('ROUTES_REQUIRE_MATCH', 'False')

    CORS_ORIGINS = os.getenv('CORS_ORIGINS', '*')
