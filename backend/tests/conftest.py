"""
Root pytest configuration for backend tests.

Provides:
- backend/ on sys.path (imports like `from api.contracts import ...`)
- Shared fixtures (app, client)
"""

import sys
from pathlib import Path

backend_dir = Path(__file__).parent.parent
if str(backend_dir) not in sys.path:
    sys.path.insert(0, str(backend_dir))

import pytest


@pytest.fixture
def app():
    """Create test Flask application (registry route discovery)."""
    from app import create_app

    return create_app({
        'TESTING': True,
        'ROUTE_DISCOVERY': 'registry',
        'ROUTES_URL_PREFIX': '/api',
    })


@pytest.fixture
def client(app):
    """Create test client."""
    return app.test_client()
