"""
Error envelope middleware tests.
"""

import pytest
from flask import Flask, jsonify

from api.middleware import (
    make_error_response,
    setup_error_handlers,
    setup_request_id_middleware,
)


@pytest.fixture
def client():
    app = Flask(__name__)
    app.config["TESTING"] = True
    setup_request_id_middleware(app)
    setup_error_handlers(app)

    @app.get("/boom")
    def boom():
        raise RuntimeError("secret connection string")

    @app.get("/conflict")
    def conflict():
        return make_error_response("CONFLICT", "Already exists", hint="Use PUT")

    @app.get("/ok")
    def ok():
        return jsonify({"ok": True})

    return app.test_client()


def test_unhandled_exception_is_500_envelope(client):
    response = client.get("/boom", headers={"X-Request-ID": "req-9"})

    assert response.status_code == 500
    error = response.get_json()["error"]
    assert error == {
        "code": "INTERNAL_ERROR",
        "message": "An unexpected error occurred",
        "requestId": "req-9",
    }
    assert "secret" not in response.get_data(as_text=True)


def test_not_found(client):
    response = client.get("/missing")

    assert response.status_code == 404
    assert response.get_json()["error"]["code"] == "NOT_FOUND"
    assert response.headers["X-Request-ID"]


def test_method_not_allowed(client):
    response = client.post("/ok")

    assert response.status_code == 405
    assert response.get_json()["error"]["code"] == "METHOD_NOT_ALLOWED"


def test_status_from_error_code(client):
    response = client.get("/conflict")

    assert response.status_code == 409
    error = response.get_json()["error"]
    assert error["message"] == "Already exists"
    assert error["hint"] == "Use PUT"
