import logging

from flask import Flask, jsonify

from api.contracts import create_contract, validate_contract
from api.contracts.pydantic_models.example import ExampleQuery
from api.middleware.request_id import setup_request_id_middleware
from api.middleware.request_logging import setup_request_logging_middleware


def _build_test_app():
    app = Flask(__name__)
    setup_request_id_middleware(app)

    @app.route("/api/health", methods=["GET"])
    def health():
        return jsonify({"status": "ok"})

    @app.route("/api/test", methods=["GET"])
    @validate_contract(create_contract("example").with_query(ExampleQuery).build())
    def example():
        return jsonify({"status": "ok"})

    @app.route("/static-ish", methods=["GET"])
    def outside():
        return jsonify({"status": "ok"})

    setup_request_logging_middleware(app)
    app.config["TESTING"] = True
    return app


def _logged(caplog, fragment):
    return any(fragment in record.getMessage() for record in caplog.records)


def test_request_logging_sample_rate(monkeypatch, caplog):
    monkeypatch.setenv("REQUEST_LOG_ENABLED", "true")
    monkeypatch.setenv("REQUEST_LOG_SAMPLE_RATE", "1.0")
    monkeypatch.setenv("REQUEST_LOG_ENDPOINTS", "")

    client = _build_test_app().test_client()

    with caplog.at_level(logging.INFO, logger="api.request"):
        response = client.get("/api/health")

    assert response.status_code == 200
    assert _logged(caplog, "api_request path=/api/health")


def test_request_logging_watchlist(monkeypatch, caplog):
    monkeypatch.setenv("REQUEST_LOG_ENABLED", "true")
    monkeypatch.setenv("REQUEST_LOG_SAMPLE_RATE", "0.0")
    monkeypatch.setenv("REQUEST_LOG_ENDPOINTS", "/api/health")

    client = _build_test_app().test_client()

    with caplog.at_level(logging.INFO, logger="api.request"):
        client.get("/api/health")

    assert _logged(caplog, "api_request path=/api/health")


def test_contract_rejections_always_logged(monkeypatch, caplog):
    monkeypatch.setenv("REQUEST_LOG_ENABLED", "true")
    monkeypatch.setenv("REQUEST_LOG_SAMPLE_RATE", "0.0")
    monkeypatch.setenv("REQUEST_LOG_ENDPOINTS", "")

    client = _build_test_app().test_client()

    with caplog.at_level(logging.INFO, logger="api.request"):
        client.get("/api/health")
        response = client.get("/api/test")

    assert response.status_code == 400
    assert not _logged(caplog, "path=/api/health")
    assert _logged(caplog, "path=/api/test method=GET status=400")
    assert _logged(caplog, "contract=example")


def test_paths_outside_prefix_not_logged(monkeypatch, caplog):
    monkeypatch.setenv("REQUEST_LOG_ENABLED", "true")
    monkeypatch.setenv("REQUEST_LOG_SAMPLE_RATE", "1.0")

    client = _build_test_app().test_client()

    with caplog.at_level(logging.INFO, logger="api.request"):
        client.get("/static-ish")

    assert not _logged(caplog, "api_request")


def test_request_logging_disabled(monkeypatch, caplog):
    monkeypatch.setenv("REQUEST_LOG_ENABLED", "false")
    monkeypatch.setenv("REQUEST_LOG_SAMPLE_RATE", "1.0")

    client = _build_test_app().test_client()

    with caplog.at_level(logging.INFO, logger="api.request"):
        client.get("/api/test")

    assert not _logged(caplog, "api_request")
