"""
@validate_contract decorator tests.

Uses a small Flask app per test so contracts can be declared inline.
"""

import logging
from typing import List, Optional

import pytest
from flask import Flask, jsonify
from pydantic import Field

from api.contracts import create_contract, get_validated, validate_contract
from api.contracts.pydantic_models import BaseFacetModel
from api.contracts.pydantic_models.types import CommaList
from api.middleware import setup_error_handlers, setup_request_id_middleware


class SearchQuery(BaseFacetModel):
    q: str = Field(min_length=1)
    limit: int = Field(default=10, ge=1, le=100)
    exact: bool = False


class TagQuery(BaseFacetModel):
    tag: List[str] = Field(default_factory=list)
    labels: CommaList = None


class NoteBody(BaseFacetModel):
    title: str
    pinned: bool = False
    tags: Optional[List[str]] = None


class NoteParams(BaseFacetModel):
    note_id: int


SearchContract = create_contract("search").with_query(SearchQuery).build()
TagContract = create_contract("tags").with_query(TagQuery).build()
NoteContract = (
    create_contract("update_note")
    .with_params(NoteParams)
    .with_body(NoteBody)
    .build()
)


@pytest.fixture
def calls():
    return []


@pytest.fixture
def notes_app(calls):
    app = Flask(__name__)
    app.config["TESTING"] = True
    setup_request_id_middleware(app)
    setup_error_handlers(app)

    @app.get("/search")
    @validate_contract(SearchContract)
    def search():
        calls.append("search")
        return jsonify(get_validated().model_dump(mode="json"))

    @app.get("/tags")
    @validate_contract(TagContract)
    def tags():
        return jsonify(get_validated().query.model_dump(mode="json"))

    @app.put("/notes/<int:note_id>")
    @validate_contract(NoteContract)
    def update_note(note_id):
        calls.append(("update_note", note_id))
        validated = get_validated()
        return jsonify({
            "noteId": validated.params.note_id,
            "body": validated.body.model_dump(mode="json"),
        })

    @app.get("/plain")
    def plain():
        return jsonify({"validated": get_validated().model_dump()})

    return app


@pytest.fixture
def client(notes_app):
    return notes_app.test_client()


def _violations(response):
    return response.get_json()["error"]["details"]["violations"]


# =============================================================================
# Success path
# =============================================================================

class TestValidatedInput:

    def test_parsed_values_reach_handler(self, client, calls):
        response = client.get("/search?q=flask&limit=25&exact=true")

        assert response.status_code == 200
        assert response.get_json() == {
            "body": {},
            "query": {"q": "flask", "limit": 25, "exact": True},
            "params": {},
        }
        assert calls == ["search"]

    def test_defaults_visible_to_handler(self, client):
        response = client.get("/search?q=flask")

        query = response.get_json()["query"]
        assert query["limit"] == 10
        assert query["exact"] is False

    def test_whitespace_stripped(self, client):
        response = client.get("/search?q=%20flask%20")
        assert response.get_json()["query"]["q"] == "flask"

    def test_view_args_forwarded_and_validated(self, client, calls):
        response = client.put("/notes/42", json={"title": "hello", "tags": ["a"]})

        assert response.status_code == 200
        assert response.get_json() == {
            "noteId": 42,
            "body": {"title": "hello", "pinned": False, "tags": ["a"]},
        }
        assert calls == [("update_note", 42)]

    def test_form_body(self, client):
        response = client.put("/notes/1", data={"title": "from form", "pinned": "true"})

        assert response.status_code == 200
        assert response.get_json()["body"]["pinned"] is True

    def test_repeated_query_key_for_list_field(self, client):
        response = client.get("/tags?tag=a&tag=b&labels=x,y")

        assert response.status_code == 200
        assert response.get_json() == {"tag": ["a", "b"], "labels": ["x", "y"]}

    def test_single_value_for_list_field(self, client):
        response = client.get("/tags?tag=only")
        assert response.get_json()["tag"] == ["only"]

    def test_repeated_key_for_scalar_field_uses_first(self, client):
        response = client.get("/search?q=first&q=second")
        assert response.get_json()["query"]["q"] == "first"


# =============================================================================
# Failure path
# =============================================================================

class TestRejectedInput:

    def test_rejection_is_400_and_handler_not_called(self, client, calls):
        response = client.get("/search?limit=0")

        assert response.status_code == 400
        assert calls == []

    def test_every_violation_listed(self, client):
        response = client.get("/search?limit=500&exact=maybe")

        fields = sorted(v["field"] for v in _violations(response))
        assert fields == ["query.exact", "query.limit", "query.q"]
        for violation in _violations(response):
            assert violation["message"]
            assert violation["error"]

    def test_error_envelope(self, client):
        response = client.get("/search", headers={"X-Request-ID": "req-123"})

        error = response.get_json()["error"]
        assert error["code"] == "INVALID_PARAMS"
        assert error["message"] == "1 validation error(s)"
        assert error["requestId"] == "req-123"
        assert response.headers["X-Request-ID"] == "req-123"

    def test_unset_facet_rejects_populated_input(self, client, calls):
        response = client.get("/notes/1")
        assert response.status_code == 405

        response = client.put("/notes/1?verbose=1", json={"title": "x"})

        assert response.status_code == 400
        assert [v["field"] for v in _violations(response)] == ["query.verbose"]
        assert calls == []

    def test_invalid_body_and_params_reported_together(self, client):
        response = client.put("/notes/3", json={"pinned": "nope"})

        fields = sorted(v["field"] for v in _violations(response))
        assert fields == ["body.pinned", "body.title"]

    def test_malformed_json(self, client, calls):
        response = client.put(
            "/notes/1",
            data='{"title": ',
            content_type="application/json",
        )

        assert response.status_code == 400
        violations = _violations(response)
        assert violations == [{
            "field": "body",
            "error": "json_invalid",
            "message": "Request body is not valid JSON",
        }]
        assert calls == []

    def test_json_null_body_is_a_schema_violation(self, client, calls):
        response = client.put(
            "/notes/1",
            data="null",
            content_type="application/json",
        )

        assert response.status_code == 400
        violations = _violations(response)
        assert [(v["field"], v["error"]) for v in violations] == [("body", "model_type")]
        assert violations[0]["message"] != "Request body is not valid JSON"
        assert calls == []

    def test_json_array_body(self, client):
        response = client.put("/notes/1", json=["title"])

        assert response.status_code == 400
        assert [v["field"] for v in _violations(response)] == ["body"]

    def test_no_internal_details_leak(self, client):
        response = client.get("/search?limit=abc")

        text = response.get_data(as_text=True)
        assert "Traceback" not in text
        assert "errors.pydantic.dev" not in text

    def test_rejection_logged(self, client, caplog):
        with caplog.at_level(logging.INFO, logger="api.contracts"):
            client.get("/search")

        assert any(
            "contract=search" in record.getMessage()
            for record in caplog.records
        )


# =============================================================================
# Misuse
# =============================================================================

class TestMisuse:

    def test_get_validated_without_contract(self, client):
        response = client.get("/plain")

        assert response.status_code == 500
        assert response.get_json()["error"]["code"] == "INTERNAL_ERROR"

    def test_get_validated_outside_validated_request(self, notes_app):
        with notes_app.test_request_context("/plain"):
            with pytest.raises(RuntimeError):
                get_validated()

    def test_unbuilt_contract_rejected(self):
        with pytest.raises(TypeError) as exc_info:
            validate_contract(create_contract().with_query(SearchQuery))
        assert ".build()" in str(exc_info.value)

    def test_requests_are_independent(self, client):
        first = client.get("/search?q=one&limit=2")
        second = client.get("/search?q=two")

        assert first.get_json()["query"]["limit"] == 2
        assert second.get_json()["query"]["limit"] == 10
