"""
Request ID middleware - correlate logs, error envelopes and responses.

Incoming X-Request-ID values are reused when they look sane (short,
printable, no whitespace); anything else is replaced by a fresh UUID so a
client cannot inject arbitrary text into log lines.
"""

import re
import uuid
from flask import Flask, request, g


REQUEST_ID_HEADER = 'X-Request-ID'

_VALID_REQUEST_ID = re.compile(r'^[A-Za-z0-9._:-]{1,128}$')


def _accept_request_id(raw):
    if raw and _VALID_REQUEST_ID.match(raw):
        return raw
    return str(uuid.uuid4())


def setup_request_id_middleware(app: Flask) -> None:
    """
    Set up request ID middleware on Flask app.

    Injects X-Request-ID into g.request_id before each request and into
    the response headers after it.
    """

    @app.before_request
    def inject_request_id():
        g.request_id = _accept_request_id(request.headers.get(REQUEST_ID_HEADER))

    @app.after_request
    def add_request_id_header(response):
        if hasattr(g, 'request_id'):
            response.headers[REQUEST_ID_HEADER] = g.request_id
        return response


def get_request_id() -> str:
    """Current request ID, or a generated UUID outside a request."""
    if hasattr(g, 'request_id'):
        return g.request_id
    return str(uuid.uuid4())
