"""
Health route - liveness probe, no contract.

Endpoint:
- GET /health
"""

from flask import jsonify


def register(router):
    @router.get("/health")
    def health():
        return jsonify({"status": "ok"})

    return router
