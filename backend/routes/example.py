"""
Example route - query-only contract.

Endpoint:
- GET /test?name=...&description=...[&phone=...]
"""

from flask import jsonify

from api.contracts import get_validated, validate_contract
from api.contracts.schemas.example import ExampleContract


def register(router):
    @router.get("/test")
    @validate_contract(ExampleContract)
    def example():
        query = get_validated().query
        return jsonify({
            "message": "Hello, world!",
            "vars": {
                "name": query.name,
                "description": query.description,
                "phone": query.phone,
            },
        })

    return router
