"""
User routes.

Endpoints:
- GET /users/<id>  - look up a user (params + query contract)
- POST /users      - create a user (body contract)

Thin handlers: they only read g.validated via get_validated().
"""

import uuid

from flask import jsonify

from api.contracts import get_validated, validate_contract
from api.contracts.schemas.users import CreateUserContract, GetUserContract


def register(router):
    @router.get("/users/<id>")
    @validate_contract(GetUserContract)
    def get_user(id):
        validated = get_validated()
        query = validated.query

        user = {
            "id": str(validated.params.id),
            "includeProfile": query.include_profile,
        }
        if query.include_profile:
            user["profile"] = {"displayName": None, "bio": None}
        if query.expand:
            user["expanded"] = query.expand

        return jsonify({"data": user})

    @router.post("/users")
    @validate_contract(CreateUserContract)
    def create_user():
        body = get_validated().body

        user = body.model_dump()
        user["id"] = str(uuid.uuid4())
        return jsonify({"data": user}), 201

    return router
