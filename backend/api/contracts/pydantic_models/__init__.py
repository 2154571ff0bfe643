"""
Pydantic models for contract facets.

Every facet schema (body, query, path params) is a BaseModel subclass.
Facets that a contract leaves unset default to EmptyFacet.

Usage:
    from api.contracts.pydantic_models.users import UserPathParams

    contract = create_contract("get_user").with_params(UserPathParams).build()
"""

from .base import BaseFacetModel, EmptyFacet
from .example import ExampleQuery
from .users import CreateUserBody, UserLookupQuery, UserPathParams

__all__ = [
    'BaseFacetModel',
    'EmptyFacet',
    'ExampleQuery',
    'CreateUserBody',
    'UserLookupQuery',
    'UserPathParams',
]
