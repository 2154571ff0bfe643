"""
Facet models for the /users endpoints.
"""

from typing import Optional
from uuid import UUID

from pydantic import Field

from .base import BaseFacetModel
from .types import CommaList


class UserPathParams(BaseFacetModel):
    """Path params for /users/<id>."""

    id: UUID = Field(description="User id (UUID)")


class UserLookupQuery(BaseFacetModel):
    """Query string for GET /users/<id>."""

    include_profile: bool = Field(
        default=False,
        alias='includeProfile',
        description="Embed the profile block in the response",
    )
    expand: CommaList = Field(
        default=None,
        description="Comma-separated related blocks to expand",
    )


class CreateUserBody(BaseFacetModel):
    """JSON body for POST /users."""

    email: str = Field(pattern=r'^[^@\s]+@[^@\s]+\.[^@\s]+$')
    name: str = Field(min_length=1, max_length=120)
    age: Optional[int] = Field(default=None, ge=0, le=150)
