"""
Facet models for the /test example endpoint.
"""

from typing import Optional

from pydantic import Field

from .base import BaseFacetModel
from .types import PhoneNumber


class ExampleQuery(BaseFacetModel):
    name: str = Field(description="Name is required")
    description: str = Field(description="Description is required")
    phone: Optional[PhoneNumber] = None
