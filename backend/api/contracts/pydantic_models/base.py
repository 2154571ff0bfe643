"""
Base Pydantic models for contract facets.

Key features:
- frozen=True: Immutable after parsing (handlers cannot mutate validated input)
- populate_by_name=True: Accept both alias and field name
- extra='ignore': Ignore undeclared fields (safe)

EmptyFacet is the default for any facet a contract does not declare.
It forbids extra keys, so an omitted facet rejects requests that populate it.
"""

from pydantic import BaseModel, ConfigDict


class BaseFacetModel(BaseModel):
    """
    Base model for body/query/params facet schemas.

    All facet models inherit from this to ensure consistent behavior:
    - Frozen after creation (immutable)
    - Whitespace stripped from strings
    - Both alias and field name accepted
    - Unknown fields ignored
    """
    model_config = ConfigDict(
        frozen=True,
        str_strip_whitespace=True,
        populate_by_name=True,
        extra='ignore',
    )


class EmptyFacet(BaseModel):
    """Accepts exactly the empty object."""
    model_config = ConfigDict(
        frozen=True,
        extra='forbid',
    )
