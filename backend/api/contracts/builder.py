"""
Contract builder - declarative request contracts for route handlers.

A contract bundles three facet schemas (body, query, path params) and
composes them into one pydantic model whose top-level fields are
``body``, ``query`` and ``params``.

Usage:
    GetUserContract = (
        create_contract("get_user")
        .with_params(UserPathParams)
        .with_query(UserLookupQuery)
        .build()
    )

Builders are immutable: every ``with_*`` call returns a new builder with one
facet replaced, so a builder can be shared as a starting point. Facets that
are never set default to EmptyFacet, which accepts only ``{}``.
"""

import dataclasses
import re
from dataclasses import dataclass, field
from typing import Any, Mapping, Optional, Type

from pydantic import BaseModel, ConfigDict, RootModel, ValidationError, create_model

from .pydantic_models.base import EmptyFacet
from .validate import violation_from_validation_error


FACETS = ('body', 'query', 'params')


class ContractDefinitionError(TypeError):
    """Raised when a facet is given something that is not an object schema."""


def _check_facet(facet: str, schema: Any) -> Type[BaseModel]:
    if not (isinstance(schema, type) and issubclass(schema, BaseModel)):
        raise ContractDefinitionError(
            f"{facet} schema must be a pydantic BaseModel subclass, "
            f"got {schema!r}"
        )
    if issubclass(schema, RootModel):
        # RootModel wraps scalars/lists; facets must be object-shaped
        raise ContractDefinitionError(
            f"{facet} schema must describe an object, "
            f"got root model {schema.__name__}"
        )
    return schema


def _model_name(name: Optional[str]) -> str:
    if not name:
        return "RequestContract"
    words = re.split(r'[^0-9a-zA-Z]+', name)
    return "".join(w[:1].upper() + w[1:] for w in words if w) + "Contract"


@dataclass(frozen=True)
class Contract:
    """
    Immutable triple of facet schemas plus their combined schema.

    Equality compares the facets only; two contracts with the same facets
    validate identically.
    """
    body: Type[BaseModel]
    query: Type[BaseModel]
    params: Type[BaseModel]
    name: Optional[str] = field(default=None, compare=False)
    schema: Type[BaseModel] = field(default=None, compare=False, repr=False)

    def __post_init__(self):
        for facet in FACETS:
            _check_facet(facet, getattr(self, facet))
        if self.schema is None:
            combined = create_model(
                _model_name(self.name),
                __config__=ConfigDict(frozen=True, extra='forbid'),
                body=(self.body, ...),
                query=(self.query, ...),
                params=(self.params, ...),
            )
            object.__setattr__(self, 'schema', combined)

    def parse(self, raw: Mapping[str, Any]) -> BaseModel:
        """
        Validate raw ``{"body", "query", "params"}`` input.

        Returns the parsed model (defaults and coercions applied).

        Raises:
            ContractViolation: listing every violation found
        """
        try:
            return self.schema.model_validate(dict(raw))
        except ValidationError as e:
            raise violation_from_validation_error(e) from e


@dataclass(frozen=True)
class ContractBuilder:
    """Fluent, immutable constructor for Contracts."""
    body: Type[BaseModel] = EmptyFacet
    query: Type[BaseModel] = EmptyFacet
    params: Type[BaseModel] = EmptyFacet
    name: Optional[str] = None

    def __post_init__(self):
        for facet in FACETS:
            _check_facet(facet, getattr(self, facet))

    def with_body(self, schema: Type[BaseModel]) -> 'ContractBuilder':
        """Body schema (POST, PUT, PATCH requests)."""
        return dataclasses.replace(self, body=_check_facet('body', schema))

    def with_query(self, schema: Type[BaseModel]) -> 'ContractBuilder':
        """Query string schema, e.g. GET /users/?name=John&age=30"""
        return dataclasses.replace(self, query=_check_facet('query', schema))

    def with_params(self, schema: Type[BaseModel]) -> 'ContractBuilder':
        """Path params schema, e.g. GET /users/<id>"""
        return dataclasses.replace(self, params=_check_facet('params', schema))

    def named(self, name: str) -> 'ContractBuilder':
        return dataclasses.replace(self, name=name)

    def build(self) -> Contract:
        return Contract(
            body=self.body,
            query=self.query,
            params=self.params,
            name=self.name,
        )


def create_contract(name: Optional[str] = None) -> ContractBuilder:
    """Start a new contract with every facet set to EmptyFacet."""
    return ContractBuilder(name=name)
