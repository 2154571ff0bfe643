"""
Contract enforcement package.

Provides the contract builder, facet schemas and the @validate_contract decorator.
"""

from .builder import (
    FACETS,
    Contract,
    ContractBuilder,
    ContractDefinitionError,
    create_contract,
)
from .validate import ContractViolation
from .wrapper import get_validated, validate_contract

__all__ = [
    'FACETS',
    'Contract',
    'ContractBuilder',
    'ContractDefinitionError',
    'create_contract',
    'ContractViolation',
    'get_validated',
    'validate_contract',
]
