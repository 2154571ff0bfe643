"""
API package - contract enforcement and route assembly.

This package provides:
- Contract builder for request schemas (body, query, path params)
- @validate_contract decorator for route enforcement
- Route loader (file discovery or explicit registry)
- Global middleware (request_id, error_envelope, request_logging)
"""

from .contracts import create_contract, get_validated, validate_contract

__all__ = ['create_contract', 'get_validated', 'validate_contract']
