"""
Built contracts for API endpoints.

Contracts are plain module-level values; route modules import the ones
they wire in front of their handlers.
"""

from .example import ExampleContract
from .users import CreateUserContract, GetUserContract

__all__ = [
    'ExampleContract',
    'CreateUserContract',
    'GetUserContract',
]
