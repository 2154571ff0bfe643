"""
Route modules.

Each module exposes ``register(router) -> router``. ROUTE_MODULES is the
explicit registry used by default (ROUTE_DISCOVERY=registry): groups are
registered in the order listed here. With ROUTE_DISCOVERY=glob the same
files are found on disk instead (underscore-prefixed files, like this one,
are never loaded as route modules).
"""

from . import example, health, users

ROUTE_MODULES = {
    'health': health.register,
    'users': users.register,
    'example': example.register,
}

__all__ = ['ROUTE_MODULES']
