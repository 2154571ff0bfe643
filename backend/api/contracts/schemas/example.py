"""
Contract for the /test example endpoint (query-only).
"""

from ..builder import create_contract
from ..pydantic_models.example import ExampleQuery


ExampleContract = create_contract("example").with_query(ExampleQuery).build()
