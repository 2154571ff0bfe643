"""
Contracts for the /users endpoints.
"""

from ..builder import create_contract
from ..pydantic_models.users import CreateUserBody, UserLookupQuery, UserPathParams


GetUserContract = (
    create_contract("get_user")
    .with_params(UserPathParams)
    .with_query(UserLookupQuery)
    .build()
)

CreateUserContract = (
    create_contract("create_user")
    .with_body(CreateUserBody)
    .build()
)
