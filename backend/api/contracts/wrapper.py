"""
@validate_contract decorator - gates a route handler behind a Contract.

Usage:
    @router.get("/users/<id>")
    @validate_contract(GetUserContract)
    def get_user(id):
        validated = get_validated()
        validated.params.id              # UUID
        validated.query.include_profile  # bool, default applied
        ...

The decorator:
1. Collects raw input: {"body": ..., "query": ..., "params": ...}
2. Parses it with the contract's combined schema
3. On success, stores the parsed model on g.validated and calls the handler
4. On failure, returns 400 with every violation and never calls the handler
"""

import functools
import logging
import typing
from typing import Any, Callable, Dict, Type

from flask import g, request
from pydantic import BaseModel
from werkzeug.exceptions import BadRequest

from api.middleware.error_envelope import make_error_response
from .builder import Contract
from .validate import ContractViolation, malformed_body_violation


logger = logging.getLogger('api.contracts')

_SEQUENCE_TYPES = (list, tuple, set, frozenset)


def validate_contract(contract: Contract):
    """
    Decorator that enforces a contract on a route handler.

    Args:
        contract: A built Contract

    Returns:
        Decorated function; the handler reads parsed input via get_validated()
    """
    if not isinstance(contract, Contract):
        raise TypeError(
            f"validate_contract expects a built Contract, got {contract!r} "
            "(did you forget .build()?)"
        )

    def decorator(fn: Callable) -> Callable:
        @functools.wraps(fn)
        def wrapper(*args, **kwargs):
            g.contract = contract
            try:
                raw = _collect_raw_input(contract)
                validated = contract.parse(raw)
            except ContractViolation as e:
                g.contract_rejected = True
                _log_rejection(contract, e)
                return make_error_response(
                    code="INVALID_PARAMS",
                    message=str(e),
                    status_code=400,
                    details=e.details,
                )

            g.validated = validated
            return fn(*args, **kwargs)

        return wrapper
    return decorator


def get_validated() -> BaseModel:
    """
    Parsed input of the current request.

    Raises:
        RuntimeError: if no contract validated this request
    """
    validated = g.get('validated')
    if validated is None:
        raise RuntimeError(
            "No validated input on this request; "
            "is the handler decorated with @validate_contract?"
        )
    return validated


def _collect_raw_input(contract: Contract) -> Dict[str, Any]:
    return {
        "body": _collect_body(),
        "query": _collect_query(contract.query),
        "params": dict(request.view_args or {}),
    }


def _collect_body() -> Any:
    """JSON payload, form fields, or {} when the request has no body."""
    if request.is_json:
        if not request.get_data(cache=True):
            return {}
        try:
            # a JSON ``null`` comes back as None and is left to the schema
            return request.get_json()
        except BadRequest as e:
            raise malformed_body_violation() from e
    if request.form:
        return request.form.to_dict(flat=True)
    return {}


def _collect_query(query_model: Type[BaseModel]) -> Dict[str, Any]:
    """
    Raw query args as a dict.

    Keys declared as list-like on the query facet keep every value
    (?tag=a&tag=b -> ["a", "b"]); all other keys keep the first value.
    """
    multi_keys = set()
    for name, info in query_model.model_fields.items():
        if _is_sequence(info.annotation):
            multi_keys.add(name)
            if info.alias:
                multi_keys.add(info.alias)

    query = {}
    for key, values in request.args.lists():
        query[key] = values if key in multi_keys else values[0]
    return query


def _is_sequence(annotation: Any) -> bool:
    origin = typing.get_origin(annotation)
    if origin in _SEQUENCE_TYPES or annotation in _SEQUENCE_TYPES:
        return True
    if origin is typing.Union or type(annotation).__name__ == 'UnionType':
        return any(_is_sequence(arg) for arg in typing.get_args(annotation))
    return False


def _log_rejection(contract: Contract, violation: ContractViolation) -> None:
    logger.info(
        f"Contract rejected request: contract={contract.name} "
        f"path={request.path} request_id={g.get('request_id')} "
        f"violations={len(violation.violations)}",
        extra={
            "event": "contract_rejected",
            "contract": contract.name,
            "request_id": g.get('request_id'),
            "details": violation.details,
        }
    )
