"""
Contract violations.

A contract is parsed in one pass by pydantic, which collects every error
instead of stopping at the first. This module turns those errors into the
violation dicts returned to clients:

    {"field": "params.id", "error": "uuid_parsing", "message": "Input should be a valid UUID, ..."}
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List

from pydantic import ValidationError


@dataclass
class ContractViolation(Exception):
    """Raised when request input does not satisfy a contract."""
    message: str
    violations: List[Dict[str, Any]] = field(default_factory=list)

    def __str__(self):
        return self.message

    @property
    def details(self) -> Dict[str, Any]:
        return {"violations": self.violations}

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dict for JSON serialization."""
        return {
            "message": self.message,
            "details": self.details,
        }


def format_location(loc) -> str:
    """
    Render a pydantic error location as a dotted field path.

    Examples:
        ("params", "id") -> "params.id"
        ("body", "tags", 0) -> "body.tags.0"
        ("body",) -> "body"
    """
    return ".".join(str(part) for part in loc)


def violations_from_error(error: ValidationError) -> List[Dict[str, Any]]:
    """Convert every pydantic error into a violation dict."""
    violations = []
    for err in error.errors(include_url=False):
        violations.append({
            "field": format_location(err["loc"]),
            "error": err["type"],
            "message": err["msg"],
        })
    return violations


def violation_from_validation_error(error: ValidationError) -> ContractViolation:
    violations = violations_from_error(error)
    return ContractViolation(
        message=f"{len(violations)} validation error(s)",
        violations=violations,
    )


def malformed_body_violation() -> ContractViolation:
    """Violation for a request that declares JSON but does not parse as JSON."""
    return ContractViolation(
        message="1 validation error(s)",
        violations=[{
            "field": "body",
            "error": "json_invalid",
            "message": "Request body is not valid JSON",
        }],
    )
