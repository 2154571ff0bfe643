"""
Shared Pydantic types for facet schemas.

Query strings arrive as raw strings, so these types do the coercion:
- CommaList: "a,b,c" -> ["a", "b", "c"]
- PhoneNumber: E.164-ish phone number, "+" optional
"""

from typing import Annotated, Any, List, Optional

from pydantic import BeforeValidator, StringConstraints


E164_PATTERN = r'^\+?[1-9]\d{1,14}$'


def split_comma_list(v: Any) -> Optional[List[str]]:
    """
    Convert comma-separated string to list.

    Examples:
        "a,b,c" -> ["a", "b", "c"]
        ["a,b", "c"] -> ["a", "b", "c"]
        None -> None
        "" -> None
    """
    if v is None or v == '':
        return None
    if isinstance(v, (list, tuple)):
        items = []
        for item in v:
            items.extend(split_comma_list(item) or [])
        return items or None
    if isinstance(v, str):
        items = [item.strip() for item in v.split(',') if item.strip()]
        return items if items else None
    return [str(v)]


CommaList = Annotated[Optional[List[str]], BeforeValidator(split_comma_list)]

PhoneNumber = Annotated[str, StringConstraints(pattern=E164_PATTERN)]
