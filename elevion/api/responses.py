"""
Response envelope helpers.

Successful responses are `{"success": true, "data": ...}`; errors are
rendered by the exception handlers in `elevion.main`.
"""

from typing import Any, Dict, Optional, TypeVar

from elevion.infrastructure.exceptions import NotFoundError


T = TypeVar("T")


def ok(data: Any = None, message: Optional[str] = None) -> Dict[str, Any]:
    body: Dict[str, Any] = {"success": True, "data": data}
    if message:
        body["message"] = message
    return body


def require_found(entity: Optional[T], table: str, key: Any) -> T:
    """Turn a missing row from a getter into a 404."""
    if entity is None:
        raise NotFoundError(f"{table} {key} not found", operation="get", table=table)
    return entity
