"""Interpretation of `userErrors` in Admin API mutation payloads."""

from typing import Any, Dict, List

from .errors import BuilderError, BuilderNoResultError


def format_user_errors(user_errors: List[Dict[str, Any]]) -> str:
    """Join userErrors as "field.path: message" pairs."""
    parts = []
    for error in user_errors:
        field = error.get("field")
        if isinstance(field, list):
            field = ".".join(str(part) for part in field)
        message = error.get("message", "")
        parts.append(f"{field}: {message}" if field else message)
    return ", ".join(parts)


def unwrap_payload(payload: Dict[str, Any], key: str, action: str, noun: str) -> Any:
    """Return payload[key], or raise if the mutation reported a problem.

    userErrors win over a present object: a non-empty list always raises
    BuilderError. An absent object with no userErrors raises
    BuilderNoResultError.
    """
    user_errors = payload.get("userErrors") or []
    if user_errors:
        raise BuilderError(f"Failed to {action}: {format_user_errors(user_errors)}")

    result = payload.get(key)
    if result is None:
        raise BuilderNoResultError(f"{action.capitalize()} returned no {noun}")
    return result
