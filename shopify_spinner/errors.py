"""
Errors — Exception types raised across the spinner.

Row-level CSV problems are not exceptions: the product parser collects them
as strings. Everything else that can stop an operation derives from
SpinnerError so the CLI can turn it into a message and exit code.
"""

from typing import List, Optional


class SpinnerError(Exception):
    """Base class for all spinner errors."""


class ConfigError(SpinnerError):
    """A config file could not be found, parsed, or validated.

    Attributes:
        kind: One of NOT_FOUND, PARSE_ERROR, VALIDATION_ERROR.
        errors: Every problem found, as "path: message" strings.
    """

    NOT_FOUND = "not_found"
    PARSE_ERROR = "parse_error"
    VALIDATION_ERROR = "validation_error"

    def __init__(self, kind: str, message: str, errors: Optional[List[str]] = None):
        self.kind = kind
        self.errors = errors if errors is not None else [message]
        super().__init__(message)


class ApiError(SpinnerError):
    """A GraphQL request to the Shopify Admin API failed.

    Attributes:
        kind: One of HTTP, GRAPHQL, NO_DATA.
        status: HTTP status code (HTTP kind only).
        body: Raw response body text (HTTP kind only).
        messages: GraphQL error messages (GRAPHQL kind only).
    """

    HTTP = "http"
    GRAPHQL = "graphql"
    NO_DATA = "no_data"

    def __init__(
        self,
        kind: str,
        message: str,
        status: Optional[int] = None,
        body: Optional[str] = None,
        messages: Optional[List[str]] = None,
    ):
        self.kind = kind
        self.status = status
        self.body = body
        self.messages = messages or []
        super().__init__(message)

    @classmethod
    def http(cls, status: int, body: str) -> "ApiError":
        return cls(cls.HTTP, f"Shopify API error ({status}): {body}", status=status, body=body)

    @classmethod
    def graphql(cls, messages: List[str]) -> "ApiError":
        return cls(cls.GRAPHQL, f"GraphQL errors: {', '.join(messages)}", messages=messages)

    @classmethod
    def no_data(cls) -> "ApiError":
        return cls(cls.NO_DATA, "No data returned from Shopify API")


class BuilderError(SpinnerError):
    """A mutation returned userErrors, or a required resource was missing."""


class BuilderNoResultError(BuilderError):
    """A mutation returned neither userErrors nor its primary object."""


class StateError(SpinnerError):
    """An operation referenced a store that has no initialized build state."""


class OAuthError(SpinnerError):
    """The OAuth token exchange with Shopify failed."""

    def __init__(self, message: str, status: Optional[int] = None, body: Optional[str] = None):
        self.status = status
        self.body = body
        super().__init__(message)
