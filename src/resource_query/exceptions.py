"""Exception hierarchy for resource query resolution.

Two tiers are distinguished: configuration defects of the resource
definition (server side, 5xx) and malformed request parameters (client
side, 4xx). Parameters naming columns, operators or relations outside
an allow-list are not errors at all and never reach this module.
"""

from __future__ import annotations

from typing import Any


class ResourceQueryError(Exception):
    """Root exception for the resource query toolkit."""

    status_code: int = 500

    def to_dict(self) -> dict[str, Any]:
        return {
            "error": self.__class__.__name__,
            "message": str(self),
        }


class ConfigurationError(ResourceQueryError):
    """Raised when a resource definition is invalid (e.g. unknown type tag)."""

    status_code = 500


class MalformedInputError(ResourceQueryError):
    """Raised when request parameters do not follow the expected syntax.

    Carries structured errors: ``{parameter: [messages]}``.
    """

    status_code = 400

    def __init__(
        self,
        message: str,
        errors: dict[str, list[str]] | None = None,
        parameter: str | None = None,
    ) -> None:
        self.message = message
        self.parameter = parameter
        if errors is None:
            errors = {parameter or "__root__": [message]}
        self.errors = errors
        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        return {
            "error": self.__class__.__name__,
            "message": self.message,
            "errors": self.errors,
        }


class InvalidOperatorError(MalformedInputError):
    """Raised when a filter uses an operator missing from the operator table."""

    def __init__(self, operator: str, column: str | None = None) -> None:
        self.operator = operator
        super().__init__(f'Invalid "{operator}" operator', parameter=column)


class InvalidFilterValueError(MalformedInputError):
    """Raised when a filter value has the wrong shape (e.g. ``btw`` arity)."""


class InvalidOrderError(MalformedInputError):
    """Raised when the ``order`` parameter does not follow ``order[i][dir]=field``."""


class InvalidRelationError(MalformedInputError):
    """Raised when the ``with`` parameter is not a list of relation names."""


__all__: list[str] = [
    "ConfigurationError",
    "InvalidFilterValueError",
    "InvalidOperatorError",
    "InvalidOrderError",
    "InvalidRelationError",
    "MalformedInputError",
    "ResourceQueryError",
]
