# Copyright (c) 2023 - 2025, HaiyangLi <quantocean.li at gmail dot com>
#
# SPDX-License-Identifier: Apache-2.0

"""Errors raised by member accessors and discovery.

Every error carries a human readable ``message`` and a ``details`` dict with
the member, owner or offending value involved. Each concrete class also
derives from the builtin a caller would expect (``ValueError`` for bad
arguments, ``TypeError`` for bad targets and values).
"""

from typing import Any, ClassVar

__all__ = (
    "BindingError",
    "InvalidArgumentError",
    "InvalidTargetError",
    "TypeMismatchError",
)


class BindingError(Exception):
    default_message: ClassVar[str] = "Binding error"
    default_status_code: ClassVar[int] = 500
    __slots__ = ("message", "details", "status_code")

    def __init__(
        self,
        message: str | None = None,
        *,
        details: dict[str, Any] | None = None,
        status_code: int | None = None,
        cause: Exception | None = None,
    ):
        self.message = message or self.default_message
        super().__init__(self.message)
        self.details = dict(details or {})
        self.status_code = status_code or self.default_status_code
        if cause is not None:
            self.__cause__ = cause

    @classmethod
    def from_value(
        cls,
        value: Any,
        *,
        expected: str | None = None,
        message: str | None = None,
        cause: Exception | None = None,
        **extra: Any,
    ):
        """Describe an offending ``value`` and what was expected instead."""
        details = {"value": value, "type": type(value).__name__}
        if expected:
            details["expected"] = expected
        details.update(extra)
        return cls(message, details=details, cause=cause)


class InvalidArgumentError(BindingError, ValueError):
    """A required argument was missing or of the wrong kind."""

    default_message = "Invalid argument"
    default_status_code = 400
    __slots__ = ()


class InvalidTargetError(BindingError, TypeError):
    """The object passed to get_value/set_value cannot hold the member."""

    default_message = "Invalid target object"
    default_status_code = 400
    __slots__ = ()


class TypeMismatchError(BindingError, TypeError):
    """A value is not assignable to a member's declared type."""

    default_message = "Value is not assignable to member type"
    default_status_code = 422
    __slots__ = ()
