# Copyright (c) 2023 - 2025, HaiyangLi <quantocean.li at gmail dot com>
#
# SPDX-License-Identifier: Apache-2.0

"""Strict assignability checks backed by pydantic ``TypeAdapter``.

A value is assignable to an annotation when pydantic validates it in strict
mode, i.e. without any coercion: ``"3"`` is not an ``int`` and ``(1, 2)`` is
not a ``list[int]``. Pydantic model types accept instances only, never dicts.
Types pydantic cannot build a schema for are checked with ``isinstance``.
"""

from __future__ import annotations

import functools
import logging
import types
from typing import Any, ForwardRef, Union, get_args, get_origin

from pydantic import BaseModel, ConfigDict, TypeAdapter, ValidationError
from pydantic.errors import (
    PydanticSchemaGenerationError,
    PydanticUndefinedAnnotation,
    PydanticUserError,
)

from ._errors import TypeMismatchError
from ._sentinel import Undefined

__all__ = ("check_assignable", "is_assignable", "type_repr")

logger = logging.getLogger(__name__)

_ARBITRARY = ConfigDict(arbitrary_types_allowed=True)


def type_repr(annotation: Any) -> str:
    if isinstance(annotation, type):
        return annotation.__qualname__
    return repr(annotation).replace("typing.", "")


def _accepts_anything(annotation: Any) -> bool:
    return (
        annotation is Any
        or annotation is object
        or annotation is Undefined
        or isinstance(annotation, (str, ForwardRef))
    )


def _build_adapter(annotation: Any) -> TypeAdapter | None:
    try:
        return TypeAdapter(annotation)
    except PydanticUndefinedAnnotation:
        return None
    except PydanticSchemaGenerationError:
        pass
    try:
        return TypeAdapter(annotation, config=_ARBITRARY)
    except PydanticUserError:
        # models and dataclasses refuse a config; fall back to isinstance
        return None


@functools.lru_cache(maxsize=512)
def _cached_adapter(annotation: Any) -> TypeAdapter | None:
    return _build_adapter(annotation)


def _adapter_for(annotation: Any) -> TypeAdapter | None:
    try:
        return _cached_adapter(annotation)
    except TypeError:  # unhashable annotation
        return _build_adapter(annotation)


class _NotInstance(Exception):
    """Raised by the isinstance checks that run instead of pydantic."""


def _require_instance(value: Any, cls: type) -> None:
    if not isinstance(value, cls):
        raise _NotInstance(
            f"{type(value).__name__} is not an instance of {type_repr(cls)}"
        )


def _is_model(annotation: Any) -> bool:
    return isinstance(annotation, type) and issubclass(annotation, BaseModel)


def _is_union(annotation: Any) -> bool:
    return get_origin(annotation) in (Union, types.UnionType)


def _validate(value: Any, annotation: Any) -> None:
    """Raise if ``value`` does not fit ``annotation``."""
    if _accepts_anything(annotation):
        return
    if _is_model(annotation):
        _require_instance(value, annotation)
        return
    if _is_union(annotation) and any(map(_is_model, get_args(annotation))):
        error: Exception | None = None
        for arm in get_args(annotation):
            try:
                _validate(value, arm)
                return
            except (ValidationError, _NotInstance) as e:
                error = e
        raise error
    adapter = _adapter_for(annotation)
    if adapter is not None:
        try:
            adapter.validate_python(value, strict=True)
        except PydanticUserError as e:
            # annotation still has unresolved forward references
            logger.debug("Skipping check against %r: %s", annotation, e)
    elif isinstance(annotation, type):
        _require_instance(value, annotation)


def is_assignable(value: Any, annotation: Any) -> bool:
    """Whether ``value`` may be stored in a member typed ``annotation``."""
    try:
        _validate(value, annotation)
    except (ValidationError, _NotInstance):
        return False
    return True


def check_assignable(
    value: Any, annotation: Any, *, member: str | None = None
) -> None:
    """Raise ``TypeMismatchError`` unless ``value`` fits ``annotation``.

    The underlying pydantic ``ValidationError`` is chained as the cause.
    """
    try:
        _validate(value, annotation)
    except (ValidationError, _NotInstance) as e:
        expected = type_repr(annotation)
        target = f"'{member}'" if member else "member"
        raise TypeMismatchError.from_value(
            value,
            expected=expected,
            message=(
                f"Cannot assign {type(value).__name__} to {target} "
                f"of type {expected}"
            ),
            cause=e,
            **({"member": member} if member else {}),
        ) from e
