# Copyright (c) 2023 - 2025, HaiyangLi <quantocean.li at gmail dot com>
#
# SPDX-License-Identifier: Apache-2.0

"""Reflection handles for the two kinds of bindable members.

Python has no runtime property/field descriptor objects that know their own
name and owner, so this module provides them:

    PropertyRef  -- a ``property`` found on a class, with its name and owner
    FieldRef     -- a declared instance attribute (class annotation,
                    dataclass field, pydantic model field or ``__slots__``)

``declared_properties`` and ``declared_fields`` enumerate both kinds over a
class in base-first declaration order. When a subclass redeclares a name the
most-derived declaration replaces the inherited one but keeps its position.
"""

from __future__ import annotations

import dataclasses
import inspect
import logging
import typing
from dataclasses import dataclass, field
from enum import Enum
from typing import Annotated, Any, ClassVar, Final, get_args, get_origin

from pydantic import BaseModel
from pydantic_core import PydanticUndefined

from ._errors import InvalidArgumentError
from ._sentinel import Undefined

__all__ = (
    "FieldRef",
    "FieldSource",
    "PropertyRef",
    "declared_fields",
    "declared_properties",
)

logger = logging.getLogger(__name__)

_HINT_ERRORS = (NameError, TypeError, AttributeError)


class FieldSource(str, Enum):
    """How a field was declared on its class."""

    ANNOTATION = "annotation"
    DATACLASS = "dataclass"
    PYDANTIC = "pydantic"
    SLOTS = "slots"


def _type_hints(obj: Any) -> dict[str, Any]:
    try:
        return typing.get_type_hints(obj, include_extras=True)
    except _HINT_ERRORS as e:
        # unresolved forward references stay as raw annotations
        logger.debug("Could not resolve type hints of %r: %s", obj, e)
        return dict(getattr(obj, "__annotations__", None) or {})


def _index_parameters(func: Any) -> tuple[str, ...]:
    if func is None:
        return ()
    try:
        sig = inspect.signature(func)
    except (TypeError, ValueError):
        return ()
    positional = [
        p
        for p in sig.parameters.values()
        if p.kind
        in (
            inspect.Parameter.POSITIONAL_ONLY,
            inspect.Parameter.POSITIONAL_OR_KEYWORD,
        )
    ]
    return tuple(p.name for p in positional[1:] if p.default is p.empty)


def _require_class(owner: Any) -> None:
    if not isinstance(owner, type):
        raise InvalidArgumentError.from_value(
            owner, expected="type", message="owner must be a class"
        )


@dataclass(frozen=True, slots=True)
class PropertyRef:
    """A ``property`` declared on (or inherited by) ``owner``."""

    owner: type
    name: str
    prop: property = field(compare=False, repr=False)

    @property
    def can_read(self) -> bool:
        return self.prop.fget is not None

    @property
    def can_write(self) -> bool:
        return self.prop.fset is not None

    @property
    def index_parameters(self) -> tuple[str, ...]:
        """Positional parameters the getter needs beyond the instance."""
        return _index_parameters(self.prop.fget)

    @property
    def annotation(self) -> Any:
        """Declared value type.

        The getter's return hint, else the hint of the setter's value
        parameter, else ``Any``.
        """
        if self.prop.fget is not None:
            hints = _type_hints(self.prop.fget)
            if "return" in hints:
                return _unwrap(hints["return"])[0]
        if self.prop.fset is not None:
            hints = _type_hints(self.prop.fset)
            try:
                params = list(inspect.signature(self.prop.fset).parameters)
            except (TypeError, ValueError):
                params = []
            if len(params) >= 2 and params[1] in hints:
                return _unwrap(hints[params[1]])[0]
        return Any

    @classmethod
    def of(cls, owner: type, name: str) -> PropertyRef:
        """Look up ``name`` the way attribute lookup on ``owner`` does."""
        _require_class(owner)
        attr = inspect.getattr_static(owner, name, Undefined)
        if not isinstance(attr, property):
            raise InvalidArgumentError(
                f"'{name}' is not a property of {owner.__qualname__}",
                details={"owner": owner.__qualname__, "name": name},
            )
        return cls(owner, name, attr)


@dataclass(frozen=True, slots=True)
class FieldRef:
    """A declared instance attribute of ``owner``.

    Only ``owner`` and ``name`` take part in equality and hashing.
    ``metadata`` holds ``Annotated`` extras or pydantic field metadata.
    """

    owner: type
    name: str
    annotation: Any = field(default=Any, compare=False)
    read_only: bool = field(default=False, compare=False)
    source: FieldSource = field(default=FieldSource.ANNOTATION, compare=False)
    default: Any = field(default=Undefined, compare=False, repr=False)
    metadata: tuple[Any, ...] = field(default=(), compare=False, repr=False)

    @classmethod
    def of(cls, owner: type, name: str) -> FieldRef:
        """Look up the declared field ``name`` on ``owner``."""
        _require_class(owner)
        for ref in declared_fields(owner):
            if ref.name == name:
                return ref
        raise InvalidArgumentError(
            f"'{name}' is not a declared field of {owner.__qualname__}",
            details={"owner": owner.__qualname__, "name": name},
        )


def _mro_base_first(owner: type) -> list[type]:
    return [k for k in reversed(owner.__mro__) if k is not object]


def declared_properties(owner: type) -> list[PropertyRef]:
    """All properties visible on ``owner``, public or not."""
    found: dict[str, PropertyRef] = {}
    for klass in _mro_base_first(owner):
        for name, value in vars(klass).items():
            if isinstance(value, property):
                found[name] = PropertyRef(owner, name, value)
    return list(found.values())


def _is_classvar(hint: Any) -> bool:
    if isinstance(hint, str):
        return hint.startswith(("ClassVar", "typing.ClassVar"))
    return hint is ClassVar or get_origin(hint) is ClassVar


def _is_initvar(hint: Any) -> bool:
    return hint is dataclasses.InitVar or isinstance(hint, dataclasses.InitVar)


def _is_final_string(hint: str) -> bool:
    head, _, rest = hint.partition("[")
    head = head.strip()
    if head in ("Annotated", "typing.Annotated"):
        return _is_final_string(rest)
    return head in ("Final", "typing.Final")


def _unwrap(hint: Any) -> tuple[Any, bool, tuple[Any, ...]]:
    """Split a hint into (value type, read-only, Annotated metadata)."""
    if isinstance(hint, str):
        return hint, _is_final_string(hint), ()
    read_only = False
    metadata: tuple[Any, ...] = ()
    while True:
        if get_origin(hint) is Annotated:
            metadata += tuple(hint.__metadata__)
            hint = get_args(hint)[0]
        elif hint is Final or get_origin(hint) is Final:
            read_only = True
            args = get_args(hint)
            hint = args[0] if args else Any
        else:
            return hint, read_only, metadata


def _pydantic_fields(owner: type[BaseModel]) -> list[FieldRef]:
    model_frozen = bool(owner.model_config.get("frozen", False))
    refs = []
    for name, info in owner.model_fields.items():
        default = info.default
        refs.append(
            FieldRef(
                owner,
                name,
                annotation=(
                    Any if info.annotation is None else info.annotation
                ),
                read_only=model_frozen or bool(info.frozen),
                source=FieldSource.PYDANTIC,
                default=Undefined if default is PydanticUndefined else default,
                metadata=tuple(info.metadata),
            )
        )
    return refs


def _dataclass_defaults(klass: type) -> dict[str, Any]:
    if not dataclasses.is_dataclass(klass):
        return {}
    return {
        f.name: (Undefined if f.default is dataclasses.MISSING else f.default)
        for f in dataclasses.fields(klass)
    }


def declared_fields(
    owner: type, *, include_slots: bool = True
) -> list[FieldRef]:
    """All declared instance fields of ``owner``, public or not.

    Pydantic models report ``model_fields``. Other classes are walked
    base-first, collecting annotated names (minus ``ClassVar`` and
    ``InitVar``) and, when ``include_slots`` is set, bare ``__slots__``
    entries. A frozen dataclass makes every field read-only.
    """
    if issubclass(owner, BaseModel):
        return _pydantic_fields(owner)

    hints = _type_hints(owner)
    found: dict[str, FieldRef] = {}
    for klass in _mro_base_first(owner):
        dc_defaults = _dataclass_defaults(klass)
        for name, raw in inspect.get_annotations(klass).items():
            hint = hints.get(name, raw)
            if _is_classvar(hint) or _is_initvar(hint):
                found.pop(name, None)
                continue
            value_type, read_only, metadata = _unwrap(hint)
            if name in dc_defaults:
                source, default = FieldSource.DATACLASS, dc_defaults[name]
            else:
                source = FieldSource.ANNOTATION
                default = vars(klass).get(name, Undefined)
                if inspect.ismemberdescriptor(default):  # slot
                    default = Undefined
            found[name] = FieldRef(
                owner,
                name,
                annotation=value_type,
                read_only=read_only,
                source=source,
                default=default,
                metadata=metadata,
            )
        if not include_slots:
            continue
        slots = vars(klass).get("__slots__", ())
        if isinstance(slots, str):
            slots = (slots,)
        for name in slots:
            if name in ("__dict__", "__weakref__") or name in found:
                continue
            found[name] = FieldRef(owner, name, source=FieldSource.SLOTS)

    params = getattr(owner, "__dataclass_params__", None)
    if params is not None and params.frozen:
        return [
            dataclasses.replace(ref, read_only=True) for ref in found.values()
        ]
    return list(found.values())
