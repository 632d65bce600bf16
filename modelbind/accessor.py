# Copyright (c) 2023 - 2025, HaiyangLi <quantocean.li at gmail dot com>
#
# SPDX-License-Identifier: Apache-2.0

"""Uniform get/set access to one bindable property or field.

``BindingMember`` is a two-case variant. ``PropertyMember`` goes through the
wrapped ``property`` object, ``FieldMember`` through plain attribute access.
Binders only rely on the shared contract: ``name``, ``value_type``,
``underlying_member``, ``get_value`` and ``set_value``.

Example:
    >>> member = BindingMember.from_field(FieldRef.of(Person, "nickname"))
    >>> member.set_value(person, "Al")
    >>> member.get_value(person)
    'Al'
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any

from . import config
from ._errors import InvalidArgumentError, InvalidTargetError
from .members import FieldRef, PropertyRef
from .typecheck import check_assignable, type_repr

if TYPE_CHECKING:
    from .discovery import DiscoveryCache

__all__ = ("BindingMember", "FieldMember", "PropertyMember")


class BindingMember(ABC):
    """Accessor over exactly one property or field of a class."""

    __slots__ = ("_member",)
    _ref_type: type = object

    def __init__(self, member: PropertyRef | FieldRef):
        if member is None:
            raise InvalidArgumentError(
                f"{type(self).__name__} requires a member reference, got None",
                details={"argument": "member"},
            )
        if not isinstance(member, self._ref_type):
            raise InvalidArgumentError.from_value(
                member,
                expected=self._ref_type.__name__,
                message=(
                    f"{type(self).__name__} wraps a "
                    f"{self._ref_type.__name__}, got {type(member).__name__}"
                ),
            )
        object.__setattr__(self, "_member", member)

    def __setattr__(self, name: str, value: Any) -> None:
        raise AttributeError(f"{type(self).__name__} is immutable")

    def __delattr__(self, name: str) -> None:
        raise AttributeError(f"{type(self).__name__} is immutable")

    @staticmethod
    def from_property(property_ref: PropertyRef) -> PropertyMember:
        return PropertyMember(property_ref)

    @staticmethod
    def from_field(field_ref: FieldRef) -> FieldMember:
        return FieldMember(field_ref)

    @classmethod
    def collect(
        cls, type_: type, *, cache: DiscoveryCache | None = None
    ) -> tuple[BindingMember, ...]:
        """Same as ``collect_bindable(type_)``."""
        from .discovery import collect_bindable

        return collect_bindable(type_, cache=cache)

    @property
    def name(self) -> str:
        return self._member.name

    @property
    @abstractmethod
    def value_type(self) -> Any: ...

    @property
    def underlying_member(self) -> PropertyRef | FieldRef:
        """The wrapped reference, for callers that need more metadata."""
        return self._member

    def get_value(self, source: Any) -> Any:
        """Read the member from ``source``.

        Raises:
            InvalidTargetError: ``source`` is None or not an owner instance.
        """
        self._check_target(source)
        return self._get(source)

    def set_value(self, destination: Any, new_value: Any) -> None:
        """Write ``new_value`` into the member on ``destination``.

        The value is type checked before anything is written, so a
        mismatch leaves ``destination`` untouched.

        Raises:
            InvalidTargetError: ``destination`` is None or not an owner
                instance.
            TypeMismatchError: ``new_value`` does not fit ``value_type``.
        """
        self._check_target(destination)
        if config.settings.CHECK_ASSIGNMENT:
            check_assignable(new_value, self.value_type, member=self.name)
        self._set(destination, new_value)

    @abstractmethod
    def _get(self, source: Any) -> Any: ...

    @abstractmethod
    def _set(self, destination: Any, new_value: Any) -> None: ...

    def _check_target(self, target: Any) -> None:
        owner = self._member.owner
        if target is None:
            raise InvalidTargetError(
                f"Cannot access '{self.name}' on None",
                details={"member": self.name, "owner": owner.__qualname__},
            )
        if not isinstance(target, owner):
            raise InvalidTargetError(
                f"'{self.name}' belongs to {owner.__qualname__}, "
                f"not {type(target).__qualname__}",
                details={
                    "member": self.name,
                    "owner": owner.__qualname__,
                    "target_type": type(target).__qualname__,
                },
            )

    def __eq__(self, other: object) -> bool:
        if type(other) is not type(self):
            return NotImplemented
        return self._member == other._member

    def __hash__(self) -> int:
        return hash((type(self), self._member))

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}({self._member.owner.__qualname__}."
            f"{self.name}: {type_repr(self.value_type)})"
        )


class PropertyMember(BindingMember):
    __slots__ = ()
    _ref_type = PropertyRef

    @property
    def value_type(self) -> Any:
        return self._member.annotation

    def _get(self, source: Any) -> Any:
        return self._member.prop.__get__(source, type(source))

    def _set(self, destination: Any, new_value: Any) -> None:
        self._member.prop.__set__(destination, new_value)


class FieldMember(BindingMember):
    __slots__ = ()
    _ref_type = FieldRef

    @property
    def value_type(self) -> Any:
        return self._member.annotation

    def _get(self, source: Any) -> Any:
        return getattr(source, self._member.name)

    def _set(self, destination: Any, new_value: Any) -> None:
        setattr(destination, self._member.name, new_value)
