# Copyright (c) 2023 - 2025, HaiyangLi <quantocean.li at gmail dot com>
#
# SPDX-License-Identifier: Apache-2.0

"""Discovery of the bindable members of a class.

A member is bindable when it is public (no leading underscore) and either

- a property with both getter and setter whose getter takes no index
  parameters, or
- a declared instance field that is not read-only.

Properties come before fields. Each group keeps base-first declaration
order. A name is reported once, classified by what attribute lookup on the
class actually resolves to, so the most-derived declaration wins.

Results are not cached unless a ``DiscoveryCache`` is passed in or
``MODELBIND_DISCOVERY_CACHE`` turns on the process-wide default cache.
"""

from __future__ import annotations

import inspect
import logging
import threading
from collections import OrderedDict
from typing import Any

from . import config
from ._errors import InvalidArgumentError
from ._sentinel import Undefined
from .accessor import BindingMember
from .members import (
    FieldRef,
    PropertyRef,
    declared_fields,
    declared_properties,
)

__all__ = (
    "DiscoveryCache",
    "collect_bindable",
    "collect_bindable_of",
    "default_cache",
    "find_member",
)

logger = logging.getLogger(__name__)


class DiscoveryCache:
    """Thread-safe LRU of discovery results keyed by type identity.

    Holds strong references to the cached classes; ``maxsize`` bounds how
    many are kept.
    """

    def __init__(self, maxsize: int = 256):
        if maxsize < 1:
            raise InvalidArgumentError.from_value(
                maxsize,
                expected="int >= 1",
                message="maxsize must be positive",
            )
        self.maxsize = maxsize
        self.hits = 0
        self.misses = 0
        self._entries: OrderedDict[type, tuple[BindingMember, ...]] = (
            OrderedDict()
        )
        self._lock = threading.RLock()

    def get(self, type_: type) -> tuple[BindingMember, ...] | None:
        with self._lock:
            members = self._entries.get(type_)
            if members is None:
                self.misses += 1
                return None
            self._entries.move_to_end(type_)
            self.hits += 1
            return members

    def put(self, type_: type, members: tuple[BindingMember, ...]) -> None:
        with self._lock:
            self._entries[type_] = members
            self._entries.move_to_end(type_)
            while len(self._entries) > self.maxsize:
                evicted, _ = self._entries.popitem(last=False)
                logger.debug("Evicted %s from discovery cache", evicted)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()
            self.hits = 0
            self.misses = 0

    def __contains__(self, type_: object) -> bool:
        with self._lock:
            return type_ in self._entries

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)


_default_cache: DiscoveryCache | None = None
_default_cache_lock = threading.Lock()


def default_cache() -> DiscoveryCache:
    """The process-wide cache used when ``DISCOVERY_CACHE`` is enabled."""
    global _default_cache
    with _default_cache_lock:
        if _default_cache is None:
            size = config.settings.DISCOVERY_CACHE_SIZE
            _default_cache = DiscoveryCache(size)
        return _default_cache


def _is_public(name: str) -> bool:
    return not name.startswith("_")


def _bindable_property(type_: type, ref: PropertyRef) -> bool:
    if not _is_public(ref.name):
        return False
    if inspect.getattr_static(type_, ref.name, Undefined) is not ref.prop:
        logger.debug("%s.%s: property shadowed", type_.__qualname__, ref.name)
        return False
    if not (ref.can_read and ref.can_write):
        logger.debug("%s.%s: not read/write", type_.__qualname__, ref.name)
        return False
    if ref.index_parameters:
        logger.debug(
            "%s.%s: indexed by %s",
            type_.__qualname__,
            ref.name,
            ", ".join(ref.index_parameters),
        )
        return False
    return True


def _bindable_field(type_: type, ref: FieldRef) -> bool:
    if not _is_public(ref.name):
        return False
    if isinstance(inspect.getattr_static(type_, ref.name, None), property):
        return False
    if ref.read_only:
        logger.debug("%s.%s: read-only field", type_.__qualname__, ref.name)
        return False
    return True


def _discover(type_: type) -> tuple[BindingMember, ...]:
    properties = [
        BindingMember.from_property(ref)
        for ref in declared_properties(type_)
        if _bindable_property(type_, ref)
    ]
    fields = [
        BindingMember.from_field(ref)
        for ref in declared_fields(
            type_, include_slots=config.settings.INCLUDE_SLOTS
        )
        if _bindable_field(type_, ref)
    ]
    logger.debug(
        "Discovered %d properties and %d fields on %s",
        len(properties),
        len(fields),
        type_.__qualname__,
    )
    return (*properties, *fields)


def collect_bindable(
    type_: type, *, cache: DiscoveryCache | None = None
) -> tuple[BindingMember, ...]:
    """Return one accessor per bindable member of ``type_``.

    Args:
        type_: The class to inspect.
        cache: Optional cache consulted before inspecting ``type_``.
            Defaults to ``default_cache()`` when the ``DISCOVERY_CACHE``
            setting is on, otherwise nothing is cached.

    Returns:
        Property accessors followed by field accessors; empty when the
        class has no bindable members.

    Raises:
        InvalidArgumentError: ``type_`` is not a class.
    """
    if not isinstance(type_, type):
        raise InvalidArgumentError.from_value(
            type_,
            expected="type",
            message="collect_bindable expects a class",
        )
    if cache is None and config.settings.DISCOVERY_CACHE:
        cache = default_cache()
    if cache is not None:
        if (members := cache.get(type_)) is not None:
            logger.debug("Discovery cache hit for %s", type_.__qualname__)
            return members
    members = _discover(type_)
    if cache is not None:
        cache.put(type_, members)
    return members


def collect_bindable_of(
    instance: Any, *, cache: DiscoveryCache | None = None
) -> tuple[BindingMember, ...]:
    """``collect_bindable`` over the class of ``instance``."""
    if instance is None:
        raise InvalidArgumentError(
            "collect_bindable_of requires an instance, got None",
            details={"argument": "instance"},
        )
    return collect_bindable(type(instance), cache=cache)


def find_member(
    type_: type, name: str, *, cache: DiscoveryCache | None = None
) -> BindingMember | None:
    """The bindable member of ``type_`` called ``name``, if any."""
    for member in collect_bindable(type_, cache=cache):
        if member.name == name:
            return member
    return None
