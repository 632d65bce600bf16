from __future__ import annotations

from typing import Any, Final, Literal

__all__ = ("Undefined", "UndefinedType")


class _SingletonMeta(type):
    """Metaclass that guarantees exactly one instance per subclass."""

    _cache: dict[type, Any] = {}

    def __call__(cls, *a, **kw):
        if cls not in cls._cache:
            cls._cache[cls] = super().__call__(*a, **kw)
        return cls._cache[cls]


class UndefinedType(metaclass=_SingletonMeta):
    """Sentinel for a member attribute that was never declared.

    Used for field defaults so that a declared default of ``None`` stays
    distinguishable from "no default at all".

    Example:
        >>> FieldRef.of(Point, "x").default is Undefined
        True
    """

    __slots__ = ()

    def __deepcopy__(self, memo):
        return self

    def __copy__(self):
        return self

    def __bool__(self) -> Literal[False]:
        return False

    def __repr__(self) -> Literal["Undefined"]:
        return "Undefined"

    def __reduce__(self):
        """Ensure pickle preservation of singleton identity."""
        return "Undefined"


Undefined: Final = UndefinedType()
"""A member attribute entirely missing from its declaration."""
