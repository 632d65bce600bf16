# Copyright (c) 2023-2025, HaiyangLi <quantocean.li at gmail dot com>
# SPDX-License-Identifier: Apache-2.0

from dataclasses import dataclass, field
from typing import ClassVar, Final

import pytest
from pydantic import BaseModel, ConfigDict, Field, PrivateAttr

from modelbind import config, discovery


class Person:
    """Two read/write properties, one indexed property, one read-only field."""

    nickname: str = ""
    id: Final[str]

    def __init__(self, id: str = "p-1", name: str = "", age: int = 0):
        self.id = id
        self._name = name
        self._age = age
        self._tags: list[str] = []

    @property
    def name(self) -> str:
        return self._name

    @name.setter
    def name(self, value: str) -> None:
        self._name = value

    @property
    def age(self) -> int:
        return self._age

    @age.setter
    def age(self, value: int) -> None:
        self._age = value

    def _get_tag(self, index: int) -> str:
        return self._tags[index]

    def _set_tag(self, index: int, value: str) -> None:
        self._tags[index] = value

    tags = property(_get_tag, _set_tag)


class Sample:
    """Properties {a: rw, b: read-only, c: indexed}, fields {d, e: read-only}."""

    d: int = 0
    e: Final[int] = 1

    def __init__(self):
        self._a = 0
        self._c = {}

    @property
    def a(self) -> int:
        return self._a

    @a.setter
    def a(self, value: int) -> None:
        self._a = value

    @property
    def b(self) -> int:
        return 2

    def _get_c(self, key: str) -> int:
        return self._c[key]

    def _set_c(self, key: str, value: int) -> None:
        self._c[key] = value

    c = property(_get_c, _set_c)


class Empty:
    LIMIT: ClassVar[int] = 10

    def __init__(self):
        self._hidden = 1

    @property
    def computed(self) -> int:
        return 1


@dataclass
class Address:
    street: str
    city: str = "Springfield"
    zip_code: str | None = None
    lines: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class Coordinates:
    lat: float
    lon: float


class Account(BaseModel):
    model_config = ConfigDict(validate_assignment=True)

    owner: str
    balance: float = 0.0
    id: str = Field(default="acc-1", frozen=True)
    _label: str = PrivateAttr(default="")

    @property
    def label(self) -> str:
        return self._label or self.owner

    @label.setter
    def label(self, value: str) -> None:
        self._label = value


class Point:
    __slots__ = ("x", "y")

    def __init__(self, x=0, y=0):
        self.x = x
        self.y = y


@pytest.fixture
def person():
    return Person(name="Ada", age=36)


@pytest.fixture
def override_settings(monkeypatch):
    """Swap the settings singleton for a copy with the given updates."""

    def _override(**updates):
        new = config.settings.model_copy(update=updates)
        monkeypatch.setattr(config, "settings", new)
        return new

    return _override


@pytest.fixture
def fresh_default_cache(monkeypatch):
    monkeypatch.setattr(discovery, "_default_cache", None)
    yield
