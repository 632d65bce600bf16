# Copyright (c) 2025, HaiyangLi <quantocean.li at gmail dot com>
#
# SPDX-License-Identifier: Apache-2.0

import logging

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

__all__ = ("BindingSettings", "settings")


class BindingSettings(BaseSettings, frozen=True):
    """Binding settings with environment variable support.

    Every field can be overridden with a ``MODELBIND_`` prefixed environment
    variable, e.g. ``MODELBIND_DISCOVERY_CACHE=true``.
    """

    model_config = SettingsConfigDict(
        env_prefix="MODELBIND_",
        env_file=(".env", ".env.local"),
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    CHECK_ASSIGNMENT: bool = Field(
        default=True,
        description="Validate values against the member type in set_value",
    )
    DISCOVERY_CACHE: bool = Field(
        default=False,
        description="Use the default discovery cache when none is passed",
    )
    DISCOVERY_CACHE_SIZE: int = Field(
        default=256,
        ge=1,
        description="Maximum number of types kept by the default cache",
    )
    INCLUDE_SLOTS: bool = Field(
        default=True,
        description="Discover __slots__ entries as fields",
    )
    LOG_LEVEL: str = "WARNING"

    @field_validator("LOG_LEVEL")
    @classmethod
    def _validate_log_level(cls, value: str) -> str:
        level = value.upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"Unknown log level: {value}")
        return level

    @property
    def log_level(self) -> int:
        return logging.getLevelName(self.LOG_LEVEL)


settings = BindingSettings()
