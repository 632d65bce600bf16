# Copyright (c) 2023-2025, HaiyangLi <quantocean.li at gmail dot com>
# SPDX-License-Identifier: Apache-2.0

"""Tests for BindingSettings."""

import logging

import pytest
from pydantic import ValidationError

from modelbind import config
from modelbind.config import BindingSettings


class TestBindingSettings:
    """Test defaults and environment overrides."""

    def test_defaults(self, monkeypatch):
        """Test default values with a clean environment."""
        for key in (
            "CHECK_ASSIGNMENT",
            "DISCOVERY_CACHE",
            "DISCOVERY_CACHE_SIZE",
            "INCLUDE_SLOTS",
            "LOG_LEVEL",
        ):
            monkeypatch.delenv(f"MODELBIND_{key}", raising=False)
        s = BindingSettings(_env_file=None)
        assert s.CHECK_ASSIGNMENT is True
        assert s.DISCOVERY_CACHE is False
        assert s.DISCOVERY_CACHE_SIZE == 256
        assert s.INCLUDE_SLOTS is True
        assert s.LOG_LEVEL == "WARNING"
        assert s.log_level == logging.WARNING

    def test_env_override(self, monkeypatch):
        """Test MODELBIND_ prefixed variables override defaults."""
        monkeypatch.setenv("MODELBIND_DISCOVERY_CACHE", "true")
        monkeypatch.setenv("MODELBIND_DISCOVERY_CACHE_SIZE", "8")
        monkeypatch.setenv("MODELBIND_CHECK_ASSIGNMENT", "0")
        s = BindingSettings(_env_file=None)
        assert s.DISCOVERY_CACHE is True
        assert s.DISCOVERY_CACHE_SIZE == 8
        assert s.CHECK_ASSIGNMENT is False

    def test_log_level_normalized(self):
        """Test log level names are upper-cased."""
        s = BindingSettings(_env_file=None, LOG_LEVEL="debug")
        assert s.LOG_LEVEL == "DEBUG"
        assert s.log_level == logging.DEBUG

    def test_invalid_log_level(self):
        """Test unknown log level names are rejected."""
        with pytest.raises(ValidationError):
            BindingSettings(_env_file=None, LOG_LEVEL="chatty")

    def test_invalid_cache_size(self):
        """Test cache size must be positive."""
        with pytest.raises(ValidationError):
            BindingSettings(_env_file=None, DISCOVERY_CACHE_SIZE=0)

    def test_frozen(self):
        """Test settings cannot be mutated in place."""
        s = BindingSettings(_env_file=None)
        with pytest.raises(ValidationError):
            s.CHECK_ASSIGNMENT = False

    def test_module_settings(self):
        """Test the module-level settings object is a valid instance."""
        assert isinstance(config.settings, BindingSettings)
        assert config.settings.DISCOVERY_CACHE_SIZE >= 1
