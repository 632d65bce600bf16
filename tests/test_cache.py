# Copyright (c) 2023-2025, HaiyangLi <quantocean.li at gmail dot com>
# SPDX-License-Identifier: Apache-2.0

"""Tests for the opt-in discovery cache."""

from concurrent.futures import ThreadPoolExecutor

import pytest
from conftest import Address, Person, Point, Sample

from modelbind import (
    DiscoveryCache,
    InvalidArgumentError,
    collect_bindable,
    default_cache,
)


class TestDiscoveryCache:
    """Test the explicit LRU cache."""

    def test_hit_returns_same_result(self):
        """Test a second lookup is served from the cache."""
        cache = DiscoveryCache()
        first = collect_bindable(Person, cache=cache)
        second = collect_bindable(Person, cache=cache)
        assert first is second
        assert Person in cache
        assert cache.hits == 1
        assert cache.misses == 1

    def test_lru_eviction(self):
        """Test the least recently used type is evicted first."""
        cache = DiscoveryCache(maxsize=2)
        collect_bindable(Person, cache=cache)
        collect_bindable(Sample, cache=cache)
        collect_bindable(Person, cache=cache)
        collect_bindable(Address, cache=cache)
        assert len(cache) == 2
        assert Person in cache
        assert Sample not in cache

    def test_clear(self):
        """Test clearing resets entries and counters."""
        cache = DiscoveryCache()
        collect_bindable(Person, cache=cache)
        cache.clear()
        assert len(cache) == 0
        assert cache.hits == cache.misses == 0

    def test_invalid_size(self):
        """Test the cache needs room for at least one type."""
        with pytest.raises(InvalidArgumentError):
            DiscoveryCache(maxsize=0)

    def test_concurrent_access(self):
        """Test concurrent discovery through one cache."""
        cache = DiscoveryCache(maxsize=2)
        types = [Person, Sample, Address, Point] * 25
        with ThreadPoolExecutor(max_workers=8) as pool:
            results = list(
                pool.map(lambda t: collect_bindable(t, cache=cache), types)
            )
        assert results[0] == collect_bindable(Person)
        assert len(cache) == 2


class TestDefaultCache:
    """Test the settings-driven default cache."""

    def test_off_by_default(self, fresh_default_cache, override_settings):
        """Test nothing is cached unless enabled."""
        override_settings(DISCOVERY_CACHE=False)
        collect_bindable(Person)
        assert Person not in default_cache()

    def test_enabled_by_setting(self, fresh_default_cache, override_settings):
        """Test DISCOVERY_CACHE routes discovery through the default cache."""
        override_settings(DISCOVERY_CACHE=True, DISCOVERY_CACHE_SIZE=4)
        first = collect_bindable(Person)
        assert collect_bindable(Person) is first
        cache = default_cache()
        assert cache.maxsize == 4
        assert Person in cache

    def test_explicit_cache_wins(self, fresh_default_cache, override_settings):
        """Test a passed cache is used instead of the default one."""
        override_settings(DISCOVERY_CACHE=True)
        mine = DiscoveryCache()
        collect_bindable(Person, cache=mine)
        assert Person in mine
        assert Person not in default_cache()
