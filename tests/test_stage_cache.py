"""
Tests for call_insights/services/stage_cache.py.
"""
import asyncio
from unittest.mock import AsyncMock

import pytest

from call_insights.services.stage_cache import StageNameCache


@pytest.fixture
def fetch_stages():
  return AsyncMock(return_value={1: "Lead in", 2: "Contact made", 3: "Negotiation"})


class TestStageNameCache:

  async def test_miss_fetches_and_returns_name(self, fetch_stages):
    cache = StageNameCache(fetch_stages)
    assert await cache.resolve(3) == "Negotiation"
    fetch_stages.assert_awaited_once()

  async def test_hit_does_not_fetch_again(self, fetch_stages):
    cache = StageNameCache(fetch_stages)
    await cache.resolve(3)
    assert await cache.resolve(3) == "Negotiation"
    assert fetch_stages.await_count == 1

  async def test_refresh_populates_every_stage(self, fetch_stages):
    cache = StageNameCache(fetch_stages)
    await cache.resolve(1)
    assert 2 in cache and 3 in cache
    assert len(cache) == 3
    assert await cache.resolve(2) == "Contact made"
    assert fetch_stages.await_count == 1

  async def test_unknown_stage_returns_empty_string(self, fetch_stages):
    cache = StageNameCache(fetch_stages)
    assert await cache.resolve(99) == ""
    # Still unknown, so the next lookup refreshes again.
    assert await cache.resolve(99) == ""
    assert fetch_stages.await_count == 2

  async def test_cache_grows_and_keeps_old_entries(self):
    fetch = AsyncMock(side_effect=[{1: "A"}, {2: "B"}])
    cache = StageNameCache(fetch)
    assert await cache.resolve(1) == "A"
    assert await cache.resolve(2) == "B"
    assert await cache.resolve(1) == "A"
    assert fetch.await_count == 2

  async def test_fetch_failure_propagates(self):
    cache = StageNameCache(AsyncMock(side_effect=RuntimeError("boom")))
    with pytest.raises(RuntimeError):
      await cache.resolve(1)
    assert len(cache) == 0

  async def test_concurrent_misses_are_harmless(self, fetch_stages):
    cache = StageNameCache(fetch_stages)
    names = await asyncio.gather(cache.resolve(1), cache.resolve(3))
    assert names == ["Lead in", "Negotiation"]
    assert 1 <= fetch_stages.await_count <= 2
    assert len(cache) == 3

  async def test_instances_do_not_share_state(self, fetch_stages):
    first = StageNameCache(fetch_stages)
    await first.resolve(1)
    second = StageNameCache(AsyncMock(return_value={}))
    assert 1 not in second
