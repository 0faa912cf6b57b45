"""
Tests for the ContentService and tip sampling.

These tests verify the one-time seed bootstrap, random picks, and the
sampling rules for tips.
"""

import json
import random

import pytest

from moodjournal.content import (
    SEED_FACTS,
    SEED_QUOTES,
    SEED_TIPS,
    ContentService,
    sample_tips,
)
from moodjournal.errors import EmptyListError
from moodjournal.models import Tip
from moodjournal.store import InMemoryKeyValueStore


class TestContentService:
    """Test suite for ContentService functionality."""

    def setup_method(self):
        """Set up a fresh store and service for each test."""
        self.store = InMemoryKeyValueStore()
        self.content = ContentService(self.store, rng=random.Random(42))

    async def test_initialize_seeds_lists(self):
        """Test that initialization writes all three lists and their sentinels."""
        await self.content.initialize()

        assert await self.content.quotes() == SEED_QUOTES
        assert await self.content.facts() == SEED_FACTS
        assert await self.content.tips() == SEED_TIPS
        for name in ("quotes", "tips", "facts"):
            assert await self.store.get(f"{name}_initialized") == "true"

    async def test_initialize_is_idempotent(self):
        """Test that a second initialization leaves existing lists alone."""
        await self.content.initialize()
        await self.store.set("quotes", json.dumps(["Custom quote"]))

        await self.content.initialize()

        assert await self.content.quotes() == ["Custom quote"]

    async def test_initialize_only_missing_lists(self):
        """Test that each list is guarded by its own sentinel."""
        await self.store.set("facts", json.dumps(["Custom fact"]))
        await self.store.set("facts_initialized", "true")

        await self.content.initialize()

        assert await self.content.facts() == ["Custom fact"]
        assert await self.content.quotes() == SEED_QUOTES

    async def test_random_quote_and_fact(self):
        """Test that random picks come from the seeded lists."""
        await self.content.initialize()

        for _ in range(10):
            assert await self.content.random_quote() in SEED_QUOTES
            assert await self.content.random_fact() in SEED_FACTS

    async def test_random_quote_before_seeding(self):
        """Test that reading an unseeded list fails."""
        with pytest.raises(EmptyListError):
            await self.content.random_quote()
        with pytest.raises(EmptyListError):
            await self.content.random_fact()

    async def test_sample_tips(self):
        """Test that the service samples three distinct seeded tips."""
        await self.content.initialize()

        tips = await self.content.sample_tips()
        assert len(tips) == 3
        assert all(tip in SEED_TIPS for tip in tips)
        assert len({tip.content for tip in tips}) == 3


class TestSampleTips:
    """Test suite for the sample_tips helper."""

    def test_two_samples_of_eight(self):
        """Test that repeated samples of the seed list each have three tips."""
        assert len(SEED_TIPS) == 8

        first = sample_tips(SEED_TIPS, 3)
        second = sample_tips(SEED_TIPS, 3)

        assert len(first) == 3
        assert len(second) == 3
        assert all(tip in SEED_TIPS for tip in first + second)

    def test_fewer_than_k(self):
        """Test that a short list is returned whole, in some order."""
        tips = [
            Tip(category="Physical", content="Walk"),
            Tip(category="Mental", content="Breathe"),
        ]

        sampled = sample_tips(tips, 3)

        assert len(sampled) == 2
        assert sorted(t.content for t in sampled) == ["Breathe", "Walk"]

    def test_empty_list(self):
        """Test that sampling nothing yields nothing."""
        assert sample_tips([], 3) == []

    def test_order_varies(self):
        """Test that the order is reshuffled across calls."""
        rng = random.Random(7)
        orders = {
            tuple(t.content for t in sample_tips(SEED_TIPS, 8, rng=rng))
            for _ in range(20)
        }
        assert len(orders) > 1
