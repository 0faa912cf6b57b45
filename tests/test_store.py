"""
Tests for the InMemoryKeyValueStore implementation.

These tests verify the basic key-value operations the repository and
content service rely on.
"""

from moodjournal.store import InMemoryKeyValueStore


class TestInMemoryKeyValueStore:
    """Test suite for InMemoryKeyValueStore functionality."""

    def setup_method(self):
        """Set up a fresh store for each test."""
        self.store = InMemoryKeyValueStore()

    async def test_get_missing_key(self):
        """Test that reading an absent key returns None."""
        assert await self.store.get("missing") is None

    async def test_set_and_get(self):
        """Test that values can be written, read back, and overwritten."""
        await self.store.set("greeting", "hello")
        assert await self.store.get("greeting") == "hello"

        await self.store.set("greeting", "bye")
        assert await self.store.get("greeting") == "bye"

    async def test_delete(self):
        """Test deletion, including deleting an absent key."""
        await self.store.set("key", "value")
        await self.store.delete("key")
        assert await self.store.get("key") is None

        # Deleting again is a no-op
        await self.store.delete("key")

    async def test_get_by_prefix(self):
        """Test that prefix scans only return matching keys."""
        await self.store.set("mood:alice:1", "a1")
        await self.store.set("mood:alice:2", "a2")
        await self.store.set("mood:alicia:1", "x")
        await self.store.set("quotes", "[]")

        values = await self.store.get_by_prefix("mood:alice:")
        assert sorted(values) == ["a1", "a2"]
        assert await self.store.get_by_prefix("nothing:") == []
