"""
Tests for the MoodRepository implementation.

These tests verify per-user mood CRUD: ordering, validation, partial updates,
not-found handling and isolation between users.
"""

import asyncio

import pytest

from moodjournal.errors import NotFoundError, ValidationError
from moodjournal.repository import MoodRepository
from moodjournal.store import InMemoryKeyValueStore


class TestMoodRepository:
    """Test suite for MoodRepository functionality."""

    def setup_method(self):
        """Set up a fresh repository for each test."""
        self.store = InMemoryKeyValueStore()
        self.repo = MoodRepository(self.store)

    async def test_create_and_list(self):
        """Test that a created mood is returned by list."""
        mood = await self.repo.create("alice", "😄", "Great day", "Work")

        assert mood.id
        assert mood.user_id == "alice"
        assert mood.emoji == "😄"
        assert mood.reason == "Great day"
        assert mood.tag == "Work"
        assert mood.created_at.tzinfo is not None

        moods = await self.repo.list("alice")
        assert moods == [mood]

    async def test_create_stores_under_user_key(self):
        """Test that entries are namespaced by user id."""
        mood = await self.repo.create("alice", "😄", "Great day")
        assert list(self.store._data) == [f"mood:alice:{mood.id}"]

    async def test_tag_defaults_to_empty(self):
        """Test that an omitted tag is stored as an empty string."""
        mood = await self.repo.create("alice", "😐", "Fine")
        assert mood.tag == ""

    async def test_list_most_recent_first(self):
        """Test that list orders entries by created_at descending."""
        first = await self.repo.create("alice", "😢", "Rainy morning")
        await asyncio.sleep(0.01)
        second = await self.repo.create("alice", "🙂", "Coffee helped")
        await asyncio.sleep(0.01)
        third = await self.repo.create("alice", "😄", "Great evening")

        moods = await self.repo.list("alice")
        assert [m.id for m in moods] == [third.id, second.id, first.id]

    async def test_list_empty(self):
        """Test that a user without moods gets an empty list."""
        assert await self.repo.list("nobody") == []

    @pytest.mark.parametrize(
        ("emoji", "reason"), [("", "Great day"), ("😄", ""), ("", "")]
    )
    async def test_create_requires_emoji_and_reason(self, emoji, reason):
        """Test that missing emoji or reason fails and persists nothing."""
        with pytest.raises(ValidationError):
            await self.repo.create("alice", emoji, reason)

        assert list(self.store._data) == []

    async def test_update_only_tag(self):
        """Test that a tag-only update leaves everything else unchanged."""
        mood = await self.repo.create("alice", "😄", "Great day", "Work")

        updated = await self.repo.update("alice", mood.id, tag="Family")

        assert updated.tag == "Family"
        assert updated.emoji == mood.emoji
        assert updated.reason == mood.reason
        assert updated.created_at == mood.created_at
        assert updated.id == mood.id

        stored = await self.repo.get("alice", mood.id)
        assert stored == updated

    async def test_update_clears_tag(self):
        """Test that an explicit empty tag replaces the previous one."""
        mood = await self.repo.create("alice", "😄", "Great day", "Work")
        updated = await self.repo.update("alice", mood.id, tag="")
        assert updated.tag == ""

    async def test_update_rejects_empty_reason(self):
        """Test that a required field cannot be blanked by an update."""
        mood = await self.repo.create("alice", "😄", "Great day")

        with pytest.raises(ValidationError):
            await self.repo.update("alice", mood.id, reason="")

        assert (await self.repo.get("alice", mood.id)).reason == "Great day"

    async def test_update_missing(self):
        """Test that updating an unknown id fails and leaves the store alone."""
        await self.repo.create("alice", "😄", "Great day")
        before = list(self.store._data)

        with pytest.raises(NotFoundError):
            await self.repo.update("alice", "does-not-exist", tag="x")

        assert list(self.store._data) == before

    async def test_delete(self):
        """Test that delete removes the entry and a second delete fails."""
        keep = await self.repo.create("alice", "🙂", "Keep me")
        gone = await self.repo.create("alice", "😢", "Delete me")

        await self.repo.delete("alice", gone.id)

        moods = await self.repo.list("alice")
        assert [m.id for m in moods] == [keep.id]

        with pytest.raises(NotFoundError):
            await self.repo.delete("alice", gone.id)

    async def test_users_are_isolated(self):
        """Test that one user's entries are invisible to another."""
        mood = await self.repo.create("alice", "😄", "Great day")

        assert await self.repo.list("bob") == []

        with pytest.raises(NotFoundError):
            await self.repo.get("bob", mood.id)
        with pytest.raises(NotFoundError):
            await self.repo.update("bob", mood.id, tag="mine now")
        with pytest.raises(NotFoundError):
            await self.repo.delete("bob", mood.id)

        assert await self.repo.list("alice") == [mood]
