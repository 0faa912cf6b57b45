"""
Mood repository for the Mood Journal service.

Maps an authenticated user and a mood id to a stored mood entry. Every key
this module reads or writes embeds the acting user's id
(``mood:<user_id>:<mood_id>``), which is the only access-control guarantee:
no operation can reach another user's entries.
"""

import logging
import uuid
from datetime import datetime, timezone

from .errors import NotFoundError, ValidationError
from .models import MoodEntry
from .store import KeyValueStore

logger = logging.getLogger(__name__)


def mood_key(user_id: str, mood_id: str) -> str:
    return f"mood:{user_id}:{mood_id}"


def user_prefix(user_id: str) -> str:
    return f"mood:{user_id}:"


class MoodRepository:
    """Per-user CRUD over mood entries held in a key-value store."""

    def __init__(self, store: KeyValueStore) -> None:
        self._store = store

    async def create(
        self, user_id: str, emoji: str, reason: str, tag: str | None = None
    ) -> MoodEntry:
        """
        Create and persist a new mood entry.

        Args:
            user_id: Owner of the new entry
            emoji: Emoji describing the mood (required)
            reason: Why the user feels this way (required)
            tag: Optional category label, stored as "" when omitted

        Returns:
            The stored MoodEntry with a fresh id and creation timestamp

        Raises:
            ValidationError: If emoji or reason is empty
        """
        if not emoji or not reason:
            raise ValidationError("Emoji and reason are required")

        mood = MoodEntry(
            id=str(uuid.uuid4()),
            user_id=user_id,
            emoji=emoji,
            reason=reason,
            tag=tag or "",
            created_at=datetime.now(timezone.utc),
        )
        await self._save(mood)
        logger.info("Created mood %s for user %s", mood.id, user_id)
        return mood

    async def list(self, user_id: str) -> list[MoodEntry]:
        """Return all of the user's entries, most recent first."""
        values = await self._store.get_by_prefix(user_prefix(user_id))
        moods = [MoodEntry.model_validate_json(value) for value in values]
        moods.sort(key=lambda mood: mood.created_at, reverse=True)
        return moods

    async def get(self, user_id: str, mood_id: str) -> MoodEntry:
        """Return one entry, raising NotFoundError if the user has no such id."""
        value = await self._store.get(mood_key(user_id, mood_id))
        if value is None:
            raise NotFoundError("Mood not found")
        return MoodEntry.model_validate_json(value)

    async def update(
        self,
        user_id: str,
        mood_id: str,
        emoji: str | None = None,
        reason: str | None = None,
        tag: str | None = None,
    ) -> MoodEntry:
        """
        Partially update an entry.

        Fields passed as None keep their previous values. The id, owner and
        creation timestamp never change.

        Raises:
            NotFoundError: If the user has no entry with this id
            ValidationError: If emoji or reason is given but empty
        """
        existing = await self.get(user_id, mood_id)
        if emoji == "" or reason == "":
            raise ValidationError("Emoji and reason cannot be empty")

        changes = {
            name: value
            for name, value in (("emoji", emoji), ("reason", reason), ("tag", tag))
            if value is not None
        }
        mood = existing.model_copy(update=changes)
        await self._save(mood)
        logger.info("Updated mood %s for user %s (%s)", mood_id, user_id, ", ".join(changes))
        return mood

    async def delete(self, user_id: str, mood_id: str) -> None:
        """
        Permanently remove an entry.

        Raises:
            NotFoundError: If the user has no entry with this id
        """
        key = mood_key(user_id, mood_id)
        if await self._store.get(key) is None:
            raise NotFoundError("Mood not found")
        await self._store.delete(key)
        logger.info("Deleted mood %s for user %s", mood_id, user_id)

    async def _save(self, mood: MoodEntry) -> None:
        await self._store.set(mood_key(mood.user_id, mood.id), mood.model_dump_json())
