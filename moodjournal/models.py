"""
Shared data models for the Mood Journal service.

This module defines the core domain models used across multiple layers
of the application (repository, content service, API, CLI).
"""

from datetime import datetime

from pydantic import BaseModel, Field


class MoodEntry(BaseModel):
    """A user's timestamped mood journal record."""

    id: str = Field(..., description="Globally unique mood identifier")
    user_id: str = Field(..., description="Identifier of the owning user")
    emoji: str = Field(..., description="Emoji describing the mood")
    reason: str = Field(..., description="Free-text reason for the mood")
    tag: str = Field("", description="Optional user-chosen category label")
    created_at: datetime = Field(..., description="When the entry was created")


class Tip(BaseModel):
    """A categorized wellbeing tip."""

    category: str = Field(..., description="Short category label")
    content: str = Field(..., description="The tip text")


class User(BaseModel):
    """Public view of an account held by the auth provider."""

    id: str
    email: str
    name: str = ""
    created_at: datetime
    email_confirmed_at: datetime | None = None
