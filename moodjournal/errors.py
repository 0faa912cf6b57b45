"""
Error taxonomy for the Mood Journal service.

Each error carries the HTTP status code the API layer answers with.
"""


class MoodJournalError(Exception):
    """Base class for all domain errors."""

    status_code: int = 500


class ValidationError(MoodJournalError):
    """A required field is missing or invalid."""

    status_code = 400


class Unauthorized(MoodJournalError):
    """The caller's credential is missing or invalid."""

    status_code = 401


class NotFoundError(MoodJournalError):
    """The requested record does not exist for the acting user."""

    status_code = 404


class EmptyListError(MoodJournalError):
    """A content list was read before it was seeded."""
