"""
Mood Journal - a personal mood-journaling service with an HTTP API.

This package provides a small web service where users keep timestamped mood
entries and read rotating motivational content (quotes, tips and facts).
"""

__version__ = "0.1.0"
