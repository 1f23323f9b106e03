"""Persistence layer for session state."""

from .session_store import DEFAULT_SESSION_KEY, SessionStore

__all__ = ["DEFAULT_SESSION_KEY", "SessionStore"]
