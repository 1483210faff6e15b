"""
Core components for MPlayer Bridge

Contains the playback session data model.
"""

from .session import PlaybackSession, SessionStatus

__all__ = ["PlaybackSession", "SessionStatus"]
