"""
Session Module - Manages ephemeral grid sessions.

A session represents one open grid:
- Created when a front end opens a grid
- Holds the placement engine and its current state
- Destroyed when the grid is closed or goes stale

Sessions are EPHEMERAL: nothing is written anywhere and the grid
resets when the process restarts.
"""

from .manager import SessionManager, GridSession

__all__ = [
    "SessionManager",
    "GridSession",
]
