"""
Gridslot - Two-column card grid placement engine

A deterministic engine for laying out cards in an unbounded two-column grid.
Cards are dropped in from a catalog, moved, expanded and removed:
- Slot occupancy queries
- Collision resolution and displacement
- Ephemeral grid sessions
- REST API for drag-and-drop front ends
"""

__version__ = "0.1.0"
