"""
Engine Core - Deterministic grid state management and card placement.

The engine is the runtime that:
1. Holds the catalog of card templates
2. Manages the immutable GridState
3. Answers occupancy queries via PositionIndex
4. Applies commands (place, move, toggle_expand, remove)
5. Resolves collisions by displacing neighbours
"""

from .state import (
    Card,
    CardTemplate,
    Catalog,
    GridState,
    default_catalog,
    invariant_violations,
    occupied_slots,
)
from .action import Command, CommandType, CommandPayload, CommandResult, NoOpReason
from .ids import IdGenerator, SequentialIdGenerator, UuidIdGenerator, make_id_generator
from .position_index import PositionIndex
from .engine import PlacementEngine, apply_command

__all__ = [
    "Card",
    "CardTemplate",
    "Catalog",
    "GridState",
    "default_catalog",
    "invariant_violations",
    "occupied_slots",
    "Command",
    "CommandType",
    "CommandPayload",
    "CommandResult",
    "NoOpReason",
    "IdGenerator",
    "SequentialIdGenerator",
    "UuidIdGenerator",
    "make_id_generator",
    "PositionIndex",
    "PlacementEngine",
    "apply_command",
]
