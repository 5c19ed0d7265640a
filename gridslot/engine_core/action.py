"""
Command System - Commands, payloads, and results.

Commands are the only way the grid changes:
1. place - drop a catalog template onto a slot
2. move - drag an existing card to another slot
3. toggle_expand - switch a card between single and double width
4. remove - drop a card on the trash zone

Input handlers validate raw UI events into Command values; the engine
applies them and returns a CommandResult.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .state import GridState


class CommandType(Enum):
    """Types of grid commands."""
    PLACE = "place"
    MOVE = "move"
    TOGGLE_EXPAND = "toggle_expand"
    REMOVE = "remove"
    RESET = "reset"


class NoOpReason(Enum):
    """Why a command left the grid unchanged."""
    UNKNOWN_TEMPLATE = "unknown_template"
    UNKNOWN_CARD = "unknown_card"
    INVALID_SLOT = "invalid_slot"
    SAME_POSITION = "same_position"
    MISALIGNED_DOUBLE = "misaligned_double"
    INVARIANT_VIOLATION = "invariant_violation"


@dataclass(frozen=True)
class CommandPayload:
    """
    Parameters of a command.

    Different command types use different fields.
    This is a generic container; validation happens in the engine.
    """
    card_id: str | None = None
    template_type: str | None = None
    target_slot: int | None = None


@dataclass(frozen=True)
class Command:
    """A complete command to be applied to the grid."""
    command_type: CommandType
    payload: CommandPayload = field(default_factory=CommandPayload)

    @classmethod
    def place(cls, template_type: str, target_slot: int) -> Command:
        """Factory for place command."""
        return cls(
            command_type=CommandType.PLACE,
            payload=CommandPayload(template_type=template_type, target_slot=target_slot),
        )

    @classmethod
    def move(cls, card_id: str, target_slot: int) -> Command:
        """Factory for move command."""
        return cls(
            command_type=CommandType.MOVE,
            payload=CommandPayload(card_id=card_id, target_slot=target_slot),
        )

    @classmethod
    def toggle_expand(cls, card_id: str) -> Command:
        """Factory for expand/collapse command."""
        return cls(
            command_type=CommandType.TOGGLE_EXPAND,
            payload=CommandPayload(card_id=card_id),
        )

    @classmethod
    def remove(cls, card_id: str) -> Command:
        """Factory for remove command."""
        return cls(
            command_type=CommandType.REMOVE,
            payload=CommandPayload(card_id=card_id),
        )

    @classmethod
    def reset(cls) -> Command:
        return cls(command_type=CommandType.RESET)


@dataclass
class CommandResult:
    """
    Result of applying a command.

    Contains:
    - Whether the grid changed
    - The resulting state (the unchanged input for a no-op)
    - Why nothing happened (for a no-op)
    - Side effects (for UI updates)
    """
    applied: bool
    state: GridState
    reason: NoOpReason | None = None
    detail: str | None = None

    # For UI/presentation
    changes: list[str] = field(default_factory=list)  # Human-readable changes
    displaced: list[str] = field(default_factory=list)  # Card ids relocated to make room
    card_id: str | None = None  # Card the command acted on (new id for place)

    @classmethod
    def no_op(cls, state: GridState, reason: NoOpReason, detail: str | None = None) -> CommandResult:
        """Create a no-op result."""
        return cls(applied=False, state=state, reason=reason, detail=detail)

    @classmethod
    def applied_with_state(
        cls,
        state: GridState,
        card_id: str | None = None,
        changes: list[str] | None = None,
        displaced: list[str] | None = None,
    ) -> CommandResult:
        """Create a result for a command that changed the grid."""
        return cls(
            applied=True,
            state=state,
            card_id=card_id,
            changes=changes or [],
            displaced=displaced or [],
        )
