"""
Placement Engine - Applies commands to the grid.

The engine is the single point of state change.
All grid changes must go through apply().

Design principles:
- Every command computes a complete new GridState from the previous one
- Commands are total: invalid input is a documented no-op, never an exception
- Collisions are resolved in one displacement pass (no cascading chains)
- Invariants are re-checked before a new state is committed
"""

from __future__ import annotations
from dataclasses import dataclass, field
from functools import partial
from typing import Callable, Sequence

import structlog

from .state import (
    Card, Catalog, GridState, default_catalog, invariant_violations, occupied_slots,
    SINGLE_WIDTH, DOUBLE_WIDTH,
)
from .action import Command, CommandPayload, CommandResult, CommandType, NoOpReason
from .ids import IdGenerator, SequentialIdGenerator
from .position_index import PositionIndex


logger = structlog.get_logger(__name__)

# Attempts at drawing a fresh id before giving up on a place command
MAX_ID_ATTEMPTS = 1000


def _replace_card(cards: Sequence[Card], card: Card) -> list[Card]:
    """Swap in the card with the same id, keeping collection order."""
    return [card if c.card_id == card.card_id else c for c in cards]


def _relocate(cards: Sequence[Card], card: Card, start_slot: int) -> tuple[list[Card], int]:
    """
    Move a displaced card to the nearest free spot from start_slot.

    Double-width cards look for an aligned free pair.
    Returns (new cards, new position).
    """
    index = PositionIndex(cards)
    if card.is_expanded:
        position = index.find_next_free_double_slot(start_slot, exclude_id=card.card_id)
    else:
        position = index.find_next_free(start_slot, exclude_id=card.card_id)
    return _replace_card(cards, card.moved_to(position)), position


@dataclass
class PlacementEngine:
    """
    Owns the live grid and applies commands to it.

    Usage:
        engine = PlacementEngine()
        result = engine.place("Card 1", 0)
        result = engine.toggle_expand(result.card_id)
        engine.cards  # tuple of Card values for the renderer
    """
    catalog: Catalog = field(default_factory=default_catalog)
    id_generator: IdGenerator = field(default_factory=SequentialIdGenerator)
    state: GridState = field(default_factory=GridState)

    @property
    def cards(self) -> tuple[Card, ...]:
        return self.state.cards

    # =========================================================================
    # Command interface
    # =========================================================================

    def place(
        self,
        template_type: str,
        target_slot: int,
        id_generator: IdGenerator | None = None,
    ) -> CommandResult:
        return self.apply(Command.place(template_type, target_slot), id_generator=id_generator)

    def move(self, card_id: str, target_slot: int) -> CommandResult:
        return self.apply(Command.move(card_id, target_slot))

    def toggle_expand(self, card_id: str) -> CommandResult:
        return self.apply(Command.toggle_expand(card_id))

    def remove(self, card_id: str) -> CommandResult:
        return self.apply(Command.remove(card_id))

    def reset(self) -> CommandResult:
        return self.apply(Command.reset())

    def apply(self, command: Command, id_generator: IdGenerator | None = None) -> CommandResult:
        """
        Apply a command to the current grid.

        Returns CommandResult with the new state, or the unchanged
        state and a NoOpReason.
        """
        handler = self._get_handler(command.command_type, id_generator or self.id_generator)
        result = handler(self.state, command.payload)
        return self._commit(command, result)

    def _get_handler(
        self,
        command_type: CommandType,
        id_generator: IdGenerator,
    ) -> Callable[[GridState, CommandPayload], CommandResult]:
        """Get the handler function for a command type."""
        handlers = {
            CommandType.PLACE: partial(self._handle_place, id_generator=id_generator),
            CommandType.MOVE: self._handle_move,
            CommandType.TOGGLE_EXPAND: self._handle_toggle_expand,
            CommandType.REMOVE: self._handle_remove,
            CommandType.RESET: self._handle_reset,
        }
        return handlers[command_type]

    def _commit(self, command: Command, result: CommandResult) -> CommandResult:
        """Check invariants on the candidate state and make it current."""
        log = logger.bind(command=command.command_type.value)

        if not result.applied:
            log.debug("command_noop", reason=result.reason.value, detail=result.detail)
            return result

        violations = invariant_violations(result.state.cards)
        if violations:
            log.error("invariant_violation", violations=violations)
            return CommandResult.no_op(
                self.state,
                NoOpReason.INVARIANT_VIOLATION,
                "; ".join(violations),
            )

        self.state = result.state
        log.debug(
            "command_applied",
            card_id=result.card_id,
            displaced=result.displaced,
            revision=result.state.revision,
        )
        return result

    # =========================================================================
    # Handlers (pure: previous state in, result out)
    # =========================================================================

    def _handle_place(
        self,
        state: GridState,
        payload: CommandPayload,
        id_generator: IdGenerator,
    ) -> CommandResult:
        """Handle a template dropped onto the grid."""
        template = self.catalog.get(payload.template_type)
        if template is None:
            return CommandResult.no_op(
                state, NoOpReason.UNKNOWN_TEMPLATE, f"Template {payload.template_type} not in catalog"
            )

        if not _valid_slot(payload.target_slot):
            return CommandResult.no_op(
                state, NoOpReason.INVALID_SLOT, f"Slot {payload.target_slot} is not a grid slot"
            )

        card_id = _fresh_id(state, id_generator)
        if card_id is None:
            return CommandResult.no_op(
                state, NoOpReason.INVARIANT_VIOLATION, "Id generator produced no unused id"
            )

        position = PositionIndex(state.cards).find_next_free(payload.target_slot)
        card = Card(
            card_id=card_id,
            template_type=template.template_type,
            title=template.title,
            position=position,
            width=SINGLE_WIDTH,
        )
        return CommandResult.applied_with_state(
            state.with_card(card),
            card_id=card_id,
            changes=[f"Placed {card.title} at slot {position}"],
        )

    def _handle_move(self, state: GridState, payload: CommandPayload) -> CommandResult:
        """Handle a card dragged to another slot."""
        card = state.get_card(payload.card_id)
        if card is None:
            return CommandResult.no_op(state, NoOpReason.UNKNOWN_CARD, f"Card {payload.card_id} not found")

        target = payload.target_slot
        if not _valid_slot(target):
            return CommandResult.no_op(state, NoOpReason.INVALID_SLOT, f"Slot {target} is not a grid slot")

        if target == card.position:
            return CommandResult.no_op(state, NoOpReason.SAME_POSITION)

        index = PositionIndex(state.cards)

        if card.is_expanded:
            # Two expanded cards trade rows without any search
            occupant = index.occupant(target, exclude_id=card.card_id)
            if occupant is not None and occupant.is_expanded:
                cards = _replace_card(state.cards, card.moved_to(occupant.position))
                cards = _replace_card(cards, occupant.moved_to(card.position))
                return CommandResult.applied_with_state(
                    state.with_cards(cards),
                    card_id=card.card_id,
                    changes=[
                        f"Swapped {card.title} (slot {card.position}) "
                        f"with {occupant.title} (slot {occupant.position})"
                    ],
                    displaced=[occupant.card_id],
                )

            if target % 2 != 0:
                return CommandResult.no_op(
                    state,
                    NoOpReason.MISALIGNED_DOUBLE,
                    f"Expanded card {card.card_id} cannot start at odd slot {target}",
                )

        footprint = occupied_slots(target, card.width)
        in_the_way = [
            c for c in state.cards
            if c.card_id != card.card_id and c.occupied_slots & footprint
        ]

        cards = _replace_card(state.cards, card.moved_to(target))
        changes = [f"Moved {card.title} from slot {card.position} to slot {target}"]

        start_slot = target + card.width
        for other in in_the_way:
            cards, position = _relocate(cards, other, start_slot)
            logger.debug(
                "card_displaced",
                card_id=other.card_id,
                from_slot=other.position,
                to_slot=position,
            )
            changes.append(f"Displaced {other.title} from slot {other.position} to slot {position}")

        return CommandResult.applied_with_state(
            state.with_cards(cards),
            card_id=card.card_id,
            changes=changes,
            displaced=[c.card_id for c in in_the_way],
        )

    def _handle_toggle_expand(self, state: GridState, payload: CommandPayload) -> CommandResult:
        """Handle a click that expands or collapses a card."""
        card = state.get_card(payload.card_id)
        if card is None:
            return CommandResult.no_op(state, NoOpReason.UNKNOWN_CARD, f"Card {payload.card_id} not found")

        if card.is_expanded:
            collapsed = card.with_width(SINGLE_WIDTH)
            return CommandResult.applied_with_state(
                state.with_cards(_replace_card(state.cards, collapsed)),
                card_id=card.card_id,
                changes=[f"Collapsed {card.title} at slot {card.position}"],
            )

        adjacent = card.position - 1 if card.column == 1 else card.position + 1
        occupant = PositionIndex(state.cards).occupant(adjacent, exclude_id=card.card_id)

        expanded = card.with_width(DOUBLE_WIDTH, position=min(card.position, adjacent))
        cards = _replace_card(state.cards, expanded)
        changes = [f"Expanded {card.title} across slots {expanded.position}-{expanded.position + 1}"]
        displaced = []

        if occupant is not None:
            # Searched against the expanded layout so the occupant lands outside the new span
            cards, position = _relocate(cards, occupant, adjacent + 1)
            logger.debug(
                "card_displaced",
                card_id=occupant.card_id,
                from_slot=occupant.position,
                to_slot=position,
            )
            changes.append(f"Displaced {occupant.title} from slot {occupant.position} to slot {position}")
            displaced.append(occupant.card_id)

        return CommandResult.applied_with_state(
            state.with_cards(cards),
            card_id=card.card_id,
            changes=changes,
            displaced=displaced,
        )

    def _handle_remove(self, state: GridState, payload: CommandPayload) -> CommandResult:
        """Handle a card dropped on the trash zone."""
        card = state.get_card(payload.card_id)
        if card is None:
            return CommandResult.no_op(state, NoOpReason.UNKNOWN_CARD, f"Card {payload.card_id} not found")

        return CommandResult.applied_with_state(
            state.without_card(card.card_id),
            card_id=card.card_id,
            changes=[f"Removed {card.title} from slot {card.position}"],
        )

    def _handle_reset(self, state: GridState, payload: CommandPayload) -> CommandResult:
        return CommandResult.applied_with_state(
            state.with_cards(()),
            changes=[f"Cleared {len(state)} card(s)"],
        )


def _valid_slot(slot: int | None) -> bool:
    # bool is an int subclass but never a meaningful slot
    return isinstance(slot, int) and not isinstance(slot, bool) and slot >= 0


def _fresh_id(state: GridState, id_generator: IdGenerator) -> str | None:
    """Draw ids until one is not already on the grid."""
    live = set(state.card_ids)
    for _ in range(MAX_ID_ATTEMPTS):
        card_id = id_generator()
        if card_id not in live:
            return card_id
    return None


def apply_command(
    state: GridState,
    command: Command,
    catalog: Catalog | None = None,
    id_generator: IdGenerator | None = None,
) -> CommandResult:
    """
    Convenience function to apply a command to a state.

    The given state is never modified; read the new one from the result.
    """
    engine = PlacementEngine(
        catalog=catalog if catalog is not None else default_catalog(),
        id_generator=id_generator or SequentialIdGenerator(),
        state=state,
    )
    return engine.apply(command)
