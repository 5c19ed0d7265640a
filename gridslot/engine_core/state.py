"""
Grid State - Cards, templates and the immutable grid value.

Design principles:
- Immutable: every command produces a new GridState
- Value semantics: two states with the same cards compare equal
- Slot geometry lives here (occupied slots, rows, columns)

A slot is an integer cell index in a grid of 2 columns and unbounded rows:
column = slot % 2, row = slot // 2.
"""

from __future__ import annotations
from dataclasses import dataclass, field, replace
from typing import Iterable, Iterator


GRID_COLUMNS = 2
SINGLE_WIDTH = 1
DOUBLE_WIDTH = 2


def slot_column(slot: int) -> int:
    return slot % GRID_COLUMNS


def slot_row(slot: int) -> int:
    return slot // GRID_COLUMNS


@dataclass(frozen=True)
class CardTemplate:
    """
    A catalog blueprint for cards.

    Note: This is the definition, not a grid instance.
    Instances are Card objects created by the engine.
    """
    template_type: str
    title: str


@dataclass(frozen=True)
class Card:
    """
    A card instance placed on the grid.

    Width 1 covers {position}; width 2 covers {position, position + 1}
    and is only valid at an even position.
    """
    card_id: str
    template_type: str
    title: str
    position: int
    width: int = SINGLE_WIDTH

    @property
    def column(self) -> int:
        return slot_column(self.position)

    @property
    def row(self) -> int:
        return slot_row(self.position)

    @property
    def is_expanded(self) -> bool:
        return self.width == DOUBLE_WIDTH

    @property
    def occupied_slots(self) -> frozenset[int]:
        return occupied_slots(self.position, self.width)

    def moved_to(self, position: int) -> Card:
        """Return new card at a different position."""
        return replace(self, position=position)

    def with_width(self, width: int, position: int | None = None) -> Card:
        """Return new card with a different width (and optionally position)."""
        return replace(
            self,
            width=width,
            position=self.position if position is None else position,
        )


def occupied_slots(position: int, width: int) -> frozenset[int]:
    """Slots covered by a footprint starting at position."""
    return frozenset(range(position, position + width))


@dataclass(frozen=True)
class Catalog:
    """
    Ordered, read-only set of card templates.

    Templates are looked up by template_type.
    """
    templates: tuple[CardTemplate, ...] = ()

    def get(self, template_type: str) -> CardTemplate | None:
        for template in self.templates:
            if template.template_type == template_type:
                return template
        return None

    def __contains__(self, template_type: object) -> bool:
        return any(t.template_type == template_type for t in self.templates)

    def __iter__(self) -> Iterator[CardTemplate]:
        return iter(self.templates)

    def __len__(self) -> int:
        return len(self.templates)

    @classmethod
    def from_titles(cls, titles: Iterable[str]) -> Catalog:
        """Build a catalog whose template types equal their titles."""
        return cls(templates=tuple(CardTemplate(template_type=t, title=t) for t in titles))


def default_catalog() -> Catalog:
    """The four sidebar templates available out of the box."""
    return Catalog.from_titles(["Card 1", "Card 2", "Card 3", "Card 4"])


@dataclass(frozen=True)
class GridState:
    """
    Complete grid state at a point in time.

    This is the canonical value the engine operates on. Cards keep
    insertion order; the renderer lays them out by position and width.
    """
    cards: tuple[Card, ...] = field(default_factory=tuple)
    revision: int = 0

    def __len__(self) -> int:
        return len(self.cards)

    def __iter__(self) -> Iterator[Card]:
        return iter(self.cards)

    @property
    def card_ids(self) -> list[str]:
        return [c.card_id for c in self.cards]

    @property
    def row_count(self) -> int:
        """Number of rows needed to show every card (0 for an empty grid)."""
        if not self.cards:
            return 0
        return max(slot_row(max(c.occupied_slots)) for c in self.cards) + 1

    def get_card(self, card_id: str) -> Card | None:
        """Get card by ID."""
        for c in self.cards:
            if c.card_id == card_id:
                return c
        return None

    def with_cards(self, cards: Iterable[Card]) -> GridState:
        """Return the next revision holding the given cards."""
        return GridState(cards=tuple(cards), revision=self.revision + 1)

    def with_card(self, card: Card) -> GridState:
        """Return new state with card appended."""
        return self.with_cards(self.cards + (card,))

    def without_card(self, card_id: str) -> GridState:
        """Return new state with card removed."""
        return self.with_cards(c for c in self.cards if c.card_id != card_id)

    def rows(self) -> list[list[Card | None]]:
        """
        Cards arranged row by row.

        Each row holds two cells. A double-width card appears in its left
        cell and the right cell repeats it, so callers can detect spans by
        identity.
        """
        grid: list[list[Card | None]] = [[None, None] for _ in range(self.row_count)]
        for card in self.cards:
            for slot in card.occupied_slots:
                grid[slot_row(slot)][slot_column(slot)] = card
        return grid


def invariant_violations(cards: Iterable[Card]) -> list[str]:
    """
    Check the grid invariants.

    Returns a list of human-readable violations (empty when valid):
    - occupied slots of distinct cards must not overlap
    - double-width cards must start in the left column
    - card ids must be unique
    - positions must be non-negative and widths 1 or 2
    """
    violations = []
    seen_ids: set[str] = set()
    owners: dict[int, str] = {}

    for card in cards:
        if card.card_id in seen_ids:
            violations.append(f"Duplicate card id {card.card_id}")
        seen_ids.add(card.card_id)

        if card.position < 0:
            violations.append(f"Card {card.card_id} has negative position {card.position}")
        if card.width not in (SINGLE_WIDTH, DOUBLE_WIDTH):
            violations.append(f"Card {card.card_id} has invalid width {card.width}")
        elif card.width == DOUBLE_WIDTH and card.position % 2 != 0:
            violations.append(f"Expanded card {card.card_id} starts at odd slot {card.position}")

        for slot in card.occupied_slots:
            if slot in owners:
                violations.append(
                    f"Slot {slot} claimed by both {owners[slot]} and {card.card_id}"
                )
            else:
                owners[slot] = card.card_id

    return violations
