"""
Position Index - Occupancy queries over a card collection.

Stateless apart from the collection reference; build a fresh index
whenever the working set of cards changes.
"""

from __future__ import annotations
from typing import Sequence

from .state import Card


class PositionIndex:
    """
    Answers "who is where" for a set of cards.

    Scans are monotonic and unbounded: rows are created on demand,
    so a free slot always exists somewhere after the start.
    """

    def __init__(self, cards: Sequence[Card]):
        self.cards = cards

    def occupant(self, slot: int, exclude_id: str | None = None) -> Card | None:
        """Card covering slot, ignoring exclude_id."""
        for card in self.cards:
            if card.card_id == exclude_id:
                continue
            if slot in card.occupied_slots:
                return card
        return None

    def is_occupied(self, slot: int, exclude_id: str | None = None) -> bool:
        return self.occupant(slot, exclude_id) is not None

    def find_next_free(self, start_slot: int, exclude_id: str | None = None) -> int:
        """First free slot at or after start_slot."""
        slot = max(start_slot, 0)
        while self.is_occupied(slot, exclude_id):
            slot += 1
        return slot

    def find_next_free_double_slot(self, start_slot: int, exclude_id: str | None = None) -> int:
        """
        First even slot at or after start_slot whose pair is free.

        An odd start is rounded up to the next row.
        """
        slot = max(start_slot, 0)
        slot += slot % 2
        while self.is_occupied(slot, exclude_id) or self.is_occupied(slot + 1, exclude_id):
            slot += 2
        return slot
