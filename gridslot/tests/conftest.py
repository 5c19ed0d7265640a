"""
Pytest fixtures for Gridslot tests.
"""

import logging
from typing import Callable, Generator

import pytest

from ..engine_core import Card, GridState, PlacementEngine


@pytest.fixture
def card_factory() -> Callable[..., Card]:
    """Build a card whose title matches its template."""
    def _make(card_id: str, position: int, width: int = 1, template_type: str = "Card 1") -> Card:
        return Card(
            card_id=card_id,
            template_type=template_type,
            title=template_type,
            position=position,
            width=width,
        )
    return _make


@pytest.fixture
def engine() -> PlacementEngine:
    """Engine with the default catalog and an empty grid."""
    return PlacementEngine()


@pytest.fixture
def engine_with() -> Callable[..., PlacementEngine]:
    """Engine preloaded with the given cards."""
    def _build(*cards: Card) -> PlacementEngine:
        return PlacementEngine(state=GridState(cards=tuple(cards)))
    return _build


@pytest.fixture
def restore_logging() -> Generator[None, None, None]:
    """Restore root logger state after a test that configures logging."""
    root = logging.getLogger()
    original_handlers = root.handlers[:]
    original_level = root.level
    gridslot_logger = logging.getLogger("gridslot")
    gridslot_level = gridslot_logger.level
    yield
    root.handlers = original_handlers
    root.setLevel(original_level)
    gridslot_logger.setLevel(gridslot_level)
