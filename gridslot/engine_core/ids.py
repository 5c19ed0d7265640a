"""
Card identity generation.

The engine asks a single IdGenerator for every new card id.
Two strategies ship:
- sequential: card-1, card-2, ... (readable, deterministic in tests)
- uuid: random 32-char hex ids (safe across processes)
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Callable
import itertools
import uuid


IdGenerator = Callable[[], str]


@dataclass
class SequentialIdGenerator:
    """Counter-based ids with a fixed prefix."""
    prefix: str = "card"
    start: int = 1

    def __post_init__(self):
        self._counter = itertools.count(self.start)

    def __call__(self) -> str:
        return f"{self.prefix}-{next(self._counter)}"


class UuidIdGenerator:
    """Random uuid4-based ids."""

    def __call__(self) -> str:
        return uuid.uuid4().hex


ID_STRATEGIES: dict[str, Callable[[], IdGenerator]] = {
    "sequential": SequentialIdGenerator,
    "uuid": UuidIdGenerator,
}


def make_id_generator(strategy: str = "sequential") -> IdGenerator:
    """Build an id generator by strategy name."""
    try:
        factory = ID_STRATEGIES[strategy]
    except KeyError:
        raise ValueError(
            f"Unknown id strategy: {strategy} (expected one of {sorted(ID_STRATEGIES)})"
        ) from None
    return factory()
