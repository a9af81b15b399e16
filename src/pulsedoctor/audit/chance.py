# Injectable randomness for simulated health and repair outcomes.
# Created: 2026-10-18

from __future__ import annotations

import random
from collections.abc import Iterable
from typing import Protocol, runtime_checkable


@runtime_checkable
class ChanceSource(Protocol):
    """Answers "does an event with probability p happen this time?"."""

    def chance(self, probability: float) -> bool: ...


class RandomChance:
    """ChanceSource backed by ``random.Random``. Pass a seed for repeatable runs."""

    def __init__(self, seed: int | None = None):
        self._rng = random.Random(seed)

    def chance(self, probability: float) -> bool:
        if probability <= 0:
            return False
        if probability >= 1:
            return True
        return self._rng.random() < probability


class FixedChance:
    """ChanceSource that replays scripted outcomes.

    Usage:
        FixedChance(False)              # nothing ever happens
        FixedChance([True, False])      # first call True, then False forever
    """

    def __init__(self, outcomes: bool | Iterable[bool] = False, default: bool | None = None):
        if isinstance(outcomes, bool):
            self._queue: list[bool] = []
            self._default = outcomes
        else:
            self._queue = list(outcomes)
            self._default = default if default is not None else False
        self.calls: list[float] = []

    def chance(self, probability: float) -> bool:
        self.calls.append(probability)
        if self._queue:
            return self._queue.pop(0)
        return self._default
