"""Production time and randomness providers."""
from __future__ import annotations

import random
from collections.abc import MutableSequence
from datetime import datetime, timezone
from typing import TypeVar

T = TypeVar("T")


class SystemTimeProvider:
    """Wall clock in UTC."""

    def now(self) -> datetime:
        return datetime.now(timezone.utc)


class SystemRandomProvider:
    """Randomness backed by a private ``random.Random`` instance.

    Pass ``seed`` for reproducible draws; the default seeds from the OS.
    """

    def __init__(self, seed: int | None = None) -> None:
        self._rng = random.Random(seed)

    def shuffle(self, items: MutableSequence[T]) -> None:
        self._rng.shuffle(items)

    def int_below(self, n: int) -> int:
        if n <= 0:
            raise ValueError(f"int_below requires a positive bound, got {n}")
        return self._rng.randrange(n)
