"""Injectable source of random values for serials and validity durations."""

import random
from typing import Protocol

Bounds = tuple[int | float, int | float]


class RandomSource(Protocol):
    """Capability consumed by serial generation and duration selection."""

    def integer(self, bounds: tuple[int, int]) -> int: ...

    def number(self, bounds: Bounds) -> float: ...


def _check_bounds(bounds: object) -> tuple:
    if not isinstance(bounds, tuple) or len(bounds) != 2:
        raise ValueError(f"range not given, got {type(bounds).__name__}: {bounds!r}")
    low, high = bounds
    if high < low:
        raise ValueError(f"requires ascending range, you gave {bounds!r}")
    return low, high


class RandomValues:
    """RandomSource backed by the standard library generators.

    With a seed the sequence is reproducible; without one values come from
    the operating system's entropy source. Instances are not shared across
    threads when a reproducible sequence matters.
    """

    def __init__(self, seed: int | None = None) -> None:
        self._rng = random.Random(seed) if seed is not None else random.SystemRandom()

    def integer(self, bounds: tuple[int, int]) -> int:
        """Return a random integer within inclusive ``(low, high)`` bounds.

        Raises:
            ValueError: If bounds is not an ascending (low, high) pair
        """
        low, high = _check_bounds(bounds)
        return self._rng.randint(low, high)

    def number(self, bounds: Bounds) -> float:
        """Return a random float within ``(low, high)`` bounds.

        Raises:
            ValueError: If bounds is not an ascending (low, high) pair
        """
        low, high = _check_bounds(bounds)
        return self._rng.random() * (high - low) + low

    def iterations(self, bounds: tuple[int, int] | int) -> range:
        """Return a range whose length is a random integer within bounds.

        A bare integer ``n`` means ``(0, n)``.
        """
        if isinstance(bounds, int):
            bounds = (0, bounds)
        return range(self.integer(bounds))
