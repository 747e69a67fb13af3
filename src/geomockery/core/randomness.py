"""Seedable source of random values shared by the generators."""

import string
from datetime import datetime, timedelta
from typing import Optional, Sequence, TypeVar

import numpy as np

T = TypeVar("T")

ID_ALPHABET = string.ascii_lowercase + string.ascii_uppercase + string.digits
HEX_DIGITS = "0123456789ABCDEF"


class RandomValueProvider:
    """Uniform floats, ints, booleans, picks and identifier strings.

    Wraps a ``numpy.random.Generator``. Two providers built with the same seed
    produce identical streams; ``seed=None`` draws fresh OS entropy.
    """

    def __init__(self, seed: Optional[int] = None):
        self.seed = seed
        self._rng = np.random.default_rng(seed)

    def uniform_float(self, low: float, high: float) -> float:
        """Uniform float between low and high (given in either order)."""
        if low > high:
            low, high = high, low
        if low == high:
            return float(low)
        return float(self._rng.uniform(low, high))

    def uniform_int(self, low: int, high: int) -> int:
        """Uniform integer in [low, high], both ends inclusive."""
        low, high = int(np.ceil(low)), int(np.floor(high))
        if low > high:
            raise ValueError(f"Empty integer range [{low}, {high}]")
        return int(self._rng.integers(low, high, endpoint=True))

    def boolean(self, probability: float = 0.5) -> bool:
        return bool(self._rng.random() < probability)

    def pick(self, values: Sequence[T]) -> T:
        if len(values) == 0:
            raise ValueError("Cannot pick from an empty value set")
        return values[int(self._rng.integers(len(values)))]

    def identifier(self, digits: int = 8, prefix: str = "") -> str:
        """``prefix`` followed by ``digits`` random alphanumeric characters."""
        idx = self._rng.integers(len(ID_ALPHABET), size=digits)
        return prefix + "".join(ID_ALPHABET[i] for i in idx)

    def color(self) -> str:
        idx = self._rng.integers(len(HEX_DIGITS), size=6)
        return "#" + "".join(HEX_DIGITS[i] for i in idx)

    def timestamp(self, start: datetime, end: datetime) -> datetime:
        """Uniform instant between start and end at millisecond resolution."""
        span_ms = (end - start) / timedelta(milliseconds=1)
        offset_ms = self.uniform_float(0.0, span_ms)
        return start + timedelta(milliseconds=int(offset_ms))
