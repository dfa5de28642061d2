"""
Pseudo-random generators used by the advice and planning engines.

Every engine call builds its own generator from the caller's seed and threads it
through explicitly, so two concurrent calls with the same seed always agree.
"""
import random
from abc import ABC, abstractmethod
from typing import List, Optional, Sequence, TypeVar

T = TypeVar("T")

_UINT32_MASK = 0xFFFFFFFF
_UINT32_RANGE = 2 ** 32


def to_uint32(value: float) -> int:
    """Truncates toward zero and wraps into the unsigned 32-bit range."""
    return int(value) % _UINT32_RANGE


class EngineRandom(ABC):
    """Base class: subclasses provide `random()` returning a float in [0, 1)."""

    @abstractmethod
    def random(self) -> float:
        pass

    def choose(self, pool: Sequence[T]) -> T:
        return pool[int(self.random() * len(pool))]

    def chance(self, probability: float) -> bool:
        return self.random() < probability

    def shuffled(self, pool: Sequence[T]) -> List[T]:
        """Fisher-Yates shuffle of a copy, walking from the last index down."""
        items = list(pool)
        for i in range(len(items) - 1, 0, -1):
            j = int(self.random() * (i + 1))
            items[i], items[j] = items[j], items[i]
        return items


class LcgRandom(EngineRandom):
    """32-bit linear congruential generator (Numerical Recipes constants)."""

    MULTIPLIER = 1664525
    INCREMENT = 1013904223

    def __init__(self, seed: float):
        self.state = to_uint32(seed)

    def random(self) -> float:
        self.state = (self.state * self.MULTIPLIER + self.INCREMENT) & _UINT32_MASK
        return self.state / _UINT32_RANGE


class XorShiftRandom(EngineRandom):
    """Marsaglia xorshift32 (13, 17, 5), reduced to six decimal digits."""

    DEFAULT_STATE = 123456789

    def __init__(self, seed: float):
        self.state = to_uint32(seed) if seed else self.DEFAULT_STATE

    def random(self) -> float:
        x = self.state
        x ^= (x << 13) & _UINT32_MASK
        x ^= x >> 17
        x ^= (x << 5) & _UINT32_MASK
        self.state = x
        return (x % 1_000_000) / 1_000_000


class UnseededRandom(EngineRandom):
    """Non-deterministic source for callers that did not supply a seed."""

    def __init__(self, generator: Optional[random.Random] = None):
        self._generator = generator or random.Random()

    def random(self) -> float:
        return self._generator.random()


def advice_random(seed: Optional[float]) -> EngineRandom:
    """Any finite seed, including 0, makes expense advice deterministic."""
    if seed is None:
        return UnseededRandom()
    return LcgRandom(seed)


def planner_random(seed: Optional[float]) -> EngineRandom:
    """A missing or zero seed leaves the day planner unseeded."""
    if not seed:
        return UnseededRandom()
    return XorShiftRandom(seed)
