"""
Pure helpers for entropy mode: sample encoding, seed folding, index
selection, and collection progress.

All integer arithmetic wraps to signed 64 bits.
"""

from __future__ import annotations

import random
import time
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from wikifact.wikipedia.client import Article

_MASK64 = (1 << 64) - 1
_SIGN64 = 1 << 63


def to_int64(value: int) -> int:
    """Wrap an arbitrary int to the signed 64-bit range."""
    value &= _MASK64
    return value - (1 << 64) if value & _SIGN64 else value


def entropy_sample(x: int, y: int, timestamp_ms: int, index: int) -> int:
    """
    Encode one pointer/touch reading.

    Position and timestamp are mixed with the insertion index so that
    consecutive samples at the same spot still differ.
    """
    return to_int64(to_int64(x * 10000 + y + timestamp_ms) ^ to_int64(index * 31))


def fallback_seed() -> int:
    """Seed for a window without movement: clock XOR fresh random bits."""
    now_ms = time.time_ns() // 1_000_000
    return to_int64(now_ms ^ random.getrandbits(64))


def fold_seed(samples: Iterable[int]) -> int:
    """
    Fold samples into one seed, in order.

    ``seed = seed * 31 + sample; seed ^= seed >> 16`` per sample. The
    result depends on sample order. An empty input falls back to
    fallback_seed(), so it never yields a fixed value.
    """
    seed = 0
    seen = False
    for value in samples:
        seen = True
        seed = to_int64(seed * 31 + value)
        seed ^= seed >> 16
    return seed if seen else fallback_seed()


def select_index(seed: int, size: int) -> int:
    """Map a (possibly negative) seed onto ``range(size)``."""
    if size < 1:
        raise ValueError(f"size must be positive, got {size}")
    return abs(seed) % size


def choose_article(
    batch: Sequence[Article],
    seed: int,
    previous_title: str | None = None,
) -> Article:
    """
    Pick the seeded article, skipping ahead one if it repeats the last fact.
    """
    index = select_index(seed, len(batch))
    if len(batch) > 1 and batch[index].title == previous_title:
        index = (index + 1) % len(batch)
    return batch[index]


@dataclass(frozen=True)
class CollectionProgress:
    """
    Progress of a collection window.

    Attributes:
        percent: Elapsed share of the window, 0-100
        remaining_seconds: Whole seconds left, never negative
    """

    percent: float
    remaining_seconds: int

    @property
    def done(self) -> bool:
        return self.percent >= 100.0


def collection_progress(elapsed_ms: float, window_ms: float) -> CollectionProgress:
    """Progress for ``elapsed_ms`` into a window of ``window_ms``."""
    if window_ms <= 0:
        return CollectionProgress(percent=100.0, remaining_seconds=0)
    percent = min(max(elapsed_ms / window_ms * 100, 0.0), 100.0)
    remaining = int(max((window_ms - elapsed_ms) / 1000, 0.0))
    return CollectionProgress(percent=percent, remaining_seconds=remaining)
