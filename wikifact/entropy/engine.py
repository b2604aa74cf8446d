"""
Entropy mode: pick a random article using pointer/touch gestures as seed.

The engine is a small state machine:

    IDLE --begin()--> COLLECTING --finish()--> RESOLVING --> IDLE

While collecting, each pointer or touch move is recorded as a sample.
When the window closes the samples are folded into a seed, a batch of
random articles is fetched, and the seed picks one of them.
"""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Callable
from enum import Enum
from typing import TYPE_CHECKING

import httpx

from wikifact.config import ENTROPY_BATCH_SIZE, ENTROPY_TICK_MS, ENTROPY_WINDOW_MS
from wikifact.entropy.hashing import (
    CollectionProgress,
    choose_article,
    collection_progress,
    entropy_sample,
    fold_seed,
)
from wikifact.errors import EntropyStateError, NoArticlesAvailableError, WikifactError

if TYPE_CHECKING:
    from wikifact.wikipedia.client import Article, WikiClient

logger = logging.getLogger(__name__)


def _now_ms() -> float:
    return time.time_ns() / 1_000_000


class EntropyState(Enum):
    IDLE = "idle"
    COLLECTING = "collecting"
    RESOLVING = "resolving"


class EntropyEngine:
    """
    Collects gesture samples for a fixed window and resolves them to an article.

    Each engine owns its sample buffer; one collection runs at a time.
    """

    def __init__(
        self,
        fetcher: WikiClient,
        batch_size: int = ENTROPY_BATCH_SIZE,
        window_ms: int = ENTROPY_WINDOW_MS,
        tick_ms: int = ENTROPY_TICK_MS,
        clock: Callable[[], float] = _now_ms,
    ) -> None:
        """
        Initialize the engine.

        Args:
            fetcher: Source of random articles
            batch_size: Articles fetched per resolution
            window_ms: Collection window length
            tick_ms: Progress callback interval
            clock: Millisecond clock (injectable for tests)
        """
        if batch_size < 1:
            raise ValueError(f"batch_size must be positive, got {batch_size}")
        self._fetcher = fetcher
        self._batch_size = batch_size
        self._window_ms = window_ms
        self._tick_ms = tick_ms
        self._clock = clock
        self._samples: list[int] = []
        self._started_at: float = 0.0
        self.state = EntropyState.IDLE

    @property
    def samples(self) -> list[int]:
        """Samples recorded in the current (or last) window."""
        return list(self._samples)

    def begin(self) -> None:
        """Open a collection window, discarding any earlier samples."""
        if self.state is not EntropyState.IDLE:
            raise EntropyStateError(f"Cannot start collecting while {self.state.value}")
        self._samples.clear()
        self._started_at = self._clock()
        self.state = EntropyState.COLLECTING
        logger.info(f"Entropy collection started ({self._window_ms / 1000:g}s window)")

    def record(self, x: int, y: int, timestamp_ms: int | None = None) -> bool:
        """
        Record one pointer/touch position.

        Returns:
            False if no window is open (the event is dropped)
        """
        if self.state is not EntropyState.COLLECTING:
            return False
        if timestamp_ms is None:
            timestamp_ms = int(self._clock())
        self._samples.append(entropy_sample(int(x), int(y), int(timestamp_ms), len(self._samples)))
        return True

    def elapsed_ms(self) -> float:
        if self.state is not EntropyState.COLLECTING:
            return 0.0
        return self._clock() - self._started_at

    def progress(self) -> CollectionProgress:
        """Progress of the open window (presentation only)."""
        return collection_progress(self.elapsed_ms(), self._window_ms)

    async def wait_for_window(
        self,
        on_tick: Callable[[CollectionProgress], None] | None = None,
    ) -> None:
        """Sleep until the window expires, reporting progress every tick."""
        while self.state is EntropyState.COLLECTING:
            progress = self.progress()
            if on_tick is not None:
                on_tick(progress)
            if progress.done:
                return
            remaining = self._window_ms - self.elapsed_ms()
            await asyncio.sleep(max(min(self._tick_ms, remaining), 0) / 1000)

    async def fetch_batch(self) -> list[Article]:
        """
        Fetch up to ``batch_size`` random articles, one after another.

        Failed fetches are logged and skipped.
        """
        articles: list[Article] = []
        for i in range(self._batch_size):
            try:
                articles.append(await self._fetcher.fetch_random_article())
            except (WikifactError, httpx.HTTPError) as e:
                logger.warning(f"Entropy batch fetch {i + 1}/{self._batch_size} failed: {e}")
        return articles

    async def finish(self, previous_title: str | None = None) -> Article:
        """
        Close the window and resolve the samples to an article.

        Args:
            previous_title: Title of the fact currently shown, not to be repeated

        Raises:
            EntropyStateError: If no window is open
            NoArticlesAvailableError: If every batch fetch failed
        """
        if self.state is not EntropyState.COLLECTING:
            raise EntropyStateError(f"Cannot resolve while {self.state.value}")
        self.state = EntropyState.RESOLVING

        try:
            if not self._samples:
                logger.info("No movement recorded, using time-based seed")
            seed = fold_seed(self._samples)
            logger.debug(f"Entropy seed {seed} from {len(self._samples)} samples")

            batch = await self.fetch_batch()
            if not batch:
                raise NoArticlesAvailableError("No articles fetched")

            article = choose_article(batch, seed, previous_title)
            logger.info(f"Entropy picked '{article.title}' from {len(batch)} articles")
            return article
        finally:
            self.state = EntropyState.IDLE

    async def collect(
        self,
        previous_title: str | None = None,
        on_tick: Callable[[CollectionProgress], None] | None = None,
    ) -> Article:
        """Run a whole window: begin, wait for expiry, resolve."""
        self.begin()
        await self.wait_for_window(on_tick)
        return await self.finish(previous_title)
