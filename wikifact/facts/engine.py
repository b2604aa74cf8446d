"""
Entry point used by UI collaborators to load facts.

Routes a category selector to the right resolution path:

- all categories: one ``generator=random`` fetch
- predefined/custom category: CategorySampler
- entropy mode: EntropyEngine collection window
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable, Iterable

from wikifact.categories.resolver import display_name, resolve_category
from wikifact.categories.selector import CategorySelector, EntropyMode
from wikifact.entropy.engine import EntropyEngine
from wikifact.entropy.hashing import CollectionProgress
from wikifact.facts.state import FactState
from wikifact.sampling.engine import CategorySampler
from wikifact.wikipedia.client import Article, WikiClient
from wikifact.wikipedia.parsing import CategorySearchResult

logger = logging.getLogger(__name__)

# Called once an entropy collection settles: (article, None) or (None, error)
CompletionCallback = Callable[[Article | None, BaseException | None], None]


class FactEngine:
    """
    Resolves selectors to articles and keeps the session state current.

    Owns the WikiClient it creates; pass one in to share it. Every entropy
    request runs on a fresh engine from ``entropy_factory``, so a newer
    window never collides with one still open.
    """

    def __init__(
        self,
        client: WikiClient | None = None,
        state: FactState | None = None,
        sampler: CategorySampler | None = None,
        entropy_factory: Callable[[], EntropyEngine] | None = None,
    ) -> None:
        self._owns_client = client is None
        self.client = client or WikiClient()
        self.state = state or FactState()
        self.sampler = sampler or CategorySampler(self.client)
        self._entropy_factory = entropy_factory or (lambda: EntropyEngine(self.client))
        # Engine of the newest collection window; receives pointer moves
        self.entropy: EntropyEngine | None = None

    async def resolve_article(self, selector: CategorySelector) -> Article:
        """
        Resolve a selector to one article (direct path only).

        Raises:
            ValueError: For EntropyMode, which needs a collection window
            EmptyCategoryError: If the category has no articles
            MalformedResponseError: If the API response is unusable
            httpx.HTTPError: On network failure
        """
        if isinstance(selector, EntropyMode):
            raise ValueError("Entropy mode is resolved through begin_entropy_collection()")

        category_title = resolve_category(selector)
        if category_title is None:
            return await self.client.fetch_random_article()
        return await self.sampler.sample(category_title)

    async def load_fact(self, selector: CategorySelector) -> Article | None:
        """
        Select a category and load a fact for it.

        Returns:
            The article, or None if a newer request superseded this one
        """
        ticket = self.state.begin_request(selector)
        label = display_name(selector) or "All Categories"
        logger.info(f"Loading fact #{ticket} ({label})")

        try:
            article = await self.resolve_article(selector)
        except Exception as e:
            if not self.state.is_current(ticket):
                logger.info(f"Dropping failure of superseded request #{ticket}: {e}")
                return None
            raise

        if not self.state.commit(ticket, article):
            logger.info(f"Dropping stale result of request #{ticket}: '{article.title}'")
            return None
        return article

    def begin_entropy_collection(
        self,
        on_complete: CompletionCallback,
        on_tick: Callable[[CollectionProgress], None] | None = None,
    ) -> asyncio.Task:
        """
        Switch to entropy mode and open a collection window.

        Feed pointer events through record_pointer() while the window is
        open. ``on_tick`` receives window progress every tick. ``on_complete``
        runs when the engine is back to idle, unless a newer request has
        superseded this one. Must be called from a running event loop.
        """
        entropy = self._entropy_factory()
        entropy.begin()
        ticket = self.state.begin_request(EntropyMode())
        self.entropy = entropy
        return asyncio.create_task(self._complete_entropy(ticket, entropy, on_complete, on_tick))

    async def _complete_entropy(
        self,
        ticket: int,
        entropy: EntropyEngine,
        on_complete: CompletionCallback,
        on_tick: Callable[[CollectionProgress], None] | None,
    ) -> None:
        try:
            await entropy.wait_for_window(on_tick)
            article = await entropy.finish(self.state.current_title)
        except Exception as e:
            if self.state.is_current(ticket):
                logger.error(f"Entropy resolution failed: {e}")
                on_complete(None, e)
            return

        if self.state.commit(ticket, article):
            on_complete(article, None)
        else:
            logger.info(f"Dropping stale entropy result #{ticket}: '{article.title}'")

    def record_pointer(self, x: int, y: int, timestamp_ms: int | None = None) -> bool:
        """Forward a pointer/touch move to the open collection window."""
        if self.entropy is None:
            return False
        return self.entropy.record(x, y, timestamp_ms)

    async def resolve_entropy(
        self,
        samples: Iterable[tuple[int, int, int]],
        previous_title: str | None = None,
    ) -> Article | None:
        """
        Run a whole entropy window from readings collected elsewhere.

        Used by the web page, which records pointer moves in the browser
        and posts them once its own window closes.

        Args:
            samples: ``(x, y, timestamp_ms)`` readings in event order
            previous_title: Fact shown before; defaults to the session's

        Returns:
            The article, or None if a newer request superseded this one
        """
        entropy = self._entropy_factory()
        entropy.begin()
        ticket = self.state.begin_request(EntropyMode())
        for x, y, timestamp_ms in samples:
            entropy.record(x, y, timestamp_ms)

        if previous_title is None:
            previous_title = self.state.current_title
        try:
            article = await entropy.finish(previous_title)
        except Exception as e:
            if not self.state.is_current(ticket):
                logger.info(f"Dropping failure of superseded entropy request #{ticket}: {e}")
                return None
            raise

        if not self.state.commit(ticket, article):
            logger.info(f"Dropping stale entropy result #{ticket}: '{article.title}'")
            return None
        return article

    async def search_categories(self, term: str) -> list[CategorySearchResult]:
        """Category suggestions for the search box."""
        return await self.client.search_categories(term)

    async def aclose(self) -> None:
        if self._owns_client:
            await self.client.aclose()

    async def __aenter__(self) -> "FactEngine":
        return self

    async def __aexit__(self, *args) -> None:
        await self.aclose()
