"""
Uniform random article selection from a Wikipedia category.

The category member listing is paginated (500 ids per call, cursor based),
so the sampler collects ids page by page into a bounded pool, draws one
index uniformly, and fetches only that article's content.
"""

from __future__ import annotations

import logging
import random
from typing import TYPE_CHECKING

from wikifact.config import MEMBER_POOL_CAP
from wikifact.errors import EmptyCategoryError

if TYPE_CHECKING:
    from wikifact.wikipedia.client import Article, WikiClient

logger = logging.getLogger(__name__)


class CategorySampler:
    """
    Picks one article from a category with equal probability per member.

    For categories with at most ``pool_cap`` members every member has
    probability 1/N. Larger categories stop collecting once the cap is
    reached, so the draw is uniform over the first ``pool_cap`` members
    only. That is a deliberate latency bound (~20 listing requests at the
    default cap), not an oversight.
    """

    def __init__(
        self,
        fetcher: WikiClient,
        pool_cap: int = MEMBER_POOL_CAP,
        seed: int | None = None,
        rng: random.Random | None = None,
    ) -> None:
        """
        Initialize the sampler.

        Args:
            fetcher: Source of category listings and articles
            pool_cap: Maximum member ids collected per draw
            seed: Random seed for reproducibility (ignored if rng is given)
            rng: Random generator to draw indices from
        """
        if pool_cap < 1:
            raise ValueError(f"pool_cap must be positive, got {pool_cap}")
        self._fetcher = fetcher
        self._pool_cap = pool_cap
        self._rng = rng or random.Random(seed)

    @property
    def pool_cap(self) -> int:
        return self._pool_cap

    async def collect_members(self, category_title: str) -> list[int]:
        """
        Gather member page ids, following continuation tokens.

        Stops at the first page without a token or once the pool reaches
        the cap. The pool is trimmed to the cap.
        """
        pool: list[int] = []
        token: str | None = None
        pages = 0

        while True:
            listing = await self._fetcher.fetch_category_members_page(category_title, token)
            pages += 1
            pool.extend(listing.member_ids)

            if listing.continue_token is None:
                break
            if len(pool) >= self._pool_cap:
                logger.info(
                    f"'{category_title}': member pool hit cap of {self._pool_cap:,} "
                    f"after {pages} pages, sampling from a prefix"
                )
                break
            token = listing.continue_token

        logger.debug(f"'{category_title}': collected {len(pool):,} members in {pages} pages")
        return pool[: self._pool_cap]

    async def sample(self, category_title: str) -> Article:
        """
        Fetch one uniformly chosen article from a category.

        Raises:
            EmptyCategoryError: If the category has no namespace-0 pages
        """
        pool = await self.collect_members(category_title)
        if not pool:
            logger.warning(f"No articles found in '{category_title}'")
            raise EmptyCategoryError(category_title)

        page_id = pool[self._rng.randrange(len(pool))]
        logger.info(f"'{category_title}': picked page {page_id} of {len(pool):,}")
        return await self._fetcher.fetch_article_by_id(page_id)
