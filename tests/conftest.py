"""
Pytest configuration and shared fixtures.

This file is automatically loaded by pytest and provides
fixtures available to all test files.
"""

from __future__ import annotations

import asyncio

import httpx
import pytest

from wikifact.errors import MalformedResponseError
from wikifact.wikipedia import (
    Article,
    CategorySearchResult,
    ParsedCategoryListing,
    WikiClient,
)

API_URL = "https://wiki.test/w/api.php"


def make_article(title: str) -> Article:
    return Article(
        title=title,
        extract=f"{title} is a thing.",
        url="https://en.wikipedia.org/wiki/" + title.replace(" ", "_"),
    )


def paged_listing(ids: list[int], page_size: int = 500) -> list[ParsedCategoryListing]:
    """Split ids into listing pages chained by tokens "t1", "t2", ..."""
    chunks = [ids[i : i + page_size] for i in range(0, len(ids), page_size)] or [[]]
    return [
        ParsedCategoryListing(
            member_ids=tuple(chunk),
            continue_token=f"t{i + 1}" if i + 1 < len(chunks) else None,
        )
        for i, chunk in enumerate(chunks)
    ]


class FakeFetcher:
    """
    In-memory stand-in for WikiClient.

    Category pages are served by continuation token ("t<n>" -> page n),
    random articles cycle through ``random_articles`` (exceptions in that
    list are raised instead of returned).
    """

    def __init__(
        self,
        category_pages: list[ParsedCategoryListing] | None = None,
        random_articles: list[Article | Exception] | None = None,
    ) -> None:
        self.category_pages = category_pages or [ParsedCategoryListing(member_ids=())]
        self.random_articles = random_articles or [make_article("Random")]
        self.listing_calls: list[tuple[str, str | None]] = []
        self.fetched_ids: list[int] = []
        self.random_calls = 0
        self.search_terms: list[str] = []

    async def fetch_category_members_page(self, category_title, continue_token=None):
        self.listing_calls.append((category_title, continue_token))
        index = 0 if continue_token is None else int(continue_token[1:])
        return self.category_pages[index]

    async def fetch_article_by_id(self, page_id):
        self.fetched_ids.append(page_id)
        return make_article(f"Page {page_id}")

    async def fetch_random_article(self):
        item = self.random_articles[self.random_calls % len(self.random_articles)]
        self.random_calls += 1
        if isinstance(item, Exception):
            raise item
        return item

    async def search_categories(self, term):
        self.search_terms.append(term)
        return [CategorySearchResult(title="Category:History", display_name="History")]


@pytest.fixture
def articles() -> list[Article]:
    """A small batch of distinct articles."""
    return [make_article(title) for title in ("Albert Einstein", "Physics", "Pizza", "Mathematics")]


@pytest.fixture
def article_factory():
    """Build an Article from a title."""
    return make_article


@pytest.fixture
def listing_pages():
    """Split member ids into chained listing pages."""
    return paged_listing


@pytest.fixture
def fake_fetcher() -> type[FakeFetcher]:
    """The FakeFetcher class, for building fetchers with custom pages."""
    return FakeFetcher


@pytest.fixture
def failing_fetch() -> MalformedResponseError:
    """An error the entropy batch should skip."""
    return MalformedResponseError("No pages in response")


@pytest.fixture
def call_api():
    """
    Call a WikiClient method against a MockTransport handler.

    Usage: call_api(handler, "fetch_random_article") -> (result, requests)
    """

    def _call(handler, method: str, *args):
        requests: list[httpx.Request] = []

        def recording_handler(request: httpx.Request) -> httpx.Response:
            requests.append(request)
            return handler(request)

        async def go():
            transport = httpx.MockTransport(recording_handler)
            async with httpx.AsyncClient(transport=transport) as http:
                client = WikiClient(client=http, api_url=API_URL)
                return await getattr(client, method)(*args)

        return asyncio.run(go()), requests

    return _call
