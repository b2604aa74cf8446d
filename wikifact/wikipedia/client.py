"""
Async client for the handful of Wikipedia query API calls the widget needs.

Random article, article by page id, one page of category members, and a
category prefix search. Responses are parsed into typed results and
extracts are normalized before an Article is built.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any
from urllib.parse import quote

import httpx

from wikifact.config import (
    CATEGORY_PAGE_SIZE,
    CATEGORY_SEARCH_LIMIT,
    USER_AGENT,
    WIKIPEDIA_API_URL,
    WIKIPEDIA_BASE_URL,
    WIKIPEDIA_TIMEOUT,
)
from wikifact.errors import MalformedResponseError
from wikifact.wikipedia.parsing import (
    CategorySearchResult,
    ParsedCategoryListing,
    ParsedPage,
    parse_category_listing,
    parse_category_search,
    parse_page,
)
from wikifact.wikipedia.text import normalize

logger = logging.getLogger(__name__)

# Shared by every request: JSON output, anonymous CORS
BASE_PARAMS = {"action": "query", "format": "json", "origin": "*"}

# Plain-text lead section of the selected page(s)
EXTRACT_PARAMS = {"prop": "extracts", "exintro": "true", "explaintext": "true"}


@dataclass(frozen=True)
class Article:
    """
    A displayable fact.

    Attributes:
        title: Article title
        extract: Normalized plain-text intro
        url: Canonical article URL
    """

    title: str
    extract: str
    url: str


def title_to_url(title: str) -> str:
    """Convert article title to Wikipedia URL."""
    # Same escaping as encodeURIComponent, so "/" and "?" are encoded too
    url_title = quote(title.replace(" ", "_"), safe="!*'()")
    return WIKIPEDIA_BASE_URL + url_title


class WikiClient:
    """
    Fetches articles and category listings from the query API.

    Owns its httpx.AsyncClient unless one is passed in. Use as an async
    context manager, or call aclose() when done.
    """

    def __init__(
        self,
        client: httpx.AsyncClient | None = None,
        api_url: str = WIKIPEDIA_API_URL,
        timeout: float = WIKIPEDIA_TIMEOUT,
    ) -> None:
        """
        Initialize the client.

        Args:
            client: Pre-configured httpx client (tests pass a MockTransport one)
            api_url: Query API endpoint
            timeout: Per-request timeout in seconds
        """
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(
            timeout=timeout,
            headers={"User-Agent": USER_AGENT, "Accept": "application/json"},
        )
        self._api_url = api_url
        self.request_count = 0

    async def _query(self, params: dict[str, Any]) -> Any:
        """
        Issue one GET and decode the JSON body.

        Raises:
            httpx.HTTPError: On transport failure or non-2xx status
            MalformedResponseError: If the body is not JSON
        """
        full_params = {**BASE_PARAMS, **params}
        logger.debug(f"GET {self._api_url} {params}")

        response = await self._client.get(self._api_url, params=full_params)
        self.request_count += 1
        response.raise_for_status()

        try:
            return response.json()
        except ValueError as e:
            raise MalformedResponseError(f"Response is not valid JSON: {e}") from e

    def _to_article(self, page: ParsedPage) -> Article:
        return Article(
            title=page.title,
            extract=normalize(page.extract),
            url=title_to_url(page.title),
        )

    async def fetch_random_article(self) -> Article:
        """Fetch the intro of one random namespace-0 article."""
        data = await self._query(
            {**EXTRACT_PARAMS, "generator": "random", "grnnamespace": 0}
        )
        article = self._to_article(parse_page(data))
        logger.debug(f"Random article: '{article.title}'")
        return article

    async def fetch_article_by_id(self, page_id: int) -> Article:
        """Fetch the intro of a specific page."""
        data = await self._query({**EXTRACT_PARAMS, "pageids": page_id})
        article = self._to_article(parse_page(data))
        logger.debug(f"Article {page_id}: '{article.title}'")
        return article

    async def fetch_category_members_page(
        self,
        category_title: str,
        continue_token: str | None = None,
    ) -> ParsedCategoryListing:
        """
        Fetch one page of article ids in a category.

        Args:
            category_title: Full title, e.g. "Category:Physics"
            continue_token: ``cmcontinue`` value from the previous page

        Returns:
            Member ids on this page and the next continuation token (if any)
        """
        params: dict[str, Any] = {
            "list": "categorymembers",
            "cmtitle": category_title,
            "cmlimit": CATEGORY_PAGE_SIZE,
            "cmnamespace": 0,
            "cmtype": "page",
        }
        if continue_token is not None:
            params["cmcontinue"] = continue_token

        listing = parse_category_listing(await self._query(params))
        logger.debug(
            f"'{category_title}': {len(listing.member_ids)} members, "
            f"more={listing.continue_token is not None}"
        )
        return listing

    async def search_categories(
        self,
        term: str,
        limit: int = CATEGORY_SEARCH_LIMIT,
    ) -> list[CategorySearchResult]:
        """Categories whose name starts with ``term``."""
        term = term.strip()
        if not term:
            return []

        data = await self._query({"list": "allcategories", "acprefix": term, "aclimit": limit})
        return parse_category_search(data)

    async def aclose(self) -> None:
        """Close the underlying HTTP client if we created it."""
        if self._owns_client:
            await self._client.aclose()

    async def __aenter__(self) -> "WikiClient":
        return self

    async def __aexit__(self, *args) -> None:
        await self.aclose()
