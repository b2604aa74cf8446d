"""
Typed deserialization of query API responses.

Each parser validates the shape it needs and raises
MalformedResponseError instead of handing ``None`` to later stages.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from wikifact.config import MISSING_EXTRACT, UNKNOWN_TITLE
from wikifact.errors import MalformedResponseError

CATEGORY_PREFIX = "Category:"


@dataclass(frozen=True)
class ParsedPage:
    """First page entry of a ``prop=extracts`` response (extract not yet cleaned)."""

    page_id: int
    title: str
    extract: str


@dataclass(frozen=True)
class ParsedCategoryListing:
    """
    One page of a ``list=categorymembers`` response.

    Attributes:
        member_ids: Page ids on this page, in API order
        continue_token: ``cmcontinue`` cursor, or None on the last page
    """

    member_ids: tuple[int, ...]
    continue_token: str | None = None


@dataclass(frozen=True)
class CategorySearchResult:
    """A category offered by the search box."""

    title: str
    display_name: str


def _query_section(data: Any, key: str) -> Any:
    if not isinstance(data, dict):
        raise MalformedResponseError("Invalid API response: body is not an object")
    query = data.get("query")
    if not isinstance(query, dict):
        raise MalformedResponseError("Invalid API response: missing query")
    if key not in query:
        raise MalformedResponseError(f"Invalid API response: missing query.{key}")
    return query[key]


def parse_page(data: Any) -> ParsedPage:
    """Parse a ``generator=random`` or ``pageids=`` response."""
    pages = _query_section(data, "pages")
    if not isinstance(pages, dict) or not pages:
        raise MalformedResponseError("No pages in response")

    key, page = next(iter(pages.items()))
    if not isinstance(page, dict):
        raise MalformedResponseError(f"Invalid page entry for id {key}")

    title = page.get("title")
    extract = page.get("extract")
    page_id = page.get("pageid")
    if not isinstance(page_id, int):
        try:
            page_id = int(key)
        except ValueError:
            page_id = -1

    return ParsedPage(
        page_id=page_id,
        title=title if isinstance(title, str) else UNKNOWN_TITLE,
        extract=extract if isinstance(extract, str) else MISSING_EXTRACT,
    )


def parse_category_listing(data: Any) -> ParsedCategoryListing:
    """Parse a ``list=categorymembers`` response page."""
    members = _query_section(data, "categorymembers")
    if not isinstance(members, list):
        raise MalformedResponseError("Invalid API response: categorymembers is not a list")

    member_ids = tuple(
        member["pageid"]
        for member in members
        if isinstance(member, dict) and isinstance(member.get("pageid"), int)
    )

    continue_data = data.get("continue")
    token = continue_data.get("cmcontinue") if isinstance(continue_data, dict) else None

    return ParsedCategoryListing(
        member_ids=member_ids,
        continue_token=token if isinstance(token, str) and token else None,
    )


def parse_category_search(data: Any) -> list[CategorySearchResult]:
    """Parse a ``list=allcategories`` response."""
    categories = _query_section(data, "allcategories")
    if not isinstance(categories, list):
        raise MalformedResponseError("Invalid API response: allcategories is not a list")

    results: list[CategorySearchResult] = []
    for entry in categories:
        name = entry.get("*") if isinstance(entry, dict) else None
        if isinstance(name, str) and name:
            results.append(CategorySearchResult(title=CATEGORY_PREFIX + name, display_name=name))
    return results
