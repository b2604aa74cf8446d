"""
Wikipedia interaction module.

Provides the async query API client, typed response parsing,
and extract cleanup.
"""

from wikifact.wikipedia.client import Article, WikiClient, title_to_url
from wikifact.wikipedia.parsing import (
    CategorySearchResult,
    ParsedCategoryListing,
    ParsedPage,
)
from wikifact.wikipedia.text import normalize

__all__ = [
    "Article",
    "WikiClient",
    "title_to_url",
    "CategorySearchResult",
    "ParsedCategoryListing",
    "ParsedPage",
    "normalize",
]
