"""
Category selectors and their URL fragment encoding.

The active selector lives in the page's URL fragment so a selection can be
bookmarked, shared, and restored on reload:

    ""  or "#"                      all categories
    "#physics"                      predefined (or unknown) key
    "#custom:Category%3AHistory"    category picked from search
    "#~entropy"                     entropy mode
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union
from urllib.parse import quote, unquote

CUSTOM_PREFIX = "custom:"
ENTROPY_FRAGMENT = "~entropy"
LEGACY_ENTROPY_FRAGMENT = "entropy"


@dataclass(frozen=True)
class AllCategories:
    """No category restriction: any random article."""


@dataclass(frozen=True)
class PredefinedCategory:
    """A catalog key (unknown keys are allowed and resolved by convention)."""

    key: str


@dataclass(frozen=True)
class CustomCategory:
    """A category chosen from search results."""

    title: str
    display_name: str


@dataclass(frozen=True)
class EntropyMode:
    """Gesture-seeded selection instead of direct sampling."""


CategorySelector = Union[AllCategories, PredefinedCategory, CustomCategory, EntropyMode]


def strip_category_prefix(title: str) -> str:
    """'Category:History' -> 'History'."""
    return title.removeprefix("Category:")


def parse_fragment(fragment: str | None) -> CategorySelector:
    """Decode a URL fragment (with or without the leading '#')."""
    value = (fragment or "").lstrip("#")
    if not value:
        return AllCategories()

    if value in (ENTROPY_FRAGMENT, LEGACY_ENTROPY_FRAGMENT):
        return EntropyMode()

    if value.startswith(CUSTOM_PREFIX):
        title = unquote(value[len(CUSTOM_PREFIX):])
        if not title:
            return AllCategories()
        return CustomCategory(title=title, display_name=strip_category_prefix(title))

    return PredefinedCategory(key=value)


def to_fragment(selector: CategorySelector) -> str:
    """Encode a selector as a URL fragment (including '#', empty for all)."""
    if isinstance(selector, PredefinedCategory):
        return f"#{selector.key}"
    if isinstance(selector, CustomCategory):
        return f"#{CUSTOM_PREFIX}{quote(selector.title, safe='')}"
    if isinstance(selector, EntropyMode):
        return f"#{ENTROPY_FRAGMENT}"
    return ""
