"""
Maps a category selector to the Wikipedia category it stands for.
"""

from __future__ import annotations

from wikifact.categories.catalog import find_category
from wikifact.categories.selector import (
    AllCategories,
    CategorySelector,
    CustomCategory,
    EntropyMode,
    PredefinedCategory,
    strip_category_prefix,
)


def _capitalize_first(key: str) -> str:
    return key[:1].upper() + key[1:]


def resolve_category(selector: CategorySelector) -> str | None:
    """
    Canonical category title for a selector.

    Returns:
        The category title, or None for the unrestricted random path

    Raises:
        ValueError: For EntropyMode, which never samples a category
    """
    if isinstance(selector, AllCategories):
        return None
    if isinstance(selector, PredefinedCategory):
        category = find_category(selector.key)
        if category is not None:
            return category.wiki_category
        return f"Category:{_capitalize_first(selector.key)}"
    if isinstance(selector, CustomCategory):
        return selector.title
    if isinstance(selector, EntropyMode):
        raise ValueError("Entropy mode does not resolve to a category")
    raise TypeError(f"Unknown selector: {selector!r}")


def display_name(selector: CategorySelector) -> str | None:
    """Label for the active category, or None when no category applies."""
    if isinstance(selector, PredefinedCategory):
        category = find_category(selector.key)
        return category.display_name if category else _capitalize_first(selector.key)
    if isinstance(selector, CustomCategory):
        return strip_category_prefix(selector.display_name)
    return None
