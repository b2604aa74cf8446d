"""
Predefined categories shown as quick links.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Category:
    """
    A catalog entry.

    Attributes:
        key: URL fragment key (lowercase, unique)
        display_name: Label shown in the UI
        wiki_category: Canonical Wikipedia category title
        icon: FontAwesome classes for the link icon
    """

    key: str
    display_name: str
    wiki_category: str
    icon: str


PREDEFINED_CATEGORIES: tuple[Category, ...] = (
    Category("physics", "Physics", "Category:Physics", "fa-solid fa-atom"),
    Category("computer-science", "Computer Science", "Category:Computer science", "fa-solid fa-laptop-code"),
    Category("animals", "Animals", "Category:Animals", "fa-solid fa-paw"),
    Category("art", "Art", "Category:Art", "fa-solid fa-palette"),
    Category(
        "historic-buildings",
        "Historic Buildings",
        "Category:Historic buildings and structures",
        "fa-solid fa-building-columns",
    ),
)

_BY_KEY = {category.key: category for category in PREDEFINED_CATEGORIES}


def find_category(key: str) -> Category | None:
    """Look up a catalog entry; keys match case-insensitively."""
    return _BY_KEY.get(key.lower())
