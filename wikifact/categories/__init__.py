"""
Category selection module.

Provides the predefined catalog, selector variants with URL fragment
encoding, and resolution to Wikipedia category titles.
"""

from wikifact.categories.catalog import PREDEFINED_CATEGORIES, Category, find_category
from wikifact.categories.resolver import display_name, resolve_category
from wikifact.categories.selector import (
    AllCategories,
    CategorySelector,
    CustomCategory,
    EntropyMode,
    PredefinedCategory,
    parse_fragment,
    to_fragment,
)

__all__ = [
    "PREDEFINED_CATEGORIES",
    "Category",
    "find_category",
    "display_name",
    "resolve_category",
    "AllCategories",
    "CategorySelector",
    "CustomCategory",
    "EntropyMode",
    "PredefinedCategory",
    "parse_fragment",
    "to_fragment",
]
