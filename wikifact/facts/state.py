"""
Session state for the fact widget.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from wikifact.categories.selector import AllCategories, CategorySelector, to_fragment

if TYPE_CHECKING:
    from wikifact.wikipedia.client import Article


@dataclass
class FactState:
    """
    Mutable state of one widget session.

    Every resolution takes a ticket from begin_request(); only the newest
    ticket may commit, so a slow response for an older selection never
    overwrites a newer one.

    Attributes:
        selector: Active category selector
        current_article: Fact currently displayed (None before the first load)
        sequence: Ticket of the most recent request
    """

    selector: CategorySelector = field(default_factory=AllCategories)
    current_article: Article | None = None
    sequence: int = 0

    @property
    def fragment(self) -> str:
        """URL fragment for the active selector."""
        return to_fragment(self.selector)

    @property
    def current_title(self) -> str | None:
        return self.current_article.title if self.current_article else None

    def begin_request(self, selector: CategorySelector) -> int:
        """Select a category and take a ticket for the resolution that follows."""
        self.selector = selector
        self.sequence += 1
        return self.sequence

    def is_current(self, ticket: int) -> bool:
        return ticket == self.sequence

    def commit(self, ticket: int, article: Article) -> bool:
        """Store the article if the ticket is still the latest."""
        if not self.is_current(ticket):
            return False
        self.current_article = article
        return True
