"""
Exceptions raised by the fact resolution pipeline.

Network failures are not wrapped: they surface as ``httpx.HTTPError``
straight from the transport.
"""

from __future__ import annotations

GENERIC_FAILURE_MESSAGE = "Failed to load a random fact. Please try again!"
EMPTY_CATEGORY_MESSAGE = "No articles found in this category."
FAILURE_TITLE = "Oops!"


class WikifactError(Exception):
    """Base class for every error raised by wikifact."""


class ApiError(WikifactError):
    """The Wikipedia API answered with something we cannot use."""


class MalformedResponseError(ApiError):
    """A response lacks the expected ``query.*`` structure."""


class EmptyCategoryError(WikifactError):
    """A category listing produced no namespace-0 pages."""

    def __init__(self, category_title: str) -> None:
        super().__init__(f"No articles found in '{category_title}'")
        self.category_title = category_title


class NoArticlesAvailableError(WikifactError):
    """Every fetch in an entropy batch failed."""


class EntropyStateError(WikifactError):
    """An entropy engine operation was called in the wrong state."""


def failure_message(error: BaseException) -> str:
    """User-facing text for a failed resolution."""
    if isinstance(error, EmptyCategoryError):
        return EMPTY_CATEGORY_MESSAGE
    return GENERIC_FAILURE_MESSAGE
