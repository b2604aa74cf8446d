"""
Wikipedia Random Fact widget.

Resolves a category selection (or none, or a gesture-seeded entropy mode)
to one random Wikipedia article summary.
"""

__version__ = "0.1.0"
