"""
Fact loading module.

Provides the session state and the engine UI collaborators call:
- FactState: Active selector, current article, request sequencing
- FactEngine: Direct, category, and entropy resolution paths
"""

from wikifact.facts.engine import FactEngine
from wikifact.facts.state import FactState

__all__ = [
    "FactEngine",
    "FactState",
]
