"""
Entropy mode module.

Provides the gesture-collection state machine and the pure
seed/selection helpers it is built on.
"""

from wikifact.entropy.engine import EntropyEngine, EntropyState
from wikifact.entropy.hashing import (
    CollectionProgress,
    choose_article,
    collection_progress,
    entropy_sample,
    fallback_seed,
    fold_seed,
    select_index,
)

__all__ = [
    "EntropyEngine",
    "EntropyState",
    "CollectionProgress",
    "choose_article",
    "collection_progress",
    "entropy_sample",
    "fallback_seed",
    "fold_seed",
    "select_index",
]
