"""
Category sampling module.

Provides CategorySampler: bounded member collection plus a uniform draw.
"""

from wikifact.sampling.engine import CategorySampler

__all__ = ["CategorySampler"]
