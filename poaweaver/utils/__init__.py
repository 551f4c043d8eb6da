"""
Utilities module for PoaWeaver.
"""

from .sequence_utils import reverse_complement, quality_to_weights

__all__ = ["reverse_complement", "quality_to_weights"]
