"""
PoaWeaver v0.1.0

POA core: graph store, alignment engine, consensus/MSA traversal and the
sequential build driver.
"""

from .exceptions import PoaError, AlignmentInputError, MissingHeaderError
from .graph import PoaGraph, PoaNode, PoaEdge
from .traversal import GraphTraversal, HeaviestBundleTraversal
from .alignment_engine import (
    AlignmentType,
    GapModel,
    ScoringScheme,
    AlignmentEngine,
    NumpyAlignmentEngine,
    create_alignment_engine,
    resolve_gap_model,
)
from .builder import PoaBuilder, AddResult

__all__ = [
    # Errors
    "PoaError",
    "AlignmentInputError",
    "MissingHeaderError",
    
    # Graph store
    "PoaGraph",
    "PoaNode",
    "PoaEdge",
    
    # Consensus / MSA
    "GraphTraversal",
    "HeaviestBundleTraversal",
    
    # Alignment
    "AlignmentType",
    "GapModel",
    "ScoringScheme",
    "AlignmentEngine",
    "NumpyAlignmentEngine",
    "create_alignment_engine",
    "resolve_gap_model",
    
    # Build driver
    "PoaBuilder",
    "AddResult",
]
