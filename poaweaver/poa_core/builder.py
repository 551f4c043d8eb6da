#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
PoaWeaver v0.1.0

POA graph build driver: aligns sequences one at a time against the growing
graph and folds each alignment in, keeping the per-sequence headers used
for GFA serialization.

Author: PoaWeaver Development Team
License: Dual License (Academic/Commercial) - See LICENSE_ACADEMIC.md and LICENSE_COMMERCIAL.md
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, List, Optional, Sequence
import logging

from .alignment_engine import AlignmentEngine, NumpyAlignmentEngine
from .graph import PoaGraph, Weight
from ..utils.sequence_utils import reverse_complement

logger = logging.getLogger(__name__)


@dataclass
class AddResult:
    """Outcome of adding one sequence to the graph."""
    header: str
    score: int
    reverse_complemented: bool = False


class PoaBuilder:
    """
    Sequential POA graph construction.

    Example:
        >>> from poaweaver.poa_core import create_alignment_engine
        >>> builder = PoaBuilder(create_alignment_engine("global", 5, -4, -8))
        >>> builder.add_sequence("ACGT", header="read1")
        >>> builder.add_sequence("AGGT", header="read2")
        >>> builder.graph.generate_consensus_sequence()
    """

    def __init__(
        self,
        engine: Optional[AlignmentEngine] = None,
        graph: Optional[PoaGraph] = None,
        strand_ambiguous: bool = False
    ):
        """
        Args:
            engine: Sequence-to-graph aligner (default: global, convex gaps)
            graph: Graph to extend (default: a new empty graph)
            strand_ambiguous: Also try the reverse complement of every
                              sequence and keep the better scoring strand
        """
        self.engine = engine if engine is not None else NumpyAlignmentEngine()
        self.graph = graph if graph is not None else PoaGraph()
        self.strand_ambiguous = strand_ambiguous
        self.headers: List[str] = [f"seq{i + 1}" for i in range(self.graph.sequence_count())]

    def add_sequence(
        self,
        sequence: str,
        weights: Optional[Sequence[Weight]] = None,
        header: Optional[str] = None
    ) -> AddResult:
        """
        Align one sequence against the current graph and add it.

        Args:
            sequence: Sequence to add
            weights: Optional per-position weights (same length as sequence)
            header: Name used for the sequence's GFA path line

        Returns:
            AddResult with the alignment score and chosen strand
        """
        if header is None:
            header = f"seq{self.graph.sequence_count() + 1}"

        alignment, score = self.engine.align(sequence, self.graph)
        reverse = False

        if self.strand_ambiguous and self.graph.node_count() > 0:
            rc_sequence = reverse_complement(sequence)
            rc_alignment, rc_score = self.engine.align(rc_sequence, self.graph)
            if rc_score > score:
                logger.debug(f"{header}: reverse strand scores higher ({rc_score} > {score})")
                sequence, alignment, score = rc_sequence, rc_alignment, rc_score
                if weights is not None:
                    weights = list(weights)[::-1]
                reverse = True

        self.graph.add_alignment(alignment, sequence, weights)
        self.headers.append(header)
        return AddResult(header=header, score=score, reverse_complemented=reverse)

    def add_records(self, records: Iterable, use_quality_weights: bool = True) -> List[AddResult]:
        """
        Add a batch of sequence records in order.

        Args:
            records: Objects with `id`, `sequence` and optional `weights`
                     attributes (see io_utils.sequence_io.SequenceRecord)
            use_quality_weights: Use record weights when present

        Returns:
            One AddResult per record
        """
        results = []
        for record in records:
            weights = getattr(record, 'weights', None) if use_quality_weights else None
            results.append(self.add_sequence(record.sequence, weights=weights, header=record.id))

        reversed_count = sum(1 for r in results if r.reverse_complemented)
        logger.info(f"Added {len(results)} sequences: {self.graph.node_count()} nodes, "
                    f"{self.graph.edge_count()} edges")
        if reversed_count:
            logger.info(f"  {reversed_count} sequences aligned on the reverse strand")
        return results

    def to_gfa(self, include_consensus: bool = False) -> str:
        """Serialize the graph with the collected headers."""
        from ..io_utils.gfa_export import to_gfa
        return to_gfa(self.graph, self.headers, include_consensus)


# PoaWeaver v0.1.0
# Any usage is subject to this software's license.
