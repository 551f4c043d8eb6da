#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
PoaWeaver v0.1.0

GFA Export: serialize a POA graph as GFA v1 segments, links and paths.

Every node becomes a one-symbol segment, every edge a link carrying its
aggregate weight, every sequence entry a path. Nodes (and links between
nodes) on the consensus path are tagged with ic:Z:true.

Author: PoaWeaver Development Team
License: Dual License (Academic/Commercial) - See LICENSE_ACADEMIC.md and LICENSE_COMMERCIAL.md
"""

from __future__ import annotations
import io
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import List, Sequence, Union

from ..poa_core.exceptions import MissingHeaderError
from ..poa_core.graph import PoaGraph, Weight

logger = logging.getLogger(__name__)

GFA_HEADER = "H\tVN:Z:1.0"
CONSENSUS_TAG = "ic:Z:true"
CONSENSUS_PATH_NAME = "Consensus"


# ============================================================================
#                           GFA RECORDS
# ============================================================================

def segment_name(node_id: int) -> int:
    """GFA segment id for a node id (GFA ids start at 1)."""
    return node_id + 1


def format_weight(weight: Weight) -> str:
    """
    Render an edge weight for the ew:f tag.

    Integral weights are written without a fractional part.
    """
    value = float(weight)
    if value.is_integer():
        return str(int(value))
    return repr(value)


@dataclass
class GFASegment:
    """Represents a GFA S-line (segment)."""
    name: int
    sequence: str
    is_consensus: bool = False

    def to_gfa_line(self) -> str:
        """
        Convert to GFA S-line format.

        Format: S <name> <sequence> [ic:Z:true]
        """
        line = f"S\t{self.name}\t{self.sequence}"
        if self.is_consensus:
            line += f"\t{CONSENSUS_TAG}"
        return line


@dataclass
class GFALink:
    """Represents a GFA L-line (link/edge)."""
    from_name: int
    to_name: int
    weight: Weight
    is_consensus: bool = False
    from_orient: str = '+'
    to_orient: str = '+'
    overlap: str = '0M'  # No overlap length is stored on POA edges

    def to_gfa_line(self) -> str:
        """
        Convert to GFA L-line format.

        Format: L <from> <from_orient> <to> <to_orient> <overlap> ew:f:<weight> [ic:Z:true]
        """
        line = (f"L\t{self.from_name}\t{self.from_orient}\t{self.to_name}\t"
                f"{self.to_orient}\t{self.overlap}\tew:f:{format_weight(self.weight)}")
        if self.is_consensus:
            line += f"\t{CONSENSUS_TAG}"
        return line


@dataclass
class GFAPath:
    """Represents a GFA P-line (path)."""
    name: str
    segment_names: List[int]
    overlaps: str = '*'

    def to_gfa_line(self) -> str:
        """
        Convert to GFA P-line format.

        Format: P <name> <seg>+,<seg>+,... *
        """
        steps = ','.join(f"{name}+" for name in self.segment_names)
        return f"P\t{self.name}\t{steps}\t{self.overlaps}"


# ============================================================================
#                       GFA EXPORT FUNCTIONS
# ============================================================================

def to_gfa(graph: PoaGraph, headers: Sequence[str], include_consensus: bool = False) -> str:
    """
    Serialize a POA graph as a GFA v1 document.

    Segments follow node creation order, links follow node creation order
    and then each node's edge creation order, paths follow the order in
    which sequences were added. The consensus is computed exactly once.

    Args:
        graph: Graph to serialize
        headers: Path name per sequence entry (extra headers are ignored)
        include_consensus: Append a path line named "Consensus"

    Returns:
        GFA text, every line newline-terminated

    Raises:
        MissingHeaderError: If fewer headers than sequence entries are given;
                            nothing is produced in that case.
    """
    headers = list(headers)
    num_sequences = graph.sequence_count()
    if len(headers) < num_sequences:
        raise MissingHeaderError(len(headers), num_sequences)

    consensus = graph.generate_consensus()
    is_consensus_node = [False] * graph.node_count()
    for node_id in consensus:
        is_consensus_node[node_id] = True

    out = io.StringIO()
    out.write(GFA_HEADER + "\n")

    for node in graph.nodes:
        segment = GFASegment(
            name=segment_name(node.id),
            sequence=graph.decoder(node.code),
            is_consensus=is_consensus_node[node.id]
        )
        out.write(segment.to_gfa_line() + "\n")

    for node in graph.nodes:
        for edge in node.out_edges:
            link = GFALink(
                from_name=segment_name(node.id),
                to_name=segment_name(edge.head),
                weight=edge.weight,
                is_consensus=is_consensus_node[node.id] and is_consensus_node[edge.head]
            )
            out.write(link.to_gfa_line() + "\n")

    for index in range(num_sequences):
        path = GFAPath(
            name=headers[index],
            segment_names=[segment_name(node_id) for node_id in graph.sequence_path(index)]
        )
        out.write(path.to_gfa_line() + "\n")

    if include_consensus:
        path = GFAPath(
            name=CONSENSUS_PATH_NAME,
            segment_names=[segment_name(node_id) for node_id in consensus]
        )
        out.write(path.to_gfa_line() + "\n")

    return out.getvalue()


def write_gfa(
    graph: PoaGraph,
    headers: Sequence[str],
    output_path: Union[str, Path],
    include_consensus: bool = False
) -> Path:
    """
    Serialize a POA graph and write it to a GFA file.

    The file is only created once serialization has succeeded.

    Args:
        graph: Graph to serialize
        headers: Path name per sequence entry
        output_path: Path to output GFA file
        include_consensus: Append the consensus path line

    Returns:
        Path of the written file
    """
    output_path = Path(output_path)
    logger.info(f"Exporting graph to GFA: {output_path}")

    document = to_gfa(graph, headers, include_consensus)

    with open(output_path, 'w') as f:
        f.write(document)

    logger.info(f"GFA export complete: {output_path}")
    logger.info(f"  Segments: {graph.node_count()}")
    logger.info(f"  Links: {graph.edge_count()}")
    logger.info(f"  Paths: {graph.sequence_count() + (1 if include_consensus else 0)}")
    return output_path


# PoaWeaver v0.1.0
# Any usage is subject to this software's license.
