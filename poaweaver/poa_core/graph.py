#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
PoaWeaver v0.1.0

Partial-order alignment (POA) graph store.

Each node holds one symbol, each sequence added to the graph is a path
through it. The graph only grows: nodes and edges are appended by
add_alignment() and never removed, merged or renumbered afterwards.

Author: PoaWeaver Development Team
License: Dual License (Academic/Commercial) - See LICENSE_ACADEMIC.md and LICENSE_COMMERCIAL.md
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence, Tuple, Union
import logging

from .exceptions import AlignmentInputError
from .traversal import GraphTraversal, HeaviestBundleTraversal

logger = logging.getLogger(__name__)

# (node id or -1, sequence position or -1)
Alignment = List[Tuple[int, int]]
Weight = Union[int, float]


# ============================================================================
# Core Data Structures
# ============================================================================

@dataclass
class PoaEdge:
    """
    Directed edge between two nodes of the same graph.

    Edges are unique per (tail, head) pair; every further sequence that
    traverses the pair adds its weight to the existing edge.
    """
    tail: int  # Source node ID
    head: int  # Destination node ID
    weight: Weight = 0

    def add_sequence(self, weight: Weight):
        """Record one more sequence traversing this edge."""
        self.weight += weight


@dataclass
class PoaNode:
    """
    Node in the POA graph.

    Only ids are stored for neighbours and per-sequence successors, so a
    node never holds a reference to another node object.
    """
    id: int
    code: int  # Index into the graph's decoder table
    out_edges: List[PoaEdge] = field(default_factory=list)  # Creation order
    in_edges: List[PoaEdge] = field(default_factory=list)
    aligned_nodes: List[int] = field(default_factory=list)  # Same column, other symbols
    successors: Dict[int, int] = field(default_factory=dict)  # sequence index -> next node id

    def successor(self, label: int) -> Optional[int]:
        """Next node on the path of sequence `label`, or None where that path ends."""
        return self.successors.get(label)


# ============================================================================
# Graph Store
# ============================================================================

class PoaGraph:
    """
    Incrementally built partial-order alignment graph.

    The consensus and multiple sequence alignment are delegated to an
    injected GraphTraversal (heaviest bundle by default).
    """

    def __init__(self, traversal: Optional[GraphTraversal] = None):
        self.nodes: List[PoaNode] = []
        self.edges: List[PoaEdge] = []
        self.sequences: List[Optional[int]] = []  # Head node id per sequence entry
        self.rank_to_node: List[int] = []  # Topological order of node ids
        self._coder: Dict[str, int] = {}
        self._decoder: List[str] = []
        self._consensus: List[int] = []
        self._traversal = traversal if traversal is not None else HeaviestBundleTraversal()

    def __repr__(self) -> str:
        return (f"PoaGraph(nodes={len(self.nodes)}, edges={len(self.edges)}, "
                f"sequences={len(self.sequences)})")

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def node_count(self) -> int:
        return len(self.nodes)

    def edge_count(self) -> int:
        return len(self.edges)

    def sequence_count(self) -> int:
        return len(self.sequences)

    @property
    def consensus(self) -> List[int]:
        """Node ids of the last computed consensus (empty after any mutation)."""
        return list(self._consensus)

    def decoder(self, code: int) -> str:
        """Symbol for a node code."""
        return self._decoder[code]

    def symbol(self, node_id: int) -> str:
        """Decoded symbol of a node."""
        return self._decoder[self.nodes[node_id].code]

    def sequence_path(self, index: int) -> List[int]:
        """
        Node ids visited by sequence `index`, from its head until its
        successor relation is exhausted.
        """
        path = []
        curr = self.sequences[index]
        while curr is not None:
            path.append(curr)
            curr = self.nodes[curr].successor(index)
        return path

    # ------------------------------------------------------------------
    # Consensus / MSA
    # ------------------------------------------------------------------

    def generate_consensus(self) -> List[int]:
        """
        Compute the consensus path and keep it for reuse until the next
        mutation.

        Returns:
            Ordered node ids of the consensus path
        """
        self._consensus = list(self._traversal.generate_consensus(self))
        logger.debug(f"Consensus path spans {len(self._consensus)} nodes")
        return list(self._consensus)

    def generate_consensus_sequence(self) -> str:
        """Consensus path decoded into a plain sequence."""
        return ''.join(self.symbol(node_id) for node_id in self.generate_consensus())

    def generate_msa(self, include_consensus: bool = False) -> List[str]:
        """
        Column-aligned row per sequence entry, in the order sequences were
        added, optionally followed by the consensus row.
        """
        return list(self._traversal.generate_msa(self, include_consensus=include_consensus))

    # ------------------------------------------------------------------
    # Mutation
    # ------------------------------------------------------------------

    def add_alignment(
        self,
        alignment: Sequence[Tuple[int, int]],
        sequence: str,
        weights: Optional[Sequence[Weight]] = None
    ) -> None:
        """
        Fold an alignment of `sequence` against the current graph into
        the graph and append one sequence entry.

        Args:
            alignment: (node id or -1, sequence position or -1) pairs computed
                       against this graph's current state
            sequence: The aligned sequence
            weights: Optional per-position weights (default 1 each); the
                     edge entering position i gains weights[i]

        Raises:
            AlignmentInputError: On weight/sequence length mismatch, negative
                                 weights, or alignment pairs outside the graph
                                 or the sequence.
        """
        if weights is None:
            weights = [1] * len(sequence)
        else:
            weights = list(weights)
            if len(weights) != len(sequence):
                raise AlignmentInputError(
                    f"Sequence and weights are of unequal size: "
                    f"{len(sequence)} != {len(weights)}"
                )
            if any(w < 0 for w in weights):
                raise AlignmentInputError("Weights must be non-negative")

        self._validate_alignment(alignment, len(sequence))

        if not sequence:
            self.sequences.append(None)
            self._consensus = []
            return

        for symbol in sequence:
            self._encode(symbol)

        valid_positions = [pos for _, pos in alignment if pos != -1]
        if not valid_positions:
            self.sequences.append(self._add_sequence(sequence, weights, 0, len(sequence)))
            self._finish_mutation()
            return

        first, last = valid_positions[0], valid_positions[-1]

        num_nodes = len(self.nodes)
        begin_node = self._add_sequence(sequence, weights, 0, first)
        head_node = len(self.nodes) - 1 if len(self.nodes) != num_nodes else None
        tail_node = self._add_sequence(sequence, weights, last + 1, len(sequence))

        for node_id, pos in alignment:
            if pos == -1:
                continue

            letter = sequence[pos]
            if node_id == -1:
                new_node = self._add_node(self._coder[letter])
            else:
                new_node = self._matching_node(node_id, letter)

            if begin_node is None:
                begin_node = new_node
            if head_node is not None and head_node != new_node:
                self._add_edge(head_node, new_node, weights[pos])
            head_node = new_node

        if tail_node is not None:
            self._add_edge(head_node, tail_node, weights[last + 1])

        self.sequences.append(begin_node)
        self._finish_mutation()

    def _validate_alignment(self, alignment: Sequence[Tuple[int, int]], sequence_len: int):
        # Column of a node: first rank of its aligned group (groups are contiguous)
        node_id_to_rank = [0] * len(self.nodes)
        for rank, node_id in enumerate(self.rank_to_node):
            node_id_to_rank[node_id] = rank

        prev_pos = -1
        prev_column = -1
        for node_id, pos in alignment:
            if node_id < -1 or node_id >= len(self.nodes):
                raise AlignmentInputError(f"Alignment references unknown node {node_id}")
            if pos < -1 or pos >= sequence_len:
                raise AlignmentInputError(
                    f"Alignment position {pos} outside sequence of length {sequence_len}"
                )
            if node_id == -1 and pos == -1:
                raise AlignmentInputError("Alignment pair aligns neither a node nor a position")
            if pos != -1:
                if pos <= prev_pos:
                    raise AlignmentInputError("Alignment positions must be strictly increasing")
                prev_pos = pos
            if node_id != -1:
                node = self.nodes[node_id]
                column = min([node_id_to_rank[node_id]] +
                             [node_id_to_rank[a] for a in node.aligned_nodes])
                if column <= prev_column:
                    raise AlignmentInputError(
                        f"Alignment nodes must follow the graph's topological order "
                        f"(node {node_id} repeats or precedes an earlier column)"
                    )
                prev_column = column

    def _matching_node(self, node_id: int, letter: str) -> int:
        """Node carrying `letter` in the column of `node_id`, created if missing."""
        node = self.nodes[node_id]
        if self._decoder[node.code] == letter:
            return node_id

        for aligned_id in node.aligned_nodes:
            if self._decoder[self.nodes[aligned_id].code] == letter:
                return aligned_id

        new_id = self._add_node(self._coder[letter])
        new_node = self.nodes[new_id]
        for aligned_id in node.aligned_nodes:
            new_node.aligned_nodes.append(aligned_id)
            self.nodes[aligned_id].aligned_nodes.append(new_id)
        new_node.aligned_nodes.append(node_id)
        node.aligned_nodes.append(new_id)
        return new_id

    def _encode(self, symbol: str) -> int:
        code = self._coder.get(symbol)
        if code is None:
            code = len(self._decoder)
            self._coder[symbol] = code
            self._decoder.append(symbol)
        return code

    def _add_node(self, code: int) -> int:
        node_id = len(self.nodes)
        self.nodes.append(PoaNode(id=node_id, code=code))
        return node_id

    def _add_edge(self, tail: int, head: int, weight: Weight):
        label = len(self.sequences)
        tail_node = self.nodes[tail]
        tail_node.successors[label] = head

        for edge in tail_node.out_edges:
            if edge.head == head:
                edge.add_sequence(weight)
                return

        edge = PoaEdge(tail=tail, head=head, weight=weight)
        self.edges.append(edge)
        tail_node.out_edges.append(edge)
        self.nodes[head].in_edges.append(edge)

    def _add_sequence(
        self,
        sequence: str,
        weights: Sequence[Weight],
        begin: int,
        end: int
    ) -> Optional[int]:
        """Append sequence[begin:end] as a fresh chain; returns its first node id."""
        if begin == end:
            return None

        prev = None
        for i in range(begin, end):
            curr = self._add_node(self._coder[sequence[i]])
            if prev is not None:
                self._add_edge(prev, curr, weights[i])
            prev = curr
        return len(self.nodes) - (end - begin)

    def _finish_mutation(self):
        self._consensus = []
        self._topological_sort()

    def _topological_sort(self):
        """
        Order nodes so that every edge points forward and each group of
        aligned nodes occupies consecutive ranks.
        """
        self.rank_to_node = []
        marks = [0] * len(self.nodes)  # 0 unvisited, 1 in progress, 2 done
        ignored = [False] * len(self.nodes)

        for start in self.nodes:
            if marks[start.id] != 0:
                continue

            stack = [start.id]
            while stack:
                node = self.nodes[stack[-1]]
                is_valid = True

                if marks[node.id] != 2:
                    for edge in node.in_edges:
                        if marks[edge.tail] != 2:
                            stack.append(edge.tail)
                            is_valid = False

                    if not ignored[node.id]:
                        for aligned_id in node.aligned_nodes:
                            if marks[aligned_id] != 2:
                                stack.append(aligned_id)
                                ignored[aligned_id] = True
                                is_valid = False

                    if is_valid:
                        marks[node.id] = 2
                        if not ignored[node.id]:
                            self.rank_to_node.append(node.id)
                            self.rank_to_node.extend(node.aligned_nodes)
                    else:
                        marks[node.id] = 1

                if is_valid:
                    stack.pop()


# PoaWeaver v0.1.0
# Any usage is subject to this software's license.
