#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
PoaWeaver v0.1.0

Consensus and multiple sequence alignment (MSA) extraction from a POA graph.

GraphTraversal is the interface PoaGraph depends on; HeaviestBundleTraversal
is the default implementation:

1. Consensus: dynamic programming over the topological order, each node
   keeps its heaviest incoming edge; if the best scoring node is not a sink
   the path is extended by branch completion until it reaches one.
2. MSA: aligned node groups share one column, each sequence fills the
   columns of the nodes on its path.

Author: PoaWeaver Development Team
License: Dual License (Academic/Commercial) - See LICENSE_ACADEMIC.md and LICENSE_COMMERCIAL.md
"""

from __future__ import annotations

from typing import TYPE_CHECKING, List, Optional, Protocol
import logging

if TYPE_CHECKING:
    from .graph import PoaGraph

logger = logging.getLogger(__name__)

GAP = '-'


class GraphTraversal(Protocol):
    """Interface for consensus and MSA computation over a PoaGraph."""

    def generate_consensus(self, graph: PoaGraph) -> List[int]:
        """Return the consensus path as ordered node ids."""
        ...

    def generate_msa(self, graph: PoaGraph, include_consensus: bool = False) -> List[str]:
        """Return one column-aligned row per sequence entry."""
        ...


class HeaviestBundleTraversal:
    """Heaviest bundle consensus and column-aligned MSA."""

    def generate_consensus(self, graph: PoaGraph) -> List[int]:
        if not graph.rank_to_node:
            return []

        num_nodes = graph.node_count()
        predecessors: List[Optional[int]] = [None] * num_nodes
        scores = [-1] * num_nodes

        best = None
        for node_id in graph.rank_to_node:
            self._score_node(graph, node_id, scores, predecessors, skip_unscored=False)
            if best is None or scores[best] < scores[node_id]:
                best = node_id

        if graph.nodes[best].out_edges:
            node_id_to_rank = [0] * num_nodes
            for rank, node_id in enumerate(graph.rank_to_node):
                node_id_to_rank[node_id] = rank

            while graph.nodes[best].out_edges:
                best = self._branch_completion(
                    graph, scores, predecessors, node_id_to_rank[best]
                )

        path = [best]
        while predecessors[best] is not None:
            best = predecessors[best]
            path.append(best)
        path.reverse()
        return path

    @staticmethod
    def _score_node(graph, node_id, scores, predecessors, skip_unscored):
        """Pick the heaviest incoming edge of a node and accumulate its score."""
        for edge in graph.nodes[node_id].in_edges:
            if skip_unscored and scores[edge.tail] == -1:
                continue
            pred = predecessors[node_id]
            if (scores[node_id] < edge.weight or
                    (scores[node_id] == edge.weight and pred is not None and
                     scores[pred] <= scores[edge.tail])):
                scores[node_id] = edge.weight
                predecessors[node_id] = edge.tail

        if predecessors[node_id] is not None:
            scores[node_id] += scores[predecessors[node_id]]

    def _branch_completion(self, graph, scores, predecessors, rank: int) -> int:
        """
        Rescore every node after `rank` using only paths that leave through
        the node at `rank`; returns the new best scoring node.
        """
        node = graph.nodes[graph.rank_to_node[rank]]
        for edge in node.out_edges:
            for in_edge in graph.nodes[edge.head].in_edges:
                if in_edge.tail != node.id:
                    scores[in_edge.tail] = -1

        best = None
        for node_id in graph.rank_to_node[rank + 1:]:
            scores[node_id] = -1
            predecessors[node_id] = None
            self._score_node(graph, node_id, scores, predecessors, skip_unscored=True)
            if best is None or scores[best] < scores[node_id]:
                best = node_id
        return best

    def generate_msa(self, graph: PoaGraph, include_consensus: bool = False) -> List[str]:
        node_id_to_column = [0] * graph.node_count()
        num_columns = 0
        rank = 0
        while rank < len(graph.rank_to_node):
            node = graph.nodes[graph.rank_to_node[rank]]
            node_id_to_column[node.id] = num_columns
            for aligned_id in node.aligned_nodes:
                node_id_to_column[aligned_id] = num_columns
            rank += 1 + len(node.aligned_nodes)
            num_columns += 1

        rows = []
        for index in range(graph.sequence_count()):
            row = [GAP] * num_columns
            for node_id in graph.sequence_path(index):
                row[node_id_to_column[node_id]] = graph.symbol(node_id)
            rows.append(''.join(row))

        if include_consensus:
            row = [GAP] * num_columns
            for node_id in graph.generate_consensus():
                row[node_id_to_column[node_id]] = graph.symbol(node_id)
            rows.append(''.join(row))

        logger.debug(f"MSA: {len(rows)} rows x {num_columns} columns")
        return rows


# PoaWeaver v0.1.0
# Any usage is subject to this software's license.
