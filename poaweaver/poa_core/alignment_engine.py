#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
PoaWeaver v0.1.0

Sequence-to-graph alignment engine.

Aligns a sequence against the current state of a PoaGraph and returns the
alignment as (node id or -1, sequence position or -1) pairs plus its score.
The alignment is later folded into the graph with PoaGraph.add_alignment().

Supported alignment modes:
- global (Needleman-Wunsch): whole sequence, source-to-sink graph path
- semi_global (overlap): free leading/trailing gaps on both sequence and graph
- local (Smith-Waterman): best scoring local match

Supported gap models (gap of length L):
- linear: L * g
- affine: g + (L - 1) * e
- convex: max(g + (L - 1) * e, q + (L - 1) * c)

All scores are signed 8-bit integers.

Author: PoaWeaver Development Team
License: Dual License (Academic/Commercial) - See LICENSE_ACADEMIC.md and LICENSE_COMMERCIAL.md
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Dict, List, Optional, Protocol, Tuple
import logging

import numpy as np

if TYPE_CHECKING:
    from .graph import PoaGraph

logger = logging.getLogger(__name__)

Alignment = List[Tuple[int, int]]

INT8_MIN = -128
INT8_MAX = 127

# Far below any reachable score, far enough from the int64 limit to add to
NEG_INF = -(1 << 40)


# ============================================================================
# Configuration
# ============================================================================

class AlignmentType(Enum):
    """Alignment mode."""
    LOCAL = "local"
    GLOBAL = "global"
    SEMI_GLOBAL = "semi_global"


class GapModel(Enum):
    """Gap cost model."""
    LINEAR = "linear"
    AFFINE = "affine"
    CONVEX = "convex"


def resolve_gap_model(gap_open: int, gap_extend: int,
                      gap_open_2: int, gap_extend_2: int) -> GapModel:
    """
    Pick the simplest gap model the scores describe.

    Linear when opening is no worse than extending, affine when the second
    pair never beats the first on long gaps, convex otherwise.
    """
    if gap_open >= gap_extend:
        return GapModel.LINEAR
    if gap_open <= gap_open_2 or gap_extend >= gap_extend_2:
        return GapModel.AFFINE
    return GapModel.CONVEX


@dataclass
class ScoringScheme:
    """Match/mismatch/gap scores for the alignment engine."""
    match: int = 5
    mismatch: int = -4
    gap_open: int = -8
    gap_extend: int = -6
    gap_open_2: int = -10
    gap_extend_2: int = -4
    gap_model: GapModel = GapModel.CONVEX

    def __post_init__(self):
        """Validate scores."""
        for name in ('match', 'mismatch', 'gap_open', 'gap_extend',
                     'gap_open_2', 'gap_extend_2'):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, (int, np.integer)):
                raise ValueError(f"{name} must be an integer, got {value!r}")
            if not INT8_MIN <= value <= INT8_MAX:
                raise ValueError(
                    f"{name} must fit a signed 8-bit integer "
                    f"[{INT8_MIN}, {INT8_MAX}], got {value}"
                )
        if isinstance(self.gap_model, str):
            self.gap_model = GapModel(self.gap_model)

    @property
    def gap_pieces(self) -> List[Tuple[int, int]]:
        """(open, extend) pairs, one per affine piece of the gap function."""
        if self.gap_model == GapModel.LINEAR:
            return [(self.gap_open, self.gap_open)]
        if self.gap_model == GapModel.AFFINE:
            return [(self.gap_open, self.gap_extend)]
        return [(self.gap_open, self.gap_extend), (self.gap_open_2, self.gap_extend_2)]

    def gap_score(self, length: int) -> int:
        """Score of a single gap of `length` symbols."""
        if length <= 0:
            return 0
        return max(g + (length - 1) * e for g, e in self.gap_pieces)


# ============================================================================
# Engine interface
# ============================================================================

class AlignmentEngine(Protocol):
    """Interface of a sequence-to-graph aligner."""

    def align(self, sequence: str, graph: PoaGraph) -> Tuple[Alignment, int]:
        """Align `sequence` to `graph`; returns (alignment, score)."""
        ...


def create_alignment_engine(
    mode,
    match: int,
    mismatch: int,
    gap: int,
    gap_extend: Optional[int] = None,
    gap_open_2: Optional[int] = None,
    gap_extend_2: Optional[int] = None
) -> NumpyAlignmentEngine:
    """
    Build an alignment engine from raw scores.

    Passing only `gap` gives a linear gap model; adding `gap_extend` an
    affine one; adding both second-piece scores a convex one. The model is
    downgraded when the scores do not need the richer one.

    Args:
        mode: AlignmentType or its value ('local', 'global', 'semi_global')
        match: Match score
        mismatch: Mismatch score
        gap: Gap (open) score
        gap_extend: Gap extension score
        gap_open_2: Second gap open score
        gap_extend_2: Second gap extension score

    Returns:
        Configured NumpyAlignmentEngine

    Raises:
        ValueError: On unknown mode, scores outside the signed 8-bit range,
                    or a second gap piece given without the first.
    """
    mode = AlignmentType(mode)

    if gap_extend is None:
        if gap_open_2 is not None or gap_extend_2 is not None:
            raise ValueError("Second gap piece requires gap_extend")
        scheme = ScoringScheme(match, mismatch, gap, gap, gap, gap, GapModel.LINEAR)
    elif gap_open_2 is None and gap_extend_2 is None:
        model = GapModel.LINEAR if gap >= gap_extend else GapModel.AFFINE
        scheme = ScoringScheme(match, mismatch, gap, gap_extend, gap, gap_extend, model)
    elif gap_open_2 is None or gap_extend_2 is None:
        raise ValueError("gap_open_2 and gap_extend_2 must be given together")
    else:
        # Range-check before resolving the model
        scheme = ScoringScheme(match, mismatch, gap, gap_extend, gap_open_2, gap_extend_2)
        scheme.gap_model = resolve_gap_model(gap, gap_extend, gap_open_2, gap_extend_2)

    logger.debug(f"Alignment engine: {mode.value}, {scheme.gap_model.value} gaps")
    return NumpyAlignmentEngine(mode, scheme)


# ============================================================================
# Dynamic programming engine
# ============================================================================

class NumpyAlignmentEngine:
    """
    Sequence-to-graph dynamic programming aligner.

    Rows follow the graph's topological order (row 0 is a virtual start
    node), columns are sequence positions. Each row is filled with numpy
    vector operations; insertion runs use a running maximum so a whole row
    is computed without a per-cell Python loop.
    """

    def __init__(self, mode: AlignmentType = AlignmentType.GLOBAL,
                 scoring: Optional[ScoringScheme] = None):
        self.mode = AlignmentType(mode)
        self.scoring = scoring if scoring is not None else ScoringScheme()

    def __repr__(self) -> str:
        return (f"NumpyAlignmentEngine(mode={self.mode.value}, "
                f"gap_model={self.scoring.gap_model.value})")

    def align(self, sequence: str, graph: PoaGraph) -> Tuple[Alignment, int]:
        if not sequence or graph.node_count() == 0:
            return [], 0

        scoring = self.scoring
        pieces = scoring.gap_pieces
        ranks = graph.rank_to_node
        num_rows = len(ranks) + 1
        n = len(sequence)
        cols = np.arange(n + 1, dtype=np.int64)

        node_id_to_row = [0] * graph.node_count()
        for rank, node_id in enumerate(ranks):
            node_id_to_row[node_id] = rank + 1

        pred_rows: List[List[int]] = [[]]
        for node_id in ranks:
            in_edges = graph.nodes[node_id].in_edges
            pred_rows.append([node_id_to_row[e.tail] for e in in_edges] or [0])

        seq_array = np.array(list(sequence))
        profile: Dict[int, np.ndarray] = {}

        H = np.full((num_rows, n + 1), NEG_INF, dtype=np.int64)
        X = np.full((num_rows, n + 1), NEG_INF, dtype=np.int64)
        E = [np.full((num_rows, n + 1), NEG_INF, dtype=np.int64) for _ in pieces]

        H[0, 0] = 0
        if self.mode == AlignmentType.GLOBAL:
            H[0, 1:] = np.max([g + (cols[1:] - 1) * e for g, e in pieces], axis=0)
        else:
            H[0, :] = 0
        X[0] = H[0]

        for row in range(1, num_rows):
            node = graph.nodes[ranks[row - 1]]
            preds = pred_rows[row]

            scores = profile.get(node.code)
            if scores is None:
                scores = np.where(seq_array == graph.decoder(node.code),
                                  scoring.match, scoring.mismatch).astype(np.int64)
                profile[node.code] = scores

            x_row = np.full(n + 1, NEG_INF, dtype=np.int64)
            x_row[1:] = H[preds, :-1].max(axis=0) + scores

            for (g, e), E_p in zip(pieces, E):
                E_p[row] = np.maximum(H[preds] + g, E_p[preds] + e).max(axis=0)
                np.maximum(x_row, E_p[row], out=x_row)

            if self.mode == AlignmentType.SEMI_GLOBAL:
                x_row[0] = max(x_row[0], 0)
            elif self.mode == AlignmentType.LOCAL:
                np.maximum(x_row, 0, out=x_row)
            X[row] = x_row

            h_row = x_row.copy()
            for g, e in pieces:
                np.maximum(h_row, self._insertion_row(x_row, cols, g, e), out=h_row)
            H[row] = h_row

        row, col = self._best_cell(graph, H, ranks, node_id_to_row)
        score = int(H[row, col])
        if self.mode == AlignmentType.LOCAL and score <= 0:
            return [], 0

        alignment = self._traceback(sequence, graph, H, X, E, pred_rows, ranks, row, col)
        return alignment, score

    @staticmethod
    def _insertion_row(x_row: np.ndarray, cols: np.ndarray, g: int, e: int) -> np.ndarray:
        """
        Best score of ending each column in an insertion run:
        F[j] = max over k < j of X[k] + g + (j - 1 - k) * e
        """
        running = np.maximum.accumulate(x_row - cols * e)
        f_row = np.full_like(x_row, NEG_INF)
        f_row[1:] = running[:-1] + g + (cols[1:] - 1) * e
        return f_row

    def _best_cell(self, graph, H, ranks, node_id_to_row) -> Tuple[int, int]:
        n = H.shape[1] - 1
        sink_rows = [node_id_to_row[node_id] for node_id in ranks
                     if not graph.nodes[node_id].out_edges]

        if self.mode == AlignmentType.GLOBAL:
            best = max(sink_rows, key=lambda r: (H[r, n], -r))
            return best, n

        if self.mode == AlignmentType.SEMI_GLOBAL:
            best_row = 1 + int(np.argmax(H[1:, n]))
            best_col = n
            best_score = H[best_row, n]
            for r in sink_rows:
                j = int(np.argmax(H[r]))
                if H[r, j] > best_score:
                    best_row, best_col, best_score = r, j, H[r, j]
            return best_row, best_col

        flat = int(np.argmax(H[1:]))
        return 1 + flat // (n + 1), flat % (n + 1)

    def _traceback(self, sequence, graph, H, X, E, pred_rows, ranks,
                   row: int, col: int) -> Alignment:
        scoring = self.scoring
        pieces = scoring.gap_pieces
        alignment: Alignment = []

        target = int(H[row, col])
        piece = None  # Index of the gap piece while inside a deletion run
        allow_insertion = True

        while True:
            if row == 0:
                if self.mode == AlignmentType.GLOBAL:
                    alignment.extend((-1, j) for j in range(col - 1, -1, -1))
                break

            node_id = ranks[row - 1]

            if piece is not None:
                g, e = pieces[piece]
                alignment.append((node_id, -1))
                for q in pred_rows[row]:
                    if H[q, col] + g == target:
                        row, target, piece = q, int(H[q, col]), None
                        allow_insertion = True
                        break
                    if E[piece][q, col] + e == target:
                        row, target = q, int(E[piece][q, col])
                        break
                else:
                    raise RuntimeError(f"Traceback failed in deletion at row {row}")
                continue

            if self.mode == AlignmentType.LOCAL and target == 0:
                break
            if self.mode == AlignmentType.SEMI_GLOBAL and col == 0:
                break

            if col > 0:
                symbol = graph.symbol(node_id)
                s = scoring.match if symbol == sequence[col - 1] else scoring.mismatch
                match_row = next((q for q in pred_rows[row] if H[q, col - 1] + s == target), None)
                if match_row is not None:
                    alignment.append((node_id, col - 1))
                    row, col = match_row, col - 1
                    target = int(H[row, col])
                    allow_insertion = True
                    continue

            deletion = next((p for p, E_p in enumerate(E) if E_p[row, col] == target), None)
            if deletion is not None:
                piece = deletion
                continue

            if allow_insertion and col > 0:
                start = self._insertion_start(X[row], col, target)
                if start is not None:
                    alignment.extend((-1, j) for j in range(col - 1, start - 1, -1))
                    col = start
                    target = int(X[row, col])
                    allow_insertion = False
                    continue

            raise RuntimeError(f"Traceback failed at row {row}, column {col}")

        alignment.reverse()
        return alignment

    def _insertion_start(self, x_row: np.ndarray, col: int, target: int) -> Optional[int]:
        """Column where the insertion run ending at `col` with score `target` opens."""
        for g, e in self.scoring.gap_pieces:
            for k in range(col - 1, -1, -1):
                if x_row[k] + g + (col - 1 - k) * e == target:
                    return k
        return None


# PoaWeaver v0.1.0
# Any usage is subject to this software's license.
