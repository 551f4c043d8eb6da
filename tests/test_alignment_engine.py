#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
PoaWeaver v0.1.0

Tests for the sequence-to-graph alignment engine.

Author: PoaWeaver Development Team
License: Dual License (Academic/Commercial) - See LICENSE_ACADEMIC.md and LICENSE_COMMERCIAL.md
"""

import pytest

from poaweaver.poa_core import (
    AlignmentType,
    GapModel,
    NumpyAlignmentEngine,
    PoaGraph,
    ScoringScheme,
    create_alignment_engine,
    resolve_gap_model,
)


def chain_graph(sequence):
    graph = PoaGraph()
    graph.add_alignment([], sequence)
    return graph


def rescore(alignment, sequence, graph, scoring):
    """Score an alignment pair by pair, each gap run scored as one gap."""
    score = 0
    run_kind, run_len = None, 0
    for node_id, pos in alignment:
        if node_id == -1:
            kind = 'insertion'
        elif pos == -1:
            kind = 'deletion'
        else:
            kind = None

        if kind != run_kind:
            score += scoring.gap_score(run_len)
            run_kind, run_len = kind, 0

        if kind is None:
            same = graph.symbol(node_id) == sequence[pos]
            score += scoring.match if same else scoring.mismatch
        else:
            run_len += 1
    return score + scoring.gap_score(run_len)


class TestScoringScheme:
    """Test score validation and gap functions."""

    def test_defaults(self):
        scheme = ScoringScheme()
        assert (scheme.match, scheme.mismatch) == (5, -4)
        assert scheme.gap_model == GapModel.CONVEX

    def test_linear_gap(self):
        scheme = ScoringScheme(gap_open=-8, gap_model=GapModel.LINEAR)
        assert scheme.gap_score(1) == -8
        assert scheme.gap_score(3) == -24

    def test_affine_gap(self):
        scheme = ScoringScheme(gap_open=-8, gap_extend=-6, gap_model=GapModel.AFFINE)
        assert scheme.gap_score(1) == -8
        assert scheme.gap_score(3) == -20

    def test_convex_gap(self):
        scheme = ScoringScheme()
        assert scheme.gap_score(1) == -8
        assert scheme.gap_score(2) == -14
        assert scheme.gap_score(5) == -26

    def test_zero_length_gap(self):
        assert ScoringScheme().gap_score(0) == 0

    def test_gap_model_from_string(self):
        assert ScoringScheme(gap_model="affine").gap_model == GapModel.AFFINE

    @pytest.mark.parametrize("field", ["match", "mismatch", "gap_open", "gap_extend",
                                       "gap_open_2", "gap_extend_2"])
    def test_out_of_int8_range(self, field):
        with pytest.raises(ValueError):
            ScoringScheme(**{field: 128})
        with pytest.raises(ValueError):
            ScoringScheme(**{field: -129})

    def test_int8_bounds_accepted(self):
        scheme = ScoringScheme(match=127, mismatch=-128)
        assert scheme.match == 127

    def test_non_integer_rejected(self):
        with pytest.raises(ValueError):
            ScoringScheme(match=2.5)
        with pytest.raises(ValueError):
            ScoringScheme(match=True)


class TestGapModelResolution:
    """Test picking the simplest gap model."""

    def test_resolve(self):
        assert resolve_gap_model(-8, -6, -10, -4) == GapModel.CONVEX
        assert resolve_gap_model(-8, -8, -10, -4) == GapModel.LINEAR
        assert resolve_gap_model(-8, -6, -8, -6) == GapModel.AFFINE
        assert resolve_gap_model(-8, -4, -10, -6) == GapModel.AFFINE

    def test_factory_linear(self):
        engine = create_alignment_engine("global", 5, -4, -8)
        assert engine.scoring.gap_model == GapModel.LINEAR
        assert engine.mode == AlignmentType.GLOBAL

    def test_factory_affine(self):
        engine = create_alignment_engine("local", 5, -4, -8, -6)
        assert engine.scoring.gap_model == GapModel.AFFINE
        assert engine.mode == AlignmentType.LOCAL

    def test_factory_affine_downgraded(self):
        engine = create_alignment_engine("global", 5, -4, -8, -8)
        assert engine.scoring.gap_model == GapModel.LINEAR

    def test_factory_convex(self):
        engine = create_alignment_engine(AlignmentType.SEMI_GLOBAL, 5, -4, -8, -6, -10, -4)
        assert engine.scoring.gap_model == GapModel.CONVEX
        assert engine.mode == AlignmentType.SEMI_GLOBAL

    def test_factory_convex_downgraded(self):
        engine = create_alignment_engine("global", 5, -4, -8, -6, -8, -6)
        assert engine.scoring.gap_model == GapModel.AFFINE

    def test_factory_rejects_partial_second_piece(self):
        with pytest.raises(ValueError):
            create_alignment_engine("global", 5, -4, -8, -6, -10)
        with pytest.raises(ValueError):
            create_alignment_engine("global", 5, -4, -8, None, -10, -4)

    def test_factory_rejects_unknown_mode(self):
        with pytest.raises(ValueError):
            create_alignment_engine("banded", 5, -4, -8)

    def test_factory_rejects_large_scores(self):
        with pytest.raises(ValueError):
            create_alignment_engine("global", 5, -4, -200)


class TestGlobalAlignment:
    """Test global alignment."""

    def test_empty_inputs(self):
        engine = create_alignment_engine("global", 5, -4, -8)
        assert engine.align("", chain_graph("ACGT")) == ([], 0)
        assert engine.align("ACGT", PoaGraph()) == ([], 0)

    def test_identical(self):
        engine = create_alignment_engine("global", 5, -4, -8)
        alignment, score = engine.align("ACGT", chain_graph("ACGT"))

        assert alignment == [(0, 0), (1, 1), (2, 2), (3, 3)]
        assert score == 20

    def test_deletion(self):
        engine = create_alignment_engine("global", 5, -4, -8)
        graph = chain_graph("ACGT")
        alignment, score = engine.align("ACT", graph)

        assert alignment == [(0, 0), (1, 1), (2, -1), (3, 2)]
        assert score == 7

        graph.add_alignment(alignment, "ACT")
        assert graph.node_count() == 4
        assert graph.edge_count() == 4
        assert graph.sequence_path(1) == [0, 1, 3]

    def test_insertion(self):
        engine = create_alignment_engine("global", 5, -4, -8)
        graph = chain_graph("ACGT")
        alignment, score = engine.align("ACGGT", graph)

        assert score == 12
        assert sum(1 for node_id, _ in alignment if node_id == -1) == 1

        graph.add_alignment(alignment, "ACGGT")
        assert graph.node_count() == 5
        assert ''.join(graph.symbol(i) for i in graph.sequence_path(1)) == "ACGGT"

    def test_mismatch_preferred_over_gaps(self):
        engine = NumpyAlignmentEngine()
        alignment, score = engine.align("AG", chain_graph("AC"))

        assert alignment == [(0, 0), (1, 1)]
        assert score == 1

    def test_gap_models_change_score(self):
        graph = chain_graph("ACGT")

        linear = create_alignment_engine("global", 5, -4, -8)
        affine = create_alignment_engine("global", 5, -4, -8, -6)
        convex = create_alignment_engine("global", 5, -4, -8, -6, -10, -4)

        assert linear.align("ACCCCCCGT", graph)[1] == 20 - 40
        assert affine.align("ACCCCCCGT", graph)[1] == 20 - 32
        assert convex.align("ACCCCCCGT", graph)[1] == 20 - 26

    def test_alignment_covers_whole_sequence(self):
        engine = create_alignment_engine("global", 5, -4, -8, -6)
        alignment, _ = engine.align("TTACGTAA", chain_graph("ACGT"))

        positions = [pos for _, pos in alignment if pos != -1]
        assert positions == list(range(8))

    def test_branching_graph(self):
        engine = create_alignment_engine("global", 5, -4, -8)
        graph = PoaGraph()
        graph.add_alignment([], "ACT")
        graph.add_alignment([(0, 0), (1, 1), (2, 2)], "AGT")

        alignment, score = engine.align("AGT", graph)

        assert score == 15
        assert alignment == [(0, 0), (3, 1), (2, 2)]

    @pytest.mark.parametrize("gaps", [(-8,), (-8, -6), (-6, -2)])
    def test_score_matches_alignment(self, gaps):
        engine = create_alignment_engine("global", 5, -4, *gaps)
        graph = PoaGraph()
        for seq in ["ACGTTGCA", "ACGTGCA", "ACCTTGCA", "TCGTTGCAA", "GCATTACGT"]:
            alignment, score = engine.align(seq, graph)
            if graph.node_count():
                assert score == rescore(alignment, seq, graph, engine.scoring)
            graph.add_alignment(alignment, seq)


class TestLocalAlignment:
    """Test local alignment."""

    def test_embedded_match(self):
        engine = create_alignment_engine("local", 5, -4, -8)
        graph = chain_graph("ACGT")
        alignment, score = engine.align("TTACGTTT", graph)

        assert alignment == [(0, 2), (1, 3), (2, 4), (3, 5)]
        assert score == 20

        graph.add_alignment(alignment, "TTACGTTT")
        assert graph.node_count() == 8
        assert graph.edge_count() == 7
        assert [i + 1 for i in graph.sequence_path(1)] == [5, 6, 1, 2, 3, 4, 7, 8]

    def test_no_positive_match(self):
        engine = create_alignment_engine("local", 5, -4, -8)
        assert engine.align("TTT", chain_graph("AAAA")) == ([], 0)

    def test_part_of_graph(self):
        engine = create_alignment_engine("local", 5, -4, -8)
        alignment, score = engine.align("CGT", chain_graph("AACGTAA"))

        assert alignment == [(2, 0), (3, 1), (4, 2)]
        assert score == 15


class TestSemiGlobalAlignment:
    """Test semi-global (overlap) alignment."""

    def test_overlap(self):
        engine = create_alignment_engine("semi_global", 5, -4, -8)
        graph = chain_graph("GGACGT")
        alignment, score = engine.align("ACGTCC", graph)

        assert alignment == [(2, 0), (3, 1), (4, 2), (5, 3)]
        assert score == 20

        graph.add_alignment(alignment, "ACGTCC")
        assert graph.sequence_path(1) == [2, 3, 4, 5, 6, 7]

    def test_contained_sequence(self):
        engine = create_alignment_engine("semi_global", 5, -4, -8)
        alignment, score = engine.align("CGT", chain_graph("AACGTAA"))

        assert alignment == [(2, 0), (3, 1), (4, 2)]
        assert score == 15


class TestEngineRepr:

    def test_repr(self):
        engine = create_alignment_engine("local", 5, -4, -8, -6)
        assert repr(engine) == "NumpyAlignmentEngine(mode=local, gap_model=affine)"
