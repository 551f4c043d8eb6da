#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
PoaWeaver v0.1.0

Tests for sequence manipulation utilities.

Author: PoaWeaver Development Team
License: Dual License (Academic/Commercial) - See LICENSE_ACADEMIC.md and LICENSE_COMMERCIAL.md
"""

import pytest
from poaweaver.utils.sequence_utils import (
    quality_to_weights,
    reverse_complement,
)


class TestReverseComplement:
    """Test reverse complement function."""

    def test_basic_reverse_complement(self):
        """Test basic reverse complement."""
        assert reverse_complement("ATCG") == "CGAT"

    def test_palindrome(self):
        """Test palindromic sequence."""
        sequence = "GAATTC"  # EcoRI site
        assert reverse_complement(sequence) == sequence

    def test_double_reverse_complement(self):
        """Test that double reverse complement returns original."""
        sequence = "ATCGATCGTTAGGC"
        assert reverse_complement(reverse_complement(sequence)) == sequence

    def test_lowercase_preserved(self):
        assert reverse_complement("acgT") == "Acgt"

    def test_ambiguity_codes(self):
        assert reverse_complement("NRYK") == "MRYN"

    def test_unknown_symbols_kept(self):
        assert reverse_complement("A-*") == "*-T"

    def test_empty(self):
        assert reverse_complement("") == ""


class TestQualityWeights:
    """Test quality to weight conversion."""

    def test_phred_scores(self):
        assert quality_to_weights([40, 0, 12]) == [40, 0, 12]

    def test_negative_clamped(self):
        assert quality_to_weights([-5, 3]) == [0, 3]

    def test_missing_qualities(self):
        assert quality_to_weights(None) is None
