#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
PoaWeaver v0.1.0

Pytest configuration and shared fixtures.

Author: PoaWeaver Development Team
License: Dual License (Academic/Commercial) - See LICENSE_ACADEMIC.md and LICENSE_COMMERCIAL.md
"""

import pytest
from pathlib import Path
import tempfile
import shutil

from poaweaver.poa_core.graph import PoaGraph


class StubAligner:
    """Aligner returning hand-built alignments in the order they were queued."""

    def __init__(self, alignments=None):
        self.alignments = list(alignments or [])
        self.calls = []

    def align(self, sequence, graph):
        self.calls.append(sequence)
        if self.alignments:
            return self.alignments.pop(0), 0
        return [], 0


class CountingTraversal:
    """Traversal returning a fixed consensus and counting calls."""

    def __init__(self, consensus):
        self.consensus = list(consensus)
        self.consensus_calls = 0

    def generate_consensus(self, graph):
        self.consensus_calls += 1
        return list(self.consensus)

    def generate_msa(self, graph, include_consensus=False):
        return []


@pytest.fixture
def temp_output_dir():
    """Create temporary output directory for tests."""
    temp_dir = tempfile.mkdtemp(prefix="poaweaver_test_")
    yield Path(temp_dir)
    # Cleanup after test
    shutil.rmtree(temp_dir, ignore_errors=True)


@pytest.fixture
def stub_aligner():
    """Factory for stub aligners with queued alignments."""
    return StubAligner


@pytest.fixture
def counting_traversal():
    """Factory for traversals with a fixed consensus."""
    return CountingTraversal


@pytest.fixture
def ac_ag_graph():
    """Graph of "AC" then "AG": nodes A, C, G and edges A->C, A->G."""
    graph = PoaGraph()
    graph.add_alignment([], "AC")
    graph.add_alignment([(0, 0), (1, 1)], "AG")
    return graph


@pytest.fixture
def simple_fasta():
    """Three short sequences differing by one SNP."""
    return ">read1\nACGT\n>read2\nACGT\n>read3\nAGGT\n"


@pytest.fixture
def simple_fastq():
    """Generate simple FASTQ reads for testing."""
    return """@read1
ACGT
+
IIII
@read2
ACGT
+
!!!+
"""

# PoaWeaver v0.1.0
# Any usage is subject to this software's license.
