#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
PoaWeaver v0.1.0

Exception types raised by the POA graph core and the GFA serializer.

Author: PoaWeaver Development Team
License: Dual License (Academic/Commercial) - See LICENSE_ACADEMIC.md and LICENSE_COMMERCIAL.md
"""


class PoaError(Exception):
    """Base class for all PoaWeaver errors."""
    pass


class AlignmentInputError(PoaError, ValueError):
    """Raised when an alignment, sequence or weight list cannot be folded into a graph."""
    pass


class MissingHeaderError(PoaError):
    """
    Raised when fewer headers than sequence entries are passed to the
    GFA serializer.
    """

    def __init__(self, num_headers: int, num_sequences: int):
        self.num_headers = num_headers
        self.num_sequences = num_sequences
        super().__init__(
            f"Missing header(s) for GFA generation: got {num_headers}, "
            f"graph holds {num_sequences} sequence(s)"
        )


# PoaWeaver v0.1.0
# Any usage is subject to this software's license.
