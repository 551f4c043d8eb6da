#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
PoaWeaver v0.1.0

Package initialization and version metadata.

Author: PoaWeaver Development Team
License: Dual License (Academic/Commercial) - See LICENSE_ACADEMIC.md and LICENSE_COMMERCIAL.md
"""

from .version import __version__
from .poa_core import (
    PoaGraph,
    PoaBuilder,
    create_alignment_engine,
    PoaError,
    AlignmentInputError,
    MissingHeaderError,
)
from .io_utils.gfa_export import to_gfa, write_gfa

__all__ = [
    "__version__",
    "PoaGraph",
    "PoaBuilder",
    "create_alignment_engine",
    "PoaError",
    "AlignmentInputError",
    "MissingHeaderError",
    "to_gfa",
    "write_gfa",
]

# PoaWeaver v0.1.0
# Any usage is subject to this software's license.
