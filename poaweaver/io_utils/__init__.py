"""
PoaWeaver v0.1.0

I/O Module for PoaWeaver.

1. sequence_io.py - FASTA/FASTQ reading, FASTA writing
2. gfa_export.py - POA graph serialization to GFA
"""

from .sequence_io import (
    SequenceRecord,
    detect_format,
    iter_sequences,
    read_sequences,
    write_fasta,
)

from .gfa_export import (
    GFASegment,
    GFALink,
    GFAPath,
    to_gfa,
    write_gfa,
    segment_name,
    format_weight,
)

__all__ = [
    # Sequence I/O
    "SequenceRecord",
    "detect_format",
    "iter_sequences",
    "read_sequences",
    "write_fasta",
    
    # GFA export
    "GFASegment",
    "GFALink",
    "GFAPath",
    "to_gfa",
    "write_gfa",
    "segment_name",
    "format_weight",
]
