"""
PoaWeaver v0.1.0

Sequence utility functions for PoaWeaver.

Provides reverse complementing for strand-ambiguous alignment and the
conversion of base qualities into per-position graph weights.
"""

from typing import List, Optional, Sequence


_COMPLEMENT = str.maketrans(
    'ACGTUNRYSWKMBDHVacgtunryswkmbdhv',
    'TGCAANYRSWMKVHDBtgcaanyrswmkvhdb'
)


def reverse_complement(sequence: str) -> str:
    """
    Generate reverse complement of a nucleotide sequence.
    
    IUPAC ambiguity codes are complemented; any other symbol is kept as is.
    
    Args:
        sequence: DNA sequence string
        
    Returns:
        Reverse complement sequence
        
    Example:
        >>> reverse_complement("ATCG")
        'CGAT'
    """
    return sequence.translate(_COMPLEMENT)[::-1]


def quality_to_weights(qualities: Optional[Sequence[int]]) -> Optional[List[int]]:
    """
    Turn Phred base qualities into per-position alignment weights.
    
    Args:
        qualities: Phred scores (as parsed by Biopython), or None
        
    Returns:
        One non-negative integer weight per base, or None without qualities
        
    Example:
        >>> quality_to_weights([40, 0, 12])
        [40, 0, 12]
    """
    if qualities is None:
        return None
    return [max(int(q), 0) for q in qualities]


__all__ = [
    'reverse_complement',
    'quality_to_weights',
]
