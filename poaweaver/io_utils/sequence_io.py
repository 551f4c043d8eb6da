#!/usr/bin/env python
# -*- coding: utf-8 -*-

"""
Sequence I/O for PoaWeaver.

- SequenceRecord: sequence with identifier and optional per-base weights
- FASTA/FASTQ reading (plain or gzipped) through Biopython
- FASTA writing for consensus and MSA output
"""

import gzip
import logging
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Iterator, List, Optional, TextIO, Union

from Bio import SeqIO

from ..utils.sequence_utils import quality_to_weights

logger = logging.getLogger(__name__)

FASTQ_SUFFIXES = ('.fastq', '.fq')
FASTA_SUFFIXES = ('.fasta', '.fa', '.fna', '.faa', '.fas')


@dataclass
class SequenceRecord:
    """
    Input sequence for graph construction.

    Attributes:
        id: Sequence identifier (used as GFA path name)
        sequence: Sequence string
        weights: Per-base weights from FASTQ qualities (None for FASTA)
    """
    id: str
    sequence: str
    weights: Optional[List[int]] = None

    def __len__(self) -> int:
        return len(self.sequence)


def detect_format(filepath: Union[str, Path]) -> str:
    """
    Guess 'fasta' or 'fastq' from the file suffix (ignoring .gz).

    Falls back to peeking at the first character of the file.
    """
    filepath = Path(filepath)
    suffixes = [s.lower() for s in filepath.suffixes if s.lower() not in ('.gz', '.gzip')]
    if suffixes:
        if suffixes[-1] in FASTQ_SUFFIXES:
            return 'fastq'
        if suffixes[-1] in FASTA_SUFFIXES:
            return 'fasta'

    with open_file(filepath) as handle:
        first = handle.read(1)
    if first == '@':
        return 'fastq'
    if first == '>':
        return 'fasta'
    raise ValueError(f"Cannot determine sequence format of {filepath}")


def open_file(filepath: Union[str, Path], mode: str = 'r') -> TextIO:
    """Open a plain or gzipped text file."""
    filepath = Path(filepath)
    if filepath.suffix in ('.gz', '.gzip'):
        return gzip.open(filepath, mode + 't')
    return open(filepath, mode)


def iter_sequences(
    filepath: Union[str, Path],
    min_length: int = 0
) -> Iterator[SequenceRecord]:
    """
    Read a FASTA or FASTQ file and yield SequenceRecord objects.

    Args:
        filepath: Path to FASTA/FASTQ file (can be gzipped)
        min_length: Skip sequences shorter than this

    Yields:
        SequenceRecord objects; FASTQ records carry Phred qualities as weights
    """
    filepath = Path(filepath)
    if not filepath.exists():
        raise FileNotFoundError(f"Sequence file not found: {filepath}")

    fmt = detect_format(filepath)
    skipped = 0

    with open_file(filepath) as handle:
        for record in SeqIO.parse(handle, fmt):
            sequence = str(record.seq)
            if len(sequence) < min_length:
                skipped += 1
                continue

            weights = None
            if fmt == 'fastq':
                weights = quality_to_weights(record.letter_annotations.get('phred_quality'))

            yield SequenceRecord(id=record.id, sequence=sequence, weights=weights)

    if skipped:
        logger.info(f"Skipped {skipped} sequences shorter than {min_length} from {filepath}")


def read_sequences(filepath: Union[str, Path], min_length: int = 0) -> List[SequenceRecord]:
    """Read all sequences of a FASTA/FASTQ file into a list."""
    records = list(iter_sequences(filepath, min_length=min_length))
    logger.info(f"Read {len(records)} sequences from {filepath}")
    return records


def write_fasta(
    records: Iterable[SequenceRecord],
    output: Union[str, Path, TextIO, None] = None,
    line_width: int = 0
) -> int:
    """
    Write records as FASTA.

    Args:
        records: Records to write
        output: File path, open text handle, or None for stdout
        line_width: Wrap sequence lines at this width (0 = no wrapping)

    Returns:
        Number of records written
    """
    if output is None:
        return _write_fasta_handle(records, sys.stdout, line_width)
    if isinstance(output, (str, Path)):
        with open_file(output, 'w') as handle:
            return _write_fasta_handle(records, handle, line_width)
    return _write_fasta_handle(records, output, line_width)


def _write_fasta_handle(records: Iterable[SequenceRecord], handle: TextIO, line_width: int) -> int:
    count = 0
    for record in records:
        handle.write(f">{record.id}\n")
        sequence = record.sequence
        if line_width and line_width > 0:
            for i in range(0, len(sequence), line_width):
                handle.write(sequence[i:i + line_width] + "\n")
        else:
            handle.write(sequence + "\n")
        count += 1
    return count
