"""
Tests for FASTA/FASTQ reading and FASTA writing.
"""

import gzip
import io

import pytest

from poaweaver.io_utils.sequence_io import (
    SequenceRecord,
    detect_format,
    iter_sequences,
    read_sequences,
    write_fasta,
)


class TestDetectFormat:
    """Test sequence format detection."""

    @pytest.mark.parametrize("name,fmt", [
        ("reads.fastq", "fastq"),
        ("reads.fq.gz", "fastq"),
        ("reads.fa", "fasta"),
        ("reads.FASTA", "fasta"),
        ("reads.fna.gz", "fasta"),
    ])
    def test_from_suffix(self, temp_output_dir, name, fmt):
        assert detect_format(temp_output_dir / name) == fmt

    def test_from_content(self, temp_output_dir, simple_fastq, simple_fasta):
        fq = temp_output_dir / "reads.txt"
        fq.write_text(simple_fastq)
        fa = temp_output_dir / "reads"
        fa.write_text(simple_fasta)

        assert detect_format(fq) == "fastq"
        assert detect_format(fa) == "fasta"

    def test_unknown(self, temp_output_dir):
        path = temp_output_dir / "reads.txt"
        path.write_text("ACGT\n")

        with pytest.raises(ValueError):
            detect_format(path)


class TestReadSequences:
    """Test reading sequence files."""

    def test_read_fasta(self, temp_output_dir, simple_fasta):
        path = temp_output_dir / "reads.fa"
        path.write_text(simple_fasta)

        records = read_sequences(path)

        assert [r.id for r in records] == ["read1", "read2", "read3"]
        assert [r.sequence for r in records] == ["ACGT", "ACGT", "AGGT"]
        assert all(r.weights is None for r in records)

    def test_read_fastq_weights(self, temp_output_dir, simple_fastq):
        path = temp_output_dir / "reads.fastq"
        path.write_text(simple_fastq)

        records = read_sequences(path)

        assert records[0].weights == [40, 40, 40, 40]
        assert records[1].weights == [0, 0, 0, 10]

    def test_read_gzipped(self, temp_output_dir, simple_fastq):
        path = temp_output_dir / "reads.fastq.gz"
        with gzip.open(path, 'wt') as f:
            f.write(simple_fastq)

        records = read_sequences(path)

        assert len(records) == 2
        assert records[0].sequence == "ACGT"

    def test_min_length(self, temp_output_dir):
        path = temp_output_dir / "reads.fa"
        path.write_text(">short\nAC\n>long\nACGTACGT\n")

        records = read_sequences(path, min_length=5)

        assert [r.id for r in records] == ["long"]

    def test_iterator_is_lazy(self, temp_output_dir, simple_fasta):
        path = temp_output_dir / "reads.fa"
        path.write_text(simple_fasta)

        first = next(iter_sequences(path))
        assert first.id == "read1"

    def test_missing_file(self, temp_output_dir):
        with pytest.raises(FileNotFoundError):
            read_sequences(temp_output_dir / "missing.fa")


class TestWriteFasta:
    """Test FASTA output."""

    def test_write_handle(self):
        out = io.StringIO()
        count = write_fasta([SequenceRecord("a", "ACGT"), SequenceRecord("b", "GG")], out)

        assert count == 2
        assert out.getvalue() == ">a\nACGT\n>b\nGG\n"

    def test_line_width(self):
        out = io.StringIO()
        write_fasta([SequenceRecord("a", "ACGTACGTA")], out, line_width=4)

        assert out.getvalue() == ">a\nACGT\nACGT\nA\n"

    def test_write_path(self, temp_output_dir):
        path = temp_output_dir / "out.fa"
        write_fasta([SequenceRecord("cons", "ACGT")], path)

        assert path.read_text() == ">cons\nACGT\n"

    def test_round_trip(self, temp_output_dir):
        path = temp_output_dir / "out.fa.gz"
        write_fasta([SequenceRecord("x", "ACGTTGCA")], path, line_width=3)

        records = read_sequences(path)
        assert records[0].id == "x"
        assert records[0].sequence == "ACGTTGCA"

    def test_record_length(self):
        assert len(SequenceRecord("a", "ACGT")) == 4
