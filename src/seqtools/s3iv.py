import argparse
import sys
from dataclasses import dataclass
from typing import BinaryIO, List, Optional, TextIO

from tqdm import tqdm

from seqchunks.fasta import FastaRecord, read_fastas
from seqchunks.io_utils import open_inputs, open_output


@dataclass
class SequenceFilter:
    """Acceptance rules for FASTA records. Bounds are inclusive and optional."""
    min_length: Optional[int] = None
    max_length: Optional[int] = None
    drop_poly_n: bool = False

    def __post_init__(self):
        if self.min_length is not None and self.max_length is not None and self.min_length > self.max_length:
            raise ValueError(f"Minimum length {self.min_length} is larger than maximum length {self.max_length}")

    def accepts(self, record: FastaRecord) -> bool:
        length = len(record.seq)
        if self.min_length is not None and length < self.min_length:
            return False
        if self.max_length is not None and length > self.max_length:
            return False
        if self.drop_poly_n and is_poly_n(record.seq):
            return False
        return True


def is_poly_n(seq: str) -> bool:
    return all(base in "nN" for base in seq)


def sieve(source: BinaryIO, out: TextIO, seq_filter: SequenceFilter, progress: bool = False) -> int:
    """Copy the records of source accepted by seq_filter to out.

    Returns:
        int: The number of records written.
    """
    kept = 0
    for record in tqdm(read_fastas(source), desc="Filtering sequences", unit="seq", disable=not progress):
        if seq_filter.accepts(record):
            record.write(out)
            kept += 1
    return kept


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Filter sequences by length and poly-n content.")
    parser.add_argument("--seqIn", "-i", type=str, nargs="+", default=None, help="Fasta-formatted sequence input file(s). If not provided, defaults to STDIN.")
    parser.add_argument("--seqOut", "-o", type=str, default=None, help="Sequence output file. If not provided, defaults to STDOUT.")
    parser.add_argument("--minLength", "-m", type=int, default=None, help="Minimum sequence length. By default, no sequences are rejected for being too short.")
    parser.add_argument("--maxLength", "-x", type=int, default=None, help="Maximum sequence length. By default, no sequences are rejected for being too long.")
    parser.add_argument("--polyN", "-n", action="store_true", help="Enable filtering out of poly-n sequences.")
    parser.add_argument("--progress", "-p", action="store_true", help="Show a progress bar on STDERR.")
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> None:
    args = parse_args(argv)
    try:
        seq_filter = SequenceFilter(min_length=args.minLength, max_length=args.maxLength, drop_poly_n=args.polyN)
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(2)
    with open_output(args.seqOut) as out:
        for source in open_inputs(args.seqIn):
            sieve(source, out, seq_filter, progress=args.progress)


if __name__ == "__main__":
    main()
