import argparse
import sys
from typing import BinaryIO, List, Optional, TextIO

from seqchunks.fasta import FastaParseError, fasta_chunks, parse_fastas
from seqchunks.io_utils import open_inputs, open_output


def list_identifiers(source: BinaryIO, out: TextIO) -> int:
    """Write the identifier of every FASTA record in source to out, one per line.

    Chunks that fail to parse are reported on STDERR and skipped.
    """
    count = 0
    for chunk in fasta_chunks(source):
        try:
            records = parse_fastas(chunk.decode("utf-8"))
        except (FastaParseError, UnicodeDecodeError) as e:
            print(f"Error parsing fasta input: {e}", file=sys.stderr)
            continue
        for record in records:
            if record.identifier is not None:
                out.write(f"{record.identifier}\n")
                count += 1
    return count


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="List sequence entry IDs.")
    parser.add_argument("--seqIn", "-i", type=str, nargs="+", default=None, help="Fasta-formatted sequence input file(s). If not provided, defaults to STDIN.")
    parser.add_argument("--idsOut", "-o", type=str, default=None, help="Id list output file. If not provided, defaults to STDOUT.")
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> None:
    args = parse_args(argv)
    with open_output(args.idsOut) as out:
        for source in open_inputs(args.seqIn):
            list_identifiers(source, out)


if __name__ == "__main__":
    main()
