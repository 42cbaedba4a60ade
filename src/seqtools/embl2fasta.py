import argparse
import sys
from typing import BinaryIO, List, Optional, TextIO

from tqdm import tqdm

from seqchunks.embl import EmblRecord, embl_chunks, record_from_chunk
from seqchunks.fasta import DEFAULT_LINE_LENGTH, FastaRecord
from seqchunks.io_utils import open_inputs, open_output


def embl_to_fasta(record: EmblRecord) -> Optional[FastaRecord]:
    """Convert an EMBL entry to a FASTA record, or None if the entry has no sequence."""
    if not record.sequence:
        return None
    descr_line = FastaRecord.descr_line_for(record.identifier, record.description)
    return FastaRecord(descr_line=descr_line, seq=record.sequence)


def convert(source: BinaryIO, out: TextIO, line_length: int = DEFAULT_LINE_LENGTH, progress: bool = False) -> int:
    """Write every EMBL entry of source that carries a sequence to out as FASTA.

    Returns:
        int: The number of FASTA records written.
    """
    written = 0
    for chunk in tqdm(embl_chunks(source), desc="Converting entries", unit="entry", disable=not progress):
        try:
            record = record_from_chunk(chunk)
        except UnicodeDecodeError as e:
            print(f"Skipping undecodable entry: {e}", file=sys.stderr)
            continue
        if record is None:
            continue
        fasta_record = embl_to_fasta(record)
        if fasta_record is None:
            print(f"Skipping entry {record.identifier} without sequence", file=sys.stderr)
            continue
        fasta_record.write(out, line_length=line_length)
        written += 1
    return written


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Converts embl files to fasta files.")
    parser.add_argument("--seqIn", "-i", type=str, nargs="+", default=None, help="EMBL-formatted sequence input file(s). If not provided, defaults to STDIN.")
    parser.add_argument("--seqOut", "-o", type=str, default=None, help="Sequence output file. If not provided, defaults to STDOUT.")
    parser.add_argument("--lineLength", "-l", type=int, default=DEFAULT_LINE_LENGTH, help="Sequence line length of the FASTA output.")
    parser.add_argument("--progress", "-p", action="store_true", help="Show a progress bar on STDERR.")
    args = parser.parse_args(argv)
    if args.lineLength < 1:
        parser.error(f"--lineLength must be positive, got {args.lineLength}")
    return args


def main(argv: Optional[List[str]] = None) -> None:
    args = parse_args(argv)
    with open_output(args.seqOut) as out:
        for source in open_inputs(args.seqIn):
            convert(source, out, line_length=args.lineLength, progress=args.progress)


if __name__ == "__main__":
    main()
