"""
Clips the leading region annotated in a GFF3 file from each FASTA sequence.

For a sequence `seq1` and GFF3 records on `seq1` starting at position 1, the
largest end position is removed from the front of the sequence and the record
is renamed to `seq1_clipped_<end>`. Sequences without such a record are
written unchanged.
"""

import argparse
import sys
from typing import BinaryIO, Dict, Iterable, List, Optional, TextIO, Tuple

import pandas as pd

from seqchunks.fasta import FastaDescription, FastaRecord, read_fastas
from seqchunks.gff3 import GffRecord, load_gff3
from seqchunks.io_utils import open_inputs, open_output


def leading_clips(gff_records: Iterable[GffRecord]) -> Dict[str, int]:
    """Get the largest end of the records starting at position 1, per sequence id."""
    clips: Dict[str, int] = {}
    for record in gff_records:
        if record.start != 1:
            continue
        clips[record.seq_id] = max(clips.get(record.seq_id, 0), record.end)
    return clips


def clip_record(record: FastaRecord, clips: Dict[str, int]) -> FastaRecord:
    descr = FastaDescription.read(record.descr_line)
    if descr.identifier is None or descr.identifier not in clips:
        return record
    clip = clips[descr.identifier]
    clipped_id = f"{descr.identifier}_clipped_{clip}"
    return FastaRecord(descr_line=FastaRecord.descr_line_for(clipped_id, descr.description), seq=record.seq[clip:])


def trim(source: BinaryIO, out: TextIO, clips: Dict[str, int]) -> List[Tuple[str, str]]:
    """Write the clipped records of source to out.

    Returns:
        List[Tuple[str, str]]: (original id, written id) for every record with an identifier.
    """
    mapping = []
    for record in read_fastas(source):
        clipped = clip_record(record, clips)
        clipped.write(out)
        if record.identifier is not None:
            mapping.append((record.identifier, clipped.identifier))
    return mapping


def write_mapping(mapping: List[Tuple[str, str]], path: str) -> None:
    df = pd.DataFrame(mapping, columns=["raw_id", "clipped_id"])
    df.to_csv(path, sep="\t", header=False, index=False)


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Clips sequences at the regions given in a GFF3 file.")
    parser.add_argument("--seqIn", "-i", type=str, nargs="+", default=None, help="Fasta-formatted sequence input file(s). If not provided, defaults to STDIN.")
    parser.add_argument("--seqOut", "-o", type=str, default=None, help="Sequence output file. If not provided, defaults to STDOUT.")
    parser.add_argument("--gff", "-g", type=str, required=True, help="GFF3 file containing regions to clip.")
    parser.add_argument("--mapping", "-m", type=str, default=None, help="Name of mapping file documenting the raw and clipped identifiers. Only generates mapping file if supplied.")
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> None:
    args = parse_args(argv)
    clips = leading_clips(load_gff3(args.gff))
    print(f"Loaded clip positions for {len(clips)} sequences from {args.gff}", file=sys.stderr)
    mapping: List[Tuple[str, str]] = []
    with open_output(args.seqOut) as out:
        for source in open_inputs(args.seqIn):
            mapping.extend(trim(source, out, clips))
    if args.mapping is not None:
        write_mapping(mapping, args.mapping)


if __name__ == "__main__":
    main()
