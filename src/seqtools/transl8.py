import argparse
from typing import BinaryIO, List, Optional, TextIO

from tqdm import tqdm

from seqchunks.dna import six_frames
from seqchunks.fasta import FastaDescription, FastaRecord, read_fastas
from seqchunks.io_utils import open_inputs, open_output


def translated_records(record: FastaRecord, ordinal: int) -> List[FastaRecord]:
    """Translate record in all six reading frames.

    Args:
        record: Nucleotide sequence record.
        ordinal: Position of the record in its input, used as name when it has no identifier.

    Returns:
        List[FastaRecord]: Protein records named `<id>_phase_<0..5>`, keeping the description.
    """
    descr = FastaDescription.read(record.descr_line)
    name = descr.identifier if descr.identifier is not None else str(ordinal)
    proteins = six_frames(record.seq.lower())
    return [
        FastaRecord(descr_line=FastaRecord.descr_line_for(f"{name}_phase_{phase}", descr.description), seq=protein)
        for phase, protein in enumerate(proteins)
    ]


def translate_all(source: BinaryIO, out: TextIO, progress: bool = False) -> int:
    count = 0
    for ordinal, record in enumerate(tqdm(read_fastas(source), desc="Translating sequences", unit="seq", disable=not progress)):
        for protein_record in translated_records(record, ordinal):
            protein_record.write(out)
        count += 1
    return count


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Six-frame translation of DNA sequences.")
    parser.add_argument("--seqIn", "-i", type=str, nargs="+", default=None, help="Fasta-formatted DNA sequence input file(s). If not provided, defaults to STDIN.")
    parser.add_argument("--seqOut", "-o", type=str, default=None, help="Protein sequence output file. If not provided, defaults to STDOUT.")
    parser.add_argument("--progress", "-p", action="store_true", help="Show a progress bar on STDERR.")
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> None:
    args = parse_args(argv)
    with open_output(args.seqOut) as out:
        for source in open_inputs(args.seqIn):
            translate_all(source, out, progress=args.progress)


if __name__ == "__main__":
    main()
