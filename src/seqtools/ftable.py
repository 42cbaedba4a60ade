import argparse
import sys
from typing import BinaryIO, Iterable, List, Optional

import pandas as pd

from seqchunks.embl import EmblRecord, embl_chunks, record_from_chunk
from seqchunks.feature_table import EMBL_KEY_COLUMNS, FeatureParseError, FeatureRecord, feature_stanzas, parse_feature
from seqchunks.io_utils import open_inputs, open_output

COLUMNS = ["record_id", "key", "location", "n_qualifiers", "qualifiers"]


def format_qualifiers(feature: FeatureRecord) -> str:
    parts = []
    for qualifier in feature.qualifiers:
        if qualifier.value is None:
            parts.append(f"/{qualifier.name}")
        else:
            parts.append(f"/{qualifier.name}={qualifier.value}")
    return ";".join(parts)


def feature_rows(record: EmblRecord) -> List[list]:
    """Tabulate the features of one entry, reporting malformed features on STDERR.

    Returns:
        List[list]: One row per well-formed feature, in the order of COLUMNS.
    """
    rows = []
    for stanza in feature_stanzas(record.feature_lines, EMBL_KEY_COLUMNS):
        try:
            feature = parse_feature(stanza)
        except FeatureParseError as e:
            print(f"Skipping feature of entry {record.identifier}: {e}", file=sys.stderr)
            continue
        rows.append([record.identifier, feature.key, str(feature.location), len(feature.qualifiers), format_qualifiers(feature)])
    return rows


def feature_frame(sources: Iterable[BinaryIO]) -> pd.DataFrame:
    """Tabulate the features of every entry in sources.

    Entries that are not valid UTF-8 are reported on STDERR and skipped.
    """
    rows = []
    for source in sources:
        for chunk in embl_chunks(source):
            try:
                record = record_from_chunk(chunk)
            except UnicodeDecodeError as e:
                print(f"Skipping undecodable entry: {e}", file=sys.stderr)
                continue
            if record is not None:
                rows.extend(feature_rows(record))
    return pd.DataFrame(rows, columns=COLUMNS)


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Lists the feature tables of EMBL entries as TSV.")
    parser.add_argument("--seqIn", "-i", type=str, nargs="+", default=None, help="EMBL-formatted input file(s). If not provided, defaults to STDIN.")
    parser.add_argument("--out", "-o", type=str, default=None, help="TSV output file. If not provided, defaults to STDOUT.")
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> None:
    args = parse_args(argv)
    df = feature_frame(open_inputs(args.seqIn))
    with open_output(args.out) as out:
        df.to_csv(out, sep="\t", index=False)


if __name__ == "__main__":
    main()
