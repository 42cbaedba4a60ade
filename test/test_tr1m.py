import io
import os
import shutil
import sys
import tempfile
import unittest
from unittest.mock import patch

import pandas as pd

sys.path.append(os.path.join(os.path.dirname(__file__), '..', 'src'))

from seqchunks.fasta import FastaRecord, parse_fastas
from seqchunks.gff3 import read_gff3
from seqtools.tr1m import clip_record, leading_clips, main, trim

GFF = [
    "##gff-version 3",
    "seq1\t.\tadapter\t1\t4\t.\t+\t.\tID=a1",
    "seq1\t.\tadapter\t1\t6\t.\t+\t.\tID=a2",
    "seq1\t.\tadapter\t3\t9\t.\t+\t.\tID=a3",
    "seq2\t.\tadapter\t2\t5\t.\t+\t.\tID=a4",
    "seq3\t.\tadapter\t1\t20\t.\t+\t.\tID=a5",
]

FASTA = b">seq1 first sequence\nAAAAAACGTACGT\n>seq2\nCCCCGG\n>seq3\nACGT\n"


class TestClips(unittest.TestCase):
    """Test cases for computing and applying clips."""

    def test_leading_clips(self):
        clips = leading_clips(read_gff3(GFF))
        self.assertEqual(clips, {"seq1": 6, "seq3": 20})

    def test_clip_record(self):
        record = clip_record(FastaRecord("seq1 first sequence", "AAAAAACGTACGT"), {"seq1": 6})
        self.assertEqual(record, FastaRecord("seq1_clipped_6 first sequence", "CGTACGT"))

    def test_unclipped_record(self):
        record = FastaRecord("seq2", "CCCCGG")
        self.assertIs(clip_record(record, {"seq1": 6}), record)

    def test_clip_beyond_end(self):
        record = clip_record(FastaRecord("seq3", "ACGT"), {"seq3": 20})
        self.assertEqual(record, FastaRecord("seq3_clipped_20", ""))

    def test_trim(self):
        out = io.StringIO()
        mapping = trim(io.BytesIO(FASTA), out, {"seq1": 6})
        self.assertEqual(mapping, [("seq1", "seq1_clipped_6"), ("seq2", "seq2"), ("seq3", "seq3")])
        records = parse_fastas(out.getvalue())
        self.assertEqual([r.seq for r in records], ["CGTACGT", "CCCCGG", "ACGT"])


class TestMain(unittest.TestCase):
    """Test cases for the command line tool."""

    def setUp(self):
        self.temp_dir = tempfile.mkdtemp()
        self.gff_path = os.path.join(self.temp_dir, "clips.gff3")
        with open(self.gff_path, "w") as f:
            f.write("\n".join(GFF) + "\n")
        self.fasta_path = os.path.join(self.temp_dir, "in.fa")
        with open(self.fasta_path, "wb") as f:
            f.write(FASTA)

    def tearDown(self):
        shutil.rmtree(self.temp_dir)

    def test_main_with_mapping(self):
        out_path = os.path.join(self.temp_dir, "out.fa")
        mapping_path = os.path.join(self.temp_dir, "mapping.tsv")
        with patch('sys.stderr', new_callable=io.StringIO):
            main(["-i", self.fasta_path, "-o", out_path, "-g", self.gff_path, "-m", mapping_path])

        with open(out_path) as f:
            records = parse_fastas(f.read())
        self.assertEqual([r.identifier for r in records], ["seq1_clipped_6", "seq2", "seq3_clipped_20"])

        mapping = pd.read_csv(mapping_path, sep="\t", header=None)
        self.assertEqual(mapping.values.tolist(), [
            ["seq1", "seq1_clipped_6"],
            ["seq2", "seq2"],
            ["seq3", "seq3_clipped_20"],
        ])

    def test_main_without_mapping(self):
        with patch('sys.stdout', new_callable=io.StringIO) as stdout, \
                patch('sys.stderr', new_callable=io.StringIO) as stderr:
            main(["-i", self.fasta_path, "-g", self.gff_path])
        self.assertIn(">seq1_clipped_6 first sequence\nCGTACGT\n", stdout.getvalue())
        self.assertIn("2 sequences", stderr.getvalue())
        self.assertFalse(any(name.endswith(".tsv") for name in os.listdir(self.temp_dir)))

    def test_gff_required(self):
        with patch('sys.stderr', new_callable=io.StringIO):
            with self.assertRaises(SystemExit):
                main(["-i", self.fasta_path])


if __name__ == '__main__':
    unittest.main()
