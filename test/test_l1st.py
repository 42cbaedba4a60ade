import io
import os
import shutil
import sys
import tempfile
import unittest
from unittest.mock import patch

sys.path.append(os.path.join(os.path.dirname(__file__), '..', 'src'))

from seqtools.l1st import list_identifiers, main


class TestListIdentifiers(unittest.TestCase):
    """Test cases for listing FASTA identifiers."""

    def setUp(self):
        self.temp_dir = tempfile.mkdtemp()

    def tearDown(self):
        shutil.rmtree(self.temp_dir)

    def test_list(self):
        out = io.StringIO()
        count = list_identifiers(io.BytesIO(b">seq1 first\nAC\n>seq2\nGT\n>\nTT\n"), out)
        self.assertEqual(count, 2)
        self.assertEqual(out.getvalue(), "seq1\nseq2\n")

    def test_leading_text_reported(self):
        out = io.StringIO()
        with patch('sys.stderr', new_callable=io.StringIO) as stderr:
            count = list_identifiers(io.BytesIO(b"junk\n>seq1\nAC\n"), out)
        self.assertEqual(count, 1)
        self.assertEqual(out.getvalue(), "seq1\n")
        self.assertIn("junk", stderr.getvalue())

    def test_undecodable_record_reported(self):
        out = io.StringIO()
        with patch('sys.stderr', new_callable=io.StringIO) as stderr:
            count = list_identifiers(io.BytesIO(b">a\nAC\n>b \xff\nGT\n>c\nTT\n"), out)
        self.assertEqual(count, 2)
        self.assertEqual(out.getvalue(), "a\nc\n")
        self.assertIn("0xff", stderr.getvalue())

    def test_gt_inside_description(self):
        out = io.StringIO()
        list_identifiers(io.BytesIO(b">sp|P1| protein A>B\nMKV\n>c\nAA\n"), out)
        self.assertEqual(out.getvalue(), "sp|P1|\nc\n")

    def test_main(self):
        paths = []
        for i, data in enumerate([b">a\nAC\n>b\nGG\n", b">c\nTT\n"]):
            path = os.path.join(self.temp_dir, f"in{i}.fa")
            with open(path, "wb") as f:
                f.write(data)
            paths.append(path)
        out_path = os.path.join(self.temp_dir, "ids.txt")

        main(["-i"] + paths + ["-o", out_path])

        with open(out_path) as f:
            self.assertEqual(f.read().splitlines(), ["a", "b", "c"])


if __name__ == '__main__':
    unittest.main()
