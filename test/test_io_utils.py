import io
import os
import shutil
import sys
import tempfile
import unittest
from unittest.mock import patch

sys.path.append(os.path.join(os.path.dirname(__file__), '..', 'src'))

from seqchunks.io_utils import LineEndingReader, open_inputs, open_output


class PartsSource:
    """Binary source returning the given parts in turn, then b''."""

    def __init__(self, parts):
        self.parts = list(parts)

    def read(self, size):
        return self.parts.pop(0) if self.parts else b""


def read_all(reader):
    data = b""
    while True:
        part = reader.read(3)
        if not part:
            return data
        data += part


class TestLineEndingReader(unittest.TestCase):
    """Test cases for reading CRLF input as LF."""

    def test_crlf(self):
        reader = LineEndingReader(io.BytesIO(b"a\r\nb\r\n\r\nc"))
        self.assertEqual(read_all(reader), b"a\nb\n\nc")

    def test_crlf_split_between_reads(self):
        reader = LineEndingReader(PartsSource([b"ab\r", b"\ncd\r", b"\r", b"\n"]))
        self.assertEqual(read_all(reader), b"ab\ncd\r\n")

    def test_trailing_cr_is_flushed(self):
        reader = LineEndingReader(PartsSource([b"ab\r"]))
        self.assertEqual(reader.read(3), b"ab")
        self.assertEqual(reader.read(3), b"\r")
        self.assertEqual(reader.read(3), b"")

    def test_reads_again_after_held_cr(self):
        reader = LineEndingReader(PartsSource([b"\r", b"\n", b"x"]))
        self.assertEqual(reader.read(1), b"\n")
        self.assertEqual(reader.read(1), b"x")

    def test_lf_input_unchanged(self):
        data = b">a\nACGT\n>b\nGG\n"
        self.assertEqual(read_all(LineEndingReader(io.BytesIO(data))), data)

    def test_no_data_ready(self):
        self.assertIsNone(LineEndingReader(PartsSource([None])).read(3))


class TestOpen(unittest.TestCase):
    """Test cases for choosing files or the standard streams."""

    def setUp(self):
        self.temp_dir = tempfile.mkdtemp()

    def tearDown(self):
        shutil.rmtree(self.temp_dir)

    def test_output_file(self):
        path = os.path.join(self.temp_dir, "out.txt")
        with open_output(path) as out:
            out.write("x\n")
        with open(path) as f:
            self.assertEqual(f.read(), "x\n")

    def test_output_stdout(self):
        with patch('sys.stdout', new_callable=io.StringIO) as stdout:
            with open_output(None) as out:
                out.write("x\n")
            self.assertFalse(stdout.closed)
        self.assertEqual(stdout.getvalue(), "x\n")

    def test_inputs(self):
        paths = []
        for i in range(2):
            path = os.path.join(self.temp_dir, f"in{i}")
            with open(path, "wb") as f:
                f.write(b"%d" % i)
            paths.append(path)
        self.assertEqual([f.read() for f in open_inputs(paths)], [b"0", b"1"])


if __name__ == '__main__':
    unittest.main()
