import io
import os
import sys
import unittest

sys.path.append(os.path.join(os.path.dirname(__file__), '..', 'src'))

from seqchunks.embl import EmblRecord, embl_chunks, read_embl, record_from_chunk
from seqchunks.feature_table import FeatureParseError
from seqchunks.location import Complement, Span

ENTRY_1 = """ID   X56734; SV 1; linear; mRNA; STD; PLN; 1859 BP.
XX
AC   X56734; S46826;
XX
DE   Trifolium repens mRNA for non-cyanogenic beta-glucosidase
DE   (partial)
XX
KW   beta-glucosidase.
FH   Key             Location/Qualifiers
FT   source          1..25
FT                   /organism="Trifolium repens"
FT                   /mol_type="mRNA"
FT   CDS             complement(3..
FT                   20)
FT                   /codon_start=1
FT                   /product="beta-glucosidase"
SQ   Sequence 25 BP; 8 A; 6 C; 5 G; 6 T; 0 other;
     aaacaaacca aatatggatt        20
     ttatt                        25
//
"""

ENTRY_2 = """ID   AB000002; SV 1; linear; DNA; STD; PLN; 4 BP.
DE   second entry
SQ   Sequence 4 BP;
     acgt                          4
//
"""


class TestEmblRecord(unittest.TestCase):
    """Test cases for parsing one EMBL entry."""

    def setUp(self):
        self.record = EmblRecord.from_text(ENTRY_1)

    def test_identifier(self):
        self.assertEqual(self.record.identifier, "X56734")

    def test_description(self):
        self.assertEqual(self.record.description, "Trifolium repens mRNA for non-cyanogenic beta-glucosidase (partial)")

    def test_sequence(self):
        self.assertEqual(self.record.sequence, "aaacaaaccaaatatggattttatt")

    def test_annotations(self):
        names = [a.name for a in self.record.annotations]
        self.assertEqual(names, ["ID", "XX", "AC", "XX", "DE", "XX", "KW", "FH"])
        self.assertEqual(self.record.values("AC"), ["X56734; S46826;"])
        self.assertEqual(self.record.values("RN"), [])

    def test_features(self):
        table = self.record.features()
        self.assertEqual([f.key for f in table], ["source", "CDS"])
        cds = table.by_key("CDS")[0]
        self.assertEqual(cds.location, Complement(Span.of(3, 20)))
        self.assertEqual(cds.qualifier_values("product"), ["beta-glucosidase"])
        self.assertEqual(table.by_key("source")[0].qualifier_values("organism"), ["Trifolium repens"])

    def test_malformed_features(self):
        text = ENTRY_2.replace("SQ", "FT   CDS             join(1..\nSQ", 1)
        record = EmblRecord.from_text(text)
        with self.assertRaises(FeatureParseError):
            record.features()
        self.assertEqual(record.sequence, "acgt")

    def test_no_sequence(self):
        record = EmblRecord.from_text("ID   X;\nDE   nothing\n//\n")
        self.assertEqual(record.sequence, "")
        self.assertEqual(len(record.features()), 0)

    def test_no_identifier(self):
        record = EmblRecord.from_text("DE   anonymous\n//\n")
        self.assertIsNone(record.identifier)
        self.assertEqual(record.description, "anonymous")

    def test_leading_untagged_lines(self):
        """Test that lines before the first line code are ignored."""
        record = EmblRecord.from_text("     stray\nID   X;\n//\n")
        self.assertEqual(record.identifier, "X")
        self.assertEqual([a.name for a in record.annotations], ["ID"])


class TestReadEmbl(unittest.TestCase):
    """Test cases for streaming EMBL entries."""

    def test_read(self):
        data = (ENTRY_1 + ENTRY_2).encode("utf-8")
        records = list(read_embl(io.BytesIO(data), read_size=16))
        self.assertEqual([r.identifier for r in records], ["X56734", "AB000002"])
        self.assertEqual(records[1].sequence, "acgt")

    def test_trailing_blank_lines(self):
        data = (ENTRY_2 + "\n\n").encode("utf-8")
        records = list(read_embl(io.BytesIO(data)))
        self.assertEqual(len(records), 1)

    def test_unterminated_entry(self):
        data = (ENTRY_2 + ENTRY_2.replace("//\n", "")).encode("utf-8")
        records = list(read_embl(io.BytesIO(data)))
        self.assertEqual([r.sequence for r in records], ["acgt", "acgt"])

    def test_crlf_line_endings(self):
        data = (ENTRY_1 + ENTRY_2).replace("\n", "\r\n").encode("utf-8")
        for read_size in (3, 16, 64 * 1024):
            with self.subTest(read_size=read_size):
                records = list(read_embl(io.BytesIO(data), read_size=read_size))
                self.assertEqual([r.identifier for r in records], ["X56734", "AB000002"])
                self.assertEqual(records[1].sequence, "acgt")

    def test_chunks_use_lf_only(self):
        chunks = list(embl_chunks(io.BytesIO(ENTRY_2.replace("\n", "\r\n").encode("utf-8")), read_size=5))
        self.assertEqual(chunks, [ENTRY_2.encode("utf-8")])

    def test_record_from_chunk(self):
        self.assertIsNone(record_from_chunk(b"\n \n"))
        self.assertEqual(record_from_chunk(ENTRY_2.encode("utf-8")).identifier, "AB000002")
        with self.assertRaises(UnicodeDecodeError):
            record_from_chunk(b"ID   X;\nDE   \xff\n//\n")

    def test_empty(self):
        self.assertEqual(list(read_embl(io.BytesIO(b""))), [])


if __name__ == '__main__':
    unittest.main()
