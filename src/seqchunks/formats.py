from seqchunks.chunks import Sentinel
from seqchunks.stanzas import StanzaGrouper

# fasta records open with '>'
FASTA_SENTINEL = Sentinel(b">", marks_end=False)
# embl records close with a '//' line
EMBL_SENTINEL = Sentinel(b"\n//\n", marks_end=True)
# two-letter line codes padded to 5 columns, e.g. 'DE   ', 'FT   '
EMBL_STANZAS = StanzaGrouper(tag_columns=5, merge_tags=True)

SENTINELS = {
    "fasta": FASTA_SENTINEL,
    "embl": EMBL_SENTINEL,
}
