from typing import Dict, List, Sequence

_BASES = frozenset("ACGTNacgtn")
_COMPLEMENT_TABLE = str.maketrans("ACGTNacgtn", "TGCANtgcan")

_CODONS = {
    "ttt": "F", "ttc": "F", "tta": "L", "ttg": "L",
    "ctt": "L", "ctc": "L", "cta": "L", "ctg": "L",
    "att": "I", "atc": "I", "ata": "I", "atg": "M",
    "gtt": "V", "gtc": "V", "gta": "V", "gtg": "V",

    "tct": "S", "tcc": "S", "tca": "S", "tcg": "S",
    "cct": "P", "ccc": "P", "cca": "P", "ccg": "P",
    "act": "T", "acc": "T", "aca": "T", "acg": "T",
    "gct": "A", "gcc": "A", "gca": "A", "gcg": "A",

    "tat": "Y", "tac": "Y", "taa": "*", "tag": "*",
    "cat": "H", "cac": "H", "caa": "Q", "cag": "Q",
    "aat": "N", "aac": "N", "aaa": "K", "aag": "K",
    "gat": "D", "gac": "D", "gaa": "E", "gag": "E",

    "tgt": "C", "tgc": "C", "tga": "*", "tgg": "W",
    "cgt": "R", "cgc": "R", "cga": "R", "cgg": "R",
    "agt": "S", "agc": "S", "aga": "R", "agg": "R",
    "ggt": "G", "ggc": "G", "gga": "G", "ggg": "G",
}

# standard genetic code, lower and upper case
TRANSLATION_TABLE: Dict[str, str] = {**_CODONS, **{codon.upper(): aa for codon, aa in _CODONS.items()}}
UNKNOWN_AMINO_ACID = "*"


def complement(base: str) -> str:
    return base.translate(_COMPLEMENT_TABLE) if base in _BASES else "N"


def reverse_complement(seq: str) -> str:
    # characters outside the table are kept as they are
    return seq.translate(_COMPLEMENT_TABLE)[::-1]


def frame(seq: str, phase: int) -> List[str]:
    """Split seq into the complete codons of the reading frame starting at phase."""
    if phase < 0:
        raise ValueError(f"Phase must not be negative, got {phase}")
    usable = len(seq) - phase
    end = phase + usable - usable % 3 if usable > 0 else phase
    return [seq[i:i + 3] for i in range(phase, end, 3)]


def translate(codons: Sequence[str]) -> str:
    return "".join(TRANSLATION_TABLE.get(codon, UNKNOWN_AMINO_ACID) for codon in codons)


def six_frames(seq: str) -> List[str]:
    """Translate the three forward and the three reverse complement frames of seq.

    Returns:
        List[str]: Protein sequences for phases 0-2 (forward) and 3-5 (reverse complement).
    """
    rev_cmp = reverse_complement(seq)
    forward = [translate(frame(seq, phase)) for phase in range(3)]
    reverse = [translate(frame(rev_cmp, phase)) for phase in range(3)]
    return forward + reverse
