# vebben/glyphs.py
from __future__ import annotations
import unicodedata


def _continues(ch: str) -> bool:
    # combining marks, and the medial vowel / final consonant jamo a
    # decomposed Hangul syllable ends with
    return unicodedata.combining(ch) != 0 or "\u1160" <= ch <= "\u11ff"


def glyph_length(s: str) -> int:
    """
    Number of NFKD-normalized glyphs in s: each starter character plus the
    combining marks that follow it counts once, and so does each Hangul
    syllable.

        glyph_length("műemlék")  # 7, however "ű" and "é" are encoded
        glyph_length("Bärfuß")   # 6
        glyph_length("한국어")    # 3

    Used for string length limits, and handy for length-checking any
    international input.
    """
    count = 0
    for ch in unicodedata.normalize("NFKD", s):
        # a leading run of marks still makes one glyph
        if count == 0 or not _continues(ch):
            count += 1
    return count
