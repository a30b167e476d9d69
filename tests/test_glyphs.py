"""Test glyph counting."""
from vebben.glyphs import glyph_length


def test_glyph_length():
    """Combining marks do not add to the length."""
    assert glyph_length("") == 0
    assert glyph_length("abc") == 3
    assert glyph_length("műemlék") == 7
    assert glyph_length("Bärfuß") == 6
    assert len("Ba\u0308rfuß") == 7
    assert glyph_length("Ba\u0308rfuß") == 6
    assert glyph_length("e\u0301\u0302") == 1


def test_glyph_length_compatibility_forms():
    """NFKD expands compatibility characters."""
    assert glyph_length("\ufb01") == 2  # "fi" ligature


def test_glyph_length_leading_marks():
    """Marks with nothing before them count once."""
    assert glyph_length("\u0301\u0302a") == 2


def test_glyph_length_hangul():
    """A Hangul syllable is one glyph, precomposed or spelled in jamo."""
    assert glyph_length("한국어") == 3
    assert glyph_length("\u1112\u1161\u11ab") == 1  # 한 as jamo
    assert glyph_length("서울 2") == 4
