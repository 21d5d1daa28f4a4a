"""Tests for the chord tokenizer.

Tests cover:
- Inline [chord] markers and their source offsets
- Chord-only lines, bar lines and lyric lines
- ChordPro directives and comments
- Pre-split chord lists
- Diagnostics for malformed chords
"""

from chordshift.core import DiagnosticKind
from chordshift.parsing import extract_chords, split_chord_list, tokenize


class TestBracketMarkers:
    """Tests for inline [chord] markers."""

    def test_symbols_in_order(self):
        result = tokenize("[C]Amazing [F]grace, how [C]sweet")
        assert result.symbols == ["C", "F", "C"]
        assert len(result) == 3

    def test_offsets_point_at_chord_text(self):
        """Test source[start:end] is the chord without brackets."""
        text = "[C]Amazing [F/A]grace"
        for token in tokenize(text).tokens:
            assert text[token.start:token.end] == token.text
            assert token.bracketed

    def test_offsets_across_lines(self):
        text = "Verse 1\n[G]Hello [D7]there\n"
        tokens = tokenize(text).tokens
        assert [t.text for t in tokens] == ["G", "D7"]
        assert text[tokens[1].start:tokens[1].end] == "D7"

    def test_malformed_marker_is_reported(self):
        """Test bad chords are skipped, not fatal."""
        result = tokenize("[H]la [C]la")
        assert result.symbols == ["C"]
        assert len(result.diagnostics) == 1
        diag = result.diagnostics[0]
        assert diag.kind == DiagnosticKind.UNPARSEABLE_CHORD
        assert diag.text == "H"
        assert diag.offset == 1

    def test_unsupported_quality_is_still_a_token(self):
        assert tokenize("[C7b9#11]x").symbols == ["C7b9#11"]

    def test_section_labels_are_not_chords(self):
        """Test [Chorus] and friends are reported, not read as C or B chords."""
        text = "[Chorus]\n[G]Hello\n[Bridge]\n[Em]la\n[Coda]\n[Ending]\n[Breakdown]"
        result = tokenize(text)
        assert result.symbols == ["G", "Em"]
        assert [d.text for d in result.diagnostics] == [
            "Chorus", "Bridge", "Coda", "Ending", "Breakdown",
        ]
        assert all(d.kind == DiagnosticKind.UNPARSEABLE_CHORD for d in result.diagnostics)
        assert text[result.diagnostics[1].offset:].startswith("Bridge")


class TestChordLines:
    """Tests for chords written on their own line."""

    def test_chords_above_lyrics(self):
        text = "C        G\nAmazing grace\n"
        result = tokenize(text)
        assert result.symbols == ["C", "G"]
        assert result.diagnostics == []

    def test_lyric_line_is_not_chords(self):
        """Test words that happen to start with A-G are left alone."""
        assert tokenize("A day at the beach").symbols == []
        assert tokenize("Amazing grace").symbols == []

    def test_single_word_lines_are_lyrics(self):
        """Test one-word lyric lines that read as chords stay lyrics."""
        text = "A\nAm\nAmazing grace\nE\n"
        assert tokenize(text).symbols == []
        assert extract_chords(text) == []

    def test_single_chord_in_bar_lines(self):
        assert tokenize("| G |").symbols == ["G"]
        assert tokenize("C\n| G |\n").symbols == ["G"]

    def test_bar_lines(self):
        assert tokenize("| C | G : | Am | F % |").symbols == ["C", "G", "Am", "F"]

    def test_bar_line_offsets(self):
        text = "| Am | Dm7 |"
        for token in tokenize(text).tokens:
            assert text[token.start:token.end] == token.text
            assert not token.bracketed

    def test_directives_and_comments_skipped(self):
        text = "{title: Song in C}\n# C G Am F\n[G]Hi\n"
        assert tokenize(text).symbols == ["G"]

    def test_empty_text(self):
        result = tokenize("")
        assert result.tokens == []
        assert result.diagnostics == []


class TestChordLists:
    """Tests for pre-split chord lists."""

    def test_list_offsets_are_indices(self):
        result = tokenize(["C", "xyz", "G"])
        assert result.symbols == ["C", "G"]
        assert [t.start for t in result.tokens] == [0, 2]
        assert [t.end for t in result.tokens] == [1, 3]

    def test_list_diagnostics(self):
        result = tokenize(["C", "xyz", "G"])
        assert len(result.diagnostics) == 1
        assert result.diagnostics[0].offset == 1
        assert result.diagnostics[0].text == "xyz"

    def test_items_are_stripped(self):
        assert tokenize([" Am ", "F"]).symbols == ["Am", "F"]

    def test_chords_property(self):
        chords = tokenize(["C", "Am"]).chords
        assert [c.root_pitch_class for c in chords] == [0, 9]


class TestHelpers:
    """Tests for extract_chords() and split_chord_list()."""

    def test_extract_unique_first_occurrence(self):
        assert extract_chords("[C]a [G]b [C]c [Am]d [G]e") == ["C", "G", "Am"]

    def test_extract_keeps_literal_text(self):
        """Test C and Cmaj are distinct even though they sound the same."""
        assert extract_chords(["C", "Cmaj", "C"]) == ["C", "Cmaj"]

    def test_split_chord_list(self):
        assert split_chord_list("C G Am F") == ["C", "G", "Am", "F"]
        assert split_chord_list("| C | G |") == ["C", "G"]
        assert split_chord_list("  ") == []
