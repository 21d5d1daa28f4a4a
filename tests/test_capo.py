"""Tests for the capo calculator.

Tests cover:
- Capo position for a transposition
- Chord shapes behind a capo
- Chord difficulty ratings
- Capo suggestions for hard keys
- Capo/transpose explanations
"""

import pytest

from chordshift.transpose import (
    CapoCalculator,
    CapoConfig,
    CapoSuggestion,
    ChordDifficulty,
    average_difficulty,
    calculate_capo,
    capo_chord,
    capo_content,
    chord_difficulty,
    common_capo_positions,
    explain_capo_transpose,
    sounding_key,
    suggest_capo,
    written_key,
)


class TestCalculateCapo:
    """Tests for calculate_capo()."""

    @pytest.mark.parametrize("semitones,fret", [
        (14, 2),
        (7, 7),
        (-3, 0),
        (0, 0),
        (12, 0),
        (1, 1),
        (11, 11),
    ])
    def test_positions(self, semitones, fret):
        assert calculate_capo(semitones) == fret

    def test_range(self):
        for n in range(-30, 30):
            assert 0 <= calculate_capo(n) <= 11


class TestCapoShapes:
    """Tests for chord shapes behind a capo."""

    def test_capo_chord(self):
        assert capo_chord("A", 2) == "G"
        assert capo_chord("Bb", 1) == "A"
        assert capo_chord("F#m", 2) == "Em"

    def test_no_capo_returns_input(self):
        assert capo_chord("A", 0) == "A"
        assert capo_chord("A", 12) == "A"
        assert capo_chord("A", -1) == "A"

    def test_capo_content(self):
        assert capo_content("[A]x [E]y", 2) == "[G]x [D]y"
        assert capo_content("[A]x", 0) == "[A]x"

    def test_sounding_and_written_key(self):
        assert sounding_key("G", 2) == "A"
        assert written_key("A", 2) == "G"
        assert written_key("Bb", 3, prefer_sharps=False) == "G"
        assert sounding_key(None, 2) is None
        assert sounding_key("G", 0) == "G"


class TestChordDifficulty:
    """Tests for chord_difficulty()."""

    @pytest.mark.parametrize("chord,level", [
        ("C", ChordDifficulty.VERY_EASY),
        ("G", ChordDifficulty.VERY_EASY),
        ("Am", ChordDifficulty.VERY_EASY),
        ("C7", ChordDifficulty.EASY),
        ("D", ChordDifficulty.EASY),
        ("Dm", ChordDifficulty.EASY),
        ("F", ChordDifficulty.HARD),
        ("Bm", ChordDifficulty.HARD),
        ("F#", ChordDifficulty.HARD),
        ("Eb", ChordDifficulty.HARD),
        ("Bdim", ChordDifficulty.VERY_HARD),
        ("Cmaj9", ChordDifficulty.VERY_HARD),
        ("Csus4", ChordDifficulty.VERY_EASY),
        ("xyz", ChordDifficulty.MODERATE),
    ])
    def test_levels(self, chord, level):
        assert chord_difficulty(chord) == level

    def test_label(self):
        assert ChordDifficulty.VERY_EASY.label == "Very Easy"
        assert ChordDifficulty.HARD.label == "Hard"

    def test_average(self):
        assert average_difficulty([]) == 0.0
        assert average_difficulty(["C", "F"]) == pytest.approx(2.5)


class TestCapoSuggestions:
    """Tests for CapoCalculator.suggest()."""

    def test_flat_key_gets_capo(self):
        suggestions = CapoCalculator().suggest(["Bb", "Eb", "F"])
        assert [s.fret for s in suggestions] == [3, 1, 6, 5]

        best = suggestions[0]
        assert best.sample_chords == ["G", "C", "D"]
        assert best.improvement == pytest.approx(8 / 3)
        assert best.reason == "Much easier chords - highly recommended"

    def test_sorted_by_improvement(self):
        suggestions = suggest_capo("[Bb]a [Eb]b [F]c [Cm]d")
        improvements = [s.improvement for s in suggestions]
        assert improvements == sorted(improvements, reverse=True)
        for s in suggestions:
            assert 1 <= s.fret <= 7
            assert s.improvement > 0.3

    def test_easy_key_gets_nothing(self):
        assert CapoCalculator().suggest(["G", "C", "D"]) == []

    def test_empty(self):
        assert CapoCalculator().suggest("") == []

    def test_max_fret(self):
        suggestions = CapoCalculator(CapoConfig(max_fret=2)).suggest(["Bb", "Eb", "F"])
        assert [s.fret for s in suggestions] == [1]

    def test_descriptions(self):
        suggestion = CapoSuggestion(fret=1, difficulty=1.5, improvement=2.5)
        assert suggestion.difficulty_description == "Very Easy"
        assert suggestion.improvement_description == "50% easier"


class TestCapoExplanation:
    """Tests for capo/transpose explanations."""

    def test_transpose_and_capo(self):
        explanation = CapoCalculator().explain("G", 2, 3)
        assert explanation.transposed_key == "A"
        assert explanation.capo_chords == "F#"
        assert explanation.sounding_key == "A"
        assert explanation.explanation == (
            "Song transposed from G to A. With capo on fret 3, you play F# shapes. It sounds in A."
        )

    def test_capo_only(self):
        explanation = explain_capo_transpose("G", 0, 2)
        assert explanation.capo_chords == "F"
        assert explanation.sounding_key == "G"

    def test_nothing(self):
        explanation = explain_capo_transpose("C", 0, 0)
        assert explanation.explanation == "Song in C with no capo or transposition."

    def test_unknown_key(self):
        explanation = explain_capo_transpose(None, 2, 1)
        assert explanation.original_key == "Unknown"
        assert explanation.explanation == "Key information not available"

    def test_common_positions(self):
        positions = common_capo_positions("G")
        assert [p.capo for p in positions] == [0, 2, 7]
        assert positions[2].plays == "C"
        assert common_capo_positions("C#") == []
