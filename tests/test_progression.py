"""Tests for key inference and progression analysis.

Tests cover:
- Key inference with tie-breaking
- Scale degrees and diatonic membership
- Roman numeral analysis (diatonic, chromatic, sevenths, diminished)
- Named progression recognition
- Cadences
- Analysis of bad or unmodelled chords
"""

import pytest

from chordshift.core import Chord, DiagnosticKind, InvalidKeyName, Key
from chordshift.inference import (
    AnalyzerConfig,
    HarmonicFunction,
    KeyFinder,
    ProgressionAnalyzer,
    ProgressionType,
    analyze_progression,
    infer_key,
    is_diatonic,
    scale_degree,
)


# ============================================================================
# Key Inference Tests
# ============================================================================

class TestKeyFinder:
    """Tests for KeyFinder."""

    def test_finder_creation(self):
        finder = KeyFinder()
        assert finder.KEY_MASKS.shape == (24, 12)
        assert finder.KEY_MASKS.sum(axis=1).tolist() == [7] * 24

    def test_pop_progression_in_c(self):
        estimate = infer_key(["C", "G", "Am", "F"])
        assert estimate.key.name == "C major"
        assert estimate.confidence == 1.0

    def test_first_chord_breaks_relative_tie(self):
        """Test Am-first picks A minor over C major."""
        assert infer_key(["Am", "F", "C", "G"]).key.name == "A minor"

    def test_sharp_key(self):
        assert infer_key(["E", "B", "C#m", "A"]).key.name == "E major"

    def test_flat_key_spelling(self):
        estimate = infer_key(["Bb", "F", "Gm", "Eb"])
        assert estimate.key.name == "Bb major"

    def test_candidates_ranked(self):
        estimate = infer_key(["C", "G", "Am", "F"])
        assert len(estimate.candidates) == 24
        assert estimate.candidates[0].key == estimate.key
        scores = [c.score for c in estimate.candidates]
        assert scores == sorted(scores, reverse=True)

    def test_empty(self):
        estimate = infer_key([])
        assert estimate.key is None
        assert estimate.confidence == 0.0

    def test_unparseable_ignored(self):
        assert infer_key(["xyz", "G", "D", "Em", "C"]).key.name == "G major"

    def test_deterministic(self):
        chords = ["D", "A", "Bm", "G"]
        assert infer_key(chords).key == infer_key(chords).key


class TestDegrees:
    """Tests for scale degrees and diatonic membership."""

    def test_scale_degree(self):
        c = Key.parse("C")
        assert scale_degree(0, c) == 1
        assert scale_degree(7, c) == 5
        assert scale_degree(1, c) is None

    @pytest.mark.parametrize("chord,key,expected", [
        ("Dm", "C", True),
        ("D", "C", False),
        ("G7", "C", True),
        ("Gmaj7", "C", False),
        ("Bm7b5", "C", True),
        ("Bdim", "C", True),
        ("E", "Am", True),
        ("E7", "Am", True),
        ("Em", "Am", True),
        ("Gsus4", "C", True),
        ("C#", "C", False),
        ("C7", "C", False),
    ])
    def test_is_diatonic(self, chord, key, expected):
        assert is_diatonic(Chord.parse(chord), Key.parse(key)) == expected

    def test_harmonic_minor_can_be_disabled(self):
        assert not is_diatonic(Chord.parse("E"), Key.parse("Am"), allow_harmonic_minor=False)


# ============================================================================
# Progression Analysis Tests
# ============================================================================

class TestProgressionAnalyzer:
    """Tests for ProgressionAnalyzer."""

    def test_pop_progression(self):
        """Test the canonical I-V-vi-IV analysis."""
        analysis = analyze_progression(["C", "G", "Am", "F"])

        assert analysis.key.name == "C major"
        assert analysis.scale == "major"
        assert analysis.numerals == ["I", "V", "vi", "IV"]
        assert all(n.is_diatonic for n in analysis.roman_numerals)
        assert analysis.confidence == 1.0
        assert analysis.common_name == "Pop Progression"
        assert analysis.progression_type == ProgressionType.POP

    def test_functions(self):
        analysis = analyze_progression(["C", "G", "Am", "F"])
        functions = [n.function for n in analysis.roman_numerals]
        assert functions == [
            HarmonicFunction.TONIC,
            HarmonicFunction.DOMINANT,
            HarmonicFunction.TONIC,
            HarmonicFunction.SUBDOMINANT,
        ]

    def test_jazz_cadence_with_sevenths(self):
        analysis = analyze_progression(["Dm7", "G7", "Cmaj7"], key="C")
        assert analysis.numerals == ["ii7", "V7", "Imaj7"]
        assert analysis.common_name == "Jazz Cadence"

    def test_andalusian_cadence(self):
        """Test minor key inference with a harmonic-minor V."""
        analysis = analyze_progression(["Am", "G", "F", "E"])
        assert analysis.key.name == "A minor"
        assert analysis.scale == "minor"
        assert analysis.numerals == ["i", "VII", "VI", "V"]
        assert analysis.confidence == 1.0
        assert analysis.common_name == "Andalusian Cadence"

    def test_twelve_bar_blues(self):
        chords = ["C", "C", "C", "C", "F", "F", "C", "C", "G", "F", "C", "C"]
        analysis = analyze_progression(chords)
        assert analysis.common_name == "12-Bar Blues"
        assert analysis.progression_type == ProgressionType.BLUES

    def test_chromatic_chord(self):
        analysis = analyze_progression(["C", "Bb", "F", "C"], key="C major")
        flat_seven = analysis.roman_numerals[1]
        assert flat_seven.numeral == "bVII"
        assert not flat_seven.is_diatonic
        assert flat_seven.function == HarmonicFunction.OTHER
        assert analysis.confidence == pytest.approx(0.75)

    def test_diminished_numerals(self):
        analysis = analyze_progression(["Bdim", "Bm7b5", "Gsus4"], key="C")
        assert analysis.numerals == ["vii°", "viiø7", "Vsus"]

    def test_explicit_key_object(self):
        analysis = analyze_progression(["Am", "F", "C", "G"], key=Key.parse("C"))
        assert analysis.key.name == "C major"
        assert analysis.numerals == ["vi", "IV", "I", "V"]
        assert analysis.common_name == "Sensitive Progression"
        assert analysis.key_estimate is None

    def test_invalid_key(self):
        with pytest.raises(InvalidKeyName):
            analyze_progression(["C", "G"], key="nope")

    def test_one_numeral_per_chord(self):
        """Test bad chords still get a placeholder numeral."""
        chords = ["C", "xyz", "G"]
        analysis = analyze_progression(chords)
        assert len(analysis.roman_numerals) == len(chords)
        assert analysis.numerals[1] == "?"
        assert analysis.confidence == pytest.approx(2 / 3)
        kinds = [d.kind for d in analysis.diagnostics]
        assert DiagnosticKind.UNPARSEABLE_CHORD in kinds

    def test_unsupported_quality(self):
        analysis = analyze_progression(["C", "C7b9#11", "G"], key="C")
        numeral = analysis.roman_numerals[1]
        assert not numeral.supported
        assert not numeral.is_diatonic
        unsupported = [d for d in analysis.diagnostics if d.kind == DiagnosticKind.UNSUPPORTED_QUALITY]
        assert len(unsupported) == 1
        assert unsupported[0].offset == 1

    def test_confidence_bounds(self):
        for chords in (["C"], ["C", "F#", "Bb", "Eb"], ["xyz"], ["Am", "E7", "Dm"]):
            analysis = analyze_progression(chords)
            assert 0.0 <= analysis.confidence <= 1.0
            assert analysis.diatonic_count == round(analysis.confidence * len(chords))

    def test_empty(self):
        analysis = analyze_progression([])
        assert analysis.key is None
        assert analysis.roman_numerals == []
        assert analysis.confidence == 0.0
        assert analysis.common_name is None

    def test_no_named_progression(self):
        analysis = analyze_progression(["C", "Em"], key="C")
        assert analysis.common_name is None
        assert analysis.progression_type is None

    def test_pattern_matches(self):
        analysis = analyze_progression(["C", "F", "G", "C", "G", "Am", "F"], key="C")
        names = [m.name for m in analysis.pattern_matches]
        assert "Basic Rock" in names
        assert "Pop Progression" in names
        assert analysis.common_name == "Pop Progression"

    def test_cadences(self):
        analysis = analyze_progression(["C", "F", "C", "G", "C"], key="C")
        assert analysis.cadences == [(2, "plagal"), (3, "half"), (4, "authentic")]

    def test_deceptive_cadence(self):
        analysis = analyze_progression(["C", "G", "Am", "F"])
        assert analysis.cadences == [(1, "half"), (2, "deceptive")]

    def test_variations_included(self):
        analysis = analyze_progression(["C", "G", "Am", "F"])
        assert analysis.variations
        for variation in analysis.variations:
            assert len(variation.chords) == 4

    def test_variations_disabled(self):
        analyzer = ProgressionAnalyzer(AnalyzerConfig(include_variations=False))
        assert analyzer.analyze(["C", "G", "Am", "F"]).variations == []

    def test_type_description(self):
        assert ProgressionType.POP.description == "Modern pop (I-V-vi-IV)"
