"""Progression analysis - Roman numerals, named progressions and cadences.

Implements chord progression analysis with:
- Key inference (or a caller-supplied key)
- One Roman numeral per input chord, chromatic chords included
- Named progression recognition (Pop, Jazz Cadence, 12-Bar Blues, ...)
- Cadence detection
- Reharmonized variations

Analysis never fails on bad chords: unparseable or unmodelled chords are
reported as diagnostics and still get a (placeholder) numeral.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Sequence, Tuple, Union

from ..core import Chord, Diagnostic, DiagnosticKind, Key, QualityFamily
from ..parsing import tokenize
from .degrees import (
    ROMAN,
    HarmonicFunction,
    degree_function,
    expected_triad,
    is_diatonic,
    nearest_degree,
    triad_family,
)
from .key import KeyEstimate, KeyFinder
from .reharmonize import ProgressionVariation, ReharmonizationStyle, Reharmonizer, ReharmonizerConfig


class NumeralQuality(Enum):
    MAJOR = "major"
    MINOR = "minor"
    DIMINISHED = "diminished"
    AUGMENTED = "augmented"


_NUMERAL_QUALITY = {
    QualityFamily.MAJOR: NumeralQuality.MAJOR,
    QualityFamily.MINOR: NumeralQuality.MINOR,
    QualityFamily.DIMINISHED: NumeralQuality.DIMINISHED,
    QualityFamily.AUGMENTED: NumeralQuality.AUGMENTED,
}

# Numeral suffix per chord family
_EXTENSIONS = {
    QualityFamily.DOMINANT7: "7",
    QualityFamily.MAJOR7: "maj7",
    QualityFamily.MINOR7: "7",
    QualityFamily.HALF_DIMINISHED: "ø7",
    QualityFamily.DIMINISHED7: "°7",
    QualityFamily.SUSPENDED: "sus",
    QualityFamily.POWER: "5",
}


@dataclass(frozen=True)
class RomanNumeral:
    """A chord's scale degree, quality and function in a key."""

    chord: str
    degree: int  # 1-7, 0 when the chord could not be read
    quality: Optional[NumeralQuality] = None
    function: HarmonicFunction = HarmonicFunction.OTHER
    is_diatonic: bool = False
    accidental: str = ""  # "", "b" or "#"
    extension: str = ""  # "7", "maj7", "ø7", ...
    supported: bool = True  # False for unmodelled chord qualities

    @property
    def base(self) -> str:
        """Numeral without quality marks or extensions, e.g. 'bVII', 'vi'."""
        if self.degree == 0:
            return "?"
        roman = ROMAN[self.degree - 1]
        if self.quality in (NumeralQuality.MINOR, NumeralQuality.DIMINISHED):
            roman = roman.lower()
        return self.accidental + roman

    @property
    def numeral(self) -> str:
        """Full numeral, e.g. 'I', 'V7', 'vii°', 'bVII', 'iiø7'."""
        if self.degree == 0:
            return "?"
        mark = ""
        if self.quality == NumeralQuality.DIMINISHED and self.extension not in ("ø7", "°7"):
            mark = "°"
        elif self.quality == NumeralQuality.AUGMENTED:
            mark = "+"
        return self.base + mark + self.extension

    def __str__(self) -> str:
        return self.numeral


class ProgressionType(Enum):
    """Named progressions recognised by the analyzer."""

    POP = "I-V-vi-IV"
    JAZZ_CADENCE = "ii-V-I"
    FIFTIES = "I-vi-IV-V"
    SENSITIVE = "vi-IV-I-V"
    BASIC_ROCK = "I-IV-V"
    GOSPEL = "I-IV-I-V"
    RHYTHM_CHANGES = "I-vi-ii-V"
    BLUES = "12-Bar Blues"
    ANDALUSIAN = "i-VII-VI-V"
    MINOR_POP = "i-VI-III-VII"
    MINOR_ROCK = "i-iv-VII-VI"
    POP_PUNK = "I-IV-vi-V"

    @property
    def description(self) -> str:
        return _TYPE_DESCRIPTIONS[self]


_TYPE_DESCRIPTIONS = {
    ProgressionType.POP: "Modern pop (I-V-vi-IV)",
    ProgressionType.JAZZ_CADENCE: "Classic jazz progression (ii-V-I)",
    ProgressionType.FIFTIES: "50s progression (I-vi-IV-V)",
    ProgressionType.SENSITIVE: "Sensitive progression (vi-IV-I-V)",
    ProgressionType.BASIC_ROCK: "Traditional pop/rock (I-IV-V)",
    ProgressionType.GOSPEL: "Gospel/soul progression",
    ProgressionType.RHYTHM_CHANGES: "Jazz turnaround (I-vi-ii-V)",
    ProgressionType.BLUES: "Standard 12-bar blues",
    ProgressionType.ANDALUSIAN: "Flamenco/Spanish cadence",
    ProgressionType.MINOR_POP: "Minor-key pop progression",
    ProgressionType.MINOR_ROCK: "Minor-key rock progression",
    ProgressionType.POP_PUNK: "Pop-punk variant (I-IV-vi-V)",
}


@dataclass(frozen=True)
class ProgressionPattern:
    """A named numeral sequence."""

    name: str
    progression_type: ProgressionType
    numerals: Tuple[str, ...]


# Order matters: equal-length matches resolve to the earlier entry
PROGRESSION_PATTERNS = [
    ProgressionPattern("Pop Progression", ProgressionType.POP, ("I", "V", "vi", "IV")),
    ProgressionPattern("Jazz Cadence", ProgressionType.JAZZ_CADENCE, ("ii", "V", "I")),
    ProgressionPattern("50s Progression", ProgressionType.FIFTIES, ("I", "vi", "IV", "V")),
    ProgressionPattern("Sensitive Progression", ProgressionType.SENSITIVE, ("vi", "IV", "I", "V")),
    ProgressionPattern("Basic Rock", ProgressionType.BASIC_ROCK, ("I", "IV", "V")),
    ProgressionPattern("Gospel Progression", ProgressionType.GOSPEL, ("I", "IV", "I", "V")),
    ProgressionPattern("Rhythm Changes", ProgressionType.RHYTHM_CHANGES, ("I", "vi", "ii", "V")),
    ProgressionPattern(
        "12-Bar Blues", ProgressionType.BLUES,
        ("I", "I", "I", "I", "IV", "IV", "I", "I", "V", "IV", "I", "I"),
    ),
    ProgressionPattern("Andalusian Cadence", ProgressionType.ANDALUSIAN, ("i", "VII", "VI", "V")),
    ProgressionPattern("Minor Pop", ProgressionType.MINOR_POP, ("i", "VI", "III", "VII")),
    ProgressionPattern("Minor Rock", ProgressionType.MINOR_ROCK, ("i", "iv", "VII", "VI")),
    ProgressionPattern("I-IV-vi-V", ProgressionType.POP_PUNK, ("I", "IV", "vi", "V")),
]


@dataclass(frozen=True)
class PatternMatch:
    """A named progression found at ``chords[start:end]``."""

    name: str
    progression_type: ProgressionType
    start: int
    end: int

    def __len__(self) -> int:
        return self.end - self.start


@dataclass(frozen=True)
class AnalyzerConfig:
    """Configuration for progression analysis.

    Attributes:
        include_variations: Generate reharmonized variations (default: True)
        variation_style: Style used for variations (default: balanced)
        allow_harmonic_minor: Count a major V/V7 as diatonic in minor keys (default: True)
        reharmonizer: Settings passed to the reharmonizer
    """

    include_variations: bool = True
    variation_style: ReharmonizationStyle = ReharmonizationStyle.BALANCED
    allow_harmonic_minor: bool = True
    reharmonizer: ReharmonizerConfig = field(default_factory=ReharmonizerConfig)


@dataclass(frozen=True)
class ProgressionAnalysis:
    """Container for progression analysis results."""

    chords: List[str]
    key: Optional[Key] = None
    roman_numerals: List[RomanNumeral] = field(default_factory=list)
    progression_type: Optional[ProgressionType] = None
    common_name: Optional[str] = None
    confidence: float = 0.0  # Fraction of chords that are diatonic
    variations: List[ProgressionVariation] = field(default_factory=list)
    pattern_matches: List[PatternMatch] = field(default_factory=list)
    cadences: List[Tuple[int, str]] = field(default_factory=list)  # (chord index, cadence type)
    diagnostics: List[Diagnostic] = field(default_factory=list)
    key_estimate: Optional[KeyEstimate] = None

    @property
    def scale(self) -> Optional[str]:
        """'major' or 'minor'."""
        return self.key.mode.value if self.key else None

    @property
    def numerals(self) -> List[str]:
        return [n.numeral for n in self.roman_numerals]

    @property
    def diatonic_count(self) -> int:
        return sum(1 for n in self.roman_numerals if n.is_diatonic)


class ProgressionAnalyzer:
    """Analyze chord progressions relative to a key.

    Stateless; the same input always produces the same analysis.
    """

    def __init__(self, config: Optional[AnalyzerConfig] = None):
        self.config = config or AnalyzerConfig()
        self.key_finder = KeyFinder(allow_harmonic_minor=self.config.allow_harmonic_minor)
        self.reharmonizer = Reharmonizer(self.config.reharmonizer)

    def analyze(self, chords: Sequence[str], key: Optional[Union[str, Key]] = None) -> ProgressionAnalysis:
        """
        Analyze a progression.

        Args:
            chords: Chord names in order
            key: Key name or Key to analyze in; inferred if omitted

        Returns:
            ProgressionAnalysis with exactly one RomanNumeral per chord

        Raises:
            InvalidKeyName: if ``key`` is a name that cannot be parsed
        """
        chords = list(chords)
        result = tokenize(chords)
        parsed = {token.start: token.chord for token in result.tokens}
        diagnostics = list(result.diagnostics)

        estimate = None
        if key is None:
            estimate = self.key_finder.find(result.chords)
            key = estimate.key
        elif isinstance(key, str):
            key = Key.parse(key)

        numerals = []
        for index, text in enumerate(chords):
            chord = parsed.get(index)
            if chord is not None and not chord.is_supported:
                diagnostics.append(Diagnostic(
                    kind=DiagnosticKind.UNSUPPORTED_QUALITY,
                    text=text,
                    offset=index,
                    message=f"Chord quality {chord.quality!r} is not analysed",
                ))
            numerals.append(self.roman_numeral(text, chord, key))

        matches = self.find_patterns(numerals)
        best = self._best_match(matches)

        variations = []
        if self.config.include_variations and chords:
            variations = self.reharmonizer.reharmonize(chords, self.config.variation_style, key)

        diatonic = sum(1 for n in numerals if n.is_diatonic)
        return ProgressionAnalysis(
            chords=chords,
            key=key,
            roman_numerals=numerals,
            progression_type=best.progression_type if best else None,
            common_name=best.name if best else None,
            confidence=diatonic / len(chords) if chords else 0.0,
            variations=variations,
            pattern_matches=matches,
            cadences=self.identify_cadences(numerals),
            diagnostics=diagnostics,
            key_estimate=estimate,
        )

    def roman_numeral(self, text: str, chord: Optional[Chord], key: Optional[Key]) -> RomanNumeral:
        """
        Numeral for one chord.

        Chromatic roots get the nearest scale degree with a flat or sharp
        (bVII, #IV) and are never diatonic.
        """
        if chord is None or key is None:
            return RomanNumeral(chord=text, degree=0, supported=chord is not None and chord.is_supported)

        degree, accidental = nearest_degree(chord.root_pitch_class, key)
        family = chord.family
        triad = triad_family(family)
        if triad is None:
            # sus, power and unmodelled chords take the degree's own quality
            triad = expected_triad(degree, key) if not accidental else QualityFamily.MAJOR

        diatonic = chord.is_supported and is_diatonic(chord, key, self.config.allow_harmonic_minor)
        return RomanNumeral(
            chord=text,
            degree=degree,
            quality=_NUMERAL_QUALITY[triad],
            function=degree_function(degree) if diatonic else HarmonicFunction.OTHER,
            is_diatonic=diatonic,
            accidental=accidental,
            extension=_EXTENSIONS.get(family, ""),
            supported=chord.is_supported,
        )

    def find_patterns(self, numerals: List[RomanNumeral]) -> List[PatternMatch]:
        """
        Every named progression appearing as a contiguous run of numerals.

        Numerals are compared without extensions (V7 matches V). Runs that
        include an unreadable or unmodelled chord never match.
        """
        bases = [n.base if n.supported and n.degree else None for n in numerals]
        matches = []
        for pattern in PROGRESSION_PATTERNS:
            size = len(pattern.numerals)
            for start in range(len(bases) - size + 1):
                if tuple(bases[start:start + size]) == pattern.numerals:
                    matches.append(PatternMatch(pattern.name, pattern.progression_type, start, start + size))
        matches.sort(key=lambda m: m.start)
        return matches

    def _best_match(self, matches: List[PatternMatch]) -> Optional[PatternMatch]:
        if not matches:
            return None
        order = {p.name: i for i, p in enumerate(PROGRESSION_PATTERNS)}
        return min(matches, key=lambda m: (-len(m), order[m.name], m.start))

    def identify_cadences(self, numerals: List[RomanNumeral]) -> List[Tuple[int, str]]:
        """
        Cadences between neighbouring chords.

        Returns:
            List of (chord_index, cadence_type) tuples, where cadence_type is
            "authentic" (V-I), "plagal" (IV-I), "deceptive" (V-vi) or "half" (?-V)
        """
        cadences = []
        for i in range(1, len(numerals)):
            prev = numerals[i - 1].base.upper()
            curr = numerals[i].base.upper()
            if prev == "?" or curr == "?":
                continue
            if prev == "V" and curr == "I":
                cadences.append((i, "authentic"))
            elif prev == "IV" and curr == "I":
                cadences.append((i, "plagal"))
            elif prev == "V" and curr == "VI":
                cadences.append((i, "deceptive"))
            elif curr == "V":
                cadences.append((i, "half"))
        return cadences


def analyze_progression(
    chords: Sequence[str],
    key: Optional[Union[str, Key]] = None,
    config: Optional[AnalyzerConfig] = None,
) -> ProgressionAnalysis:
    """Analyze a chord progression; see ProgressionAnalyzer.analyze."""
    return ProgressionAnalyzer(config).analyze(chords, key)
