"""Capo calculator - Capo positions, capo chord shapes and capo suggestions.

A capo only raises pitch. Positions are frets 0-11 and downward
transpositions never get a capo; that is a playing convention, not an
acoustic law.
"""

from dataclasses import dataclass, field
from enum import IntEnum
from typing import Dict, List, Optional, Union

import numpy as np

from ..core import Chord, QualityFamily
from ..core.constants import CAPO_MIN, CAPO_MAX, DEFAULT_MAX_CAPO_FRET
from ..parsing import ChordSource, extract_chords
from .engine import transpose, transpose_content


def calculate_capo(semitones: int) -> int:
    """
    Capo fret that reproduces an upward transposition with the same shapes.

    Args:
        semitones: Signed transposition

    Returns:
        ``semitones % 12`` for positive shifts, 0 otherwise
    """
    if semitones <= 0:
        return 0
    return semitones % 12


def capo_chord(chord: str, capo_fret: int, prefer_sharps: bool = True) -> str:
    """Shape to finger for ``chord`` with a capo on ``capo_fret``.

    Frets outside 1-11 mean no capo and return the chord as written.
    """
    if not CAPO_MIN < capo_fret <= CAPO_MAX:
        return chord
    return transpose(chord, -capo_fret, prefer_sharps)


def capo_content(content: str, capo_fret: int, prefer_sharps: bool = True) -> str:
    """Rewrite a chord chart into the shapes played behind a capo."""
    if not CAPO_MIN < capo_fret <= CAPO_MAX:
        return content
    return transpose_content(content, -capo_fret, prefer_sharps)


class ChordDifficulty(IntEnum):
    """How hard a chord shape is to finger on guitar."""

    VERY_EASY = 1  # Open, no barre
    EASY = 2
    MODERATE = 3  # Partial barre
    HARD = 4  # Full barre
    VERY_HARD = 5  # Extended or diminished voicings

    @property
    def label(self) -> str:
        return self.name.replace("_", " ").title()


# Open-position shapes, keyed by root plus "m" for minor chords
OPEN_SHAPES: Dict[str, ChordDifficulty] = {
    "C": ChordDifficulty.VERY_EASY,
    "G": ChordDifficulty.VERY_EASY,
    "Am": ChordDifficulty.VERY_EASY,
    "Em": ChordDifficulty.VERY_EASY,
    "D": ChordDifficulty.EASY,
    "A": ChordDifficulty.EASY,
    "E": ChordDifficulty.EASY,
    "Dm": ChordDifficulty.EASY,
}

BARRE_SHAPES = {"F", "Fm", "Bm", "B", "Bb", "Gm", "Cm"}

_SEVENTH_FAMILIES = {QualityFamily.DOMINANT7, QualityFamily.MAJOR7, QualityFamily.MINOR7}

_HARD_FAMILIES = {
    QualityFamily.DIMINISHED,
    QualityFamily.DIMINISHED7,
    QualityFamily.HALF_DIMINISHED,
}


def chord_difficulty(chord: Union[str, Chord]) -> ChordDifficulty:
    """Rate a chord shape from 1 (open) to 5 (extended voicings)."""
    if isinstance(chord, str):
        parsed = Chord.try_parse(chord)
        if parsed is None:
            return ChordDifficulty.MODERATE
        chord = parsed

    if chord.family in _HARD_FAMILIES or any(ext in chord.quality for ext in ("9", "11", "13")):
        return ChordDifficulty.VERY_HARD

    shape = chord.root.name + ("m" if chord.is_minor else "")
    if shape in OPEN_SHAPES:
        level = OPEN_SHAPES[shape]
        if level == ChordDifficulty.VERY_EASY and chord.family in _SEVENTH_FAMILIES:
            return ChordDifficulty.EASY
        return level

    if shape in BARRE_SHAPES:
        return ChordDifficulty.HARD
    if len(chord.root.name) > 1:
        return ChordDifficulty.HARD

    return ChordDifficulty.MODERATE


def average_difficulty(chords: List[str]) -> float:
    """Mean difficulty of a chord list, 0.0 when empty."""
    if not chords:
        return 0.0
    return float(np.mean([int(chord_difficulty(c)) for c in chords]))


@dataclass(frozen=True)
class CapoConfig:
    """Configuration for capo suggestions.

    Attributes:
        max_fret: Highest fret to try (default: 7)
        min_improvement: Average difficulty drop needed to suggest a fret (default: 0.3)
        prefer_sharps: Spelling of the capo shapes (default: True)
        sample_size: Capo shapes kept per suggestion for display (default: 4)
    """

    max_fret: int = DEFAULT_MAX_CAPO_FRET
    min_improvement: float = 0.3
    prefer_sharps: bool = True
    sample_size: int = 4


@dataclass(frozen=True)
class CapoSuggestion:
    """A capo fret that makes a song easier to play."""

    fret: int
    difficulty: float  # Average difficulty of the capo shapes
    improvement: float  # Drop in average difficulty
    sample_chords: List[str] = field(default_factory=list)
    reason: str = ""

    @property
    def difficulty_description(self) -> str:
        if self.difficulty < 2.0:
            return "Very Easy"
        if self.difficulty < 2.5:
            return "Easy"
        if self.difficulty < 3.5:
            return "Moderate"
        if self.difficulty < 4.5:
            return "Hard"
        return "Very Hard"

    @property
    def improvement_description(self) -> str:
        return f"{int(self.improvement / 5.0 * 100)}% easier"


@dataclass(frozen=True)
class CapoPattern:
    """A well-known capo position for a key."""

    capo: int
    plays: str
    reason: str


@dataclass(frozen=True)
class CapoExplanation:
    """What a transpose plus capo combination does, step by step."""

    original_key: str
    transposed_key: str
    capo_chords: str  # Key of the shapes being fingered
    sounding_key: str
    explanation: str


COMMON_CAPO_POSITIONS: Dict[str, List[CapoPattern]] = {
    "C": [
        CapoPattern(0, "C", "Natural open position"),
        CapoPattern(5, "G", "Play easier G shapes"),
    ],
    "G": [
        CapoPattern(0, "G", "Natural open position"),
        CapoPattern(2, "F", "Simpler F-based chords"),
        CapoPattern(7, "C", "Play easy C shapes"),
    ],
    "D": [
        CapoPattern(0, "D", "Natural open position"),
        CapoPattern(2, "C", "Play easy C shapes"),
        CapoPattern(5, "A", "Play easy A shapes"),
    ],
    "A": [
        CapoPattern(0, "A", "Natural open position"),
        CapoPattern(2, "G", "Play easy G shapes"),
        CapoPattern(5, "E", "Play easy E shapes"),
    ],
    "E": [
        CapoPattern(0, "E", "Natural open position"),
        CapoPattern(2, "D", "Play easy D shapes"),
        CapoPattern(4, "C", "Play easy C shapes"),
    ],
    "Bb": [
        CapoPattern(1, "A", "Avoid barre chords"),
        CapoPattern(3, "G", "Play easy G shapes"),
    ],
    "F": [
        CapoPattern(1, "E", "Avoid F barre chord"),
        CapoPattern(3, "D", "Play easy D shapes"),
        CapoPattern(5, "C", "Play easy C shapes"),
    ],
}


def common_capo_positions(key: str) -> List[CapoPattern]:
    """Well-known capo positions for a key, empty if none are listed."""
    return list(COMMON_CAPO_POSITIONS.get(key, []))


def sounding_key(key: Optional[str], capo_fret: int, prefer_sharps: bool = True) -> Optional[str]:
    """Key that sounds when shapes in ``key`` are played behind a capo."""
    if key is None or capo_fret <= 0:
        return key
    return transpose(key, capo_fret, prefer_sharps)


def written_key(key: Optional[str], capo_fret: int, prefer_sharps: bool = True) -> Optional[str]:
    """Key of the shapes to play so that ``key`` sounds with a capo."""
    if key is None or capo_fret <= 0:
        return key
    return transpose(key, -capo_fret, prefer_sharps)


def _reason(improvement: float) -> str:
    if improvement > 1.5:
        return "Much easier chords - highly recommended"
    if improvement > 1.0:
        return "Significantly easier chords"
    if improvement > 0.5:
        return "Moderately easier chords"
    return "Slightly easier chords"


class CapoCalculator:
    """Suggest capo positions and explain capo/transpose combinations."""

    def __init__(self, config: Optional[CapoConfig] = None):
        self.config = config or CapoConfig()

    def suggest(self, source: ChordSource) -> List[CapoSuggestion]:
        """
        Capo frets that make the chords easier, best first.

        Args:
            source: Chord chart text or list of chord names

        Returns:
            CapoSuggestion list sorted by improvement (ties: lower fret first)
        """
        chords = extract_chords(source)
        if not chords:
            return []

        original = average_difficulty(chords)
        suggestions = []

        for fret in range(1, min(self.config.max_fret, CAPO_MAX) + 1):
            shapes = [capo_chord(c, fret, self.config.prefer_sharps) for c in chords]
            difficulty = average_difficulty(shapes)
            improvement = original - difficulty

            if improvement > self.config.min_improvement:
                suggestions.append(CapoSuggestion(
                    fret=fret,
                    difficulty=difficulty,
                    improvement=improvement,
                    sample_chords=shapes[:self.config.sample_size],
                    reason=_reason(improvement),
                ))

        return sorted(suggestions, key=lambda s: -s.improvement)

    def explain(
        self,
        original_key: Optional[str],
        semitones: int,
        capo_fret: int,
    ) -> CapoExplanation:
        """
        Walk through a transposition followed by a capo.

        Args:
            original_key: Song key before transposing, or None if unknown
            semitones: Transposition applied to the song
            capo_fret: Capo position (0 = no capo)
        """
        if original_key is None:
            return CapoExplanation(
                original_key="Unknown",
                transposed_key="Unknown",
                capo_chords="Unknown",
                sounding_key="Unknown",
                explanation="Key information not available",
            )

        sharps = self.config.prefer_sharps
        transposed = transpose(original_key, semitones, sharps)
        shapes = written_key(transposed, capo_fret, sharps)
        sounding = sounding_key(shapes, capo_fret, sharps)

        if semitones % 12 and capo_fret > 0:
            explanation = (
                f"Song transposed from {original_key} to {transposed}. "
                f"With capo on fret {capo_fret}, you play {shapes} shapes. "
                f"It sounds in {sounding}."
            )
        elif semitones % 12:
            explanation = (
                f"Song transposed from {original_key} to {transposed}. "
                f"No capo, so you play {transposed} chords."
            )
        elif capo_fret > 0:
            explanation = (
                f"Song in {original_key}. "
                f"With capo on fret {capo_fret}, you play {shapes} shapes. "
                f"It sounds in {sounding}."
            )
        else:
            explanation = f"Song in {original_key} with no capo or transposition."

        return CapoExplanation(
            original_key=original_key,
            transposed_key=transposed,
            capo_chords=shapes,
            sounding_key=sounding,
            explanation=explanation,
        )


def suggest_capo(
    source: ChordSource,
    max_fret: int = DEFAULT_MAX_CAPO_FRET,
    min_improvement: float = 0.3,
    prefer_sharps: bool = True,
) -> List[CapoSuggestion]:
    """Capo frets that make ``source`` easier to play, best first."""
    config = CapoConfig(
        max_fret=max_fret,
        min_improvement=min_improvement,
        prefer_sharps=prefer_sharps,
    )
    return CapoCalculator(config).suggest(source)


def explain_capo_transpose(
    original_key: Optional[str],
    semitones: int,
    capo_fret: int,
) -> CapoExplanation:
    """Describe a transpose plus capo combination."""
    return CapoCalculator().explain(original_key, semitones, capo_fret)
