"""Scale degrees - Where a chord sits in a key and what it should sound like.

Shared by key inference, Roman numeral analysis, error detection and
reharmonization. Degrees are 1-7; a degree of 0 means "no chord".
"""

from enum import Enum
from typing import Dict, Optional, Tuple

from ..core import Chord, Key, QualityFamily, spell

ROMAN = ["I", "II", "III", "IV", "V", "VI", "VII"]

# Semitones above the tonic -> scale degree
DIATONIC_DEGREES = {
    "major": {0: 1, 2: 2, 4: 3, 5: 4, 7: 5, 9: 6, 11: 7},
    "minor": {0: 1, 2: 2, 3: 3, 5: 4, 7: 5, 8: 6, 10: 7},
}

# Chromatic roots -> (nearest degree, accidental)
CHROMATIC_DEGREES: Dict[str, Dict[int, Tuple[int, str]]] = {
    "major": {1: (2, "b"), 3: (3, "b"), 6: (5, "b"), 8: (6, "b"), 10: (7, "b")},
    "minor": {1: (2, "b"), 4: (3, "#"), 6: (4, "#"), 9: (6, "#"), 11: (7, "#")},
}

# Triad quality per degree
DIATONIC_TRIADS = {
    "major": [
        QualityFamily.MAJOR, QualityFamily.MINOR, QualityFamily.MINOR, QualityFamily.MAJOR,
        QualityFamily.MAJOR, QualityFamily.MINOR, QualityFamily.DIMINISHED,
    ],
    "minor": [
        QualityFamily.MINOR, QualityFamily.DIMINISHED, QualityFamily.MAJOR, QualityFamily.MINOR,
        QualityFamily.MINOR, QualityFamily.MAJOR, QualityFamily.MAJOR,
    ],
}

# Seventh chord quality per degree
DIATONIC_SEVENTHS = {
    "major": [
        QualityFamily.MAJOR7, QualityFamily.MINOR7, QualityFamily.MINOR7, QualityFamily.MAJOR7,
        QualityFamily.DOMINANT7, QualityFamily.MINOR7, QualityFamily.HALF_DIMINISHED,
    ],
    "minor": [
        QualityFamily.MINOR7, QualityFamily.HALF_DIMINISHED, QualityFamily.MAJOR7, QualityFamily.MINOR7,
        QualityFamily.MINOR7, QualityFamily.MAJOR7, QualityFamily.DOMINANT7,
    ],
}

# Harmonic minor V / V7
HARMONIC_MINOR_DOMINANTS = {QualityFamily.MAJOR, QualityFamily.DOMINANT7}

# Suffix used when building a chord of a family
FAMILY_SUFFIX = {
    QualityFamily.MAJOR: "",
    QualityFamily.MINOR: "m",
    QualityFamily.DIMINISHED: "dim",
    QualityFamily.AUGMENTED: "aug",
    QualityFamily.DOMINANT7: "7",
    QualityFamily.MAJOR7: "maj7",
    QualityFamily.MINOR7: "m7",
    QualityFamily.HALF_DIMINISHED: "m7b5",
    QualityFamily.DIMINISHED7: "dim7",
}

_TRIAD_OF = {
    QualityFamily.MAJOR: QualityFamily.MAJOR,
    QualityFamily.DOMINANT7: QualityFamily.MAJOR,
    QualityFamily.MAJOR7: QualityFamily.MAJOR,
    QualityFamily.MINOR: QualityFamily.MINOR,
    QualityFamily.MINOR7: QualityFamily.MINOR,
    QualityFamily.DIMINISHED: QualityFamily.DIMINISHED,
    QualityFamily.DIMINISHED7: QualityFamily.DIMINISHED,
    QualityFamily.HALF_DIMINISHED: QualityFamily.DIMINISHED,
    QualityFamily.AUGMENTED: QualityFamily.AUGMENTED,
}

_SEVENTHS = {
    QualityFamily.DOMINANT7,
    QualityFamily.MAJOR7,
    QualityFamily.MINOR7,
    QualityFamily.HALF_DIMINISHED,
    QualityFamily.DIMINISHED7,
}


class HarmonicFunction(Enum):
    """Harmonic role of a chord in its key."""

    TONIC = "tonic"
    SUBDOMINANT = "subdominant"
    DOMINANT = "dominant"
    OTHER = "other"


_FUNCTION_OF_DEGREE = {
    1: HarmonicFunction.TONIC,
    3: HarmonicFunction.TONIC,
    6: HarmonicFunction.TONIC,
    2: HarmonicFunction.SUBDOMINANT,
    4: HarmonicFunction.SUBDOMINANT,
    5: HarmonicFunction.DOMINANT,
    7: HarmonicFunction.DOMINANT,
}


def triad_family(family: QualityFamily) -> Optional[QualityFamily]:
    """Underlying triad of a family, or None for sus/power/unmodelled chords."""
    return _TRIAD_OF.get(family)


def is_seventh(family: QualityFamily) -> bool:
    return family in _SEVENTHS


def interval_from_tonic(pitch_class: int, key: Key) -> int:
    return (pitch_class - key.pitch_class) % 12


def scale_degree(pitch_class: int, key: Key) -> Optional[int]:
    """Diatonic degree (1-7) of a pitch class, None if it is chromatic."""
    return DIATONIC_DEGREES[key.mode.value].get(interval_from_tonic(pitch_class, key))


def nearest_degree(pitch_class: int, key: Key) -> Tuple[int, str]:
    """Scale degree and accidental ("", "b" or "#") for any pitch class."""
    interval = interval_from_tonic(pitch_class, key)
    degree = DIATONIC_DEGREES[key.mode.value].get(interval)
    if degree is not None:
        return degree, ""
    return CHROMATIC_DEGREES[key.mode.value][interval]


def expected_triad(degree: int, key: Key) -> QualityFamily:
    return DIATONIC_TRIADS[key.mode.value][degree - 1]


def expected_seventh(degree: int, key: Key) -> QualityFamily:
    return DIATONIC_SEVENTHS[key.mode.value][degree - 1]


def degree_function(degree: Optional[int]) -> HarmonicFunction:
    if degree is None:
        return HarmonicFunction.OTHER
    return _FUNCTION_OF_DEGREE.get(degree, HarmonicFunction.OTHER)


def is_diatonic(chord: Chord, key: Key, allow_harmonic_minor: bool = True) -> bool:
    """
    Whether a chord belongs to a key.

    The root must be on a scale degree and the quality must match that
    degree: triads against the degree's triad, seventh chords against the
    degree's seventh. Suspended, power and unmodelled chords are judged on
    the root alone. In minor keys a major V or V7 counts as diatonic
    (harmonic minor) when ``allow_harmonic_minor`` is set.
    """
    degree = scale_degree(chord.root_pitch_class, key)
    if degree is None:
        return False

    family = chord.family
    triad = triad_family(family)
    if triad is None:
        return True

    if allow_harmonic_minor and key.is_minor and degree == 5 and family in HARMONIC_MINOR_DOMINANTS:
        return True

    if is_seventh(family):
        return family == expected_seventh(degree, key)
    return triad == expected_triad(degree, key)


def diatonic_chord(degree: int, key: Key, seventh: bool = False) -> Chord:
    """The chord built on a scale degree, spelled for the key."""
    pc = key.scale_pitch_classes[degree - 1]
    family = expected_seventh(degree, key) if seventh else expected_triad(degree, key)
    return Chord(root=key.spell(pc), quality=FAMILY_SUFFIX[family])


def chord_of_family(pitch_class: int, family: QualityFamily, prefer_sharps: bool = True) -> Chord:
    """Chord with a given root and the plain suffix of ``family``."""
    return Chord(root=spell(pitch_class, prefer_sharps), quality=FAMILY_SUFFIX.get(family, ""))
