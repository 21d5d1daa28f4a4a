"""Core types and constants for chordshift."""

from .chord import Chord, QualityFamily, classify_quality
from .constants import (
    PITCH_NAMES,
    SHARP_NAMES,
    FLAT_NAMES,
    DEFAULT_PREVIEW_LIMIT,
)
from .errors import (
    ChordShiftError,
    InvalidKeyName,
    InvalidKeyNameWarning,
    UnparseableChord,
    Diagnostic,
    DiagnosticKind,
)
from .notes import (
    Key,
    Mode,
    NoteSpelling,
    TransposeInterval,
    pitch_class_of,
    prefers_sharps,
    semitones_between,
    spell,
)

__all__ = [
    "Chord",
    "QualityFamily",
    "classify_quality",
    "PITCH_NAMES",
    "SHARP_NAMES",
    "FLAT_NAMES",
    "DEFAULT_PREVIEW_LIMIT",
    "ChordShiftError",
    "InvalidKeyName",
    "InvalidKeyNameWarning",
    "UnparseableChord",
    "Diagnostic",
    "DiagnosticKind",
    "Key",
    "Mode",
    "NoteSpelling",
    "TransposeInterval",
    "pitch_class_of",
    "prefers_sharps",
    "semitones_between",
    "spell",
]
