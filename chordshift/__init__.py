"""chordshift - Chord chart transposition and progression analysis.

Architecture Layers:
    1. core/       - Notes, keys, chord symbols, errors
    2. parsing/    - Chord tokens from chord charts and chord lists
    3. transpose/  - Transposition, key-to-key moves, capo
    4. inference/  - Key inference, Roman numerals, error detection, reharmonization
"""

__version__ = "0.1.0"

# Core types
from .core import (
    Chord,
    Key,
    Mode,
    ChordShiftError,
    InvalidKeyName,
    UnparseableChord,
    Diagnostic,
    prefers_sharps,
    semitones_between,
    spell,
)

# Parsing layer
from .parsing import tokenize, extract_chords

# Transpose layer
from .transpose import (
    TransposeEngine,
    CapoCalculator,
    transpose,
    transpose_content,
    transpose_to_key,
    preview_transposition,
    calculate_capo,
    suggest_capo,
    explain_capo_transpose,
)

# Inference layer
from .inference import (
    KeyFinder,
    ProgressionAnalyzer,
    ChordChecker,
    Reharmonizer,
    ReharmonizationStyle,
    infer_key,
    analyze_progression,
    detect_errors,
    suggest_corrections,
    reharmonize,
)

__all__ = [
    # Core
    "Chord",
    "Key",
    "Mode",
    "ChordShiftError",
    "InvalidKeyName",
    "UnparseableChord",
    "Diagnostic",
    "prefers_sharps",
    "semitones_between",
    "spell",
    # Parsing
    "tokenize",
    "extract_chords",
    # Transpose
    "TransposeEngine",
    "CapoCalculator",
    "transpose",
    "transpose_content",
    "transpose_to_key",
    "preview_transposition",
    "calculate_capo",
    "suggest_capo",
    "explain_capo_transpose",
    # Inference
    "KeyFinder",
    "ProgressionAnalyzer",
    "ChordChecker",
    "Reharmonizer",
    "ReharmonizationStyle",
    "infer_key",
    "analyze_progression",
    "detect_errors",
    "suggest_corrections",
    "reharmonize",
]
